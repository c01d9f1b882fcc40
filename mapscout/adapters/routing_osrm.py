from __future__ import annotations

import logging
from typing import Any, List, Optional

from mapscout.domain.geo import Coordinate, Route
from mapscout.domain.ports import RoutingPort, TransportType

from .api_errors import ApiClientError, ApiPayloadError, ensure_ok, json_body
from .http_client import HttpConfig, RetryingSession

OSRM_URL = "https://router.project-osrm.org"

# OSRM profile names per transport type.
_PROFILES = {"driving": "driving"}

_log = logging.getLogger(__name__)


class OsrmRoutingAdapter(RoutingPort):
    """Route computation against an OSRM ``/route/v1`` service."""

    def __init__(
        self,
        base_url: str = OSRM_URL,
        *,
        cfg: Optional[HttpConfig] = None,
        alternatives: bool = False,
    ) -> None:
        if not base_url:
            raise ValueError("OsrmRoutingAdapter requires a base URL")
        self.base_url = base_url.rstrip("/")
        self.session = RetryingSession(cfg)
        self.alternatives = alternatives

    def routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        transport: TransportType = "driving",
    ) -> List[Route]:
        profile = _PROFILES.get(transport)
        if profile is None:
            raise ValueError(f"Unsupported transport type: {transport}")

        # OSRM expects lon,lat ordering.
        waypoints = ";".join(
            f"{point.longitude:.7f},{point.latitude:.7f}" for point in (origin, destination)
        )
        url = f"{self.base_url}/route/v1/{profile}/{waypoints}"
        params = {
            "overview": "full",
            "geometries": "geojson",
            "alternatives": "true" if self.alternatives else "false",
        }
        ctx = f"route[{origin} -> {destination}]"
        resp = self.session.get(url, params=params)
        try:
            ensure_ok(resp, ctx)
        except ApiClientError as exc:
            # OSRM reports unroutable input as 400 {"code": "NoRoute"|"NoSegment"}.
            if exc.code in {"NoRoute", "NoSegment"}:
                _log.info("%s: %s", ctx, exc.code)
                return []
            raise
        data = json_body(resp, ctx)
        if not isinstance(data, dict):
            raise ApiPayloadError(f"{ctx}: expected object response", context=ctx, payload=data)

        code = data.get("code")
        if code != "Ok":
            if code in {"NoRoute", "NoSegment"}:
                return []
            raise ApiPayloadError(f"{ctx}: routing failed ({code})", code=str(code), context=ctx, payload=data)

        raw_routes = data.get("routes")
        if not isinstance(raw_routes, list):
            return []
        routes: List[Route] = []
        for entry in raw_routes:
            route = self._parse_route(entry)
            if route is not None:
                routes.append(route)
        return routes

    @staticmethod
    def _parse_route(entry: Any) -> Optional[Route]:
        if not isinstance(entry, dict):
            return None
        geometry = entry.get("geometry")
        if not isinstance(geometry, dict):
            return None
        positions = geometry.get("coordinates")
        if not isinstance(positions, list):
            return None
        try:
            polyline = tuple(Coordinate.from_lonlat(pos) for pos in positions)
        except (TypeError, ValueError):
            return None
        if len(polyline) < 2:
            return None
        legs = entry.get("legs") or []
        name = ""
        if legs and isinstance(legs[0], dict):
            name = str(legs[0].get("summary") or "")
        return Route(
            polyline=polyline,
            distance_m=float(entry.get("distance") or 0.0),
            expected_travel_time_s=float(entry.get("duration") or 0.0),
            name=name,
        )
