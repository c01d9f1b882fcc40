from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from mapscout.domain.geo import Coordinate, Placemark
from mapscout.domain.ports import GeocodingPort

from .api_errors import ApiPayloadError, ensure_ok, json_body
from .http_client import HttpConfig, RetryingSession

NOMINATIM_URL = "https://nominatim.openstreetmap.org"

_log = logging.getLogger(__name__)


class NominatimGeocodingAdapter(GeocodingPort):
    """Forward geocoding against the OpenStreetMap Nominatim ``/search`` endpoint."""

    def __init__(
        self,
        base_url: str = NOMINATIM_URL,
        *,
        cfg: Optional[HttpConfig] = None,
        limit: int = 1,
        language: Optional[str] = None,
    ) -> None:
        if not base_url:
            raise ValueError("NominatimGeocodingAdapter requires a base URL")
        self.base_url = base_url.rstrip("/")
        self.session = RetryingSession(cfg)
        self.limit = max(1, int(limit))
        self.language = language

    def geocode(self, query: str) -> List[Placemark]:
        text = str(query or "").strip()
        if not text:
            return []
        params: Dict[str, Any] = {"q": text, "format": "jsonv2", "limit": self.limit}
        if self.language:
            params["accept-language"] = self.language

        ctx = f"geocode[{text}]"
        resp = self.session.get(f"{self.base_url}/search", params=params)
        ensure_ok(resp, ctx)
        data = json_body(resp, ctx)
        if not isinstance(data, list):
            raise ApiPayloadError(f"{ctx}: expected list response", context=ctx, payload=data)

        placemarks = [pm for pm in (self._parse_result(entry) for entry in data) if pm is not None]
        _log.debug("%s -> %d candidate(s)", ctx, len(placemarks))
        return placemarks

    @staticmethod
    def _parse_result(entry: Any) -> Optional[Placemark]:
        if not isinstance(entry, dict):
            return None
        name = entry.get("name") or entry.get("display_name") or None
        coordinate: Optional[Coordinate] = None
        try:
            coordinate = Coordinate(latitude=float(entry["lat"]), longitude=float(entry["lon"]))
        except (KeyError, TypeError, ValueError):
            # Keep the name; the view-model treats a placemark without location explicitly.
            coordinate = None
        if name is None and coordinate is None:
            return None
        return Placemark(name=str(name) if name is not None else None, coordinate=coordinate)
