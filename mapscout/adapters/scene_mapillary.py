from __future__ import annotations

import logging
import math
from typing import Any, List, Optional

from mapscout.domain.geo import EARTH_RADIUS_M, Coordinate, SceneDescriptor
from mapscout.domain.ports import ScenePort

from .api_errors import ApiPayloadError, ensure_ok, json_body
from .http_client import HttpConfig, RetryingSession

MAPILLARY_URL = "https://graph.mapillary.com"
_FIELDS = "id,computed_geometry,geometry,thumb_1024_url,is_pano"

_log = logging.getLogger(__name__)


class MapillarySceneAdapter(ScenePort):
    """Street-level panorama lookup via the Mapillary Graph API ``/images`` search."""

    def __init__(
        self,
        access_token: Optional[str],
        base_url: str = MAPILLARY_URL,
        *,
        cfg: Optional[HttpConfig] = None,
        radius_m: float = 50.0,
        panoramas_only: bool = True,
        limit: int = 10,
    ) -> None:
        if not base_url:
            raise ValueError("MapillarySceneAdapter requires a base URL")
        if radius_m <= 0:
            raise ValueError("radius_m must be positive")
        self.access_token = (access_token or "").strip()
        self.base_url = base_url.rstrip("/")
        self.session = RetryingSession(cfg)
        self.radius_m = float(radius_m)
        self.panoramas_only = panoramas_only
        self.limit = max(1, int(limit))

    def find_scene(self, at: Coordinate) -> Optional[SceneDescriptor]:
        if not self.access_token:
            raise ApiPayloadError("Mapillary access token not configured", context="scene")

        ctx = f"scene[{at}]"
        params = {
            "access_token": self.access_token,
            "fields": _FIELDS,
            "bbox": self._bbox(at),
            "limit": self.limit,
        }
        if self.panoramas_only:
            params["is_pano"] = "true"
        resp = self.session.get(f"{self.base_url}/images", params=params)
        ensure_ok(resp, ctx)
        payload = json_body(resp, ctx)
        if not isinstance(payload, dict):
            raise ApiPayloadError(f"{ctx}: expected object response", context=ctx, payload=payload)

        candidates: List[SceneDescriptor] = []
        for entry in payload.get("data") or []:
            scene = self._parse_image(entry)
            if scene is not None:
                candidates.append(scene)
        if not candidates:
            _log.info("%s: no coverage within %.0f m", ctx, self.radius_m)
            return None
        return min(candidates, key=lambda scene: at.distance_to(scene.coordinate))

    def _bbox(self, at: Coordinate) -> str:
        dlat = math.degrees(self.radius_m / EARTH_RADIUS_M)
        cos_lat = max(math.cos(math.radians(at.latitude)), 1e-6)
        dlon = math.degrees(self.radius_m / (EARTH_RADIUS_M * cos_lat))
        return ",".join(
            f"{value:.7f}"
            for value in (
                at.longitude - dlon,
                at.latitude - dlat,
                at.longitude + dlon,
                at.latitude + dlat,
            )
        )

    @staticmethod
    def _parse_image(entry: Any) -> Optional[SceneDescriptor]:
        if not isinstance(entry, dict):
            return None
        image_id = entry.get("id")
        geometry = entry.get("computed_geometry") or entry.get("geometry")
        if not image_id or not isinstance(geometry, dict):
            return None
        try:
            coordinate = Coordinate.from_lonlat(geometry.get("coordinates") or [])
        except (TypeError, ValueError):
            return None
        return SceneDescriptor(
            scene_id=str(image_id),
            coordinate=coordinate,
            preview_url=entry.get("thumb_1024_url") or None,
            is_panorama=bool(entry.get("is_pano", True)),
            provider="mapillary",
        )
