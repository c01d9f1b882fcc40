"""Location adapters implementing ``LocationPort``.

``IpLocationAdapter`` approximates the device position from its public IP
address and re-polls the endpoint to form a live update stream.
``StaticLocationAdapter`` replays a fixed coordinate, which is what the web
runtime uses when no network location is wanted.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Iterator, Optional

from mapscout.domain.geo import Coordinate, LocationUpdate
from mapscout.domain.ports import LocationPort

from .api_errors import ensure_ok, json_body
from .http_client import HttpConfig, RetryingSession

IP_LOCATION_URL = "https://ipapi.co/json/"
# IP geolocation is coarse; a few polls are enough before giving up.
IP_LOCATION_MAX_UPDATES = 3

_log = logging.getLogger(__name__)


class IpLocationAdapter(LocationPort):
    """Poll an IP geolocation endpoint and yield one update per poll."""

    def __init__(
        self,
        url: str = IP_LOCATION_URL,
        *,
        cfg: Optional[HttpConfig] = None,
        poll_interval_s: float = 30.0,
        max_updates: int = IP_LOCATION_MAX_UPDATES,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if not url:
            raise ValueError("IpLocationAdapter requires an endpoint URL")
        if max_updates < 1:
            raise ValueError("max_updates must be at least 1")
        self.url = url
        self.session = RetryingSession(cfg)
        self.poll_interval_s = max(0.0, float(poll_interval_s))
        self.max_updates = max_updates
        self._sleep = sleep

    def live_updates(self) -> Iterator[LocationUpdate]:
        emitted = 0
        while emitted < self.max_updates:
            if emitted:
                self._sleep(self.poll_interval_s)
            yield self.read_once()
            emitted += 1

    def read_once(self) -> LocationUpdate:
        ctx = "ip_location"
        resp = self.session.get(self.url)
        ensure_ok(resp, ctx)
        payload = json_body(resp, ctx)
        coordinate = self._parse_coordinate(payload)
        if coordinate is None:
            _log.debug("%s: response without coordinate", ctx)
        return LocationUpdate(coordinate=coordinate, source="ip")

    @staticmethod
    def _parse_coordinate(payload: Any) -> Optional[Coordinate]:
        if not isinstance(payload, dict):
            return None
        # ipapi.co uses latitude/longitude, ip-api.com uses lat/lon.
        lat = payload.get("latitude", payload.get("lat"))
        lon = payload.get("longitude", payload.get("lon"))
        if lat is None or lon is None:
            return None
        try:
            return Coordinate(latitude=float(lat), longitude=float(lon))
        except (TypeError, ValueError):
            return None


class StaticLocationAdapter(LocationPort):
    """Replay a fixed coordinate as a single live update."""

    def __init__(self, coordinate: Optional[Coordinate], *, accuracy_m: Optional[float] = None) -> None:
        self.coordinate = coordinate
        self.accuracy_m = accuracy_m

    def live_updates(self) -> Iterator[LocationUpdate]:
        yield LocationUpdate(coordinate=self.coordinate, accuracy_m=self.accuracy_m, source="static")


__all__ = ["IP_LOCATION_MAX_UPDATES", "IP_LOCATION_URL", "IpLocationAdapter", "StaticLocationAdapter"]
