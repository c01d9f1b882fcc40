from __future__ import annotations

from enum import Enum
from typing import Iterator, Literal, Optional, Protocol

from .geo import Coordinate, LocationUpdate, Placemark, Route, SceneDescriptor

TransportType = Literal["driving"]


# ---- Error model ----
class FailureKind(str, Enum):
    """Collapsed failure categories surfaced by the map use cases."""

    NOT_FOUND = "not_found"
    UNROUTABLE = "unroutable"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        kind: Optional[FailureKind] = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.kind = kind


# ---- Ports (Hexagonal boundaries) ----
class GeocodingPort(Protocol):
    """Forward geocoding of free text into candidate placemarks."""

    def geocode(self, query: str) -> list[Placemark]: ...  # best match first


class RoutingPort(Protocol):
    """Route computation between two coordinates."""

    def routes(
        self,
        origin: Coordinate,
        destination: Coordinate,
        transport: TransportType = "driving",
    ) -> list[Route]: ...  # candidates, preferred first


class ScenePort(Protocol):
    """Street-level imagery lookup."""

    def find_scene(self, at: Coordinate) -> Optional[SceneDescriptor]: ...  # None = no coverage


class LocationPort(Protocol):
    """Device location as a live update stream."""

    def live_updates(self) -> Iterator[LocationUpdate]: ...
