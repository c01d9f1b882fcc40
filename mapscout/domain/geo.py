"""Geographic value objects shared across adapters, use-cases, and view models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

EARTH_RADIUS_M = 6_371_008.8
DEFAULT_SPAN_M = 1000.0


@dataclass(frozen=True)
class Coordinate:
    """Latitude/longitude pair in decimal degrees (WGS84)."""

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        for name, value, limit in (
            ("latitude", self.latitude, 90.0),
            ("longitude", self.longitude, 180.0),
        ):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise TypeError(f"Coordinate {name} must be a number.")
            if math.isnan(value) or abs(value) > limit:
                raise ValueError(f"Coordinate {name} out of range: {value}")

    @classmethod
    def from_lonlat(cls, pair: Sequence[float]) -> "Coordinate":
        """Build from a GeoJSON-ordered ``[lon, lat]`` pair."""
        if len(pair) < 2:
            raise ValueError("GeoJSON position requires two values.")
        return cls(latitude=float(pair[1]), longitude=float(pair[0]))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def distance_to(self, other: "Coordinate") -> float:
        """Great-circle distance in meters (haversine)."""
        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        dlat = lat2 - lat1
        dlon = math.radians(other.longitude - self.longitude)
        a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
        return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(a)))

    def __str__(self) -> str:
        return f"{self.latitude:.7f},{self.longitude:.7f}"


HOME = Coordinate(latitude=51.4410628, longitude=7.3402022)
ALLIANZ_ARENA = Coordinate(latitude=48.2187901, longitude=11.6236227)

HOME_LABEL = "My Home"
ALLIANZ_ARENA_LABEL = "Allianz Arena"


@dataclass(frozen=True)
class CameraRegion:
    """Visible map viewport: a center plus a span in meters."""

    center: Coordinate
    latitudinal_meters: float = DEFAULT_SPAN_M
    longitudinal_meters: float = DEFAULT_SPAN_M

    def __post_init__(self) -> None:
        if self.latitudinal_meters <= 0 or self.longitudinal_meters <= 0:
            raise ValueError("CameraRegion span must be positive.")

    @classmethod
    def around(cls, center: Coordinate, span_m: float = DEFAULT_SPAN_M) -> "CameraRegion":
        return cls(center=center, latitudinal_meters=span_m, longitudinal_meters=span_m)

    def zoom_level(self, viewport_px: int = 512) -> int:
        """Approximate web-mercator zoom so the span fits ``viewport_px`` pixels."""
        # Ground resolution at zoom z: 156543.03 * cos(lat) / 2**z meters per pixel.
        span = max(self.latitudinal_meters, self.longitudinal_meters)
        cos_lat = max(math.cos(math.radians(self.center.latitude)), 1e-6)
        meters_per_px = span / max(viewport_px, 1)
        zoom = math.log2(156543.03392 * cos_lat / meters_per_px)
        return max(0, min(19, int(math.floor(zoom))))


@dataclass(frozen=True)
class Placemark:
    """Resolved result of a text-to-location query."""

    name: Optional[str] = None
    coordinate: Optional[Coordinate] = None

    @property
    def display_name(self) -> str:
        return self.name or ""


@dataclass(frozen=True)
class Route:
    """Driving route polyline plus the metrics reported by the routing service."""

    polyline: Tuple[Coordinate, ...]
    distance_m: float = 0.0
    expected_travel_time_s: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        if len(self.polyline) < 2:
            raise ValueError("Route polyline requires at least two points.")

    @property
    def origin(self) -> Coordinate:
        return self.polyline[0]

    @property
    def destination(self) -> Coordinate:
        return self.polyline[-1]

    def bounds(self) -> Tuple[Coordinate, Coordinate]:
        """South-west and north-east corners of the polyline."""
        lats = [point.latitude for point in self.polyline]
        lons = [point.longitude for point in self.polyline]
        return (
            Coordinate(latitude=min(lats), longitude=min(lons)),
            Coordinate(latitude=max(lats), longitude=max(lons)),
        )

    def as_latlngs(self) -> List[List[float]]:
        """Polyline as ``[[lat, lng], ...]`` for map layers."""
        return [[point.latitude, point.longitude] for point in self.polyline]


@dataclass(frozen=True)
class SceneDescriptor:
    """Handle to a street-level panorama near a coordinate."""

    scene_id: str
    coordinate: Coordinate
    preview_url: Optional[str] = None
    is_panorama: bool = True
    provider: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.scene_id, str) or not self.scene_id.strip():
            raise ValueError("SceneDescriptor requires a non-empty scene_id.")


@dataclass(frozen=True)
class LocationUpdate:
    """One live location update; ``coordinate`` is None while no fix is available."""

    coordinate: Optional[Coordinate] = None
    accuracy_m: Optional[float] = None
    source: str = field(default="", compare=False)


__all__ = [
    "ALLIANZ_ARENA",
    "ALLIANZ_ARENA_LABEL",
    "CameraRegion",
    "Coordinate",
    "DEFAULT_SPAN_M",
    "EARTH_RADIUS_M",
    "HOME",
    "HOME_LABEL",
    "LocationUpdate",
    "Placemark",
    "Route",
    "SceneDescriptor",
]
