"""Domain package exports for value objects and ports."""

from .geo import (
    ALLIANZ_ARENA,
    HOME,
    CameraRegion,
    Coordinate,
    LocationUpdate,
    Placemark,
    Route,
    SceneDescriptor,
)
from .ports import FailureKind, UseCaseError

__all__ = [
    "ALLIANZ_ARENA",
    "HOME",
    "CameraRegion",
    "Coordinate",
    "FailureKind",
    "LocationUpdate",
    "Placemark",
    "Route",
    "SceneDescriptor",
    "UseCaseError",
]
