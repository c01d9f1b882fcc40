from __future__ import annotations

from dataclasses import dataclass

from mapscout.domain.geo import Coordinate
from mapscout.domain.ports import FailureKind, LocationPort, UseCaseError
from mapscout.usecases.error_mapping import map_api_error


@dataclass
class LocateUser:
    """Use-case returning the first live location update that carries a coordinate.

    Updates without a fix are skipped. A failing stream, or one that ends
    before any fix arrives, yields ``LOCATION_UNKNOWN``.
    """

    location_port: LocationPort

    def __call__(self) -> Coordinate:
        try:
            for update in self.location_port.live_updates():
                if update.coordinate is not None:
                    return update.coordinate
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="LOCATION_UNKNOWN",
                default_message="Current location unavailable.",
                kind=FailureKind.UNKNOWN,
            ) from exc
        raise UseCaseError("LOCATION_UNKNOWN", "Current location unavailable.", kind=FailureKind.UNKNOWN)
