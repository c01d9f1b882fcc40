from __future__ import annotations

from dataclasses import dataclass

from mapscout.domain.geo import Coordinate, Route
from mapscout.domain.ports import FailureKind, RoutingPort, TransportType, UseCaseError
from mapscout.usecases.error_mapping import map_api_error


@dataclass
class ComputeRoute:
    """Use-case computing a route between two coordinates; keeps the first candidate."""

    routing_port: RoutingPort
    transport: TransportType = "driving"

    def __call__(self, origin: Coordinate, destination: Coordinate) -> Route:
        try:
            candidates = self.routing_port.routes(origin, destination, self.transport)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="ROUTE_UNAVAILABLE",
                default_message="No route available.",
                kind=FailureKind.UNROUTABLE,
            ) from exc

        if not candidates:
            raise UseCaseError("ROUTE_UNAVAILABLE", "No route available.", kind=FailureKind.UNROUTABLE)
        return candidates[0]
