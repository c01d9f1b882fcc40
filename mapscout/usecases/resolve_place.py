from __future__ import annotations

from dataclasses import dataclass

from mapscout.domain.geo import Placemark
from mapscout.domain.ports import FailureKind, GeocodingPort, UseCaseError
from mapscout.usecases.error_mapping import map_api_error


@dataclass
class ResolvePlace:
    """Use-case resolving free text into the first matching placemark.

    Any adapter failure is reported as ``PLACE_NOT_FOUND``; the adapter
    exception stays available as ``__cause__`` for logging.
    """

    geocoding_port: GeocodingPort

    def __call__(self, query: str) -> Placemark:
        text = str(query or "").strip()
        if not text:
            raise UseCaseError("PLACE_NOT_FOUND", "Search text is empty.", kind=FailureKind.NOT_FOUND)
        try:
            candidates = self.geocoding_port.geocode(text)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="PLACE_NOT_FOUND",
                default_message=f"No place found for '{text}'.",
                kind=FailureKind.NOT_FOUND,
            ) from exc

        if not candidates:
            raise UseCaseError(
                "PLACE_NOT_FOUND", f"No place found for '{text}'.", kind=FailureKind.NOT_FOUND
            )
        return candidates[0]
