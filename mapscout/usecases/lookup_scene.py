from __future__ import annotations

from dataclasses import dataclass

from mapscout.domain.geo import Coordinate, SceneDescriptor
from mapscout.domain.ports import FailureKind, ScenePort, UseCaseError
from mapscout.usecases.error_mapping import map_api_error

_UNAVAILABLE = "Look around is not available here."


@dataclass
class LookupScene:
    """Use-case fetching the look-around scene for a coordinate.

    "No coverage" and transport failures both end up as ``SCENE_UNAVAILABLE``.
    """

    scene_port: ScenePort

    def __call__(self, at: Coordinate) -> SceneDescriptor:
        try:
            scene = self.scene_port.find_scene(at)
        except UseCaseError:
            raise
        except Exception as exc:
            raise map_api_error(
                exc,
                default_code="SCENE_UNAVAILABLE",
                default_message=_UNAVAILABLE,
                kind=FailureKind.UNAVAILABLE,
            ) from exc

        if scene is None:
            raise UseCaseError("SCENE_UNAVAILABLE", _UNAVAILABLE, kind=FailureKind.UNAVAILABLE)
        return scene
