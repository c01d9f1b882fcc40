"""View-model owning the state of the single map screen.

``MapVM`` is the only writer of the map view state. The presentation layer
reads its attributes and forwards user intents to the coroutine commands
below; each command awaits one blocking use case in a worker thread so that a
search, a route computation and a scene lookup can be in flight at the same
time. Overlapping requests are not cancelled: whichever finishes last wins.

No command raises. Failures are stored in ``last_error`` and logged together
with the adapter cause chained under the ``UseCaseError``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from mapscout.domain.geo import (
    DEFAULT_SPAN_M,
    HOME,
    CameraRegion,
    Coordinate,
    Placemark,
    Route,
    SceneDescriptor,
)
from mapscout.domain.ports import FailureKind, UseCaseError
from mapscout.usecases.compute_route import ComputeRoute
from mapscout.usecases.error_mapping import describe_cause, map_api_error
from mapscout.usecases.locate_user import LocateUser
from mapscout.usecases.lookup_scene import LookupScene
from mapscout.usecases.resolve_place import ResolvePlace

T = TypeVar("T")
RunBlocking = Callable[..., Awaitable[Any]]

_log = logging.getLogger(__name__)


class MapVM:
    """Map screen state plus the search, directions and look-around commands."""

    def __init__(
        self,
        *,
        resolve_place: ResolvePlace,
        compute_route: ComputeRoute,
        lookup_scene: LookupScene,
        locate_user: LocateUser,
        span_m: float = DEFAULT_SPAN_M,
        on_change: Optional[Callable[[], None]] = None,
        run_blocking: Optional[RunBlocking] = None,
    ) -> None:
        self._resolve_place = resolve_place
        self._compute_route = compute_route
        self._lookup_scene = lookup_scene
        self._locate_user = locate_user
        self._span_m = float(span_m)
        self.on_change = on_change
        self._run_blocking: RunBlocking = run_blocking or asyncio.to_thread
        self._startup_task: Optional[asyncio.Task] = None

        self.search_text: str = ""
        self.current_place: Optional[Placemark] = None
        self.camera: CameraRegion = CameraRegion.around(HOME, self._span_m)
        self.route: Optional[Route] = None
        self.look_around_scene: Optional[SceneDescriptor] = None
        self.is_showing_look_around: bool = False
        self.user_location: Optional[Coordinate] = None
        self.last_error: Optional[UseCaseError] = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------
    def start(self) -> asyncio.Task:
        """Schedule the one-time startup flow on the running loop.

        Repeated calls return the same task.
        """
        if self._startup_task is None:
            self._startup_task = asyncio.get_running_loop().create_task(self.set_user_location())
        return self._startup_task

    async def set_user_location(self) -> None:
        """Center the camera on the first live location fix; no retry on failure."""
        location = await self._call(self._locate_user, code="LOCATION_UNKNOWN", kind=FailureKind.UNKNOWN)
        if location is None:
            return
        self.user_location = location
        self.camera = CameraRegion.around(location, self._span_m)
        self._changed()

    async def recenter_on_user(self) -> None:
        await self.set_user_location()

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    async def submit_search(self, text: Optional[str] = None) -> None:
        """Resolve ``text`` (default: ``search_text``) and center the camera on it."""
        query = self.search_text if text is None else text
        placemark = await self._call(
            self._resolve_place, query, code="PLACE_NOT_FOUND", kind=FailureKind.NOT_FOUND
        )
        if placemark is None:
            return

        self.current_place = placemark
        if placemark.coordinate is None:
            _log.info("Place '%s' has no location; camera unchanged", placemark.display_name)
        else:
            self.camera = CameraRegion.around(placemark.coordinate, self._span_m)
        self._changed()

    def place_target(self) -> Coordinate:
        """Coordinate used by place actions; ``HOME`` when the place has none."""
        if self.current_place is not None and self.current_place.coordinate is not None:
            return self.current_place.coordinate
        return HOME

    # ------------------------------------------------------------------
    # Directions
    # ------------------------------------------------------------------
    async def request_directions(self, to: Coordinate) -> None:
        """Compute a driving route from the current location to ``to``.

        Without a current location the request is dropped and any existing
        route stays. An unroutable request clears the stored route.
        """
        origin = await self._call(self._locate_user, code="LOCATION_UNKNOWN", kind=FailureKind.UNKNOWN)
        if origin is None:
            return
        self.user_location = origin

        route = await self._call(
            self._compute_route, origin, to, code="ROUTE_UNAVAILABLE", kind=FailureKind.UNROUTABLE
        )
        self.route = route
        if route is not None:
            _log.info(
                "Route to %s: %.0f m, %.0f s", to, route.distance_m, route.expected_travel_time_s
            )
        self._changed()

    # ------------------------------------------------------------------
    # Look around
    # ------------------------------------------------------------------
    async def request_look_around(self, at: Coordinate) -> None:
        """Fetch the street-level scene at ``at`` and show the viewer if one exists."""
        scene = await self._call(
            self._lookup_scene, at, code="SCENE_UNAVAILABLE", kind=FailureKind.UNAVAILABLE
        )
        self.look_around_scene = scene
        self.is_showing_look_around = scene is not None
        self._changed()

    def dismiss_look_around(self) -> None:
        self.is_showing_look_around = False
        self._changed()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    async def _call(
        self,
        fn: Callable[..., T],
        *args: Any,
        code: str,
        kind: FailureKind,
    ) -> Optional[T]:
        try:
            result = await self._run_blocking(fn, *args)
        except UseCaseError as err:
            self._record_failure(err)
            return None
        except Exception as exc:
            err = map_api_error(exc, default_code=code, kind=kind)
            _log.exception("Unexpected failure in %s", code)
            self._record_failure(err)
            return None
        self.last_error = None
        return result

    def _record_failure(self, err: UseCaseError) -> None:
        self.last_error = err
        cause = describe_cause(err)
        if cause:
            _log.warning("%s: %s (%s)", err.code, err.message, cause)
        else:
            _log.warning("%s: %s", err.code, err.message)
        self._changed()

    def _changed(self) -> None:
        if self.on_change is None:
            return
        try:
            self.on_change()
        except Exception:
            _log.exception("on_change callback failed")


__all__ = ["MapVM"]
