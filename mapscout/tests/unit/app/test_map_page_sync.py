from __future__ import annotations

from typing import Any, List, Tuple

from mapscout.domain.geo import ALLIANZ_ARENA, HOME, CameraRegion, Coordinate, Route
from mapscout.web_ui.main import MapPage


class _LayerStub:
    def __init__(self, kind: str, args: Any) -> None:
        self.kind = kind
        self.args = args
        self.methods: List[Tuple[str, tuple]] = []

    def run_method(self, name: str, *args: Any) -> None:
        self.methods.append((name, args))


class _LeafletStub:
    def __init__(self) -> None:
        self.calls: List[Tuple[str, Any]] = []
        self.removed: List[_LayerStub] = []

    def set_center(self, center) -> None:
        self.calls.append(("set_center", center))

    def set_zoom(self, zoom) -> None:
        self.calls.append(("set_zoom", zoom))

    def marker(self, *, latlng) -> _LayerStub:
        return _LayerStub("marker", latlng)

    def generic_layer(self, *, name: str, args: list) -> _LayerStub:
        return _LayerStub(name, args)

    def remove_layer(self, layer: _LayerStub) -> None:
        self.removed.append(layer)

    def run_map_method(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))


class _VMStub:
    def __init__(self) -> None:
        self.camera = CameraRegion.around(HOME)
        self.current_place = None
        self.route = None
        self.user_location = None

    def place_target(self) -> Coordinate:
        return HOME


def _fit_calls(leaflet: _LeafletStub) -> list:
    return [args for name, args in leaflet.calls if name == "fitBounds"]


def test_sync_fits_map_to_new_route_once() -> None:
    vm = _VMStub()
    leaflet = _LeafletStub()
    page = MapPage(vm, leaflet)  # type: ignore[arg-type]

    page.sync()
    assert _fit_calls(leaflet) == []

    vm.route = Route(polyline=(HOME, Coordinate(50.0, 9.0), ALLIANZ_ARENA))
    page.sync()
    page.sync()

    assert _fit_calls(leaflet) == [([(48.2187901, 7.3402022), (51.4410628, 11.6236227)],)]


def test_sync_removes_cleared_route_layer() -> None:
    vm = _VMStub()
    leaflet = _LeafletStub()
    page = MapPage(vm, leaflet)  # type: ignore[arg-type]
    vm.route = Route(polyline=(HOME, ALLIANZ_ARENA))
    page.sync()

    vm.route = None
    page.sync()

    assert [layer.kind for layer in leaflet.removed] == ["polyline"]
    assert len(_fit_calls(leaflet)) == 1
