"""NiceGUI entrypoint for the mapscout map viewer."""

from __future__ import annotations

import argparse
import os
from typing import Any, Dict, Optional

from nicegui import ui

from mapscout.domain.geo import ALLIANZ_ARENA, ALLIANZ_ARENA_LABEL, HOME, HOME_LABEL
from mapscout.usecases.error_mapping import describe_error
from mapscout.utils.logging import configure_root
from mapscout.viewmodels.map_vm import MapVM
from mapscout.web_ui.runtime import MapRuntime

ROUTE_COLOR = "#3eb489"  # mint
ROUTE_WEIGHT = 8
MAPILLARY_VIEWER_URL = "https://www.mapillary.com/app/?pKey={scene_id}&focus=photo"


def _install_theme() -> None:
    """Install global CSS for the full-screen map layout."""
    ui.add_head_html(
        """
<style>
body { margin: 0; }
.mapscout-map { width: 100%; height: calc(100vh - 64px); }
.mapscout-toolbar {
  backdrop-filter: blur(8px);
  background: rgba(255, 255, 255, 0.7);
}
.mapscout-place { position: absolute; right: 16px; top: 80px; z-index: 1000; }
</style>
        """
    )


def _notify_error(vm: MapVM) -> None:
    """Render the view-model's last failure as a toast."""
    if vm.last_error is not None:
        ui.notify(describe_error(vm.last_error), color="warning", close_button="OK")


class MapPage:
    """Keeps Leaflet layers in sync with one ``MapVM``."""

    def __init__(self, vm: MapVM, leaflet: Any) -> None:
        self.vm = vm
        self.map = leaflet
        self._layers: Dict[str, Optional[Any]] = {"place": None, "route": None, "user": None}
        self._last_center = None
        self._last_route = None

    def _replace_layer(self, key: str, layer: Optional[Any]) -> None:
        previous = self._layers.get(key)
        if previous is not None:
            self.map.remove_layer(previous)
        self._layers[key] = layer

    def sync(self) -> None:
        vm = self.vm
        if vm.camera.center != self._last_center:
            self._last_center = vm.camera.center
            self.map.set_center(vm.camera.center.as_tuple())
            self.map.set_zoom(vm.camera.zoom_level())

        place_layer = None
        if vm.current_place is not None:
            place_layer = self.map.marker(latlng=vm.place_target().as_tuple())
            place_layer.run_method("bindTooltip", vm.current_place.display_name or "Place")
        self._replace_layer("place", place_layer)

        route_layer = None
        if vm.route is not None:
            route_layer = self.map.generic_layer(
                name="polyline",
                args=[vm.route.as_latlngs(), {"color": ROUTE_COLOR, "weight": ROUTE_WEIGHT}],
            )
        self._replace_layer("route", route_layer)
        if vm.route is not self._last_route:
            self._last_route = vm.route
            if vm.route is not None:
                # Show the whole route once, later camera moves win.
                south_west, north_east = vm.route.bounds()
                self.map.run_map_method("fitBounds", [south_west.as_tuple(), north_east.as_tuple()])

        user_layer = None
        if vm.user_location is not None:
            user_layer = self.map.generic_layer(
                name="circleMarker",
                args=[vm.user_location.as_tuple(), {"radius": 8, "color": "#1d5d9b", "fillOpacity": 0.9}],
            )
        self._replace_layer("user", user_layer)


def _build_ui(runtime: MapRuntime) -> None:
    """Register the NiceGUI page for the runtime."""

    @ui.page("/")
    async def index() -> None:
        vm = runtime.create_map_vm()

        with ui.header().classes("mapscout-toolbar items-center q-gutter-sm"):
            ui.label("mapscout").classes("text-h6 text-black")
            search = ui.input(placeholder="Search").props("dense outlined clearable").classes("w-96")
            search.bind_value(vm, "search_text")
            ui.button(icon="my_location", on_click=lambda: run_and_refresh(vm.recenter_on_user())).props(
                "flat round"
            )

        leaflet = ui.leaflet(center=HOME.as_tuple(), zoom=vm.camera.zoom_level()).classes("mapscout-map")
        home_marker = leaflet.marker(latlng=HOME.as_tuple())
        home_marker.run_method("bindTooltip", HOME_LABEL)
        arena_marker = leaflet.marker(latlng=ALLIANZ_ARENA.as_tuple())
        arena_marker.run_method("bindTooltip", ALLIANZ_ARENA_LABEL)
        page = MapPage(vm, leaflet)

        with ui.dialog() as scene_dialog, ui.card().classes("w-[720px] max-w-full"):
            render_scene_slot = ui.column().classes("w-full")
        scene_dialog.on("hide", lambda: vm.dismiss_look_around())

        @ui.refreshable
        def render_place_card() -> None:
            if vm.current_place is None:
                return
            with ui.card().classes("mapscout-place"):
                ui.label(vm.current_place.display_name or "Unnamed place").classes("text-subtitle1")
                with ui.row().classes("q-gutter-sm"):
                    ui.button(
                        "Get Direction",
                        icon="directions_car",
                        on_click=lambda: run_and_refresh(vm.request_directions(vm.place_target())),
                    )
                    ui.button(
                        "Look Around Scene",
                        icon="streetview",
                        on_click=lambda: run_and_refresh(vm.request_look_around(vm.place_target())),
                    )
                if vm.route is not None:
                    ui.label(
                        f"{vm.route.distance_m / 1000:.1f} km, {vm.route.expected_travel_time_s / 60:.0f} min"
                    ).classes("text-caption")

        def render_scene() -> None:
            render_scene_slot.clear()
            scene = vm.look_around_scene
            if scene is None:
                return
            with render_scene_slot:
                if scene.preview_url:
                    ui.image(scene.preview_url).classes("w-full")
                ui.link(
                    "Open street-level viewer",
                    MAPILLARY_VIEWER_URL.format(scene_id=scene.scene_id),
                    new_tab=True,
                )
                ui.button("Close", on_click=scene_dialog.close)

        def refresh() -> None:
            page.sync()
            render_place_card.refresh()
            if vm.is_showing_look_around:
                render_scene()
                scene_dialog.open()
            elif scene_dialog.value:
                scene_dialog.close()

        async def run_and_refresh(command) -> None:
            await command
            _notify_error(vm)
            refresh()

        search.on("keydown.enter", lambda: run_and_refresh(vm.submit_search()))
        render_place_card()

        await ui.context.client.connected()
        await run_and_refresh(vm.start())


def _parse_args() -> argparse.Namespace:
    """Parse CLI args for web runtime startup."""
    parser = argparse.ArgumentParser(description="Run the mapscout NiceGUI map viewer.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--reload", action="store_true")
    parser.add_argument("--smoke-test", action="store_true")
    return parser.parse_args()


def main() -> None:
    """CLI entrypoint for the NiceGUI runtime."""
    args = _parse_args()
    configure_root()
    runtime = MapRuntime()
    if args.smoke_test:
        payload = runtime.settings_vm.to_dict()
        print("web-smoke-ok", payload["geocoding_url"], payload["routing_url"])
        return
    _install_theme()
    _build_ui(runtime)
    ui.run(
        host=args.host,
        port=args.port,
        title="mapscout",
        reload=args.reload,
        show=False,
        storage_secret=os.environ.get("MAPSCOUT_WEB_STORAGE_SECRET", "mapscout-web-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
