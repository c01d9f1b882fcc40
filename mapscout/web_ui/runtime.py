"""Runtime composition for the mapscout web UI.

This module wires settings, HTTP adapters, use cases and the map view-model
together. It holds no UI code so the wiring can be exercised without NiceGUI.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional

from mapscout.adapters.geocoding_nominatim import NominatimGeocodingAdapter
from mapscout.adapters.location_ip import IP_LOCATION_MAX_UPDATES, IpLocationAdapter, StaticLocationAdapter
from mapscout.adapters.routing_osrm import OsrmRoutingAdapter
from mapscout.adapters.scene_mapillary import MapillarySceneAdapter
from mapscout.domain.ports import GeocodingPort, LocationPort, RoutingPort, ScenePort
from mapscout.usecases.compute_route import ComputeRoute
from mapscout.usecases.locate_user import LocateUser
from mapscout.usecases.lookup_scene import LookupScene
from mapscout.usecases.resolve_place import ResolvePlace
from mapscout.utils.logging import apply_debug_preference
from mapscout.viewmodels.map_vm import MapVM
from mapscout.viewmodels.settings_vm import SettingsVM

LOGGER = logging.getLogger(__name__)

IP_LOCATION_POLL_S = 2.0


class MapRuntime:
    """Build adapters from settings and hand out one ``MapVM`` per page session."""

    def __init__(
        self,
        settings_vm: Optional[SettingsVM] = None,
        *,
        geocoding_port: Optional[GeocodingPort] = None,
        routing_port: Optional[RoutingPort] = None,
        scene_port: Optional[ScenePort] = None,
        location_port: Optional[LocationPort] = None,
    ) -> None:
        self.settings_vm = settings_vm or SettingsVM.from_env()
        if not self.settings_vm.is_valid():
            raise ValueError("Invalid mapscout settings")
        apply_debug_preference(self.settings_vm.debug_logging)

        cfg = self.settings_vm.http_config()
        config = self.settings_vm.config
        self.geocoding_port: GeocodingPort = geocoding_port or NominatimGeocodingAdapter(
            config.geocoding_url, cfg=cfg
        )
        self.routing_port: RoutingPort = routing_port or OsrmRoutingAdapter(config.routing_url, cfg=cfg)
        self.scene_port: ScenePort = scene_port or MapillarySceneAdapter(
            self.settings_vm.mapillary_token,
            config.scene_url,
            cfg=cfg,
            radius_m=config.scene_radius_m,
        )
        self.location_port: LocationPort = location_port or self._build_location_port()
        if not self.settings_vm.mapillary_token and scene_port is None:
            LOGGER.warning("No Mapillary token configured; look around will be unavailable")
        LOGGER.info(
            "Runtime ready (geocoding=%s, routing=%s, location=%s)",
            config.geocoding_url,
            config.routing_url,
            config.location_source,
        )

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any], **ports: Any) -> "MapRuntime":
        settings_vm = SettingsVM()
        settings_vm.apply_dict(payload)
        return cls(settings_vm, **ports)

    def _build_location_port(self) -> LocationPort:
        config = self.settings_vm.config
        if config.location_source == "ip":
            return IpLocationAdapter(
                config.location_url,
                cfg=self.settings_vm.http_config(),
                poll_interval_s=IP_LOCATION_POLL_S,
                max_updates=IP_LOCATION_MAX_UPDATES,
            )
        return StaticLocationAdapter(self.settings_vm.static_location)

    def create_map_vm(self, on_change: Optional[Callable[[], None]] = None) -> MapVM:
        return MapVM(
            resolve_place=ResolvePlace(self.geocoding_port),
            compute_route=ComputeRoute(self.routing_port),
            lookup_scene=LookupScene(self.scene_port),
            locate_user=LocateUser(self.location_port),
            span_m=self.settings_vm.camera_span_m,
            on_change=on_change,
        )


__all__ = ["IP_LOCATION_MAX_UPDATES", "MapRuntime"]
