from __future__ import annotations

import asyncio
from typing import Iterator, List

import pytest

from mapscout.adapters.geocoding_nominatim import NominatimGeocodingAdapter
from mapscout.adapters.location_ip import IpLocationAdapter, StaticLocationAdapter
from mapscout.adapters.routing_osrm import OsrmRoutingAdapter
from mapscout.adapters.scene_mapillary import MapillarySceneAdapter
from mapscout.domain.geo import ALLIANZ_ARENA, Coordinate, LocationUpdate, Placemark
from mapscout.web_ui.runtime import IP_LOCATION_MAX_UPDATES, MapRuntime


class _Geocoder:
    def geocode(self, query: str) -> List[Placemark]:
        return [Placemark(query, ALLIANZ_ARENA)]


class _Location:
    def live_updates(self) -> Iterator[LocationUpdate]:
        yield LocationUpdate(Coordinate(52.52, 13.405))


def test_runtime_builds_http_adapters_from_settings() -> None:
    runtime = MapRuntime.from_payload(
        {
            "geocoding_url": "https://geo.test/",
            "routing_url": "https://osrm.test",
            "scene_url": "https://graph.test",
            "mapillary_token": "tok",
            "request_timeout_s": 4,
            "retries": 1,
            "scene_radius_m": 30,
        }
    )

    assert isinstance(runtime.geocoding_port, NominatimGeocodingAdapter)
    assert runtime.geocoding_port.base_url == "https://geo.test"
    assert runtime.geocoding_port.session.cfg.request_timeout_s == 4
    assert isinstance(runtime.routing_port, OsrmRoutingAdapter)
    assert runtime.routing_port.session.cfg.retries == 1
    assert isinstance(runtime.scene_port, MapillarySceneAdapter)
    assert runtime.scene_port.access_token == "tok"
    assert runtime.scene_port.radius_m == 30
    assert isinstance(runtime.location_port, StaticLocationAdapter)


def test_runtime_ip_location_source_is_bounded() -> None:
    runtime = MapRuntime.from_payload({"location_source": "ip", "location_url": "https://ip.test"})

    assert isinstance(runtime.location_port, IpLocationAdapter)
    assert runtime.location_port.max_updates == IP_LOCATION_MAX_UPDATES


def test_runtime_rejects_invalid_settings() -> None:
    with pytest.raises(ValueError):
        MapRuntime.from_payload({"camera_span_m": 0})


def test_runtime_map_vm_uses_injected_ports_and_span() -> None:
    runtime = MapRuntime.from_payload(
        {"camera_span_m": 2000},
        geocoding_port=_Geocoder(),
        location_port=_Location(),
    )
    vm = runtime.create_map_vm()

    async def scenario() -> None:
        await vm.start()
        await vm.submit_search("Allianz Arena")

    asyncio.run(scenario())

    assert vm.user_location == Coordinate(52.52, 13.405)
    assert vm.camera.center == ALLIANZ_ARENA
    assert vm.camera.latitudinal_meters == 2000
