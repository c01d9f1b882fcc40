from __future__ import annotations

import pytest

from mapscout.adapters.api_errors import ApiPayloadError, ApiServerError
from mapscout.adapters.routing_osrm import OsrmRoutingAdapter
from mapscout.domain.geo import ALLIANZ_ARENA, HOME
from mapscout.tests.unit.adapters.session_stubs import ResponseStub, SessionStub


def _osrm_payload() -> dict:
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": 598123.4,
                "duration": 20350.2,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[7.3402, 51.4411], [9.5, 50.0], [11.6236227, 48.2187901]],
                },
                "legs": [{"summary": "A 3, A 9"}],
            },
            {
                "distance": 610000.0,
                "duration": 21000.0,
                "geometry": {"type": "LineString", "coordinates": [[7.34, 51.44], [11.62, 48.21]]},
            },
        ],
    }


def test_routes_builds_lonlat_url_and_parses_polyline() -> None:
    adapter = OsrmRoutingAdapter("https://osrm.test/")
    stub = SessionStub([ResponseStub(_osrm_payload())])
    adapter.session = stub  # type: ignore[assignment]

    routes = adapter.routes(HOME, ALLIANZ_ARENA)

    assert stub.calls[0]["url"] == (
        "https://osrm.test/route/v1/driving/7.3402022,51.4410628;11.6236227,48.2187901"
    )
    assert stub.calls[0]["params"]["geometries"] == "geojson"
    assert stub.calls[0]["params"]["overview"] == "full"
    assert len(routes) == 2
    first = routes[0]
    assert first.destination == ALLIANZ_ARENA
    assert first.origin.distance_to(HOME) < 50
    assert first.distance_m == pytest.approx(598123.4)
    assert first.expected_travel_time_s == pytest.approx(20350.2)
    assert first.name == "A 3, A 9"


@pytest.mark.parametrize(
    "response",
    [
        ResponseStub({"code": "NoRoute", "message": "Impossible route"}, status_code=400),
        ResponseStub({"code": "NoRoute", "routes": []}),
        ResponseStub({"code": "Ok", "routes": []}),
    ],
)
def test_routes_unroutable_returns_empty(response: ResponseStub) -> None:
    adapter = OsrmRoutingAdapter("https://osrm.test")
    adapter.session = SessionStub([response])  # type: ignore[assignment]

    assert adapter.routes(HOME, ALLIANZ_ARENA) == []


def test_routes_raises_on_server_and_protocol_errors() -> None:
    adapter = OsrmRoutingAdapter("https://osrm.test")
    adapter.session = SessionStub(  # type: ignore[assignment]
        [
            ResponseStub("bad gateway", status_code=502),
            ResponseStub({"code": "InvalidQuery"}),
        ]
    )

    with pytest.raises(ApiServerError):
        adapter.routes(HOME, ALLIANZ_ARENA)
    with pytest.raises(ApiPayloadError) as exc_info:
        adapter.routes(HOME, ALLIANZ_ARENA)
    assert exc_info.value.code == "InvalidQuery"


def test_routes_rejects_unknown_transport() -> None:
    adapter = OsrmRoutingAdapter("https://osrm.test")
    with pytest.raises(ValueError):
        adapter.routes(HOME, ALLIANZ_ARENA, "walking")  # type: ignore[arg-type]
