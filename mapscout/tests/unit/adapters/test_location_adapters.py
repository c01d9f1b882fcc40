from __future__ import annotations

import itertools

import pytest

from mapscout.adapters.api_errors import ApiServerError
from mapscout.adapters.location_ip import (
    IP_LOCATION_MAX_UPDATES,
    IpLocationAdapter,
    StaticLocationAdapter,
)
from mapscout.domain.geo import HOME, Coordinate
from mapscout.tests.unit.adapters.session_stubs import ResponseStub, SessionStub


def test_ip_location_stream_polls_until_max_updates() -> None:
    sleeps = []
    adapter = IpLocationAdapter(
        "https://ip.test/json/", poll_interval_s=5, max_updates=2, sleep=sleeps.append
    )
    stub = SessionStub(
        [
            ResponseStub({"latitude": 51.44, "longitude": 7.34}),
            ResponseStub({"status": "success", "lat": 48.1, "lon": 11.5}),
        ]
    )
    adapter.session = stub  # type: ignore[assignment]

    updates = list(adapter.live_updates())

    assert [u.coordinate for u in updates] == [Coordinate(51.44, 7.34), Coordinate(48.1, 11.5)]
    assert sleeps == [5.0]
    assert all(call["url"] == "https://ip.test/json/" for call in stub.calls)


def test_ip_location_stream_is_finite_by_default() -> None:
    adapter = IpLocationAdapter("https://ip.test", sleep=lambda _s: None)
    stub = SessionStub([ResponseStub({"latitude": 51.44, "longitude": 7.34})] * 5)
    adapter.session = stub  # type: ignore[assignment]

    updates = list(adapter.live_updates())

    assert len(updates) == IP_LOCATION_MAX_UPDATES == 3
    assert len(stub.calls) == 3


@pytest.mark.parametrize("bad", [0, -1])
def test_ip_location_rejects_non_positive_max_updates(bad: int) -> None:
    with pytest.raises(ValueError):
        IpLocationAdapter("https://ip.test", max_updates=bad)


def test_ip_location_update_without_coordinate() -> None:
    adapter = IpLocationAdapter("https://ip.test", max_updates=1)
    adapter.session = SessionStub([ResponseStub({"error": True, "reason": "Reserved IP"})])  # type: ignore[assignment]

    update = next(iter(adapter.live_updates()))

    assert update.coordinate is None
    assert update.source == "ip"


def test_ip_location_stream_propagates_service_failure() -> None:
    adapter = IpLocationAdapter("https://ip.test", max_updates=1)
    adapter.session = SessionStub([ResponseStub("oops", status_code=500)])  # type: ignore[assignment]

    with pytest.raises(ApiServerError):
        list(adapter.live_updates())


def test_static_location_yields_single_update() -> None:
    updates = list(itertools.islice(StaticLocationAdapter(HOME, accuracy_m=5).live_updates(), 3))

    assert len(updates) == 1
    assert updates[0].coordinate == HOME
    assert updates[0].accuracy_m == 5
