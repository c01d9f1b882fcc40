from __future__ import annotations

import pytest

from mapscout.adapters.api_errors import ApiClientError, ApiPayloadError, ApiServerError
from mapscout.adapters.geocoding_nominatim import NominatimGeocodingAdapter
from mapscout.domain.geo import ALLIANZ_ARENA, Coordinate
from mapscout.tests.unit.adapters.session_stubs import ResponseStub, SessionStub


def test_geocode_uses_search_endpoint_and_parses_first_hit() -> None:
    payload = [
        {"name": "Allianz Arena", "display_name": "Allianz Arena, Munich", "lat": "48.2187901", "lon": "11.6236227"},
        {"name": "Other", "lat": "1.0", "lon": "2.0"},
    ]
    adapter = NominatimGeocodingAdapter("https://geo.test/", limit=2)
    stub = SessionStub([ResponseStub(payload)])
    adapter.session = stub  # type: ignore[assignment]

    placemarks = adapter.geocode("  Allianz Arena ")

    assert stub.calls[0]["url"] == "https://geo.test/search"
    assert stub.calls[0]["params"] == {"q": "Allianz Arena", "format": "jsonv2", "limit": 2}
    assert placemarks[0].name == "Allianz Arena"
    assert placemarks[0].coordinate == ALLIANZ_ARENA
    assert placemarks[1].coordinate == Coordinate(1.0, 2.0)


def test_geocode_blank_query_skips_network() -> None:
    adapter = NominatimGeocodingAdapter("https://geo.test")
    stub = SessionStub([])
    adapter.session = stub  # type: ignore[assignment]

    assert adapter.geocode("   ") == []
    assert stub.calls == []


def test_geocode_keeps_placemark_without_location() -> None:
    adapter = NominatimGeocodingAdapter("https://geo.test", language="de")
    stub = SessionStub([ResponseStub([{"display_name": "Somewhere", "lat": None}, "junk"])])
    adapter.session = stub  # type: ignore[assignment]

    placemarks = adapter.geocode("somewhere")

    assert stub.calls[0]["params"]["accept-language"] == "de"
    assert len(placemarks) == 1
    assert placemarks[0].name == "Somewhere"
    assert placemarks[0].coordinate is None


def test_geocode_empty_result_list() -> None:
    adapter = NominatimGeocodingAdapter("https://geo.test")
    adapter.session = SessionStub([ResponseStub([])])  # type: ignore[assignment]

    assert adapter.geocode("nowhere at all") == []


def test_geocode_raises_typed_errors() -> None:
    adapter = NominatimGeocodingAdapter("https://geo.test")
    adapter.session = SessionStub(  # type: ignore[assignment]
        [
            ResponseStub({"error": {"code": 403, "message": "Access blocked"}}, status_code=403),
            ResponseStub("upstream down", status_code=502),
            ResponseStub({"not": "a list"}),
        ]
    )

    with pytest.raises(ApiClientError) as client_err:
        adapter.geocode("a")
    assert client_err.value.status == 403
    assert client_err.value.code == "403"
    assert client_err.value.hint == "Access blocked"
    assert "HTTP 403" in str(client_err.value)

    with pytest.raises(ApiServerError):
        adapter.geocode("b")

    with pytest.raises(ApiPayloadError):
        adapter.geocode("c")
