import pytest
import requests

from conftest import DummyResponse, DummySession
from shelter_finder.models import Coordinate
from shelter_finder.vendors import nominatim

CENTER = Coordinate(lon=-75.0, lat=40.0)


@pytest.fixture
def session(monkeypatch):
    dummy = DummySession()
    monkeypatch.setattr(nominatim, "_SESSION", dummy)
    return dummy


def _hit(place_id, name, **extra):
    item = {
        "place_id": place_id,
        "lat": "40.01",
        "lon": "-75.01",
        "display_name": f"{name}, Somewhere, PA",
        "class": "amenity",
        "osm_type": "node",
    }
    item.update(extra)
    return item


def test_search_sends_identifying_request(session):
    session.responses = [DummyResponse(payload=[{"place_id": 1}])]

    assert nominatim.search({"q": "spca"}) == [{"place_id": 1}]

    method, url, params, headers, timeout = session.calls[0]
    assert method == "GET"
    assert url.endswith("/search")
    assert params == {"format": "json", "q": "spca"}
    assert headers["User-Agent"]
    assert timeout == 10


def test_search_rejects_non_list_payload(session):
    session.responses = [DummyResponse(payload={"error": "bad"})]
    with pytest.raises(nominatim.NominatimError):
        nominatim.search({"q": "spca"})


def test_build_subqueries_order_and_parameters():
    subqueries = nominatim.build_subqueries(CENTER, 10)

    assert len(subqueries) == 2 + len(nominatim.SEARCH_TERMS)
    assert subqueries[0].provider == "nominatim-amenity"
    assert subqueries[0].params["amenity"] == "animal_shelter"
    assert subqueries[1].provider == "nominatim-animal-shelter"
    assert subqueries[1].params["q"] == "animal shelter"
    assert subqueries[-1].provider == "nominatim-vet"
    assert subqueries[-1].params["amenity"] == "veterinary"
    for sub in subqueries:
        assert sub.params["bounded"] == 1
        assert sub.params["limit"] == 50
        west, north, east, south = (float(v) for v in sub.params["viewbox"].split(","))
        assert west < CENTER.lon < east
        assert south < CENTER.lat < north


def test_search_shelters_runs_sequentially_with_pauses(session):
    sleeps = []
    session.responses = [DummyResponse(payload=[_hit(1, "County Animal Shelter")])]

    candidates = nominatim.search_shelters(CENTER, 10, sleep=sleeps.append)

    assert len(session.calls) == 15
    assert sleeps == [0.2] * 14
    assert [c.provider for c in candidates] == ["nominatim-amenity"]
    assert candidates[0].record["place_id"] == 1


def test_failed_subqueries_are_skipped(session):
    responses = [requests.ConnectionError("boom"), DummyResponse(status_code=503)]
    responses += [DummyResponse(payload=[]) for _ in range(12)]
    responses.append(DummyResponse(payload=[_hit(9, "Humane Society Clinic", type="veterinary")]))
    session.responses = responses

    candidates = nominatim.search_shelters(CENTER, 10, sleep=lambda _: None)

    assert len(session.calls) == 15
    assert [c.provider for c in candidates] == ["nominatim-vet"]


def test_veterinary_hits_need_a_shelter_name(session):
    responses = [DummyResponse(payload=[]) for _ in range(14)]
    responses.append(
        DummyResponse(
            payload=[
                _hit(1, "Main Street Vet", namedetails={"name": "Main Street Vet"}),
                _hit(2, "Clinic", namedetails={"name": "Paws RESCUE Clinic"}),
            ]
        )
    )
    session.responses = responses

    candidates = nominatim.search_shelters(CENTER, 10, sleep=lambda _: None)

    assert [c.record["place_id"] for c in candidates] == [2]


def test_text_hits_must_look_like_places(session):
    bare_address = _hit(3, "12 Shelter Rd", **{"class": "highway", "osm_type": "relation", "type": "residential"})
    organisation = _hit(4, "Animal Rescue League", **{"class": "office", "osm_type": "relation", "type": "yes"})
    session.responses = [DummyResponse(payload=[]), DummyResponse(payload=[bare_address, organisation])]

    candidates = nominatim.search_shelters(CENTER, 10, sleep=lambda _: None)

    assert [c.record["place_id"] for c in candidates] == [4]
    assert candidates[0].provider == "nominatim-animal-shelter"


def test_geocode_returns_first_match(session):
    session.responses = [DummyResponse(payload=[{"lat": "51.5", "lon": "-0.12", "display_name": "London, UK"}])]

    match = nominatim.geocode("  london ")

    assert match.coordinate == Coordinate(lon=-0.12, lat=51.5)
    assert match.display_name == "London, UK"
    _, _, params, _, _ = session.calls[0]
    assert params["q"] == "london"
    assert params["limit"] == 1


def test_geocode_handles_empty_input_and_no_match(session):
    assert nominatim.geocode("   ") is None
    assert session.calls == []

    session.responses = [DummyResponse(payload=[])]
    assert nominatim.geocode("nowhere at all") is None


def test_geocode_rejects_result_without_coordinates(session):
    session.responses = [DummyResponse(payload=[{"display_name": "Nowhere"}])]
    with pytest.raises(nominatim.NominatimError):
        nominatim.geocode("nowhere")
