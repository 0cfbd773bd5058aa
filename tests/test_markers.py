from shelter_finder.etl.transform import normalize
from shelter_finder.models import Coordinate, ShelterWithDistance
from shelter_finder.ui import markers
from shelter_finder.ui.map_surface import LeafletMapSurface

CENTER = Coordinate(lon=-75.0, lat=40.0)


def _item(place_id, distance, **extratags):
    record = {"place_id": place_id, "lat": "40.0", "lon": "-75.0", "name": f"Shelter <{place_id}>", "extratags": extratags}
    return ShelterWithDistance(shelter=normalize(record, CENTER, 10, "nominatim-amenity"), distance=distance)


def test_sanitize_website():
    assert markers.sanitize_website("www.example.org") == "https://www.example.org"
    assert markers.sanitize_website("http://example.org/adopt#top") == "http://example.org/adopt"
    assert markers.sanitize_website("Website not available") is None
    assert markers.sanitize_website("javascript:alert(1)") is None
    assert markers.sanitize_website("") is None


def test_sanitize_website_keeps_port_on_bare_host():
    assert markers.sanitize_website("shelter.example.org:8080/adopt") == "https://shelter.example.org:8080/adopt"
    assert markers.sanitize_website("localhost:8000") == "https://localhost:8000"
    assert markers.sanitize_website("example.org:notaport") is None
    assert markers.sanitize_website("mailto:adopt@example.org") is None


def test_popup_contains_details_and_actions():
    html = markers.shelter_popup(
        _item(1, 3.14159, phone="555-0100", email="a@b.org", website="b.org", opening_hours="24/7")
    )

    assert "Shelter &lt;1&gt;" in html
    assert "3.1 miles away" in html
    assert 'href="tel:555-0100"' in html
    assert 'href="mailto:a@b.org"' in html
    assert 'href="https://b.org"' in html
    assert "24/7" in html
    assert "Adoption, Basic Care" in html
    assert "Placeholder listing" not in html


def test_popup_omits_actions_for_placeholders():
    html = markers.shelter_popup(_item(2, 1.0))

    assert "tel:" not in html
    assert "mailto:" not in html
    assert "Website</a>" not in html
    assert "Phone not available" in html


def test_render_replaces_every_shelter_marker():
    surface = LeafletMapSurface()
    manager = markers.MarkerManager(surface)

    manager.render([_item(1, 2.0), _item(2, 7.0), _item(3, 30.0)])
    first_handles = set(manager.shelter_markers.values())
    assert [m.color for m in surface.markers.values()] == ["#10B981", "#F59E0B", "#8B5CF6"]

    manager.render([_item(4, 60.0)])

    assert not first_handles & set(surface.markers)
    assert list(manager.shelter_markers) == ["nominatim-amenity-4"]
    assert [m.color for m in surface.markers.values()] == ["#6B7280"]


def test_clearing_shelters_keeps_user_and_search_markers():
    surface = LeafletMapSurface()
    manager = markers.MarkerManager(surface)
    manager.set_user_location(CENTER)
    manager.set_search_result(Coordinate(lon=-0.12, lat=51.5), "London")
    manager.render([_item(1, 2.0)])

    manager.render([])

    assert set(surface.markers) == {manager.user_marker, manager.search_marker}


def test_search_marker_is_replaced_not_accumulated():
    surface = LeafletMapSurface()
    manager = markers.MarkerManager(surface)

    manager.set_search_result(Coordinate(lon=-0.12, lat=51.5), "London")
    manager.set_search_result(Coordinate(lon=2.35, lat=48.85), "Paris & <Co>")

    assert len(surface.markers) == 1
    placed = surface.markers[manager.search_marker]
    assert placed.color == markers.SEARCH_MARKER_COLOR
    assert "Paris &amp; &lt;Co&gt;" in placed.popup_html


def test_render_keeps_results_that_share_an_id(caplog):
    surface = LeafletMapSurface()
    manager = markers.MarkerManager(surface)
    first, second = _item(9, 2.0), _item(9, 7.0)

    with caplog.at_level("WARNING"):
        manager.render([first, second, _item(10, 30.0)])

    assert len(surface.markers) == 3
    assert list(manager.shelter_markers) == ["nominatim-amenity-9", "nominatim-amenity-9~2", "nominatim-amenity-10"]
    assert "is not unique" in caplog.text

    manager.render([])

    assert surface.markers == {}
