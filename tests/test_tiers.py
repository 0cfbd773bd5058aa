from shelter_finder.etl import tiers
from shelter_finder.etl.fallback import generate_fallback
from shelter_finder.models import Coordinate, default_radius_filters

CENTER = Coordinate(lon=-98.5795, lat=39.8283)


def test_tier_colors():
    assert tiers.tier_color(0) == "#10B981"
    assert tiers.tier_color(5) == "#10B981"
    assert tiers.tier_color(7.5) == "#F59E0B"
    assert tiers.tier_color(25) == "#EF4444"
    assert tiers.tier_color(49.9) == "#8B5CF6"
    assert tiers.tier_color(80) == tiers.DEFAULT_TIER_COLOR


def test_max_active_radius():
    filters = default_radius_filters()
    assert tiers.max_active_radius(filters) == 50
    filters[3].active = False
    assert tiers.max_active_radius(filters) == 25
    for f in filters:
        f.active = False
    assert tiers.max_active_radius(filters) is None


def test_classify_keeps_union_of_active_bands():
    shelters = generate_fallback(CENTER, 50)
    filters = default_radius_filters()
    filters[2].active = False
    filters[3].active = False

    results = tiers.classify(shelters, CENTER, filters)

    assert all(r.distance <= 10 for r in results)
    assert len(results) == sum(1 for r in tiers.classify(shelters, CENTER, default_radius_filters()) if r.distance <= 10)


def test_classify_with_no_active_filters_is_empty():
    filters = default_radius_filters()
    for f in filters:
        f.active = False
    assert tiers.classify(generate_fallback(CENTER, 10), CENTER, filters) == []
