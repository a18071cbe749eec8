import pytest

from business_finder.geo.distance import haversine_km
from business_finder.geo.ranking import annotate_distances, distance_to, rank_businesses
from business_finder.search.models import LocationCoords

from conftest import make_business, north_of

ORIGIN = LocationCoords(latitude=40.0, longitude=-74.0)


def test_radius_filter_scenario():
    near = make_business("near", latitude=north_of(40.0, 5), longitude=-74.0)
    far = make_business("far", latitude=north_of(40.0, 20), longitude=-74.0)

    ranked = rank_businesses([far, near], ORIGIN, radius_km=10)

    assert [r.business.place_id for r in ranked] == ["near"]
    assert ranked[0].distance_km == pytest.approx(5.0, rel=1e-9)


def test_without_location_passes_everything_through():
    businesses = [
        make_business("a", latitude=north_of(40.0, 30), longitude=-74.0),
        make_business("b"),
        make_business("c", latitude=40.0, longitude=-74.0),
    ]

    ranked = rank_businesses(businesses, None, radius_km=1)

    assert [r.business.place_id for r in ranked] == ["a", "b", "c"]
    assert all(r.distance_km is None for r in ranked)


def test_businesses_without_coordinates_are_kept_and_sorted_last():
    businesses = [
        make_business("no-coords-1"),
        make_business("far", latitude=north_of(40.0, 8), longitude=-74.0),
        make_business("no-coords-2", latitude=40.1),
        make_business("near", latitude=north_of(40.0, 2), longitude=-74.0),
    ]

    ranked = rank_businesses(businesses, ORIGIN, radius_km=10)

    assert [r.business.place_id for r in ranked] == ["near", "far", "no-coords-1", "no-coords-2"]
    assert ranked[2].distance_km is None
    assert ranked[3].distance_km is None


def test_equal_distances_keep_input_order():
    lat = north_of(40.0, 3)
    businesses = [
        make_business("first", latitude=lat, longitude=-74.0),
        make_business("closer", latitude=north_of(40.0, 1), longitude=-74.0),
        make_business("second", latitude=lat, longitude=-74.0),
        make_business("third", latitude=lat, longitude=-74.0),
    ]

    ranked = rank_businesses(businesses, ORIGIN, radius_km=50)

    assert [r.business.place_id for r in ranked] == ["closer", "first", "second", "third"]


def test_business_exactly_on_radius_is_kept():
    edge = make_business("edge", latitude=40.05, longitude=-73.95)
    radius = haversine_km(ORIGIN, edge)

    ranked = rank_businesses([edge], ORIGIN, radius_km=radius)

    assert [r.business.place_id for r in ranked] == ["edge"]


def test_retained_businesses_respect_radius_and_order():
    businesses = [
        make_business(f"b{i}", latitude=40.0 + (i % 7) * 0.03, longitude=-74.0 - (i % 5) * 0.04)
        for i in range(30)
    ] + [make_business("unknown")]

    ranked = rank_businesses(businesses, ORIGIN, radius_km=12)

    distances = [r.distance_km for r in ranked if r.distance_km is not None]
    assert all(d <= 12 for d in distances)
    assert distances == sorted(distances)
    assert ranked[-1].business.place_id == "unknown"
    for r in ranked:
        if r.business.has_coordinates:
            assert r.distance_km == pytest.approx(haversine_km(ORIGIN, r.business), rel=1e-12)


def test_empty_input():
    assert rank_businesses([], ORIGIN, radius_km=10) == []


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        rank_businesses([make_business("a")], ORIGIN, radius_km=-1)


def test_annotate_distances_does_not_filter_or_sort():
    businesses = [
        make_business("far", latitude=north_of(40.0, 80), longitude=-74.0),
        make_business("none"),
        make_business("near", latitude=north_of(40.0, 1), longitude=-74.0),
    ]

    annotated = annotate_distances(businesses, ORIGIN)

    assert [a.business.place_id for a in annotated] == ["far", "none", "near"]
    assert annotated[0].distance_km == pytest.approx(80.0, rel=1e-9)
    assert annotated[1].distance_km is None


def test_distance_to():
    business = make_business("a", latitude=north_of(40.0, 5), longitude=-74.0)
    assert distance_to(ORIGIN, business) == pytest.approx(5.0, rel=1e-9)
    assert distance_to(None, business) is None
    assert distance_to(ORIGIN, make_business("b")) is None


def test_antipodal_business_is_outside_small_radius():
    origin = LocationCoords(latitude=-43.5577, longitude=-28.3277)
    antipode = make_business("antipode", latitude=43.5577, longitude=151.6723)

    assert rank_businesses([antipode], origin, radius_km=10) == []

    (ranked,) = rank_businesses([antipode], origin, radius_km=25000)
    assert ranked.distance_km == pytest.approx(20015.1, abs=1.0)
