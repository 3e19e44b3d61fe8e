import datetime as dt

import pytest

from skyrelay.geo import estimate_distance_km, haversine_km, route_distance_km
from skyrelay.models import FlightRecord

JFK = (40.6413, -73.7781)
LHR = (51.4700, -0.4543)
SYD = (-33.9399, 151.1753)


def make_flight(origin="AAA", destination="BBB", hours=None, **kwargs):
    dep = dt.datetime(2025, 3, 14, 10, 0, tzinfo=dt.timezone.utc)
    arr = dep + dt.timedelta(hours=hours) if hours is not None else None
    return FlightRecord(
        origin=origin,
        destination=destination,
        scheduled_departure=dep,
        scheduled_arrival=arr,
        **kwargs,
    )


@pytest.mark.parametrize("a,b", [(JFK, LHR), (LHR, SYD), (SYD, JFK)])
def test_haversine_is_symmetric(a, b):
    assert haversine_km(*a, *b) == pytest.approx(haversine_km(*b, *a))


@pytest.mark.parametrize("point", [JFK, LHR, SYD, (0.0, 0.0)])
def test_haversine_same_point_is_zero(point):
    assert haversine_km(*point, *point) == 0


def test_haversine_known_distance():
    assert haversine_km(*JFK, *LHR) == pytest.approx(5540, rel=0.01)


def test_route_table_works_in_both_directions():
    assert route_distance_km("JFK", "LAX") == 3975
    assert route_distance_km("LAX", "JFK") == 3975
    assert route_distance_km("JFK", "ZZZ") is None


def test_coordinates_take_priority_over_route_table():
    flight = make_flight("JFK", "LHR", origin_position=JFK, destination_position=LHR)
    dist, source = estimate_distance_km(flight)
    assert source == "coordinates"
    assert dist == pytest.approx(haversine_km(*JFK, *LHR))


def test_route_table_used_without_coordinates():
    assert estimate_distance_km(make_flight("JFK", "LAX", hours=6)) == (3975.0, "route")


def test_duration_heuristic_for_unknown_route():
    dist, source = estimate_distance_km(make_flight(hours=2.5))
    assert source == "duration"
    assert dist == pytest.approx(2.5 * 850)


def test_default_distance_as_last_resort():
    assert estimate_distance_km(make_flight()) == (1500.0, "default")
    # arrival before departure does not count as a duration
    assert estimate_distance_km(make_flight(hours=-1)) == (1500.0, "default")
