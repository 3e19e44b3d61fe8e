import datetime as dt

from skyrelay.models import AirportQuery, FareQuery, FlightQuery
from skyrelay.synthetic import (
    MOCK_CARRIERS,
    mock_fare_calendar,
    mock_fare_offers,
    mock_flights,
    synthetic_airport,
)

DAY = dt.date(2025, 3, 14)


def test_synthetic_airport_from_code_only():
    record = synthetic_airport(AirportQuery("ZZZ"))
    assert record.name == "ZZZ Airport"
    assert record.city == "Unknown"
    assert record.amenities
    assert record.services


def test_mock_flight_is_deterministic_per_route():
    first = mock_flights(FlightQuery("JFK", "LAX", DAY))
    second = mock_flights(FlightQuery("JFK", "LAX", DAY, travelers=4))
    assert first == second
    [flight] = first
    assert flight.carrier in MOCK_CARRIERS
    assert flight.stops == 0
    assert flight.scheduled_departure == dt.datetime(2025, 3, 14, 10, tzinfo=dt.timezone.utc)
    assert flight.scheduled_arrival == dt.datetime(2025, 3, 14, 13, tzinfo=dt.timezone.utc)


def test_mock_calendar_covers_month_from_the_first():
    points = mock_fare_calendar(FareQuery("WAW", "JFK", DAY))
    assert points[0].date == dt.date(2025, 3, 1)
    assert len(points) == 30
    cheapest = min(p.price for p in points)
    assert all(p.is_cheapest == (p.price == cheapest) for p in points)


def test_mock_offers_sorted_by_price():
    offers = mock_fare_offers(FareQuery("WAW", "JFK", DAY, mode="flights"))
    assert [o.price for o in offers] == sorted(o.price for o in offers)
    assert {o.depart_date for o in offers} == {DAY}
