"""Minimal records generated from request identifiers alone.

Used as the last stage of every fallback chain so callers always get an
answer. Output is deterministic for a given request.
"""

from __future__ import annotations

import datetime as dt
import zlib
from decimal import Decimal
from typing import List

from .models import (
    AirportQuery,
    AirportRecord,
    FareOffer,
    FarePoint,
    FareQuery,
    FlightQuery,
    FlightRecord,
)
from .static_data import COMMON_AMENITIES, COMMON_SERVICES
from .travelpayouts_fetcher import mark_cheapest

GENERIC_AMENITIES = COMMON_AMENITIES | {
    "Rest zones with comfortable seating",
    "Medical facilities and pharmacies",
    "Shopping outlets and duty-free stores",
}
GENERIC_SERVICES = COMMON_SERVICES | {"Meet & greet services", "Airport hotels for long layovers"}
GENERIC_TIPS = (
    "Arrive at least 2 hours before domestic flights, 3 hours for international",
    "Download the airport app for real-time updates",
    "Keep liquids in containers under 100ml for carry-on",
)

MOCK_CARRIERS = ("AA123", "DL456", "UA789", "WN321", "BA789")
CALENDAR_DAYS = 30


def _seed(*parts: str) -> int:
    return zlib.crc32("|".join(parts).encode("utf-8"))


def synthetic_airport(query: AirportQuery) -> AirportRecord:
    code = query.airport_code
    return AirportRecord(
        code=code,
        name=f"{code} Airport",
        amenities=GENERIC_AMENITIES,
        services=GENERIC_SERVICES,
        tips=GENERIC_TIPS,
    )


def mock_flights(query: FlightQuery) -> List[FlightRecord]:
    carrier = MOCK_CARRIERS[_seed(query.origin, query.destination) % len(MOCK_CARRIERS)]
    day = dt.datetime.combine(query.date, dt.time(0, 0), tzinfo=dt.timezone.utc)
    return [
        FlightRecord(
            origin=query.origin,
            destination=query.destination,
            scheduled_departure=day.replace(hour=10),
            scheduled_arrival=day.replace(hour=13),
            estimated_departure=day.replace(hour=10, minute=15),
            estimated_arrival=day.replace(hour=13, minute=20),
            aircraft_type="B738",
            carrier=carrier,
            stops=0,
        )
    ]


def _mock_price(query: FareQuery, day: dt.date) -> Decimal:
    base = 120 + _seed(query.origin, query.destination) % 200
    swing = _seed(query.origin, query.destination, day.isoformat()) % 60
    weekend = 25 if day.weekday() >= 4 else 0
    return Decimal(base + swing + weekend)


def mock_fare_calendar(query: FareQuery) -> List[FarePoint]:
    start = query.date.replace(day=1)
    points = [
        FarePoint(date=day, price=_mock_price(query, day), currency="USD")
        for day in (start + dt.timedelta(days=i) for i in range(CALENDAR_DAYS))
    ]
    return mark_cheapest(points)


def mock_fare_offers(query: FareQuery) -> List[FareOffer]:
    price = _mock_price(query, query.date)
    offers = [
        FareOffer(
            origin=query.origin,
            destination=query.destination,
            depart_date=query.date,
            return_date=None,
            price=price + extra,
            currency="USD",
            airline=carrier[:2],
            stops=stops,
            deep_link="",
        )
        for carrier, extra, stops in zip(MOCK_CARRIERS[:3], (0, 35, 80), (1, 0, 0))
    ]
    return offers


__all__ = [
    "GENERIC_AMENITIES",
    "GENERIC_SERVICES",
    "synthetic_airport",
    "mock_flights",
    "mock_fare_calendar",
    "mock_fare_offers",
]
