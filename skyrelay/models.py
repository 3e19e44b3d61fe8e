"""Canonical records every provider response is normalized into."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class AirportRecord:
    code: str
    name: str
    city: str = "Unknown"
    country: str = "Unknown"
    timezone: str = "UTC"
    terminals: Tuple[str, ...] = ()
    amenities: frozenset[str] = frozenset()
    services: frozenset[str] = frozenset()
    transit: Mapping[str, str] = field(default_factory=dict)
    tips: Tuple[str, ...] = ()
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def position(self) -> Optional[Tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


@dataclass(frozen=True, slots=True)
class FlightLeg:
    origin: str
    destination: str
    departure: datetime
    arrival: datetime


@dataclass(frozen=True, slots=True)
class FlightRecord:
    origin: str
    destination: str
    scheduled_departure: datetime
    scheduled_arrival: Optional[datetime] = None
    estimated_departure: Optional[datetime] = None
    estimated_arrival: Optional[datetime] = None
    aircraft_type: Optional[str] = None
    carrier: str = ""
    stops: int = 0
    legs: Tuple[FlightLeg, ...] = ()
    origin_position: Optional[Tuple[float, float]] = None
    destination_position: Optional[Tuple[float, float]] = None

    @property
    def route(self) -> str:
        return f"{self.origin}-{self.destination}"


@dataclass(frozen=True, slots=True)
class FarePoint:
    """One day of a fare calendar."""

    date: date
    price: Decimal
    currency: str
    is_cheapest: bool = False
    airline: Optional[str] = None


@dataclass(frozen=True, slots=True)
class FareOffer:
    origin: str
    destination: str
    depart_date: date
    return_date: Optional[date]
    price: Decimal
    currency: str
    airline: str
    stops: int
    deep_link: str
    found_at: Optional[datetime] = None


# ──────────────────────────────────────────────────────────────
# Request descriptors
# ──────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class AirportQuery:
    airport_code: str

    @property
    def fingerprint(self) -> str:
        return self.airport_code


@dataclass(frozen=True, slots=True)
class FlightQuery:
    origin: str
    destination: str
    date: date
    travelers: int = 1

    @property
    def fingerprint(self) -> str:
        return f"{self.origin}|{self.destination}|{self.date.isoformat()}"


@dataclass(frozen=True, slots=True)
class FareQuery:
    origin: str
    destination: str
    date: date
    mode: str = "calendar"

    @property
    def fingerprint(self) -> str:
        return f"{self.mode}|{self.origin}|{self.destination}|{self.date.isoformat()}"


def to_jsonable(value: Any) -> Any:
    """Convert records (and containers of them) into JSON-ready values."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: to_jsonable(getattr(value, f.name))
            for f in dataclasses.fields(value)
        }
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (frozenset, set)):
        return sorted(to_jsonable(v) for v in value)
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


__all__ = [
    "AirportRecord",
    "FlightLeg",
    "FlightRecord",
    "FarePoint",
    "FareOffer",
    "AirportQuery",
    "FlightQuery",
    "FareQuery",
    "to_jsonable",
]
