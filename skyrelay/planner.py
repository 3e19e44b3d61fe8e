"""Connection risk and departure planning hints for a flight."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Tuple

from .models import FlightRecord

NON_STOP_RISK_PERCENT = 5
DEFAULT_LAYOVER_MIN = 60

# (upper bound in minutes, risk percent)
RISK_BREAKPOINTS = ((45, 60), (60, 40), (90, 20))
FALLBACK_RISK_PERCENT = 8

US_AIRPORTS = frozenset(
    {
        "JFK", "LAX", "ORD", "ATL", "DFW", "SFO", "MIA", "SEA",
        "BOS", "IAD", "DEN", "PHX", "IAH", "EWR", "LGA", "MSP",
    }
)

BOARDING_CLOSE_MIN = 30
SECURITY_BUFFER_MIN = 30
TRANSIT_TO_AIRPORT_MIN = 60


@dataclass(frozen=True, slots=True)
class ConnectionRisk:
    has_connection: bool
    layover_minutes: int
    risk_percent: int
    advice: str


@dataclass(frozen=True, slots=True)
class TravelPlan:
    international: bool
    recommended_arrival_at_airport: Optional[str]
    recommended_leave_home: Optional[str]
    check_in_close_minutes: int
    boarding_close_minutes: int
    security_buffer_minutes: int
    transit_to_airport_minutes: int
    connection_risk: ConnectionRisk
    alternate_suggestions: Tuple[str, ...]


def layover_risk_percent(minutes: float) -> int:
    for upper, risk in RISK_BREAKPOINTS:
        if minutes < upper:
            return risk
    return FALLBACK_RISK_PERCENT


def shortest_layover_minutes(flight: FlightRecord) -> Optional[int]:
    """Tightest gap between consecutive legs, or ``None`` without two legs."""
    if len(flight.legs) < 2:
        return None
    gaps = [
        (nxt.departure - prev.arrival).total_seconds() / 60.0
        for prev, nxt in zip(flight.legs, flight.legs[1:])
    ]
    return max(0, round(min(gaps)))


def connection_risk(
    flight: FlightRecord, default_layover_min: int = DEFAULT_LAYOVER_MIN
) -> ConnectionRisk:
    if flight.stops <= 0:
        return ConnectionRisk(
            has_connection=False,
            layover_minutes=0,
            risk_percent=NON_STOP_RISK_PERCENT,
            advice="Non-stop - low connection risk",
        )

    layover = shortest_layover_minutes(flight)
    if layover is None:
        return ConnectionRisk(
            has_connection=True,
            layover_minutes=default_layover_min,
            risk_percent=layover_risk_percent(default_layover_min),
            advice="Estimated from stop count",
        )

    return ConnectionRisk(
        has_connection=True,
        layover_minutes=layover,
        risk_percent=layover_risk_percent(layover),
        advice="High risk" if layover < 60 else "Moderate/Low risk",
    )


def is_international(flight: FlightRecord) -> bool:
    return not (flight.origin in US_AIRPORTS and flight.destination in US_AIRPORTS)


def build_travel_plan(
    flight: FlightRecord, default_layover_min: int = DEFAULT_LAYOVER_MIN
) -> TravelPlan:
    international = is_international(flight)
    arrive_before = timedelta(minutes=180 if international else 120)
    departure = flight.scheduled_departure

    arrival_at_airport = departure - arrive_before
    leave_home = arrival_at_airport - timedelta(minutes=TRANSIT_TO_AIRPORT_MIN)

    risk = connection_risk(flight, default_layover_min)
    if risk.has_connection:
        suggestions = (
            "If you prefer lower connection risk, consider a later non-stop "
            "or 1-stop with longer layover.",
        )
    else:
        suggestions = ("Non-stop flight - no connection risk estimated.",)

    return TravelPlan(
        international=international,
        recommended_arrival_at_airport=arrival_at_airport.isoformat(),
        recommended_leave_home=leave_home.isoformat(),
        check_in_close_minutes=90 if international else 60,
        boarding_close_minutes=BOARDING_CLOSE_MIN,
        security_buffer_minutes=SECURITY_BUFFER_MIN,
        transit_to_airport_minutes=TRANSIT_TO_AIRPORT_MIN,
        connection_risk=risk,
        alternate_suggestions=suggestions,
    )


__all__ = [
    "ConnectionRisk",
    "TravelPlan",
    "layover_risk_percent",
    "shortest_layover_minutes",
    "connection_risk",
    "is_international",
    "build_travel_plan",
]
