from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from .models import AirportRecord
from .static_data import LAYOVER_OVERRIDES

SHORT_MAX_H = 3.0
MEDIUM_MAX_H = 8.0

BUCKET_TEMPLATES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "short": {
        "activities": (
            "Grab a meal near your connecting gate",
            "Stretch your legs with a walk through the terminal",
            "Recharge devices at gate-side charging stations",
        ),
        "services": (
            "Airline transfer desks",
            "Express security lanes for connecting passengers",
        ),
        "warnings": (
            "Stay airside; there is not enough time to leave the airport",
            "Check whether your connection requires a terminal change",
        ),
    },
    "medium": {
        "activities": (
            "Relax in a lounge (day passes typically $35-50 with showers)",
            "Explore duty-free shopping and local food outlets",
            "Book a sleep pod or quiet zone for a nap",
        ),
        "services": (
            "Lounge day passes",
            "Shower facilities",
            "Luggage storage and lockers",
        ),
        "warnings": (
            "Leaving the airport is possible but allow 2 hours for re-entry and security",
            "Check visa requirements before exiting the transit area",
        ),
    },
    "long": {
        "activities": (
            "Visit the city center or a nearby attraction",
            "Book an airport hotel day room",
            "Join a free city tour if the airport offers one",
        ),
        "services": (
            "Airport hotels with day rooms",
            "Left-luggage services",
            "Transit passes to the city center",
        ),
        "warnings": (
            "Confirm visa and re-entry rules for leaving the airport",
            "Be back at the airport at least 2 hours before departure",
            "Keep essentials in your carry-on for easy access",
        ),
    },
}


@dataclass(frozen=True, slots=True)
class LayoverAdvisory:
    airport_code: str
    duration_hours: float
    bucket: str
    activities: Tuple[str, ...]
    services: Tuple[str, ...]
    warnings: Tuple[str, ...]
    nearby: Tuple[str, ...] = ()
    transit: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()


def duration_bucket(hours: float) -> str:
    if hours < SHORT_MAX_H:
        return "short"
    if hours < MEDIUM_MAX_H:
        return "medium"
    return "long"


def build_advisory(
    airport_code: str,
    duration_hours: float,
    airport: Optional[AirportRecord] = None,
) -> LayoverAdvisory:
    """Deterministic advisory for ``(airport_code, bucket)``.

    Airport-specific templates are appended after the bucket templates.
    Transit options and tips from *airport* are only attached for medium
    and long layovers, since short ones stay airside.
    """
    bucket = duration_bucket(duration_hours)
    template = BUCKET_TEMPLATES[bucket]
    override = LAYOVER_OVERRIDES.get(airport_code, {})

    activities = template["activities"] + override.get("activities", ())
    services = template["services"] + override.get("services", ())
    nearby: Tuple[str, ...] = ()
    transit: Tuple[str, ...] = ()
    tips: Tuple[str, ...] = ()
    if bucket != "short":
        nearby = override.get("nearby", ())
        if airport is not None:
            transit = tuple(
                f"{mode}: {desc}" for mode, desc in sorted(airport.transit.items())
            )
            tips = airport.tips

    return LayoverAdvisory(
        airport_code=airport_code,
        duration_hours=duration_hours,
        bucket=bucket,
        activities=activities,
        services=services,
        warnings=template["warnings"],
        nearby=nearby,
        transit=transit,
        tips=tips,
    )


__all__ = ["BUCKET_TEMPLATES", "LayoverAdvisory", "duration_bucket", "build_advisory"]
