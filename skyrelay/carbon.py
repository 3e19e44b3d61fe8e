"""Carbon accounting for canonical flight records.

The factors are kg CO2 per passenger-kilometer, keyed by aircraft type code
with category fallbacks (``small``, ``medium``, ``large``, ``regional``).
Offset price, tree absorption, seat multipliers and the sustainable-fuel
reduction are heuristics; they live in :class:`CarbonConstants` so callers
can override them from configuration.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Mapping, Optional

from .geo import estimate_distance_km
from .models import FlightRecord
from .normalize import NON_ALNUM_RE

logger = logging.getLogger(__name__)

EMISSION_FACTORS: Mapping[str, float] = {
    # Narrow-body jets
    "A319": 0.097, "A320": 0.095, "A321": 0.094,
    "B737": 0.096, "B738": 0.094, "B739": 0.092,
    # Wide-body jets
    "A330": 0.090, "A340": 0.105, "A359": 0.085, "A388": 0.105,
    "B767": 0.100, "B777": 0.095, "B788": 0.088, "B789": 0.087,
    # Regional jets and turboprops
    "E170": 0.102, "E190": 0.098, "CRJ2": 0.110, "CRJ9": 0.102,
    "AT72": 0.115, "DH8D": 0.108,
    # Category fallbacks
    "small": 0.115, "medium": 0.098, "large": 0.090, "regional": 0.105,
}

DEFAULT_CATEGORY = "medium"

# Checked in order; the first matching prefix wins.
MODEL_PREFIXES = (
    ("BOEING7378", "B738"),
    ("BOEING7379", "B739"),
    ("BOEING737", "B738"),
    ("B7378", "B738"),
    ("B7379", "B739"),
    ("B737", "B738"),
    ("B38M", "B738"),
    ("BOEING7879", "B789"),
    ("BOEING787", "B788"),
    ("B7879", "B789"),
    ("B787", "B788"),
    ("BOEING777", "B777"),
    ("B77", "B777"),
    ("BOEING767", "B767"),
    ("AIRBUSA320", "A320"),
    ("AIRBUSA321", "A321"),
    ("AIRBUSA319", "A319"),
    ("AIRBUSA330", "A330"),
    ("AIRBUSA350", "A359"),
    ("A350", "A359"),
    ("AIRBUSA380", "A388"),
    ("A380", "A388"),
    ("A20N", "A320"),
    ("A21N", "A321"),
    ("A319", "A319"),
    ("A320", "A320"),
    ("A321", "A321"),
    ("EMBRAER190", "E190"),
    ("EMBRAER170", "E170"),
    ("ERJ190", "E190"),
    ("CRJ900", "CRJ9"),
    ("CRJ200", "CRJ2"),
    ("ATR72", "AT72"),
    ("DASH8", "DH8D"),
)

CARRIER_AIRCRAFT = {
    "AA": "B738", "DL": "B739", "UA": "A320", "WN": "B738",
    "B6": "A321", "AS": "B739", "LH": "A320", "BA": "A320",
    "AF": "A320", "KL": "B738", "FR": "B738", "U2": "A320",
    "EK": "A388", "QR": "A359", "SQ": "A359", "NH": "B788",
}


@dataclass(frozen=True, slots=True)
class CarbonConstants:
    usd_per_ton: float = 20.0
    kg_per_tree_per_year: float = 21.0
    saf_reduction: float = 0.6
    seat_multipliers: Mapping[str, float] = field(
        default_factory=lambda: {"economy": 1.0, "premium": 1.5, "business": 3.0}
    )

    def seat_multiplier(self, seat_class: str) -> float:
        return self.seat_multipliers.get(normalize_seat_class(seat_class), 1.0)


@dataclass(frozen=True, slots=True)
class CarbonResult:
    kg_per_pax: int
    total_kg: int
    distance_km: int
    distance_source: str
    aircraft_type: str
    emission_factor: float
    seat_class: str
    passengers: int
    offset_cost_usd: float
    offset_trees: int
    saf_applied: bool = False
    saf_savings_kg: int = 0
    accuracy: str = "estimated"


def normalize_seat_class(seat_class: Optional[str]) -> str:
    value = (seat_class or "economy").strip().lower().replace("-", "_")
    if value in ("premium_economy", "premiumeconomy"):
        return "premium"
    return value


def normalize_model(model: str) -> str:
    """Strip punctuation, uppercase and fold known model prefixes."""
    code = NON_ALNUM_RE.sub("", model).upper()
    for prefix, canonical in MODEL_PREFIXES:
        if code.startswith(prefix):
            return canonical
    return code


def infer_aircraft_type(
    aircraft_model: Optional[str], carrier: Optional[str]
) -> str:
    """Pick the aircraft type: explicit model, carrier's typical fleet, then ``medium``."""
    if aircraft_model and NON_ALNUM_RE.sub("", aircraft_model):
        return normalize_model(aircraft_model)
    if carrier:
        typical = CARRIER_AIRCRAFT.get(carrier.strip().upper()[:2])
        if typical:
            return typical
    return DEFAULT_CATEGORY


def emission_factor(aircraft_type: str) -> float:
    return EMISSION_FACTORS.get(aircraft_type, EMISSION_FACTORS[DEFAULT_CATEGORY])


def carbon_for_distance(
    distance_km: float,
    aircraft_type: str,
    passengers: int = 1,
    seat_class: str = "economy",
    *,
    sustainable_fuel: bool = False,
    constants: Optional[CarbonConstants] = None,
    distance_source: str = "given",
) -> CarbonResult:
    consts = constants or CarbonConstants()
    passengers = max(int(passengers), 1)
    factor = emission_factor(aircraft_type)

    kg_per_pax = distance_km * factor * consts.seat_multiplier(seat_class)
    savings_per_pax = 0.0
    if sustainable_fuel:
        savings_per_pax = kg_per_pax * consts.saf_reduction
        kg_per_pax -= savings_per_pax

    total_kg = kg_per_pax * passengers
    return CarbonResult(
        kg_per_pax=round(kg_per_pax),
        total_kg=round(total_kg),
        distance_km=round(distance_km),
        distance_source=distance_source,
        aircraft_type=aircraft_type,
        emission_factor=factor,
        seat_class=normalize_seat_class(seat_class),
        passengers=passengers,
        offset_cost_usd=round(total_kg / 1000.0 * consts.usd_per_ton, 2),
        offset_trees=math.ceil(total_kg / consts.kg_per_tree_per_year),
        saf_applied=sustainable_fuel,
        saf_savings_kg=round(savings_per_pax * passengers),
        accuracy="high" if distance_source == "coordinates" else "estimated",
    )


def calculate_carbon(
    flight: FlightRecord,
    passengers: int = 1,
    seat_class: str = "economy",
    *,
    sustainable_fuel: bool = False,
    constants: Optional[CarbonConstants] = None,
) -> CarbonResult:
    distance, source = estimate_distance_km(flight)
    aircraft_type = infer_aircraft_type(flight.aircraft_type, flight.carrier)
    logger.debug(
        "Carbon for %s: %.0f km (%s), aircraft %s",
        flight.route,
        distance,
        source,
        aircraft_type,
    )
    return carbon_for_distance(
        distance,
        aircraft_type,
        passengers,
        seat_class,
        sustainable_fuel=sustainable_fuel,
        constants=constants,
        distance_source=source,
    )


__all__ = [
    "EMISSION_FACTORS",
    "CARRIER_AIRCRAFT",
    "CarbonConstants",
    "CarbonResult",
    "normalize_seat_class",
    "normalize_model",
    "infer_aircraft_type",
    "emission_factor",
    "carbon_for_distance",
    "calculate_carbon",
]
