from __future__ import annotations

import math
from typing import Optional, Tuple

from .models import FlightRecord

EARTH_RADIUS_KM = 6371.0
CRUISE_SPEED_KMH = 850.0
DEFAULT_DISTANCE_KM = 1500.0

# Symmetric: lookups try both directions.
ROUTE_DISTANCES_KM = {
    # Domestic US
    ("JFK", "LAX"): 3975, ("LAX", "ORD"): 2804, ("DFW", "ORD"): 1290,
    ("ATL", "LAX"): 1944, ("DEN", "JFK"): 2592, ("SFO", "MIA"): 4176,
    # Transatlantic
    ("JFK", "LHR"): 5548, ("LAX", "LHR"): 8775, ("ORD", "LHR"): 6340,
    ("MIA", "LHR"): 7120, ("SEA", "LHR"): 7720, ("BOS", "LHR"): 5270,
    # Transpacific
    ("LAX", "HND"): 8808, ("SFO", "HND"): 9130, ("JFK", "NRT"): 10850,
    ("LAX", "SYD"): 12039, ("YVR", "SYD"): 12575,
    # Europe and Middle East
    ("LHR", "CDG"): 344, ("FRA", "AMS"): 365, ("MAD", "LIS"): 503,
    ("CDG", "IST"): 2250, ("LHR", "DXB"): 5492,
}


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometers."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def route_distance_km(origin: str, destination: str) -> Optional[float]:
    dist = ROUTE_DISTANCES_KM.get((origin, destination))
    if dist is None:
        dist = ROUTE_DISTANCES_KM.get((destination, origin))
    return float(dist) if dist is not None else None


def duration_distance_km(flight: FlightRecord) -> Optional[float]:
    if flight.scheduled_arrival is None:
        return None
    hours = (
        flight.scheduled_arrival - flight.scheduled_departure
    ).total_seconds() / 3600.0
    if hours <= 0:
        return None
    return hours * CRUISE_SPEED_KMH


def estimate_distance_km(flight: FlightRecord) -> Tuple[float, str]:
    """Return ``(distance, provenance)`` using the first tier that answers.

    Tiers: ``coordinates`` (haversine), ``route`` (static table),
    ``duration`` (scheduled block time at cruise speed), ``default``.
    """
    if flight.origin_position and flight.destination_position:
        return (
            haversine_km(*flight.origin_position, *flight.destination_position),
            "coordinates",
        )

    dist = route_distance_km(flight.origin, flight.destination)
    if dist is not None:
        return dist, "route"

    dist = duration_distance_km(flight)
    if dist is not None:
        return dist, "duration"

    return DEFAULT_DISTANCE_KM, "default"


__all__ = [
    "EARTH_RADIUS_KM",
    "DEFAULT_DISTANCE_KM",
    "ROUTE_DISTANCES_KM",
    "haversine_km",
    "route_distance_km",
    "duration_distance_km",
    "estimate_distance_km",
]
