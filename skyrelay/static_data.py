"""Curated airport dataset consulted before any cache or provider."""

from __future__ import annotations

from typing import Dict, Optional

from .models import AirportRecord

COMMON_AMENITIES = frozenset(
    {
        "Free Wi-Fi throughout terminals",
        "Multiple dining options post-security",
        "Lounges available for premium passengers",
        "Charging stations near all gates",
        "Currency exchange and ATMs",
    }
)

COMMON_SERVICES = frozenset(
    {
        "Luggage storage and lockers",
        "Baggage wrapping services",
        "Transportation to city center",
    }
)


def _airport(
    code: str,
    name: str,
    city: str,
    country: str,
    timezone: str,
    lat: float,
    lon: float,
    terminals: tuple[str, ...],
    amenities: tuple[str, ...] = (),
    transit: Optional[Dict[str, str]] = None,
    tips: tuple[str, ...] = (),
) -> AirportRecord:
    return AirportRecord(
        code=code,
        name=name,
        city=city,
        country=country,
        timezone=timezone,
        terminals=terminals,
        amenities=COMMON_AMENITIES | frozenset(amenities),
        services=COMMON_SERVICES,
        transit=transit or {},
        tips=tips,
        latitude=lat,
        longitude=lon,
    )


STATIC_AIRPORTS: Dict[str, AirportRecord] = {
    a.code: a
    for a in (
        _airport(
            "JFK", "John F. Kennedy International Airport", "New York",
            "United States", "America/New_York", 40.6413, -73.7781,
            ("1", "4", "5", "7", "8"),
            amenities=("Minute Suites sleep pods", "Art galleries throughout terminals"),
            transit={
                "train": "AirTrain to Jamaica, then LIRR or subway to Manhattan",
                "taxi": "Flat fare to Manhattan, 45-60 minutes",
            },
            tips=("TWA Hotel offers day rooms connected to Terminal 5",),
        ),
        _airport(
            "LAX", "Los Angeles International Airport", "Los Angeles",
            "United States", "America/Los_Angeles", 33.9416, -118.4085,
            ("1", "2", "3", "4", "5", "6", "7", "8", "B"),
            transit={
                "bus": "FlyAway bus to Union Station",
                "shuttle": "LAX-it lot for taxis and rideshare",
            },
        ),
        _airport(
            "ORD", "O'Hare International Airport", "Chicago",
            "United States", "America/Chicago", 41.9742, -87.9073,
            ("1", "2", "3", "5"),
            transit={"train": "CTA Blue Line to the Loop, about 45 minutes"},
        ),
        _airport(
            "ATL", "Hartsfield-Jackson Atlanta International Airport", "Atlanta",
            "United States", "America/New_York", 33.6407, -84.4277,
            ("Domestic", "International"),
            transit={"train": "MARTA Red/Gold line to downtown, about 20 minutes"},
        ),
        _airport(
            "SFO", "San Francisco International Airport", "San Francisco",
            "United States", "America/Los_Angeles", 37.6213, -122.3790,
            ("1", "2", "3", "International"),
            transit={"train": "BART to downtown, about 30 minutes"},
        ),
        _airport(
            "LHR", "Heathrow Airport", "London", "United Kingdom",
            "Europe/London", 51.4700, -0.4543, ("2", "3", "4", "5"),
            amenities=("Sleep pods in Terminal 5", "Spa and shower facilities"),
            transit={
                "train": "Heathrow Express to Paddington, 15 minutes",
                "tube": "Piccadilly line to Central London, about 50 minutes",
            },
            tips=("Terminal transfers can take 45 minutes or more",),
        ),
        _airport(
            "CDG", "Paris Charles de Gaulle Airport", "Paris", "France",
            "Europe/Paris", 49.0097, 2.5479, ("1", "2A", "2B", "2C", "2D", "2E", "2F", "2G", "3"),
            transit={"train": "RER B to central Paris, about 35 minutes"},
        ),
        _airport(
            "FRA", "Frankfurt Airport", "Frankfurt", "Germany",
            "Europe/Berlin", 50.0379, 8.5622, ("1", "2"),
            transit={"train": "S-Bahn S8/S9 to Hauptbahnhof, about 12 minutes"},
        ),
        _airport(
            "AMS", "Amsterdam Airport Schiphol", "Amsterdam", "Netherlands",
            "Europe/Amsterdam", 52.3105, 4.7683, ("1", "2", "3"),
            amenities=("Rijksmuseum annex airside",),
            transit={"train": "Direct train to Amsterdam Centraal, about 15 minutes"},
        ),
        _airport(
            "DXB", "Dubai International Airport", "Dubai",
            "United Arab Emirates", "Asia/Dubai", 25.2532, 55.3657, ("1", "2", "3"),
            transit={"metro": "Red Line from Terminals 1 and 3 to downtown"},
        ),
        _airport(
            "SIN", "Singapore Changi Airport", "Singapore", "Singapore",
            "Asia/Singapore", 1.3644, 103.9915, ("1", "2", "3", "4"),
            amenities=("Butterfly garden", "Rooftop pool in Terminal 1"),
            transit={"metro": "MRT East-West line to the city, about 30 minutes"},
            tips=("Free city tours run for layovers of 5.5 hours or more",),
        ),
        _airport(
            "HND", "Tokyo Haneda Airport", "Tokyo", "Japan", "Asia/Tokyo",
            35.5494, 139.7798, ("1", "2", "3"),
            transit={"train": "Keikyu line or monorail to central Tokyo, about 25 minutes"},
        ),
    )
}


# Airport-specific layover templates appended to the bucketed advisory.
LAYOVER_OVERRIDES: Dict[str, Dict[str, tuple[str, ...]]] = {
    "JFK": {
        "nearby": (
            "Rockaway Beach (30 min by A train)",
            "Jamaica Bay Wildlife Refuge (20 min)",
            "TWA Hotel at JFK (connected via AirTrain)",
        ),
        "services": (
            "Minute Suites sleep pods",
            "Holiday Inn JFK Airport (5 min shuttle)",
        ),
        "activities": ("Art galleries and live music in Terminal 4",),
    },
    "LHR": {
        "nearby": (
            "Windsor Castle (25 min by taxi)",
            "Kew Gardens (30 min by Tube)",
        ),
        "services": (
            "Sofitel London Heathrow (connected to Terminal 5)",
            "YOTELAIR London Heathrow (Terminal 4)",
        ),
        "activities": ("Heathrow Airport Walks within the airport perimeter",),
    },
    "SIN": {
        "nearby": ("Marina Bay (30 min by MRT)",),
        "services": ("Free Singapore tour desk in the transit area",),
        "activities": ("Jewel Changi Rain Vortex", "Butterfly garden in Terminal 3"),
    },
}


def lookup_airport(code: str) -> Optional[AirportRecord]:
    return STATIC_AIRPORTS.get(code)


__all__ = ["STATIC_AIRPORTS", "LAYOVER_OVERRIDES", "COMMON_AMENITIES", "COMMON_SERVICES", "lookup_airport"]
