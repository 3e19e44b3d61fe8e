from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .config import Settings
from .models import AirportQuery, AirportRecord, FlightQuery, FlightRecord
from .normalize import (
    NormalizationError,
    clean_code,
    dig,
    first_present,
    parse_timestamp,
    text,
    to_float,
)
from .sources import Source, normalize_each
from .static_data import COMMON_AMENITIES, COMMON_SERVICES

logger = logging.getLogger(__name__)

API_HOST = "aerodatabox.p.rapidapi.com"


class _AeroDataBox(Source):
    name = "aerodatabox"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: str = f"https://{API_HOST}",
    ) -> None:
        super().__init__(settings)
        self.api_key = self.settings.rapidapi_key
        self.base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _headers(self) -> Dict[str, str]:
        return {"X-RapidAPI-Key": self.api_key, "X-RapidAPI-Host": API_HOST}


class AeroDataBoxAirports(_AeroDataBox):
    """Airport metadata by IATA code."""

    def fetch(self, request: AirportQuery) -> Any:
        return self.get_json(
            f"{self.base_url}/airports/iata/{request.airport_code}",
            headers=self._headers(),
        )

    def normalize(self, raw: Any, request: AirportQuery) -> Optional[AirportRecord]:
        if not isinstance(raw, dict) or not raw:
            return None
        code = clean_code(raw.get("iata"))
        if not code:
            raise NormalizationError("airport without iata")

        return AirportRecord(
            code=code,
            name=text(first_present(raw.get("fullName"), raw.get("shortName")), f"{code} Airport"),
            city=text(raw.get("municipalityName")),
            country=text(dig(raw, "country", "name")),
            timezone=text(raw.get("timeZone"), "UTC"),
            amenities=COMMON_AMENITIES,
            services=COMMON_SERVICES,
            latitude=to_float(dig(raw, "location", "lat")),
            longitude=to_float(dig(raw, "location", "lon")),
        )


class AeroDataBoxDepartures(_AeroDataBox):
    """Departures from the origin airport for one day, filtered by arrival airport."""

    def fetch(self, request: FlightQuery) -> Any:
        day = request.date.isoformat()
        return self.get_json(
            f"{self.base_url}/flights/airports/iata/{request.origin}"
            f"/{day}T00:00/{day}T23:59",
            params={"withLeg": "true", "direction": "Departure"},
            headers=self._headers(),
        )

    def normalize(self, raw: Any, request: FlightQuery) -> List[FlightRecord]:
        departures = raw.get("departures") if isinstance(raw, dict) else None
        if not departures:
            return []
        on_route = [
            item
            for item in departures
            if isinstance(item, dict)
            and clean_code(dig(item, "arrival", "airport", "iata")) == request.destination
        ]
        logger.debug(
            "aerodatabox: %d of %d departures go to %s",
            len(on_route),
            len(departures),
            request.destination,
        )
        return normalize_each(
            on_route, lambda item: self._to_record(item, request), self.name
        )

    def _to_record(self, item: Dict[str, Any], request: FlightQuery) -> FlightRecord:
        dep = item.get("departure") or {}
        arr = item.get("arrival") or {}

        origin = clean_code(dig(dep, "airport", "iata")) or request.origin
        destination = clean_code(dig(arr, "airport", "iata"))
        scheduled_dep = parse_timestamp(
            first_present(dig(dep, "scheduledTime", "utc"), dep.get("scheduledTimeUtc"))
        )
        if not destination or scheduled_dep is None:
            raise NormalizationError("departure without destination or time")

        carrier = first_present(
            dig(item, "airline", "iata"),
            (item.get("number") or "").replace(" ", "")[:2] or None,
        )
        return FlightRecord(
            origin=origin,
            destination=destination,
            scheduled_departure=scheduled_dep,
            scheduled_arrival=parse_timestamp(
                first_present(dig(arr, "scheduledTime", "utc"), arr.get("scheduledTimeUtc"))
            ),
            estimated_departure=parse_timestamp(
                first_present(dig(dep, "revisedTime", "utc"), dig(dep, "runwayTime", "utc"))
            ),
            estimated_arrival=parse_timestamp(
                first_present(dig(arr, "revisedTime", "utc"), dig(arr, "predictedTime", "utc"))
            ),
            aircraft_type=dig(item, "aircraft", "model"),
            carrier=text(carrier, ""),
            stops=0,
            origin_position=_position(dig(dep, "airport", "location")),
            destination_position=_position(dig(arr, "airport", "location")),
        )


def _position(location: Any) -> Optional[tuple[float, float]]:
    if not isinstance(location, dict):
        return None
    lat = to_float(location.get("lat"))
    lon = to_float(location.get("lon"))
    if lat is None or lon is None:
        return None
    return (lat, lon)


__all__ = ["AeroDataBoxAirports", "AeroDataBoxDepartures"]
