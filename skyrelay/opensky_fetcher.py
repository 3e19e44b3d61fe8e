from __future__ import annotations

import calendar
import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from .config import Settings
from .models import FlightQuery, FlightRecord
from .normalize import NormalizationError, clean_code, parse_timestamp, text
from .sources import ProviderError, Source, normalize_each

logger = logging.getLogger(__name__)

TOKEN_URL = (
    "https://auth.opensky-network.org/auth/realms/opensky-network"
    "/protocol/openid-connect/token"
)
TOKEN_REFRESH_MARGIN_S = 60

# OpenSky speaks ICAO; requests arrive as IATA.
ICAO_BY_IATA = {
    "JFK": "KJFK", "LAX": "KLAX", "ORD": "KORD", "ATL": "KATL",
    "SFO": "KSFO", "DFW": "KDFW", "MIA": "KMIA", "SEA": "KSEA",
    "BOS": "KBOS", "DEN": "KDEN", "LHR": "EGLL", "CDG": "LFPG",
    "FRA": "EDDF", "AMS": "EHAM", "MAD": "LEMD", "DXB": "OMDB",
    "SIN": "WSSS", "HND": "RJTT", "NRT": "RJAA", "SYD": "YSSY",
}
IATA_BY_ICAO = {icao: iata for iata, icao in ICAO_BY_IATA.items()}


def to_icao(code: str) -> str:
    return ICAO_BY_IATA.get(code, code)


def to_iata(code: Optional[str]) -> Optional[str]:
    if not code:
        return None
    return IATA_BY_ICAO.get(code, code)


class OpenSkyDepartures(Source):
    """Departures seen by the OpenSky network, filtered to one arrival airport."""

    name = "opensky"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: str = "https://opensky-network.org/api",
        token_url: str = TOKEN_URL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(settings)
        self.client_id = self.settings.opensky_client_id
        self.client_secret = self.settings.opensky_client_secret
        self.base_url = base_url.rstrip("/")
        self.token_url = token_url
        self._clock = clock
        self._token: Optional[str] = None
        self._token_expiry = 0.0

    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def access_token(self) -> str:
        """Client-credentials token, reused until shortly before it expires."""
        if self._token and self._clock() < self._token_expiry:
            return self._token

        resp = requests.post(
            self.token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            },
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise ProviderError(self.name, f"token HTTP {resp.status_code}")
        payload = resp.json()
        token = payload.get("access_token")
        if not token:
            raise ProviderError(self.name, "token response without access_token")

        expires_in = float(payload.get("expires_in") or 0)
        self._token = token
        self._token_expiry = self._clock() + max(expires_in - TOKEN_REFRESH_MARGIN_S, 0)
        logger.debug("opensky token refreshed, valid for %.0fs", expires_in)
        return token

    def fetch(self, request: FlightQuery) -> Any:
        token = self.access_token()
        begin = calendar.timegm(request.date.timetuple())
        return self.get_json(
            f"{self.base_url}/flights/departure",
            params={
                "airport": to_icao(request.origin),
                "begin": begin,
                "end": begin + 86399,
            },
            headers={"Authorization": f"Bearer {token}"},
        )

    def normalize(self, raw: Any, request: FlightQuery) -> List[FlightRecord]:
        if not isinstance(raw, list):
            return []
        arrival = to_icao(request.destination)
        on_route = [
            item
            for item in raw
            if isinstance(item, dict)
            and clean_code(item.get("estArrivalAirport")) in (arrival, request.destination)
        ]
        return normalize_each(
            on_route, lambda item: self._to_record(item, request), self.name
        )

    def _to_record(self, item: Dict[str, Any], request: FlightQuery) -> FlightRecord:
        departed = parse_timestamp(item.get("firstSeen"))
        destination = to_iata(clean_code(item.get("estArrivalAirport")))
        if departed is None or not destination:
            raise NormalizationError("state vector without firstSeen or arrival")

        callsign = text(item.get("callsign"), "").replace(" ", "")
        return FlightRecord(
            origin=to_iata(clean_code(item.get("estDepartureAirport"))) or request.origin,
            destination=destination,
            scheduled_departure=departed,
            scheduled_arrival=parse_timestamp(item.get("lastSeen")),
            aircraft_type=None,
            carrier=callsign,
            stops=0,
        )


__all__ = ["OpenSkyDepartures", "to_icao", "to_iata"]
