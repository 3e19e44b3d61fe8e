from __future__ import annotations

import datetime as dt
import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .aerodatabox_fetcher import AeroDataBoxAirports, AeroDataBoxDepartures
from .analytics import EventLogger
from .aviationstack_fetcher import AviationStackAirports
from .cache import InFlightRequests, TTLCache
from .carbon import CarbonConstants, CarbonResult, calculate_carbon, normalize_seat_class
from .config import Settings, get_settings
from .layover import LayoverAdvisory, build_advisory
from .models import (
    AirportQuery,
    AirportRecord,
    FareQuery,
    FlightQuery,
    FlightRecord,
    to_jsonable,
)
from .opensky_fetcher import OpenSkyDepartures
from .orchestrator import FallbackOrchestrator, Resolution
from .planner import TravelPlan, build_travel_plan, connection_risk
from .sources import Source
from .static_data import lookup_airport
from .stats import StatsAggregator, StatsEvent
from .synthetic import mock_fare_calendar, mock_fare_offers, mock_flights, synthetic_airport
from .travelpayouts_fetcher import TravelpayoutsCalendar, TravelpayoutsOffers

logger = logging.getLogger(__name__)

FARE_MODES = ("calendar", "flights")
MAX_ALTERNATIVES = 3


class InvalidRequestError(ValueError):
    """Required identifier missing or malformed; no data source is consulted."""


# ──────────────────────────────────────────────────────────────
# Responses
# ──────────────────────────────────────────────────────────────


class _Response:
    def to_dict(self) -> Dict[str, Any]:
        return to_jsonable(self)


@dataclass(frozen=True, slots=True)
class AirportLookup(_Response):
    data: AirportRecord
    source: str
    synthetic: bool = False
    success: bool = True


@dataclass(frozen=True, slots=True)
class FlightLookup(_Response):
    data: FlightRecord
    carbon: CarbonResult
    planner: TravelPlan
    source: str
    alternatives: Tuple[FlightRecord, ...] = ()
    layover: Optional[LayoverAdvisory] = None
    synthetic: bool = False
    success: bool = True


@dataclass(frozen=True, slots=True)
class LayoverLookup(_Response):
    suggestions: LayoverAdvisory
    source: str
    synthetic: bool = False
    success: bool = True


@dataclass(frozen=True, slots=True)
class FareLookup(_Response):
    mode: str
    fares: Tuple[Any, ...]
    source: str
    synthetic: bool = False
    success: bool = True


# ──────────────────────────────────────────────────────────────
# Input validation
# ──────────────────────────────────────────────────────────────


def _airport_code(value: Any, field: str = "airport_code") -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError(f"{field} is required")
    code = value.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise InvalidRequestError(f"{field} must be a 3-letter IATA code, got {value!r}")
    return code


def _iso_date(value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidRequestError("date is required")
    try:
        return dt.date.fromisoformat(value.strip())
    except ValueError:
        raise InvalidRequestError(f"date must be YYYY-MM-DD, got {value!r}") from None


def _travelers(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidRequestError(f"travelers must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise InvalidRequestError(f"travelers must be an integer, got {value!r}")
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidRequestError(f"travelers must be an integer, got {value!r}") from None


def _route(origin: Any, destination: Any) -> Tuple[str, str]:
    origin = _airport_code(origin, "origin")
    destination = _airport_code(destination, "destination")
    if origin == destination:
        raise InvalidRequestError("origin and destination must differ")
    return origin, destination


class TravelEngine:
    """Request operations over the fallback chain and derivation library.

    One instance per process owns the caches, the stats aggregator and the
    in-flight map; handlers share it by reference.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        airport_providers: Optional[Sequence[Source]] = None,
        flight_providers: Optional[Sequence[Source]] = None,
        calendar_providers: Optional[Sequence[Source]] = None,
        offer_providers: Optional[Sequence[Source]] = None,
        stats: Optional[StatsAggregator] = None,
        analytics: Optional[EventLogger] = None,
        clock: Callable[[], float] = time.monotonic,
        today: Optional[Callable[[], dt.date]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        s = self.settings

        self.airport_providers = list(
            airport_providers
            if airport_providers is not None
            else (AviationStackAirports(s), AeroDataBoxAirports(s))
        )
        self.flight_providers = list(
            flight_providers
            if flight_providers is not None
            else (OpenSkyDepartures(s), AeroDataBoxDepartures(s))
        )
        self.calendar_providers = list(
            calendar_providers if calendar_providers is not None else (TravelpayoutsCalendar(s),)
        )
        self.offer_providers = list(
            offer_providers if offer_providers is not None else (TravelpayoutsOffers(s),)
        )

        self.airport_cache = TTLCache(
            s.airport_cache_ttl_s, s.cache_max_entries, name="airports", clock=clock
        )
        self.flight_cache = TTLCache(
            s.flight_cache_ttl_s, s.cache_max_entries, name="flights", clock=clock
        )
        self.fare_cache = TTLCache(
            s.fare_cache_ttl_s, s.cache_max_entries, name="fares", clock=clock
        )
        self.orchestrator = FallbackOrchestrator(InFlightRequests())
        self.stats = stats if stats is not None else StatsAggregator(s.stats_max_buckets)
        self.analytics = analytics if analytics is not None else EventLogger(s.analytics_sample_rate)
        self.carbon_constants = CarbonConstants(
            usd_per_ton=s.usd_per_ton,
            kg_per_tree_per_year=s.kg_per_tree,
            saf_reduction=s.saf_reduction,
            seat_multipliers=s.seat_multipliers(),
        )
        self._clock = clock
        self._today = today or (lambda: dt.datetime.now(dt.timezone.utc).date())

    # ──────────────────────────────────────────────────────────

    def lookup_airport(self, airport_code: Any) -> AirportLookup:
        query = AirportQuery(_airport_code(airport_code))
        started = self._clock()
        resolution = self._resolve_airport(query)
        self._record(query.airport_code, "airport", resolution, started)
        return AirportLookup(
            data=resolution.data,
            source=resolution.source,
            synthetic=resolution.synthetic,
        )

    def lookup_flight(
        self,
        origin: Any,
        destination: Any,
        date: Any,
        travelers: Any = 1,
        seat_class: str = "economy",
        sustainable_fuel: bool = False,
    ) -> FlightLookup:
        origin, destination = _route(origin, destination)
        day = _iso_date(date)
        travelers = _travelers(travelers)
        if travelers < 1:
            raise InvalidRequestError("travelers must be at least 1")
        seat = normalize_seat_class(seat_class)
        if seat not in self.carbon_constants.seat_multipliers:
            raise InvalidRequestError(f"unknown seat class {seat_class!r}")

        query = FlightQuery(origin, destination, day, travelers)
        started = self._clock()
        resolution = self.orchestrator.resolve(
            query,
            cache=self.flight_cache,
            providers=self.flight_providers,
            synthesize=mock_flights,
            synthetic_tag="mock",
        )
        flights: List[FlightRecord] = list(resolution.data)
        primary = flights[0]

        carbon = calculate_carbon(
            primary,
            travelers,
            seat,
            sustainable_fuel=sustainable_fuel,
            constants=self.carbon_constants,
        )
        planner = build_travel_plan(primary, self.settings.default_layover_min)
        self._record(f"{origin}-{destination}", "flight", resolution, started)

        return FlightLookup(
            data=primary,
            carbon=carbon,
            planner=planner,
            source=resolution.source,
            alternatives=tuple(flights[1 : 1 + MAX_ALTERNATIVES]),
            layover=self._connection_advisory(primary),
            synthetic=resolution.synthetic,
        )

    def layover_advisory(
        self, airport_code: Any, duration_hours: Any = None
    ) -> LayoverLookup:
        query = AirportQuery(_airport_code(airport_code))
        if duration_hours is None:
            hours = self.settings.default_layover_hours
        else:
            try:
                hours = float(duration_hours)
            except (TypeError, ValueError):
                raise InvalidRequestError(
                    f"duration_hours must be a number, got {duration_hours!r}"
                ) from None
            if not math.isfinite(hours) or hours < 0:
                raise InvalidRequestError(
                    f"duration_hours must be a finite non-negative number, got {duration_hours!r}"
                )

        started = self._clock()
        resolution = self._resolve_airport(query)
        advisory = build_advisory(query.airport_code, hours, resolution.data)
        self._record(query.airport_code, "layover", resolution, started)
        return LayoverLookup(
            suggestions=advisory,
            source=resolution.source,
            synthetic=resolution.synthetic,
        )

    def search_fares(
        self, origin: Any, destination: Any, date: Any, mode: str = "calendar"
    ) -> FareLookup:
        origin, destination = _route(origin, destination)
        day = _iso_date(date)
        mode = (mode or "calendar").strip().lower()
        if mode not in FARE_MODES:
            raise InvalidRequestError(f"mode must be one of {FARE_MODES}, got {mode!r}")

        query = FareQuery(origin, destination, day, mode)
        started = self._clock()
        if mode == "calendar":
            providers, synthesize = self.calendar_providers, mock_fare_calendar
        else:
            providers, synthesize = self.offer_providers, mock_fare_offers
        resolution = self.orchestrator.resolve(
            query,
            cache=self.fare_cache,
            providers=providers,
            synthesize=synthesize,
            synthetic_tag="mock",
        )
        self._record(f"{origin}-{destination}", f"fares:{mode}", resolution, started)
        return FareLookup(
            mode=mode,
            fares=tuple(resolution.data),
            source=resolution.source,
            synthetic=resolution.synthetic,
        )

    def stats_snapshot(self) -> Dict[str, Any]:
        return self.stats.snapshot(self._today())

    def health(self) -> Dict[str, Any]:
        return {
            "status": "operational",
            "providers": self.settings.configured_providers(),
            "caches": [
                c.stats() for c in (self.airport_cache, self.flight_cache, self.fare_cache)
            ],
            "stats_buckets": len(self.stats),
            "in_flight": self.orchestrator.in_flight.pending(),
        }

    # ──────────────────────────────────────────────────────────

    def _resolve_airport(self, query: AirportQuery) -> Resolution:
        return self.orchestrator.resolve(
            query,
            cache=self.airport_cache,
            providers=self.airport_providers,
            synthesize=synthetic_airport,
            static=lambda q: lookup_airport(q.airport_code),
        )

    def _connection_advisory(self, flight: FlightRecord) -> Optional[LayoverAdvisory]:
        """Advisory for the connecting airport of a multi-leg itinerary."""
        if flight.stops <= 0 or len(flight.legs) < 2:
            return None
        risk = connection_risk(flight, self.settings.default_layover_min)
        hub = flight.legs[0].destination
        return build_advisory(hub, risk.layover_minutes / 60.0, lookup_airport(hub))

    def _record(
        self, key: str, action: str, resolution: Resolution, started: float
    ) -> None:
        latency_ms = (self._clock() - started) * 1000.0
        event = StatsEvent(
            day=self._today(),
            key=key,
            success=resolution.success and not resolution.synthetic,
            latency_ms=latency_ms,
            source=resolution.source,
            action=action,
        )
        try:
            self.stats.record(event)
        except Exception:
            logger.exception("Failed to record stats for %s", key)
        try:
            self.analytics.emit(
                {
                    "key": key,
                    "action": action,
                    "source": resolution.source,
                    "synthetic": resolution.synthetic,
                    "latency_ms": round(latency_ms, 1),
                }
            )
        except Exception:
            logger.exception("Failed to emit analytics for %s", key)


__all__ = [
    "InvalidRequestError",
    "AirportLookup",
    "FlightLookup",
    "LayoverLookup",
    "FareLookup",
    "TravelEngine",
]
