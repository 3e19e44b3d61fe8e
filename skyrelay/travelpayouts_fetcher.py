from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional

from .config import Settings
from .models import FareOffer, FarePoint, FareQuery
from .normalize import NormalizationError, clean_code, parse_timestamp
from .sources import ProviderError, Source, normalize_each

logger = logging.getLogger(__name__)


def _price(value: Any) -> Decimal:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise NormalizationError(f"bad price {value!r}")
    if not price.is_finite() or price <= 0:
        raise NormalizationError(f"bad price {value!r}")
    return price


def _day(value: Any) -> Optional[dt.date]:
    if not isinstance(value, str) or len(value) < 10:
        return None
    try:
        return dt.date.fromisoformat(value[:10])
    except ValueError:
        return None


def mark_cheapest(points: List[FarePoint]) -> List[FarePoint]:
    """Flag every point sharing the lowest price."""
    if not points:
        return points
    lowest = min(p.price for p in points)
    return [
        FarePoint(
            date=p.date,
            price=p.price,
            currency=p.currency,
            is_cheapest=p.price == lowest,
            airline=p.airline,
        )
        for p in sorted(points, key=lambda p: p.date)
    ]


class _Travelpayouts(Source):
    name = "travelpayouts"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: str = "https://api.travelpayouts.com",
        currency: str = "usd",
    ) -> None:
        super().__init__(settings)
        self.token = self.settings.travelpayouts_token
        self.marker = self.settings.travelpayouts_marker
        self.base_url = base_url.rstrip("/")
        self.currency = currency

    def is_configured(self) -> bool:
        return bool(self.token)

    def _get(self, path: str, params: dict) -> Any:
        data = self.get_json(
            f"{self.base_url}{path}",
            params={**params, "token": self.token},
            headers={"Accept-Encoding": "gzip", "Accept": "application/json"},
        )
        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else data
            raise ProviderError(self.name, f"API error: {error}")
        return data


class TravelpayoutsCalendar(_Travelpayouts):
    """Cheapest fare per day for the month around the requested date."""

    def fetch(self, request: FareQuery) -> Any:
        return self._get(
            "/v2/prices/month-matrix",
            {
                "currency": self.currency,
                "origin": request.origin,
                "destination": request.destination,
                "month": request.date.replace(day=1).isoformat(),
                "show_to_affiliates": "true",
            },
        )

    def normalize(self, raw: Any, request: FareQuery) -> List[FarePoint]:
        currency = str(raw.get("currency") or self.currency).upper()

        def to_point(item: Any) -> FarePoint:
            if not isinstance(item, dict):
                raise NormalizationError("calendar item is not an object")
            day = _day(item.get("depart_date"))
            if day is None:
                raise NormalizationError("calendar item without depart_date")
            return FarePoint(
                date=day,
                price=_price(item.get("value")),
                currency=str(item.get("currency") or currency).upper(),
                airline=item.get("gate") or item.get("airline"),
            )

        points = normalize_each(raw.get("data") or [], to_point, self.name)
        logger.debug("travelpayouts: %d calendar days for %s", len(points), request.fingerprint)
        return mark_cheapest(points)


class TravelpayoutsOffers(_Travelpayouts):
    """Bookable offers from the Aviasales ``prices_for_dates`` endpoint."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: str = "https://api.travelpayouts.com",
        currency: str = "usd",
        domain: str = "https://www.aviasales.com",
        limit: int = 30,
        max_age_h: int = 12,
    ) -> None:
        super().__init__(settings, base_url, currency)
        self.domain = domain.rstrip("/")
        self.limit = limit
        self.max_age_h = max_age_h

    def fetch(self, request: FareQuery) -> Any:
        params = {
            "origin": request.origin,
            "destination": request.destination,
            "departure_at": request.date.isoformat(),
            "currency": self.currency,
            "one_way": "true",
            "sorting": "price",
            "limit": self.limit,
            "max_age": self.max_age_h,
        }
        if self.marker:
            params["marker"] = self.marker
        return self._get("/aviasales/v3/prices_for_dates", params)

    def normalize(self, raw: Any, request: FareQuery) -> List[FareOffer]:
        currency = str(raw.get("currency") or self.currency).upper()
        offers = normalize_each(
            raw.get("data") or [], lambda item: self._to_offer(item, currency), self.name
        )
        return sorted(offers, key=lambda o: o.price)

    def _to_offer(self, item: Any, currency: str) -> FareOffer:
        """Map one JSON record onto a :class:`FareOffer`."""
        if not isinstance(item, dict) or not item.get("link"):
            raise NormalizationError("offer without link")

        origin = clean_code(item.get("origin"))
        destination = clean_code(item.get("destination"))
        depart = _day(item.get("departure_at") or item.get("depart_date"))
        if not origin or not destination or depart is None:
            raise NormalizationError("offer without route or departure")

        found_raw = item.get("found_at")
        found_at = parse_timestamp(found_raw) if found_raw else None
        if found_raw and found_at is None:
            raise NormalizationError(f"bad found_at {found_raw!r}")

        return FareOffer(
            origin=origin,
            destination=destination,
            depart_date=depart,
            return_date=_day(item.get("return_at") or item.get("return_date")),
            price=_price(item.get("price")),
            currency=currency,
            airline=item.get("airline", ""),
            stops=int(item.get("transfers", item.get("number_of_changes", 0)) or 0),
            deep_link=f"{self.domain}{item['link']}",
            found_at=found_at,
        )


__all__ = ["TravelpayoutsCalendar", "TravelpayoutsOffers", "mark_cheapest"]
