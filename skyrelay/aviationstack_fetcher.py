from __future__ import annotations

from typing import Any, Optional

from .config import Settings
from .models import AirportQuery, AirportRecord
from .normalize import NormalizationError, clean_code, first_present, string_list, text, to_float
from .sources import ProviderError, Source
from .static_data import COMMON_AMENITIES, COMMON_SERVICES


class AviationStackAirports(Source):
    """Airport metadata from the AviationStack ``/v1/airports`` search."""

    name = "aviationstack"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        base_url: str = "http://api.aviationstack.com/v1",
    ) -> None:
        super().__init__(settings)
        self.api_key = self.settings.aviationstack_api_key
        self.base_url = base_url.rstrip("/")

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def fetch(self, request: AirportQuery) -> Any:
        data = self.get_json(
            f"{self.base_url}/airports",
            params={
                "access_key": self.api_key,
                "search": request.airport_code,
                "limit": 1,
            },
        )
        if isinstance(data, dict) and data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise ProviderError(self.name, f"API error: {message}")
        return data

    def normalize(self, raw: Any, request: AirportQuery) -> Optional[AirportRecord]:
        items = raw.get("data") if isinstance(raw, dict) else None
        if not items:
            return None
        item = items[0] if isinstance(items[0], dict) else {}

        code = clean_code(item.get("iata_code"))
        if not code:
            raise NormalizationError("airport without iata_code")
        if code != request.airport_code:
            # search= is fuzzy; a different airport is not an answer
            raise NormalizationError(f"search returned {code}")

        terminal = item.get("terminal")
        return AirportRecord(
            code=code,
            name=text(item.get("airport_name"), f"{code} Airport"),
            city=text(first_present(item.get("city_name"), item.get("city_iata_code"))),
            country=text(item.get("country_name")),
            timezone=text(item.get("timezone"), "UTC"),
            terminals=string_list([terminal] if terminal else []),
            amenities=COMMON_AMENITIES,
            services=COMMON_SERVICES,
            latitude=to_float(item.get("latitude")),
            longitude=to_float(item.get("longitude")),
        )


__all__ = ["AviationStackAirports"]
