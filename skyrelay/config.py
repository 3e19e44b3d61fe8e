from __future__ import annotations

from functools import lru_cache
from typing import Dict

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(populate_by_name=True, extra="ignore")

    # Provider credentials; empty means the provider is unavailable.
    aviationstack_api_key: str = Field("", alias="AVIATIONSTACK_API_KEY")
    rapidapi_key: str = Field("", alias="RAPIDAPI_KEY")
    opensky_client_id: str = Field("", alias="OPENSKY_CLIENT_ID")
    opensky_client_secret: str = Field("", alias="OPENSKY_CLIENT_SECRET")
    travelpayouts_token: str = Field("", alias="TRAVELPAYOUTS_TOKEN")
    travelpayouts_marker: str = Field("", alias="TRAVELPAYOUTS_MARKER")

    request_timeout_s: float = Field(10.0, alias="REQUEST_TIMEOUT_S")

    airport_cache_ttl_s: float = Field(1800.0, alias="AIRPORT_CACHE_TTL_S")
    flight_cache_ttl_s: float = Field(600.0, alias="FLIGHT_CACHE_TTL_S")
    fare_cache_ttl_s: float = Field(900.0, alias="FARE_CACHE_TTL_S")
    cache_max_entries: int = Field(500, alias="CACHE_MAX_ENTRIES")
    stats_max_buckets: int = Field(100, alias="STATS_MAX_BUCKETS")

    default_layover_min: int = Field(60, alias="DEFAULT_LAYOVER_MIN")
    default_layover_hours: float = Field(4.0, alias="DEFAULT_LAYOVER_HOURS")

    usd_per_ton: float = Field(20.0, alias="USD_PER_TON")
    kg_per_tree: float = Field(21.0, alias="KG_PER_TREE")
    saf_reduction: float = Field(0.6, alias="SAF_REDUCTION")
    premium_multiplier: float = Field(1.5, alias="PREMIUM_MULTIPLIER")
    business_multiplier: float = Field(3.0, alias="BUSINESS_MULTIPLIER")

    analytics_sample_rate: float = Field(0.1, alias="ANALYTICS_SAMPLE_RATE")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator(
        "request_timeout_s",
        "airport_cache_ttl_s",
        "flight_cache_ttl_s",
        "fare_cache_ttl_s",
        "kg_per_tree",
    )
    @classmethod
    def _positive_float(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("cache_max_entries", "stats_max_buckets", "default_layover_min")
    @classmethod
    def _positive_int(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be greater than 0")
        return v

    @field_validator("saf_reduction", "analytics_sample_rate")
    @classmethod
    def _fraction(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("must be between 0 and 1")
        return v

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.strip().upper() or "INFO"

    def seat_multipliers(self) -> Dict[str, float]:
        return {
            "economy": 1.0,
            "premium": self.premium_multiplier,
            "business": self.business_multiplier,
        }

    def configured_providers(self) -> Dict[str, bool]:
        return {
            "aviationstack": bool(self.aviationstack_api_key),
            "aerodatabox": bool(self.rapidapi_key),
            "opensky": bool(self.opensky_client_id and self.opensky_client_secret),
            "travelpayouts": bool(self.travelpayouts_token),
        }


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "get_settings"]
