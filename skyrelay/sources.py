from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, List, Mapping, Optional, TypeVar

import requests

from .config import Settings, get_settings
from .normalize import NormalizationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProviderError(RuntimeError):
    """A live source could not produce a usable record."""

    def __init__(self, provider: str, reason: str) -> None:
        super().__init__(f"{provider}: {reason}")
        self.provider = provider
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Attempt:
    provider: str
    record: Any = None
    error: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.record is not None


class Source:
    """A live upstream exposing one lookup capability.

    Subclasses implement :meth:`fetch` (raw payload) and :meth:`normalize`
    (canonical record); :meth:`attempt` wraps both and never raises.
    """

    name = "source"

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.timeout = self.settings.request_timeout_s

    def is_configured(self) -> bool:
        return True

    def fetch(self, request: Any) -> Any:
        raise NotImplementedError

    def normalize(self, raw: Any, request: Any) -> Any:
        raise NotImplementedError

    def attempt(self, request: Any) -> Attempt:
        if not self.is_configured():
            logger.debug("%s skipped: credentials not configured", self.name)
            return Attempt(self.name, error=ProviderError(self.name, "not configured"))
        try:
            raw = self.fetch(request)
            record = self.normalize(raw, request)
        except ProviderError as exc:
            logger.warning("%s failed: %s", self.name, exc.reason)
            return Attempt(self.name, error=exc)
        except requests.Timeout:
            logger.warning("%s timed out after %ss", self.name, self.timeout)
            return Attempt(self.name, error=ProviderError(self.name, "timeout"))
        except NormalizationError as exc:
            logger.warning("%s returned an unusable payload: %s", self.name, exc)
            return Attempt(self.name, error=ProviderError(self.name, str(exc)))
        except Exception as exc:
            logger.warning("%s failed: %s", self.name, exc)
            return Attempt(self.name, error=ProviderError(self.name, str(exc)))
        if not record:
            logger.info("%s returned no data", self.name)
            return Attempt(self.name, error=ProviderError(self.name, "empty result"))
        return Attempt(self.name, record=record)

    # ──────────────────────────────────────────────────────────

    def get_json(
        self,
        url: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> Any:
        resp = requests.get(
            url, params=params, headers=headers, timeout=self.timeout
        )
        if resp.status_code != 200:
            raise ProviderError(
                self.name, f"HTTP {resp.status_code} - {resp.text[:120]}"
            )
        try:
            return resp.json()
        except ValueError as exc:
            raise ProviderError(self.name, f"malformed JSON: {exc}") from exc


def normalize_each(
    items: Iterable[Any], to_record: Callable[[Any], T], provider: str
) -> List[T]:
    """Normalize every item, skipping the ones missing identity fields."""
    records: List[T] = []
    skipped = 0
    for item in items:
        try:
            records.append(to_record(item))
        except NormalizationError as exc:
            skipped += 1
            logger.debug("%s: skipping item: %s", provider, exc)
    if skipped:
        logger.info("%s: skipped %d incomplete items", provider, skipped)
    if not records and skipped:
        raise NormalizationError(f"{skipped} items, none usable")
    return records


__all__ = ["ProviderError", "Attempt", "Source", "normalize_each"]
