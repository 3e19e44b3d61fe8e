"""Ordered fallback across static data, cache, live providers and synthesis.

Stages run in strict precedence and each one is only consulted when the
previous one produced nothing:

1. static dataset lookup        -> source ``static``
2. TTL cache keyed by fingerprint -> source ``cache``
3. live providers, in order     -> source ``<provider name>``
4. synthetic record             -> source ``synthetic`` (or ``mock``)

The first provider to return a non-empty normalized record wins and its
record is written to the cache. Provider failures never propagate.
Concurrent resolutions of the same fingerprint share one provider run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

from .cache import InFlightRequests, TTLCache
from .sources import Source

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    data: Any
    source: str
    success: bool = True
    synthetic: bool = False
    failures: Tuple[str, ...] = ()


class FallbackOrchestrator:
    def __init__(self, in_flight: Optional[InFlightRequests] = None) -> None:
        self.in_flight = in_flight or InFlightRequests()

    def resolve(
        self,
        request: Any,
        *,
        cache: TTLCache,
        providers: Sequence[Source],
        synthesize: Callable[[Any], Any],
        static: Optional[Callable[[Any], Any]] = None,
        synthetic_tag: str = "synthetic",
    ) -> Resolution:
        fingerprint = request.fingerprint

        if static is not None:
            record = static(request)
            if record is not None:
                logger.debug("%s answered from static data", fingerprint)
                return Resolution(data=record, source="static")

        cached = cache.get(fingerprint)
        if cached is not None:
            return Resolution(data=cached, source="cache")

        live = self.in_flight.run(
            f"{cache.name}:{fingerprint}",
            lambda: self._try_providers(request, cache, providers),
        )
        if live.data is not None:
            return live

        logger.info(
            "All providers failed for %s (%s); using %s data",
            fingerprint,
            "; ".join(live.failures) or "none configured",
            synthetic_tag,
        )
        return Resolution(
            data=synthesize(request),
            source=synthetic_tag,
            synthetic=True,
            failures=live.failures,
        )

    def _try_providers(
        self, request: Any, cache: TTLCache, providers: Sequence[Source]
    ) -> Resolution:
        # a previous leader may have filled the cache after our first read
        cached = cache.get(request.fingerprint)
        if cached is not None:
            return Resolution(data=cached, source="cache")

        failures = []
        for provider in providers:
            attempt = provider.attempt(request)
            if attempt.ok:
                cache.set(request.fingerprint, attempt.record, provider.name)
                logger.debug("%s answered by %s", request.fingerprint, provider.name)
                return Resolution(
                    data=attempt.record,
                    source=provider.name,
                    failures=tuple(failures),
                )
            failures.append(str(attempt.error))
        return Resolution(data=None, source="", success=False, failures=tuple(failures))


__all__ = ["Resolution", "FallbackOrchestrator"]
