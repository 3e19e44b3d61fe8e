from __future__ import annotations

import logging
import random
from typing import Any, Callable, Mapping

logger = logging.getLogger(__name__)


class EventLogger:
    """Fire-and-forget analytics sink logging a sampled share of events.

    :meth:`emit` never raises; a failing sink must not touch the response.
    """

    def __init__(
        self, sample_rate: float = 0.1, rng: Callable[[], float] = random.random
    ) -> None:
        self.sample_rate = sample_rate
        self._rng = rng

    def emit(self, event: Mapping[str, Any]) -> bool:
        try:
            if self._rng() >= self.sample_rate:
                return False
            logger.info("analytics event %s", dict(event))
            return True
        except Exception:
            logger.exception("Analytics sink failed")
            return False


__all__ = ["EventLogger"]
