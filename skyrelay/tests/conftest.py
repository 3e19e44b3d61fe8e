import datetime as dt

import pytest

from skyrelay.config import Settings
from skyrelay.sources import ProviderError, Source

TODAY = dt.date(2025, 3, 14)


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSource(Source):
    """Source returning a canned record, or raising *error* from fetch."""

    def __init__(self, name, settings, record=None, error=None):
        super().__init__(settings)
        self.name = name
        self.record = record
        self.error = error
        self.calls = 0

    def fetch(self, request):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.record

    def normalize(self, raw, request):
        return raw


@pytest.fixture
def settings():
    return Settings(
        aviationstack_api_key="",
        rapidapi_key="",
        opensky_client_id="",
        opensky_client_secret="",
        travelpayouts_token="",
        travelpayouts_marker="",
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_source(settings):
    def factory(name, record=None, error=None):
        return FakeSource(name, settings, record=record, error=error)

    return factory


@pytest.fixture
def failing_source(make_source):
    def factory(name):
        return make_source(name, error=ProviderError(name, "HTTP 503"))

    return factory
