import datetime as dt
import json

import pytest
from click.testing import CliRunner

from skyrelay.analytics import EventLogger
from skyrelay.cli import cli
from skyrelay.engine import TravelEngine


@pytest.fixture
def engine(settings, clock):
    return TravelEngine(
        settings,
        airport_providers=[],
        flight_providers=[],
        calendar_providers=[],
        offer_providers=[],
        analytics=EventLogger(sample_rate=0.0),
        clock=clock,
        today=lambda: dt.date(2025, 3, 14),
    )


def invoke(engine, *args):
    return CliRunner().invoke(cli, ["--log-level", "WARNING", *args], obj={"engine": engine})


def test_airport_command(engine):
    result = invoke(engine, "airport", "LHR")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["source"] == "static"
    assert payload["data"]["code"] == "LHR"


def test_flight_command(engine):
    result = invoke(engine, "flight", "JFK", "LAX", "2025-03-14", "--travelers", "2")
    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["source"] == "mock"
    assert payload["carbon"]["total_kg"] == 747


def test_invalid_request_is_usage_error(engine):
    result = invoke(engine, "flight", "JFK", "JFK", "2025-03-14")
    assert result.exit_code == 2
    assert "origin and destination must differ" in result.output


def test_layover_and_fares_commands(engine):
    result = invoke(engine, "layover", "JFK", "--hours", "10")
    assert json.loads(result.output)["suggestions"]["bucket"] == "long"

    result = invoke(engine, "fares", "WAW", "JFK", "2025-03-14", "--mode", "flights")
    payload = json.loads(result.output)
    assert payload["mode"] == "flights"
    assert len(payload["fares"]) == 3


def test_stats_after_requests(engine):
    invoke(engine, "airport", "JFK")
    result = invoke(engine, "stats")
    assert json.loads(result.output)["today"]["requests"] == 1


def test_health_command(engine):
    result = invoke(engine, "health")
    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["status"] == "operational"
