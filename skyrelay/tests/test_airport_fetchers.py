import datetime as dt
from unittest.mock import Mock, patch

import requests

from skyrelay.aerodatabox_fetcher import AeroDataBoxAirports, AeroDataBoxDepartures
from skyrelay.aviationstack_fetcher import AviationStackAirports
from skyrelay.models import AirportQuery, FlightQuery


def make_response(payload, status_code=200):
    resp = Mock(status_code=status_code, text="")
    resp.json.return_value = payload
    return resp


def aviationstack_payload(code="MUC"):
    return {
        "data": [
            {
                "iata_code": code,
                "airport_name": "Franz Josef Strauss",
                "city_iata_code": "MUC",
                "country_name": "Germany",
                "timezone": "Europe/Berlin",
                "latitude": "48.353783",
                "longitude": "11.786086",
            }
        ]
    }


@patch("requests.get")
def test_aviationstack_airport(mock_get, settings):
    settings.aviationstack_api_key = "k"
    mock_get.return_value = make_response(aviationstack_payload())

    attempt = AviationStackAirports(settings).attempt(AirportQuery("MUC"))

    assert attempt.ok
    record = attempt.record
    assert record.code == "MUC"
    assert record.name == "Franz Josef Strauss"
    assert record.country == "Germany"
    assert record.position == (48.353783, 11.786086)
    assert record.amenities
    assert mock_get.call_args.kwargs["params"]["access_key"] == "k"
    assert mock_get.call_args.kwargs["timeout"] == settings.request_timeout_s


@patch("requests.get")
def test_aviationstack_fuzzy_match_is_rejected(mock_get, settings):
    settings.aviationstack_api_key = "k"
    mock_get.return_value = make_response(aviationstack_payload(code="MUB"))

    attempt = AviationStackAirports(settings).attempt(AirportQuery("MUC"))

    assert not attempt.ok
    assert "MUB" in attempt.error.reason


@patch("requests.get")
def test_aviationstack_api_error_body(mock_get, settings):
    settings.aviationstack_api_key = "k"
    mock_get.return_value = make_response({"error": {"message": "usage limit reached"}})

    attempt = AviationStackAirports(settings).attempt(AirportQuery("MUC"))

    assert attempt.error.reason == "API error: usage limit reached"


@patch("requests.get")
def test_unconfigured_provider_makes_no_request(mock_get, settings):
    attempt = AviationStackAirports(settings).attempt(AirportQuery("MUC"))
    assert attempt.error.reason == "not configured"
    mock_get.assert_not_called()


@patch("requests.get")
def test_http_error_and_timeout_become_failed_attempts(mock_get, settings):
    settings.rapidapi_key = "k"
    source = AeroDataBoxAirports(settings)

    mock_get.return_value = make_response({}, status_code=429)
    assert source.attempt(AirportQuery("MUC")).error.reason.startswith("HTTP 429")

    mock_get.side_effect = requests.Timeout()
    assert source.attempt(AirportQuery("MUC")).error.reason == "timeout"


@patch("requests.get")
def test_aerodatabox_airport(mock_get, settings):
    settings.rapidapi_key = "k"
    mock_get.return_value = make_response(
        {
            "iata": "MUC",
            "shortName": "Munich",
            "fullName": "Munich Franz Josef Strauss",
            "municipalityName": "Munich",
            "country": {"code": "DE", "name": "Germany"},
            "timeZone": "Europe/Berlin",
            "location": {"lat": 48.3538, "lon": 11.7861},
        }
    )

    attempt = AeroDataBoxAirports(settings).attempt(AirportQuery("MUC"))

    assert attempt.ok
    assert attempt.record.name == "Munich Franz Josef Strauss"
    assert attempt.record.city == "Munich"
    assert attempt.record.timezone == "Europe/Berlin"
    assert mock_get.call_args.kwargs["headers"]["X-RapidAPI-Key"] == "k"


def departure(dest, dep_utc, arr_utc, number="LH 400", model="Airbus A340-300"):
    return {
        "number": number,
        "airline": {"name": "Lufthansa", "iata": "LH"},
        "aircraft": {"model": model},
        "departure": {
            "airport": {"iata": "FRA", "location": {"lat": 50.0333, "lon": 8.5706}},
            "scheduledTime": {"utc": dep_utc},
        },
        "arrival": {
            "airport": {"iata": dest, "location": {"lat": 40.6398, "lon": -73.7789}},
            "scheduledTime": {"utc": arr_utc},
        },
    }


@patch("requests.get")
def test_aerodatabox_departures_filtered_by_destination(mock_get, settings):
    settings.rapidapi_key = "k"
    mock_get.return_value = make_response(
        {
            "departures": [
                departure("JFK", "2025-03-14 10:05Z", "2025-03-14 18:40Z"),
                departure("LHR", "2025-03-14 11:00Z", "2025-03-14 11:50Z"),
                {"arrival": {"airport": {"iata": "JFK"}}},  # no departure time
            ]
        }
    )

    query = FlightQuery("FRA", "JFK", dt.date(2025, 3, 14))
    attempt = AeroDataBoxDepartures(settings).attempt(query)

    assert attempt.ok
    [flight] = attempt.record
    assert flight.route == "FRA-JFK"
    assert flight.carrier == "LH"
    assert flight.aircraft_type == "Airbus A340-300"
    assert flight.scheduled_departure == dt.datetime(2025, 3, 14, 10, 5, tzinfo=dt.timezone.utc)
    assert flight.origin_position == (50.0333, 8.5706)
    assert "/flights/airports/iata/FRA/2025-03-14T00:00/2025-03-14T23:59" in mock_get.call_args.args[0]


@patch("requests.get")
def test_aerodatabox_no_departures_on_route_is_empty(mock_get, settings):
    settings.rapidapi_key = "k"
    mock_get.return_value = make_response(
        {"departures": [departure("LHR", "2025-03-14 11:00Z", "2025-03-14 11:50Z")]}
    )

    attempt = AeroDataBoxDepartures(settings).attempt(FlightQuery("FRA", "JFK", dt.date(2025, 3, 14)))

    assert not attempt.ok
    assert attempt.error.reason == "empty result"
