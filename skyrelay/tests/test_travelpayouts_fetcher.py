import datetime as dt
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock, patch

from skyrelay.models import FarePoint, FareQuery
from skyrelay.travelpayouts_fetcher import (
    TravelpayoutsCalendar,
    TravelpayoutsOffers,
    mark_cheapest,
)

QUERY = FareQuery("WAW", "JFK", dt.date(2024, 9, 10), mode="flights")


def make_response(payload, status_code=200):
    resp = Mock(status_code=status_code, text="")
    resp.json.return_value = payload
    return resp


def make_payload():
    now = datetime.now(timezone.utc)
    return {
        "success": True,
        "currency": "usd",
        "data": [
            {
                "origin": "WAW",
                "destination": "JFK",
                "departure_at": "2024-09-10T08:25:00+02:00",
                "price": 700,
                "airline": "DL",
                "transfers": 1,
                "found_at": (now + timedelta(minutes=1)).isoformat(),
                "link": "/flight2",
            },
            {
                "origin": "WAW",
                "destination": "JFK",
                "departure_at": "2024-09-10T12:10:00+02:00",
                "price": 500,
                "airline": "LO",
                "transfers": 0,
                "found_at": now.isoformat(),
                "link": "/flight1",
            },
        ],
    }


def make_incomplete_payload():
    now = datetime.now(timezone.utc)
    return {
        "success": True,
        "data": [
            {
                "origin": "WAW",
                "destination": "JFK",
                "departure_at": "2024-09-10",
                "price": 500,
                "airline": "AA",
                "link": "/f1",  # missing found_at
            },
            {
                "origin": "WAW",
                "destination": "JFK",
                "departure_at": "2024-09-10",
                "price": 700,
                "airline": "DL",
                "found_at": "bad-date",
                "link": "/f2",
            },
            {
                "origin": "WAW",
                "destination": "JFK",
                "departure_at": "2024-09-10",
                "price": 800,
                "airline": "BA",
                "found_at": now.isoformat(),
                # missing link
            },
        ],
    }


@patch("requests.get")
def test_offers_sorted_by_price(mock_get, settings):
    settings.travelpayouts_token = "x"
    mock_get.return_value = make_response(make_payload())

    attempt = TravelpayoutsOffers(settings).attempt(QUERY)

    assert attempt.ok
    offers = attempt.record
    assert [o.price for o in offers] == [Decimal("500"), Decimal("700")]
    assert offers[0].currency == "USD"
    assert offers[0].stops == 0
    for off in offers:
        assert off.deep_link.startswith("https://www.aviasales.com/flight")
    assert mock_get.call_args.kwargs["params"]["token"] == "x"


@patch("requests.get")
def test_skip_incomplete_rows(mock_get, settings):
    settings.travelpayouts_token = "x"
    mock_get.return_value = make_response(make_incomplete_payload())

    offers = TravelpayoutsOffers(settings).attempt(QUERY).record

    assert len(offers) == 1
    assert offers[0].deep_link.startswith("https://www.aviasales.com/f1")
    assert offers[0].found_at is None


@patch("requests.get")
def test_unsuccessful_body_fails(mock_get, settings):
    settings.travelpayouts_token = "x"
    mock_get.return_value = make_response({"success": False, "error": "unauthorized"})

    attempt = TravelpayoutsOffers(settings).attempt(QUERY)

    assert attempt.error.reason == "API error: unauthorized"


@patch("requests.get")
def test_calendar_marks_every_cheapest_day(mock_get, settings):
    settings.travelpayouts_token = "x"
    mock_get.return_value = make_response(
        {
            "success": True,
            "currency": "usd",
            "data": [
                {"depart_date": "2024-09-03", "value": 210, "gate": "LOT"},
                {"depart_date": "2024-09-01", "value": 180, "gate": "Wizz"},
                {"depart_date": "2024-09-02", "value": 180},
                {"depart_date": "", "value": 90},
                {"depart_date": "2024-09-04", "value": "n/a"},
            ],
        }
    )

    query = FareQuery("WAW", "JFK", dt.date(2024, 9, 10))
    attempt = TravelpayoutsCalendar(settings).attempt(query)

    points = attempt.record
    assert [p.date.day for p in points] == [1, 2, 3]
    assert [p.is_cheapest for p in points] == [True, True, False]
    assert points[0].airline == "Wizz"
    assert mock_get.call_args.kwargs["params"]["month"] == "2024-09-01"


def test_mark_cheapest_empty():
    assert mark_cheapest([]) == []
    [only] = mark_cheapest([FarePoint(dt.date(2024, 9, 1), Decimal("10"), "USD")])
    assert only.is_cheapest
