import datetime as dt

import pytest

from skyrelay.normalize import (
    NormalizationError,
    clean_code,
    dig,
    first_present,
    parse_timestamp,
    string_list,
    text,
    to_float,
)
from skyrelay.sources import normalize_each

UTC = dt.timezone.utc


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2025-03-14T10:05:00Z", dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        ("2025-03-14 10:05Z", dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        ("2025-03-14T12:05:00+02:00", dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        ("2025-03-14T10:05:00", dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        (1741946700, dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        (1741946700000, dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
        ("1741946700", dt.datetime(2025, 3, 14, 10, 5, tzinfo=UTC)),
    ],
)
def test_parse_timestamp(value, expected):
    assert parse_timestamp(value) == expected


@pytest.mark.parametrize("value", [None, "", "bad-date", {}, []])
def test_parse_timestamp_tolerates_junk(value):
    assert parse_timestamp(value) is None


def test_missing_optional_fields_get_defaults():
    payload = {"airport": {"location": None}}
    assert dig(payload, "airport", "location", "lat") is None
    assert dig(payload, "nope", "deeper") is None
    assert first_present(None, "  ", "LHR") == "LHR"
    assert text(None) == "Unknown"
    assert text("  ", "UTC") == "UTC"
    assert to_float("n/a") is None
    assert clean_code(" jfk ") == "JFK"
    assert clean_code(42) is None
    assert string_list(["1", None, " ", "B "]) == ("1", "B")
    assert string_list("T1") == ()


def test_normalize_each_skips_bad_items():
    def to_record(item):
        if "code" not in item:
            raise NormalizationError("no code")
        return item["code"]

    assert normalize_each([{"code": "A"}, {}], to_record, "p") == ["A"]
    assert normalize_each([], to_record, "p") == []
    with pytest.raises(NormalizationError):
        normalize_each([{}, {}], to_record, "p")
