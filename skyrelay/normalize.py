from __future__ import annotations

import datetime as dt
import re
from typing import Any, Iterable, Mapping, Optional

NON_ALNUM_RE = re.compile(r"[^A-Za-z0-9]")


class NormalizationError(ValueError):
    """Mandatory identity field missing from a provider payload."""


def dig(data: Any, *path: str) -> Any:
    """Walk nested mappings, returning ``None`` at the first missing step."""
    cur = data
    for key in path:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur


def first_present(*values: Any) -> Any:
    for value in values:
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def clean_code(value: Any) -> Optional[str]:
    """Return an uppercased IATA-style code or ``None``."""
    if not isinstance(value, str):
        return None
    code = value.strip().upper()
    return code or None


def text(value: Any, default: str = "Unknown") -> str:
    if value is None:
        return default
    value = str(value).strip()
    return value or default


def to_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_timestamp(value: Any) -> Optional[dt.datetime]:
    """Parse ISO strings and epoch seconds/milliseconds into aware UTC datetimes."""
    if value is None or value == "":
        return None
    if isinstance(value, dt.datetime):
        parsed = value
    elif isinstance(value, (int, float)) or (
        isinstance(value, str) and value.strip().isdigit()
    ):
        number = int(value)
        if len(str(abs(number))) >= 13:
            number = number // 1000
        return dt.datetime.fromtimestamp(number, tz=dt.timezone.utc)
    elif isinstance(value, str):
        raw = value.strip().replace(" ", "T", 1)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            parsed = dt.datetime.fromisoformat(raw)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.timezone.utc)
    return parsed.astimezone(dt.timezone.utc)


def string_list(values: Any) -> tuple[str, ...]:
    if not isinstance(values, Iterable) or isinstance(values, (str, bytes)):
        return ()
    return tuple(str(v).strip() for v in values if v is not None and str(v).strip())


__all__ = [
    "NormalizationError",
    "dig",
    "first_present",
    "clean_code",
    "text",
    "to_float",
    "parse_timestamp",
    "string_list",
    "NON_ALNUM_RE",
]
