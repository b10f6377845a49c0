# app/domain/parsing.py
from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any

# TradeMe (WCF-style) JSON dates: /Date(1700000000000)/ or /Date(1700000000000+1300)/
_WCF_DATE = re.compile(r"^/Date\((-?\d+)(?:[+-]\d{4})?\)/$")
_MILLIS_THRESHOLD = 1e11


def to_int(x: Any) -> int | None:
    if x is None or x == "":
        return None
    try:
        return int(float(x))
    except (TypeError, ValueError, OverflowError):
        return None


def to_str(x: Any) -> str | None:
    if x is None:
        return None
    s = str(x).strip()
    return s or None


def get_first(payload: dict[str, Any], *keys: str) -> Any:
    """Return first non-empty key from payload."""
    for k in keys:
        v = payload.get(k)
        if v is None:
            continue
        if isinstance(v, str) and not v.strip():
            continue
        return v
    return None


def _from_epoch(value: float, *, millis: bool = False) -> datetime | None:
    # bare numbers past ~year 5138 in seconds are taken as milliseconds
    try:
        if millis or abs(value) > _MILLIS_THRESHOLD:
            value = value / 1000.0
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(x: Any) -> datetime | None:
    """
    Accepts TradeMe's /Date(ms)/ strings, ISO-8601 strings, epoch seconds or
    milliseconds, or datetimes. Always returns an aware UTC datetime (or None).
    """
    if x is None or x == "":
        return None

    if isinstance(x, datetime):
        dt = x
    elif isinstance(x, (int, float)) and not isinstance(x, bool):
        dt = _from_epoch(x)
    elif isinstance(x, str):
        s = x.strip()
        m = _WCF_DATE.match(s)
        if m:
            # the offset suffix is informational; the millis are already UTC
            dt = _from_epoch(int(m.group(1)), millis=True)
        else:
            if s.endswith("Z"):
                s = s[:-1] + "+00:00"
            try:
                dt = datetime.fromisoformat(s)
            except ValueError:
                return None
    else:
        return None

    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)
