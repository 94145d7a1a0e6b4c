"""Timestamps as reported by the JSON APIs (RFC 3339, UTC)."""

from __future__ import annotations

from datetime import datetime, timezone


def normalize_dt(dt: datetime) -> datetime:
    """Return `dt` unchanged if it is tz-aware. Raises on naive datetimes."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt


def parse_rfc3339(value: str) -> datetime:
    """
    Parse a timeCreated/updated style timestamp into a UTC datetime.

    Handles a trailing "Z", fractional seconds and numeric offsets
    (2025-01-01T12:34:56.789Z, 2025-01-01T12:34:56+09:00).
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("RFC3339 value must be a non-empty string")

    text = value.strip()
    if text[-1] in "zZ":
        text = text[:-1] + "+00:00"
    return normalize_dt(datetime.fromisoformat(text)).astimezone(timezone.utc)


def parse_optional_rfc3339(value: object) -> datetime | None:
    """Parse an API timestamp field, returning None when absent or malformed."""
    if not isinstance(value, str):
        return None
    try:
        return parse_rfc3339(value)
    except ValueError:
        return None


def to_rfc3339(dt: datetime) -> str:
    """Format a tz-aware datetime the way the APIs do (UTC, "Z" suffix)."""
    utc = normalize_dt(dt).astimezone(timezone.utc)
    return utc.isoformat(timespec="microseconds").replace("+00:00", "Z")
