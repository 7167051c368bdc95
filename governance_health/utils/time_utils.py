"""
UTC timestamp helpers.

Analyses are stamped with an aware UTC ``datetime`` supplied by the caller;
reports render it in ISO-8601 with a trailing ``Z``.
"""

from __future__ import annotations

from datetime import datetime, timezone

ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def to_iso_utc(ts: datetime) -> str:
    """Render ``ts`` as ``YYYY-MM-DDTHH:MM:SSZ``.

    Naive datetimes are assumed to already be UTC.
    """
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime(ISO_FORMAT)


def parse_iso_utc(value: str | None) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into an aware datetime.

    Returns:
        Aware UTC datetime, or ``None`` for empty / unparseable input.
    """
    if not value:
        return None
    try:
        ts = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, TypeError):
        return None
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts
