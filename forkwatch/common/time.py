"""Time helpers for branch freshness checks."""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp used as the evaluation time."""
    return dt.datetime.now(dt.UTC)


def parse_iso_timestamp(value: str) -> dt.datetime | None:
    """Parse an ISO-8601 timestamp as emitted by git or GitHub.

    Naive timestamps are read as UTC. Unparseable input returns ``None``
    rather than raising, so callers can treat it as "unknown".

    Examples
    --------
    >>> parse_iso_timestamp("2024-03-01T12:00:00Z").isoformat()
    '2024-03-01T12:00:00+00:00'
    >>> parse_iso_timestamp("yesterday") is None
    True

    """
    text = value.strip()
    if not text:
        return None
    try:
        parsed = dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=dt.UTC)
    return parsed.astimezone(dt.UTC)
