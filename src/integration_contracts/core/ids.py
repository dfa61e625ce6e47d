"""Canonical ID and timestamp factories for integration events.

All modules import from here instead of calling ``uuid4()`` or
``datetime.now()`` directly.

ID Rule
-------
``EventId`` is a UUID v4, one per occurrence.  It is the deduplication and
tracing key across service boundaries and serializes as the canonical
36-character UUID string.

Timestamp Rule
--------------
All timestamps are ``datetime`` with ``tzinfo=timezone.utc``, never naive.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def new_event_id() -> uuid.UUID:
    """Generate a new UUID v4 for an event occurrence."""
    return uuid.uuid4()


def utc_now() -> datetime:
    """Return the current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to UTC.

    Raises
    ------
    ValueError
        If *value* is naive.  A naive timestamp has no defined instant, so
        there is nothing to convert.  Also raised when the UTC instant
        falls outside ``datetime.min``..``datetime.max``.
    """
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError(
            f"timestamp must be timezone-aware, got naive {value.isoformat()}"
        )
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError(
            f"timestamp {value.isoformat()} is out of range in UTC"
        ) from exc
