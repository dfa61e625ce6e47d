"""``EventType`` discriminator: format ``service.entity.action.vN``.

Naming rules
------------
1.  Exactly four dot-separated segments: producing service, entity,
    action, version.
2.  No segment is empty or contains whitespace.
3.  The version segment is ``v`` followed by a positive integer with no
    leading zeros (``v1``, ``v2``, ``v10``; not ``v0``, ``v01``, ``2``).
4.  Versions increase monotonically per ``(service, entity, action)``
    family; see ``versioning.check_evolution``.

Everything here is pure: no state, no I/O, same answer every call.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from integration_contracts.core.errors import MalformedEventTypeError

SEGMENT_COUNT = 4
SEPARATOR = "."

_VERSION_RE = re.compile(r"v([1-9][0-9]*)")
_WHITESPACE_RE = re.compile(r"\s")


class EventTypeName(NamedTuple):
    """A parsed, validated discriminator."""

    service: str
    entity: str
    action: str
    version: int

    @property
    def family(self) -> tuple[str, str, str]:
        """``(service, entity, action)``: the key versions increment under."""
        return (self.service, self.entity, self.action)

    @property
    def base(self) -> str:
        """Discriminator without its version segment."""
        return SEPARATOR.join(self.family)

    def next_version(self) -> EventTypeName:
        return self._replace(version=self.version + 1)

    def __str__(self) -> str:
        return format_event_type(
            self.service, self.entity, self.action, self.version,
        )


def parse_event_type(value: object) -> EventTypeName:
    """Split and validate a discriminator string.

    Raises
    ------
    MalformedEventTypeError
        If *value* is not a string in ``service.entity.action.vN`` shape.
    """
    if not isinstance(value, str):
        raise MalformedEventTypeError(value, "must be a string")
    if not value:
        raise MalformedEventTypeError(value, "must not be empty")

    segments = value.split(SEPARATOR)
    if len(segments) != SEGMENT_COUNT:
        raise MalformedEventTypeError(
            value,
            f"expected {SEGMENT_COUNT} segments "
            f"(service.entity.action.version), got {len(segments)}",
        )
    for position, segment in enumerate(segments):
        if not segment:
            raise MalformedEventTypeError(
                value, f"segment {position + 1} is empty",
            )
        if _WHITESPACE_RE.search(segment):
            raise MalformedEventTypeError(
                value, f"segment {position + 1} contains whitespace",
            )

    service, entity, action, version = segments
    match = _VERSION_RE.fullmatch(version)
    if match is None:
        raise MalformedEventTypeError(
            value,
            f"version segment {version!r} must be 'v' followed by a "
            "positive integer",
        )
    return EventTypeName(service, entity, action, int(match.group(1)))


def is_valid_event_type(value: object) -> bool:
    """Return True if *value* is a well-formed discriminator."""
    try:
        parse_event_type(value)
    except MalformedEventTypeError:
        return False
    return True


def validate_event_type(value: object) -> str:
    """Return *value* unchanged if well-formed, raise otherwise."""
    parse_event_type(value)
    return value  # type: ignore[return-value]


def format_event_type(
    service: str, entity: str, action: str, version: int,
) -> str:
    """Build a discriminator and validate the result."""
    candidate = SEPARATOR.join((service, entity, action, f"v{version}"))
    parse_event_type(candidate)
    return candidate
