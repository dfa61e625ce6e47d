"""Consumer-side schema selection by literal ``EventType``.

The transport hands a consumer opaque payloads.  ``EventDecoder`` reads
the discriminator, picks the schema the consumer registered for that exact
string, and validates the payload into it.  It never invokes handlers and
never raises for a single bad payload.

Outcomes
--------
``DECODED``
    Known ``EventType``, payload valid.
``SKIPPED``
    Well-formed ``EventType`` this consumer does not implement (a newer
    version during a rolling migration, or a family it does not follow).
    Normal steady-state condition.
``DEAD_LETTERED``
    Same as ``SKIPPED`` but the consumer asked to keep the payload so the
    transport can park it on a dead-letter path.
``REJECTED``
    Not JSON, not an object, missing or malformed ``EventType``, or the
    payload does not satisfy its schema.
"""

from __future__ import annotations

import json
import logging
import time
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from integration_contracts.core.enums import DecodeOutcome, UnknownEventPolicy
from integration_contracts.core.errors import (
    DuplicateEventTypeError,
    EventTypeMismatchError,
    MissingEventTypeError,
)

from .envelope import EVENT_TYPE_KEY, IntegrationEvent
from .event_type import SEPARATOR, is_valid_event_type

logger = logging.getLogger(__name__)

RawPayload = Mapping[str, Any] | str | bytes


@dataclass(frozen=True)
class DecodeResult:
    outcome: DecodeOutcome
    event_type: str | None = None
    event: IntegrationEvent | None = None
    reason: str = ""

    @property
    def decoded(self) -> bool:
        return self.outcome is DecodeOutcome.DECODED

    @property
    def skipped(self) -> bool:
        return self.outcome in (
            DecodeOutcome.SKIPPED, DecodeOutcome.DEAD_LETTERED,
        )


@dataclass
class DecoderDeadLetter:
    """Payload with a well-formed but unknown ``EventType``."""

    event_type: str
    payload: Mapping[str, Any]
    reason: str
    timestamp: float = field(default_factory=time.monotonic)


class EventDecoder:
    """Decoder table keyed by literal ``EventType`` strings.

    Parameters
    ----------
    event_classes
        Schemas this consumer understands.
    unknown_policy
        What to do with well-formed but unregistered types.
    """

    def __init__(
        self,
        event_classes: Iterable[type[IntegrationEvent]] = (),
        *,
        unknown_policy: UnknownEventPolicy = UnknownEventPolicy.SKIP,
    ) -> None:
        self._schemas: dict[str, type[IntegrationEvent]] = {}
        self._unknown_policy = unknown_policy
        self._outcome_counts: dict[DecodeOutcome, int] = defaultdict(int)
        self._unknown_counts: dict[str, int] = defaultdict(int)
        self._dead_letters: list[DecoderDeadLetter] = []
        for cls in event_classes:
            self.register(cls)

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        event_classes: Iterable[type[IntegrationEvent]] = (),
    ) -> EventDecoder:
        return cls(
            event_classes,
            unknown_policy=settings.decoding.unknown_policy,
        )

    # -- Registration ------------------------------------------------------

    def register(self, event_cls: type[IntegrationEvent]) -> None:
        """Add *event_cls* under its ``event_type``.

        Raises
        ------
        MissingEventTypeError
            If *event_cls* is not a concrete schema.
        DuplicateEventTypeError
            If another schema already owns that ``event_type``.
        """
        event_type = event_cls.event_type
        if event_type is None:
            raise MissingEventTypeError(
                f"{event_cls.__name__} has no event_type to decode by"
            )
        current = self._schemas.get(event_type)
        if current is not None and current is not event_cls:
            raise DuplicateEventTypeError(
                f"{event_type!r} is already decoded by {current.__name__}, "
                f"cannot also map it to {event_cls.__name__}"
            )
        self._schemas[event_type] = event_cls

    @property
    def supported_event_types(self) -> frozenset[str]:
        return frozenset(self._schemas)

    def schema_for(self, event_type: str) -> type[IntegrationEvent] | None:
        return self._schemas.get(event_type)

    def versions_for(self, family: tuple[str, str, str] | str) -> list[int]:
        """Registered versions of a family, ascending.

        *family* is ``(service, entity, action)`` or ``"service.entity.action"``.
        """
        if isinstance(family, str):
            family = tuple(family.split(SEPARATOR))  # type: ignore[assignment]
        return sorted(
            cls.schema_version  # type: ignore[misc]
            for cls in self._schemas.values()
            if cls.event_family == family
        )

    # -- Decoding ----------------------------------------------------------

    def decode(self, payload: RawPayload) -> DecodeResult:
        """Decode one payload.  Never raises for payload problems."""
        try:
            data = _load(payload)
        except (ValueError, TypeError) as exc:
            return self._reject(None, f"unreadable payload: {exc}")

        event_type = data.get(EVENT_TYPE_KEY)
        if event_type is None:
            return self._reject(None, f"missing {EVENT_TYPE_KEY}")
        if not is_valid_event_type(event_type):
            return self._reject(
                str(event_type), f"malformed {EVENT_TYPE_KEY} {event_type!r}",
            )

        event_cls = self._schemas.get(event_type)
        if event_cls is None:
            return self._unknown(event_type, data)

        try:
            event = event_cls.from_wire(data)
        except (ValidationError, EventTypeMismatchError) as exc:
            return self._reject(event_type, str(exc))

        self._outcome_counts[DecodeOutcome.DECODED] += 1
        return DecodeResult(DecodeOutcome.DECODED, event_type, event)

    def decode_batch(self, payloads: Iterable[RawPayload]) -> list[DecodeResult]:
        """Decode every payload; one failure never stops the rest."""
        return [self.decode(p) for p in payloads]

    def _unknown(
        self, event_type: str, data: Mapping[str, Any],
    ) -> DecodeResult:
        self._unknown_counts[event_type] += 1
        base = event_type.rsplit(SEPARATOR, 1)[0]
        known = self.versions_for(base)
        reason = (
            f"no schema for {event_type!r}"
            + (f" (this consumer knows versions {known})" if known else "")
        )

        if self._unknown_policy is UnknownEventPolicy.DEAD_LETTER:
            self._dead_letters.append(
                DecoderDeadLetter(event_type=event_type, payload=data, reason=reason)
            )
            self._outcome_counts[DecodeOutcome.DEAD_LETTERED] += 1
            logger.warning("Dead-lettering %s: %s", event_type, reason)
            return DecodeResult(
                DecodeOutcome.DEAD_LETTERED, event_type, reason=reason,
            )

        self._outcome_counts[DecodeOutcome.SKIPPED] += 1
        logger.info("Skipping %s: %s", event_type, reason)
        return DecodeResult(DecodeOutcome.SKIPPED, event_type, reason=reason)

    def _reject(self, event_type: str | None, reason: str) -> DecodeResult:
        self._outcome_counts[DecodeOutcome.REJECTED] += 1
        logger.warning("Rejected payload type=%s: %s", event_type, reason)
        return DecodeResult(DecodeOutcome.REJECTED, event_type, reason=reason)

    # -- Observability -----------------------------------------------------

    def get_outcome_counts(self) -> dict[str, int]:
        """Return ``{outcome: count}``."""
        return {k.value: v for k, v in self._outcome_counts.items()}

    def get_unknown_counts(self) -> dict[str, int]:
        """Return ``{event_type: times seen without a schema}``."""
        return dict(self._unknown_counts)

    @property
    def dead_letters(self) -> list[DecoderDeadLetter]:
        return list(self._dead_letters)

    def clear_dead_letters(self) -> list[DecoderDeadLetter]:
        """Drain and return dead letters."""
        drained = self._dead_letters[:]
        self._dead_letters.clear()
        return drained


def _load(payload: RawPayload) -> Mapping[str, Any]:
    if isinstance(payload, (str, bytes, bytearray)):
        payload = json.loads(payload)
    if not isinstance(payload, Mapping):
        raise TypeError(
            f"expected a JSON object, got {type(payload).__name__}"
        )
    return payload
