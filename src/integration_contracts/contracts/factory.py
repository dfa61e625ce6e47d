"""Construction-time factory for integration events.

Producers build events through ``EventFactory`` so identity and time are
always stamped from one place: a fresh ``event_id`` per occurrence and
``occurred_at`` from the injected clock.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, TypeVar

from integration_contracts.core.clock import IClock, WallClock
from integration_contracts.core.errors import DuplicateEventTypeError
from integration_contracts.core.ids import new_event_id

from .envelope import IntegrationEvent

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=IntegrationEvent)

_RESERVED = frozenset({"event_id", "occurred_at", "event_type", "EventId",
                       "OccurredAt", "EventType"})


class EventFactory:
    """Stamps envelope fields on new events.

    Parameters
    ----------
    clock
        Source of ``occurred_at``.  Defaults to ``WallClock``; tests pass a
        ``SimClock``.
    """

    def __init__(self, clock: IClock | None = None) -> None:
        self._clock: IClock = clock or WallClock()

    @property
    def clock(self) -> IClock:
        return self._clock

    def create(self, event_cls: type[E], **payload: Any) -> E:
        """Build one occurrence of *event_cls*.

        Envelope fields cannot be passed in; they always come from the
        factory.
        """
        _reject_envelope_overrides(payload)
        event = event_cls(
            event_id=new_event_id(),
            occurred_at=self._clock.now(),
            **payload,
        )
        logger.debug(
            "Created %s event_id=%s", event.event_type, event.event_id,
        )
        return event

    def create_many(
        self,
        event_classes: Iterable[type[IntegrationEvent]],
        **payload: Any,
    ) -> list[IntegrationEvent]:
        """Build the same fact under several schemas (dual-publish).

        Each schema gets its own ``event_id``.  All share one
        ``occurred_at`` since they describe one moment.  Payload keys a
        schema does not declare are ignored by that schema.
        """
        _reject_envelope_overrides(payload)
        classes = list(event_classes)
        seen: set[str] = set()
        for cls in classes:
            if cls.event_type in seen:
                raise DuplicateEventTypeError(
                    f"{cls.event_type!r} requested twice for one publish"
                )
            seen.add(cls.event_type)  # type: ignore[arg-type]

        occurred_at = self._clock.now()
        events = [
            cls(event_id=new_event_id(), occurred_at=occurred_at, **payload)
            for cls in classes
        ]
        logger.debug(
            "Dual-publish of %s", ", ".join(e.event_type for e in events),
        )
        return events


def _reject_envelope_overrides(payload: dict[str, Any]) -> None:
    clash = _RESERVED.intersection(payload)
    if clash:
        raise TypeError(
            "envelope fields are stamped by the factory, got "
            f"{sorted(clash)}"
        )
