"""Integration event envelope.

Design invariants
-----------------
1.  Every event is **immutable** (``frozen=True``).
2.  ``event_id`` is a UUID4 generated at creation time; it identifies the
    *occurrence* and is the dedup / tracing key across services.
3.  ``occurred_at`` is a timezone-aware UTC timestamp of when the fact
    became true, not when it was sent.
4.  ``event_type`` is a class constant declared once per concrete schema.
    It is validated when the class is defined, never computed from
    instance data and never defaulted by this base.
5.  The wire form is flat: ``EventId``, ``OccurredAt``, ``EventType`` and the
    payload fields all sit at the top level in PascalCase.

Concrete shapes live in the producing service's own contract module;
nothing domain-specific belongs here.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_pascal

from integration_contracts.core.errors import (
    DuplicateEventTypeError,
    EventTypeMismatchError,
    MissingEventTypeError,
)
from integration_contracts.core.ids import ensure_utc, new_event_id, utc_now

from .event_type import parse_event_type

#: Wire key of the discriminator.
EVENT_TYPE_KEY = "EventType"

#: Wire keys every event carries, in wire order.
ENVELOPE_KEYS: tuple[str, ...] = ("EventId", "OccurredAt", EVENT_TYPE_KEY)

_ENVELOPE_FIELDS = ("event_id", "occurred_at")


class IntegrationEvent(BaseModel):
    """Immutable base for every cross-service integration event.

    Shared fields
    ~~~~~~~~~~~~~
    event_id     Unique occurrence identity (UUID4).  Dedup key.
    occurred_at  UTC time the fact became true.
    event_type   Class-level discriminator, ``service.entity.action.vN``.

    Subclasses declare::

        class AccessGrantedV1(IntegrationEvent):
            event_type: ClassVar[str] = "enrollment.access.granted.v1"

            user_id: str
            course_id: str
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="ignore",
    )

    event_type: ClassVar[str | None] = None
    event_family: ClassVar[tuple[str, str, str] | None] = None
    schema_version: ClassVar[int | None] = None

    event_id: UUID = Field(default_factory=new_event_id)
    occurred_at: datetime = Field(default_factory=utc_now)

    # -- Class definition ---------------------------------------------------

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        declared = cls.__dict__.get("event_type")
        inherited = [
            base for base in cls.__mro__[1:]
            if isinstance(base, type)
            and issubclass(base, IntegrationEvent)
            and base.__dict__.get("event_type") is not None
        ]

        if declared is None:
            if inherited:
                raise MissingEventTypeError(
                    f"{cls.__name__} inherits event_type "
                    f"{inherited[0].__dict__['event_type']!r} from "
                    f"{inherited[0].__name__}; every schema must declare "
                    "its own"
                )
            # Intermediate abstract base: stays uninstantiable.
            return

        name = parse_event_type(declared)
        for base in inherited:
            if base.__dict__["event_type"] == declared:
                raise DuplicateEventTypeError(
                    f"{cls.__name__} and {base.__name__} both declare "
                    f"event_type {declared!r}"
                )
        cls.event_family = name.family
        cls.schema_version = name.version

    # -- Validation ---------------------------------------------------------

    @model_validator(mode="before")
    @classmethod
    def _check_discriminator(cls, data: Any) -> Any:
        if cls.event_type is None:
            raise MissingEventTypeError(
                f"{cls.__name__} has no event_type; instantiate a concrete "
                "event schema"
            )
        if isinstance(data, Mapping):
            incoming = data.get(EVENT_TYPE_KEY, data.get("event_type"))
            if incoming is not None and incoming != cls.event_type:
                raise EventTypeMismatchError(
                    f"{cls.__name__} decodes {cls.event_type!r}, payload "
                    f"carries {incoming!r}"
                )
            data = {
                k: v for k, v in data.items()
                if k not in (EVENT_TYPE_KEY, "event_type")
            }
        return data

    @field_validator("occurred_at")
    @classmethod
    def _occurred_at_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)

    # -- Serialization ------------------------------------------------------

    @field_serializer("occurred_at", when_used="json")
    def _serialize_occurred_at(self, v: datetime) -> str:
        return v.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")

    @model_serializer(mode="wrap")
    def _serialize_with_discriminator(
        self,
        handler: SerializerFunctionWrapHandler,
        info: SerializationInfo,
    ) -> dict[str, Any]:
        data = handler(self)
        if info.by_alias:
            keys = ENVELOPE_KEYS
        else:
            keys = (*_ENVELOPE_FIELDS, "event_type")
        ordered: dict[str, Any] = {}
        for key in keys[:2]:
            if key in data:
                ordered[key] = data.pop(key)
        ordered[keys[2]] = self.event_type
        ordered.update(data)
        return ordered

    def to_wire(self) -> dict[str, Any]:
        """Flat, JSON-safe wire document with PascalCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_json(self) -> str:
        return json.dumps(self.to_wire())

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> IntegrationEvent:
        """Decode a wire document into this schema.

        Raises ``EventTypeMismatchError`` when the document belongs to a
        different schema, ``pydantic.ValidationError`` when it does not
        satisfy this one.
        """
        return cls.model_validate(data)

    @classmethod
    def from_json(cls, raw: str | bytes) -> IntegrationEvent:
        return cls.from_wire(json.loads(raw))

    # -- Identity -----------------------------------------------------------

    def is_same_occurrence(self, other: object) -> bool:
        """True when both values describe one occurrence (same ``event_id``).

        Field-wise ``==`` compares payloads too; two grants with identical
        fields are still two occurrences.
        """
        return (
            isinstance(other, IntegrationEvent)
            and other.event_id == self.event_id
        )

    def payload(self) -> dict[str, Any]:
        """Producer-defined fields only, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in type(self).model_fields
            if name not in _ENVELOPE_FIELDS
        }
