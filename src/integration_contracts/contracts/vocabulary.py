"""Shared vocabulary: constants referenced by several services' payloads.

Admission gate
--------------
A value is shared here only when **three or more** independently deployed
services put it in their event contracts.  Anything used by fewer belongs
in the producing service's own contract module.

Compatibility
-------------
Entries are append-only.  Once a value has been transmitted its name and
value never change and it is never removed.  Adding an entry is always
backward-compatible.

``SHARED_VOCABULARY`` is built once at import and frozen; it is read-only
for the rest of the process lifetime.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import Field

from integration_contracts.core.config import MIN_VOCABULARY_SERVICES
from integration_contracts.core.errors import (
    VocabularyAdmissionError,
    VocabularyConflictError,
    VocabularyFrozenError,
)

logger = logging.getLogger(__name__)

#: Bump when entries are appended.
VOCABULARY_VERSION = 1


class ResourceType(str, Enum):
    """Kinds of learning resource named in cross-service events."""

    COURSE = "course"
    LESSON = "lesson"
    QUIZ = "quiz"
    ASSIGNMENT = "assignment"
    CERTIFICATE = "certificate"


#: Payload field type for a ``ResourceType``.  Values this release knows
#: parse to the enum member; values appended by a newer producer stay plain
#: strings, so an older consumer still decodes the event.
OpenResourceType = Annotated[
    ResourceType | str, Field(union_mode="left_to_right"),
]


@dataclass(frozen=True)
class VocabularyEntry:
    name: str
    value: str
    services: frozenset[str] = field(default_factory=frozenset)
    added_in: int = 1


class VocabularyRegistry:
    """Append-only ``name -> value`` mapping with an admission gate.

    Parameters
    ----------
    min_services
        Minimum number of distinct services that must reference a value
        before it is admitted.
    """

    def __init__(self, *, min_services: int = MIN_VOCABULARY_SERVICES) -> None:
        self._min_services = min_services
        self._entries: dict[str, VocabularyEntry] = {}
        self._frozen = False

    @classmethod
    def from_settings(cls, settings: Any) -> VocabularyRegistry:
        return cls(min_services=settings.vocabulary.min_services)

    # -- Mutation (startup only) ------------------------------------------

    def register(
        self,
        name: str,
        value: str,
        services: Iterable[str],
        *,
        added_in: int = VOCABULARY_VERSION,
    ) -> VocabularyEntry:
        """Admit *name* -> *value*.

        Re-registering the same pair merges the service sets.

        Raises
        ------
        VocabularyFrozenError
            After ``freeze()``.
        VocabularyAdmissionError
            If fewer than ``min_services`` services reference the value.
        VocabularyConflictError
            If *name* already maps to another value, or *value* is already
            published under another name.
        """
        if self._frozen:
            raise VocabularyFrozenError(
                f"cannot register {name!r}: vocabulary is frozen"
            )
        users = frozenset(s for s in services if s)
        existing = self._entries.get(name)

        if existing is not None:
            if existing.value != value:
                raise VocabularyConflictError(
                    f"{name!r} is published as {existing.value!r}; "
                    f"cannot change it to {value!r}"
                )
            merged = VocabularyEntry(
                name=name,
                value=value,
                services=existing.services | users,
                added_in=existing.added_in,
            )
            self._entries[name] = merged
            return merged

        for entry in self._entries.values():
            if entry.value == value:
                raise VocabularyConflictError(
                    f"value {value!r} is already published as {entry.name!r}"
                )
        if len(users) < self._min_services:
            raise VocabularyAdmissionError(
                f"{name!r} is referenced by {len(users)} service(s) "
                f"{sorted(users)}; shared entries need at least "
                f"{self._min_services}"
            )

        entry = VocabularyEntry(
            name=name, value=value, services=users, added_in=added_in,
        )
        self._entries[name] = entry
        logger.debug("Vocabulary entry %s=%s admitted", name, value)
        return entry

    def register_enum(
        self,
        enum_cls: type[Enum],
        services: Mapping[str, Iterable[str]],
        *,
        added_in: Mapping[str, int] | None = None,
    ) -> None:
        """Register every member of *enum_cls*.

        *services* maps member name to the services referencing it.
        """
        added_in = added_in or {}
        for member in enum_cls:
            self.register(
                member.name,
                str(member.value),
                services.get(member.name, ()),
                added_in=added_in.get(member.name, VOCABULARY_VERSION),
            )

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    # -- Read access -------------------------------------------------------

    def get(self, name: str) -> VocabularyEntry | None:
        return self._entries.get(name)

    def value_of(self, name: str) -> str:
        entry = self._entries.get(name)
        if entry is None:
            raise KeyError(name)
        return entry.value

    def as_mapping(self) -> Mapping[str, str]:
        """Read-only ``name -> value`` snapshot."""
        return MappingProxyType(
            {name: entry.value for name, entry in self._entries.items()}
        )

    @property
    def version(self) -> int:
        return max((e.added_in for e in self._entries.values()), default=0)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries.values())

    # -- Compatibility -----------------------------------------------------

    def check_append_only(self, previous: Mapping[str, str]) -> None:
        """Fail if this registry drops or re-values anything in *previous*.

        *previous* is the last published ``name -> value`` snapshot.
        """
        for name, value in previous.items():
            entry = self._entries.get(name)
            if entry is None:
                raise VocabularyConflictError(
                    f"{name!r} was published and has been removed or renamed"
                )
            if entry.value != value:
                raise VocabularyConflictError(
                    f"{name!r} was published as {value!r}, now {entry.value!r}"
                )


# ---------------------------------------------------------------------------
# Process-wide vocabulary
# ---------------------------------------------------------------------------

#: Which producing services reference each ``ResourceType`` member.
RESOURCE_TYPE_SERVICES: Mapping[str, frozenset[str]] = MappingProxyType({
    "COURSE": frozenset({"catalog", "enrollment", "progress"}),
    "LESSON": frozenset({"catalog", "enrollment", "progress"}),
    "QUIZ": frozenset({"catalog", "enrollment", "progress"}),
    "ASSIGNMENT": frozenset({"catalog", "enrollment", "progress"}),
    "CERTIFICATE": frozenset({"catalog", "enrollment", "progress"}),
})


def _build_shared_vocabulary() -> VocabularyRegistry:
    registry = VocabularyRegistry()
    registry.register_enum(ResourceType, RESOURCE_TYPE_SERVICES)
    registry.freeze()
    return registry


SHARED_VOCABULARY = _build_shared_vocabulary()
