"""Schema evolution rules for integration events.

A new version segment is **required** when a published schema loses a
field, changes a field's type or meaning, makes an optional field
mandatory, or adds a mandatory field.  It is **not** required for adding an
optional field, documentation changes, or consumer-side bug fixes.

Versions of one ``(service, entity, action)`` family may coexist while
consumers migrate; they must be numbered 1..N without gaps.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from typing import NamedTuple

from integration_contracts.core.enums import SchemaChange
from integration_contracts.core.errors import VersionPolicyError

from .envelope import IntegrationEvent

logger = logging.getLogger(__name__)

BREAKING_CHANGES: frozenset[SchemaChange] = frozenset({
    SchemaChange.FIELD_REMOVED,
    SchemaChange.FIELD_TYPE_CHANGED,
    SchemaChange.FIELD_SEMANTICS_CHANGED,
    SchemaChange.FIELD_MADE_REQUIRED,
    SchemaChange.FIELD_ADDED_REQUIRED,
})

_ENVELOPE_FIELDS = frozenset(IntegrationEvent.model_fields)


def requires_new_version(change: SchemaChange) -> bool:
    """Return True if *change* must ship under a new ``EventType``."""
    return change in BREAKING_CHANGES


class FieldChange(NamedTuple):
    field: str
    change: SchemaChange
    detail: str = ""

    @property
    def breaking(self) -> bool:
        return requires_new_version(self.change)


def diff_schemas(
    old: type[IntegrationEvent],
    new: type[IntegrationEvent],
) -> list[FieldChange]:
    """Compare the payload fields of two schemas.

    Only structural changes are visible here.  Semantic changes and
    documentation edits have to be declared by whoever makes them.
    """
    old_fields = {
        k: v for k, v in old.model_fields.items() if k not in _ENVELOPE_FIELDS
    }
    new_fields = {
        k: v for k, v in new.model_fields.items() if k not in _ENVELOPE_FIELDS
    }
    changes: list[FieldChange] = []

    for name in sorted(old_fields.keys() - new_fields.keys()):
        changes.append(FieldChange(name, SchemaChange.FIELD_REMOVED))

    for name in sorted(new_fields.keys() - old_fields.keys()):
        kind = (
            SchemaChange.FIELD_ADDED_REQUIRED
            if new_fields[name].is_required()
            else SchemaChange.FIELD_ADDED_OPTIONAL
        )
        changes.append(FieldChange(name, kind))

    for name in sorted(old_fields.keys() & new_fields.keys()):
        before, after = old_fields[name], new_fields[name]
        if before.annotation != after.annotation:
            changes.append(FieldChange(
                name,
                SchemaChange.FIELD_TYPE_CHANGED,
                f"{_type_name(before.annotation)} -> "
                f"{_type_name(after.annotation)}",
            ))
        if not before.is_required() and after.is_required():
            changes.append(FieldChange(name, SchemaChange.FIELD_MADE_REQUIRED))
        elif before.is_required() and not after.is_required():
            changes.append(FieldChange(name, SchemaChange.FIELD_MADE_OPTIONAL))

    return changes


def check_evolution(
    old: type[IntegrationEvent],
    new: type[IntegrationEvent],
    declared: Iterable[SchemaChange] = (),
) -> list[FieldChange]:
    """Enforce the versioning rules between two schemas of one family.

    Args:
        old: The published schema.
        new: The candidate schema.
        declared: Non-structural changes the author declares, e.g.
            ``SchemaChange.FIELD_SEMANTICS_CHANGED``.

    Returns:
        Every detected or declared change.

    Raises:
        VersionPolicyError: If the schemas belong to different families, a
            breaking change reuses the old ``EventType``, or the version does
            not move forward by exactly one.
    """
    if old.event_type is None or new.event_type is None:
        raise VersionPolicyError("both schemas must declare an event_type")
    if old.event_family != new.event_family:
        raise VersionPolicyError(
            f"{new.event_type!r} is not a version of {old.event_type!r}"
        )

    changes = diff_schemas(old, new)
    changes.extend(FieldChange("*", change) for change in declared)
    breaking = [c for c in changes if c.breaking]

    if old.event_type == new.event_type:
        if breaking:
            summary = ", ".join(f"{c.field}:{c.change.value}" for c in breaking)
            raise VersionPolicyError(
                f"breaking change to {old.event_type!r} ({summary}) must be "
                "published under a new version"
            )
        return changes

    if old.schema_version is None or new.schema_version is None:
        raise VersionPolicyError(
            f"cannot order {old.event_type!r} and {new.event_type!r}: "
            "no parsed version"
        )
    expected = old.schema_version + 1
    if new.schema_version != expected:
        raise VersionPolicyError(
            f"{new.event_type!r} must be version v{expected} to follow "
            f"{old.event_type!r}"
        )
    if not breaking:
        logger.info(
            "%s -> %s bumps the version without a breaking change",
            old.event_type, new.event_type,
        )
    return changes


def group_by_family(
    event_classes: Iterable[type[IntegrationEvent]],
) -> dict[tuple[str, str, str], list[type[IntegrationEvent]]]:
    """Group schemas by family, each list ordered by version."""
    families: dict[
        tuple[str, str, str], list[type[IntegrationEvent]]
    ] = defaultdict(list)
    for cls in event_classes:
        if cls.event_family is None:
            raise VersionPolicyError(f"{cls.__name__} has no event_type")
        families[cls.event_family].append(cls)
    for versions in families.values():
        versions.sort(key=lambda c: c.schema_version or 0)
    return dict(families)


def check_version_chain(
    event_classes: Iterable[type[IntegrationEvent]],
) -> None:
    """Every family must be numbered v1..vN with no gaps or duplicates."""
    for family, versions in group_by_family(event_classes).items():
        numbers = [cls.schema_version for cls in versions]
        if numbers != list(range(1, len(numbers) + 1)):
            raise VersionPolicyError(
                f"{'.'.join(family)} has versions {numbers}; expected "
                f"1..{len(numbers)} without gaps"
            )


def latest_versions(
    event_classes: Iterable[type[IntegrationEvent]],
) -> dict[tuple[str, str, str], type[IntegrationEvent]]:
    """Newest schema per family."""
    return {
        family: versions[-1]
        for family, versions in group_by_family(event_classes).items()
    }


def _type_name(annotation: object) -> str:
    return getattr(annotation, "__name__", None) or repr(annotation)
