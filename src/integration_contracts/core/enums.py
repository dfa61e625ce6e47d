"""Enumerations used across the contract layer."""

from enum import Enum


class SchemaChange(str, Enum):
    """Kinds of change a published event schema can go through."""

    FIELD_ADDED_OPTIONAL = "field_added_optional"
    FIELD_ADDED_REQUIRED = "field_added_required"
    FIELD_REMOVED = "field_removed"
    FIELD_TYPE_CHANGED = "field_type_changed"
    FIELD_SEMANTICS_CHANGED = "field_semantics_changed"
    FIELD_MADE_REQUIRED = "field_made_required"
    FIELD_MADE_OPTIONAL = "field_made_optional"
    DOCUMENTATION = "documentation"
    CONSUMER_BUGFIX = "consumer_bugfix"


class DecodeOutcome(str, Enum):
    DECODED = "decoded"
    SKIPPED = "skipped"            # well-formed type this consumer does not know
    DEAD_LETTERED = "dead_lettered"
    REJECTED = "rejected"          # payload itself is malformed


class UnknownEventPolicy(str, Enum):
    """What a consumer does with a well-formed but unknown ``EventType``."""

    SKIP = "skip"
    DEAD_LETTER = "dead_letter"


class LogFormat(str, Enum):
    JSON = "json"
    CONSOLE = "console"
