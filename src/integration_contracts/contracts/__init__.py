"""Shared integration-event contract layer.

Owns the envelope every cross-service event carries, the ``EventType``
naming and versioning rules, and the shared vocabulary.  Domain fields
never live here; each producing service owns its schemas in its own
module.

Sub-modules:

- **event_type**: ``service.entity.action.vN`` parsing and validation
- **envelope**: ``IntegrationEvent`` immutable base and flat wire form
- **factory**: ``EventFactory`` stamping identity and time, dual-publish
- **versioning**: Schema diffing and evolution rules
- **vocabulary**: ``ResourceType`` and the append-only vocabulary registry
- **decoding**: Consumer-side schema selection with skip-on-unknown
"""

from integration_contracts.contracts.decoding import (
    DecodeResult,
    DecoderDeadLetter,
    EventDecoder,
)
from integration_contracts.contracts.envelope import (
    ENVELOPE_KEYS,
    EVENT_TYPE_KEY,
    IntegrationEvent,
)
from integration_contracts.contracts.event_type import (
    EventTypeName,
    format_event_type,
    is_valid_event_type,
    parse_event_type,
    validate_event_type,
)
from integration_contracts.contracts.factory import EventFactory
from integration_contracts.contracts.versioning import (
    BREAKING_CHANGES,
    FieldChange,
    check_evolution,
    check_version_chain,
    diff_schemas,
    latest_versions,
    requires_new_version,
)
from integration_contracts.contracts.vocabulary import (
    SHARED_VOCABULARY,
    VOCABULARY_VERSION,
    OpenResourceType,
    ResourceType,
    VocabularyEntry,
    VocabularyRegistry,
)

__all__ = [
    "BREAKING_CHANGES",
    "DecodeResult",
    "DecoderDeadLetter",
    "ENVELOPE_KEYS",
    "EVENT_TYPE_KEY",
    "EventDecoder",
    "EventFactory",
    "EventTypeName",
    "FieldChange",
    "IntegrationEvent",
    "OpenResourceType",
    "ResourceType",
    "SHARED_VOCABULARY",
    "VOCABULARY_VERSION",
    "VocabularyEntry",
    "VocabularyRegistry",
    "check_evolution",
    "check_version_chain",
    "diff_schemas",
    "format_event_type",
    "is_valid_event_type",
    "latest_versions",
    "parse_event_type",
    "requires_new_version",
    "validate_event_type",
]
