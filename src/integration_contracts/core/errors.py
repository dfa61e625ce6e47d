"""Custom exception hierarchy for the integration contract layer.

None of these subclass ``ValueError`` on purpose: pydantic only wraps
``ValueError`` / ``AssertionError`` raised inside validators, so contract
errors surface with their own type.
"""


class ContractError(Exception):
    """Base exception for all contract-layer errors."""


# --- Configuration ---
class ConfigError(ContractError):
    """Invalid or missing configuration."""


# --- Event type discriminator ---
class EventTypeError(ContractError):
    """Discriminator problem."""


class MalformedEventTypeError(EventTypeError):
    """``EventType`` is not in ``service.entity.action.vN`` shape."""

    def __init__(self, value: object, reason: str):
        self.value = value
        self.reason = reason
        super().__init__(f"Malformed event type {value!r}: {reason}")


class MissingEventTypeError(EventTypeError):
    """A class without an ``event_type`` constant was instantiated."""


class EventTypeMismatchError(EventTypeError):
    """Payload ``EventType`` does not match the class decoding it."""


class DuplicateEventTypeError(EventTypeError):
    """Two different schemas claim the same ``EventType``."""


# --- Versioning ---
class VersionPolicyError(ContractError):
    """A schema change violates the versioning rules."""


# --- Shared vocabulary ---
class VocabularyError(ContractError):
    """Shared vocabulary governance failure."""


class VocabularyAdmissionError(VocabularyError):
    """Entry is not referenced by enough services to be shared."""


class VocabularyConflictError(VocabularyError):
    """Entry would rename, remove or re-value a published constant."""


class VocabularyFrozenError(VocabularyError):
    """Registry is read-only for the rest of the process lifetime."""
