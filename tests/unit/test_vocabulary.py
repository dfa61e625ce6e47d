"""Tests for the shared vocabulary (``contracts/vocabulary.py``)."""

from __future__ import annotations

from enum import Enum

import pytest

from integration_contracts.contracts.vocabulary import (
    RESOURCE_TYPE_SERVICES,
    SHARED_VOCABULARY,
    VOCABULARY_VERSION,
    ResourceType,
    VocabularyEntry,
    VocabularyRegistry,
)
from integration_contracts.core.config import ContractSettings
from integration_contracts.core.errors import (
    VocabularyAdmissionError,
    VocabularyConflictError,
    VocabularyFrozenError,
)

THREE = ("catalog", "enrollment", "progress")

#: Published values.  Append here when the vocabulary grows; never edit.
PUBLISHED_RESOURCE_TYPES = {
    "COURSE": "course",
    "LESSON": "lesson",
    "QUIZ": "quiz",
    "ASSIGNMENT": "assignment",
    "CERTIFICATE": "certificate",
}


@pytest.fixture
def registry() -> VocabularyRegistry:
    return VocabularyRegistry()


class TestAdmissionGate:
    def test_three_services_admitted(self, registry):
        entry = registry.register("BADGE", "badge", THREE)
        assert entry == VocabularyEntry(
            "BADGE", "badge", frozenset(THREE), VOCABULARY_VERSION,
        )
        assert "BADGE" in registry

    def test_two_services_rejected(self, registry):
        with pytest.raises(VocabularyAdmissionError, match="at least 3"):
            registry.register("BADGE", "badge", ("catalog", "progress"))
        assert "BADGE" not in registry

    def test_duplicate_service_names_count_once(self, registry):
        with pytest.raises(VocabularyAdmissionError):
            registry.register("BADGE", "badge", ("catalog", "catalog", "progress"))

    def test_empty_service_names_ignored(self, registry):
        with pytest.raises(VocabularyAdmissionError):
            registry.register("BADGE", "badge", ("catalog", "", "progress"))

    def test_stricter_gate(self):
        registry = VocabularyRegistry(min_services=4)
        with pytest.raises(VocabularyAdmissionError, match="at least 4"):
            registry.register("BADGE", "badge", THREE)

    def test_from_settings(self):
        settings = ContractSettings(vocabulary={"min_services": 5})
        with pytest.raises(VocabularyAdmissionError, match="at least 5"):
            VocabularyRegistry.from_settings(settings).register(
                "BADGE", "badge", THREE,
            )


class TestAppendOnly:
    def test_same_pair_merges_services(self, registry):
        registry.register("BADGE", "badge", THREE)
        entry = registry.register("BADGE", "badge", ["assessment"])
        assert entry.services == frozenset(THREE) | {"assessment"}
        assert len(registry) == 1

    def test_changing_value_rejected(self, registry):
        registry.register("BADGE", "badge", THREE)
        with pytest.raises(VocabularyConflictError, match="cannot change"):
            registry.register("BADGE", "award", THREE)
        assert registry.value_of("BADGE") == "badge"

    def test_value_under_second_name_rejected(self, registry):
        registry.register("BADGE", "badge", THREE)
        with pytest.raises(VocabularyConflictError, match="already published"):
            registry.register("AWARD", "badge", THREE)

    def test_check_append_only_accepts_additions(self, registry):
        registry.register("BADGE", "badge", THREE)
        registry.register("AWARD", "award", THREE)
        registry.check_append_only({"BADGE": "badge"})

    def test_check_append_only_detects_removal(self, registry):
        registry.register("AWARD", "award", THREE)
        with pytest.raises(VocabularyConflictError, match="removed or renamed"):
            registry.check_append_only({"BADGE": "badge"})

    def test_check_append_only_detects_new_value(self, registry):
        registry.register("BADGE", "badge-v2", THREE)
        with pytest.raises(VocabularyConflictError, match="now 'badge-v2'"):
            registry.check_append_only({"BADGE": "badge"})


class TestFreeze:
    def test_frozen_rejects_register(self, registry):
        registry.register("BADGE", "badge", THREE)
        registry.freeze()
        assert registry.frozen
        with pytest.raises(VocabularyFrozenError):
            registry.register("AWARD", "award", THREE)

    def test_mapping_is_read_only(self, registry):
        registry.register("BADGE", "badge", THREE)
        mapping = registry.as_mapping()
        with pytest.raises(TypeError):
            mapping["BADGE"] = "x"  # type: ignore[index]


class TestReadAccess:
    def test_value_of_unknown(self, registry):
        with pytest.raises(KeyError):
            registry.value_of("NOPE")

    def test_get_unknown(self, registry):
        assert registry.get("NOPE") is None

    def test_version(self, registry):
        assert registry.version == 0
        registry.register("BADGE", "badge", THREE, added_in=1)
        registry.register("AWARD", "award", THREE, added_in=2)
        assert registry.version == 2

    def test_iterates_entries(self, registry):
        registry.register("BADGE", "badge", THREE)
        assert [e.name for e in registry] == ["BADGE"]

    def test_register_enum(self, registry):
        class Colour(str, Enum):
            RED = "red"
            BLUE = "blue"

        registry.register_enum(
            Colour, {"RED": THREE, "BLUE": THREE}, added_in={"BLUE": 2},
        )
        assert registry.value_of("RED") == "red"
        assert registry.get("BLUE").added_in == 2

    def test_register_enum_enforces_gate(self, registry):
        class Colour(str, Enum):
            RED = "red"

        with pytest.raises(VocabularyAdmissionError):
            registry.register_enum(Colour, {})


class TestSharedVocabulary:
    def test_frozen(self):
        assert SHARED_VOCABULARY.frozen
        with pytest.raises(VocabularyFrozenError):
            SHARED_VOCABULARY.register("BADGE", "badge", THREE)

    def test_published_values_unchanged(self):
        SHARED_VOCABULARY.check_append_only(PUBLISHED_RESOURCE_TYPES)

    def test_enum_matches_registry(self):
        assert dict(SHARED_VOCABULARY.as_mapping()) == {
            m.name: m.value for m in ResourceType
        }

    def test_every_entry_passes_gate(self):
        for entry in SHARED_VOCABULARY:
            assert len(entry.services) >= 3
            assert entry.services == RESOURCE_TYPE_SERVICES[entry.name]

    def test_version(self):
        assert SHARED_VOCABULARY.version == VOCABULARY_VERSION

    def test_str_enum_compares_to_wire_value(self):
        assert ResourceType.LESSON == "lesson"
        assert ResourceType("quiz") is ResourceType.QUIZ
