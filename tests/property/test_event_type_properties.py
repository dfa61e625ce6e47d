"""Property test: discriminator validator acceptance and rejection.

Uses hypothesis to generate candidate ``EventType`` strings and verify the
validator accepts exactly the ``service.entity.action.vN`` shape.
"""

from hypothesis import assume, given, settings, strategies as st

from integration_contracts.contracts.event_type import (
    is_valid_event_type,
    parse_event_type,
)

segment = st.from_regex(r"[a-z][a-z0-9_\-]{0,15}", fullmatch=True)
positive = st.integers(min_value=1, max_value=10**9)


@given(service=segment, entity=segment, action=segment, n=positive)
@settings(max_examples=200)
def test_well_formed_accepted(service, entity, action, n):
    value = f"{service}.{entity}.{action}.v{n}"
    assert is_valid_event_type(value)
    parsed = parse_event_type(value)
    assert parsed.version == n
    assert str(parsed) == value


@given(
    segments=st.lists(segment, min_size=1, max_size=8).filter(lambda s: len(s) != 4),
    n=positive,
)
@settings(max_examples=200)
def test_wrong_segment_count_rejected(segments, n):
    # last segment is a valid version, so only the count is wrong
    value = ".".join([*segments[:-1], f"v{n}"])
    assert not is_valid_event_type(value)


@given(service=segment, entity=segment, action=segment, version=segment)
@settings(max_examples=200)
def test_bad_version_segment_rejected(service, entity, action, version):
    assume(not (version.startswith("v") and version[1:].isdigit()
                and not version[1:].startswith("0")))
    assert not is_valid_event_type(f"{service}.{entity}.{action}.{version}")


@given(service=segment, entity=segment, action=segment,
       n=st.integers(min_value=-1000, max_value=0))
def test_non_positive_version_rejected(service, entity, action, n):
    assert not is_valid_event_type(f"{service}.{entity}.{action}.v{n}")


@given(value=st.text(max_size=60))
@settings(max_examples=300)
def test_predicate_is_pure(value):
    first = is_valid_event_type(value)
    assert is_valid_event_type(value) is first
    if first:
        assert len(value.split(".")) == 4
