"""Shared fixtures for the integration-contracts test suite."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from integration_contracts.contracts.decoding import EventDecoder
from integration_contracts.contracts.factory import EventFactory
from integration_contracts.core.clock import SimClock
from integration_contracts.events.enrollment import AccessGrantedV1


# ---------------------------------------------------------------------------
# Clock / factory
# ---------------------------------------------------------------------------

@pytest.fixture
def sim_clock() -> SimClock:
    """Deterministic clock starting at 2024-01-01T00:00:00Z."""
    return SimClock(datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def factory(sim_clock: SimClock) -> EventFactory:
    return EventFactory(clock=sim_clock)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@pytest.fixture
def access_granted(factory: EventFactory) -> AccessGrantedV1:
    """Access grant for user u-42 on course c-7."""
    return factory.create(AccessGrantedV1, user_id="u-42", course_id="c-7")


@pytest.fixture
def v1_decoder() -> EventDecoder:
    """Consumer that only implements ``enrollment.access.granted.v1``."""
    return EventDecoder([AccessGrantedV1])
