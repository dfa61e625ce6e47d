"""Integration events published by the enrollment service."""

from __future__ import annotations

from typing import ClassVar

from integration_contracts.contracts.envelope import IntegrationEvent
from integration_contracts.contracts.vocabulary import OpenResourceType


class AccessGrantedV1(IntegrationEvent):
    """A user was granted access to a course."""

    event_type: ClassVar[str] = "enrollment.access.granted.v1"

    user_id: str
    course_id: str


class AccessGrantedV2(IntegrationEvent):
    """Access to any resource, not only whole courses.

    ``resource_type`` is mandatory, so this is a new version rather than an
    addition to v1.  Enrollment dual-publishes v1 for course grants until
    every consumer reads v2.
    """

    event_type: ClassVar[str] = "enrollment.access.granted.v2"

    user_id: str
    course_id: str
    resource_type: OpenResourceType
    granted_by: str | None = None


class AccessRevokedV1(IntegrationEvent):
    event_type: ClassVar[str] = "enrollment.access.revoked.v1"

    user_id: str
    course_id: str
    reason: str = ""
