"""Integration events published by the catalog service."""

from __future__ import annotations

from typing import ClassVar

from integration_contracts.contracts.envelope import IntegrationEvent
from integration_contracts.contracts.vocabulary import OpenResourceType


class CourseCreatedV1(IntegrationEvent):
    event_type: ClassVar[str] = "catalog.course.created.v1"

    course_id: str
    title: str


class CoursePublishedV1(IntegrationEvent):
    event_type: ClassVar[str] = "catalog.course.published.v1"

    course_id: str
    # optional since first publication; added without a version bump
    published_by: str | None = None


class ResourceArchivedV1(IntegrationEvent):
    """Any catalog resource was archived and is no longer assignable."""

    event_type: ClassVar[str] = "catalog.resource.archived.v1"

    resource_id: str
    resource_type: OpenResourceType
