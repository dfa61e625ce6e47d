"""Integration events published by the progress-tracking service."""

from __future__ import annotations

from typing import ClassVar

from integration_contracts.contracts.envelope import IntegrationEvent
from integration_contracts.contracts.vocabulary import OpenResourceType


class ResourceCompletedV1(IntegrationEvent):
    event_type: ClassVar[str] = "progress.resource.completed.v1"

    user_id: str
    resource_id: str
    resource_type: OpenResourceType
    score: float | None = None


class CertificateIssuedV1(IntegrationEvent):
    event_type: ClassVar[str] = "progress.certificate.issued.v1"

    user_id: str
    course_id: str
    certificate_id: str
