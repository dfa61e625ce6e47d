"""Producer-owned integration event schemas.

Each module belongs to the service named in its discriminators' first
segment.  The shared contract layer (``integration_contracts.contracts``)
never imports from here.
"""

from integration_contracts.contracts.envelope import IntegrationEvent

from .catalog import CourseCreatedV1, CoursePublishedV1, ResourceArchivedV1
from .enrollment import AccessGrantedV1, AccessGrantedV2, AccessRevokedV1
from .progress import CertificateIssuedV1, ResourceCompletedV1

#: Maps each schema to the *only* service allowed to publish it.  The
#: discriminator's service segment must agree.
EVENT_OWNERSHIP: dict[type[IntegrationEvent], str] = {
    # Enrollment
    AccessGrantedV1: "enrollment",
    AccessGrantedV2: "enrollment",
    AccessRevokedV1: "enrollment",
    # Catalog
    CourseCreatedV1: "catalog",
    CoursePublishedV1: "catalog",
    ResourceArchivedV1: "catalog",
    # Progress
    ResourceCompletedV1: "progress",
    CertificateIssuedV1: "progress",
}

#: All published schemas in a deterministic order.
ALL_EVENT_CLASSES: tuple[type[IntegrationEvent], ...] = tuple(EVENT_OWNERSHIP)

__all__ = [
    "ALL_EVENT_CLASSES",
    "AccessGrantedV1",
    "AccessGrantedV2",
    "AccessRevokedV1",
    "CertificateIssuedV1",
    "CourseCreatedV1",
    "CoursePublishedV1",
    "EVENT_OWNERSHIP",
    "ResourceArchivedV1",
    "ResourceCompletedV1",
]
