"""
Resources Application Layer
===========================

Contains:
- Services: resource lifecycle and queries
- DTOs: request/response models
"""

from campus_booking.resources.application.dto import (
    ResourceCreate,
    ResourceUpdate,
    ResourceResponse,
    ResourceCreatedResponse,
    ResourceCancelResponse,
    ResourceBookingRow,
    MessageResponse,
    SortKeyStr,
)
from campus_booking.resources.application.services import (
    ResourceService,
    IResourceRepository,
    IResourceBookingLedger,
    IResourceLocks,
)

__all__ = [
    # DTOs
    "ResourceCreate",
    "ResourceUpdate",
    "ResourceResponse",
    "ResourceCreatedResponse",
    "ResourceCancelResponse",
    "ResourceBookingRow",
    "MessageResponse",
    "SortKeyStr",
    # Services
    "ResourceService",
    # Repository Interfaces
    "IResourceRepository",
    "IResourceBookingLedger",
    "IResourceLocks",
]
