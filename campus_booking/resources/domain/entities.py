"""
Resources Domain Entities
=========================

Pure Python domain entities for campus resources.
"""

from dataclasses import dataclass
from typing import Optional

from campus_booking.config import ResourceStatus, ResourceType
from campus_booking.core import ConflictException, InvalidStateTransitionException


@dataclass
class Resource:
    """
    A bookable campus resource.

    Only `available` resources accept new bookings.
    """

    id: Optional[int]
    name: str
    type: ResourceType
    capacity: int
    image_url: Optional[str] = None
    status: ResourceStatus = ResourceStatus.AVAILABLE

    def __post_init__(self):
        """Validate resource on initialization."""
        if not self.name.strip():
            raise ValueError("name cannot be blank")
        if self.capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.type = ResourceType(self.type)
        self.status = ResourceStatus(self.status)

    @property
    def is_available(self) -> bool:
        return self.status == ResourceStatus.AVAILABLE

    def cancel(self) -> None:
        """Withdraw the resource from booking."""
        if self.status == ResourceStatus.CANCELLED:
            raise InvalidStateTransitionException(
                "resource", self.status.value, ResourceStatus.CANCELLED.value
            )
        self.status = ResourceStatus.CANCELLED

    def restore(self) -> None:
        """Make a cancelled resource bookable again."""
        if self.status == ResourceStatus.AVAILABLE:
            raise InvalidStateTransitionException(
                "resource", self.status.value, ResourceStatus.AVAILABLE.value
            )
        self.status = ResourceStatus.AVAILABLE

    def apply_update(
        self,
        name: Optional[str] = None,
        type: Optional[ResourceType] = None,
        capacity: Optional[int] = None,
        image_url: Optional[str] = None,
    ) -> None:
        """Apply a partial update; cancelled resources are read-only."""
        if not self.is_available:
            raise ConflictException(
                "Cancelled resources cannot be updated",
                {"resource_id": self.id, "status": self.status.value},
            )
        if name is not None:
            if not name.strip():
                raise ValueError("name cannot be blank")
            self.name = name
        if type is not None:
            self.type = ResourceType(type)
        if capacity is not None:
            if capacity < 1:
                raise ValueError("capacity must be at least 1")
            self.capacity = capacity
        if image_url is not None:
            self.image_url = image_url
