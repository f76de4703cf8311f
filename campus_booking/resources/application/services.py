"""
Resources Application Services
==============================

Resource lifecycle and queries.

Cancelling or deleting a resource touches its bookings; that side is
reached through IResourceBookingLedger so this module does not depend
on the bookings module.

Every write to an existing resource runs under the same per-resource
lock as booking writes and commits before the lock is released, so a
cancel never interleaves with a booking being placed on that resource.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import AsyncContextManager, List, Optional

from campus_booking.config import BookingStatus, ResourceStatus, ResourceType
from campus_booking.core import ConflictException, ResourceNotFoundException
from campus_booking.resources.application.dto import (
    ResourceBookingRow,
    ResourceCreate,
    ResourceUpdate,
    SortKeyStr,
)
from campus_booking.resources.domain import Resource
from campus_booking.shared.infrastructure.clock import Clock, campus_now
from campus_booking.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IResourceRepository(ABC):
    """Interface for resource data access."""

    @abstractmethod
    async def get_by_id(self, resource_id: int) -> Optional[Resource]:
        """Get resource by id."""

    @abstractmethod
    async def get_for_update(self, resource_id: int) -> Optional[Resource]:
        """Get resource by id, locking its row where the database supports it."""

    @abstractmethod
    async def list_all(self) -> List[Resource]:
        """All resources ordered by id."""

    @abstractmethod
    async def create(self, resource: Resource) -> Resource:
        """Persist a new resource."""

    @abstractmethod
    async def update(self, resource: Resource) -> Resource:
        """Persist changes to an existing resource."""

    @abstractmethod
    async def delete(self, resource_id: int) -> None:
        """Delete a resource and its booking history."""

    @abstractmethod
    async def search(self, query: str) -> List[Resource]:
        """Case-insensitive substring search over name, type and image_url."""

    @abstractmethod
    async def list_with_bookings(
        self,
        resource_type: Optional[ResourceType] = None,
        booking_status: Optional[BookingStatus] = None,
        resource_status: Optional[ResourceStatus] = None,
    ) -> List[ResourceBookingRow]:
        """Resources LEFT JOIN bookings, filtered."""

    @abstractmethod
    async def list_sorted_with_bookings(self, sort_by: SortKeyStr) -> List[ResourceBookingRow]:
        """Resources LEFT JOIN bookings, ordered by the given key."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit pending changes."""


class IResourceBookingLedger(ABC):
    """Booking-side operations needed to keep resources consistent."""

    @abstractmethod
    async def count_upcoming(self, resource_id: int, now: datetime) -> int:
        """Number of active bookings of the resource that end after `now`."""

    @abstractmethod
    async def cancel_upcoming(self, resource_id: int, now: datetime) -> int:
        """Cancel active bookings that end after `now`; returns how many."""


class IResourceLocks(ABC):
    """Per-resource mutual exclusion for resource and booking writes."""

    @abstractmethod
    def hold(self, resource_id: int) -> AsyncContextManager[None]:
        """Async context manager holding the lock of one resource."""


# ========== Application Services ==========

class ResourceService:
    """
    Service for resource management and resource queries.
    """

    def __init__(
        self,
        resource_repository: IResourceRepository,
        booking_ledger: IResourceBookingLedger,
        locks: IResourceLocks,
        clock: Clock = campus_now,
    ):
        self._resource_repo = resource_repository
        self._ledger = booking_ledger
        self._locks = locks
        self._clock = clock

    async def list_resources(self) -> List[Resource]:
        return await self._resource_repo.list_all()

    async def get_resource(self, resource_id: int) -> Resource:
        """
        Get a resource.

        Raises:
            ResourceNotFoundException: If no resource has this id
        """
        resource = await self._resource_repo.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundException("Resource", resource_id)
        return resource

    async def create_resource(self, request: ResourceCreate) -> Resource:
        resource = await self._resource_repo.create(
            Resource(
                id=None,
                name=request.name,
                type=request.type,
                capacity=request.capacity,
                image_url=request.image_url,
            )
        )
        logger.info("Resource created", extra={"resource_id": resource.id, "type": resource.type.value})
        return resource

    async def _lock_resource(self, resource_id: int) -> Resource:
        """Re-read the resource inside its lock."""
        resource = await self._resource_repo.get_for_update(resource_id)
        if resource is None:
            raise ResourceNotFoundException("Resource", resource_id)
        return resource

    async def update_resource(self, resource_id: int, request: ResourceUpdate) -> Resource:
        async with self._locks.hold(resource_id):
            resource = await self._lock_resource(resource_id)
            resource.apply_update(
                name=request.name,
                type=request.type,
                capacity=request.capacity,
                image_url=request.image_url,
            )
            resource = await self._resource_repo.update(resource)
            await self._resource_repo.commit()
        return resource

    async def cancel_resource(self, resource_id: int) -> tuple[Resource, int]:
        """
        Cancel a resource and every upcoming active booking on it.

        Both changes are written through the same session and committed
        under the resource lock, so a booking placed concurrently either
        lands before the cancel (and is cancelled with the rest) or sees
        the resource as cancelled.

        Returns:
            The cancelled resource and the number of bookings cancelled
        """
        async with self._locks.hold(resource_id):
            resource = await self._lock_resource(resource_id)
            resource.cancel()
            await self._resource_repo.update(resource)
            cancelled = await self._ledger.cancel_upcoming(resource_id, self._clock())
            await self._resource_repo.commit()

        logger.info(
            "Resource cancelled",
            extra={"resource_id": resource_id, "cancelled_bookings": cancelled}
        )
        return resource, cancelled

    async def restore_resource(self, resource_id: int) -> Resource:
        """Make a cancelled resource bookable again (bookings stay cancelled)."""
        async with self._locks.hold(resource_id):
            resource = await self._lock_resource(resource_id)
            resource.restore()
            resource = await self._resource_repo.update(resource)
            await self._resource_repo.commit()
        return resource

    async def delete_resource(self, resource_id: int) -> None:
        """
        Delete a resource with no upcoming active bookings.

        Raises:
            ConflictException: If upcoming bookings still reference it
        """
        async with self._locks.hold(resource_id):
            await self._lock_resource(resource_id)

            upcoming = await self._ledger.count_upcoming(resource_id, self._clock())
            if upcoming:
                raise ConflictException(
                    "Resource has upcoming bookings; cancel it first",
                    {"resource_id": resource_id, "upcoming_bookings": upcoming},
                )

            await self._resource_repo.delete(resource_id)
            await self._resource_repo.commit()
        logger.info("Resource deleted", extra={"resource_id": resource_id})

    async def search(self, query: Optional[str]) -> List[Resource]:
        query = (query or "").strip()
        if not query:
            return await self._resource_repo.list_all()
        return await self._resource_repo.search(query)

    async def filter(
        self,
        resource_type: Optional[ResourceType] = None,
        booking_status: Optional[BookingStatus] = None,
        resource_status: Optional[ResourceStatus] = None,
    ) -> List[ResourceBookingRow]:
        return await self._resource_repo.list_with_bookings(
            resource_type, booking_status, resource_status
        )

    async def sort(self, sort_by: SortKeyStr = "date") -> List[ResourceBookingRow]:
        return await self._resource_repo.list_sorted_with_bookings(sort_by)
