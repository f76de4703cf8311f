"""
Bookings Application Services
=============================

Application services orchestrate booking rules and coordinate between
domain entities and repositories.

Conflict-free scheduling:
- Every create/reschedule for a resource runs under that resource's lock
  and also locks the resource row where the database supports it.
- The conflict check and the write are committed before the lock is
  released, so concurrent requests never both claim overlapping slots.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import List, Optional

from campus_booking.bookings.application.dto import (
    AvailabilityResponse,
    BookedWindow,
    BookingCreate,
    BookingReschedule,
    SlotRequest,
    TimeWindow,
    UserBookingRow,
)
from campus_booking.bookings.domain import (
    AvailabilityCalculator,
    Booking,
    BookingPolicy,
    TimeSlot,
)
from campus_booking.config import BookingStatus, ResourceStatus
from campus_booking.core import (
    BookingConflictException,
    ConflictException,
    InvalidStateTransitionException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ValidationException,
)
from campus_booking.resources.application.services import IResourceLocks, IResourceRepository
from campus_booking.resources.domain import Resource
from campus_booking.shared.infrastructure.clock import Clock, campus_now
from campus_booking.shared.infrastructure.logging import get_logger, log_latency

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IBookingRepository(ABC):
    """Interface for booking data access."""

    @abstractmethod
    async def get_by_id(self, booking_id: int) -> Optional[Booking]:
        """Get booking by id."""

    @abstractmethod
    async def list_for_user(
        self,
        user_id: int,
        status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        """A user's bookings ordered by date and start time."""

    @abstractmethod
    async def list_user_booking_rows(self, user_id: int) -> List[UserBookingRow]:
        """A user's bookings joined with their resources."""

    @abstractmethod
    async def list_active_for_resource_on(self, resource_id: int, day: date) -> List[Booking]:
        """Active bookings of a resource on a day, ordered by start time."""

    @abstractmethod
    async def create(self, booking: Booking) -> Booking:
        """Persist a new booking."""

    @abstractmethod
    async def update(self, booking: Booking) -> Booking:
        """Persist status/slot changes."""

    @abstractmethod
    async def complete_ended(self, now: datetime) -> int:
        """Mark active bookings that ended at or before `now` as completed."""

    @abstractmethod
    async def commit(self) -> None:
        """Commit the unit of work."""


class IBookingPolicyProvider(ABC):
    """Interface for booking policy access."""

    @abstractmethod
    def get_policy(self) -> BookingPolicy:
        """Get current booking policy."""


# ========== Application Services ==========

class BookingService:
    """
    Service for creating, querying and transitioning bookings.
    """

    def __init__(
        self,
        booking_repository: IBookingRepository,
        resource_repository: IResourceRepository,
        policy_provider: IBookingPolicyProvider,
        locks: IResourceLocks,
        clock: Clock = campus_now,
    ):
        self._booking_repo = booking_repository
        self._resource_repo = resource_repository
        self._policy_provider = policy_provider
        self._locks = locks
        self._clock = clock

    @staticmethod
    def _to_slot(request: SlotRequest) -> TimeSlot:
        try:
            return TimeSlot(request.date, request.start_time, request.end_time)
        except ValueError as e:
            raise ValidationException(str(e)) from e

    async def _lock_bookable_resource(self, resource_id: int) -> Resource:
        resource = await self._resource_repo.get_for_update(resource_id)
        if resource is None:
            raise ResourceNotFoundException("Resource", resource_id)
        if not resource.is_available:
            raise ConflictException(
                "Resource is not available for booking",
                {"resource_id": resource_id, "status": resource.status.value},
            )
        return resource

    async def _ensure_no_conflict(
        self,
        resource_id: int,
        slot: TimeSlot,
        exclude_id: Optional[int] = None
    ) -> None:
        with log_latency(logger, "conflict_check", resource_id=resource_id):
            active = await self._booking_repo.list_active_for_resource_on(resource_id, slot.date)
            conflicts = AvailabilityCalculator.find_conflicts(
                slot, [(b.id, b.slot) for b in active], exclude_id=exclude_id
            )

        if conflicts:
            logger.warning(
                "Booking conflict",
                extra={
                    "resource_id": resource_id,
                    "date": slot.date.isoformat(),
                    "conflicting_booking_ids": conflicts,
                }
            )
            raise BookingConflictException(resource_id, conflicts)

    async def create_booking(self, user_id: int, request: BookingCreate) -> Booking:
        """
        Book a resource for a slot.

        Raises:
            ResourceNotFoundException: Unknown resource
            ConflictException: Resource is cancelled
            ValidationException: Slot breaks the booking policy
            BookingConflictException: Slot overlaps an active booking
        """
        slot = self._to_slot(request)
        policy = self._policy_provider.get_policy()

        async with self._locks.hold(request.resource_id):
            resource = await self._lock_bookable_resource(request.resource_id)
            policy.validate_slot(slot, resource.type.value, self._clock())
            await self._ensure_no_conflict(resource.id, slot)

            booking = await self._booking_repo.create(
                Booking(id=None, user_id=user_id, resource_id=resource.id, slot=slot)
            )
            await self._booking_repo.commit()

        logger.info(
            "Booking created",
            extra={
                "booking_id": booking.id,
                "user_id": user_id,
                "resource_id": resource.id,
                "date": slot.date.isoformat(),
            }
        )
        return booking

    async def get_booking(self, user_id: int, booking_id: int) -> Booking:
        """
        Get one of the caller's bookings.

        Other users' bookings are reported as not found.
        """
        booking = await self._booking_repo.get_by_id(booking_id)
        if booking is None or booking.user_id != user_id:
            raise ResourceNotFoundException("Booking", booking_id)
        return booking

    async def list_bookings(
        self,
        user_id: int,
        status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        return await self._booking_repo.list_for_user(user_id, status)

    async def list_user_bookings(self, requester_id: int, user_id: int) -> List[UserBookingRow]:
        """
        Bookings of `user_id` joined with resources.

        Raises:
            PermissionDeniedException: If requesting another user's bookings
        """
        if requester_id != user_id:
            raise PermissionDeniedException(
                "You can only view your own bookings",
                {"user_id": user_id},
            )
        return await self._booking_repo.list_user_booking_rows(user_id)

    async def cancel_booking(self, user_id: int, booking_id: int) -> Booking:
        booking = await self.get_booking(user_id, booking_id)
        booking.cancel()
        await self._booking_repo.update(booking)
        logger.info("Booking cancelled", extra={"booking_id": booking_id, "user_id": user_id})
        return booking

    async def complete_booking(self, user_id: int, booking_id: int) -> Booking:
        booking = await self.get_booking(user_id, booking_id)
        booking.complete()
        await self._booking_repo.update(booking)
        logger.info("Booking completed", extra={"booking_id": booking_id, "user_id": user_id})
        return booking

    async def reschedule_booking(
        self,
        user_id: int,
        booking_id: int,
        request: BookingReschedule
    ) -> Booking:
        """
        Move an active booking to a new slot on the same resource.

        Applies the same policy and conflict checks as create, ignoring the
        booking's own current slot.
        """
        booking = await self.get_booking(user_id, booking_id)
        if not booking.is_active:
            raise InvalidStateTransitionException(
                "booking", booking.status.value, "rescheduled", {"booking_id": booking_id}
            )

        slot = self._to_slot(request)
        policy = self._policy_provider.get_policy()

        async with self._locks.hold(booking.resource_id):
            resource = await self._lock_bookable_resource(booking.resource_id)
            policy.validate_slot(slot, resource.type.value, self._clock())
            await self._ensure_no_conflict(resource.id, slot, exclude_id=booking.id)

            # Re-read under the lock: a concurrent cancel may have won.
            current = await self._booking_repo.get_by_id(booking_id)
            if current is None:
                raise ResourceNotFoundException("Booking", booking_id)
            current.reschedule(slot)
            await self._booking_repo.update(current)
            await self._booking_repo.commit()

        logger.info(
            "Booking rescheduled",
            extra={"booking_id": booking_id, "date": slot.date.isoformat()}
        )
        return current

    async def get_availability(self, resource_id: int, day: date) -> AvailabilityResponse:
        """Booked and free windows of a resource within opening hours."""
        resource = await self._resource_repo.get_by_id(resource_id)
        if resource is None:
            raise ResourceNotFoundException("Resource", resource_id)

        policy = self._policy_provider.get_policy()
        active = await self._booking_repo.list_active_for_resource_on(resource_id, day)

        if resource.status == ResourceStatus.AVAILABLE:
            free = AvailabilityCalculator.free_windows(
                day, policy.opening_time, policy.closing_time, [b.slot for b in active]
            )
        else:
            free = []

        return AvailabilityResponse(
            resource_id=resource_id,
            date=day,
            resource_status=resource.status,
            opening_time=policy.opening_time,
            closing_time=policy.closing_time,
            booked=[
                BookedWindow(
                    booking_id=b.id,
                    start_time=b.slot.start_time,
                    end_time=b.slot.end_time,
                )
                for b in active
            ],
            free=[TimeWindow(start_time=w.start_time, end_time=w.end_time) for w in free],
        )

    async def complete_ended_bookings(self) -> int:
        """Complete every active booking whose slot has ended."""
        completed = await self._booking_repo.complete_ended(self._clock())
        if completed:
            logger.info("Completed ended bookings", extra={"completed": completed})
        return completed
