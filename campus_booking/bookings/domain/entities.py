"""
Bookings Domain Entities
========================

Pure Python domain entities for resource bookings.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from campus_booking.bookings.domain.value_objects import TimeSlot
from campus_booking.config import BookingStatus
from campus_booking.core import InvalidStateTransitionException


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Booking:
    """
    A user's reservation of a resource for one time slot.

    Lifecycle: booked -> cancelled, booked -> completed. Both end states
    are terminal.
    """

    id: Optional[int]
    user_id: int
    resource_id: int
    slot: TimeSlot
    status: BookingStatus = BookingStatus.BOOKED
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self):
        self.status = BookingStatus(self.status)

    @property
    def is_active(self) -> bool:
        """Active bookings hold their slot."""
        return self.status == BookingStatus.BOOKED

    def is_upcoming(self, now: datetime) -> bool:
        """Whether the booking has not ended yet at `now` (campus wall clock)."""
        return not self.slot.has_ended(now)

    def _transition(self, target: BookingStatus) -> None:
        if self.status != BookingStatus.BOOKED:
            raise InvalidStateTransitionException(
                "booking", self.status.value, target.value,
                {"booking_id": self.id, "current_status": self.status.value,
                 "target_status": target.value}
            )
        self.status = target
        self.updated_at = _utcnow()

    def cancel(self) -> None:
        """Release the slot."""
        self._transition(BookingStatus.CANCELLED)

    def complete(self) -> None:
        """Mark the booking as used."""
        self._transition(BookingStatus.COMPLETED)

    def reschedule(self, slot: TimeSlot) -> None:
        """Move an active booking to a new slot."""
        if not self.is_active:
            raise InvalidStateTransitionException(
                "booking", self.status.value, "rescheduled",
                {"booking_id": self.id, "current_status": self.status.value}
            )
        self.slot = slot
        self.updated_at = _utcnow()
