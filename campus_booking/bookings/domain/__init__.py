"""
Bookings Domain Layer
=====================

Contains:
- Entities: Booking
- Value Objects: TimeSlot, BookingPolicy, DurationLimits
- Domain Services: AvailabilityCalculator

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from campus_booking.bookings.domain.entities import Booking
from campus_booking.bookings.domain.value_objects import (
    AvailabilityCalculator,
    BookingPolicy,
    DurationLimits,
    TimeSlot,
)

__all__ = [
    # Entities
    "Booking",
    # Value Objects & Services
    "TimeSlot",
    "BookingPolicy",
    "DurationLimits",
    "AvailabilityCalculator",
]
