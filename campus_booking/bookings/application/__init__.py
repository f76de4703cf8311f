"""
Bookings Application Layer
==========================

Contains:
- Services: Orchestrate booking rules and coordinate with repositories
- DTOs: Data transfer objects for API serialization

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from campus_booking.bookings.application.dto import (
    SlotRequest,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
    UserBookingRow,
    TimeWindow,
    BookedWindow,
    AvailabilityResponse,
)
from campus_booking.bookings.application.services import (
    BookingService,
    IBookingRepository,
    IBookingPolicyProvider,
    IResourceLocks,
)

__all__ = [
    # DTOs
    "SlotRequest",
    "BookingCreate",
    "BookingReschedule",
    "BookingResponse",
    "UserBookingRow",
    "TimeWindow",
    "BookedWindow",
    "AvailabilityResponse",
    # Services
    "BookingService",
    # Repository Interfaces
    "IBookingRepository",
    "IBookingPolicyProvider",
    "IResourceLocks",
]
