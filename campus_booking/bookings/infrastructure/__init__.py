"""
Bookings Infrastructure Layer
=============================

Infrastructure implementations for bookings:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer
- External: policy file watcher, resource locks, completion scheduler
"""

from campus_booking.bookings.infrastructure.models import BookingModel
from campus_booking.bookings.infrastructure.repositories import SQLAlchemyBookingRepository
from campus_booking.bookings.infrastructure.external import (
    BookingPolicyManager,
    ResourceLockRegistry,
    BookingCompletionScheduler,
)

__all__ = [
    "BookingModel",
    "SQLAlchemyBookingRepository",
    "BookingPolicyManager",
    "ResourceLockRegistry",
    "BookingCompletionScheduler",
]
