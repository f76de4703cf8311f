"""
Bookings Interfaces Layer
=========================

FastAPI routes for bookings, per-user booking listings and resource
availability.
"""

from campus_booking.bookings.interfaces.controllers import (
    router as bookings_router,
    users_router,
    availability_router,
)

__all__ = ["bookings_router", "users_router", "availability_router"]
