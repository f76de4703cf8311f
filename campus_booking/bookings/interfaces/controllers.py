"""
Bookings Controllers (API Routes)
=================================

FastAPI routes for booking endpoints.

Controllers delegate to application services.
"""

import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.accounts.interfaces import get_current_user_id
from campus_booking.bookings.application import (
    AvailabilityResponse,
    BookingCreate,
    BookingReschedule,
    BookingResponse,
    BookingService,
    UserBookingRow,
)
from campus_booking.bookings.infrastructure import SQLAlchemyBookingRepository
from campus_booking.config import BookingStatus
from campus_booking.infrastructure.database import get_session
from campus_booking.resources.infrastructure import SQLAlchemyResourceRepository

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])
users_router = APIRouter(prefix="/api/users", tags=["Bookings"])
availability_router = APIRouter(prefix="/api/resources", tags=["Resources"])


# ========== Example payloads for Swagger ==========

BOOKING_CREATE_EXAMPLE = {
    "resource_id": 1,
    "date": "2026-11-02",
    "start_time": "10:00",
    "end_time": "11:30"
}

BOOKING_CONFLICT_EXAMPLE = {
    "detail": "This time slot conflicts with an existing booking",
    "details": {"resource_id": 1, "conflicting_booking_ids": [7]},
    "correlation_id": "5f0c3c9e-8d0e-4a43-9f7c-3b0c2a3f9a10"
}


# ========== Dependencies ==========

async def get_booking_service(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> BookingService:
    """Get booking service wired to the app's policy manager and locks."""
    return BookingService(
        booking_repository=SQLAlchemyBookingRepository(session),
        resource_repository=SQLAlchemyResourceRepository(session),
        policy_provider=request.app.state.policy_manager,
        locks=request.app.state.resource_locks,
    )


# ========== Route Handlers ==========

@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a resource",
    description="""
    Reserve a resource for a time slot on one day.

    **Rules:**
    - The resource must exist and be `available`
    - The slot must fall within opening hours and the duration limits for
      the resource type, must not start in the past, and must not be too
      far ahead
    - The slot must not overlap any active booking of the resource; slots
      are half-open, so 10:00-11:00 and 11:00-12:00 do not overlap
    """,
    responses={
        400: {"description": "Slot breaks the booking policy"},
        404: {"description": "Resource not found"},
        409: {
            "description": "Slot overlaps an active booking, or resource cancelled",
            "content": {"application/json": {"example": BOOKING_CONFLICT_EXAMPLE}},
        },
    },
)
async def create_booking(
    request: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    booking = await service.create_booking(user_id, request)
    return BookingResponse.from_domain(booking)


@router.get("/", response_model=List[BookingResponse], summary="List my bookings")
async def list_my_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status"),
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    bookings = await service.list_bookings(user_id, status_filter)
    return [BookingResponse.from_domain(b) for b in bookings]


@router.get(
    "/{booking_id}/",
    response_model=BookingResponse,
    summary="Get one of my bookings",
    responses={404: {"description": "Booking not found"}},
)
async def get_booking(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    booking = await service.get_booking(user_id, booking_id)
    return BookingResponse.from_domain(booking)


@router.put(
    "/{booking_id}/cancel",
    response_model=BookingResponse,
    summary="Cancel a booking",
    responses={409: {"description": "Booking is not active"}},
)
async def cancel_booking(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    booking = await service.cancel_booking(user_id, booking_id)
    return BookingResponse.from_domain(booking)


@router.put(
    "/{booking_id}/complete",
    response_model=BookingResponse,
    summary="Mark a booking as completed",
    responses={409: {"description": "Booking is not active"}},
)
async def complete_booking(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    booking = await service.complete_booking(user_id, booking_id)
    return BookingResponse.from_domain(booking)


@router.put(
    "/{booking_id}/reschedule",
    response_model=BookingResponse,
    summary="Move a booking to a new slot",
    responses={
        400: {"description": "Slot breaks the booking policy"},
        409: {"description": "Slot overlaps an active booking, or booking not active"},
    },
)
async def reschedule_booking(
    booking_id: int,
    request: BookingReschedule,
    user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    booking = await service.reschedule_booking(user_id, booking_id, request)
    return BookingResponse.from_domain(booking)


@users_router.get(
    "/{user_id}/bookings/",
    response_model=List[UserBookingRow],
    summary="List a user's bookings with resource details",
    responses={403: {"description": "Not your bookings"}},
)
async def list_user_bookings(
    user_id: int,
    current_user_id: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    return await service.list_user_bookings(current_user_id, user_id)


@availability_router.get(
    "/{resource_id}/availability/",
    response_model=AvailabilityResponse,
    summary="Booked and free windows of a resource on a day",
    responses={404: {"description": "Resource not found"}},
)
async def get_availability(
    resource_id: int,
    day: dt.date = Query(..., alias="date", description="Day to inspect (YYYY-MM-DD)"),
    _: int = Depends(get_current_user_id),
    service: BookingService = Depends(get_booking_service)
):
    return await service.get_availability(resource_id, day)
