"""
Bookings Application DTOs
=========================

Pydantic models for the bookings API.
"""

import datetime as dt
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from campus_booking.config import BookingStatus, ResourceStatus, ResourceType


# ========== Request DTOs ==========

class SlotRequest(BaseModel):
    """A requested time slot (campus wall-clock time)."""
    date: dt.date = Field(..., description="Booking date (YYYY-MM-DD)")
    start_time: dt.time = Field(..., description="Start time (HH:MM)")
    end_time: dt.time = Field(..., description="End time (HH:MM)")

    @model_validator(mode="after")
    def check_order(self) -> "SlotRequest":
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


class BookingCreate(SlotRequest):
    """Request model for booking a resource."""
    resource_id: int = Field(..., ge=1)


class BookingReschedule(SlotRequest):
    """Request model for moving a booking to a new slot."""


# ========== Response DTOs ==========

class BookingResponse(BaseModel):
    """Response model for a booking."""
    booking_id: int
    user_id: int
    resource_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus
    created_at: dt.datetime
    updated_at: dt.datetime

    @classmethod
    def from_domain(cls, booking) -> "BookingResponse":
        return cls(
            booking_id=booking.id,
            user_id=booking.user_id,
            resource_id=booking.resource_id,
            date=booking.slot.date,
            start_time=booking.slot.start_time,
            end_time=booking.slot.end_time,
            status=booking.status,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )


class UserBookingRow(BaseModel):
    """A user's booking joined with the booked resource."""
    booking_id: int
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus
    resource_id: int
    resource_name: str
    resource_type: ResourceType

    model_config = ConfigDict(from_attributes=True)


class TimeWindow(BaseModel):
    start_time: dt.time
    end_time: dt.time


class BookedWindow(TimeWindow):
    booking_id: int


class AvailabilityResponse(BaseModel):
    """Booked and free windows of a resource on one day."""
    resource_id: int
    date: dt.date
    resource_status: ResourceStatus
    opening_time: dt.time
    closing_time: dt.time
    booked: List[BookedWindow] = Field(default_factory=list)
    free: List[TimeWindow] = Field(default_factory=list)

