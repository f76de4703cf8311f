"""
Resources Application DTOs
==========================

Pydantic models for the resources API.
"""

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from campus_booking.config import BookingStatus, ResourceStatus, ResourceType

SortKeyStr = Literal["date", "name", "capacity"]


# ========== Request DTOs ==========

class ResourceCreate(BaseModel):
    """Request model for creating a resource."""
    name: str = Field(..., min_length=1, max_length=255)
    type: ResourceType = Field(..., description="Room, Hall, Equipment, Lab or Other")
    capacity: int = Field(..., ge=1, description="Maximum occupants or units")
    image_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name must not be blank")
        return v.strip() if v is not None else v


class ResourceUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    type: Optional[ResourceType] = None
    capacity: Optional[int] = Field(None, ge=1)
    image_url: Optional[str] = Field(None, max_length=2048)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("name must not be blank")
        return v.strip() if v is not None else v

    @model_validator(mode="after")
    def require_a_field(self) -> "ResourceUpdate":
        if not self.model_fields_set:
            raise ValueError("at least one field must be provided")
        return self


# ========== Response DTOs ==========

class ResourceResponse(BaseModel):
    """Response model for a resource."""
    resource_id: int
    name: str
    type: ResourceType
    capacity: int
    image_url: Optional[str] = None
    status: ResourceStatus

    @classmethod
    def from_domain(cls, resource) -> "ResourceResponse":
        return cls(
            resource_id=resource.id,
            name=resource.name,
            type=resource.type,
            capacity=resource.capacity,
            image_url=resource.image_url,
            status=resource.status,
        )


class ResourceCreatedResponse(BaseModel):
    resource_id: int


class ResourceCancelResponse(BaseModel):
    """Result of cancelling a resource."""
    resource: ResourceResponse
    cancelled_bookings: int = Field(..., description="Upcoming bookings cancelled with it")


class ResourceBookingRow(BaseModel):
    """
    One row of a resources LEFT JOIN bookings query.

    Booking columns are null for resources without bookings.
    """
    resource_id: int
    name: str
    type: ResourceType
    capacity: int
    image_url: Optional[str] = None
    resource_status: ResourceStatus
    booking_id: Optional[int] = None
    booking_status: Optional[BookingStatus] = None
    booking_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class MessageResponse(BaseModel):
    message: str

