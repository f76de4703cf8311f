"""
Analytics DTOs
==============
"""

from pydantic import BaseModel, ConfigDict, Field


class ResourceUsage(BaseModel):
    """Booking counts for one resource."""
    resource_id: int
    name: str
    total_bookings: int = Field(..., ge=0, description="Bookings of any status")
    active_bookings: int = Field(..., ge=0, description="Bookings still booked")

    model_config = ConfigDict(from_attributes=True)
