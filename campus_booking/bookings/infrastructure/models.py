"""
Bookings Infrastructure Models
==============================

SQLAlchemy ORM models for the bookings module.
"""

from datetime import date, datetime, time, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from campus_booking.config import BookingStatus
from campus_booking.infrastructure.database import Base


class BookingModel(Base):
    """
    Database model for Booking entity.

    Maps to the 'bookings' table. Dates and times are campus wall-clock
    values; created_at/updated_at are UTC.
    """
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_resource_date_status", "resource_id", "date", "status"),
    )

    booking_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    resource_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("resources.resource_id", ondelete="CASCADE"),
        nullable=False
    )

    booking_date: Mapped[date] = mapped_column("date", Date, nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BookingStatus.BOOKED.value
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc)
    )
