"""
Bookings Infrastructure Repositories
====================================

SQLAlchemy implementation of the booking repository. The same class
serves the resources module's IResourceBookingLedger port, so cancelling
a resource and its bookings shares one session and one transaction.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.bookings.application.dto import UserBookingRow
from campus_booking.bookings.application.services import IBookingRepository
from campus_booking.bookings.domain import Booking, TimeSlot
from campus_booking.bookings.infrastructure.models import BookingModel
from campus_booking.config import BookingStatus
from campus_booking.core import RepositoryException
from campus_booking.resources.application.services import IResourceBookingLedger
from campus_booking.resources.infrastructure.models import ResourceModel


def _upcoming_condition(now: datetime):
    """Bookings whose end lies after `now` (campus wall clock)."""
    return or_(
        BookingModel.booking_date > now.date(),
        and_(
            BookingModel.booking_date == now.date(),
            BookingModel.end_time > now.time(),
        ),
    )


def _ended_condition(now: datetime):
    return or_(
        BookingModel.booking_date < now.date(),
        and_(
            BookingModel.booking_date == now.date(),
            BookingModel.end_time <= now.time(),
        ),
    )


class SQLAlchemyBookingRepository(IBookingRepository, IResourceBookingLedger):
    """
    SQLAlchemy implementation of booking repository.

    Handles persistence of Booking entities.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    @staticmethod
    def _to_domain(model: BookingModel) -> Booking:
        return Booking(
            id=model.booking_id,
            user_id=model.user_id,
            resource_id=model.resource_id,
            slot=TimeSlot(model.booking_date, model.start_time, model.end_time),
            status=model.status,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, booking_id: int) -> Optional[Booking]:
        """Get booking by id, refreshed from the database."""
        model = await self._session.get(BookingModel, booking_id, populate_existing=True)
        return self._to_domain(model) if model else None

    async def list_for_user(
        self,
        user_id: int,
        status: Optional[BookingStatus] = None
    ) -> List[Booking]:
        stmt = select(BookingModel).where(BookingModel.user_id == user_id)
        if status is not None:
            stmt = stmt.where(BookingModel.status == BookingStatus(status).value)
        stmt = stmt.order_by(
            BookingModel.booking_date, BookingModel.start_time, BookingModel.booking_id
        )

        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def list_user_booking_rows(self, user_id: int) -> List[UserBookingRow]:
        stmt = (
            select(
                BookingModel.booking_id,
                BookingModel.booking_date.label("date"),
                BookingModel.start_time,
                BookingModel.end_time,
                BookingModel.status,
                ResourceModel.resource_id,
                ResourceModel.name.label("resource_name"),
                ResourceModel.type.label("resource_type"),
            )
            .join(ResourceModel, BookingModel.resource_id == ResourceModel.resource_id)
            .where(BookingModel.user_id == user_id)
            .order_by(BookingModel.booking_date, BookingModel.start_time, BookingModel.booking_id)
        )

        result = await self._session.execute(stmt)
        return [UserBookingRow.model_validate(row) for row in result.all()]

    async def list_active_for_resource_on(self, resource_id: int, day: date) -> List[Booking]:
        stmt = (
            select(BookingModel)
            .where(
                BookingModel.resource_id == resource_id,
                BookingModel.booking_date == day,
                BookingModel.status == BookingStatus.BOOKED.value,
            )
            .order_by(BookingModel.start_time, BookingModel.booking_id)
            .execution_options(populate_existing=True)
        )

        result = await self._session.execute(stmt)
        return [self._to_domain(m) for m in result.scalars().all()]

    async def create(self, booking: Booking) -> Booking:
        """Create new booking."""
        model = BookingModel(
            user_id=booking.user_id,
            resource_id=booking.resource_id,
            booking_date=booking.slot.date,
            start_time=booking.slot.start_time,
            end_time=booking.slot.end_time,
            status=booking.status.value,
            created_at=booking.created_at,
            updated_at=booking.updated_at,
        )
        self._session.add(model)
        await self._session.flush()

        booking.id = model.booking_id
        return booking

    async def update(self, booking: Booking) -> Booking:
        """Update existing booking."""
        model = await self._session.get(BookingModel, booking.id)
        if model is None:
            raise RepositoryException(f"Booking {booking.id} not found")

        model.booking_date = booking.slot.date
        model.start_time = booking.slot.start_time
        model.end_time = booking.slot.end_time
        model.status = booking.status.value
        model.updated_at = booking.updated_at

        await self._session.flush()
        return booking

    async def complete_ended(self, now: datetime) -> int:
        stmt = (
            update(BookingModel)
            .where(BookingModel.status == BookingStatus.BOOKED.value, _ended_condition(now))
            .values(status=BookingStatus.COMPLETED.value, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0

    async def commit(self) -> None:
        await self._session.commit()

    # ========== IResourceBookingLedger ==========

    async def count_upcoming(self, resource_id: int, now: datetime) -> int:
        stmt = select(func.count(BookingModel.booking_id)).where(
            BookingModel.resource_id == resource_id,
            BookingModel.status == BookingStatus.BOOKED.value,
            _upcoming_condition(now),
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def cancel_upcoming(self, resource_id: int, now: datetime) -> int:
        stmt = (
            update(BookingModel)
            .where(
                BookingModel.resource_id == resource_id,
                BookingModel.status == BookingStatus.BOOKED.value,
                _upcoming_condition(now),
            )
            .values(status=BookingStatus.CANCELLED.value, updated_at=datetime.now(timezone.utc))
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return result.rowcount or 0
