"""
Analytics Infrastructure Repositories
=====================================

Aggregate queries over resources LEFT JOIN bookings.
"""

from typing import List, Optional

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.analytics.application.dto import ResourceUsage
from campus_booking.analytics.application.services import IAnalyticsRepository
from campus_booking.bookings.infrastructure.models import BookingModel
from campus_booking.config import BookingStatus
from campus_booking.resources.infrastructure.models import ResourceModel


class SQLAlchemyAnalyticsRepository(IAnalyticsRepository):
    """SQLAlchemy implementation of the usage read model."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def usage(self, limit: Optional[int] = None, by_total: bool = False) -> List[ResourceUsage]:
        # COUNT(column) skips the NULL row a resource without bookings produces
        total = func.count(BookingModel.booking_id)
        active = func.coalesce(
            func.sum(case((BookingModel.status == BookingStatus.BOOKED.value, 1), else_=0)),
            0,
        )

        stmt = (
            select(
                ResourceModel.resource_id,
                ResourceModel.name,
                total.label("total_bookings"),
                active.label("active_bookings"),
            )
            .outerjoin(BookingModel, BookingModel.resource_id == ResourceModel.resource_id)
            .group_by(ResourceModel.resource_id, ResourceModel.name)
        )

        if by_total:
            stmt = stmt.order_by(total.desc(), ResourceModel.resource_id)
        else:
            stmt = stmt.order_by(ResourceModel.resource_id)

        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)
        return [ResourceUsage.model_validate(row) for row in result.all()]
