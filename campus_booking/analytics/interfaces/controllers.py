"""
Analytics Controllers (API Routes)
==================================
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.accounts.interfaces import get_current_user_id
from campus_booking.analytics.application import (
    AnalyticsService,
    DEFAULT_TOP_LIMIT,
    MAX_TOP_LIMIT,
    ResourceUsage,
)
from campus_booking.analytics.infrastructure import SQLAlchemyAnalyticsRepository
from campus_booking.infrastructure.database import get_session

router = APIRouter(
    prefix="/api/analytics",
    tags=["Analytics"],
    dependencies=[Depends(get_current_user_id)],
)


async def get_analytics_service(
    session: AsyncSession = Depends(get_session)
) -> AnalyticsService:
    return AnalyticsService(SQLAlchemyAnalyticsRepository(session))


@router.get(
    "/usage/",
    response_model=List[ResourceUsage],
    summary="Booking counts per resource",
    description="Every resource with its total and active booking counts, ordered by id.",
)
async def usage(service: AnalyticsService = Depends(get_analytics_service)):
    return await service.usage()


@router.get(
    "/top-rooms/",
    response_model=List[ResourceUsage],
    summary="Most booked resources",
)
async def top_rooms(
    limit: int = Query(DEFAULT_TOP_LIMIT, ge=1, le=MAX_TOP_LIMIT),
    service: AnalyticsService = Depends(get_analytics_service)
):
    return await service.top_resources(limit)
