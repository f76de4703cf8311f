"""
Analytics Application Services
==============================
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from campus_booking.analytics.application.dto import ResourceUsage
from campus_booking.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TOP_LIMIT = 10
MAX_TOP_LIMIT = 100


class IAnalyticsRepository(ABC):
    """Read model for usage counts."""

    @abstractmethod
    async def usage(self, limit: Optional[int] = None, by_total: bool = False) -> List[ResourceUsage]:
        """
        Booking counts for every resource.

        Args:
            limit: Maximum rows to return (all when None)
            by_total: Order by total bookings descending instead of by id
        """
        pass


class AnalyticsService:
    """Usage reports over resources and bookings."""

    def __init__(self, analytics_repository: IAnalyticsRepository):
        self._repo = analytics_repository

    async def usage(self) -> List[ResourceUsage]:
        return await self._repo.usage()

    async def top_resources(self, limit: int = DEFAULT_TOP_LIMIT) -> List[ResourceUsage]:
        """Most booked resources first; ties go to the lower resource id."""
        if not 1 <= limit <= MAX_TOP_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_TOP_LIMIT}")
        rows = await self._repo.usage(limit=limit, by_total=True)
        logger.debug("Top resources computed", extra={"limit": limit, "rows": len(rows)})
        return rows
