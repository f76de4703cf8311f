"""
Analytics Application Layer
===========================
"""

from campus_booking.analytics.application.dto import ResourceUsage
from campus_booking.analytics.application.services import (
    AnalyticsService,
    IAnalyticsRepository,
    DEFAULT_TOP_LIMIT,
    MAX_TOP_LIMIT,
)

__all__ = [
    "ResourceUsage",
    "AnalyticsService",
    "IAnalyticsRepository",
    "DEFAULT_TOP_LIMIT",
    "MAX_TOP_LIMIT",
]
