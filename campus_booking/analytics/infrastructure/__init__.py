"""
Analytics Infrastructure Layer
==============================
"""

from campus_booking.analytics.infrastructure.repositories import SQLAlchemyAnalyticsRepository

__all__ = ["SQLAlchemyAnalyticsRepository"]
