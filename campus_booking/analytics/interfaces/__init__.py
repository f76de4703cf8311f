"""
Analytics Interfaces Layer
==========================
"""

from campus_booking.analytics.interfaces.controllers import router as analytics_router

__all__ = ["analytics_router"]
