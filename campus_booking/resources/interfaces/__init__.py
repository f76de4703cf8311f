"""
Resources Interfaces Layer
==========================

FastAPI routes for resources.
"""

from campus_booking.resources.interfaces.controllers import router as resources_router

__all__ = ["resources_router"]
