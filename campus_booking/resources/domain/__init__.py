"""
Resources Domain Layer
======================

Contains the Resource entity and its status transitions.
"""

from campus_booking.resources.domain.entities import Resource

__all__ = ["Resource"]
