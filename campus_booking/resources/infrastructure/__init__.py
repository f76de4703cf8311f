"""
Resources Infrastructure Layer
==============================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from campus_booking.resources.infrastructure.models import ResourceModel
from campus_booking.resources.infrastructure.repositories import SQLAlchemyResourceRepository

__all__ = [
    "ResourceModel",
    "SQLAlchemyResourceRepository",
]
