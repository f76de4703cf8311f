"""
Accounts Infrastructure Layer
=============================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from campus_booking.accounts.infrastructure.models import UserModel
from campus_booking.accounts.infrastructure.repositories import SQLAlchemyUserRepository

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
]
