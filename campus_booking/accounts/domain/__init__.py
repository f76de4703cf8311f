"""
Accounts Domain Layer
=====================

Contains the User entity. No infrastructure dependencies.
"""

from campus_booking.accounts.domain.entities import User

__all__ = ["User"]
