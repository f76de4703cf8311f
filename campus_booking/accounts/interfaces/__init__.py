"""
Accounts Interfaces Layer
=========================

FastAPI routes and the authentication dependency used by every module.
"""

from campus_booking.accounts.interfaces.controllers import router as accounts_router
from campus_booking.accounts.interfaces.dependencies import (
    get_current_user,
    get_current_user_id,
)

__all__ = ["accounts_router", "get_current_user", "get_current_user_id"]
