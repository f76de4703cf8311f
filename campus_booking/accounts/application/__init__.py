"""
Accounts Application Layer
==========================

Contains:
- Services: signup, login and token resolution
- DTOs: request/response models
"""

from campus_booking.accounts.application.dto import (
    SignupRequest,
    LoginRequest,
    TokenResponse,
    UserResponse,
)
from campus_booking.accounts.application.services import (
    AuthService,
    IUserRepository,
)

__all__ = [
    # DTOs
    "SignupRequest",
    "LoginRequest",
    "TokenResponse",
    "UserResponse",
    # Services
    "AuthService",
    # Repository Interfaces
    "IUserRepository",
]
