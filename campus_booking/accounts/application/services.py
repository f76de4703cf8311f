"""
Accounts Application Services
=============================

Signup, login and access-token resolution.
"""

from abc import ABC, abstractmethod
from typing import Optional

from campus_booking.accounts.application.dto import (
    LoginRequest,
    SignupRequest,
    TokenResponse,
)
from campus_booking.accounts.domain import User
from campus_booking.config import settings
from campus_booking.core import AuthenticationException, DuplicateException
from campus_booking.infrastructure.security import (
    DUMMY_PASSWORD_HASH,
    create_access_token,
    decode_access_token,
    get_password_hash_async,
    verify_password_async,
)
from campus_booking.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


# ========== Repository Interfaces (Dependency Inversion) ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by id."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by (normalized) email."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new user; raises DuplicateException on a taken email."""


# ========== Application Services ==========

class AuthService:
    """
    Service for user registration and authentication.
    """

    def __init__(self, user_repository: IUserRepository):
        self._user_repo = user_repository

    def _issue_token(self, user: User) -> TokenResponse:
        return TokenResponse(
            jwt_token=create_access_token(user.id),
            expires_in=settings.jwt_expires_minutes * 60,
        )

    async def signup(self, request: SignupRequest) -> TokenResponse:
        """
        Register a new user and return an access token.

        Raises:
            DuplicateException: If the email is already registered
        """
        email = User.normalize_email(request.email)

        if await self._user_repo.get_by_email(email) is not None:
            raise DuplicateException("User already exists", {"email": email})

        password_hash = await get_password_hash_async(request.password)
        user = await self._user_repo.create(
            User(id=None, name=request.name.strip(), email=email, password_hash=password_hash)
        )

        logger.info("User registered", extra={"user_id": user.id})
        return self._issue_token(user)

    async def login(self, request: LoginRequest) -> TokenResponse:
        """
        Verify credentials and return an access token.

        Raises:
            AuthenticationException: On unknown email or wrong password
        """
        user = await self._user_repo.get_by_email(User.normalize_email(request.email))

        hashed = user.password_hash if user else DUMMY_PASSWORD_HASH
        password_ok = await verify_password_async(request.password, hashed)

        if user is None or not password_ok:
            logger.info("Login failed", extra={"known_user": user is not None})
            raise AuthenticationException("Invalid email or password")

        logger.info("User logged in", extra={"user_id": user.id})
        return self._issue_token(user)

    async def resolve_token(self, token: str) -> User:
        """
        Return the user an access token belongs to.

        Raises:
            AuthenticationException: If the token is invalid or the user is gone
        """
        user_id = decode_access_token(token)
        user = await self._user_repo.get_by_id(user_id)
        if user is None:
            raise AuthenticationException("Invalid JWT Token")
        return user
