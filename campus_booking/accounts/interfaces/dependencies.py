"""
Authentication Dependencies
===========================

Resolve the caller from an `Authorization: Bearer <token>` header.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from campus_booking.accounts.application import AuthService
from campus_booking.accounts.domain import User
from campus_booking.accounts.infrastructure import SQLAlchemyUserRepository
from campus_booking.core import AuthenticationException
from campus_booking.infrastructure.database import get_session

bearer_scheme = HTTPBearer(auto_error=False)


async def get_auth_service(
    session: AsyncSession = Depends(get_session)
) -> AuthService:
    """Get auth service instance."""
    return AuthService(SQLAlchemyUserRepository(session))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Return the authenticated user or fail with 401."""
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise AuthenticationException("Invalid JWT Token")
    return await auth_service.resolve_token(credentials.credentials)


async def get_current_user_id(user: User = Depends(get_current_user)) -> int:
    """Return the authenticated user's id."""
    return user.id
