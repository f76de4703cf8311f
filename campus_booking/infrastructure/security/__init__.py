"""
Security Infrastructure
=======================

Password hashing (bcrypt via passlib) and signed access tokens (PyJWT).

Hashing is CPU-bound, so the async helpers run it in a small thread pool
to keep the event loop responsive.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext

from campus_booking.config import settings
from campus_booking.core import AuthenticationException
from campus_booking.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.password_hash_rounds,
)

# Valid bcrypt hash checked against when the account does not exist,
# so login timing does not reveal which emails are registered.
DUMMY_PASSWORD_HASH = "$2b$10$3euPcmQFCiblsZeEu5s7p.9OVHgeHWFDk9nhMqZ0m/3pd/lhwZgES"

_password_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="bcrypt_")


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return str(pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Malformed hashes count as a mismatch.
    """
    try:
        return bool(pwd_context.verify(plain_password, hashed_password))
    except ValueError as e:
        logger.error(f"Error verifying password: {e}")
        return False


async def get_password_hash_async(password: str) -> str:
    """Non-blocking password hashing using the bcrypt thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_password_executor, get_password_hash, password)


async def verify_password_async(plain_password: str, hashed_password: str) -> bool:
    """Non-blocking password verification using the bcrypt thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _password_executor,
        verify_password,
        plain_password,
        hashed_password,
    )


def create_access_token(
    user_id: int,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed JWT access token for a user.

    Args:
        user_id: Subject of the token
        expires_delta: Lifetime override (defaults to settings.jwt_expires_minutes)

    Returns:
        str: The encoded token
    """
    now = datetime.now(timezone.utc)
    lifetime = expires_delta or timedelta(minutes=settings.jwt_expires_minutes)

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """
    Validate a token and return the user id it was issued for.

    Raises:
        AuthenticationException: If the token is expired, tampered or malformed
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.PyJWTError as e:
        logger.info("Rejected access token", extra={"reason": type(e).__name__})
        raise AuthenticationException("Invalid JWT Token") from e

    try:
        return int(payload["sub"])
    except (TypeError, ValueError) as e:
        raise AuthenticationException("Invalid JWT Token") from e
