"""
Accounts Controllers (API Routes)
=================================

Signup, login and profile endpoints.

Controllers are thin - they delegate to application services.
"""

from fastapi import APIRouter, Depends, status

from campus_booking.accounts.application import (
    AuthService,
    LoginRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from campus_booking.accounts.domain import User
from campus_booking.accounts.interfaces.dependencies import get_auth_service, get_current_user

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={400: {"description": "User already exists"}},
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Create an account and return an access token for it."""
    return await auth_service.signup(request)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Log in",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    return await auth_service.login(request)


@router.get("/me", response_model=UserResponse, summary="Current user profile")
async def me(user: User = Depends(get_current_user)):
    return UserResponse(id=user.id, name=user.name, email=user.email)
