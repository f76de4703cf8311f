"""
Accounts Application DTOs
=========================

Pydantic models for the authentication API.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class SignupRequest(BaseModel):
    """Request model for user registration."""
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email (unique)")
    password: str = Field(..., min_length=6, max_length=72, description="Plain-text password")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name must not be blank")
        return v.strip()


class LoginRequest(BaseModel):
    """Request model for login."""
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72)


class TokenResponse(BaseModel):
    """Access token issued after signup or login."""
    jwt_token: str = Field(..., description="Signed JWT bearer token")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds")


class UserResponse(BaseModel):
    """Public view of a user."""
    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)
