"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="campus-booking", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="sqlite+aiosqlite:///./campus_booking.db",
        description="SQLAlchemy connection URL (async driver)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Authentication ==========
    jwt_secret: str = Field(
        default="change-me-in-production",
        description="Secret used to sign access tokens"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expires_minutes: int = Field(
        default=60,
        description="Access token lifetime in minutes",
        ge=1
    )
    password_hash_rounds: int = Field(
        default=10,
        description="bcrypt cost factor",
        ge=4,
        le=31
    )

    # ========== Scheduling ==========
    campus_timezone: str = Field(
        default="UTC",
        description="IANA timezone in which booking dates and times are expressed"
    )
    booking_policy_path: Path = Field(
        default=Path("booking_policy.yaml"),
        description="Path to booking policy YAML file"
    )
    booking_completion_interval: int = Field(
        default=300,
        description="Seconds between automatic completion runs (0 disables)",
        ge=0
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class ResourceType(str, Enum):
    """Kinds of bookable campus resources."""
    ROOM = "Room"
    HALL = "Hall"
    EQUIPMENT = "Equipment"
    LAB = "Lab"
    OTHER = "Other"


class ResourceStatus(str, Enum):
    """Resource lifecycle statuses."""
    AVAILABLE = "available"
    CANCELLED = "cancelled"


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""
    BOOKED = "booked"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
