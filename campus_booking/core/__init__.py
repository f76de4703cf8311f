"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system.
"""

from campus_booking.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    DuplicateException,
    AuthenticationException,
    PermissionDeniedException,
    ResourceNotFoundException,
    ConfigurationException,
    ConflictException,
    InvalidStateTransitionException,
    BookingConflictException,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "DuplicateException",
    "AuthenticationException",
    "PermissionDeniedException",
    "ResourceNotFoundException",
    "ConfigurationException",
    "ConflictException",
    "InvalidStateTransitionException",
    "BookingConflictException",
]
