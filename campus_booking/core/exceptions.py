"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries.
"""

from typing import Any, List, Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Base exception for repository/data access errors."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""


class DuplicateException(ValidationException):
    """Exception when a unique business key is already taken."""


class AuthenticationException(ApplicationException):
    """Exception for missing or invalid credentials."""


class PermissionDeniedException(ApplicationException):
    """Exception when the caller may not act on a resource."""


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Any] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id is not None:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ConflictException(DomainException):
    """Exception when a request conflicts with the current state."""


class InvalidStateTransitionException(ConflictException):
    """Exception raised when an entity cannot move to the requested status."""

    def __init__(
        self,
        entity: str,
        current: str,
        target: str,
        details: Optional[dict] = None
    ):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move {entity} from '{current}' to '{target}'",
            details or {"current_status": current, "target_status": target}
        )


class BookingConflictException(ConflictException):
    """Exception raised when a slot overlaps existing bookings."""

    def __init__(
        self,
        resource_id: int,
        conflicting_ids: List[int],
        details: Optional[dict] = None
    ):
        self.resource_id = resource_id
        self.conflicting_ids = conflicting_ids
        super().__init__(
            "This time slot conflicts with an existing booking",
            details or {
                "resource_id": resource_id,
                "conflicting_booking_ids": conflicting_ids,
            }
        )
