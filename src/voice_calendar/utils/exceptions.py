"""Custom exceptions for the voice calendar tools."""

from typing import Optional


class CalendarToolError(Exception):
    """Base exception for calendar tool errors."""


class ValidationError(CalendarToolError):
    """Raised when tool-call or event parameters are invalid."""

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.errors = errors or [message]


class InvalidDateFormat(ValidationError):
    """Raised when a date string cannot be parsed."""


class AuthenticationError(CalendarToolError):
    """Raised when authentication fails."""


class AuthRequired(AuthenticationError):
    """Raised when there are no usable credentials."""


class CalendarApiError(CalendarToolError):
    """Base for errors reported by the Calendar service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class PermissionDenied(CalendarApiError):
    """Raised on HTTP 403."""


class NotFound(CalendarApiError):
    """Raised on HTTP 404."""


class GenericApiError(CalendarApiError):
    """Raised on HTTP 400 and any other unmapped status."""


class NetworkError(CalendarToolError):
    """Raised when the Calendar service cannot be reached."""


class TokenStoreError(CalendarToolError):
    """Raised when token store operations fail."""


class ConfigurationError(CalendarToolError):
    """Raised when configuration is invalid."""
