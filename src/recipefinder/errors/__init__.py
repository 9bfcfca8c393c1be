"""Centralized error definitions for RecipeFinder.

This module provides a unified error hierarchy and user-friendly error handling
for the lookup clients, configuration loading and usage accounting.

Usage:
    from recipefinder.errors import (
        RecipeFinderError,
        LookupTimeoutError,
        exit_code_for,
    )

    try:
        settings = load_settings(path)
    except RecipeFinderError as e:
        print(e.user_message)
        sys.exit(exit_code_for(e))
"""

from __future__ import annotations

from recipefinder.errors.user_messages import (
    get_user_message,
    get_recovery_suggestion,
)


# =============================================================================
# Base Error
# =============================================================================


class RecipeFinderError(Exception):
    """Base exception for all RecipeFinder errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "RECIPEFINDER_ERROR"
    default_message: str = "An unexpected error occurred"
    recoverable: bool = True

    def __init__(
        self,
        message: str | None = None,
        *,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        self.message = message or self.default_message
        self._user_message = user_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def user_message(self) -> str:
        """Get user-friendly message."""
        if self._user_message:
            return self._user_message
        return get_user_message(self)

    @property
    def recovery_suggestion(self) -> str:
        """Get recovery suggestion."""
        return get_recovery_suggestion(self)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "user_message": self.user_message,
            "recoverable": self.recoverable,
            "details": self.details,
        }


# =============================================================================
# Lookup Errors
# =============================================================================


class LookupFailure(RecipeFinderError):
    """Base error for external lookups.

    Strategies raise subclasses of this error on timeout, transport or
    parse failure.
    """

    code = "LOOKUP_ERROR"
    default_message = "External lookup failed"


class LookupTimeoutError(LookupFailure):
    """The upstream provider did not answer within the timeout."""

    code = "LOOKUP_TIMEOUT"
    default_message = "External lookup timed out"


class LookupTransportError(LookupFailure):
    """The upstream provider answered with a non-2xx status or was unreachable."""

    code = "LOOKUP_TRANSPORT_ERROR"
    default_message = "External lookup request failed"

    def __init__(
        self,
        message: str | None = None,
        *,
        status_code: int | None = None,
        user_message: str | None = None,
        details: dict | None = None,
    ) -> None:
        details = dict(details or {})
        if status_code is not None:
            details.setdefault("status_code", status_code)
        super().__init__(message, user_message=user_message, details=details)
        self.status_code = status_code


class LookupParseError(LookupFailure):
    """The upstream provider answered with a malformed body."""

    code = "LOOKUP_PARSE_ERROR"
    default_message = "External lookup returned an unreadable response"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RecipeFinderError):
    """Base error for configuration issues."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"
    recoverable = False


class InvalidConfigError(ConfigurationError):
    """Configuration is invalid."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""

    code = "MISSING_CONFIG"
    default_message = "Missing required configuration"


# =============================================================================
# Usage Tracking Errors
# =============================================================================


class UsageTrackingError(RecipeFinderError):
    """API usage statistics could not be read or written."""

    code = "USAGE_TRACKING_ERROR"
    default_message = "API usage statistics are unavailable"


# =============================================================================
# Error Handler
# =============================================================================


def is_recoverable(error: Exception) -> bool:
    """Check if an error is potentially recoverable.

    Args:
        error: The exception to check

    Returns:
        True if the error is recoverable
    """
    if isinstance(error, RecipeFinderError):
        return error.recoverable
    return False


def exit_code_for(error: Exception) -> int:
    """CLI exit status for an error.

    Recoverable errors exit with 1 and may succeed on retry. Errors that
    need operator action, such as a broken config file, exit with 2.
    """
    return 1 if is_recoverable(error) else 2


__all__ = [
    # Base
    "RecipeFinderError",
    # Lookup
    "LookupFailure",
    "LookupTimeoutError",
    "LookupTransportError",
    "LookupParseError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    "MissingConfigError",
    # Usage
    "UsageTrackingError",
    # Handlers
    "is_recoverable",
    "exit_code_for",
]
