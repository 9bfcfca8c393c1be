"""User-friendly error messages for RecipeFinder.

This module provides human-readable error messages and recovery suggestions
for all error types, so operators and API consumers never see raw
technical errors.

Query text and credentials are never echoed back in formatted messages.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Lookup errors
    "LOOKUP_ERROR": "We couldn't reach the suggestion source. Please try again.",
    "LOOKUP_TIMEOUT": "The suggestion source took too long to answer.",
    "LOOKUP_TRANSPORT_ERROR": "The suggestion source rejected the request.",
    "LOOKUP_PARSE_ERROR": "The suggestion source sent an unexpected response.",
    # Configuration errors
    "CONFIGURATION_ERROR": "There's a configuration issue.",
    "INVALID_CONFIG": "The configuration is invalid. Check settings.",
    "MISSING_CONFIG": "Required configuration is missing.",
    # Usage errors
    "USAGE_TRACKING_ERROR": "API usage statistics are unavailable right now.",
    # Generic
    "RECIPEFINDER_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    # Lookup errors
    "LOOKUP_ERROR": "Wait a minute and retry; static suggestions remain available.",
    "LOOKUP_TIMEOUT": "Try a shorter or more specific query.",
    "LOOKUP_TRANSPORT_ERROR": "The provider may be rate limiting. Retry in a minute.",
    "LOOKUP_PARSE_ERROR": "Retry later. Report the issue if it continues.",
    # Configuration errors
    "CONFIGURATION_ERROR": "Check config: recipefinder config show",
    "INVALID_CONFIG": "Recreate defaults: recipefinder config init",
    "MISSING_CONFIG": "Create the config file: recipefinder config init",
    # Usage errors
    "USAGE_TRACKING_ERROR": "Check that the usage stats file is writable.",
    # Generic
    "RECIPEFINDER_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "Retry the operation. Report if the issue continues.",
}


# =============================================================================
# Helper Functions
# =============================================================================


def _error_code(error: Any) -> str:
    if hasattr(error, "code"):
        return error.code
    if isinstance(error, str):
        return error
    return type(error).__name__.upper()


def get_user_message(error: Any) -> str:
    """Get user-friendly message for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        User-friendly error message
    """
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    """Get recovery suggestion for an error.

    Args:
        error: The error (can be Exception or error code string)

    Returns:
        Recovery suggestion
    """
    return RECOVERY_SUGGESTIONS.get(
        _error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"]
    )


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output.

    Args:
        error: The error to format

    Returns:
        CLI-formatted error message
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)
    code = getattr(error, "code", "ERROR")

    lines = [
        f"Error [{code}]: {message}",
        "",
        f"Suggestion: {suggestion}",
    ]

    if getattr(error, "details", None):
        lines.append("")
        lines.append("Details:")
        for key, value in error.details.items():
            # Don't expose sensitive details
            if key not in ("query", "api_key", "token"):
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_cli",
]
