"""User-friendly error messages for insightflow.

Maps error codes to short human-readable messages and recovery hints so the
CLI never prints a raw traceback for expected failures. Messages never echo
insight text or file contents.
"""

from __future__ import annotations

from typing import Any


# =============================================================================
# Error Message Catalog
# =============================================================================

ERROR_MESSAGES: dict[str, str] = {
    # Configuration errors
    "CONFIGURATION_ERROR": "The prioritization or generation settings are invalid.",
    "INVALID_CONFIG": "The settings file could not be read. Check its format.",
    # Prioritization errors
    "PRIORITIZATION_ERROR": "We couldn't rank your insights. Please try again.",
    # Recommendation errors
    "RECOMMENDATION_ERROR": "We couldn't generate recommendations.",
    "GENERATION_ERROR": "The AI model couldn't produce a recommendation.",
    "PARSING_ERROR": "The AI model returned a response in an unexpected format.",
    "VALIDATION_ERROR": "A generated recommendation was incomplete and was skipped.",
    "TEMPLATE_ERROR": "A recommendation template is malformed.",
    # Generic
    "INSIGHTFLOW_ERROR": "An unexpected error occurred. Please try again.",
    "UNKNOWN_ERROR": "Something went wrong. Please try again.",
}


# =============================================================================
# Recovery Suggestions
# =============================================================================

RECOVERY_SUGGESTIONS: dict[str, str] = {
    # Configuration errors
    "CONFIGURATION_ERROR": "Check that weights are non-negative and limits are not below minimums.",
    "INVALID_CONFIG": "Fix the JSON syntax or delete the file to regenerate defaults.",
    # Prioritization errors
    "PRIORITIZATION_ERROR": "Verify the insights file contains well-formed records.",
    # Recommendation errors
    "RECOMMENDATION_ERROR": "Retry with fewer insights or with AI generation disabled.",
    "GENERATION_ERROR": "Enable template fallback or check that the model is reachable.",
    "PARSING_ERROR": "Enable template fallback or lower the temperature setting.",
    "VALIDATION_ERROR": "Review custom templates for empty titles or descriptions.",
    "TEMPLATE_ERROR": "Make sure the template has an id, a type and non-empty text.",
    # Generic
    "INSIGHTFLOW_ERROR": "If this persists, please report the issue.",
    "UNKNOWN_ERROR": "Run again with --verbose for details.",
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
    """Get user-friendly message for an error or error code."""
    return ERROR_MESSAGES.get(_error_code(error), ERROR_MESSAGES["UNKNOWN_ERROR"])


def get_recovery_suggestion(error: Any) -> str:
    """Get recovery suggestion for an error or error code."""
    return RECOVERY_SUGGESTIONS.get(_error_code(error), RECOVERY_SUGGESTIONS["UNKNOWN_ERROR"])


def format_error_for_user(error: Any) -> str:
    """Format a complete user-friendly error message.

    Args:
        error: The error to format

    Returns:
        Complete error message with recovery suggestion
    """
    message = get_user_message(error)
    suggestion = get_recovery_suggestion(error)

    return f"{message}\n\nSuggestion: {suggestion}"


def format_error_for_cli(error: Any) -> str:
    """Format error for CLI output, including non-sensitive details."""
    code = getattr(error, "code", "ERROR")
    lines = [
        f"Error [{code}]: {get_user_message(error)}",
        "",
        f"Suggestion: {get_recovery_suggestion(error)}",
    ]

    details = getattr(error, "details", None)
    if details:
        lines.append("")
        lines.append("Details:")
        for key, value in details.items():
            if key not in ("excerpt", "description", "prompt", "response"):
                lines.append(f"  {key}: {value}")

    return "\n".join(lines)


__all__ = [
    "ERROR_MESSAGES",
    "RECOVERY_SUGGESTIONS",
    "get_user_message",
    "get_recovery_suggestion",
    "format_error_for_user",
    "format_error_for_cli",
]
