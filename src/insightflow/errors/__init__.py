"""Centralized error definitions for insightflow.

Every failure the prioritization engine and recommendation pipeline can
surface is a subclass of :class:`InsightflowError`, so callers can catch a
single base type and still render a helpful message.

Usage:
    from insightflow.errors import InsightflowError, handle_error

    try:
        result = engine.prioritize_insights(insights)
    except InsightflowError as e:
        print(handle_error(e))
"""

from __future__ import annotations

from insightflow.errors.user_messages import (
    format_error_for_user,
    get_recovery_suggestion,
    get_user_message,
)


# =============================================================================
# Base Error
# =============================================================================


class InsightflowError(Exception):
    """Base exception for all insightflow errors.

    Attributes:
        code: Error code for categorization
        user_message: User-friendly message (optional override)
        recoverable: Whether the error is potentially recoverable
        details: Additional error details for debugging
    """

    code: str = "INSIGHTFLOW_ERROR"
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
# Configuration Errors
# =============================================================================


class ConfigurationError(InsightflowError):
    """Invalid weights or thresholds supplied at construction time."""

    code = "CONFIGURATION_ERROR"
    default_message = "Configuration error"
    recoverable = False


class InvalidConfigError(ConfigurationError):
    """Configuration file could not be parsed or validated."""

    code = "INVALID_CONFIG"
    default_message = "Invalid configuration"


# =============================================================================
# Prioritization Errors
# =============================================================================


class PrioritizationError(InsightflowError):
    """A prioritization run failed for reasons other than data quality."""

    code = "PRIORITIZATION_ERROR"
    default_message = "Insight prioritization failed"
    recoverable = False


# =============================================================================
# Recommendation Errors
# =============================================================================


class RecommendationError(InsightflowError):
    """Base error for recommendation generation."""

    code = "RECOMMENDATION_ERROR"
    default_message = "Recommendation generation failed"


class GenerationError(RecommendationError):
    """AI completion call failed or timed out."""

    code = "GENERATION_ERROR"
    default_message = "Failed to generate recommendation"


class ParsingError(RecommendationError):
    """AI response was not in the expected structured form."""

    code = "PARSING_ERROR"
    default_message = "Could not parse the generated recommendation"

    def __init__(
        self,
        message: str | None = None,
        *,
        raw_response: str | None = None,
        details: dict | None = None,
    ) -> None:
        details = dict(details or {})
        if raw_response is not None:
            details.setdefault("response_length", len(raw_response))
        super().__init__(message, details=details)


class ValidationError(RecommendationError):
    """A generated recommendation is structurally malformed."""

    code = "VALIDATION_ERROR"
    default_message = "Recommendation failed validation"


class TemplateError(RecommendationError):
    """A template could not be registered or rendered."""

    code = "TEMPLATE_ERROR"
    default_message = "Recommendation template is invalid"
    recoverable = False


# =============================================================================
# Error Handler
# =============================================================================


def handle_error(error: Exception) -> str:
    """Handle an error and return a user-friendly message.

    Args:
        error: The exception to handle

    Returns:
        User-friendly error message with recovery suggestion
    """
    return format_error_for_user(error)


def is_recoverable(error: Exception) -> bool:
    """Check if an error is potentially recoverable.

    Generation and parsing failures are recoverable through the template
    strategy; configuration and template errors are not.
    """
    if isinstance(error, InsightflowError):
        return error.recoverable
    return False


__all__ = [
    # Base
    "InsightflowError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigError",
    # Prioritization
    "PrioritizationError",
    # Recommendations
    "RecommendationError",
    "GenerationError",
    "ParsingError",
    "ValidationError",
    "TemplateError",
    # Handlers
    "handle_error",
    "is_recoverable",
]
