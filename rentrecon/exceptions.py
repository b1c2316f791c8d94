"""Standardized exception hierarchy for RentRecon.

Scoring itself never raises: a payment that matches nothing is an ordinary
result, not an error. Exceptions are reserved for caller misuse (invalid
matcher configuration) and for input files that cannot be turned into
records. All exceptions carry structured context for logging.

Usage:
    from rentrecon.exceptions import ConfigurationError

    try:
        matcher = PaymentMatcher(fuzzy_threshold=1.5)
    except ConfigurationError as e:
        logger.error("matcher_config_invalid", error=str(e), context=e.context)
"""

from __future__ import annotations

from typing import Any


class RentReconError(Exception):
    """Base exception for all RentRecon errors.

    Attributes:
        message: Human-readable error message
        context: Additional context for debugging (dict)
        original_error: Original exception if wrapped
    """

    def __init__(
        self,
        message: str,
        *,
        context: dict[str, Any] | None = None,
        original_error: Exception | None = None,
    ) -> None:
        """Initialize exception with rich context.

        Args:
            message: Human-readable error description
            context: Additional structured data for debugging
            original_error: Original exception if this wraps another error
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        """Format exception with context for logging."""
        base = self.message
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({ctx_str})"
        if self.original_error:
            base = f"{base} [caused by: {type(self.original_error).__name__}]"
        return base

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# =============================================================================
# Validation & Configuration Errors
# =============================================================================


class ValidationError(RentReconError):
    """Raised when a record or value fails validation."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = str(value)[:100]  # Truncate for safety
        if constraint:
            context["constraint"] = constraint
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class ConfigurationError(RentReconError):
    """Raised when matcher configuration is invalid.

    Weights that do not sum to 1.0, thresholds outside [0, 1] or a tolerance
    outside [0, 100] would produce confidence values with no meaning, so
    they are rejected when the matcher is built.
    """

    def __init__(
        self,
        message: str,
        *,
        setting: str | None = None,
        expected: str | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if setting:
            context["setting"] = setting
        if expected:
            context["expected"] = expected
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# =============================================================================
# Import Errors
# =============================================================================


class RecordImportError(RentReconError):
    """Raised when a payment or invoice file cannot be imported."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        row: int | None = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if source:
            context["source"] = source
        if row is not None:
            context["row"] = row
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class FileFormatError(RecordImportError):
    """Raised when a file format is unsupported or unreadable."""


__all__ = [
    "RentReconError",
    "ValidationError",
    "ConfigurationError",
    "RecordImportError",
    "FileFormatError",
]
