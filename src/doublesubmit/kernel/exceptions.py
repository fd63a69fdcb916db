"""Exception hierarchy for doublesubmit.

All library exceptions inherit from DoubleSubmitException, so callers can
catch the base class or a specific subclass.

Categories:
- SecurityException: request authenticity failures
- ConfigurationException: invalid or unresolvable settings
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class DoubleSubmitException(Exception):
    """Base exception for all doublesubmit errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CSRF_INVALID_TOKEN").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Security Exceptions
# =============================================================================


class SecurityException(DoubleSubmitException):
    """Request authenticity and authorization errors."""


class InvalidTokenException(SecurityException):
    """The CSRF header token is missing, the cookie is missing, or they differ."""

    def __init__(self, message: str = "invalid token", context: dict | None = None) -> None:
        super().__init__(message, code="CSRF_INVALID_TOKEN", context=context)


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(DoubleSubmitException, ValueError):
    """A configuration value is missing, malformed, or cannot be resolved."""
