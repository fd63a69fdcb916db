"""doublesubmit logging — structlog setup for the CSRF guard."""

from doublesubmit.logging.setup import (
    GUARD_LOGGER,
    REDACTED,
    configure_logging,
    get_logger,
    redact_tokens,
)

__all__ = ["GUARD_LOGGER", "REDACTED", "configure_logging", "get_logger", "redact_tokens"]
