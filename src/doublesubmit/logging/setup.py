# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""structlog setup for the guard's ``doublesubmit.security`` events.

The guard emits two events: ``csrf_token_rejected`` (warning, with
``method``, ``path`` and ``reason``) and ``csrf_token_rotated`` (debug,
with ``method`` and ``path``).  :func:`configure_logging` wires structlog
to stdlib logging so both can be filtered per logger name.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from doublesubmit.config.properties.logging import LoggingProperties
from doublesubmit.core.config import Config

GUARD_LOGGER = "doublesubmit.security"
"""Logger name used by the CSRF guard."""

REDACTED = "[redacted]"
TOKEN_FIELDS: frozenset[str] = frozenset({"token", "header_token", "cookie_token"})
"""Event keys whose values are CSRF tokens and never reach the output."""


def get_logger(name: str = GUARD_LOGGER) -> Any:
    """Return a structlog logger, the guard's by default."""
    return structlog.get_logger(name)


def redact_tokens(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor that masks token values bound to an event."""
    for key in TOKEN_FIELDS & event_dict.keys():
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def configure_logging(config: Config) -> LoggingProperties:
    """Configure structlog and stdlib levels from ``doublesubmit.logging``.

    ``level.root`` sets the root level; every other key under ``level`` is a
    logger name.  The guard logger follows the root level unless named.
    ``format`` selects ``console`` (default) or ``json`` output.

    Returns:
        The bound :class:`LoggingProperties`.
    """
    props = config.bind(LoggingProperties)
    levels = {str(k): str(v).upper() for k, v in props.level.items()}
    root_level = levels.pop("root", "INFO")
    levels.setdefault(GUARD_LOGGER, root_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_tokens,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if str(props.format).lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # The guard's module-level logger may be used before this runs.
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=_level(root_level), force=True)

    for name, level in levels.items():
        logging.getLogger(name).setLevel(_level(level))
    return props
