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
"""Double-submit cookie CSRF settings — constants, method classification,
guard configuration and rejection handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from starlette.responses import PlainTextResponse, Response

from doublesubmit.security.token import DEFAULT_TOKEN_LENGTH

if TYPE_CHECKING:
    from doublesubmit.config.properties.csrf import CsrfProperties

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
CSRF_HEADER_NAME: str = "X-CSRF-Token"
"""Default name of the request/response header that carries the token."""

CSRF_COOKIE_NAME: str = "X-CSRF-Token"
"""Default name of the cookie that carries the token."""

DEFAULT_MAX_AGE_MINUTES: int = 60
"""Default cookie lifetime, in minutes."""

SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})
"""HTTP methods that do not require CSRF validation."""


def is_safe_method(method: str) -> bool:
    """Return ``True`` if *method* is exempt from validation.

    The match is exact and case-sensitive: ``"get"`` is not safe.
    """
    return method in SAFE_METHODS


# ---------------------------------------------------------------------------
# Rejection handlers
# ---------------------------------------------------------------------------
@runtime_checkable
class ErrorHandler(Protocol):
    """Handles a rejected request.

    The guard passes a blank response that the handler may populate, or
    the handler may return a replacement.  Whatever comes back is sent to
    the client as-is; the guard writes nothing further.
    """

    def handle(self, response: Response, request: Any, error: Exception) -> Response | None: ...


class ForbiddenErrorHandler:
    """Default handler: ``403 Forbidden`` with a plain-text reason."""

    def handle(self, response: Response, request: Any, error: Exception) -> Response:
        status = HTTPStatus.FORBIDDEN
        return PlainTextResponse(f"{status.phrase} - {error}", status_code=status.value)


ErrorHandlerLike = ErrorHandler | Callable[[Response, Any, Exception], Any]
"""An :class:`ErrorHandler` or a plain (sync or async) callable with the same signature."""


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class GuardConfiguration:
    """Resolved settings for :class:`DoubleSubmitFilter`.

    Attributes:
        token_length: Random bytes per token, before encoding.
        max_age: Cookie ``Max-Age`` in seconds.
        domain: Cookie ``Domain``; empty means the current host only.
        secure: Whether the cookie carries the ``Secure`` flag.
        request_header: Header inspected on requests and set on responses.
        cookie_name: Name of the token cookie.
        error_handler: Invoked when validation fails.
    """

    token_length: int = DEFAULT_TOKEN_LENGTH
    max_age: int = DEFAULT_MAX_AGE_MINUTES * 60
    domain: str = ""
    secure: bool = True
    request_header: str = CSRF_HEADER_NAME
    cookie_name: str = CSRF_COOKIE_NAME
    error_handler: ErrorHandlerLike = field(default_factory=ForbiddenErrorHandler)

    def __post_init__(self) -> None:
        if self.error_handler is None:
            object.__setattr__(self, "error_handler", ForbiddenErrorHandler())


def format_token_cookie(config: GuardConfiguration, token: str) -> str:
    """Render the ``Set-Cookie`` value carrying *token*.

    The token is written unquoted, so the cookie value a browser stores is
    byte-for-byte the value sent in the response header.
    """
    parts = [f"{config.cookie_name}={token}", f"Max-Age={config.max_age}", "HttpOnly"]
    if config.secure:
        parts.append("Secure")
    if config.domain:
        parts.append(f"Domain={config.domain}")
    parts.append("Path=/")
    return "; ".join(parts)


class CsrfOptions:
    """Builder for :class:`GuardConfiguration`.

    Setters are applied in call order; a later call for the same field
    overrides an earlier one::

        config = CsrfOptions().max_age(30).domain("example.io").secure(False).build()
    """

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}

    def token_length(self, length: int) -> CsrfOptions:
        """Number of random bytes per token. Defaults to 32."""
        self._values["token_length"] = length
        return self

    def max_age(self, minutes: int) -> CsrfOptions:
        """Cookie lifetime in minutes. Defaults to 60."""
        self._values["max_age"] = minutes * 60
        return self

    def domain(self, domain: str) -> CsrfOptions:
        """Cookie domain. Defaults to the current host only.

        This should be a hostname, not a URL.  Browsers treat ``example.com``
        as matching ``www.example.com`` and ``secure.example.com`` too.
        """
        self._values["domain"] = domain
        return self

    def secure(self, secure: bool) -> CsrfOptions:
        """Set the cookie ``Secure`` flag. Defaults to ``True``.

        Disable it in development when serving over plain HTTP, otherwise
        browsers will not send the cookie back.
        """
        self._values["secure"] = secure
        return self

    def request_header(self, name: str) -> CsrfOptions:
        """Header inspected on requests and echoed on responses."""
        self._values["request_header"] = name
        return self

    def cookie_name(self, name: str) -> CsrfOptions:
        """Name of the token cookie.

        Cookie names must not contain whitespace, commas, semicolons,
        backslashes or control characters (RFC 6265).
        """
        self._values["cookie_name"] = name
        return self

    def err_handler(self, handler: ErrorHandlerLike | None) -> CsrfOptions:
        """Replace the handler invoked for rejected requests."""
        self._values["error_handler"] = handler
        return self

    @classmethod
    def from_properties(cls, props: CsrfProperties) -> CsrfOptions:
        """Seed a builder from bound :class:`CsrfProperties`."""
        return (
            cls()
            .token_length(props.token_length)
            .max_age(props.max_age)
            .domain(props.domain)
            .secure(props.secure)
            .request_header(props.request_header)
            .cookie_name(props.cookie_name)
        )

    def build(self) -> GuardConfiguration:
        """Resolve the configured values, falling back to defaults for unset or empty ones."""
        values = dict(self._values)

        if values.get("token_length", 0) <= 0:
            values.pop("token_length", None)
        if values.get("max_age", 0) <= 0:
            values.pop("max_age", None)
        for name in ("request_header", "cookie_name"):
            if not values.get(name):
                values.pop(name, None)
        if values.get("error_handler") is None:
            values.pop("error_handler", None)

        return GuardConfiguration(**values)
