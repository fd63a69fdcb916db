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
"""DoubleSubmitFilter — double-submit cookie CSRF protection.

Implements the `double-submit cookie`_ pattern:

* **Safe methods** (GET, HEAD, OPTIONS, TRACE) pass through unchecked.
* **Unsafe methods** (everything else) must carry the token in the
  request header *and* the cookie, and the two values must match under a
  timing-safe comparison.  Otherwise the configured error handler answers
  the request and the wrapped app is never called.

Every request that is let through gets a fresh token, written to both the
response header and the cookie, plus ``Vary: Cookie`` so shared caches do
not hand one client's token to another.  The server keeps no token state.

.. _double-submit cookie:
   https://cheatsheetseries.owasp.org/cheatsheets/Cross-Site_Request_Forgery_Prevention_Cheat_Sheet.html#double-submit-cookie
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

from starlette.responses import Response

from doublesubmit.container.ordering import order
from doublesubmit.kernel.exceptions import InvalidTokenException
from doublesubmit.logging import get_logger
from doublesubmit.security.csrf import GuardConfiguration, format_token_cookie, is_safe_method
from doublesubmit.security.token import (
    TokenGenerator,
    constant_time_equals,
    default_token_generator,
)
from doublesubmit.web.filters import CallNext, PathScopedFilter

logger = get_logger()


@order(-50)
class DoubleSubmitFilter(PathScopedFilter):
    """Stateless double-submit cookie CSRF filter.

    Args:
        config: Guard settings; defaults to :class:`GuardConfiguration`.
        token_generator: Source of fresh tokens; defaults to the shared
            process-wide generator.
        exclude_patterns: Path globs that bypass the filter entirely.
        url_patterns: Path globs the filter is limited to (all when empty).
    """

    def __init__(
        self,
        config: GuardConfiguration | None = None,
        token_generator: TokenGenerator | None = None,
        exclude_patterns: Sequence[str] = (),
        url_patterns: Sequence[str] = (),
    ) -> None:
        self._config = config or GuardConfiguration()
        self._tokens = token_generator or default_token_generator
        self.exclude_patterns = list(exclude_patterns)
        self.url_patterns = list(url_patterns)

    @property
    def config(self) -> GuardConfiguration:
        return self._config

    def rejection_reason(self, request: Any) -> str | None:
        """Return why *request* fails validation, or ``None`` if it passes.

        Only the header and cookie of this request are compared.
        """
        if is_safe_method(request.method):
            return None

        header_token: str | None = request.headers.get(self._config.request_header)
        cookie_token: str | None = request.cookies.get(self._config.cookie_name)

        if not header_token:
            return "missing_header"
        if not cookie_token:
            return "missing_cookie"
        if not constant_time_equals(header_token, cookie_token):
            return "mismatch"
        return None

    async def do_filter(self, request: Any, call_next: CallNext) -> Any:
        reason = self.rejection_reason(request)
        if reason is not None:
            logger.warning(
                "csrf_token_rejected",
                method=request.method,
                path=request.url.path,
                reason=reason,
            )
            return await self._reject(request, InvalidTokenException(context={"reason": reason}))

        token = self._tokens.generate(self._config.token_length)
        response = await call_next(request)
        self._issue_token(response, token)
        logger.debug("csrf_token_rotated", method=request.method, path=request.url.path)
        return response

    def _issue_token(self, response: Response, token: str) -> None:
        cfg = self._config
        response.headers[cfg.request_header] = token
        response.headers.append("set-cookie", format_token_cookie(cfg, token))
        response.headers.add_vary_header("Cookie")

    async def _reject(self, request: Any, error: InvalidTokenException) -> Response:
        handler = self._config.error_handler
        handle = getattr(handler, "handle", handler)
        blank = Response()

        result = handle(blank, request, error)
        if inspect.isawaitable(result):
            result = await result
        return result if result is not None else blank
