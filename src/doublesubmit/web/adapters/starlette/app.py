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
"""Helpers that put the double-submit guard in front of an ASGI app."""

from __future__ import annotations

from collections.abc import Sequence

from starlette.middleware import Middleware
from starlette.types import ASGIApp

from doublesubmit.config.properties.csrf import CsrfProperties
from doublesubmit.core.config import Config
from doublesubmit.security.csrf import CsrfOptions, GuardConfiguration
from doublesubmit.security.token import TokenGenerator
from doublesubmit.web.adapters.starlette.filter_chain import WebFilterChainMiddleware
from doublesubmit.web.adapters.starlette.filters.csrf_filter import DoubleSubmitFilter


def _resolve(options: CsrfOptions | GuardConfiguration | None) -> GuardConfiguration:
    if isinstance(options, CsrfOptions):
        return options.build()
    return options or GuardConfiguration()


def csrf_filter(
    options: CsrfOptions | GuardConfiguration | None = None,
    *,
    token_generator: TokenGenerator | None = None,
    exclude_patterns: Sequence[str] = (),
) -> DoubleSubmitFilter:
    """Build a :class:`DoubleSubmitFilter` from a builder or a resolved configuration."""
    return DoubleSubmitFilter(
        _resolve(options),
        token_generator=token_generator,
        exclude_patterns=exclude_patterns,
    )


def csrf_filter_from_config(config: Config, token_generator: TokenGenerator | None = None) -> DoubleSubmitFilter:
    """Build a :class:`DoubleSubmitFilter` from the ``doublesubmit.csrf`` config section."""
    props = config.bind(CsrfProperties)
    return csrf_filter(
        CsrfOptions.from_properties(props),
        token_generator=token_generator,
        exclude_patterns=props.exclude_patterns,
    )


def csrf_middleware(
    options: CsrfOptions | GuardConfiguration | None = None,
    *,
    token_generator: TokenGenerator | None = None,
    exclude_patterns: Sequence[str] = (),
) -> Middleware:
    """Return a Starlette ``Middleware`` entry, for ``Starlette(middleware=[...])``."""
    return Middleware(
        WebFilterChainMiddleware,
        filters=[csrf_filter(options, token_generator=token_generator, exclude_patterns=exclude_patterns)],
    )


def csrf_protect(
    app: ASGIApp,
    options: CsrfOptions | GuardConfiguration | None = None,
    *,
    token_generator: TokenGenerator | None = None,
    exclude_patterns: Sequence[str] = (),
) -> WebFilterChainMiddleware:
    """Wrap *app* so every HTTP request passes through the double-submit guard."""
    return WebFilterChainMiddleware(
        app,
        filters=[csrf_filter(options, token_generator=token_generator, exclude_patterns=exclude_patterns)],
    )
