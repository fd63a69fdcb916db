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
"""Tests for method classification, guard configuration and rejection handlers."""

from __future__ import annotations

from types import SimpleNamespace

import pytest

from doublesubmit.config.properties.csrf import CsrfProperties
from doublesubmit.kernel.exceptions import InvalidTokenException
from doublesubmit.security.csrf import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    CsrfOptions,
    ErrorHandler,
    ForbiddenErrorHandler,
    GuardConfiguration,
    format_token_cookie,
    is_safe_method,
)


class TestIsSafeMethod:
    @pytest.mark.parametrize(
        ("method", "expected"),
        [
            ("GET", True),
            ("HEAD", True),
            ("TRACE", True),
            ("OPTIONS", True),
            ("POST", False),
            ("PUT", False),
            ("DELETE", False),
            ("CONNECT", False),
            ("PATCH", False),
            ("mik23", False),
            ("", False),
            ("   ", False),
            ("___", False),
            ("POWER", False),
            ("get", False),
            ("Head", False),
        ],
    )
    def test_classification(self, method: str, expected: bool) -> None:
        assert is_safe_method(method) is expected


class TestGuardConfiguration:
    def test_defaults(self) -> None:
        cfg = GuardConfiguration()
        assert cfg.token_length == 32
        assert cfg.max_age == 3600
        assert cfg.domain == ""
        assert cfg.secure is True
        assert cfg.request_header == CSRF_HEADER_NAME == "X-CSRF-Token"
        assert cfg.cookie_name == CSRF_COOKIE_NAME == "X-CSRF-Token"
        assert isinstance(cfg.error_handler, ForbiddenErrorHandler)

    def test_is_frozen(self) -> None:
        cfg = GuardConfiguration()
        with pytest.raises(AttributeError):
            cfg.secure = False  # type: ignore[misc]

    def test_none_handler_falls_back_to_forbidden(self) -> None:
        cfg = GuardConfiguration(error_handler=None)  # type: ignore[arg-type]
        assert isinstance(cfg.error_handler, ForbiddenErrorHandler)


class TestFormatTokenCookie:
    def test_default_attributes(self) -> None:
        cookie = format_token_cookie(GuardConfiguration(), "abc=")
        assert cookie == "X-CSRF-Token=abc=; Max-Age=3600; HttpOnly; Secure; Path=/"

    def test_domain_and_insecure(self) -> None:
        cfg = CsrfOptions().cookie_name("nameoverride").domain("d.io").max_age(35).secure(False).build()
        cookie = format_token_cookie(cfg, "tok")
        assert cookie == "nameoverride=tok; Max-Age=2100; HttpOnly; Domain=d.io; Path=/"


class TestCsrfOptions:
    def test_options_are_applied(self) -> None:
        handler = ForbiddenErrorHandler()
        cfg = (
            CsrfOptions()
            .max_age(30)
            .domain("example.io")
            .secure(False)
            .request_header("X-CSRF-Token")
            .err_handler(handler)
            .cookie_name("X-CSRF-Token")
            .build()
        )

        assert cfg.max_age == 1800
        assert cfg.domain == "example.io"
        assert cfg.secure is False
        assert cfg.request_header == "X-CSRF-Token"
        assert cfg.error_handler is handler
        assert cfg.cookie_name == "X-CSRF-Token"

    def test_later_option_wins(self) -> None:
        cfg = CsrfOptions().secure(False).max_age(10).secure(True).max_age(35).build()
        assert cfg.secure is True
        assert cfg.max_age == 2100

    def test_empty_builder_gives_defaults(self) -> None:
        cfg = CsrfOptions().build()
        assert cfg == GuardConfiguration(error_handler=cfg.error_handler)
        assert isinstance(cfg.error_handler, ForbiddenErrorHandler)

    def test_zero_values_fall_back_to_defaults(self) -> None:
        cfg = (
            CsrfOptions()
            .max_age(0)
            .token_length(0)
            .request_header("")
            .cookie_name("")
            .err_handler(None)
            .build()
        )
        assert cfg.max_age == 3600
        assert cfg.token_length == 32
        assert cfg.request_header == "X-CSRF-Token"
        assert cfg.cookie_name == "X-CSRF-Token"
        assert isinstance(cfg.error_handler, ForbiddenErrorHandler)

    def test_header_and_cookie_names_are_independent(self) -> None:
        cfg = CsrfOptions().request_header("X-Token").cookie_name("csrf").build()
        assert cfg.request_header == "X-Token"
        assert cfg.cookie_name == "csrf"

    def test_from_properties(self) -> None:
        props = CsrfProperties(token_length=16, max_age=5, domain="d.io", secure=False, cookie_name="c")
        cfg = CsrfOptions.from_properties(props).build()
        assert cfg.token_length == 16
        assert cfg.max_age == 300
        assert cfg.domain == "d.io"
        assert cfg.secure is False
        assert cfg.cookie_name == "c"
        assert cfg.request_header == "X-CSRF-Token"

    def test_builder_can_extend_properties(self) -> None:
        cfg = CsrfOptions.from_properties(CsrfProperties()).domain("override.io").build()
        assert cfg.domain == "override.io"


class TestForbiddenErrorHandler:
    def test_implements_protocol(self) -> None:
        assert isinstance(ForbiddenErrorHandler(), ErrorHandler)

    def test_writes_403_with_reason(self) -> None:
        response = ForbiddenErrorHandler().handle(None, SimpleNamespace(), InvalidTokenException())  # type: ignore[arg-type]
        assert response.status_code == 403
        assert response.body == b"Forbidden - invalid token"
        assert response.headers["content-type"].startswith("text/plain")
