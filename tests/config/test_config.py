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
"""Tests for Config loading and @config_properties binding."""

from __future__ import annotations

import pytest

from doublesubmit.config.properties import CsrfProperties, LoggingProperties
from doublesubmit.core.config import Config
from doublesubmit.kernel.exceptions import ConfigurationException
from doublesubmit.security.csrf import CsrfOptions
from doublesubmit.web.adapters.starlette.app import csrf_filter_from_config


class TestConfigGet:
    def test_dot_notation(self) -> None:
        config = Config({"doublesubmit": {"csrf": {"domain": "example.io"}}})
        assert config.get("doublesubmit.csrf.domain") == "example.io"

    def test_missing_key_returns_default(self) -> None:
        assert Config({}).get("doublesubmit.csrf.domain", "fallback") == "fallback"

    def test_env_var_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOUBLESUBMIT_CSRF_DOMAIN", "env.io")
        config = Config({"doublesubmit": {"csrf": {"domain": "file.io"}}})
        assert config.get("doublesubmit.csrf.domain") == "env.io"

    def test_placeholder_with_default(self) -> None:
        config = Config({"doublesubmit": {"csrf": {"domain": "${CSRF_TEST_UNSET_DOMAIN:local.io}"}}})
        assert config.get("doublesubmit.csrf.domain") == "local.io"

    def test_placeholder_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CSRF_TEST_DOMAIN", "placeholder.io")
        config = Config({"doublesubmit": {"csrf": {"domain": "${CSRF_TEST_DOMAIN}"}}})
        assert config.get("doublesubmit.csrf.domain") == "placeholder.io"

    def test_unresolvable_placeholder(self) -> None:
        config = Config({"doublesubmit": {"csrf": {"domain": "${CSRF_TEST_NOWHERE}"}}})
        with pytest.raises(ConfigurationException):
            config.get("doublesubmit.csrf.domain")


class TestConfigFiles:
    def test_from_yaml(self, tmp_path) -> None:
        path = tmp_path / "doublesubmit.yaml"
        path.write_text("doublesubmit:\n  csrf:\n    max-age: 35\n    cookie-name: nameoverride\n")

        props = Config.from_file(path).bind(CsrfProperties)

        assert props.max_age == 35
        assert props.cookie_name == "nameoverride"

    def test_kebab_case_key_with_placeholder(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CSRF_AGE", "30")
        path = tmp_path / "doublesubmit.yaml"
        path.write_text("doublesubmit:\n  csrf:\n    max-age: ${CSRF_AGE:45}\n    cookie-name: ${CSRF_COOKIE:csrf}\n")

        props = Config.from_file(path).bind(CsrfProperties)

        assert props.max_age == 30
        assert props.cookie_name == "csrf"

    def test_kebab_case_placeholder_default(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CSRF_AGE", raising=False)
        path = tmp_path / "doublesubmit.yaml"
        path.write_text("doublesubmit:\n  csrf:\n    max-age: ${CSRF_AGE:45}\n")

        assert Config.from_file(path).bind(CsrfProperties).max_age == 45

    def test_from_toml(self, tmp_path) -> None:
        path = tmp_path / "doublesubmit.toml"
        path.write_text('[doublesubmit.csrf]\ndomain = "d.io"\nsecure = false\n')

        config = Config.from_file(path)
        props = config.bind(CsrfProperties)

        assert props.domain == "d.io"
        assert props.secure is False
        assert config.loaded_sources == [str(path)]

    def test_profile_overlay(self, tmp_path) -> None:
        (tmp_path / "doublesubmit.yaml").write_text("doublesubmit:\n  csrf:\n    secure: true\n")
        (tmp_path / "doublesubmit-dev.yaml").write_text("doublesubmit:\n  csrf:\n    secure: false\n")

        config = Config.from_file(tmp_path / "doublesubmit.yaml", active_profiles=["dev"])

        assert config.bind(CsrfProperties).secure is False
        assert len(config.loaded_sources) == 2

    def test_missing_file_is_empty(self, tmp_path) -> None:
        config = Config.from_file(tmp_path / "nope.yaml")
        assert config.to_dict() == {}
        assert config.loaded_sources == []


class TestCsrfProperties:
    def test_bind_defaults(self) -> None:
        props = Config({}).bind(CsrfProperties)
        assert props.token_length == 32
        assert props.max_age == 60
        assert props.domain == ""
        assert props.secure is True
        assert props.request_header == "X-CSRF-Token"
        assert props.cookie_name == "X-CSRF-Token"
        assert props.exclude_patterns == []

    def test_bind_env_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOUBLESUBMIT_CSRF_MAX_AGE", "15")
        monkeypatch.setenv("DOUBLESUBMIT_CSRF_SECURE", "false")
        monkeypatch.setenv("DOUBLESUBMIT_CSRF_EXCLUDE_PATTERNS", "/health, /ready")

        props = Config({}).bind(CsrfProperties)

        assert props.max_age == 15
        assert props.secure is False
        assert props.exclude_patterns == ["/health", "/ready"]

    def test_bind_invalid_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOUBLESUBMIT_CSRF_TOKEN_LENGTH", "lots")
        with pytest.raises(ConfigurationException):
            Config({}).bind(CsrfProperties)

    def test_bind_requires_decorator(self) -> None:
        class Plain:
            pass

        with pytest.raises(ConfigurationException):
            Config({}).bind(Plain)

    def test_feeds_builder(self) -> None:
        config = Config({"doublesubmit": {"csrf": {"max_age": 35, "domain": "d.io"}}})
        cfg = CsrfOptions.from_properties(config.bind(CsrfProperties)).build()
        assert cfg.max_age == 2100
        assert cfg.domain == "d.io"

    def test_filter_from_config(self) -> None:
        config = Config(
            {"doublesubmit": {"csrf": {"cookie_name": "csrf", "exclude_patterns": ["/health"]}}}
        )
        csrf_filter = csrf_filter_from_config(config)
        assert csrf_filter.config.cookie_name == "csrf"
        assert csrf_filter.exclude_patterns == ["/health"]


class TestLoggingProperties:
    def test_bind_defaults(self) -> None:
        props = Config({}).bind(LoggingProperties)
        assert props.level == {"root": "INFO"}
        assert props.format == "console"


class TestPydanticBinding:
    def test_bind_pydantic_model(self) -> None:
        from pydantic import BaseModel, Field

        from doublesubmit.core.config import config_properties

        @config_properties(prefix="doublesubmit.csrf")
        class StrictCsrf(BaseModel):
            max_age: int = Field(default=60, gt=0)
            domain: str = ""

        props = Config({"doublesubmit": {"csrf": {"max-age": "15", "domain": "d.io"}}}).bind(StrictCsrf)
        assert props.max_age == 15
        assert props.domain == "d.io"

    def test_pydantic_validation_error_is_configuration_error(self) -> None:
        from pydantic import BaseModel, Field

        from doublesubmit.core.config import config_properties

        @config_properties(prefix="doublesubmit.csrf")
        class StrictCsrf(BaseModel):
            max_age: int = Field(default=60, gt=0)

        with pytest.raises(ConfigurationException):
            Config({"doublesubmit": {"csrf": {"max_age": -1}}}).bind(StrictCsrf)
