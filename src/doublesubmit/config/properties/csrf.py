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
"""CSRF guard configuration properties."""

from __future__ import annotations

from dataclasses import dataclass, field

from doublesubmit.core.config import config_properties


@config_properties(prefix="doublesubmit.csrf")
@dataclass
class CsrfProperties:
    """Configuration for the double-submit guard (doublesubmit.csrf.*).

    ``max_age`` is expressed in minutes, matching ``CsrfOptions.max_age``.
    """

    token_length: int = 32
    max_age: int = 60
    domain: str = ""
    secure: bool = True
    request_header: str = "X-CSRF-Token"
    cookie_name: str = "X-CSRF-Token"
    exclude_patterns: list[str] = field(default_factory=list)
