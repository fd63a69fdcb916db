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
"""doublesubmit security — tokens, comparison and guard configuration."""

from doublesubmit.security.csrf import (
    CSRF_COOKIE_NAME,
    CSRF_HEADER_NAME,
    SAFE_METHODS,
    CsrfOptions,
    ErrorHandler,
    ForbiddenErrorHandler,
    GuardConfiguration,
    is_safe_method,
)
from doublesubmit.security.token import TokenGenerator, constant_time_equals

__all__ = [
    "CSRF_COOKIE_NAME",
    "CSRF_HEADER_NAME",
    "SAFE_METHODS",
    "CsrfOptions",
    "ErrorHandler",
    "ForbiddenErrorHandler",
    "GuardConfiguration",
    "TokenGenerator",
    "constant_time_equals",
    "is_safe_method",
]
