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
"""doublesubmit — stateless double-submit cookie CSRF protection for ASGI apps."""

from doublesubmit.core.config import Config
from doublesubmit.kernel.exceptions import InvalidTokenException
from doublesubmit.logging import configure_logging
from doublesubmit.security.csrf import (
    CsrfOptions,
    ErrorHandler,
    ForbiddenErrorHandler,
    GuardConfiguration,
    is_safe_method,
)
from doublesubmit.security.token import TokenGenerator, constant_time_equals
from doublesubmit.web.adapters.starlette import (
    DoubleSubmitFilter,
    WebFilterChainMiddleware,
    csrf_filter_from_config,
    csrf_middleware,
    csrf_protect,
)

__version__ = "0.1.0"

__all__ = [
    "Config",
    "CsrfOptions",
    "DoubleSubmitFilter",
    "ErrorHandler",
    "ForbiddenErrorHandler",
    "GuardConfiguration",
    "InvalidTokenException",
    "TokenGenerator",
    "WebFilterChainMiddleware",
    "configure_logging",
    "constant_time_equals",
    "csrf_filter_from_config",
    "csrf_middleware",
    "csrf_protect",
    "is_safe_method",
]
