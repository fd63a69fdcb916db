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
"""Filter contract the guard runs under, and its path-scoped base class.

Requests and responses are typed ``Any`` here; only ``request.url.path`` is
read, so Starlette stays confined to :mod:`doublesubmit.web.adapters`.
"""

from __future__ import annotations

import abc
from collections.abc import Callable, Coroutine, Sequence
from fnmatch import fnmatchcase
from typing import Any, Protocol, runtime_checkable

CallNext = Callable[..., Coroutine[Any, Any, Any]]
"""Invokes the rest of the chain: ``await call_next(request) -> response``."""


@runtime_checkable
class WebFilter(Protocol):
    """A request filter run by :class:`WebFilterChainMiddleware`.

    ``do_filter`` either answers the request itself (a rejection) or awaits
    ``call_next`` and may then edit the response headers.
    """

    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...

    def should_not_filter(self, request: Any) -> bool: ...


def _matches(path: str, patterns: Sequence[str]) -> bool:
    return any(fnmatchcase(path, p) for p in patterns)


class PathScopedFilter(abc.ABC):
    """Base for filters limited to a set of request paths.

    Attributes:
        url_patterns: Case-sensitive globs the filter is limited to.  Empty
            means every path.
        exclude_patterns: Globs skipped even when ``url_patterns`` match,
            e.g. health checks or webhook receivers that cannot carry a token.
    """

    url_patterns: Sequence[str] = ()
    exclude_patterns: Sequence[str] = ()

    def in_scope(self, path: str) -> bool:
        if self.url_patterns and not _matches(path, self.url_patterns):
            return False
        return not _matches(path, self.exclude_patterns)

    def should_not_filter(self, request: Any) -> bool:
        return not self.in_scope(request.url.path)

    @abc.abstractmethod
    async def do_filter(self, request: Any, call_next: CallNext) -> Any: ...
