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
"""Token generation and timing-safe comparison for the double-submit guard.

Tokens come from a fast, lock-guarded pseudo-random source rather than
:mod:`secrets`.  Each 63-bit draw is sliced into ten 6-bit letter indices,
so the lock is taken once per ten output bytes instead of once per byte.
Tokens are not cryptographically secure; they only need to be
unpredictable to a cross-origin attacker.
"""

from __future__ import annotations

import base64
import hmac
import os
import random
import threading
import time
import weakref

LETTERS: bytes = b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
"""Alphabet the raw token bytes are drawn from."""

DEFAULT_TOKEN_LENGTH: int = 32
"""Default number of random bytes per token, before encoding."""

_LETTER_IDX_BITS = 6
_LETTER_IDX_MASK = (1 << _LETTER_IDX_BITS) - 1
_LETTER_IDX_MAX = 63 // _LETTER_IDX_BITS  # letter indices per 63-bit draw

_time_seeded: weakref.WeakSet[TokenGenerator] = weakref.WeakSet()


def _fresh_seed() -> int:
    return time.time_ns() ^ (os.getpid() << 32)


class TokenGenerator:
    """Produces URL-safe base64 tokens from a shared pseudo-random source.

    One instance is safe to share across threads and tasks: the underlying
    :class:`random.Random` is only touched while holding ``self._lock``.

    Args:
        seed: Seed for the random source.  Defaults to the current time in
            nanoseconds; pass a fixed value for reproducible tests.
    """

    def __init__(self, seed: int | None = None) -> None:
        self._source = random.Random(_fresh_seed() if seed is None else seed)
        self._lock = threading.Lock()
        if seed is None:
            _time_seeded.add(self)

    def reseed(self, seed: int | None = None) -> None:
        """Reset the random source, from the clock and pid unless *seed* is given."""
        with self._lock:
            self._source.seed(_fresh_seed() if seed is None else seed)

    def _reset_after_fork(self) -> None:
        # The parent may have held the lock at fork time.
        self._lock = threading.Lock()
        self._source.seed(_fresh_seed())

    def _draw(self) -> int:
        with self._lock:
            return self._source.getrandbits(63)

    def random_bytes(self, length: int) -> bytes:
        """Return *length* pseudo-random ASCII letters as bytes."""
        if length < 0:
            raise ValueError(f"token length must be non-negative, got {length}")

        out = bytearray(length)
        cache = 0
        remain = 0
        i = length - 1
        while i >= 0:
            if remain == 0:
                cache = self._draw()
                remain = _LETTER_IDX_MAX

            idx = cache & _LETTER_IDX_MASK
            if idx < len(LETTERS):
                out[i] = LETTERS[idx]
                i -= 1

            cache >>= _LETTER_IDX_BITS
            remain -= 1

        return bytes(out)

    def generate(self, length: int = DEFAULT_TOKEN_LENGTH) -> str:
        """Generate a token of *length* random bytes, URL-safe base64 encoded.

        Returns:
            The encoded token; empty only when *length* is 0.
        """
        return base64.urlsafe_b64encode(self.random_bytes(length)).decode("ascii")


default_token_generator = TokenGenerator()
"""Process-wide generator used when none is injected."""


def _reseed_after_fork() -> None:
    for generator in list(_time_seeded):
        generator._reset_after_fork()


# Forked workers (e.g. gunicorn --preload) must not share the parent's sequence.
if hasattr(os, "register_at_fork"):
    os.register_at_fork(after_in_child=_reseed_after_fork)


def constant_time_equals(a: str, b: str) -> bool:
    """Compare two strings without leaking where they differ.

    Returns:
        ``True`` if both strings have identical UTF-8 bytes; ``False`` otherwise,
        including when their lengths differ.
    """
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))
