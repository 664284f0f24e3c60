"""Retry eligibility and backoff for the HTTP transport.

Design goals:
- Decisions dispatch on ``ErrorKind``, never on message text
- Mutating requests retry only when the server can deduplicate them
- Jittered exponential backoff, overridden by an explicit Retry-After
"""

from __future__ import annotations

import asyncio
import random

from lumnisai.constants import DEFAULT_BACKOFF_FACTOR, MAX_BACKOFF_S
from lumnisai.errors import ErrorKind, LumnisError

_RETRY_SAFE_METHODS: frozenset[str] = frozenset({"GET", "DELETE"})
_RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset(
    {ErrorKind.RATE_LIMIT, ErrorKind.SERVER}
)


def is_retry_safe(method: str, idempotency_key: str | None) -> bool:
    """Return True when repeating the request cannot double-apply it."""
    return method.upper() in _RETRY_SAFE_METHODS or bool(idempotency_key)


def max_attempts(method: str, idempotency_key: str | None, max_retries: int) -> int:
    """Total attempts allowed for one request."""
    if is_retry_safe(method, idempotency_key):
        return max_retries + 1
    return 1


def parse_retry_after_s(value: str | float | None) -> float | None:
    """Parse a numeric ``Retry-After`` value into seconds.

    HTTP-date values are not interpreted and yield None, which makes the
    caller fall back to exponential backoff.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value >= 0 else None
    text = value.strip()
    if not text:
        return None
    try:
        seconds = float(text)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def compute_backoff_s(
    attempt: int,
    *,
    retry_after: str | float | None = None,
    jitter_s: float = DEFAULT_BACKOFF_FACTOR,
) -> float:
    """Delay before the retry following *attempt* (0-based).

    A parseable Retry-After wins outright. Otherwise the delay is
    ``min(2**attempt, 10)`` seconds plus up to *jitter_s* of random jitter.
    """
    explicit = parse_retry_after_s(retry_after)
    if explicit is not None:
        return explicit
    base = min(float(2**attempt), MAX_BACKOFF_S)
    return base + random.random() * jitter_s  # noqa: S311


def should_retry(exc: BaseException) -> bool:
    """Return True when *exc* is transient and worth another attempt.

    Contract:
    - Cancellation is never retried.
    - Rate-limit and server failures (including transport failures mapped to
      ``NetworkError``) are retried.
    - Every other kind is a permanent client-side failure.
    """
    if isinstance(exc, asyncio.CancelledError):
        return False
    if isinstance(exc, LumnisError):
        return exc.kind in _RETRYABLE_KINDS
    return False
