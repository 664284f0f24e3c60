"""Polling orchestration for asynchronous responses.

Two consumption modes sit on top of the responses resource:

- ``wait_for_response`` blocks until the response reaches a terminal status,
  reporting every fetched snapshot to an optional callback.
- ``ResponseStream`` is an async iterator that emits only what changed
  between snapshots: new progress entries, synthetic ``tool_update`` entries
  for tool calls appended to entries already emitted, and a final synthetic
  ``completed`` entry carrying the output text.
"""

from __future__ import annotations

import asyncio
from collections import deque
from datetime import datetime, timezone
import enum
import logging
import time
from typing import TYPE_CHECKING, Any, Callable, Protocol

from lumnisai.constants import (
    DEFAULT_MAX_WAIT_S,
    DEFAULT_POLL_INTERVAL_S,
    LONG_POLL_TIMEOUT_S,
)
from lumnisai.errors import ConfigurationError, ResponseTimeoutError
from lumnisai.models import ProgressEntry

if TYPE_CHECKING:
    from lumnisai.models import (
        CreateResponseRequest,
        CreateResponseResponse,
        ResponseObject,
    )

logger = logging.getLogger(__name__)

ProgressCallback = Callable[["ResponseObject"], Any]

TOOL_UPDATE_STATE = "tool_update"
COMPLETED_STATE = "completed"
_PREVIEW_CHARS = 50


class ResponsesAPI(Protocol):
    """The slice of the responses resource the orchestrator needs."""

    async def create(self, request: CreateResponseRequest) -> CreateResponseResponse:
        """Create a response."""
        ...

    async def get(
        self, response_id: str, *, wait: float | None = None
    ) -> ResponseObject:
        """Fetch a response, optionally long-polling for up to *wait* seconds."""
        ...


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _check_intervals(poll_interval_s: float, max_wait_s: float | None = None) -> None:
    if poll_interval_s < 0:
        raise ConfigurationError(
            f"poll_interval_s must be >= 0, got {poll_interval_s}",
        )
    if max_wait_s is not None and max_wait_s <= 0:
        raise ConfigurationError(
            f"max_wait_s must be > 0, got {max_wait_s}",
            hint="This is the wall-clock budget for the whole wait, in seconds.",
        )


async def wait_for_response(
    responses: ResponsesAPI,
    request: CreateResponseRequest,
    *,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    max_wait_s: float = DEFAULT_MAX_WAIT_S,
    long_poll_s: float = LONG_POLL_TIMEOUT_S,
    on_progress: ProgressCallback | None = None,
) -> ResponseObject:
    """Create a response and poll until it reaches a terminal status.

    Args:
        responses: Responses resource used to create and fetch.
        request: The creation request.
        poll_interval_s: Sleep between fetches.
        max_wait_s: Wall-clock budget measured from just after creation.
        long_poll_s: Server-side long-poll hint sent with every fetch.
        on_progress: Called with every fetched snapshot, including the
            terminal one. Exceptions it raises propagate.

    Returns:
        The first snapshot whose status is terminal. Failed and cancelled
        responses are returned, not raised.

    Raises:
        ResponseTimeoutError: When the deadline elapses first.
    """
    _check_intervals(poll_interval_s, max_wait_s)

    created = await responses.create(request)
    response_id = created.response_id
    if on_progress is None:
        logger.info("Response ID: %s", response_id)

    start = time.monotonic()
    while True:
        current = await responses.get(response_id, wait=long_poll_s)

        if on_progress is not None:
            on_progress(current)

        if current.is_terminal:
            return current

        if time.monotonic() - start > max_wait_s:
            raise ResponseTimeoutError(response_id, max_wait_s)

        await asyncio.sleep(poll_interval_s)


class StreamState(enum.Enum):
    """Lifecycle of a ``ResponseStream``."""

    CREATED = "created"
    POLLING = "polling"
    DRAINING = "draining"
    DONE = "done"


def _preview(message: str) -> str:
    if len(message) > _PREVIEW_CHARS:
        return f"{message[:_PREVIEW_CHARS]}..."
    return message


class ResponseStream:
    """Single-pass async iterator over the progress of one response.

    Each poll's snapshot is diffed against what was already emitted:

    1. entries beyond the last seen count are emitted in order, recording
       each entry's tool-call count;
    2. for every earlier entry whose tool-call list grew, one synthetic
       ``tool_update`` entry carries just the new tool calls;
    3. on ``succeeded`` with output text, a synthetic ``completed`` entry is
       emitted last.

    The stream cannot be restarted. ``aclose()`` or simply abandoning the
    iteration ends it without further requests; a fetch error ends it and
    propagates to the consumer.
    """

    def __init__(
        self,
        responses: ResponsesAPI,
        response_id: str,
        *,
        poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
        long_poll_s: float = LONG_POLL_TIMEOUT_S,
    ) -> None:
        _check_intervals(poll_interval_s)
        self._responses = responses
        self._response_id = response_id
        self._poll_interval_s = poll_interval_s
        self._long_poll_s = long_poll_s
        self._state = StreamState.CREATED
        self._pending: deque[ProgressEntry] = deque()
        self._seen_count = 0
        # Entry position -> tool calls already emitted for it.
        self._tool_counts: dict[int, int] = {}
        self._last: ResponseObject | None = None

    @property
    def response_id(self) -> str:
        """Id of the response being streamed."""
        return self._response_id

    @property
    def state(self) -> StreamState:
        """Current lifecycle state."""
        return self._state

    @property
    def last_response(self) -> ResponseObject | None:
        """Most recently fetched snapshot, if any."""
        return self._last

    def __aiter__(self) -> ResponseStream:
        return self

    async def __anext__(self) -> ProgressEntry:
        while not self._pending:
            if self._state in (StreamState.DRAINING, StreamState.DONE):
                self._state = StreamState.DONE
                raise StopAsyncIteration
            await self._poll()
        return self._pending.popleft()

    async def aclose(self) -> None:
        """End the session; later iteration yields nothing."""
        self._pending.clear()
        self._state = StreamState.DONE

    async def _poll(self) -> None:
        try:
            if self._state is StreamState.POLLING:
                await asyncio.sleep(self._poll_interval_s)
            current = await self._responses.get(
                self._response_id, wait=self._long_poll_s
            )
        except BaseException:
            self._state = StreamState.DONE
            raise

        self._state = StreamState.POLLING
        self._last = current
        self._pending.extend(self._diff(current))
        if current.is_terminal:
            logger.debug(
                "Response %s reached status %s", self._response_id, current.status
            )
            self._state = StreamState.DRAINING

    def _diff(self, current: ResponseObject) -> list[ProgressEntry]:
        progress = current.progress
        out: list[ProgressEntry] = []

        for index in range(self._seen_count, len(progress)):
            entry = progress[index]
            self._tool_counts[index] = len(entry.tool_calls or [])
            out.append(entry)
        previous_count = self._seen_count
        self._seen_count = max(self._seen_count, len(progress))

        for index in range(min(previous_count, len(progress))):
            entry = progress[index]
            tool_calls = entry.tool_calls or []
            emitted = self._tool_counts.get(index, 0)
            if len(tool_calls) > emitted:
                out.append(
                    ProgressEntry(
                        ts=_utc_now_iso(),
                        state=TOOL_UPDATE_STATE,
                        message=f"[Tool calls for: {_preview(entry.message)}]",
                        tool_calls=tool_calls[emitted:],
                    )
                )
                self._tool_counts[index] = len(tool_calls)

        if current.status == "succeeded" and current.output_text:
            out.append(
                ProgressEntry(
                    ts=current.completed_at or _utc_now_iso(),
                    state=COMPLETED_STATE,
                    message="Task completed successfully",
                    output_text=current.output_text,
                )
            )
        return out


async def start_stream(
    responses: ResponsesAPI,
    request: CreateResponseRequest,
    *,
    poll_interval_s: float = DEFAULT_POLL_INTERVAL_S,
    long_poll_s: float = LONG_POLL_TIMEOUT_S,
) -> ResponseStream:
    """Create a response and return a stream over its progress."""
    created = await responses.create(request)
    logger.info("Response ID: %s", created.response_id)
    return ResponseStream(
        responses,
        created.response_id,
        poll_interval_s=poll_interval_s,
        long_poll_s=long_poll_s,
    )
