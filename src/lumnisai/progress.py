"""Console rendering of response progress.

Rendering writes through a ``sink`` callable (``print`` by default) so
callers can redirect or capture it; diagnostics go through ``logging``.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import json
import logging
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from lumnisai.models import ProgressEntry, ResponseObject

logger = logging.getLogger(__name__)

Sink = Callable[[str], Any]

ToolCalls = Sequence[Mapping[str, Any]]


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def format_tool_call(tool_call: Mapping[str, Any], indent: str = "\t") -> str:
    """Render one tool call as ``<indent>→ name(k=json, ...)``.

    The parenthesized argument list is omitted when there are no arguments.
    """
    name = tool_call.get("name") or "unknown"
    args = tool_call.get("args") or {}
    if not args:
        return f"{indent}→ {name}"
    rendered = ", ".join(f"{k}={_compact_json(v)}" for k, v in args.items())
    return f"{indent}→ {name}({rendered})"


def _tool_call_key(tool_call: Mapping[str, Any]) -> str:
    name = tool_call.get("name") or "unknown"
    return f"{name}:{_compact_json(tool_call.get('args') or {})}"


def format_progress_entry(
    state: str, message: str, tool_calls: ToolCalls | None = None
) -> str:
    """Render ``STATE: message`` followed by one line per tool call."""
    lines = [f"{state.upper()}: {message}"]
    lines.extend(format_tool_call(tc) for tc in tool_calls or ())
    return "\n".join(lines)


def display_progress(
    update: ProgressEntry, indent: str = "\t", sink: Sink = print
) -> None:
    """Render a streamed progress entry.

    ``tool_update`` entries show only their tool calls; every other entry
    shows ``STATE - message`` and then its tool calls.
    """
    if update.state != "tool_update":
        sink(f"{update.state.upper()} - {update.message}")
    for tool_call in update.tool_calls or ():
        sink(format_tool_call(tool_call, indent))


class ProgressTracker:
    """Deduplicate repeated progress output across snapshots.

    A message is identified by ``state:message``; tool calls are tracked
    per message by name and serialized arguments.
    """

    def __init__(self) -> None:
        self._seen_messages: set[str] = set()
        self._message_tool_calls: dict[str, set[str]] = {}

    def format_new_entries(
        self, state: str, message: str, tool_calls: ToolCalls | None = None
    ) -> str | None:
        """Return lines not displayed before, or None when nothing is new."""
        message_key = f"{state}:{message}"
        lines: list[str] = []

        if message_key not in self._seen_messages:
            lines.append(f"{state.upper()}: {message}")
            self._seen_messages.add(message_key)
            self._message_tool_calls[message_key] = set()

        seen_tools = self._message_tool_calls[message_key]
        for tool_call in tool_calls or ():
            tool_key = _tool_call_key(tool_call)
            if tool_key not in seen_tools:
                lines.append(format_tool_call(tool_call))
                seen_tools.add(tool_key)

        return "\n".join(lines) if lines else None

    def reset(self) -> None:
        """Forget everything displayed so far."""
        self._seen_messages.clear()
        self._message_tool_calls.clear()


def simple_progress_callback(
    sink: Sink = print,
) -> Callable[[ResponseObject], None]:
    """Build a snapshot callback that prints only new progress lines.

    Rendering is best-effort: a failure to render is logged at debug level
    and never interrupts the wait it is attached to.
    """
    tracker = ProgressTracker()

    def callback(response: ResponseObject) -> None:
        try:
            for entry in response.progress:
                text = tracker.format_new_entries(
                    entry.state, entry.message, entry.tool_calls
                )
                if text is not None:
                    sink(text)
        except Exception:
            logger.debug("Progress rendering failed", exc_info=True)

    return callback
