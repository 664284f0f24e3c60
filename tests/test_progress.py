from __future__ import annotations

import pytest

from lumnisai.models import ProgressEntry
from lumnisai.progress import (
    ProgressTracker,
    display_progress,
    format_progress_entry,
    format_tool_call,
    simple_progress_callback,
)
from tests.helpers import snapshot

pytestmark = pytest.mark.unit


def test_format_entry_without_tool_calls() -> None:
    assert format_progress_entry("processing", "Analyzing data") == (
        "PROCESSING: Analyzing data"
    )


def test_format_entry_with_tool_calls() -> None:
    tool_calls = [
        {"name": "read_file", "args": {"path": "/data.csv"}},
        {"name": "calculate_stats", "args": {"method": "mean", "cols": [1, 2]}},
    ]
    result = format_progress_entry("processing", "Analyzing data", tool_calls)
    assert result.splitlines() == [
        "PROCESSING: Analyzing data",
        '\t→ read_file(path="/data.csv")',
        '\t→ calculate_stats(method="mean", cols=[1,2])',
    ]


def test_tool_call_without_args_has_no_parens() -> None:
    assert format_tool_call({"name": "get_data", "args": {}}) == "\t→ get_data"
    assert format_tool_call({}) == "\t→ unknown"


def test_tracker_deduplicates_messages() -> None:
    tracker = ProgressTracker()
    assert tracker.format_new_entries("processing", "Analyzing data") == (
        "PROCESSING: Analyzing data"
    )
    assert tracker.format_new_entries("processing", "Analyzing data") is None


def test_tracker_deduplicates_tool_calls() -> None:
    tracker = ProgressTracker()
    read = {"name": "read_file", "args": {"path": "/data.csv"}}
    stats = {"name": "calculate_stats", "args": {"method": "mean"}}

    first = tracker.format_new_entries("processing", "Analyzing", [read])
    assert first is not None
    assert "\t→ read_file" in first

    assert tracker.format_new_entries("processing", "Analyzing", [read]) is None

    third = tracker.format_new_entries("processing", "Analyzing", [read, stats])
    assert third == '\t→ calculate_stats(method="mean")'


def test_tracker_reset_forgets_history() -> None:
    tracker = ProgressTracker()
    tracker.format_new_entries("processing", "Analyzing data")
    tracker.reset()
    assert tracker.format_new_entries("processing", "Analyzing data") is not None


def test_display_progress_regular_entry() -> None:
    lines: list[str] = []
    update = ProgressEntry(
        ts="t",
        state="processing",
        message="Working",
        tool_calls=[{"name": "search", "args": {"q": "x"}}],
    )
    display_progress(update, sink=lines.append)
    assert lines == ["PROCESSING - Working", '\t→ search(q="x")']


def test_display_progress_tool_update_shows_only_tools() -> None:
    lines: list[str] = []
    update = ProgressEntry(
        ts="t",
        state="tool_update",
        message="[Tool calls for: Working]",
        tool_calls=[{"name": "fetch", "args": {}}],
    )
    display_progress(update, indent="  ", sink=lines.append)
    assert lines == ["  → fetch"]


def test_simple_callback_prints_only_new_lines() -> None:
    lines: list[str] = []
    callback = simple_progress_callback(sink=lines.append)
    step = {"ts": "t", "state": "processing", "message": "Searching"}
    with_tool = {**step, "tool_calls": [{"name": "search", "args": {}}]}

    callback(snapshot("in_progress", [step]))
    callback(snapshot("in_progress", [step]))
    callback(snapshot("in_progress", [with_tool]))

    assert lines == ["PROCESSING: Searching", "\t→ search"]


def test_simple_callback_never_raises() -> None:
    def broken_sink(_text: str) -> None:
        raise OSError("stdout closed")

    callback = simple_progress_callback(sink=broken_sink)
    callback(snapshot("in_progress", [{"ts": "t", "state": "s", "message": "m"}]))
