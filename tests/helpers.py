"""Test helpers (small, reusable doubles).

Keep this file tiny and purpose-built: scripted fakes for the responses API
and a recording httpx transport cover almost every suite.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import json
from typing import Any, Callable

import httpx

from lumnisai._http import Http, HttpOptions
from lumnisai.models import (
    CreateResponseRequest,
    CreateResponseResponse,
    ResponseObject,
)

BASE_URL = "https://api.test.com"


def snapshot(
    status: str = "in_progress",
    progress: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> ResponseObject:
    """Build a response snapshot from plain entry dicts."""
    return ResponseObject.model_validate(
        {"status": status, "progress": progress or [], **extra}
    )


def entry(message: str, *tool_names: str, state: str = "processing") -> dict[str, Any]:
    """Build a progress entry dict with named tool calls."""
    data: dict[str, Any] = {
        "ts": "2024-01-01T00:00:00Z",
        "state": state,
        "message": message,
    }
    if tool_names:
        data["tool_calls"] = [{"name": name, "args": {}} for name in tool_names]
    return data


@dataclass
class ScriptedResponses:
    """Responses API double that returns a scripted sequence of snapshots.

    Items are returned in order; the last one repeats once the script is
    exhausted. Exceptions in the script are raised.
    """

    script: list[ResponseObject | BaseException] = field(default_factory=list)
    response_id: str = "resp_123"
    created: list[CreateResponseRequest] = field(default_factory=list)
    get_calls: list[tuple[str, float | None]] = field(default_factory=list)

    async def create(self, request: CreateResponseRequest) -> CreateResponseResponse:
        self.created.append(request)
        return CreateResponseResponse(response_id=self.response_id)

    async def get(self, response_id: str, *, wait: float | None = None) -> ResponseObject:
        self.get_calls.append((response_id, wait))
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, BaseException):
            raise item
        return item


@dataclass
class RecordingTransport:
    """Route requests to a handler and record every request seen."""

    handler: Callable[[httpx.Request], httpx.Response]
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_bodies(self) -> list[Any]:
        return [json.loads(r.content) if r.content else None for r in self.requests]


def json_response(status_code: int, payload: Any, **headers: str) -> httpx.Response:
    return httpx.Response(status_code, json=payload, headers=headers)


def make_http(
    handler: Callable[[httpx.Request], httpx.Response],
    **options: Any,
) -> tuple[Http, RecordingTransport]:
    """Build an ``Http`` wired to a recording mock transport."""
    recorder = RecordingTransport(handler)
    opts = {"base_url": BASE_URL, "api_prefix": "/v1", **options}
    return Http(HttpOptions(**opts), transport=recorder.transport()), recorder
