"""HTTP transport boundary tests.

Every test drives ``Http`` through ``httpx.MockTransport`` and replaces the
backoff sleep with a recorder, so retries run instantly while their delays
can still be asserted.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from lumnisai._http import IDEMPOTENCY_HEADER, HttpOptions
from lumnisai.errors import (
    AuthenticationError,
    ConfigurationError,
    LumnisError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from tests.helpers import BASE_URL, json_response, make_http

pytestmark = pytest.mark.unit


@pytest.fixture
def sleeps(monkeypatch) -> list[float]:
    """Record backoff delays instead of sleeping."""
    recorded: list[float] = []
    real_sleep = asyncio.sleep

    async def fake_sleep(delay: float) -> None:
        recorded.append(delay)
        await real_sleep(0)

    monkeypatch.setattr("lumnisai._http.asyncio.sleep", fake_sleep)
    return recorded


# =============================================================================
# Options
# =============================================================================


def test_options_strip_trailing_slash() -> None:
    options = HttpOptions(base_url="https://api.test.com/")
    assert options.base_url == "https://api.test.com"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"base_url": ""},
        {"base_url": BASE_URL, "timeout_s": 0},
        {"base_url": BASE_URL, "max_retries": -1},
        {"base_url": BASE_URL, "backoff_factor": -0.1},
    ],
)
def test_options_reject_invalid_values(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        HttpOptions(**kwargs)


def test_options_copy_headers() -> None:
    headers = {"X-API-Key": "k"}
    options = HttpOptions(base_url=BASE_URL, headers=headers)
    headers["X-API-Key"] = "changed"
    assert options.headers["X-API-Key"] == "k"


# =============================================================================
# Request assembly
# =============================================================================


@pytest.mark.asyncio
async def test_request_builds_url_query_and_headers() -> None:
    http, recorder = make_http(
        lambda _r: json_response(200, {"ok": True}),
        headers={"X-API-Key": "secret"},
    )

    await http.get(
        "threads",
        params={"user_id": "u1", "limit": 5, "is_active": True, "offset": None},
        headers={"X-Trace": "t"},
    )

    request = recorder.requests[0]
    assert request.url.path == "/v1/threads"
    assert dict(request.url.params) == {
        "user_id": "u1",
        "limit": "5",
        "is_active": "true",
    }
    assert request.headers["X-API-Key"] == "secret"
    assert request.headers["X-Trace"] == "t"
    assert request.headers["content-type"] == "application/json"
    assert IDEMPOTENCY_HEADER not in request.headers


@pytest.mark.asyncio
async def test_sequence_params_are_comma_joined() -> None:
    http, recorder = make_http(lambda _r: json_response(200, {}))
    await http.get("/people", params={"sources": ["PDL", "CORESIGNAL"]})
    assert recorder.requests[0].url.params["sources"] == "PDL,CORESIGNAL"


@pytest.mark.asyncio
async def test_body_is_snake_cased_and_response_camel_cased() -> None:
    http, recorder = make_http(
        lambda _r: json_response(200, {"response_id": "r1", "thread_id": "t1"})
    )

    data = await http.post("/responses", {"userId": "u", "nested": {"firstName": "A"}})

    assert recorder.json_bodies() == [{"user_id": "u", "nested": {"first_name": "A"}}]
    assert data == {"responseId": "r1", "threadId": "t1"}


@pytest.mark.asyncio
async def test_every_non_get_request_gets_a_distinct_idempotency_key() -> None:
    http, recorder = make_http(lambda _r: json_response(200, {}))

    await http.post("/a", {})
    await http.put("/b", {})
    await http.delete("/c")
    await http.post("/d", {}, idempotency_key="mine")

    keys = [r.headers.get(IDEMPOTENCY_HEADER) for r in recorder.requests]
    assert all(keys)
    assert len(set(keys[:3])) == 3
    assert keys[3] == "mine"


@pytest.mark.asyncio
async def test_empty_and_non_json_bodies() -> None:
    responses = iter(
        [
            httpx.Response(204),
            httpx.Response(200, text="plain text"),
            httpx.Response(200, content=b""),
        ]
    )
    http, _ = make_http(lambda _r: next(responses))

    assert await http.delete("/x") is None
    assert await http.get("/y") == "plain text"
    assert await http.get("/z") is None


# =============================================================================
# Error mapping
# =============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthenticationError),
        (403, AuthenticationError),
        (404, NotFoundError),
        (400, ValidationError),
        (422, ValidationError),
    ],
)
async def test_client_errors_raise_without_retry(status, expected, sleeps) -> None:
    http, recorder = make_http(
        lambda _r: json_response(status, {"detail": "nope"}, **{"x-request-id": "req_7"})
    )

    with pytest.raises(expected) as exc_info:
        await http.get("/things")

    assert exc_info.value.status_code == status
    assert exc_info.value.request_id == "req_7"
    assert len(recorder.requests) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_validation_message_and_details_come_from_body() -> None:
    payload = {"error": {"code": "BAD_EMAIL", "message": "email is invalid"}}
    http, _ = make_http(lambda _r: json_response(400, payload))

    with pytest.raises(ValidationError) as exc_info:
        await http.post("/users", {"email": "x"})

    assert exc_info.value.message == "email is invalid"
    assert exc_info.value.details == payload


@pytest.mark.asyncio
async def test_non_json_error_body_is_kept_raw() -> None:
    http, _ = make_http(lambda _r: httpx.Response(400, text="<html>bad</html>"))

    with pytest.raises(ValidationError) as exc_info:
        await http.post("/users", {})

    assert exc_info.value.details == {"raw": "<html>bad</html>"}
    assert exc_info.value.message == "Server error: 400"


# =============================================================================
# Retries
# =============================================================================


@pytest.mark.asyncio
async def test_get_server_errors_retry_up_to_cap(sleeps) -> None:
    http, recorder = make_http(lambda _r: json_response(500, {}), max_retries=3)

    with pytest.raises(ServerError):
        await http.get("/flaky")

    assert len(recorder.requests) == 4
    assert len(sleeps) == 3


@pytest.mark.asyncio
async def test_server_error_then_success(sleeps) -> None:
    responses = iter([json_response(503, {}), json_response(200, {"ok": True})])
    http, recorder = make_http(lambda _r: next(responses))

    assert await http.get("/flaky") == {"ok": True}
    assert len(recorder.requests) == 2
    assert len(sleeps) == 1


@pytest.mark.asyncio
async def test_retries_reuse_the_same_idempotency_key(sleeps) -> None:
    responses = iter([json_response(500, {}), json_response(201, {"id": "1"})])
    http, recorder = make_http(lambda _r: next(responses))

    await http.post("/threads", {})

    keys = {r.headers[IDEMPOTENCY_HEADER] for r in recorder.requests}
    assert len(recorder.requests) == 2
    assert len(keys) == 1


@pytest.mark.asyncio
async def test_rate_limit_honors_retry_after(sleeps) -> None:
    responses = iter(
        [
            json_response(429, {}, **{"Retry-After": "2"}),
            json_response(200, {"ok": True}),
        ]
    )
    http, _ = make_http(lambda _r: next(responses))

    assert await http.get("/limited") == {"ok": True}
    assert sleeps == [2.0]


@pytest.mark.asyncio
async def test_rate_limit_on_final_attempt_raises_without_sleeping(sleeps) -> None:
    http, recorder = make_http(
        lambda _r: json_response(429, {}, **{"Retry-After": "5"}), max_retries=1
    )

    with pytest.raises(RateLimitError) as exc_info:
        await http.get("/limited")

    assert exc_info.value.retry_after_s == 5.0
    assert len(recorder.requests) == 2
    assert sleeps == [5.0]


@pytest.mark.asyncio
async def test_max_retries_zero_makes_one_attempt(sleeps) -> None:
    http, recorder = make_http(lambda _r: json_response(500, {}), max_retries=0)

    with pytest.raises(ServerError):
        await http.get("/once")

    assert len(recorder.requests) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_network_errors_map_to_network_error_and_retry(sleeps) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    http, recorder = make_http(handler, max_retries=2)

    with pytest.raises(NetworkError) as exc_info:
        await http.get("/down")

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
    assert exc_info.value.code == "NETWORK_ERROR"
    assert len(recorder.requests) == 3
    assert len(sleeps) == 2


@pytest.mark.asyncio
async def test_timeouts_are_network_errors(sleeps) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    http, _ = make_http(handler, max_retries=0)

    with pytest.raises(NetworkError):
        await http.get("/slow")


@pytest.mark.asyncio
async def test_errors_share_the_base_class(sleeps) -> None:
    http, _ = make_http(lambda _r: json_response(404, {}))
    with pytest.raises(LumnisError):
        await http.get("/missing")


@pytest.mark.asyncio
async def test_aclose_is_idempotent() -> None:
    http, _ = make_http(lambda _r: json_response(200, {}))
    await http.get("/x")
    await http.aclose()
    await http.aclose()


def test_warn_tenant_scope_logs(caplog) -> None:
    http, _ = make_http(lambda _r: json_response(200, {}))
    with caplog.at_level("WARNING", logger="lumnisai._http"):
        http.warn_tenant_scope()
    assert "TENANT scope" in caplog.text


@pytest.mark.asyncio
async def test_post_client_error_is_attempted_once(sleeps) -> None:
    http, recorder = make_http(lambda _r: json_response(400, {"detail": "bad"}))

    with pytest.raises(ValidationError) as exc_info:
        await http.post("/responses", {"messages": []})

    assert exc_info.value.message == "bad"
    assert len(recorder.requests) == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_malformed_json_success_body_is_a_retried_server_error(sleeps) -> None:
    responses = iter(
        [
            httpx.Response(
                200, content=b"{bad", headers={"content-type": "application/json"}
            ),
            json_response(200, {"ok": True}),
        ]
    )
    http, recorder = make_http(lambda _r: next(responses))

    assert await http.get("/flaky") == {"ok": True}
    assert len(recorder.requests) == 2
    assert len(sleeps) == 1


@pytest.mark.asyncio
async def test_malformed_json_keeps_raw_body() -> None:
    http, _ = make_http(
        lambda _r: httpx.Response(
            200,
            content=b"{bad",
            headers={"content-type": "application/json", "x-request-id": "req_9"},
        ),
        max_retries=0,
    )

    with pytest.raises(ServerError) as exc_info:
        await http.get("/broken")

    assert exc_info.value.code == "INVALID_RESPONSE"
    assert exc_info.value.details == {"raw": "{bad"}
    assert exc_info.value.request_id == "req_9"


@pytest.mark.asyncio
async def test_attempt_deadline_covers_the_whole_request() -> None:
    async def stall(_request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return json_response(200, {})

    http, recorder = make_http(stall, timeout_s=0.05, max_retries=0)

    with pytest.raises(NetworkError) as exc_info:
        await http.get("/slow")

    assert exc_info.value.code == "REQUEST_TIMEOUT"
    assert len(recorder.requests) == 1
