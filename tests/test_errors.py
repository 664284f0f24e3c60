from __future__ import annotations

import pytest

from lumnisai.errors import (
    AuthenticationError,
    ErrorKind,
    LocalFileNotSupportedError,
    LumnisError,
    NetworkError,
    NoDataSourcesError,
    NotFoundError,
    RateLimitError,
    ResponseTimeoutError,
    ServerError,
    SourcesNotAvailableError,
    ValidationError,
    error_for_status,
)

pytestmark = pytest.mark.unit


def test_lumnis_error_structured_metadata() -> None:
    err = LumnisError(
        "boom",
        code="BOOM",
        status_code=418,
        details={"raw": "teapot"},
        request_id="req_1",
        hint="do this",
    )

    assert str(err) == "boom"
    assert err.code == "BOOM"
    assert err.status_code == 418
    assert err.details == {"raw": "teapot"}
    assert err.request_id == "req_1"
    assert err.hint == "do this"
    assert err.kind is ErrorKind.UNKNOWN


def test_lumnis_error_defaults() -> None:
    err = LumnisError("fail")
    assert err.code == "UNKNOWN_ERROR"
    assert err.status_code is None
    assert err.details is None
    assert err.request_id is None
    assert err.hint is None


def test_subclasses_fix_kind_and_default_status() -> None:
    assert AuthenticationError("x").status_code == 401
    assert ValidationError("x").kind is ErrorKind.VALIDATION
    assert NotFoundError("x").status_code == 404
    assert ServerError("x").kind is ErrorKind.SERVER
    assert RateLimitError().message == "Rate limit exceeded"


def test_network_error_is_a_status_less_server_error() -> None:
    err = NetworkError("connection reset")
    assert isinstance(err, ServerError)
    assert err.kind is ErrorKind.SERVER
    assert err.status_code is None


def test_rate_limit_error_parses_retry_after() -> None:
    assert RateLimitError(retry_after="2").retry_after_s == 2.0
    assert RateLimitError(retry_after="Wed, 21 Oct 2015 07:28:00 GMT").retry_after_s is None
    assert RateLimitError().retry_after_s is None


def test_response_timeout_error_names_the_response() -> None:
    err = ResponseTimeoutError("resp_42", 0.1)
    assert "resp_42" in str(err)
    assert err.response_id == "resp_42"
    assert err.kind is ErrorKind.TIMEOUT
    assert err.code == "RESPONSE_TIMEOUT"


def test_domain_errors_are_validation_errors() -> None:
    local = LocalFileNotSupportedError("/tmp/a.pdf")
    assert isinstance(local, ValidationError)
    assert local.code == "LOCAL_FILE_NOT_SUPPORTED"
    assert "/tmp/a.pdf" in str(local)

    assert NoDataSourcesError().code == "NO_DATA_SOURCES"
    assert "configure" in NoDataSourcesError().message

    missing = SourcesNotAvailableError("nope", ["PDL"], status_code=400)
    assert missing.available_sources == ["PDL"]
    assert missing.status_code == 400


@pytest.mark.parametrize(
    ("status", "expected", "message"),
    [
        (401, AuthenticationError, "Invalid or missing API key"),
        (403, AuthenticationError, "Forbidden - insufficient permissions"),
        (404, NotFoundError, "Resource not found"),
        (429, RateLimitError, "Rate limit exceeded"),
        (500, ServerError, "Server error: 500"),
        (503, ServerError, "Server error: 503"),
    ],
)
def test_error_for_status_selects_class(status, expected, message) -> None:
    err = error_for_status(status, request_id="req_9")
    assert type(err) is expected
    assert err.message == message
    assert err.status_code == status
    assert err.request_id == "req_9"


def test_error_for_status_keeps_server_message_for_client_errors() -> None:
    err = error_for_status(422, message="email is invalid", details={"detail": "x"})
    assert isinstance(err, ValidationError)
    assert err.message == "email is invalid"
    assert err.details == {"detail": "x"}

    generic = error_for_status(409)
    assert generic.message == "Server error: 409"


def test_error_for_status_carries_retry_after() -> None:
    err = error_for_status(429, retry_after="3")
    assert isinstance(err, RateLimitError)
    assert err.retry_after == "3"
    assert err.retry_after_s == 3.0
