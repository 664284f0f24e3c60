"""Exception hierarchy for the Lumnis client.

Every failure carries the same payload shape (message, code, status code,
details, request id) plus a closed ``kind`` tag. Retry and display logic
dispatch on ``kind`` rather than on class identity; the subclasses exist so
callers can still write ``except NotFoundError``.
"""

from __future__ import annotations

import enum
from typing import Any


class ErrorKind(str, enum.Enum):
    """Closed set of failure categories."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    TIMEOUT = "timeout"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class LumnisError(Exception):
    """Base exception for all Lumnis errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN
    default_status_code: int | None = None

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        status_code: int | None = None,
        details: Any = None,
        request_id: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "UNKNOWN_ERROR"
        self.status_code = (
            status_code if status_code is not None else self.default_status_code
        )
        self.details = details
        self.request_id = request_id
        self.hint = hint

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.message!r}, kind={self.kind.value!r}, "
            f"status_code={self.status_code!r}, request_id={self.request_id!r})"
        )


class AuthenticationError(LumnisError):
    """Invalid or missing credentials (HTTP 401/403)."""

    kind = ErrorKind.AUTHENTICATION
    default_status_code = 401


class ValidationError(LumnisError):
    """Request rejected as invalid (HTTP 400 or unclassified 4xx)."""

    kind = ErrorKind.VALIDATION
    default_status_code = 400


class NotFoundError(LumnisError):
    """Resource not found (HTTP 404)."""

    kind = ErrorKind.NOT_FOUND
    default_status_code = 404


class RateLimitError(LumnisError):
    """Rate limit exceeded (HTTP 429).

    ``retry_after`` keeps the raw ``Retry-After`` header value (seconds or an
    HTTP date); ``retry_after_s`` is the numeric form when one exists.
    """

    kind = ErrorKind.RATE_LIMIT
    default_status_code = 429

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: str | float | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.retry_after = retry_after

    @property
    def retry_after_s(self) -> float | None:
        """Numeric ``Retry-After`` in seconds, or None."""
        from lumnisai.retry import parse_retry_after_s

        return parse_retry_after_s(self.retry_after)


class ServerError(LumnisError):
    """Server-side failure (HTTP 5xx)."""

    kind = ErrorKind.SERVER
    default_status_code = 500


class NetworkError(ServerError):
    """The request never produced an HTTP response (connect error, timeout)."""

    default_status_code = None


class ResponseTimeoutError(LumnisError):
    """A response did not reach a terminal status before the deadline."""

    kind = ErrorKind.TIMEOUT

    def __init__(self, response_id: str, max_wait_s: float) -> None:
        super().__init__(
            f"Response {response_id} timed out after {max_wait_s:g}s",
            code="RESPONSE_TIMEOUT",
            hint="Raise max_wait_s or poll the response later with responses.get().",
        )
        self.response_id = response_id
        self.max_wait_s = max_wait_s


class ConfigurationError(LumnisError):
    """Client configuration or invocation arguments are invalid."""

    kind = ErrorKind.CONFIGURATION


class LocalFileNotSupportedError(ValidationError):
    """A file attachment points at a local path instead of a remote URI."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"Local file paths are not supported yet: {file_path}. "
            "Please wait for the artifact upload API or use artifact IDs.",
            code="LOCAL_FILE_NOT_SUPPORTED",
        )
        self.file_path = file_path


class NoDataSourcesError(ValidationError):
    """No people data sources are configured for the tenant."""

    def __init__(self, message: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            message or "No people data sources configured. Please configure API keys.",
            code="NO_DATA_SOURCES",
            **kwargs,
        )


class SourcesNotAvailableError(ValidationError):
    """Requested people data sources are not available."""

    def __init__(
        self, message: str, available_sources: list[str], **kwargs: Any
    ) -> None:
        super().__init__(message, code="SOURCES_NOT_AVAILABLE", **kwargs)
        self.available_sources = available_sources


class MessagingValidationError(ValidationError):
    """A messaging request was rejected before or by the server."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("code", "VALIDATION_ERROR")
        super().__init__(message, **kwargs)


class MessagingNotFoundError(NotFoundError):
    """A conversation or draft does not exist."""


_STATUS_MESSAGES: dict[int, str] = {
    401: "Invalid or missing API key",
    403: "Forbidden - insufficient permissions",
    404: "Resource not found",
    429: "Rate limit exceeded",
}


def error_for_status(
    status_code: int,
    *,
    message: str | None = None,
    details: Any = None,
    request_id: str | None = None,
    retry_after: str | None = None,
) -> LumnisError:
    """Build the typed error for a non-2xx HTTP status.

    401/403 map to authentication, 404 to not-found, 429 to rate-limit, other
    4xx to validation and everything else to a server error.
    """
    common: dict[str, Any] = {
        "status_code": status_code,
        "details": details,
        "request_id": request_id,
    }
    if status_code in (401, 403):
        return AuthenticationError(_STATUS_MESSAGES[status_code], **common)
    if status_code == 404:
        return NotFoundError(_STATUS_MESSAGES[404], **common)
    if status_code == 429:
        return RateLimitError(_STATUS_MESSAGES[429], retry_after=retry_after, **common)
    if 400 <= status_code < 500:
        return ValidationError(message or f"Server error: {status_code}", **common)
    return ServerError(f"Server error: {status_code}", **common)
