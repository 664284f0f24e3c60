"""HTTP transport: request assembly, retries and error mapping.

``Http`` is the single point where HTTP failures are classified into typed
errors and where the wire casing convention is applied. Resources and the
polling orchestrator call it and let its errors propagate unchanged.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
import json
import logging
from typing import Any
import uuid

import httpx

from lumnisai.casing import decode_payload, encode_payload
from lumnisai.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT_S,
)
from lumnisai.errors import (
    ConfigurationError,
    LumnisError,
    NetworkError,
    RateLimitError,
    ServerError,
    error_for_status,
)
from lumnisai.retry import compute_backoff_s, max_attempts, should_retry

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"
REQUEST_ID_HEADER = "x-request-id"


@dataclass(frozen=True)
class HttpOptions:
    """Immutable transport configuration."""

    base_url: str
    api_prefix: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_s: float = DEFAULT_TIMEOUT_S
    max_retries: int = DEFAULT_MAX_RETRIES
    #: Maximum random jitter (seconds) added to exponential backoff.
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR

    def __post_init__(self) -> None:
        """Normalize the base URL and validate numeric fields."""
        if not self.base_url:
            raise ConfigurationError(
                "base_url must be a non-empty URL",
                hint="Pass base_url='https://api.lumnis.ai'.",
            )
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "headers", dict(self.headers))
        if self.timeout_s <= 0:
            raise ConfigurationError(
                f"timeout_s must be > 0, got {self.timeout_s}",
                hint="This is the per-attempt request timeout in seconds.",
            )
        if self.max_retries < 0:
            raise ConfigurationError(
                f"max_retries must be >= 0, got {self.max_retries}",
                hint="Use max_retries=0 to disable retries.",
            )
        if self.backoff_factor < 0:
            raise ConfigurationError(
                f"backoff_factor must be >= 0, got {self.backoff_factor}",
            )


def _stringify_param(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
        return ",".join(_stringify_param(v) for v in value)
    return str(value)


def _query_params(params: Mapping[str, Any] | None) -> list[tuple[str, str]]:
    if not params:
        return []
    return [(k, _stringify_param(v)) for k, v in params.items() if v is not None]


def _is_json(response: httpx.Response) -> bool:
    return "application/json" in response.headers.get("content-type", "")


class Http:
    """Async HTTP transport shared by every resource of a client.

    The configuration is read-only after construction, so one instance can
    serve concurrent calls; each call keeps its own request/response locals.
    """

    def __init__(
        self,
        options: HttpOptions,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize with options and an optional httpx transport."""
        self._options = options
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def options(self) -> HttpOptions:
        """Transport configuration."""
        return self._options

    def _get_client(self) -> httpx.AsyncClient:
        """Lazily initialize and return the httpx client."""
        if self._client is None:
            self._client = httpx.AsyncClient(transport=self._transport)
        return self._client

    async def aclose(self) -> None:
        """Close the underlying connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def build_url(self, path: str) -> str:
        """Join base URL, API prefix and *path*."""
        normalized = path if path.startswith("/") else f"/{path}"
        return f"{self._options.base_url}{self._options.api_prefix}{normalized}"

    def _handle_response(self, response: httpx.Response) -> Any:
        request_id = response.headers.get(REQUEST_ID_HEADER)

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            if _is_json(response):
                try:
                    payload = response.json()
                except ValueError as exc:
                    raise ServerError(
                        f"Invalid JSON in response: {exc}",
                        code="INVALID_RESPONSE",
                        status_code=response.status_code,
                        details={"raw": response.text},
                        request_id=request_id,
                    ) from exc
                return decode_payload(payload)
            return response.text

        raw = response.text
        detail: Any = {"raw": raw}
        if _is_json(response):
            try:
                detail = json.loads(raw)
            except ValueError:
                pass

        message: str | None = None
        if isinstance(detail, dict):
            error = detail.get("error")
            if isinstance(error, dict) and isinstance(error.get("message"), str):
                message = error["message"]
            elif isinstance(detail.get("detail"), str):
                message = detail["detail"]

        raise error_for_status(
            response.status_code,
            message=message,
            details=detail,
            request_id=request_id,
            retry_after=response.headers.get("Retry-After"),
        )

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Mapping[str, Any] | None = None,
        idempotency_key: str | None = None,
        headers: Mapping[str, str] | None = None,
        files: Sequence[tuple[str, Any]] | None = None,
        form: Mapping[str, Any] | None = None,
    ) -> Any:
        """Issue a request and return the decoded body.

        Args:
            path: Endpoint path relative to the API prefix.
            method: HTTP method.
            body: JSON body; snake-cased before serialization.
            params: Query parameters; None values are dropped.
            files: Multipart file parts as ``(field, file)`` pairs in the
                shape httpx accepts. When given, the request is sent as
                ``multipart/form-data`` and *body* is ignored.
            form: Plain multipart fields sent alongside *files*; None
                values are dropped.
            idempotency_key: Explicit key. Generated for every non-GET
                request when omitted.
            headers: Per-request header overrides.

        Returns:
            Camel-cased JSON, raw text for non-JSON bodies, or None for
            empty responses.

        Raises:
            LumnisError: A typed failure after retries are exhausted or on
                the first permanent client error.
        """
        method = method.upper()
        url = self.build_url(path)
        query = _query_params(params)

        key = idempotency_key or (str(uuid.uuid4()) if method != "GET" else None)

        multipart = files is not None
        merged_headers: dict[str, str] = {
            **({} if multipart else {"content-type": "application/json"}),
            **self._options.headers,
            **(headers or {}),
        }
        if key:
            merged_headers[IDEMPOTENCY_HEADER] = key

        content: bytes | None = None
        form_fields: dict[str, str] | None = None
        if multipart:
            form_fields = dict(_query_params(form))
        elif body is not None:
            content = json.dumps(encode_payload(body)).encode()
        attempts = max_attempts(method, key, self._options.max_retries)
        client = self._get_client()
        last_exc: LumnisError | None = None

        for attempt in range(attempts):
            try:
                logger.debug(
                    "%s %s (attempt %d/%d)", method, url, attempt + 1, attempts
                )
                try:
                    response = await asyncio.wait_for(
                        client.request(
                            method,
                            url,
                            params=query,
                            headers=merged_headers,
                            content=content,
                            files=files,
                            data=form_fields,
                            timeout=self._options.timeout_s,
                        ),
                        self._options.timeout_s,
                    )
                except asyncio.TimeoutError as exc:
                    raise NetworkError(
                        f"Request to {url} timed out after {self._options.timeout_s}s",
                        code="REQUEST_TIMEOUT",
                    ) from exc
                except httpx.TransportError as exc:
                    raise NetworkError(
                        f"Request to {url} failed: {exc}",
                        code="NETWORK_ERROR",
                    ) from exc
                return self._handle_response(response)
            except LumnisError as exc:
                last_exc = exc
                if not should_retry(exc) or attempt >= attempts - 1:
                    raise

                retry_after = (
                    exc.retry_after if isinstance(exc, RateLimitError) else None
                )
                delay = compute_backoff_s(
                    attempt,
                    retry_after=retry_after,
                    jitter_s=self._options.backoff_factor,
                )
                logger.warning(
                    "Retrying %s %s in %.2fs (attempt %d/%d): %s",
                    method,
                    url,
                    delay,
                    attempt + 1,
                    attempts,
                    exc.message,
                )
                await asyncio.sleep(delay)

        if last_exc is None:  # pragma: no cover
            raise LumnisError("Request failed after all retries")
        raise last_exc

    async def get(self, path: str, **kwargs: Any) -> Any:
        """Issue a GET request."""
        return await self.request(path, method="GET", **kwargs)

    async def post(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        """Issue a POST request."""
        return await self.request(path, method="POST", body=body, **kwargs)

    async def put(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        """Issue a PUT request."""
        return await self.request(path, method="PUT", body=body, **kwargs)

    async def patch(self, path: str, body: Any = None, **kwargs: Any) -> Any:
        """Issue a PATCH request."""
        return await self.request(path, method="PATCH", body=body, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        """Issue a DELETE request."""
        return await self.request(path, method="DELETE", **kwargs)

    def warn_tenant_scope(self) -> None:
        """Log a caution before a tenant-scoped operation."""
        logger.warning(
            "Using TENANT scope bypasses user isolation. "
            "Ensure this is intentional and follows security best practices."
        )
