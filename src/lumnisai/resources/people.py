"""People resource: direct people search and LinkedIn post previews.

Server-side validation failures with a known error code are re-raised as
their dedicated exception types; the HTTP status code is preserved.
"""

from __future__ import annotations

from collections.abc import Sequence
import re
from typing import Any

from lumnisai.errors import (
    NoDataSourcesError,
    SourcesNotAvailableError,
    ValidationError,
)
from lumnisai.models import PeopleDataSource, PeopleSearchResponse, PostPreviewResponse
from lumnisai.resources._base import Resource, parse_model

MAX_SEARCH_LIMIT = 100
DEFAULT_SEARCH_LIMIT = 20
MAX_PREVIEW_URLS = 50

_AVAILABLE_RE = re.compile(r"Available: \[(.+)\]")


def _error_detail(exc: ValidationError) -> dict[str, Any]:
    """Return the ``{code, message}`` error object of a validation failure."""
    details = exc.details if isinstance(exc.details, dict) else {}
    nested = details.get("detail")
    if isinstance(nested, dict) and isinstance(nested.get("error"), dict):
        return nested["error"]
    error = details.get("error")
    return error if isinstance(error, dict) else {}


def parse_available_sources(message: str) -> list[str]:
    """Parse ``"Available: ['PDL', 'CORESIGNAL']"`` into source names."""
    match = _AVAILABLE_RE.search(message)
    if match is None:
        return []
    names = (part.replace("'", "").strip() for part in match.group(1).split(","))
    return [name for name in names if name]


def _source_name(source: PeopleDataSource | str) -> str:
    return source.value if isinstance(source, PeopleDataSource) else str(source)


class PeopleResource(Resource):
    """Endpoints under ``/people``."""

    async def quick_search(
        self,
        query: str,
        *,
        limit: int = DEFAULT_SEARCH_LIMIT,
        data_sources: Sequence[PeopleDataSource | str] | None = None,
    ) -> PeopleSearchResponse:
        """Search people across the configured data providers.

        Raises:
            ValidationError: ``limit`` outside 1..100 or an unknown source.
            NoDataSourcesError: The tenant has no provider configured.
            SourcesNotAvailableError: A requested provider is not configured.
        """
        if not 1 <= limit <= MAX_SEARCH_LIMIT:
            raise ValidationError(
                f"Limit must be between 1 and {MAX_SEARCH_LIMIT}", code="INVALID_LIMIT"
            )

        sources: list[str] | None = None
        if data_sources:
            valid = [s.value for s in PeopleDataSource]
            sources = [_source_name(s) for s in data_sources]
            for source in sources:
                if source not in valid:
                    raise ValidationError(
                        f"Invalid data source: {source}. "
                        f"Valid sources: {', '.join(valid)}",
                        code="INVALID_DATA_SOURCE",
                    )

        body = {"query": query, "limit": limit, "data_sources": sources}
        try:
            data = await self._http.post(
                "/people/quick-search", {k: v for k, v in body.items() if v is not None}
            )
        except ValidationError as exc:
            detail = _error_detail(exc)
            code = detail.get("code")
            message = detail.get("message") or None
            if code == "NO_DATA_SOURCES":
                raise NoDataSourcesError(
                    message,
                    status_code=exc.status_code,
                    details=exc.details,
                    request_id=exc.request_id,
                ) from exc
            if code == "SOURCES_NOT_AVAILABLE":
                raise SourcesNotAvailableError(
                    message or "Requested data sources not available",
                    parse_available_sources(message or ""),
                    status_code=exc.status_code,
                    details=exc.details,
                    request_id=exc.request_id,
                ) from exc
            raise
        return parse_model(PeopleSearchResponse, data)

    async def preview_posts(self, post_urls: Sequence[str]) -> PostPreviewResponse:
        """Fetch engagement counts for up to 50 LinkedIn posts.

        Costs one CrustData credit per post.
        """
        if not post_urls:
            raise ValidationError(
                "At least one post URL is required", code="INVALID_POST_URLS"
            )
        if len(post_urls) > MAX_PREVIEW_URLS:
            raise ValidationError(
                f"Maximum {MAX_PREVIEW_URLS} post URLs allowed", code="TOO_MANY_URLS"
            )

        try:
            data = await self._http.post(
                "/people/posts/preview", {"post_urls": list(post_urls)}
            )
        except ValidationError as exc:
            detail = _error_detail(exc)
            if detail.get("code") == "NO_CRUSTDATA_KEY":
                raise ValidationError(
                    detail.get("message")
                    or "CrustData API key not configured. Required for posts preview.",
                    code="NO_CRUSTDATA_KEY",
                    status_code=exc.status_code,
                    details=exc.details,
                    request_id=exc.request_id,
                ) from exc
            raise
        return parse_model(PostPreviewResponse, data)
