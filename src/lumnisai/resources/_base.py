"""Shared plumbing for API resources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import quote

import pydantic

from lumnisai.errors import ServerError

if TYPE_CHECKING:
    from lumnisai._http import Http

M = TypeVar("M", bound=pydantic.BaseModel)


def quote_segment(value: str) -> str:
    """Percent-encode a value used as a single path segment."""
    return quote(value, safe="")


def parse_model(model: type[M], data: Any) -> M:
    """Validate a decoded response body against *model*.

    A payload that does not match the schema surfaces as a ``ServerError``
    with code ``INVALID_RESPONSE`` rather than a pydantic exception.
    """
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ServerError(
            f"Unexpected {model.__name__} payload: "
            f"{exc.error_count()} invalid field(s)",
            code="INVALID_RESPONSE",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


class Resource:
    """Base for resources: holds the shared transport."""

    def __init__(self, http: Http) -> None:
        self._http = http
