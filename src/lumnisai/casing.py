"""Key casing at the wire boundary.

The API speaks snake_case; decoded payloads are exposed camelCase and the
pydantic models map those back onto snake_case attributes. ``encode_payload``
and ``decode_payload`` are the only two places the convention is applied.
"""

from __future__ import annotations

import re
from typing import Any, Callable

from pydantic import BaseModel

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)
_CAMEL_BOUNDARY_RE = re.compile(r"[-_]([a-z])", re.IGNORECASE)
_UPPER_RE = re.compile(r"[A-Z]")


def is_uuid(key: str) -> bool:
    """Return True when *key* has the 8-4-4-4-12 hex shape."""
    return _UUID_RE.match(key) is not None


def camelize_key(key: str) -> str:
    """Convert one key to camelCase, leaving UUID-shaped keys intact."""
    if is_uuid(key):
        return key
    return _CAMEL_BOUNDARY_RE.sub(lambda m: m.group(1).upper(), key)


def snakify_key(key: str) -> str:
    """Convert one key to snake_case, leaving UUID-shaped keys intact."""
    if is_uuid(key):
        return key
    return _UPPER_RE.sub(
        lambda m: m.group(0).lower() if m.start() == 0 else f"_{m.group(0).lower()}",
        key,
    )


def _convert(obj: Any, convert_key: Callable[[str], str]) -> Any:
    if isinstance(obj, dict):
        return {
            (convert_key(k) if isinstance(k, str) else k): _convert(v, convert_key)
            for k, v in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_convert(v, convert_key) for v in obj]
    return obj


def to_camel(obj: Any) -> Any:
    """Recursively camelCase every mapping key in *obj*."""
    return _convert(obj, camelize_key)


def to_snake(obj: Any) -> Any:
    """Recursively snake_case every mapping key in *obj*."""
    return _convert(obj, snakify_key)


def _dump_models(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json", exclude_none=True)
    if isinstance(obj, dict):
        return {k: _dump_models(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_dump_models(v) for v in obj]
    return obj


def encode_payload(body: Any) -> Any:
    """Prepare an outgoing request body for JSON serialization."""
    return to_snake(_dump_models(body))


def decode_payload(data: Any) -> Any:
    """Normalize a decoded JSON response body."""
    return to_camel(data)
