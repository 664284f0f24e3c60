"""External API keys resource: bring-your-own provider keys."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lumnisai.models import (
    ApiKeyMode,
    ApiKeyModeRequest,
    ApiKeyModeResponse,
    DeleteApiKeyResponse,
    ExternalApiKeyResponse,
    StoreApiKeyRequest,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment


class ExternalApiKeysResource(Resource):
    """Endpoints under ``/external-api-keys``.

    Key values are write-only: every read returns metadata only.
    """

    async def store(
        self, request: StoreApiKeyRequest | Mapping[str, Any]
    ) -> ExternalApiKeyResponse:
        """Store a provider key, encrypted server-side."""
        body = StoreApiKeyRequest.model_validate(request)
        data = await self._http.post("/external-api-keys", body)
        return parse_model(ExternalApiKeyResponse, data)

    async def list(self) -> list[ExternalApiKeyResponse]:
        data = await self._http.get("/external-api-keys")
        return [parse_model(ExternalApiKeyResponse, item) for item in data or []]

    async def get(self, key_id: str) -> ExternalApiKeyResponse:
        data = await self._http.get(f"/external-api-keys/{quote_segment(key_id)}")
        return parse_model(ExternalApiKeyResponse, data)

    async def delete(self, provider: str) -> DeleteApiKeyResponse:
        """Delete the stored key of *provider*, e.g. ``OPENAI_API_KEY``."""
        data = await self._http.delete(
            f"/external-api-keys/{quote_segment(provider)}"
        )
        return parse_model(DeleteApiKeyResponse, data)

    async def get_mode(self) -> ApiKeyModeResponse:
        data = await self._http.get("/external-api-keys/mode")
        return parse_model(ApiKeyModeResponse, data)

    async def update_mode(self, mode: ApiKeyMode) -> ApiKeyModeResponse:
        """Switch between platform keys and the tenant's own keys."""
        body = ApiKeyModeRequest(mode=mode)
        data = await self._http.patch("/external-api-keys/mode", body)
        return parse_model(ApiKeyModeResponse, data)
