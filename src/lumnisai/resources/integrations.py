"""Integrations resource: OAuth connections to external apps and their tools.

App names are upper-cased before they reach the API.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lumnisai.models import (
    AppEnabledResponse,
    AppsListResponse,
    ConnectionCallbackRequest,
    ConnectionCallbackResponse,
    ConnectionStatusResponse,
    DisconnectRequest,
    GetToolsRequest,
    GetToolsResponse,
    InitiateConnectionRequest,
    InitiateConnectionResponse,
    StatusMessageResponse,
    UpdateAppStatusResponse,
    UserConnectionsResponse,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment


def _app(name: str) -> str:
    return quote_segment(name.upper())


class IntegrationsResource(Resource):
    """Endpoints under ``/integrations``."""

    async def initiate_connection(
        self, request: InitiateConnectionRequest | Mapping[str, Any]
    ) -> InitiateConnectionResponse:
        """Start an OAuth flow; redirect the user to ``redirect_url``."""
        body = InitiateConnectionRequest.model_validate(request)
        body = body.model_copy(update={"app_name": body.app_name.upper()})
        data = await self._http.post("/integrations/connections/initiate", body)
        return parse_model(InitiateConnectionResponse, data)

    async def get_connection_status(
        self, user_id: str, app_name: str
    ) -> ConnectionStatusResponse:
        data = await self._http.get(
            f"/integrations/connections/{quote_segment(user_id)}/{_app(app_name)}"
        )
        return parse_model(ConnectionStatusResponse, data)

    async def get_user_connections(
        self, user_id: str, *, app_filter: str | None = None
    ) -> UserConnectionsResponse:
        """List every connection of *user_id*."""
        data = await self._http.get(
            f"/integrations/connections/{quote_segment(user_id)}",
            params={"app_filter": app_filter},
        )
        return parse_model(UserConnectionsResponse, data)

    async def get_tools(
        self, request: GetToolsRequest | Mapping[str, Any]
    ) -> GetToolsResponse:
        """List the tools a user can call through their connected apps."""
        body = GetToolsRequest.model_validate(request)
        if body.app_filter is not None:
            body = body.model_copy(
                update={"app_filter": [app.upper() for app in body.app_filter]}
            )
        data = await self._http.post("/integrations/tools", body)
        return parse_model(GetToolsResponse, data)

    async def disconnect(
        self, request: DisconnectRequest | Mapping[str, Any]
    ) -> StatusMessageResponse:
        body = DisconnectRequest.model_validate(request)
        body = body.model_copy(update={"app_name": body.app_name.upper()})
        data = await self._http.post("/integrations/connections/disconnect", body)
        return parse_model(StatusMessageResponse, data)

    async def handle_callback(
        self, request: ConnectionCallbackRequest | Mapping[str, Any]
    ) -> ConnectionCallbackResponse:
        """Forward an OAuth callback from a custom redirect handler."""
        body = ConnectionCallbackRequest.model_validate(request)
        data = await self._http.post("/integrations/connections/callback", body)
        return parse_model(ConnectionCallbackResponse, data)

    async def list_apps(self, *, include_available: bool = False) -> AppsListResponse:
        """List the apps enabled for the tenant."""
        params = {"include_available": True if include_available else None}
        data = await self._http.get("/integrations/apps", params=params)
        return parse_model(AppsListResponse, data)

    async def check_app_enabled(self, app_name: str) -> AppEnabledResponse:
        data = await self._http.get(f"/integrations/apps/{_app(app_name)}/enabled")
        return parse_model(AppEnabledResponse, data)

    async def update_app_status(
        self, app_name: str, enabled: bool
    ) -> UpdateAppStatusResponse:
        """Enable or disable an app for the tenant."""
        data = await self._http.put(
            f"/integrations/apps/{_app(app_name)}", params={"enabled": enabled}
        )
        return parse_model(UpdateAppStatusResponse, data)

    async def get_non_oauth_required_fields(
        self, app_name: str, auth_scheme: str
    ) -> Any:
        """Fields an app needs for a non-OAuth auth scheme; shape varies by app."""
        return await self._http.get(
            f"/integrations/non-oauth/required-fields/{_app(app_name)}",
            params={"auth_scheme": auth_scheme},
        )
