"""Tenant info resource."""

from __future__ import annotations

from lumnisai.models import TenantDetailsResponse
from lumnisai.resources._base import Resource, parse_model, quote_segment


class TenantInfoResource(Resource):
    """Endpoints under ``/tenants``."""

    async def get(self, tenant_id: str) -> TenantDetailsResponse:
        """Fetch details of the caller's own tenant."""
        data = await self._http.get(f"/tenants/{quote_segment(tenant_id)}")
        return parse_model(TenantDetailsResponse, data)
