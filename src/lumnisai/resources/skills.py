"""Skills resource: guidelines, usage tracking and effectiveness analytics."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from lumnisai.models import (
    SkillEffectivenessMetrics,
    SkillGuidelineCreate,
    SkillGuidelineListResponse,
    SkillGuidelineResponse,
    SkillGuidelineUpdate,
    SkillUsageCreate,
    SkillUsageListResponse,
    SkillUsageResponse,
    SkillUsageUpdate,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment


class SkillsResource(Resource):
    """Endpoints under ``/skills``."""

    async def create(
        self,
        skill: SkillGuidelineCreate | Mapping[str, Any],
        *,
        user_id: str | None = None,
    ) -> SkillGuidelineResponse:
        """Create a skill guideline, optionally owned by *user_id*."""
        body = SkillGuidelineCreate.model_validate(skill)
        data = await self._http.post("/skills", body, params={"user_id": user_id})
        return parse_model(SkillGuidelineResponse, data)

    async def list(
        self,
        *,
        category: str | None = None,
        is_active: bool | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> SkillGuidelineListResponse:
        """List skill guidelines, optionally filtered."""
        params = {
            "category": category,
            "is_active": is_active,
            "page": page,
            "page_size": page_size,
        }
        data = await self._http.get("/skills", params=params)
        return parse_model(SkillGuidelineListResponse, data)

    async def get(self, skill_id: str) -> SkillGuidelineResponse:
        """Fetch a skill guideline."""
        data = await self._http.get(f"/skills/{quote_segment(skill_id)}")
        return parse_model(SkillGuidelineResponse, data)

    async def update(
        self, skill_id: str, updates: SkillGuidelineUpdate | Mapping[str, Any]
    ) -> SkillGuidelineResponse:
        """Apply a partial update to a skill guideline."""
        body = SkillGuidelineUpdate.model_validate(updates)
        data = await self._http.put(f"/skills/{quote_segment(skill_id)}", body)
        return parse_model(SkillGuidelineResponse, data)

    async def delete(self, skill_id: str) -> None:
        """Delete a skill guideline."""
        await self._http.delete(f"/skills/{quote_segment(skill_id)}")

    async def create_usage(
        self, usage: SkillUsageCreate | Mapping[str, Any]
    ) -> SkillUsageResponse:
        """Record that a skill was retrieved for a response."""
        body = SkillUsageCreate.model_validate(usage)
        data = await self._http.post("/skills/usage", body)
        return parse_model(SkillUsageResponse, data)

    async def list_usage(
        self,
        *,
        skill_id: str | None = None,
        response_id: str | None = None,
        page: int | None = None,
        page_size: int | None = None,
    ) -> SkillUsageListResponse:
        """List skill usage records."""
        params = {
            "skill_id": skill_id,
            "response_id": response_id,
            "page": page,
            "page_size": page_size,
        }
        data = await self._http.get("/skills/usage", params=params)
        return parse_model(SkillUsageListResponse, data)

    async def update_usage(
        self, usage_id: str, updates: SkillUsageUpdate | Mapping[str, Any]
    ) -> SkillUsageResponse:
        """Apply a partial update to a usage record."""
        body = SkillUsageUpdate.model_validate(updates)
        data = await self._http.put(
            f"/skills/usage/{quote_segment(usage_id)}", body
        )
        return parse_model(SkillUsageResponse, data)

    async def get_analytics(
        self,
        *,
        skill_id: str | None = None,
        tenant_id: str | None = None,
        days_back: int | None = None,
    ) -> SkillEffectivenessMetrics:
        """Fetch effectiveness metrics for one skill or all of them."""
        params = {"skill_id": skill_id, "tenant_id": tenant_id, "days_back": days_back}
        data = await self._http.get("/skills/analytics", params=params)
        return parse_model(SkillEffectivenessMetrics, data)
