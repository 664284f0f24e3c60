"""Threads resource."""

from __future__ import annotations

from lumnisai.models import ResponseObject, ThreadListResponse, ThreadObject
from lumnisai.resources._base import Resource, parse_model, quote_segment


class ThreadsResource(Resource):
    """Endpoints under ``/threads``."""

    async def create(
        self, *, user_id: str | None = None, title: str | None = None
    ) -> ThreadObject:
        """Create a thread."""
        body = {"user_id": user_id, "title": title}
        data = await self._http.post(
            "/threads", {k: v for k, v in body.items() if v is not None}
        )
        return parse_model(ThreadObject, data)

    async def list(
        self,
        *,
        user_id: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
    ) -> ThreadListResponse:
        """List threads of the tenant."""
        data = await self._http.get(
            "/threads",
            params={"user_id": user_id, "limit": limit, "offset": offset},
        )
        return parse_model(ThreadListResponse, data)

    async def get(self, thread_id: str) -> ThreadObject:
        """Fetch one thread."""
        data = await self._http.get(f"/threads/{quote_segment(thread_id)}")
        return parse_model(ThreadObject, data)

    async def get_responses(
        self,
        thread_id: str,
        *,
        limit: int | None = None,
        offset: int | None = None,
    ) -> list[ResponseObject]:
        """Fetch every response of a thread."""
        data = await self._http.get(
            f"/threads/{quote_segment(thread_id)}/responses",
            params={"limit": limit, "offset": offset},
        )
        return [parse_model(ResponseObject, item) for item in data or []]

    async def update(self, thread_id: str, *, title: str | None = None) -> ThreadObject:
        """Update thread metadata."""
        data = await self._http.patch(
            f"/threads/{quote_segment(thread_id)}", {"title": title}
        )
        return parse_model(ThreadObject, data)

    async def delete(self, thread_id: str) -> None:
        """Delete a thread and its responses."""
        await self._http.delete(f"/threads/{quote_segment(thread_id)}")
