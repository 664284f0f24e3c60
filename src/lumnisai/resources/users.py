"""Users resource.

Users are addressed by id or by email; both are accepted wherever a
``user_identifier`` is expected.
"""

from __future__ import annotations

from lumnisai.models import (
    ResponseObject,
    ThreadObject,
    UserDeleteResponse,
    UserListResponse,
    UserResponse,
)
from lumnisai.resources._base import Resource, parse_model, quote_segment


def _page_params(page: int | None, page_size: int | None) -> dict[str, int | None]:
    return {"page": page or None, "page_size": page_size or None}


class UsersResource(Resource):
    """Endpoints under ``/users``."""

    async def create(
        self,
        email: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserResponse:
        """Create a user; an existing user with the same email is returned."""
        body = {"email": email, "first_name": first_name, "last_name": last_name}
        data = await self._http.post(
            "/users", {k: v for k, v in body.items() if v is not None}
        )
        return parse_model(UserResponse, data)

    async def list(
        self, *, page: int | None = None, page_size: int | None = None
    ) -> UserListResponse:
        """List users of the tenant."""
        data = await self._http.get("/users", params=_page_params(page, page_size))
        return parse_model(UserListResponse, data)

    async def get(self, user_identifier: str) -> UserResponse:
        """Fetch a user by id or email."""
        data = await self._http.get(f"/users/{quote_segment(user_identifier)}")
        return parse_model(UserResponse, data)

    async def update(
        self,
        user_identifier: str,
        *,
        first_name: str | None = None,
        last_name: str | None = None,
    ) -> UserResponse:
        """Update a user's name."""
        body = {"first_name": first_name, "last_name": last_name}
        data = await self._http.put(
            f"/users/{quote_segment(user_identifier)}",
            {k: v for k, v in body.items() if v is not None},
        )
        return parse_model(UserResponse, data)

    async def delete(self, user_identifier: str) -> UserDeleteResponse:
        """Deactivate a user."""
        data = await self._http.delete(f"/users/{quote_segment(user_identifier)}")
        return parse_model(UserDeleteResponse, data)

    async def get_responses(
        self,
        user_identifier: str,
        *,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[ResponseObject]:
        """Fetch responses generated for a user."""
        data = await self._http.get(
            f"/users/{quote_segment(user_identifier)}/responses",
            params=_page_params(page, page_size),
        )
        return [parse_model(ResponseObject, item) for item in data or []]

    async def get_threads(
        self,
        user_identifier: str,
        *,
        page: int | None = None,
        page_size: int | None = None,
    ) -> list[ThreadObject]:
        """Fetch conversation threads of a user."""
        data = await self._http.get(
            f"/users/{quote_segment(user_identifier)}/threads",
            params=_page_params(page, page_size),
        )
        return [parse_model(ThreadObject, item) for item in data or []]
