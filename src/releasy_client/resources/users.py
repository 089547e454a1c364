"""User administration."""

from __future__ import annotations

from ..models import (
    ResetCredentialsRequest,
    UserCreateRequest,
    UserGroupsReplaceRequest,
    UserListQuery,
    UserListResponse,
    UserPatchRequest,
    UserResponse,
)
from .base import ResourceBase, segment


class UsersResource(ResourceBase):
    """Manage customer users and their group membership (admin key)."""

    def list(self, query: UserListQuery | None = None) -> UserListResponse:
        return self._get("/v1/admin/users", UserListResponse, query=query or UserListQuery())

    def create(self, body: UserCreateRequest) -> UserResponse:
        return self.create_with_idempotency(body, None)

    def create_with_idempotency(
        self, body: UserCreateRequest, idempotency_key: str | None
    ) -> UserResponse:
        return self._post(
            "/v1/admin/users",
            body,
            UserResponse,
            headers=self._idempotency_headers(idempotency_key),
        )

    def get(self, user_id: str) -> UserResponse:
        return self._get(f"/v1/admin/users/{segment(user_id)}", UserResponse)

    def patch(self, user_id: str, body: UserPatchRequest) -> UserResponse:
        return self._patch(f"/v1/admin/users/{segment(user_id)}", body, UserResponse)

    def replace_groups(self, user_id: str, body: UserGroupsReplaceRequest) -> UserResponse:
        return self._put(f"/v1/admin/users/{segment(user_id)}/groups", body, UserResponse)

    def reset_credentials(self, user_id: str, body: ResetCredentialsRequest) -> None:
        """Trigger a credential reset; the server answers 202 with no body."""
        self._expect_status(
            "POST", f"/v1/admin/users/{segment(user_id)}/reset-credentials", 202, body=body
        )
