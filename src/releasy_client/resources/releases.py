"""Release and artifact management."""

from __future__ import annotations

from pathlib import Path

from ..http import ensure_success
from ..models import (
    ArtifactPresignRequest,
    ArtifactPresignResponse,
    ArtifactRegisterRequest,
    ArtifactRegisterResponse,
    ReleaseCreateRequest,
    ReleaseListQuery,
    ReleaseListResponse,
    ReleaseResponse,
)
from .base import ResourceBase, segment


class ReleasesResource(ResourceBase):
    """Create, publish and attach artifacts to releases."""

    def list(self, query: ReleaseListQuery | None = None) -> ReleaseListResponse:
        return self._get("/v1/releases", ReleaseListResponse, query=query or ReleaseListQuery())

    def create(self, body: ReleaseCreateRequest) -> ReleaseResponse:
        return self._post("/v1/releases", body, ReleaseResponse)

    def delete(self, release_id: str) -> None:
        self._expect_status("DELETE", f"/v1/releases/{segment(release_id)}", 204)

    def register_artifact(
        self, release_id: str, body: ArtifactRegisterRequest
    ) -> ArtifactRegisterResponse:
        return self._post(
            f"/v1/releases/{segment(release_id)}/artifacts", body, ArtifactRegisterResponse
        )

    def presign_artifact_upload(
        self, release_id: str, body: ArtifactPresignRequest
    ) -> ArtifactPresignResponse:
        return self._post(
            f"/v1/releases/{segment(release_id)}/artifacts/presign", body, ArtifactPresignResponse
        )

    def upload_presigned_artifact(self, upload_url: str, file_path: str | Path) -> None:
        """Upload a local file to a presigned URL.

        Args:
            upload_url: The ``upload_url`` returned by `presign_artifact_upload`.
            file_path: Local artifact to send as the raw request body.

        Raises:
            UploadSourceError: the file could not be opened; nothing is sent.
            ApiError: the storage backend answered with a non-2xx status.
        """
        response = self._client.upload_file(upload_url, file_path)
        ensure_success(response)

    def publish(self, release_id: str) -> ReleaseResponse:
        return self._post_empty(f"/v1/releases/{segment(release_id)}/publish", ReleaseResponse)

    def unpublish(self, release_id: str) -> ReleaseResponse:
        return self._post_empty(f"/v1/releases/{segment(release_id)}/unpublish", ReleaseResponse)
