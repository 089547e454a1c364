"""Download token issuance and resolution."""

from __future__ import annotations

from ..http import parse_redirect
from ..models import DownloadResolution, DownloadTokenRequest, DownloadTokenResponse
from .base import ResourceBase, segment


class DownloadsResource(ResourceBase):
    """Exchange artifacts for short-lived download links."""

    def create_token(self, body: DownloadTokenRequest) -> DownloadTokenResponse:
        return self._post("/v1/downloads/token", body, DownloadTokenResponse)

    def resolve_token(self, token: str) -> DownloadResolution:
        """Follow a download token to the object location it redirects to.

        The redirect is not followed; the ``Location`` of the 302 is returned.

        Raises:
            MissingLocationHeaderError: the 302 carried no ``Location``.
            ApiError: any status other than 302.
        """
        response = self._client.request("GET", f"/v1/downloads/{segment(token)}")
        return parse_redirect(response)
