"""GitHub REST API client.

Async wrapper over httpx covering the release endpoints the pruner
needs: release lookup by tag, asset listing and deletion, and moving a
git reference.
"""

from __future__ import annotations

from typing import Any

import httpx

from nightly_pruner.constants import (
    ASSETS_PER_PAGE,
    GITHUB_API_URL,
    GITHUB_API_VERSION,
    REQUEST_TIMEOUT,
)
from nightly_pruner.github.models import RateLimitInfo, Release, ReleaseAsset
from nightly_pruner.logging import get_logger

log = get_logger("nightly_pruner.github.client")


class GitHubAPIError(Exception):
    """Raised when a GitHub API call fails."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class GitHubAuthError(GitHubAPIError):
    """Bad or missing credentials (401)."""


class GitHubNotFoundError(GitHubAPIError):
    """Resource does not exist or is not visible to the token (404)."""


class GitHubRateLimitError(GitHubAPIError):
    """Primary or secondary rate limit exceeded (403)."""


class GitHubValidationError(GitHubAPIError):
    """Request payload rejected (422)."""


class GitHubClient:
    """Async GitHub REST client.

    The underlying ``httpx.AsyncClient`` is created on first use and
    shared by every call until ``close()``.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        base_url: str = GITHUB_API_URL,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._token = token
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None
        self.rate_limit: RateLimitInfo | None = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=self._headers(),
                timeout=self._timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------
    # Request plumbing
    # ------------------------------------------------------------------

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body.

        Maps error statuses onto the ``GitHubAPIError`` hierarchy.
        Returns ``{}`` for 204 responses and bodies that are not JSON.
        """
        client = await self._get_client()
        try:
            response = await client.request(method, path, **kwargs)
        except httpx.RequestError as exc:
            raise GitHubAPIError(f"Request to {path} failed: {exc}") from exc

        rate_limit = RateLimitInfo.from_headers(response.headers)
        if rate_limit is not None:
            self.rate_limit = rate_limit

        status = response.status_code
        if status == 401:
            raise GitHubAuthError("Authentication failed", status)
        if status == 404:
            raise GitHubNotFoundError(f"Not found: {path}", status)
        if status == 403 and "rate limit" in response.text.lower():
            raise GitHubRateLimitError("API rate limit exceeded", status)
        if status == 422:
            raise GitHubValidationError(self._error_message(response), status)
        if status >= 400:
            raise GitHubAPIError(
                f"GitHub API error {status}: {self._error_message(response)}", status
            )

        if status == 204:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.text
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return response.text

    # ------------------------------------------------------------------
    # Releases
    # ------------------------------------------------------------------

    async def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        """Get the release published under ``tag``."""
        data = await self._request("GET", f"/repos/{owner}/{repo}/releases/tags/{tag}")
        if not isinstance(data, dict) or "id" not in data:
            raise GitHubAPIError(f"Unexpected response for release tag {tag}")
        return Release.from_api(data)

    async def list_release_assets(
        self,
        owner: str,
        repo: str,
        release_id: int,
        per_page: int = ASSETS_PER_PAGE,
    ) -> list[ReleaseAsset]:
        """List every asset of a release, walking all pages."""
        assets: list[ReleaseAsset] = []
        page = 1
        while True:
            data = await self._request(
                "GET",
                f"/repos/{owner}/{repo}/releases/{release_id}/assets",
                params={"per_page": per_page, "page": page},
            )
            if not isinstance(data, list):
                raise GitHubAPIError(f"Unexpected response listing assets of release {release_id}")
            assets.extend(ReleaseAsset.from_api(item) for item in data)
            if len(data) < per_page:
                break
            page += 1

        log.debug("github_assets_listed", release_id=release_id, count=len(assets), pages=page)
        return assets

    async def delete_release_asset(self, owner: str, repo: str, asset_id: int) -> None:
        """Delete a release asset."""
        await self._request("DELETE", f"/repos/{owner}/{repo}/releases/assets/{asset_id}")

    # ------------------------------------------------------------------
    # Git references
    # ------------------------------------------------------------------

    async def update_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        sha: str,
        force: bool = False,
    ) -> dict[str, Any]:
        """Point ``ref`` (e.g. ``tags/nightly``) at ``sha``."""
        data = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/git/refs/{ref}",
            json={"sha": sha, "force": force},
        )
        return data if isinstance(data, dict) else {}
