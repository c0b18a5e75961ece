"""Async GitHub Releases API client."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any, Self

import httpx

from ghrelease.models import RawRelease

logger = logging.getLogger(__name__)


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors."""


class RateLimitError(GitHubAPIError):
    """Raised when rate limit is exceeded."""

    def __init__(self, message: str, reset_at: datetime | None = None):
        """Initialize with reset time.

        Args:
            message: Error message.
            reset_at: When rate limit resets (UTC).
        """
        super().__init__(message)
        self.reset_at = reset_at


class AuthenticationError(GitHubAPIError):
    """Raised for authentication failures."""


class NotFoundError(GitHubAPIError):
    """Raised when repository doesn't exist or no access."""


def parse_timestamp(value: str) -> datetime:
    """Parse a GitHub ISO-8601 timestamp ("2024-01-15T10:00:00Z") as aware UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def release_from_api(owner: str, repo: str, item: dict[str, Any]) -> RawRelease | None:
    """Build a RawRelease from one GitHub API release object.

    Args:
        owner: Repository owner.
        repo: Repository name.
        item: Release JSON object.

    Returns:
        RawRelease, or None when the release was never published.
    """
    published = item.get("published_at")
    if not published:
        return None
    return RawRelease(
        repo_name=repo,
        repo_owner=owner,
        tag_name=item.get("tag_name", ""),
        published_at=parse_timestamp(published),
        name=item.get("name") or "",
        body=item.get("body") or "",
        draft=bool(item.get("draft", False)),
        prerelease=bool(item.get("prerelease", False)),
    )


class GitHubReleaseClient:
    """Async client for the GitHub Releases API.

    Handles authentication, rate limiting, pagination and error recovery.

    Attributes:
        BASE_URL: GitHub API base URL.
    """

    BASE_URL = "https://api.github.com"

    def __init__(self, token: str = "", timeout: float = 30.0):
        """Initialize client with an optional authentication token.

        Args:
            token: GitHub personal access token. Public repositories can be
                read without one at a lower rate limit.
            timeout: Request timeout in seconds.
        """
        self.token = token
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": "ghrelease",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        self._client = httpx.AsyncClient(
            base_url=self.BASE_URL,
            headers=headers,
            timeout=self.timeout,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit async context manager."""
        if self._client:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        max_retries: int = 3,
    ) -> Any:
        """Execute request with retry logic.

        Args:
            method: HTTP method.
            path: API endpoint path.
            params: Query parameters.
            max_retries: Maximum retry attempts for transient failures.

        Returns:
            Parsed JSON response.

        Raises:
            RateLimitError: When rate limit is exceeded.
            AuthenticationError: For auth failures.
            NotFoundError: When resource not found.
            GitHubAPIError: For other API errors.
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")

        last_error: Exception | None = None

        for attempt in range(max_retries):
            try:
                response = await self._client.request(method, path, params=params)

                if response.status_code == 200:
                    return response.json()

                if response.status_code == 401:
                    raise AuthenticationError("Invalid or expired token")

                if response.status_code == 403:
                    remaining = response.headers.get("X-RateLimit-Remaining", "1")
                    if remaining == "0":
                        reset_timestamp = int(response.headers.get("X-RateLimit-Reset", "0"))
                        reset_at = datetime.fromtimestamp(reset_timestamp, tz=UTC)
                        raise RateLimitError(
                            f"Rate limit exceeded. Resets at {reset_at.isoformat()}",
                            reset_at=reset_at,
                        )
                    raise AuthenticationError("Access forbidden - check token permissions")

                if response.status_code == 404:
                    raise NotFoundError(f"Repository not found or no access: {path}")

                # Server errors - retry
                if response.status_code >= 500:
                    last_error = GitHubAPIError(
                        f"Server error {response.status_code}: {response.text}"
                    )
                    logger.debug("%s %s failed with %d, retrying", method, path, response.status_code)
                    await asyncio.sleep(2**attempt)
                    continue

                raise GitHubAPIError(f"API error {response.status_code}: {response.text}")

            except httpx.RequestError as e:
                last_error = GitHubAPIError(f"Request failed: {e}")
                await asyncio.sleep(2**attempt)

        raise last_error or GitHubAPIError("Request failed after retries")

    async def get_releases(
        self,
        owner: str,
        repo: str,
        per_page: int = 100,
        max_pages: int = 50,
    ) -> list[RawRelease]:
        """Fetch every published release of a repository.

        Args:
            owner: Repository owner/organization.
            repo: Repository name.
            per_page: Page size (max 100).
            max_pages: Upper bound on pages requested.

        Returns:
            List of RawRelease in API order (newest first). Unpublished
            drafts carry no publish time and are skipped.
        """
        releases: list[RawRelease] = []
        for page in range(1, max_pages + 1):
            data = await self._request(
                "GET",
                f"/repos/{owner}/{repo}/releases",
                params={"per_page": per_page, "page": page},
            )
            for item in data:
                release = release_from_api(owner, repo, item)
                if release is not None:
                    releases.append(release)
            if len(data) < per_page:
                break
        logger.debug("Fetched %d releases for %s/%s", len(releases), owner, repo)
        return releases
