"""Tests for GitHub client."""

from datetime import UTC, datetime

import pytest
import respx
from httpx import Response

from ghrelease.github_client import (
    AuthenticationError,
    GitHubReleaseClient,
    NotFoundError,
    RateLimitError,
    parse_timestamp,
    release_from_api,
)

RELEASES_PATH = "/repos/daangn/stackflow/releases"


def _item(tag: str, published_at: str | None, **extra) -> dict:
    return {"tag_name": tag, "name": f"Release {tag}", "published_at": published_at, **extra}


@pytest.fixture
def mock_github_api():
    """Mock GitHub API responses."""
    with respx.mock(base_url="https://api.github.com") as respx_mock:
        yield respx_mock


class TestParsing:
    """Tests for API payload parsing."""

    def test_parse_timestamp_zulu(self) -> None:
        """Test the trailing Z is read as UTC."""
        assert parse_timestamp("2024-01-15T10:00:00Z") == datetime(2024, 1, 15, 10, tzinfo=UTC)

    def test_release_from_api(self) -> None:
        """Test mapping of one release object."""
        release = release_from_api(
            "daangn",
            "stackflow",
            _item("v1.0.0", "2024-01-15T10:00:00Z", body=None, prerelease=True),
        )

        assert release is not None
        assert release.repo_owner == "daangn"
        assert release.tag_name == "v1.0.0"
        assert release.body == ""
        assert release.prerelease is True
        assert release.draft is False

    def test_unpublished_draft_skipped(self) -> None:
        """Test a release without publish time is dropped."""
        assert release_from_api("daangn", "stackflow", _item("v2", None, draft=True)) is None


class TestGitHubReleaseClient:
    """Tests for GitHubReleaseClient class."""

    @pytest.mark.asyncio
    async def test_get_releases_success(self, mock_github_api) -> None:
        """Test successful releases fetch."""
        route = mock_github_api.get(RELEASES_PATH).mock(
            return_value=Response(
                200,
                json=[
                    _item("v1.1.0", "2024-02-01T00:00:00Z"),
                    _item("v1.0.0", "2024-01-15T10:00:00Z"),
                    _item("v2.0.0", None, draft=True),
                ],
            )
        )

        async with GitHubReleaseClient(token="test_token") as client:
            releases = await client.get_releases("daangn", "stackflow")

        assert [r.tag_name for r in releases] == ["v1.1.0", "v1.0.0"]
        assert route.call_count == 1
        request = route.calls[0].request
        assert request.headers["Authorization"] == "Bearer test_token"
        assert request.url.params["per_page"] == "100"

    @pytest.mark.asyncio
    async def test_pagination(self, mock_github_api) -> None:
        """Test pages are requested until a short page."""
        route = mock_github_api.get(RELEASES_PATH).mock(
            side_effect=[
                Response(200, json=[_item("v3", "2024-03-01T00:00:00Z"), _item("v2", "2024-02-01T00:00:00Z")]),
                Response(200, json=[_item("v1", "2024-01-01T00:00:00Z")]),
            ]
        )

        async with GitHubReleaseClient() as client:
            releases = await client.get_releases("daangn", "stackflow", per_page=2)

        assert [r.tag_name for r in releases] == ["v3", "v2", "v1"]
        assert route.call_count == 2
        assert route.calls[1].request.url.params["page"] == "2"

    @pytest.mark.asyncio
    async def test_no_token_sends_no_authorization(self, mock_github_api) -> None:
        """Test anonymous access for public repositories."""
        route = mock_github_api.get(RELEASES_PATH).mock(return_value=Response(200, json=[]))

        async with GitHubReleaseClient() as client:
            assert await client.get_releases("daangn", "stackflow") == []

        assert "Authorization" not in route.calls[0].request.headers

    @pytest.mark.asyncio
    async def test_server_error_retried(self, mock_github_api) -> None:
        """Test a transient server error is retried."""
        mock_github_api.get(RELEASES_PATH).mock(
            side_effect=[
                Response(502, text="Bad Gateway"),
                Response(200, json=[_item("v1", "2024-01-01T00:00:00Z")]),
            ]
        )

        async with GitHubReleaseClient() as client:
            releases = await client.get_releases("daangn", "stackflow")

        assert len(releases) == 1

    @pytest.mark.asyncio
    async def test_authentication_error(self, mock_github_api) -> None:
        """Test authentication error handling."""
        mock_github_api.get(RELEASES_PATH).mock(
            return_value=Response(401, json={"message": "Bad credentials"})
        )

        async with GitHubReleaseClient(token="bad_token") as client:
            with pytest.raises(AuthenticationError):
                await client.get_releases("daangn", "stackflow")

    @pytest.mark.asyncio
    async def test_not_found_error(self, mock_github_api) -> None:
        """Test not found error handling."""
        mock_github_api.get("/repos/daangn/nonexistent/releases").mock(
            return_value=Response(404, json={"message": "Not Found"})
        )

        async with GitHubReleaseClient(token="test_token") as client:
            with pytest.raises(NotFoundError):
                await client.get_releases("daangn", "nonexistent")

    @pytest.mark.asyncio
    async def test_rate_limit_error(self, mock_github_api) -> None:
        """Test rate limit error handling."""
        mock_github_api.get(RELEASES_PATH).mock(
            return_value=Response(
                403,
                headers={
                    "X-RateLimit-Remaining": "0",
                    "X-RateLimit-Reset": "1704067200",
                },
                json={"message": "API rate limit exceeded"},
            )
        )

        async with GitHubReleaseClient(token="test_token") as client:
            with pytest.raises(RateLimitError) as exc_info:
                await client.get_releases("daangn", "stackflow")

            assert exc_info.value.reset_at == datetime(2024, 1, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_requires_context_manager(self) -> None:
        """Test requests outside the context manager are rejected."""
        client = GitHubReleaseClient()

        with pytest.raises(RuntimeError):
            await client.get_releases("daangn", "stackflow")
