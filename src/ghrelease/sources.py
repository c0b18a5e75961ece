"""Release data sources the analysis pipeline reads from."""

import asyncio
import logging
from typing import Protocol

from pydantic import ValidationError

from ghrelease.config import RepoConfig
from ghrelease.github_client import GitHubReleaseClient
from ghrelease.models import RawRelease
from ghrelease.snapshot import ReleaseSnapshot

logger = logging.getLogger(__name__)


class SourceUnavailableError(Exception):
    """Raised when no release data could be obtained from a source."""


class ReleaseSource(Protocol):
    """Anything that can supply the full release batch."""

    async def fetch_release_batch(self) -> list[RawRelease]: ...


class GitHubReleaseSource:
    """Fetch releases for the tracked repositories from the GitHub API.

    Repositories are fetched concurrently. A repository that fails is
    logged and left out; the batch only fails when every repository does.
    """

    def __init__(self, repos: list[RepoConfig], token: str = "", timeout: float = 30.0):
        """Initialize source.

        Args:
            repos: Repositories to fetch.
            token: GitHub token (optional for public repositories).
            timeout: Per-request timeout in seconds.
        """
        self.repos = repos
        self.token = token
        self.timeout = timeout
        self.failed_repos: list[str] = []

    async def fetch_release_batch(self) -> list[RawRelease]:
        """Fetch releases of every configured repository.

        Returns:
            Releases of all repositories that could be fetched.

        Raises:
            SourceUnavailableError: If every repository failed.
        """
        self.failed_repos = []
        if not self.repos:
            return []

        async with GitHubReleaseClient(self.token, timeout=self.timeout) as client:
            results = await asyncio.gather(
                *(client.get_releases(repo.owner, repo.name) for repo in self.repos),
                return_exceptions=True,
            )

        releases: list[RawRelease] = []
        for repo, result in zip(self.repos, results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Failed to fetch releases for %s/%s: %s", repo.owner, repo.name, result)
                self.failed_repos.append(f"{repo.owner}/{repo.name}")
                continue
            releases.extend(result)

        if len(self.failed_repos) == len(self.repos):
            raise SourceUnavailableError(
                f"Could not fetch releases for any repository: {', '.join(self.failed_repos)}"
            )
        return releases


class SnapshotReleaseSource:
    """Read releases from a local JSON snapshot written by ``collect``."""

    def __init__(self, snapshot: ReleaseSnapshot):
        self.snapshot = snapshot

    async def fetch_release_batch(self) -> list[RawRelease]:
        """Load every release in the snapshot.

        Raises:
            SourceUnavailableError: If the snapshot is missing or malformed.
        """
        if not self.snapshot.exists():
            raise SourceUnavailableError(f"Snapshot not found: {self.snapshot.data_path}")
        try:
            releases = self.snapshot.releases()
        except (ValueError, ValidationError) as e:
            raise SourceUnavailableError(f"Invalid snapshot {self.snapshot.data_path}: {e}") from e

        logger.info("Loaded %d releases from %s", len(releases), self.snapshot.data_path)
        if not releases:
            logger.warning("Snapshot %s contains no releases", self.snapshot.data_path)
        return releases
