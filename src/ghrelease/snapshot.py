"""File-based release snapshot storage using JSON format."""

import json
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from ghrelease.github_client import parse_timestamp
from ghrelease.models import RawRelease

SNAPSHOT_VERSION = "1"


class SnapshotRelease(BaseModel):
    tag_name: str
    name: str | None = ""
    body: str | None = ""
    published_at: str
    draft: bool = False
    prerelease: bool = False


class SnapshotRepository(BaseModel):
    owner: str = Field(min_length=1)
    name: str = Field(min_length=1)
    releases: list[SnapshotRelease] = Field(default_factory=list)


class SnapshotMetadata(BaseModel):
    last_updated: str = ""
    data_version: str = SNAPSHOT_VERSION
    total_repositories: int = 0
    total_releases: int = 0


class SnapshotFile(BaseModel):
    """Top-level layout of releases.json."""

    repositories: list[SnapshotRepository]
    metadata: SnapshotMetadata = Field(default_factory=SnapshotMetadata)


class ReleaseSnapshot:
    """Release snapshot persisted as a single JSON file.

    Attributes:
        data_path: Path to the JSON file.
    """

    def __init__(self, data_path: Path):
        """Initialize snapshot with path to data file.

        Args:
            data_path: Path to the JSON file holding the snapshot.
        """
        self.data_path = data_path

    def exists(self) -> bool:
        return self.data_path.exists()

    def read(self) -> SnapshotFile:
        """Load and validate the snapshot.

        Returns:
            Parsed snapshot.

        Raises:
            FileNotFoundError: If the snapshot file does not exist.
            pydantic.ValidationError: If the file does not match the layout.
        """
        raw = json.loads(self.data_path.read_text(encoding="utf-8"))
        return SnapshotFile.model_validate(raw)

    def write(self, releases: list[RawRelease]) -> SnapshotFile:
        """Write releases to the snapshot file, grouped by repository.

        Args:
            releases: Releases to store. Replaces any existing snapshot.

        Returns:
            The snapshot that was written.
        """
        repositories: dict[tuple[str, str], SnapshotRepository] = {}
        for release in releases:
            key = (release.repo_owner, release.repo_name)
            if key not in repositories:
                repositories[key] = SnapshotRepository(owner=key[0], name=key[1])
            repositories[key].releases.append(
                SnapshotRelease(
                    tag_name=release.tag_name,
                    name=release.name,
                    body=release.body,
                    published_at=release.published_at.astimezone(UTC)
                    .isoformat()
                    .replace("+00:00", "Z"),
                    draft=release.draft,
                    prerelease=release.prerelease,
                )
            )

        snapshot = SnapshotFile(
            repositories=list(repositories.values()),
            metadata=SnapshotMetadata(
                last_updated=datetime.now(UTC).isoformat(),
                total_repositories=len(repositories),
                total_releases=len(releases),
            ),
        )
        self.data_path.parent.mkdir(parents=True, exist_ok=True)
        self.data_path.write_text(snapshot.model_dump_json(indent=2), encoding="utf-8")
        return snapshot

    def upsert(self, releases: list[RawRelease], fetched: list[tuple[str, str]]) -> SnapshotFile:
        """Merge freshly fetched repositories into the stored snapshot.

        Every (owner, name) in ``fetched`` is replaced by its entries in
        ``releases``, even when that is none. Other stored repositories are
        kept as they are.

        Args:
            releases: Releases of the fetched repositories.
            fetched: (owner, name) of each repository fetched successfully.

        Returns:
            The snapshot that was written.
        """
        replaced = set(fetched)
        existing = self.releases() if self.exists() else []
        kept = [r for r in existing if (r.repo_owner, r.repo_name) not in replaced]
        return self.write(kept + releases)

    def releases(self) -> list[RawRelease]:
        """Flatten the snapshot into raw releases.

        Returns:
            All releases across repositories.
        """
        snapshot = self.read()
        return [
            RawRelease(
                repo_name=repo.name,
                repo_owner=repo.owner,
                tag_name=item.tag_name,
                published_at=parse_timestamp(item.published_at),
                name=item.name or "",
                body=item.body or "",
                draft=item.draft,
                prerelease=item.prerelease,
            )
            for repo in snapshot.repositories
            for item in repo.releases
        ]
