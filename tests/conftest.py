"""Shared test fixtures."""

from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import pytest

from ghrelease.models import RawRelease


def _release(
    repo: str,
    tag: str,
    published_at: str,
    prerelease: bool = False,
    draft: bool = False,
    body: str = "",
) -> RawRelease:
    return RawRelease(
        repo_name=repo,
        repo_owner="daangn",
        tag_name=tag,
        published_at=datetime.fromisoformat(published_at).replace(tzinfo=UTC),
        name=f"Release {tag}",
        body=body,
        draft=draft,
        prerelease=prerelease,
    )


@pytest.fixture
def make_release() -> Callable[..., RawRelease]:
    """Factory for RawRelease with a naive ISO timestamp read as UTC."""
    return _release


@pytest.fixture
def sample_releases() -> list[RawRelease]:
    """Two repositories, one weekend prerelease."""
    return [
        _release("stackflow", "v1.0.0", "2024-01-15T09:00:00", body="First major release"),
        _release("stackflow", "v2.0.0-beta.1", "2024-02-10T14:30:00", prerelease=True),
        _release("seed-design", "v1.5.0", "2024-01-16T11:15:00", body="Minor release"),
    ]


@pytest.fixture
def now() -> datetime:
    """Fixed reference time."""
    return datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def temp_data_dir(tmp_path: Path) -> Path:
    """Temporary directory for test data files."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return data_dir
