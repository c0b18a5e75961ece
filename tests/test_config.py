"""Tests for configuration loading."""

from pathlib import Path
from zoneinfo import ZoneInfo

from ghrelease.config import ReposConfig, Settings


class TestReposConfig:
    """Tests for ReposConfig."""

    def test_default_owner_applied(self) -> None:
        """Test repos without an owner take the default."""
        config = ReposConfig(
            defaults={"owner": "daangn"},
            repos=[{"name": "stackflow"}, {"owner": "other", "name": "seed-design"}],
        )

        repos = config.get_repos()

        assert [(r.owner, r.name) for r in repos] == [
            ("daangn", "stackflow"),
            ("other", "seed-design"),
        ]


class TestSettings:
    """Tests for Settings."""

    def test_load_repos(self, tmp_path: Path) -> None:
        """Test repos.yaml is read from the config directory."""
        (tmp_path / "repos.yaml").write_text(
            "defaults:\n  owner: daangn\nrepos:\n  - name: stackflow\n  - name: seed-design\n"
        )
        settings = Settings(config_dir=tmp_path)

        assert [r.name for r in settings.load_repos()] == ["stackflow", "seed-design"]

    def test_missing_repos_file(self, tmp_path: Path) -> None:
        """Test a missing repos.yaml means no repositories."""
        assert Settings(config_dir=tmp_path).load_repos() == []

    def test_environment(self, monkeypatch, tmp_path: Path) -> None:
        """Test settings come from GHRELEASE_ variables."""
        monkeypatch.setenv("GHRELEASE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("GHRELEASE_TIMEZONE", "Asia/Seoul")
        monkeypatch.setenv("GHRELEASE_LATEST_LIMIT", "5")

        settings = Settings()

        assert settings.snapshot_path == tmp_path / "releases.json"
        assert settings.tzinfo() == ZoneInfo("Asia/Seoul")
        assert settings.latest_limit == 5
