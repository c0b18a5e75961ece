"""Configuration management for ghrelease."""

from pathlib import Path
from zoneinfo import ZoneInfo

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RepoConfig(BaseModel):
    """Configuration for a single tracked repository."""

    owner: str
    name: str


class ReposConfig(BaseModel):
    """Repository list configuration loaded from repos.yaml."""

    defaults: dict[str, str] = Field(default_factory=dict)
    repos: list[dict]

    def get_repos(self) -> list[RepoConfig]:
        """Resolve repos with defaults applied.

        Returns:
            List of RepoConfig with owner defaulted if not specified.
        """
        default_owner = self.defaults.get("owner", "")
        return [RepoConfig(owner=r.get("owner", default_owner), name=r["name"]) for r in self.repos]


class Settings(BaseSettings):
    """Application settings from environment variables and config files."""

    model_config = SettingsConfigDict(
        env_prefix="GHRELEASE_",
        env_file=".env",
        extra="ignore",
    )

    github_token: str = ""
    data_dir: Path = Path("data")
    config_dir: Path = Path("config")
    timezone: str = "UTC"
    latest_limit: int = 15

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / "releases.json"

    def tzinfo(self) -> ZoneInfo:
        """Time zone calendar fields are derived in."""
        return ZoneInfo(self.timezone)

    def load_repos(self) -> list[RepoConfig]:
        """Load repository configuration from repos.yaml.

        Returns:
            List of configured repositories.
        """
        repos_file = self.config_dir / "repos.yaml"
        if not repos_file.exists():
            return []

        with open(repos_file) as f:
            data = yaml.safe_load(f)

        config = ReposConfig(**data)
        return config.get_repos()


def get_settings() -> Settings:
    """Get application settings instance.

    Returns:
        Settings loaded from environment and config files.
    """
    return Settings()
