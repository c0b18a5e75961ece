"""Release collection into the local snapshot."""

from rich.console import Console

from ghrelease.config import RepoConfig, Settings
from ghrelease.snapshot import ReleaseSnapshot
from ghrelease.sources import GitHubReleaseSource, SourceUnavailableError

console = Console()


async def collect_all(
    settings: Settings,
    repos: list[RepoConfig] | None = None,
    dry_run: bool = False,
) -> int:
    """Fetch releases for all configured repositories and store a snapshot.

    Args:
        settings: Application settings.
        repos: Specific repos to collect (default: all configured).
        dry_run: If True, show what would be collected without storing.

    Returns:
        Total number of releases stored.
    """
    if repos is None:
        repos = settings.load_repos()

    if not repos:
        console.print("[yellow]No repositories configured[/yellow]")
        return 0

    console.print(f"\n[bold]Collecting releases for {len(repos)} repositories[/bold]\n")

    if dry_run:
        for repo in repos:
            console.print(f"  Would collect: {repo.owner}/{repo.name}")
        return 0

    if not settings.github_token:
        console.print("[dim]GHRELEASE_GITHUB_TOKEN not set, using anonymous rate limit[/dim]")

    source = GitHubReleaseSource(repos, token=settings.github_token)
    try:
        releases = await source.fetch_release_batch()
    except SourceUnavailableError as e:
        console.print(f"[red]Error: {e}[/red]")
        return 0

    for failed in source.failed_repos:
        console.print(f"  [red]Skipped {failed}[/red]")

    fetched = [
        (repo.owner, repo.name)
        for repo in repos
        if f"{repo.owner}/{repo.name}" not in source.failed_repos
    ]
    snapshot = ReleaseSnapshot(settings.snapshot_path)
    stored = snapshot.upsert(releases, fetched)
    console.print(
        f"\n[green]Stored {len(releases)} releases to {settings.snapshot_path} "
        f"({stored.metadata.total_releases} total)[/green]"
    )
    return len(releases)
