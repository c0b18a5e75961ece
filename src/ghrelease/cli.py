"""Command-line interface for ghrelease."""

import asyncio
import functools
import json
import logging
import sys

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ghrelease.aggregation import Dimension
from ghrelease.collector import collect_all
from ghrelease.config import Settings, get_settings
from ghrelease.dashboard import DashboardError, DashboardService
from ghrelease.models import FilterSpec, ReleaseType, TimePeriod, WorkDayType
from ghrelease.release_stats import ReleaseStatsError, ReleaseStatsService
from ghrelease.report import format_metric
from ghrelease.snapshot import ReleaseSnapshot
from ghrelease.sources import GitHubReleaseSource, ReleaseSource, SnapshotReleaseSource

console = Console()


def _make_source(settings: Settings, live: bool) -> ReleaseSource:
    """Pick the GitHub API or the local snapshot as release source."""
    if live:
        return GitHubReleaseSource(settings.load_repos(), token=settings.github_token)
    return SnapshotReleaseSource(ReleaseSnapshot(settings.snapshot_path))


def filter_options(func):
    """Attach the dashboard filter options to a command."""
    options = [
        click.option("--repo", "-r", "repo_names", multiple=True, help="Repository name (repeatable)"),
        click.option("--from", "date_from", help="Earliest publish date (YYYY-MM-DD)"),
        click.option("--to", "date_to", help="Latest publish date (YYYY-MM-DD)"),
        click.option(
            "--work-day-type",
            "work_day_types",
            multiple=True,
            type=click.Choice([t.value for t in WorkDayType]),
        ),
        click.option(
            "--release-type",
            "release_types",
            multiple=True,
            type=click.Choice([t.value for t in ReleaseType]),
        ),
        click.option(
            "--time-period",
            "time_periods",
            multiple=True,
            type=click.Choice([t.value for t in TimePeriod]),
        ),
        click.option("--exclude-prereleases", is_flag=True, help="Drop prereleases"),
        click.option("--exclude-drafts", is_flag=True, help="Drop drafts"),
        click.option("--min-days", type=float, help="Minimum days since previous release"),
        click.option("--max-days", type=float, help="Maximum days since previous release"),
        click.option("--live", is_flag=True, help="Fetch from GitHub instead of the snapshot"),
    ]

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        kwargs["filters"] = FilterSpec(
            repo_names=list(kwargs.pop("repo_names")) or None,
            date_from=kwargs.pop("date_from"),
            date_to=kwargs.pop("date_to"),
            work_day_types=list(kwargs.pop("work_day_types")) or None,
            release_types=list(kwargs.pop("release_types")) or None,
            time_periods=list(kwargs.pop("time_periods")) or None,
            include_prereleases=False if kwargs.pop("exclude_prereleases") else None,
            include_drafts=False if kwargs.pop("exclude_drafts") else None,
            min_days_between_releases=kwargs.pop("min_days"),
            max_days_between_releases=kwargs.pop("max_days"),
        )
        return func(*args, **kwargs)

    for option in reversed(options):
        wrapper = option(wrapper)
    return wrapper


def _compute(settings: Settings, filters: FilterSpec, live: bool):
    service = DashboardService(_make_source(settings, live), tz=settings.tzinfo())
    try:
        return asyncio.run(service.compute_dashboard(filters))
    except DashboardError as e:
        console.print(f"[red]Error: {e} ({e.__cause__})[/red]")
        if not live:
            console.print("[yellow]Run 'ghrelease collect' first or pass --live.[/yellow]")
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """GitHub release analytics for a fixed set of repositories."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@main.command()
@click.option("--repo", "-r", multiple=True, help="Specific repo(s) to collect")
@click.option("--dry-run", is_flag=True, help="Show what would be collected")
@click.pass_context
def collect(ctx: click.Context, repo: tuple[str, ...], dry_run: bool) -> None:
    """Fetch releases from GitHub into the local snapshot.

    Examples:
        ghrelease collect                  # All repos
        ghrelease collect -r stackflow     # Single repo
        ghrelease collect --dry-run        # Preview only
    """
    settings = get_settings()
    repos = None

    if repo:
        all_repos = settings.load_repos()
        repos = [r for r in all_repos if r.name in repo]
        if not repos:
            console.print(f"[red]No matching repos found for: {repo}[/red]")
            return

    asyncio.run(collect_all(settings, repos=repos, dry_run=dry_run))


@main.command()
@filter_options
@click.option(
    "--format", "-f", "output_format", type=click.Choice(["table", "json"]), default="table"
)
@click.option("--top", default=5, show_default=True, help="Rows shown per aggregation")
@click.pass_context
def dashboard(
    ctx: click.Context, filters: FilterSpec, live: bool, output_format: str, top: int
) -> None:
    """Show dashboard metrics and aggregations.

    Examples:
        ghrelease dashboard                               # Everything
        ghrelease dashboard --work-day-type WEEKDAY       # Weekday releases
        ghrelease dashboard -r stackflow --from 2024-01-01
        ghrelease dashboard -f json > dashboard.json
    """
    settings = get_settings()
    result = _compute(settings, filters, live)

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return

    table = Table(title="Release Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for metric in result.metrics:
        table.add_row(metric.name, format_metric(metric))
    console.print(table)

    for dimension in Dimension:
        rows = result.aggregations[dimension][:top]
        if not rows:
            continue
        agg_table = Table(title=dimension.replace("_", " ").title())
        agg_table.add_column("Key", style="green")
        agg_table.add_column("Releases", justify="right")
        agg_table.add_column("Share", justify="right")
        for row in rows:
            agg_table.add_row(row.key, str(row.count), f"{row.percentage:.1f}%")
        console.print(agg_table)

    freshness = result.freshness
    if freshness.earliest_release:
        console.print(
            f"[dim]Releases {freshness.earliest_release} to {freshness.latest_release}[/dim]"
        )
    else:
        console.print("[yellow]No releases match the filters[/yellow]")


@main.command()
@click.option("--include-weekends", is_flag=True, help="Count weekend releases in period stats")
@click.option("--live", is_flag=True, help="Fetch from GitHub instead of the snapshot")
@click.option(
    "--table",
    "table_name",
    type=click.Choice(["summary", "yearly", "weekly", "daily", "repos", "top-weeks"]),
    default="summary",
    show_default=True,
    help="Table written with --output",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["csv", "json", "parquet"]),
    default="csv",
    show_default=True,
)
@click.option("--output", "-o", type=click.Path(), help="Write the selected table to a file")
@click.pass_context
def stats(
    ctx: click.Context,
    include_weekends: bool,
    live: bool,
    table_name: str,
    output_format: str,
    output: str | None,
) -> None:
    """Show release counts per year, week, day and repository.

    Examples:
        ghrelease stats
        ghrelease stats --include-weekends
        ghrelease stats --table weekly -o reports/weekly.csv
        ghrelease stats --table top-weeks -f json -o reports/top_weeks.json
    """
    settings = get_settings()
    service = ReleaseStatsService(
        _make_source(settings, live),
        tz=settings.tzinfo(),
        latest_limit=settings.latest_limit,
    )
    try:
        release_stats = asyncio.run(service.get_release_stats(weekdays_only=not include_weekends))
    except ReleaseStatsError as e:
        console.print(f"[red]Error: {e} ({e.__cause__})[/red]")
        sys.exit(1)

    if not release_stats.total_releases:
        console.print("[yellow]No releases found for the configured repositories[/yellow]")
        return

    console.print(
        f"[bold]{release_stats.total_releases} releases[/bold] "
        f"({release_stats.first_release_date} to {release_stats.last_release_date}, "
        f"{release_stats.recent_releases_30d} in the last 30 days)"
    )

    yearly = Table(title="Releases per Year")
    yearly.add_column("Year", style="cyan")
    yearly.add_column("Releases", justify="right")
    for year, count in sorted(release_stats.yearly_stats.items()):
        yearly.add_row(year, str(count))
    console.print(yearly)

    if release_stats.top_weeks:
        weeks = Table(title="Busiest Weeks")
        weeks.add_column("Week", style="cyan")
        weeks.add_column("Repository", style="green")
        weeks.add_column("Releases", justify="right")
        weeks.add_column("Week Total", justify="right")
        for row in release_stats.top_weeks:
            weeks.add_row(
                f"{row.year}-W{row.week}", row.repo_name, str(row.release_count), str(row.week_total)
            )
        console.print(weeks)

    repos = Table(title="Repositories")
    repos.add_column("Repository", style="cyan")
    repos.add_column("Releases", justify="right")
    repos.add_column("First", justify="right")
    repos.add_column("Last", justify="right")
    repos.add_column("Avg Days", justify="right")
    repos.add_column("Busiest Month", justify="right")
    for summary in release_stats.repo_summaries:
        repos.add_row(
            summary.repo_name,
            str(summary.total_releases),
            summary.first_release_date,
            summary.last_release_date,
            str(summary.avg_days_between_releases),
            summary.most_active_month,
        )
    console.print(repos)

    latest = Table(title="Latest Releases")
    latest.add_column("Repository", style="cyan")
    latest.add_column("Tag", style="green")
    latest.add_column("Published", justify="right")
    for release in release_stats.latest_releases:
        latest.add_row(release.repo_name, release.tag_name, release.published_date)
    console.print(latest)

    if output:
        from ghrelease.export import stats_frame, write_frame

        df = stats_frame(release_stats, table_name)
        path = write_frame(df, output, output_format)
        console.print(f"[green]Exported {len(df)} rows to {path}[/green]")


@main.command()
@filter_options
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_context
def report(ctx: click.Context, filters: FilterSpec, live: bool, output: str | None) -> None:
    """Generate an HTML dashboard.

    Examples:
        ghrelease report                              # reports/dashboard.html
        ghrelease report -o out.html --exclude-prereleases
    """
    from ghrelease.report import generate_dashboard

    settings = get_settings()
    result = _compute(settings, filters, live)

    output_path = output or "reports/dashboard.html"
    generate_dashboard(result, output_path)
    console.print(f"[green]Generated dashboard at {output_path}[/green]")


@main.command()
@filter_options
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["csv", "json", "parquet"]),
    default="csv",
)
@click.option(
    "--table",
    "table_name",
    type=click.Choice(["records", "aggregations", "timeseries"]),
    default="records",
    show_default=True,
)
@click.option("--output", "-o", type=click.Path(), help="Output file path")
@click.pass_context
def export(
    ctx: click.Context,
    filters: FilterSpec,
    live: bool,
    output_format: str,
    table_name: str,
    output: str | None,
) -> None:
    """Export enriched releases or derived tables.

    Examples:
        ghrelease export                              # reports/records.csv
        ghrelease export --table aggregations -f json
        ghrelease export -f parquet -o data/enriched.parquet
    """
    from ghrelease.export import (
        aggregations_frame,
        records_frame,
        time_series_frame,
        write_frame,
    )

    settings = get_settings()
    result = _compute(settings, filters, live)

    if table_name == "aggregations":
        df = aggregations_frame(result)
    elif table_name == "timeseries":
        df = time_series_frame(result)
    else:
        df = records_frame(result.records)

    output_path = output or f"reports/{table_name}.{output_format}"
    write_frame(df, output_path, output_format)
    console.print(f"[green]Exported {len(df)} rows to {output_path}[/green]")


@main.command("list")
@click.pass_context
def list_repos(ctx: click.Context) -> None:
    """List configured repositories."""
    settings = get_settings()
    repos = settings.load_repos()

    if not repos:
        console.print("[yellow]No repositories configured in config/repos.yaml[/yellow]")
        return

    table = Table(title="Configured Repositories")
    table.add_column("Owner", style="cyan")
    table.add_column("Repository", style="green")

    for repo in repos:
        table.add_row(repo.owner, repo.name)

    console.print(table)


if __name__ == "__main__":
    main()
