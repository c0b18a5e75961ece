"""Release count statistics for tabular reporting."""

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta, tzinfo

from ghrelease.enrichment import enrich_releases
from ghrelease.models import EnrichedRelease, WorkDayType
from ghrelease.sequencing import MILLIS_PER_DAY
from ghrelease.sources import ReleaseSource
from ghrelease.temporal import to_millis

logger = logging.getLogger(__name__)

RECENT_WINDOW = timedelta(days=30)


class ReleaseStatsError(Exception):
    """Raised when release statistics could not be computed."""


@dataclass(frozen=True)
class RepoSummary:
    """Release cadence summary of one repository.

    Attributes:
        repo_name: Repository name.
        total_releases: Number of releases.
        first_release_date: Date of the oldest release (YYYY-MM-DD).
        last_release_date: Date of the newest release (YYYY-MM-DD).
        avg_days_between_releases: Mean days between consecutive releases,
            rounded to whole days (0 for a single release).
        most_active_month: Month (YYYY-MM) with the most releases.
    """

    repo_name: str
    total_releases: int
    first_release_date: str
    last_release_date: str
    avg_days_between_releases: int
    most_active_month: str


@dataclass(frozen=True)
class WeeklyRow:
    year: str
    week: str
    repo_name: str
    release_count: int
    week_total: int


@dataclass
class ReleaseStats:
    """Count maps and summaries over a release batch.

    Yearly, weekly and daily maps count weekday releases only when built
    with ``weekdays_only``; totals and repository counts include everything.
    """

    total_releases: int = 0
    yearly_stats: dict[str, int] = field(default_factory=dict)
    weekly_stats: dict[str, int] = field(default_factory=dict)
    daily_stats: dict[str, int] = field(default_factory=dict)
    repo_stats: dict[str, int] = field(default_factory=dict)
    latest_releases: list[EnrichedRelease] = field(default_factory=list)
    repo_summaries: list[RepoSummary] = field(default_factory=list)
    top_weeks: list[WeeklyRow] = field(default_factory=list)
    first_release_date: str = ""
    last_release_date: str = ""
    recent_releases_30d: int = 0
    generated_at: str = ""


def count_maps(
    releases: list[EnrichedRelease],
    weekdays_only: bool = True,
) -> tuple[dict[str, int], dict[str, int], dict[str, int], dict[str, int]]:
    """Count releases per year, ISO week, calendar day and repository.

    Args:
        releases: Enriched releases.
        weekdays_only: Leave weekend releases out of the year, week and day maps.

    Returns:
        (yearly, weekly, daily, repo) count maps in chronological key order.
    """
    ordered = sorted(releases, key=lambda r: r.published_timestamp)
    counted = [
        r for r in ordered if not weekdays_only or r.work_day_type == WorkDayType.WEEKDAY
    ]
    yearly = Counter(r.year_key for r in counted)
    weekly = Counter(r.week_key for r in counted)
    daily = Counter(r.published_date for r in counted)
    repos = Counter(r.repo_name for r in ordered)
    return dict(yearly), dict(weekly), dict(daily), dict(repos)


def latest_releases(releases: list[EnrichedRelease], limit: int = 15) -> list[EnrichedRelease]:
    """Most recent releases, newest first."""
    return sorted(releases, key=lambda r: r.published_timestamp, reverse=True)[:limit]


def summarize_repositories(releases: list[EnrichedRelease]) -> list[RepoSummary]:
    """Build a cadence summary per repository.

    Args:
        releases: Enriched releases across repositories.

    Returns:
        One summary per repository in first-seen order.
    """
    by_repo: dict[str, list[EnrichedRelease]] = defaultdict(list)
    for release in releases:
        by_repo[release.repo_name].append(release)

    summaries = []
    for repo_name, repo_releases in by_repo.items():
        ordered = sorted(repo_releases, key=lambda r: r.published_timestamp)
        first, last = ordered[0], ordered[-1]

        avg_days = 0
        if len(ordered) > 1:
            span_days = (last.published_timestamp - first.published_timestamp) / MILLIS_PER_DAY
            avg_days = int(span_days / (len(ordered) - 1) + 0.5)

        months = Counter(r.month_key for r in ordered)
        most_active_month = max(months, key=months.__getitem__)

        summaries.append(
            RepoSummary(
                repo_name=repo_name,
                total_releases=len(ordered),
                first_release_date=first.published_date,
                last_release_date=last.published_date,
                avg_days_between_releases=avg_days,
                most_active_month=most_active_month,
            )
        )
    return summaries


def top_weekly_rows(releases: list[EnrichedRelease], limit: int = 10) -> list[WeeklyRow]:
    """Per-repository ISO week counts ranked by the week's total across repositories.

    Args:
        releases: Enriched releases.
        limit: Maximum rows returned.

    Returns:
        Rows sorted by week total, largest first.
    """
    per_repo_week = Counter((r.repo_name, r.week_key) for r in releases)
    week_totals = Counter(r.week_key for r in releases)

    rows = []
    for (repo_name, week_key), count in per_repo_week.items():
        year, week = week_key.split("-W")
        rows.append(
            WeeklyRow(
                year=year,
                week=week,
                repo_name=repo_name,
                release_count=count,
                week_total=week_totals[week_key],
            )
        )
    rows.sort(key=lambda row: row.week_total, reverse=True)
    return rows[:limit]


def calculate_release_stats(
    releases: list[EnrichedRelease],
    now: datetime | None = None,
    latest_limit: int = 15,
    weekdays_only: bool = True,
) -> ReleaseStats:
    """Compute every reporting statistic over a release batch.

    Args:
        releases: Enriched releases.
        now: Reference time for the 30 day window (default: current UTC time).
        latest_limit: Number of latest releases to include.
        weekdays_only: Restrict year, week and day maps to weekday releases.

    Returns:
        ReleaseStats; empty maps and blank dates for an empty batch.
    """
    now = now or datetime.now(UTC)
    if not releases:
        return ReleaseStats(generated_at=now.isoformat())

    yearly, weekly, daily, repos = count_maps(releases, weekdays_only=weekdays_only)
    dates = [r.published_date for r in releases]
    recent_cutoff = to_millis(now - RECENT_WINDOW)

    return ReleaseStats(
        total_releases=len(releases),
        yearly_stats=yearly,
        weekly_stats=weekly,
        daily_stats=daily,
        repo_stats=repos,
        latest_releases=latest_releases(releases, latest_limit),
        repo_summaries=summarize_repositories(releases),
        top_weeks=top_weekly_rows(releases),
        first_release_date=min(dates),
        last_release_date=max(dates),
        recent_releases_30d=sum(1 for r in releases if r.published_timestamp >= recent_cutoff),
        generated_at=now.isoformat(),
    )


class ReleaseStatsService:
    """Computes release statistics from an injected release source."""

    def __init__(self, source: ReleaseSource, tz: tzinfo = UTC, latest_limit: int = 15):
        self.source = source
        self.tz = tz
        self.latest_limit = latest_limit

    async def get_release_stats(
        self,
        now: datetime | None = None,
        weekdays_only: bool = True,
    ) -> ReleaseStats:
        """Fetch the release batch and compute statistics.

        Raises:
            ReleaseStatsError: If the release source failed.
        """
        try:
            raw = await self.source.fetch_release_batch()
        except Exception as e:
            logger.error("Error fetching release stats: %s", e)
            raise ReleaseStatsError("Failed to fetch release statistics") from e

        return calculate_release_stats(
            enrich_releases(raw, self.tz),
            now=now,
            latest_limit=self.latest_limit,
            weekdays_only=weekdays_only,
        )
