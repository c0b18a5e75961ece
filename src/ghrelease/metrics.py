"""Headline dashboard metrics."""

from datetime import UTC, datetime

from ghrelease.models import DashboardMetric, EnrichedRelease, WorkDayType
from ghrelease.sequencing import MILLIS_PER_DAY
from ghrelease.temporal import to_millis


def _rate(part: int, total: int) -> float:
    return part / total * 100 if total else 0.0


def days_since_latest(releases: list[EnrichedRelease], now: datetime) -> int | None:
    """Whole days elapsed since the most recent release.

    Returns:
        Floor of the elapsed days, or None when there are no releases.
    """
    if not releases:
        return None
    latest = max(r.published_timestamp for r in releases)
    return (to_millis(now) - latest) // MILLIS_PER_DAY


def calculate_metrics(
    releases: list[EnrichedRelease],
    now: datetime | None = None,
) -> list[DashboardMetric]:
    """Compute the summary metrics shown at the top of the dashboard.

    Every rate is 0 for an empty input. "Days Since Latest Release" has no
    defined value without releases and is reported as None.

    Args:
        releases: Filtered releases.
        now: Reference time for the recency metric (default: current UTC time).

    Returns:
        Metrics in display order.
    """
    now = now or datetime.now(UTC)
    total = len(releases)
    repos = {r.repo_name for r in releases}
    weekday = sum(1 for r in releases if r.work_day_type == WorkDayType.WEEKDAY)
    prereleases = sum(1 for r in releases if r.is_prerelease)

    intervals = [r.days_since_last_release for r in releases if r.days_since_last_release is not None]
    avg_interval = sum(intervals) / len(intervals) if intervals else 0.0

    return [
        DashboardMetric(
            name="Total Releases",
            description="Total number of releases",
            value=total,
            unit="releases",
            format="number",
        ),
        DashboardMetric(
            name="Active Repositories",
            description="Repositories with at least one release",
            value=len(repos),
            unit="repositories",
            format="number",
        ),
        DashboardMetric(
            name="Weekday Release Rate",
            description="Share of releases published on a weekday",
            value=_rate(weekday, total),
            unit="%",
            format="percentage",
        ),
        DashboardMetric(
            name="Pre-release Rate",
            description="Share of releases flagged as prerelease",
            value=_rate(prereleases, total),
            unit="%",
            format="percentage",
        ),
        DashboardMetric(
            name="Average Release Interval",
            description="Mean days between consecutive releases of a repository",
            # Half-up rounding; intervals are never negative
            value=int(avg_interval + 0.5),
            unit="days",
            format="duration",
        ),
        DashboardMetric(
            name="Days Since Latest Release",
            description="Days elapsed since the most recent release",
            value=days_since_latest(releases, now),
            unit="days",
            format="duration",
        ),
    ]
