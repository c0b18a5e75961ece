"""Group enriched releases by a dashboard dimension."""

from collections import Counter
from collections.abc import Callable
from enum import StrEnum

from ghrelease.models import AggregationRow, EnrichedRelease


class Dimension(StrEnum):
    """Dimensions every dashboard aggregates over."""

    REPO = "by_repo"
    DATE = "by_date"
    DAY_OF_WEEK = "by_day_of_week"
    MONTH = "by_month"
    QUARTER = "by_quarter"
    TIME_PERIOD = "by_time_period"
    RELEASE_TYPE = "by_release_type"


KEY_EXTRACTORS: dict[Dimension, Callable[[EnrichedRelease], str]] = {
    Dimension.REPO: lambda r: r.repo_name,
    Dimension.DATE: lambda r: r.published_date,
    Dimension.DAY_OF_WEEK: lambda r: r.published_day_name,
    Dimension.MONTH: lambda r: r.month_key,
    Dimension.QUARTER: lambda r: r.quarter_key,
    Dimension.TIME_PERIOD: lambda r: str(r.time_period),
    Dimension.RELEASE_TYPE: lambda r: str(r.release_type),
}


def aggregate_by(
    releases: list[EnrichedRelease],
    key: Callable[[EnrichedRelease], str],
) -> list[AggregationRow]:
    """Count releases per key with their share of the total.

    Args:
        releases: Releases to group.
        key: Extracts the grouping key from a release.

    Returns:
        Rows sorted by count, largest first. Percentages are 0 for an
        empty input.
    """
    total = len(releases)
    counts = Counter(key(r) for r in releases)
    rows = [
        AggregationRow(
            key=group,
            count=count,
            percentage=count / total * 100 if total else 0.0,
        )
        for group, count in counts.items()
    ]
    rows.sort(key=lambda row: row.count, reverse=True)
    return rows


def aggregate_dimension(releases: list[EnrichedRelease], dimension: Dimension) -> list[AggregationRow]:
    return aggregate_by(releases, KEY_EXTRACTORS[dimension])


def build_aggregations(releases: list[EnrichedRelease]) -> dict[str, list[AggregationRow]]:
    """Aggregate releases over every Dimension.

    Returns:
        Mapping of dimension name (e.g., "by_repo") to aggregation rows.
    """
    return {dimension: aggregate_dimension(releases, dimension) for dimension in Dimension}
