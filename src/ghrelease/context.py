"""Cross-repository co-occurrence counts."""

from collections import Counter

from ghrelease.models import ContextCounts, TemporalFields


def count_context(fields: list[TemporalFields]) -> list[ContextCounts]:
    """Count, for each release, the other releases sharing its day, week and month.

    Counts span every repository in the batch and exclude the release itself.

    Args:
        fields: Temporal fields of every release in the batch.

    Returns:
        Context counts aligned index-for-index with ``fields``.
    """
    by_day = Counter(f.published_date for f in fields)
    by_week = Counter(f.week_key for f in fields)
    by_month = Counter(f.month_key for f in fields)

    return [
        ContextCounts(
            same_day_releases=by_day[f.published_date] - 1,
            same_week_releases=by_week[f.week_key] - 1,
            same_month_releases=by_month[f.month_key] - 1,
        )
        for f in fields
    ]
