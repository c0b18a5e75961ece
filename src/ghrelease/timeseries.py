"""Daily and cumulative release counts."""

from collections import Counter
from datetime import UTC, datetime

from ghrelease.models import EnrichedRelease, TimeSeriesPoint
from ghrelease.temporal import to_millis


def build_time_series(releases: list[EnrichedRelease]) -> list[TimeSeriesPoint]:
    """Count releases per publish date with a running total.

    Args:
        releases: Releases to bucket.

    Returns:
        One point per date that has releases, in ascending date order.
    """
    daily = Counter(r.published_date for r in releases)

    points = []
    cumulative = 0
    for day in sorted(daily):
        cumulative += daily[day]
        midnight = datetime.fromisoformat(day).replace(tzinfo=UTC)
        points.append(
            TimeSeriesPoint(
                date=day,
                timestamp=to_millis(midnight),
                count=daily[day],
                cumulative_count=cumulative,
            )
        )
    return points
