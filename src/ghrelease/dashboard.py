"""Dashboard assembly: enrich, filter, aggregate."""

import logging
from datetime import UTC, datetime, tzinfo

from ghrelease.aggregation import build_aggregations
from ghrelease.enrichment import enrich_releases
from ghrelease.filters import apply_filters
from ghrelease.metrics import calculate_metrics
from ghrelease.models import DashboardResult, DataFreshness, FilterSpec, RawRelease
from ghrelease.sources import ReleaseSource
from ghrelease.timeseries import build_time_series

logger = logging.getLogger(__name__)


class DashboardError(Exception):
    """Raised when dashboard data could not be generated."""


def build_dashboard(
    releases: list[RawRelease],
    filters: FilterSpec | None = None,
    tz: tzinfo = UTC,
    now: datetime | None = None,
) -> DashboardResult:
    """Build a dashboard from a complete raw release batch.

    Enrichment runs over the whole batch first so that sequence numbers,
    intervals and context counts are unaffected by the filters.

    Args:
        releases: Every release of the tracked repositories.
        filters: Filters applied after enrichment.
        tz: Time zone for calendar fields.
        now: Reference time (default: current UTC time).

    Returns:
        Composed DashboardResult.
    """
    filters = filters or FilterSpec()
    now = now or datetime.now(UTC)

    enriched = enrich_releases(releases, tz)
    filtered = apply_filters(enriched, filters)

    dates = [r.published_date for r in filtered]
    freshness = DataFreshness(
        last_updated=now.isoformat(),
        earliest_release=min(dates, default=""),
        latest_release=max(dates, default=""),
    )

    return DashboardResult(
        metrics=calculate_metrics(filtered, now=now),
        records=filtered,
        aggregations=build_aggregations(filtered),
        time_series=build_time_series(filtered),
        filters_applied=filters,
        freshness=freshness,
    )


class DashboardService:
    """Computes dashboards from an injected release source.

    Nothing is cached between calls; every call fetches and recomputes.
    """

    def __init__(self, source: ReleaseSource, tz: tzinfo = UTC):
        """Initialize service.

        Args:
            source: Supplier of the raw release batch.
            tz: Time zone for calendar fields.
        """
        self.source = source
        self.tz = tz

    async def compute_dashboard(
        self,
        filters: FilterSpec | None = None,
        now: datetime | None = None,
    ) -> DashboardResult:
        """Fetch the release batch and build the dashboard.

        Args:
            filters: Filters applied after enrichment.
            now: Reference time (default: current UTC time).

        Returns:
            Composed DashboardResult.

        Raises:
            DashboardError: If the release source failed.
        """
        try:
            releases = await self.source.fetch_release_batch()
        except Exception as e:
            logger.error("Dashboard data generation failed: %s", e)
            raise DashboardError("Failed to generate dashboard data") from e

        return build_dashboard(releases, filters, tz=self.tz, now=now)
