"""Tests for the filter engine."""

import pytest

from ghrelease.enrichment import enrich_releases
from ghrelease.filters import apply_filters
from ghrelease.models import FilterSpec, ReleaseType, TimePeriod, WorkDayType


@pytest.fixture
def records(make_release):
    """Weekday and weekend releases across two repositories."""
    return enrich_releases(
        [
            make_release("stackflow", "v1.0.0", "2024-01-15T10:00:00"),  # Monday morning
            make_release("stackflow", "v1.1.0-rc.1", "2024-01-13T15:30:00", prerelease=True),  # Saturday
            make_release("seed-design", "v2.0", "2024-01-16T23:00:00", draft=True),  # Tuesday night
            make_release("seed-design", "v2.1", "2024-03-20T19:00:00"),  # Wednesday evening
        ]
    )


def _tags(records) -> list[str]:
    return [r.tag_name for r in records]


class TestApplyFilters:
    """Tests for apply_filters."""

    def test_empty_spec_keeps_everything(self, records) -> None:
        """Test unset predicates always pass."""
        assert apply_filters(records, FilterSpec()) == records

    def test_empty_lists_keep_everything(self, records) -> None:
        """Test empty allow-lists are treated as unset."""
        filters = FilterSpec(repo_names=[], work_day_types=[], release_types=[], time_periods=[])

        assert apply_filters(records, filters) == records

    def test_weekday_only_drops_saturday(self, records) -> None:
        """Test the WEEKDAY filter drops exactly the weekend release."""
        result = apply_filters(records, FilterSpec(work_day_types=[WorkDayType.WEEKDAY]))

        assert _tags(result) == ["v1.0.0", "v2.0", "v2.1"]

    def test_repo_names(self, records) -> None:
        """Test repository allow-list."""
        result = apply_filters(records, FilterSpec(repo_names=["seed-design"]))

        assert _tags(result) == ["v2.0", "v2.1"]

    def test_date_range_inclusive(self, records) -> None:
        """Test both date bounds are inclusive."""
        filters = FilterSpec(date_from="2024-01-15", date_to="2024-01-16")

        assert _tags(apply_filters(records, filters)) == ["v1.0.0", "v2.0"]

    def test_release_types(self, records) -> None:
        """Test release type allow-list."""
        filters = FilterSpec(release_types=[ReleaseType.MINOR])

        assert _tags(apply_filters(records, filters)) == ["v2.0", "v2.1"]

    def test_time_periods(self, records) -> None:
        """Test time period allow-list."""
        filters = FilterSpec(time_periods=[TimePeriod.NIGHT, TimePeriod.EVENING])

        assert _tags(apply_filters(records, filters)) == ["v2.0", "v2.1"]

    def test_exclude_prereleases_and_drafts(self, records) -> None:
        """Test prerelease and draft exclusion flags."""
        assert _tags(apply_filters(records, FilterSpec(include_prereleases=False))) == [
            "v1.0.0",
            "v2.0",
            "v2.1",
        ]
        assert _tags(apply_filters(records, FilterSpec(include_drafts=False))) == [
            "v1.0.0",
            "v1.1.0-rc.1",
            "v2.1",
        ]

    def test_include_flags_true_keep_everything(self, records) -> None:
        """Test explicit inclusion is the same as unset."""
        filters = FilterSpec(include_prereleases=True, include_drafts=True)

        assert apply_filters(records, filters) == records

    def test_interval_bounds_skip_first_releases(self, records) -> None:
        """Test interval bounds only apply to releases with a predecessor."""
        # v1.0.0 follows v1.1.0-rc.1 by 2 days; v2.1 follows v2.0 by 64 days
        filters = FilterSpec(min_days_between_releases=10)

        assert _tags(apply_filters(records, filters)) == ["v1.1.0-rc.1", "v2.0", "v2.1"]

        filters = FilterSpec(max_days_between_releases=10)

        assert _tags(apply_filters(records, filters)) == ["v1.0.0", "v1.1.0-rc.1", "v2.0"]

    def test_non_numeric_bounds_ignored(self, records) -> None:
        """Test invalid interval bounds are dropped rather than rejected."""
        filters = FilterSpec(min_days_between_releases="soon", max_days_between_releases=[1])

        assert filters.min_days_between_releases is None
        assert filters.max_days_between_releases is None
        assert apply_filters(records, filters) == records

    def test_numeric_string_bounds_accepted(self) -> None:
        """Test numeric strings are coerced."""
        filters = FilterSpec(min_days_between_releases="3")

        assert filters.min_days_between_releases == 3.0

    def test_predicates_combine(self, records) -> None:
        """Test all predicates must pass."""
        filters = FilterSpec(
            repo_names=["seed-design"],
            work_day_types=[WorkDayType.WEEKDAY],
            include_drafts=False,
        )

        assert _tags(apply_filters(records, filters)) == ["v2.1"]

    def test_idempotent(self, records) -> None:
        """Test filtering twice equals filtering once."""
        filters = FilterSpec(work_day_types=[WorkDayType.WEEKDAY], include_drafts=False)

        once = apply_filters(records, filters)

        assert apply_filters(once, filters) == once

    def test_sequence_unaffected_by_filter(self, records) -> None:
        """Test intervals were computed before filtering."""
        result = apply_filters(records, FilterSpec(include_prereleases=False))
        stable = next(r for r in result if r.tag_name == "v1.0.0")

        assert stable.release_sequence_number == 2
        assert stable.days_since_last_release == 2

    def test_zero_max_bound_applies(self, records) -> None:
        """Test 0 is a real bound: only first releases of each repository remain."""
        filters = FilterSpec(max_days_between_releases=0)

        assert _tags(apply_filters(records, filters)) == ["v1.1.0-rc.1", "v2.0"]

    def test_zero_min_bound_keeps_everything(self, records) -> None:
        """Test a 0 minimum excludes nothing, since intervals are never negative."""
        assert apply_filters(records, FilterSpec(min_days_between_releases=0)) == records
