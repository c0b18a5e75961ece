"""Filter enriched releases with a FilterSpec."""

from ghrelease.models import EnrichedRelease, FilterSpec


def matches(release: EnrichedRelease, filters: FilterSpec) -> bool:
    """Check a single release against every set predicate of a FilterSpec.

    Args:
        release: Enriched release.
        filters: Filter specification.

    Returns:
        True if the release passes all predicates.
    """
    if filters.repo_names and release.repo_name not in filters.repo_names:
        return False

    # Zero-padded YYYY-MM-DD compares correctly as text
    if filters.date_from and release.published_date < filters.date_from:
        return False
    if filters.date_to and release.published_date > filters.date_to:
        return False

    if filters.work_day_types and release.work_day_type not in filters.work_day_types:
        return False
    if filters.release_types and release.release_type not in filters.release_types:
        return False
    if filters.time_periods and release.time_period not in filters.time_periods:
        return False

    if filters.include_prereleases is False and release.is_prerelease:
        return False
    if filters.include_drafts is False and release.is_draft:
        return False

    interval = release.days_since_last_release
    if interval is not None:
        if (
            filters.min_days_between_releases is not None
            and interval < filters.min_days_between_releases
        ):
            return False
        if (
            filters.max_days_between_releases is not None
            and interval > filters.max_days_between_releases
        ):
            return False

    return True


def apply_filters(releases: list[EnrichedRelease], filters: FilterSpec) -> list[EnrichedRelease]:
    """Return the releases passing ``filters``, preserving input order."""
    return [r for r in releases if matches(r, filters)]
