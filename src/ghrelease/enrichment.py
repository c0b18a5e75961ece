"""Turn raw releases into enriched, analyzable records."""

from datetime import UTC, tzinfo

from ghrelease.context import count_context
from ghrelease.models import EnrichedRelease, RawRelease
from ghrelease.sequencing import analyze_sequences
from ghrelease.temporal import derive_temporal_fields
from ghrelease.versioning import parse_version


def enrich_releases(releases: list[RawRelease], tz: tzinfo = UTC) -> list[EnrichedRelease]:
    """Enrich a complete release batch.

    Sequencing and context counts look at the whole batch, so callers must
    pass every release before filtering anything out.

    Args:
        releases: Raw releases across all tracked repositories.
        tz: Time zone for calendar fields.

    Returns:
        One EnrichedRelease per input release, in input order.
    """
    temporal = [derive_temporal_fields(r.published_at, tz) for r in releases]
    sequences = analyze_sequences(releases)
    contexts = count_context(temporal)

    enriched = []
    for release, fields, sequence, context in zip(
        releases, temporal, sequences, contexts, strict=True
    ):
        version = parse_version(release.tag_name)
        body = release.body or ""
        enriched.append(
            EnrichedRelease(
                id=f"{release.repo_name}_{release.tag_name}_{fields.published_timestamp}",
                repo_name=release.repo_name,
                repo_owner=release.repo_owner,
                tag_name=release.tag_name,
                release_name=release.name or release.tag_name,
                published_at=release.published_at.isoformat(),
                published_timestamp=fields.published_timestamp,
                published_date=fields.published_date,
                published_time=fields.published_time,
                published_year=fields.published_year,
                published_month=fields.published_month,
                published_day=fields.published_day,
                published_quarter=fields.published_quarter,
                published_week_number=fields.published_week_number,
                published_iso_week=fields.published_iso_week,
                published_day_of_week=fields.published_day_of_week,
                published_day_name=fields.published_day_name,
                published_month_name=fields.published_month_name,
                is_weekend=fields.is_weekend,
                is_holiday=fields.is_holiday,
                work_day_type=fields.work_day_type,
                release_body=body,
                release_body_length=len(body),
                has_release_notes=bool(body.strip()),
                release_type=version.release_type,
                version_major=version.major,
                version_minor=version.minor,
                version_patch=version.patch,
                is_prerelease=release.prerelease,
                is_draft=release.draft,
                days_since_last_release=sequence.days_since_last_release,
                days_since_first_release=sequence.days_since_first_release,
                days_until_next_release=sequence.days_until_next_release,
                release_sequence_number=sequence.release_sequence_number,
                total_releases_in_repo=sequence.total_releases_in_repo,
                same_day_releases=context.same_day_releases,
                same_week_releases=context.same_week_releases,
                same_month_releases=context.same_month_releases,
                hour_of_day=fields.hour_of_day,
                time_period=fields.time_period,
                is_month_start=fields.is_month_start,
                is_month_end=fields.is_month_end,
                is_year_start=fields.is_year_start,
                is_year_end=fields.is_year_end,
                date_key=fields.date_key,
                week_key=fields.week_key,
                month_key=fields.month_key,
                quarter_key=fields.quarter_key,
                year_key=fields.year_key,
            )
        )
    return enriched
