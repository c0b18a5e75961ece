"""Tabular export of enriched releases and statistics using polars."""

from dataclasses import asdict
from pathlib import Path

import polars as pl

from ghrelease.models import DashboardResult, EnrichedRelease
from ghrelease.release_stats import ReleaseStats

RECORD_SCHEMA = {
    "id": pl.Utf8,
    "repo_owner": pl.Utf8,
    "repo_name": pl.Utf8,
    "tag_name": pl.Utf8,
    "release_name": pl.Utf8,
    "published_at": pl.Utf8,
    "published_timestamp": pl.Int64,
    "published_date": pl.Utf8,
    "published_time": pl.Utf8,
    "published_iso_week": pl.Utf8,
    "published_day_name": pl.Utf8,
    "work_day_type": pl.Utf8,
    "time_period": pl.Utf8,
    "release_type": pl.Utf8,
    "version_major": pl.Int64,
    "version_minor": pl.Int64,
    "version_patch": pl.Int64,
    "is_prerelease": pl.Boolean,
    "is_draft": pl.Boolean,
    "release_sequence_number": pl.Int64,
    "days_since_last_release": pl.Int64,
    "days_since_first_release": pl.Int64,
    "days_until_next_release": pl.Int64,
    "total_releases_in_repo": pl.Int64,
    "same_day_releases": pl.Int64,
    "same_week_releases": pl.Int64,
    "same_month_releases": pl.Int64,
    "month_key": pl.Utf8,
    "quarter_key": pl.Utf8,
    "year_key": pl.Utf8,
}

FORMATS = ("csv", "json", "parquet")


def records_frame(records: list[EnrichedRelease]) -> pl.DataFrame:
    """Flatten enriched releases into a DataFrame.

    Args:
        records: Enriched releases.

    Returns:
        DataFrame with one row per release, columns per RECORD_SCHEMA.
    """
    rows = []
    for record in records:
        data = record.to_dict()
        rows.append({col: data[col] for col in RECORD_SCHEMA})
    return pl.DataFrame(rows, schema=RECORD_SCHEMA)


def aggregations_frame(result: DashboardResult) -> pl.DataFrame:
    """Stack every dashboard aggregation into one long DataFrame."""
    rows = [
        {"dimension": str(dimension), **asdict(row)}
        for dimension, agg_rows in result.aggregations.items()
        for row in agg_rows
    ]
    return pl.DataFrame(
        rows,
        schema={"dimension": pl.Utf8, "key": pl.Utf8, "count": pl.Int64, "percentage": pl.Float64},
    )


def time_series_frame(result: DashboardResult) -> pl.DataFrame:
    return pl.DataFrame(
        [asdict(p) for p in result.time_series],
        schema={
            "date": pl.Utf8,
            "timestamp": pl.Int64,
            "count": pl.Int64,
            "cumulative_count": pl.Int64,
        },
    )


def repo_summary_frame(stats: ReleaseStats) -> pl.DataFrame:
    """Repository cadence summaries as a DataFrame."""
    return pl.DataFrame(
        [asdict(s) for s in stats.repo_summaries],
        schema={
            "repo_name": pl.Utf8,
            "total_releases": pl.Int64,
            "first_release_date": pl.Utf8,
            "last_release_date": pl.Utf8,
            "avg_days_between_releases": pl.Int64,
            "most_active_month": pl.Utf8,
        },
    )


def count_map_frame(counts: dict[str, int], key_name: str) -> pl.DataFrame:
    """Turn a count map into a two-column DataFrame sorted by key."""
    return pl.DataFrame(
        {key_name: list(counts), "release_count": list(counts.values())},
        schema={key_name: pl.Utf8, "release_count": pl.Int64},
    ).sort(key_name)


def write_frame(df: pl.DataFrame, output_path: str | Path, output_format: str) -> Path:
    """Write a DataFrame as CSV, JSON or Parquet.

    Args:
        df: DataFrame to write.
        output_path: Destination file.
        output_format: One of FORMATS.

    Returns:
        Path written.

    Raises:
        ValueError: For an unsupported format.
    """
    if output_format not in FORMATS:
        raise ValueError(f"Unsupported export format: {output_format}")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if output_format == "csv":
        df.write_csv(output_path)
    elif output_format == "json":
        df.write_json(output_path)
    else:
        df.write_parquet(output_path)
    return output_path


def top_weeks_frame(stats: ReleaseStats) -> pl.DataFrame:
    return pl.DataFrame(
        [asdict(row) for row in stats.top_weeks],
        schema={
            "year": pl.Utf8,
            "week": pl.Utf8,
            "repo_name": pl.Utf8,
            "release_count": pl.Int64,
            "week_total": pl.Int64,
        },
    )


STATS_TABLES = ("summary", "yearly", "weekly", "daily", "repos", "top-weeks")


def stats_frame(stats: ReleaseStats, table: str) -> pl.DataFrame:
    """Select one release statistics table as a DataFrame.

    Args:
        stats: Computed release statistics.
        table: One of STATS_TABLES.

    Returns:
        DataFrame for the requested table.

    Raises:
        ValueError: For an unknown table name.
    """
    if table == "summary":
        return repo_summary_frame(stats)
    if table == "yearly":
        return count_map_frame(stats.yearly_stats, "year")
    if table == "weekly":
        return count_map_frame(stats.weekly_stats, "week")
    if table == "daily":
        return count_map_frame(stats.daily_stats, "date")
    if table == "repos":
        return count_map_frame(stats.repo_stats, "repo_name")
    if table == "top-weeks":
        return top_weeks_frame(stats)
    raise ValueError(f"Unknown stats table: {table}")
