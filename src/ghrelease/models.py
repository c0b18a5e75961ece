"""Data models for ghrelease."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, field_validator


class ReleaseType(StrEnum):
    """Release classification derived from the tag."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    PRE_RELEASE = "pre-release"
    UNKNOWN = "unknown"


class WorkDayType(StrEnum):
    """Work day classification.

    HOLIDAY is reserved; nothing assigns it yet.
    """

    WEEKDAY = "WEEKDAY"
    WEEKEND = "WEEKEND"
    HOLIDAY = "HOLIDAY"


class TimePeriod(StrEnum):
    """Time-of-day bucket of a publish timestamp."""

    MORNING = "MORNING"
    AFTERNOON = "AFTERNOON"
    EVENING = "EVENING"
    NIGHT = "NIGHT"


@dataclass(frozen=True)
class RawRelease:
    """A release as supplied by a data source.

    Attributes:
        repo_name: Repository name (e.g., "stackflow").
        repo_owner: GitHub organization/owner (e.g., "daangn").
        tag_name: Release tag (e.g., "v1.0.0").
        published_at: Publish timestamp (timezone-aware).
        name: Release title (may be empty).
        body: Release notes (may be empty).
        draft: Whether the release is a draft.
        prerelease: Whether the release is flagged as a prerelease.
    """

    repo_name: str
    repo_owner: str
    tag_name: str
    published_at: datetime
    name: str = ""
    body: str = ""
    draft: bool = False
    prerelease: bool = False


@dataclass(frozen=True)
class VersionInfo:
    major: int | None
    minor: int | None
    patch: int | None
    release_type: ReleaseType


@dataclass(frozen=True)
class TemporalFields:
    """Calendar and time-bucket fields derived from one timestamp."""

    published_timestamp: int
    published_date: str
    published_time: str
    published_year: int
    published_month: int
    published_day: int
    published_quarter: int
    published_week_number: int
    published_iso_week: str
    published_day_of_week: int
    published_day_name: str
    published_month_name: str
    is_weekend: bool
    is_holiday: bool
    work_day_type: WorkDayType
    hour_of_day: int
    time_period: TimePeriod
    is_month_start: bool
    is_month_end: bool
    is_year_start: bool
    is_year_end: bool
    date_key: str
    week_key: str
    month_key: str
    quarter_key: str
    year_key: str


@dataclass(frozen=True)
class SequenceInfo:
    """Position of a release within its repository's history."""

    release_sequence_number: int
    days_since_last_release: int | None
    days_since_first_release: int
    days_until_next_release: int | None
    total_releases_in_repo: int


@dataclass(frozen=True)
class ContextCounts:
    """Releases sharing a bucket with a given release, itself excluded."""

    same_day_releases: int
    same_week_releases: int
    same_month_releases: int


@dataclass(frozen=True)
class EnrichedRelease:
    """One release with every derived analysis field.

    Timestamps are Unix epoch milliseconds. Calendar fields are expressed in
    the time zone the batch was enriched with.
    """

    # Identity
    id: str
    repo_name: str
    repo_owner: str
    tag_name: str
    release_name: str

    # Time
    published_at: str
    published_timestamp: int
    published_date: str
    published_time: str
    published_year: int
    published_month: int
    published_day: int
    published_quarter: int
    published_week_number: int
    published_iso_week: str
    published_day_of_week: int
    published_day_name: str
    published_month_name: str

    # Work day classification
    is_weekend: bool
    is_holiday: bool
    work_day_type: WorkDayType

    # Release metadata
    release_body: str
    release_body_length: int
    has_release_notes: bool
    release_type: ReleaseType
    version_major: int | None
    version_minor: int | None
    version_patch: int | None
    is_prerelease: bool
    is_draft: bool

    # Intervals
    days_since_last_release: int | None
    days_since_first_release: int
    days_until_next_release: int | None
    release_sequence_number: int
    total_releases_in_repo: int

    # Cross-repository context
    same_day_releases: int
    same_week_releases: int
    same_month_releases: int

    # Patterns
    hour_of_day: int
    time_period: TimePeriod
    is_month_start: bool
    is_month_end: bool
    is_year_start: bool
    is_year_end: bool

    # Aggregation keys
    date_key: str
    week_key: str
    month_key: str
    quarter_key: str
    year_key: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dictionary for serialization.

        Returns:
            Dictionary with enum members rendered as their string values.
        """
        return {
            key: value.value if isinstance(value, StrEnum) else value
            for key, value in asdict(self).items()
        }


class FilterSpec(BaseModel):
    """Declarative filter applied to enriched releases.

    Unset fields (None or an empty list) never exclude a record. Interval
    bounds that are not numeric are dropped rather than rejected.
    """

    repo_names: list[str] | None = None
    date_from: str | None = None
    date_to: str | None = None
    work_day_types: list[WorkDayType] | None = None
    release_types: list[ReleaseType] | None = None
    time_periods: list[TimePeriod] | None = None
    include_prereleases: bool | None = None
    include_drafts: bool | None = None
    min_days_between_releases: float | None = None
    max_days_between_releases: float | None = None

    @field_validator("min_days_between_releases", "max_days_between_releases", mode="before")
    @classmethod
    def _ignore_non_numeric(cls, value: Any) -> float | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None


@dataclass(frozen=True)
class AggregationRow:
    key: str
    count: int
    percentage: float


@dataclass(frozen=True)
class TimeSeriesPoint:
    """Release count for one publish date.

    Attributes:
        date: Publish date (YYYY-MM-DD).
        timestamp: Unix epoch milliseconds of the date at midnight UTC.
        count: Releases published on that date.
        cumulative_count: Releases published on or before that date.
    """

    date: str
    timestamp: int
    count: int
    cumulative_count: int


@dataclass(frozen=True)
class DashboardMetric:
    """A named headline value.

    Attributes:
        name: Metric name (e.g., "Total Releases").
        description: Human readable description.
        value: Current value, or None when undefined for the input.
        unit: Display unit ("releases", "%", "days").
        format: One of "number", "percentage", "duration".
    """

    name: str
    description: str
    value: float | None
    unit: str
    format: str


@dataclass(frozen=True)
class DataFreshness:
    last_updated: str
    earliest_release: str
    latest_release: str


@dataclass(frozen=True)
class DashboardResult:
    """Composed dashboard response for one request."""

    metrics: list[DashboardMetric]
    records: list[EnrichedRelease]
    aggregations: dict[str, list[AggregationRow]]
    time_series: list[TimeSeriesPoint]
    filters_applied: FilterSpec
    freshness: DataFreshness = field(default_factory=lambda: DataFreshness("", "", ""))

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-compatible dictionary.

        Returns:
            Nested dictionary mirroring the result structure.
        """
        return {
            "summary_metrics": [asdict(m) for m in self.metrics],
            "raw_data": [r.to_dict() for r in self.records],
            "time_series": [asdict(p) for p in self.time_series],
            "aggregations": {
                name: [asdict(row) for row in rows] for name, rows in self.aggregations.items()
            },
            "filters_applied": self.filters_applied.model_dump(mode="json", exclude_none=True),
            "data_freshness": {
                "last_updated": self.freshness.last_updated,
                "data_range": {
                    "earliest_release": self.freshness.earliest_release,
                    "latest_release": self.freshness.latest_release,
                },
            },
        }
