"""Calendar and time-bucket derivation for publish timestamps."""

import math
from datetime import UTC, date, datetime, timedelta, tzinfo

from ghrelease.models import TemporalFields, TimePeriod, WorkDayType

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def to_millis(moment: datetime) -> int:
    """Unix epoch milliseconds of a timezone-aware datetime."""
    return (moment - EPOCH) // timedelta(milliseconds=1)


def iso_week(day: date) -> str:
    """ISO-8601 week label ("YYYY-Www") of a date.

    The year is the ISO week-numbering year, so 2024-12-30 is "2025-W01"
    and 2023-12-31 is "2023-W52".
    """
    iso = day.isocalendar()
    return f"{iso.year}-W{iso.week:02d}"


def quarter_of(month: int) -> int:
    return math.ceil(month / 3)


def day_of_week(day: date) -> int:
    """Day-of-week index with 0 for Sunday and 6 for Saturday."""
    return day.isoweekday() % 7


def time_period_of(hour: int) -> TimePeriod:
    """Bucket an hour of day into MORNING, AFTERNOON, EVENING or NIGHT."""
    if 6 <= hour < 12:
        return TimePeriod.MORNING
    if 12 <= hour < 18:
        return TimePeriod.AFTERNOON
    if 18 <= hour < 22:
        return TimePeriod.EVENING
    return TimePeriod.NIGHT


def derive_temporal_fields(published_at: datetime, tz: tzinfo = UTC) -> TemporalFields:
    """Derive every calendar field for one publish timestamp.

    Args:
        published_at: Timezone-aware publish timestamp.
        tz: Time zone the calendar fields are expressed in.

    Returns:
        TemporalFields for the timestamp.
    """
    local = published_at.astimezone(tz)
    day = local.date()

    year, month, day_num = local.year, local.month, local.day
    quarter = quarter_of(month)
    week = iso_week(day)
    dow = day_of_week(day)
    is_weekend = dow in (0, 6)
    hour = local.hour

    return TemporalFields(
        published_timestamp=to_millis(published_at),
        published_date=day.isoformat(),
        published_time=local.strftime("%H:%M:%S"),
        published_year=year,
        published_month=month,
        published_day=day_num,
        published_quarter=quarter,
        published_week_number=math.ceil(day_num / 7),
        published_iso_week=week,
        published_day_of_week=dow,
        published_day_name=DAY_NAMES[dow],
        published_month_name=MONTH_NAMES[month - 1],
        is_weekend=is_weekend,
        is_holiday=False,
        work_day_type=WorkDayType.WEEKEND if is_weekend else WorkDayType.WEEKDAY,
        hour_of_day=hour,
        time_period=time_period_of(hour),
        is_month_start=day_num <= 7,
        is_month_end=day_num > 23,
        is_year_start=month == 1,
        is_year_end=month == 12,
        date_key=day.strftime("%Y%m%d"),
        week_key=week,
        month_key=f"{year}-{month:02d}",
        quarter_key=f"{year}-Q{quarter}",
        year_key=str(year),
    )
