"""
Calendar bucketing for time-series statistics.

Every boundary is computed on local calendar dates in the platform timezone,
never by adding timedeltas to instants, so daylight-saving transitions and
month lengths cannot shift a bucket. Weeks are ISO weeks (Monday start).
"""

from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

from models.schemas import Interval


def to_utc(dt: datetime) -> datetime:
    """
    Normalize a datetime to aware UTC.

    Naive datetimes are taken to already be in UTC, which is how the
    database returns them.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """Convert to the naive UTC representation stored in DateTime columns."""
    return to_utc(dt).replace(tzinfo=None)


def local_date(ts: datetime, tz: ZoneInfo) -> date:
    """Calendar date of an instant as seen in `tz`."""
    return to_utc(ts).astimezone(tz).date()


def local_midnight_utc(day: date, tz: ZoneInfo) -> datetime:
    """UTC instant at which `day` begins in `tz`."""
    return datetime.combine(day, time.min, tzinfo=tz).astimezone(timezone.utc)


def bucket_start(day: date, interval: Interval) -> date:
    """
    First calendar day of the bucket containing `day`.

    Args:
        day: Local calendar date.
        interval: Bucket granularity.

    Returns:
        `day` itself, the Monday of its ISO week, the first of its month or
        January 1st of its year.
    """
    if interval == Interval.DAY:
        return day
    if interval == Interval.WEEK:
        return day - timedelta(days=day.weekday())
    if interval == Interval.MONTH:
        return day.replace(day=1)
    return day.replace(month=1, day=1)


def next_bucket(start: date, interval: Interval) -> date:
    """First day of the bucket following the one starting at `start`."""
    if interval == Interval.DAY:
        return start + timedelta(days=1)
    if interval == Interval.WEEK:
        return start + timedelta(days=7)
    if interval == Interval.MONTH:
        if start.month == 12:
            return date(start.year + 1, 1, 1)
        return date(start.year, start.month + 1, 1)
    return date(start.year + 1, 1, 1)


def iter_buckets(first: date, last: date, interval: Interval) -> Iterator[date]:
    """
    Yield the start date of every bucket from `first` to `last` inclusive.

    Both arguments may be any day inside their bucket. Nothing is yielded
    when `first` falls after `last`.
    """
    current = bucket_start(first, interval)
    end = bucket_start(last, interval)
    if current > end:
        return
    while True:
        yield current
        # The bucket after the last one may not be representable (year 9999)
        if current >= end:
            break
        current = next_bucket(current, interval)


def format_bucket(day: date) -> str:
    """Key used for a bucket in every rendering (ISO date of its start)."""
    return day.isoformat()


def resolve_series_domain(
    start_at: datetime | None,
    end_at: datetime | None,
    *,
    floor: datetime,
    now: datetime,
    tz: ZoneInfo,
) -> tuple[date, date] | None:
    """
    Resolve the local date range a time series covers.

    Args:
        start_at: Requested lower bound, or None.
        end_at: Requested upper bound, or None.
        floor: Earliest instant with platform activity. A requested start
            before it is raised to it; a missing start defaults to it.
        now: Default upper bound.
        tz: Platform timezone.

    Returns:
        (first_day, last_day) in local dates, or None when the range is empty
        (for example a window that ends before the platform existed).
    """
    effective_start = max(to_utc(start_at), to_utc(floor)) if start_at else floor
    effective_end = end_at or now

    first_day = local_date(effective_start, tz)
    last_day = local_date(effective_end, tz)
    if first_day > last_day:
        return None
    return first_day, last_day


def dense_series(
    bucket_keys: Iterable[date],
    timestamps: Iterable[datetime],
    interval: Interval,
    tz: ZoneInfo,
) -> dict[date, int]:
    """
    Count timestamps per bucket over a fixed, ordered domain.

    Every domain bucket is present (zero when empty). Timestamps falling
    outside the domain are ignored.

    Args:
        bucket_keys: Ordered bucket start dates making up the domain.
        timestamps: Publication instants, consumed once.
        interval: Bucket granularity.
        tz: Platform timezone.

    Returns:
        Bucket start date -> count, in domain order.
    """
    counts = dict.fromkeys(bucket_keys, 0)
    for ts in timestamps:
        key = bucket_start(local_date(ts, tz), interval)
        if key in counts:
            counts[key] += 1
    return counts


def accumulate(counts: Mapping[date, int], baseline: int = 0) -> dict[date, int]:
    """
    Turn per-bucket counts into running totals.

    Args:
        counts: Ordered bucket -> count mapping.
        baseline: Total already reached before the first bucket.

    Returns:
        Same keys in the same order, non-decreasing values.
    """
    running = baseline
    totals: dict[date, int] = {}
    for key, count in counts.items():
        running += count
        totals[key] = running
    return totals
