"""
Stats filter builder - turns raw query parameters into an IdeaFilterSpec.

Parsing is lenient: blank or unparseable values mean "no filter" on that
criterion. The one exception is `interval`, which time-series queries need
and which is therefore validated strictly.
"""

from datetime import date, datetime, time, timezone
from zoneinfo import ZoneInfo

from loguru import logger

from models.exceptions import InvalidIntervalException
from models.schemas import Interval
from models.stats_filters import IdeaFilterSpec

TRUTHY_VALUES = frozenset({"true", "1", "yes", "on"})


def _is_bare_date(value: str) -> bool:
    return len(value) == 10 and value[4] == "-" and value[7] == "-"


def parse_timestamp(
    value: str | None, tz: ZoneInfo, *, end_of_day: bool = False
) -> datetime | None:
    """
    Parse an ISO-8601 timestamp into an aware UTC datetime.

    Args:
        value: Raw parameter value.
        tz: Platform timezone, applied when the value carries no offset.
        end_of_day: For bare dates ("2024-03-01"), resolve to the last
            instant of that local day instead of its first.

    Returns:
        Aware UTC datetime, or None for blank or invalid input.
    """
    if value is None:
        return None
    raw = value.strip()
    if not raw:
        return None

    # fromisoformat only learned the "Z" suffix in 3.11
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"

    try:
        if _is_bare_date(raw):
            day = date.fromisoformat(raw)
            parsed = datetime.combine(day, time.max if end_of_day else time.min)
        else:
            parsed = datetime.fromisoformat(raw)
    except ValueError:
        logger.debug("Ignoring unparseable timestamp filter: {}", value)
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    try:
        utc = parsed.astimezone(timezone.utc)
        # Bucketing reads the bound back in the platform timezone
        utc.astimezone(tz)
    except OverflowError:
        logger.debug("Ignoring out-of-range timestamp filter: {}", value)
        return None
    return utc


def parse_id(value: str | None) -> int | None:
    """
    Parse an entity id; anything that is not a positive integer is unset.

    Ids too large for the database are kept: they name no row, so the
    filter matches nothing.
    """
    if value is None:
        return None
    try:
        parsed = int(value.strip())
    except ValueError:
        logger.debug("Ignoring malformed id filter: {}", value)
        return None
    return parsed if parsed > 0 else None


def parse_flag(value: str | None) -> bool:
    """Parse a boolean flag (true/1/yes/on, case-insensitive)."""
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def parse_interval(value: str | None) -> Interval:
    """
    Parse the bucket interval.

    Raises:
        InvalidIntervalException: If the value is missing or not one of
            day, week, month, year.
    """
    if value is None or not value.strip():
        raise InvalidIntervalException(None)
    try:
        return Interval(value.strip().lower())
    except ValueError as e:
        raise InvalidIntervalException(value) from e


def build_filter_spec(
    *,
    start_at: str | None = None,
    end_at: str | None = None,
    project: str | None = None,
    group: str | None = None,
    topic: str | None = None,
    feedback_needed: str | None = None,
    interval: str | None = None,
    require_interval: bool = False,
    tz: ZoneInfo,
) -> IdeaFilterSpec:
    """
    Build a normalized filter spec from raw request parameters.

    Args:
        start_at: Inclusive lower bound on publication time.
        end_at: Inclusive upper bound on publication time. A bare date
            covers that whole local day.
        project: Project id.
        group: User group id (restricts to ideas authored by members).
        topic: Topic id.
        feedback_needed: Truthy string to keep only ideas awaiting
            official feedback.
        interval: Bucket granularity for time series.
        require_interval: Whether `interval` must be present and valid.
        tz: Platform timezone.

    Returns:
        IdeaFilterSpec

    Raises:
        InvalidIntervalException: If `require_interval` and the interval is
            missing or invalid.
    """
    spec = IdeaFilterSpec(
        start_at=parse_timestamp(start_at, tz),
        end_at=parse_timestamp(end_at, tz, end_of_day=True),
        project_id=parse_id(project),
        group_id=parse_id(group),
        topic_id=parse_id(topic),
        feedback_needed=parse_flag(feedback_needed),
        interval=parse_interval(interval) if require_interval else None,
    )
    logger.debug("Built idea stats filter: {}", spec.describe())
    return spec
