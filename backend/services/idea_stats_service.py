"""
Idea Statistics Service - aggregates behind the /api/stats endpoints.

Nothing is cached: every call recomputes from the current record store, so a
status change or new official feedback shows up on the next request.
"""

from collections import Counter
from dataclasses import replace
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from loguru import logger
from sqlalchemy.orm import Session

from helpers.time_buckets import (
    accumulate,
    dense_series,
    format_bucket,
    iter_buckets,
    local_midnight_utc,
    resolve_series_domain,
)
from models.config import settings
from models.exceptions import InvalidIntervalException
from models.schemas import (
    IdeasByProjectResponse,
    IdeasCountResponse,
    IdeasSeries,
    IdeasSeriesResponse,
    StatsDimension,
)
from models.stats_filters import IdeaFilterSpec
from repositories.idea_stats_repository import IdeaStatsRepository
from services.config_service import get_platform_created_at
from services.idea_grouping import as_series, count_by
from services.label_service import LabelService


class IdeaStatsService:
    """Service for idea statistics."""

    @staticmethod
    def count_ideas(db: Session, spec: IdeaFilterSpec) -> IdeasCountResponse:
        """
        Count eligible ideas.

        Args:
            db: Database session
            spec: Filters

        Returns:
            IdeasCountResponse
        """
        count = IdeaStatsRepository.count(db, spec)
        logger.debug("Counted {} ideas for {}", count, spec.describe())
        return IdeasCountResponse(count=count)

    @staticmethod
    def group_counts(
        db: Session, spec: IdeaFilterSpec, dimension: StatsDimension
    ) -> Counter[int]:
        """
        Count eligible ideas per topic, status or project.

        The filter on the grouped dimension itself is dropped: grouping by
        topic ignores `topic_id` and grouping by project ignores `project_id`.
        """
        if dimension == StatsDimension.TOPIC:
            spec = replace(spec, topic_id=None)
        elif dimension == StatsDimension.PROJECT:
            spec = replace(spec, project_id=None)

        records = IdeaStatsRepository.iter_records(
            db, spec, batch_size=settings.STATS_STREAM_BATCH_SIZE
        )
        counts = count_by(records, dimension)
        logger.debug(
            "Grouped ideas by {}: {} groups for {}",
            dimension.value,
            len(counts),
            spec.describe(),
        )
        return counts

    @staticmethod
    def ideas_by_topic(db: Session, spec: IdeaFilterSpec) -> IdeasSeriesResponse:
        """Ideas per topic. An idea with several topics counts for each of them."""
        counts = IdeaStatsService.group_counts(db, spec, StatsDimension.TOPIC)
        return IdeasSeriesResponse(series=IdeasSeries(ideas=as_series(counts)))

    @staticmethod
    def ideas_by_status(db: Session, spec: IdeaFilterSpec) -> IdeasSeriesResponse:
        """Ideas per current status."""
        counts = IdeaStatsService.group_counts(db, spec, StatsDimension.STATUS)
        return IdeasSeriesResponse(series=IdeasSeries(ideas=as_series(counts)))

    @staticmethod
    def ideas_by_project(
        db: Session, spec: IdeaFilterSpec, locale: str
    ) -> IdeasByProjectResponse:
        """
        Ideas per project, with the project titles needed to present them.

        Args:
            db: Database session
            spec: Filters (project filter ignored)
            locale: Locale of the returned titles

        Returns:
            IdeasByProjectResponse
        """
        counts = IdeaStatsService.group_counts(db, spec, StatsDimension.PROJECT)
        titles = LabelService.titles(db, StatsDimension.PROJECT, counts, locale)
        return IdeasByProjectResponse(
            series=IdeasSeries(ideas=as_series(counts)),
            projects={str(key): titles.get(key, "") for key in sorted(counts)},
        )

    @staticmethod
    def series_floor(db: Session, spec: IdeaFilterSpec, now: datetime) -> datetime:
        """
        Earliest instant a series may start at.

        The platform launch date or the first eligible publication, whichever
        comes first; `now` when neither is known.
        """
        candidates = [
            ts
            for ts in (
                get_platform_created_at(),
                IdeaStatsRepository.first_published_at(db, spec),
            )
            if ts is not None
        ]
        return min(candidates) if candidates else now

    @staticmethod
    def time_counts(
        db: Session,
        spec: IdeaFilterSpec,
        tz: ZoneInfo,
        *,
        cumulative: bool = False,
        now: datetime | None = None,
    ) -> dict[date, int] | None:
        """
        Count eligible ideas per time bucket.

        Args:
            db: Database session
            spec: Filters; `interval` must be set
            tz: Platform timezone
            cumulative: Report running totals instead of per-bucket counts
            now: Reference time for a missing `end_at` (defaults to now)

        Returns:
            Dense, ordered bucket start -> count mapping, or None when the
            requested window contains no bucket at all.

        Raises:
            InvalidIntervalException: If `spec.interval` is unset.
        """
        if spec.interval is None:
            raise InvalidIntervalException(None)

        now = now or datetime.now(timezone.utc)
        floor = IdeaStatsService.series_floor(db, spec, now)
        domain = resolve_series_domain(
            spec.start_at, spec.end_at, floor=floor, now=now, tz=tz
        )
        if domain is None:
            logger.info(
                "Empty time series domain for {} (floor {})",
                spec.describe(),
                floor.isoformat(),
            )
            return None

        buckets = list(iter_buckets(*domain, spec.interval))

        if cumulative:
            # Running totals start from everything published before the
            # first bucket, so the count window opens at that bucket.
            window_start = local_midnight_utc(buckets[0], tz)
            baseline = IdeaStatsRepository.count_published_before(
                db, spec, window_start
            )
            stream_spec = spec.with_bounds(window_start, spec.end_at)
        else:
            baseline = 0
            stream_spec = spec

        timestamps = IdeaStatsRepository.iter_published_at(
            db, stream_spec, batch_size=settings.STATS_STREAM_BATCH_SIZE
        )
        counts = dense_series(buckets, timestamps, spec.interval, tz)

        logger.debug(
            "Built {} {} buckets ({}) for {}",
            len(buckets),
            spec.interval.value,
            "cumulative" if cumulative else "per bucket",
            spec.describe(),
        )
        return accumulate(counts, baseline) if cumulative else counts

    @staticmethod
    def ideas_by_time(
        db: Session,
        spec: IdeaFilterSpec,
        tz: ZoneInfo,
        *,
        cumulative: bool = False,
        now: datetime | None = None,
    ) -> IdeasSeriesResponse:
        """
        Ideas per time bucket, keyed by the ISO date the bucket starts on.

        An empty window yields an empty series rather than an error.
        """
        counts = IdeaStatsService.time_counts(
            db, spec, tz, cumulative=cumulative, now=now
        )
        ideas = (
            {format_bucket(day): count for day, count in counts.items()}
            if counts
            else {}
        )
        return IdeasSeriesResponse(series=IdeasSeries(ideas=ideas))
