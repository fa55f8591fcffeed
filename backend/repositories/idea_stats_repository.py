"""
Idea Statistics Repository - read-only queries behind the stats endpoints.

Every query goes through `eligibility_criteria`, the single place where the
filter set is turned into SQL. Ideas of native-survey projects and
unpublished drafts are always excluded.

This does NOT extend BaseRepository: it aggregates
across ideas, projects, topics, memberships and feedback and never writes.
"""

from collections.abc import Iterator
from datetime import datetime
from itertools import groupby
from typing import Any, NamedTuple

from sqlalchemy import false, func, select
from sqlalchemy.orm import Session

from helpers.time_buckets import to_naive_utc, to_utc
from models.stats_filters import IdeaFilterSpec
from repositories.db_models import (
    Idea,
    IdeaStatus,
    IdeaTopic,
    Membership,
    Project,
    ProjectType,
)


# Largest value an INTEGER primary key can hold
MAX_SQL_ID = 2**63 - 1


class IdeaRecord(NamedTuple):
    """Snapshot of the idea fields the statistics engine groups on."""

    id: int
    project_id: int
    status_id: int
    published_at: datetime
    topic_ids: tuple[int, ...]


def eligibility_criteria(spec: IdeaFilterSpec) -> list[Any]:
    """
    Build the SQL criteria deciding whether an idea counts for `spec`.

    All criteria are meant to be combined with AND. Unknown project, group
    or topic ids simply match nothing.

    Args:
        spec: Normalized filter set.

    Returns:
        List of SQLAlchemy boolean clauses over `Idea`.
    """
    criteria: list[Any] = [
        Idea.published_at.is_not(None),
        Idea.project_id.in_(
            select(Project.id).where(Project.project_type != ProjectType.NATIVE_SURVEY)
        ),
    ]

    if any(
        value is not None and value > MAX_SQL_ID
        for value in (spec.project_id, spec.group_id, spec.topic_id)
    ):
        # No row can carry that id; binding it would overflow the driver
        return [*criteria, false()]

    if spec.start_at is not None:
        criteria.append(Idea.published_at >= to_naive_utc(spec.start_at))
    if spec.end_at is not None:
        criteria.append(Idea.published_at <= to_naive_utc(spec.end_at))

    if spec.project_id is not None:
        criteria.append(Idea.project_id == spec.project_id)

    if spec.group_id is not None:
        # NULL author_id never satisfies IN, so anonymous ideas drop out
        criteria.append(
            Idea.author_id.in_(
                select(Membership.user_id).where(Membership.group_id == spec.group_id)
            )
        )

    if spec.topic_id is not None:
        # Subquery rather than join: the idea keeps all of its topics
        criteria.append(
            Idea.id.in_(
                select(IdeaTopic.idea_id).where(IdeaTopic.topic_id == spec.topic_id)
            )
        )

    if spec.feedback_needed:
        criteria.append(
            Idea.idea_status_id.in_(
                select(IdeaStatus.id).where(IdeaStatus.requires_feedback.is_(True))
            )
        )
        criteria.append(~Idea.official_feedbacks.any())

    return criteria


class IdeaStatsRepository:
    """Repository for idea statistics."""

    @staticmethod
    def count(db: Session, spec: IdeaFilterSpec) -> int:
        """
        Count eligible ideas.

        Returns:
            Number of ideas matching every filter in `spec`.
        """
        return (
            db.query(func.count(Idea.id)).filter(*eligibility_criteria(spec)).scalar()
            or 0
        )

    @staticmethod
    def count_published_before(
        db: Session, spec: IdeaFilterSpec, before: datetime
    ) -> int:
        """
        Count ideas matching the non-time filters of `spec`, published
        strictly before `before`.
        """
        return (
            db.query(func.count(Idea.id))
            .filter(
                *eligibility_criteria(spec.without_bounds()),
                Idea.published_at < to_naive_utc(before),
            )
            .scalar()
            or 0
        )

    @staticmethod
    def first_published_at(db: Session, spec: IdeaFilterSpec) -> datetime | None:
        """
        Earliest publication time among ideas matching the non-time filters.

        Returns:
            Aware UTC datetime, or None when nothing matches.
        """
        earliest = (
            db.query(func.min(Idea.published_at))
            .filter(*eligibility_criteria(spec.without_bounds()))
            .scalar()
        )
        return to_utc(earliest) if earliest is not None else None

    @staticmethod
    def iter_records(
        db: Session, spec: IdeaFilterSpec, batch_size: int = 1000
    ) -> Iterator[IdeaRecord]:
        """
        Stream eligible ideas with their topic sets.

        Rows are fetched `batch_size` at a time and folded per idea, so
        memory stays bounded whatever the number of matching ideas.

        Args:
            db: Database session
            spec: Normalized filter set
            batch_size: Rows per fetch

        Yields:
            One IdeaRecord per eligible idea, in id order.
        """
        rows = (
            db.query(
                Idea.id,
                Idea.project_id,
                Idea.idea_status_id,
                Idea.published_at,
                IdeaTopic.topic_id,
            )
            .outerjoin(IdeaTopic, IdeaTopic.idea_id == Idea.id)
            .filter(*eligibility_criteria(spec))
            .order_by(Idea.id, IdeaTopic.topic_id)
            .yield_per(batch_size)
        )

        for _, idea_rows in groupby(rows, key=lambda row: row.id):
            first, *rest = idea_rows
            topic_ids = tuple(
                row.topic_id for row in (first, *rest) if row.topic_id is not None
            )
            yield IdeaRecord(
                id=first.id,
                project_id=first.project_id,
                status_id=first.idea_status_id,
                published_at=to_utc(first.published_at),
                topic_ids=topic_ids,
            )

    @staticmethod
    def iter_published_at(
        db: Session, spec: IdeaFilterSpec, batch_size: int = 1000
    ) -> Iterator[datetime]:
        """
        Stream the publication times of eligible ideas (aware UTC).

        Cheaper than `iter_records` for time series, which need nothing else.
        """
        rows = (
            db.query(Idea.published_at)
            .filter(*eligibility_criteria(spec))
            .order_by(Idea.published_at)
            .yield_per(batch_size)
        )
        for (published_at,) in rows:
            yield to_utc(published_at)
