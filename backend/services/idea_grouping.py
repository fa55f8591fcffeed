"""Grouping of idea records along a statistics dimension."""

from collections import Counter
from collections.abc import Iterable

from models.schemas import StatsDimension
from repositories.idea_stats_repository import IdeaRecord


def contributions(record: IdeaRecord, dimension: StatsDimension) -> tuple[int, ...]:
    """
    Group keys a single idea counts towards.

    Status and project partition ideas (exactly one key each). Topics fan
    out: an idea counts once for each of its topics, and not at all when it
    has none.
    """
    if dimension == StatsDimension.TOPIC:
        return record.topic_ids
    if dimension == StatsDimension.STATUS:
        return (record.status_id,)
    return (record.project_id,)


def count_by(records: Iterable[IdeaRecord], dimension: StatsDimension) -> Counter[int]:
    """
    Count records per group key.

    Args:
        records: Eligible ideas, consumed once.
        dimension: What to group by.

    Returns:
        Counter of group id -> number of ideas. Groups without ideas are
        absent.
    """
    counts: Counter[int] = Counter()
    for record in records:
        counts.update(contributions(record, dimension))
    return counts


def as_series(counts: Counter[int]) -> dict[str, int]:
    """Render grouped counts as a JSON series keyed by stringified id, in id order."""
    return {str(key): counts[key] for key in sorted(counts)}
