"""Tests for grouping idea records by dimension."""

from datetime import datetime, timezone

from models.schemas import StatsDimension
from repositories.idea_stats_repository import IdeaRecord
from services.idea_grouping import as_series, contributions, count_by

PUBLISHED = datetime(2023, 3, 1, tzinfo=timezone.utc)


def _record(idea_id: int, project_id: int, status_id: int, topics=()) -> IdeaRecord:
    return IdeaRecord(
        id=idea_id,
        project_id=project_id,
        status_id=status_id,
        published_at=PUBLISHED,
        topic_ids=tuple(topics),
    )


RECORDS = [
    _record(1, project_id=10, status_id=1, topics=(100, 200)),
    _record(2, project_id=10, status_id=2, topics=(100,)),
    _record(3, project_id=20, status_id=1),
]


class TestContributions:
    def test_topic_fans_out(self) -> None:
        assert contributions(RECORDS[0], StatsDimension.TOPIC) == (100, 200)

    def test_idea_without_topics_contributes_nothing(self) -> None:
        assert contributions(RECORDS[2], StatsDimension.TOPIC) == ()

    def test_status_and_project_partition(self) -> None:
        assert contributions(RECORDS[1], StatsDimension.STATUS) == (2,)
        assert contributions(RECORDS[1], StatsDimension.PROJECT) == (10,)


class TestCountBy:
    def test_partition_sums_to_number_of_ideas(self) -> None:
        for dimension in (StatsDimension.STATUS, StatsDimension.PROJECT):
            assert sum(count_by(RECORDS, dimension).values()) == len(RECORDS)

    def test_topic_counts(self) -> None:
        assert count_by(RECORDS, StatsDimension.TOPIC) == {100: 2, 200: 1}

    def test_consumes_generators(self) -> None:
        counts = count_by((r for r in RECORDS), StatsDimension.PROJECT)
        assert counts == {10: 2, 20: 1}

    def test_empty(self) -> None:
        assert count_by([], StatsDimension.STATUS) == {}


def test_as_series_uses_string_keys_in_id_order() -> None:
    counts = count_by(RECORDS, StatsDimension.PROJECT)
    assert as_series(counts) == {"10": 2, "20": 1}
    assert list(as_series(count_by(reversed(RECORDS), StatsDimension.PROJECT))) == [
        "10",
        "20",
    ]
