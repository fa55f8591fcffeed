"""
Tests for IdeaStatsService.
"""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from models.exceptions import InvalidIntervalException
from models.schemas import Interval, StatsDimension
from models.stats_filters import IdeaFilterSpec
from services.idea_stats_service import IdeaStatsService
from services.stats_filter_builder import build_filter_spec

MONTREAL = ZoneInfo("America/Montreal")
NOW = datetime(2024, 5, 1, 12, tzinfo=timezone.utc)


def _spec(**params) -> IdeaFilterSpec:
    return build_filter_spec(tz=MONTREAL, **params)


def _year_2023(**params) -> IdeaFilterSpec:
    return _spec(start_at="2023-01-01", end_at="2023-12-31", **params)


class TestCountIdeas:
    def test_counts_published_ideation_ideas(self, db_session, stats_scenario) -> None:
        result = IdeaStatsService.count_ideas(db_session, _spec())
        assert result.count == 7

    def test_feedback_needed(self, db_session, stats_scenario) -> None:
        result = IdeaStatsService.count_ideas(db_session, _spec(feedback_needed="true"))
        assert result.count == 6

    def test_time_window(self, db_session, stats_scenario) -> None:
        assert IdeaStatsService.count_ideas(db_session, _year_2023()).count == 6

    def test_empty_database(self, db_session) -> None:
        assert IdeaStatsService.count_ideas(db_session, _spec()).count == 0


class TestGroupedCounts:
    def test_by_topic_fans_out(self, db_session, stats_scenario) -> None:
        result = IdeaStatsService.ideas_by_topic(db_session, _year_2023())

        assert result.series.ideas == {
            str(stats_scenario["topic_a"].id): 2,
            str(stats_scenario["topic_b"].id): 4,
        }

    def test_by_topic_ignores_topic_filter(self, db_session, stats_scenario) -> None:
        topic_a = stats_scenario["topic_a"]
        filtered = IdeaStatsService.ideas_by_topic(
            db_session, _year_2023(topic=str(topic_a.id))
        )
        unfiltered = IdeaStatsService.ideas_by_topic(db_session, _year_2023())

        assert filtered == unfiltered

    def test_by_status(self, db_session, stats_scenario, proposed_status) -> None:
        result = IdeaStatsService.ideas_by_status(db_session, _year_2023())
        assert result.series.ideas == {str(proposed_status.id): 6}

    def test_by_status_reflects_current_status(
        self, db_session, stats_scenario, accepted_status, make_idea
    ) -> None:
        idea = make_idea(stats_scenario["project2"], datetime(2023, 8, 1, 12))
        idea.idea_status_id = accepted_status.id
        db_session.commit()

        result = IdeaStatsService.ideas_by_status(db_session, _year_2023())

        assert result.series.ideas[str(accepted_status.id)] == 1
        assert sum(result.series.ideas.values()) == 7

    def test_by_project_with_titles(self, db_session, stats_scenario) -> None:
        project1 = stats_scenario["project1"]
        project2 = stats_scenario["project2"]

        result = IdeaStatsService.ideas_by_project(db_session, _year_2023(), "en")

        assert result.series.ideas == {str(project1.id): 5, str(project2.id): 1}
        assert result.projects == {str(project1.id): "Parks", str(project2.id): "Streets"}

    def test_by_project_ignores_project_filter(
        self, db_session, stats_scenario
    ) -> None:
        spec = _year_2023(project=str(stats_scenario["project2"].id))
        result = IdeaStatsService.ideas_by_project(db_session, spec, "fr")

        assert sum(result.series.ideas.values()) == 6
        assert result.projects[str(stats_scenario["project1"].id)] == "Parks (fr)"

    def test_group_counts_match_partition(self, db_session, stats_scenario) -> None:
        total = IdeaStatsService.count_ideas(db_session, _spec()).count
        for dimension in (StatsDimension.STATUS, StatsDimension.PROJECT):
            counts = IdeaStatsService.group_counts(db_session, _spec(), dimension)
            assert sum(counts.values()) == total

    def test_small_batches(self, db_session, stats_scenario, monkeypatch) -> None:
        from models.config import settings

        monkeypatch.setattr(settings, "STATS_STREAM_BATCH_SIZE", 1)
        result = IdeaStatsService.ideas_by_topic(db_session, _year_2023())

        assert sum(result.series.ideas.values()) == 6


class TestIdeasByTime:
    def test_daily_series_over_a_year(self, db_session, stats_scenario) -> None:
        spec = _year_2023(interval="day", require_interval=True)

        result = IdeaStatsService.ideas_by_time(db_session, spec, MONTREAL, now=NOW)
        ideas = result.series.ideas

        assert len(ideas) == 365
        assert sum(ideas.values()) == 6
        assert list(ideas)[0] == "2023-01-01"
        assert list(ideas)[-1] == "2023-12-31"
        assert ideas["2023-03-01"] == 2
        assert ideas["2023-06-01"] == 4

    def test_keys_are_ascending(self, db_session, stats_scenario) -> None:
        spec = _year_2023(interval="week", require_interval=True)

        keys = list(
            IdeaStatsService.ideas_by_time(db_session, spec, MONTREAL, now=NOW)
            .series.ideas
        )

        assert keys == sorted(keys)
        assert keys[0] == "2022-12-26"
        assert all(date.fromisoformat(k).weekday() == 0 for k in keys)

    def test_monthly_buckets(self, db_session, stats_scenario) -> None:
        spec = _year_2023(interval="month", require_interval=True)

        ideas = IdeaStatsService.ideas_by_time(
            db_session, spec, MONTREAL, now=NOW
        ).series.ideas

        assert len(ideas) == 12
        assert ideas["2023-03-01"] == 2
        assert ideas["2023-06-01"] == 4

    def test_window_before_platform_existed(self, db_session, stats_scenario) -> None:
        spec = _spec(
            start_at="2010-01-01", end_at="2010-01-02", interval="day",
            require_interval=True,
        )

        result = IdeaStatsService.ideas_by_time(db_session, spec, MONTREAL, now=NOW)

        assert result.model_dump() == {"series": {"ideas": {}}}

    def test_no_start_begins_at_platform_creation(
        self, db_session, stats_scenario
    ) -> None:
        spec = _spec(end_at="2020-01-31", interval="day", require_interval=True)

        ideas = IdeaStatsService.ideas_by_time(
            db_session, spec, MONTREAL, now=NOW
        ).series.ideas

        assert list(ideas)[0] == "2020-01-01"
        assert len(ideas) == 31

    def test_interval_is_required(self, db_session) -> None:
        with pytest.raises(InvalidIntervalException):
            IdeaStatsService.ideas_by_time(db_session, _spec(), MONTREAL)

    def test_empty_database_defaults_to_now(self, db_session) -> None:
        spec = IdeaFilterSpec(interval=Interval.DAY)

        ideas = IdeaStatsService.ideas_by_time(
            db_session, spec, MONTREAL, now=NOW
        ).series.ideas

        # Platform created 2020-01-01, nothing published
        assert list(ideas)[0] == "2020-01-01"
        assert set(ideas.values()) == {0}


class TestIdeasByTimeCumulative:
    def _values(self, db_session, **params) -> list[int]:
        spec = _spec(interval="day", require_interval=True, **params)
        result = IdeaStatsService.ideas_by_time(
            db_session, spec, MONTREAL, cumulative=True, now=NOW
        )
        return list(result.series.ideas.values())

    def test_full_window_includes_earlier_ideas(
        self, db_session, stats_scenario
    ) -> None:
        values = self._values(
            db_session, start_at="2023-01-01", end_at="2023-12-31"
        )

        assert len(values) == 365
        assert values[0] == 1
        assert values == sorted(values)
        assert values[-1] == 7

    @pytest.mark.parametrize(
        "bounds",
        [
            {"start_at": "2023-01-01"},
            {"start_at": "2023-01-01", "end_at": ""},
            {"end_at": "2023-12-31"},
            {},
        ],
    )
    def test_last_value_is_total(self, db_session, stats_scenario, bounds) -> None:
        values = self._values(db_session, **bounds)

        assert values == sorted(values)
        assert values[-1] == 7

    def test_matches_plain_count_under_filters(
        self, db_session, stats_scenario
    ) -> None:
        project1 = str(stats_scenario["project1"].id)
        values = self._values(db_session, end_at="2023-12-31", project=project1)
        count = IdeaStatsService.count_ideas(
            db_session, _spec(end_at="2023-12-31", project=project1)
        ).count

        assert values[-1] == count == 5

    def test_weekly_start_mid_week_counts_whole_first_week(
        self, db_session, stats_scenario
    ) -> None:
        # 2023-03-02 is a Thursday; the Mar 1st ideas fall in the same week
        spec = _spec(
            start_at="2023-03-02", end_at="2023-03-31", interval="week",
            require_interval=True,
        )

        ideas = IdeaStatsService.ideas_by_time(
            db_session, spec, MONTREAL, cumulative=True, now=NOW
        ).series.ideas

        assert ideas["2023-02-27"] == 3
        assert list(ideas.values())[-1] == 3
