"""Tests for default data seeding."""

import pytest

from init_db import get_default_statuses, get_default_topics, seed_defaults
from models.config import settings
from repositories.db_models import IdeaStatus, Topic, User


class TestDefaults:
    def test_status_codes_are_unique(self) -> None:
        codes = [s["code"] for s in get_default_statuses()]
        assert len(codes) == len(set(codes))

    def test_only_proposed_requires_feedback(self) -> None:
        needing = [s["code"] for s in get_default_statuses() if s["requires_feedback"]]
        assert needing == ["proposed"]

    @pytest.mark.parametrize("loader", [get_default_statuses, get_default_topics])
    def test_entries_are_bilingual(self, loader) -> None:
        for entry in loader():
            assert entry["title_en"]
            assert entry["title_fr"]


class TestSeedDefaults:
    def test_seeds_empty_database(self, db_session) -> None:
        created = seed_defaults(db_session)

        assert created == {
            "statuses": len(get_default_statuses()),
            "topics": len(get_default_topics()),
            "admins": 1,
        }
        admin = db_session.query(User).filter(User.email == settings.ADMIN_EMAIL).one()
        assert admin.is_global_admin

    def test_statuses_keep_declared_order(self, db_session) -> None:
        seed_defaults(db_session)

        ordered = db_session.query(IdeaStatus).order_by(IdeaStatus.ordering).all()
        assert [s.code for s in ordered] == [s["code"] for s in get_default_statuses()]

    def test_second_run_creates_nothing(self, db_session) -> None:
        seed_defaults(db_session)

        created = seed_defaults(db_session)

        assert created == {"statuses": 0, "topics": 0, "admins": 0}
        assert db_session.query(Topic).count() == len(get_default_topics())

    def test_keeps_existing_rows(self, db_session, proposed_status) -> None:
        proposed_status.title_en = "Submitted"
        db_session.commit()

        created = seed_defaults(db_session)

        assert created["statuses"] == len(get_default_statuses()) - 1
        assert db_session.get(IdeaStatus, proposed_status.id).title_en == "Submitted"
