"""Initialize the database with default idea statuses, topics and an admin user."""

from sqlalchemy.orm import Session

from authentication.auth import get_password_hash
from models.config import settings
from repositories.database import Base, SessionLocal, engine
from repositories.db_models import IdeaStatus, Topic, User
from repositories.idea_status_repository import IdeaStatusRepository
from repositories.topic_repository import TopicRepository


def get_default_statuses() -> list[dict]:
    """Default idea workflow, in display order.

    Only `proposed` expects an official answer: ideas sitting there without
    feedback are the ones the `feedback_needed` filter surfaces.
    """
    return [
        {
            "code": "proposed",
            "title_en": "Proposed",
            "title_fr": "Proposée",
            "requires_feedback": True,
        },
        {
            "code": "under_review",
            "title_en": "Under review",
            "title_fr": "En analyse",
            "requires_feedback": False,
        },
        {
            "code": "accepted",
            "title_en": "Accepted",
            "title_fr": "Acceptée",
            "requires_feedback": False,
        },
        {
            "code": "implemented",
            "title_en": "Implemented",
            "title_fr": "Réalisée",
            "requires_feedback": False,
        },
        {
            "code": "rejected",
            "title_en": "Rejected",
            "title_fr": "Refusée",
            "requires_feedback": False,
        },
    ]


def get_default_topics() -> list[dict]:
    """Generic topics that work for any city or organization."""
    return [
        {"code": "mobility", "title_en": "Mobility", "title_fr": "Mobilité"},
        {"code": "environment", "title_en": "Environment", "title_fr": "Environnement"},
        {"code": "culture", "title_en": "Culture & Events", "title_fr": "Culture et événements"},
        {"code": "public_spaces", "title_en": "Public Spaces", "title_fr": "Espaces publics"},
        {"code": "community", "title_en": "Community & Social", "title_fr": "Communauté et social"},
    ]


def seed_defaults(db: Session) -> dict[str, int]:
    """Insert missing statuses, topics and the admin user.

    Existing rows (matched by code or email) are left untouched, so running
    this twice is harmless.

    Returns:
        Number of rows created per kind.
    """
    created = {"statuses": 0, "topics": 0, "admins": 0}

    status_repo = IdeaStatusRepository(db)
    for ordering, status in enumerate(get_default_statuses()):
        if status_repo.get_by_code(status["code"]) is None:
            db.add(IdeaStatus(ordering=ordering, **status))
            created["statuses"] += 1

    topic_repo = TopicRepository(db)
    for topic in get_default_topics():
        if topic_repo.get_by_code(topic["code"]) is None:
            db.add(Topic(**topic))
            created["topics"] += 1

    existing_admin = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
    if not existing_admin:
        db.add(
            User(
                email=settings.ADMIN_EMAIL,
                username="admin",
                display_name="Administrator",
                hashed_password=get_password_hash(settings.ADMIN_PASSWORD),
                is_global_admin=True,
            )
        )
        created["admins"] += 1

    db.commit()
    return created


def init_db() -> None:
    """Create tables and seed default data."""
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        created = seed_defaults(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

    print(f"[OK] Idea statuses created: {created['statuses']}")
    print(f"[OK] Topics created: {created['topics']}")
    if created["admins"]:
        print("[OK] Admin user created")
        print(f"  Email: {settings.ADMIN_EMAIL}")
        print("  Password: (from ADMIN_PASSWORD in .env)")
        print("  IMPORTANT: Change this password in production!")

    print("\n[OK] Database initialization complete!")


if __name__ == "__main__":
    init_db()
