"""
Label service - localized titles for the entities stats are grouped by.
"""

from collections.abc import Iterable

from sqlalchemy.orm import Session

from helpers.language import parse_accept_language
from models.schemas import StatsDimension
from repositories.base import BaseRepository
from repositories.idea_status_repository import IdeaStatusRepository
from repositories.project_repository import ProjectRepository
from repositories.topic_repository import TopicRepository
from services.config_service import get_default_locale, get_supported_locales


def resolve_locale(accept_language: str | None) -> str:
    """Pick the label locale for a request, falling back to the platform default."""
    return parse_accept_language(
        accept_language,
        supported=get_supported_locales(),
        default=get_default_locale(),
    )


def localized_title(entity: object, locale: str) -> str:
    """
    Title of a bilingual entity in `locale`.

    Falls back to the other language when the requested one is empty.
    """
    preferred = getattr(entity, f"title_{locale}", None)
    if preferred:
        return preferred
    return getattr(entity, "title_en", None) or getattr(entity, "title_fr", None) or ""


class LabelService:
    """Service for localized dimension labels."""

    @staticmethod
    def _repository(db: Session, dimension: StatsDimension) -> BaseRepository:
        if dimension == StatsDimension.TOPIC:
            return TopicRepository(db)
        if dimension == StatsDimension.STATUS:
            return IdeaStatusRepository(db)
        return ProjectRepository(db)

    @staticmethod
    def titles(
        db: Session, dimension: StatsDimension, ids: Iterable[int], locale: str
    ) -> dict[int, str]:
        """
        Fetch titles for the given group ids.

        Args:
            db: Database session
            dimension: Which entity the ids refer to
            ids: Group ids
            locale: Label locale

        Returns:
            id -> localized title. Ids with no matching row are absent.
        """
        entities = LabelService._repository(db, dimension).get_by_ids(ids)
        return {entity.id: localized_title(entity, locale) for entity in entities}
