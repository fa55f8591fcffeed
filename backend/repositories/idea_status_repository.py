"""
Idea status repository for database operations.
"""

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class IdeaStatusRepository(BaseRepository[db_models.IdeaStatus]):
    """Repository for IdeaStatus entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.IdeaStatus, db)

    def get_by_code(self, code: str) -> db_models.IdeaStatus | None:
        """Get a status by its unique code."""
        return (
            self.db.query(db_models.IdeaStatus)
            .filter(db_models.IdeaStatus.code == code)
            .first()
        )
