"""
Topic repository for database operations.
"""

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class TopicRepository(BaseRepository[db_models.Topic]):
    """Repository for Topic entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Topic, db)

    def get_by_code(self, code: str) -> db_models.Topic | None:
        """Get a topic by its unique code."""
        return (
            self.db.query(db_models.Topic).filter(db_models.Topic.code == code).first()
        )
