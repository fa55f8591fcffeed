"""
Project repository for database operations.
"""

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class ProjectRepository(BaseRepository[db_models.Project]):
    """Repository for Project entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize project repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.Project, db)
