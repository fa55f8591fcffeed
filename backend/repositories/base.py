"""
Base repository class providing common read operations.
"""

from collections.abc import Iterable
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Base repository providing common lookups.

    Type parameter T should be a SQLAlchemy model class with an integer `id`.
    """

    def __init__(self, model: type[T], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get_by_id(self, id: int) -> T | None:
        """
        Get entity by ID.

        Args:
            id: Entity ID

        Returns:
            Entity if found, None otherwise
        """
        return self.db.query(self.model).filter(self.model.id == id).first()

    def get_by_ids(self, ids: Iterable[int]) -> list[T]:
        """
        Get all entities whose ID is in `ids`.

        Unknown IDs are silently skipped.

        Args:
            ids: Entity IDs

        Returns:
            Matching entities ordered by ID
        """
        id_list = sorted(set(ids))
        if not id_list:
            return []
        return (
            self.db.query(self.model)
            .filter(self.model.id.in_(id_list))
            .order_by(self.model.id)
            .all()
        )

    def get_all(self, skip: int = 0, limit: int = 100) -> list[T]:
        """
        Get all entities with pagination.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of entities
        """
        return (
            self.db.query(self.model)
            .order_by(self.model.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        """
        Count total number of entities.

        Returns:
            Total count
        """
        return self.db.query(self.model).count()
