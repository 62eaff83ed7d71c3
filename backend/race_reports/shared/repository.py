"""
Base repository with common CRUD operations.

Provides generic database operations for all feature repositories.
Uses a synchronous SQLAlchemy session: the results engine runs as a
single synchronous pass and persists once at the end.

Usage:
    class ReportRepository(BaseRepository[Report]):
        def __init__(self, db: Session):
            super().__init__(db, Report)

        def get_by_name(self, nombre: str) -> Report | None:
            return self.get_by(nombre=nombre)
"""

from typing import TypeVar, Generic, Type
from sqlalchemy import select, func
from sqlalchemy.orm import Session

T = TypeVar("T")


class BaseRepository(Generic[T]):
    """
    Base repository for database operations.

    Provides common CRUD methods that can be inherited by feature repositories.
    """

    def __init__(self, db: Session, model: Type[T]):
        """
        Initialize repository.

        Args:
            db: Database session
            model: SQLAlchemy model class
        """
        self.db = db
        self.model = model

    def get_by_id(self, id: str | int) -> T | None:
        """
        Get entity by primary key ID.

        Args:
            id: Primary key value (string UUID or integer)

        Returns:
            Entity if found, None otherwise
        """
        result = self.db.execute(
            select(self.model).where(self.model.id == id)
        )
        return result.scalar_one_or_none()

    def get_by(self, **kwargs) -> T | None:
        """
        Get single entity by arbitrary field values.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            First matching entity or None
        """
        query = select(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = self.db.execute(query)
        return result.scalars().first()

    def create(self, **kwargs) -> T:
        """
        Create new entity.

        Args:
            **kwargs: Field values for new entity

        Returns:
            Created entity with generated ID
        """
        entity = self.model(**kwargs)
        self.db.add(entity)
        self.db.flush()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """
        Delete entity.

        Args:
            entity: Entity to delete
        """
        self.db.delete(entity)
        self.db.flush()

    def count(self, **kwargs) -> int:
        """
        Count entities matching criteria.

        Args:
            **kwargs: Field name-value pairs to filter by

        Returns:
            Number of matching entities
        """
        query = select(func.count()).select_from(self.model)
        for key, value in kwargs.items():
            query = query.where(getattr(self.model, key) == value)
        result = self.db.execute(query)
        return result.scalar() or 0
