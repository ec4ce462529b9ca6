"""
Base repository class providing common database operations.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from repositories.database import Base

T = TypeVar("T", bound=Base)  # type: ignore[type-arg]


class BaseRepository(Generic[T]):
    """
    Common CRUD operations shared by all repositories.

    Type parameter T should be a SQLAlchemy model class with an ``id`` column.
    """

    def __init__(self, model: type[T], db: Session):
        self.model = model
        self.db = db

    def get_by_id(self, id: int | str) -> T | None:
        """Return the entity with this primary key, or None."""
        return self.db.query(self.model).filter(self.model.id == id).first()

    def create(self, entity: T) -> T:
        """
        Persist a new entity.

        Args:
            entity: Entity to create

        Returns:
            Created entity, refreshed from the database
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: T) -> T:
        """
        Commit pending attribute changes on an entity.

        Args:
            entity: Entity to update

        Returns:
            Updated entity
        """
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity: T) -> None:
        """Delete entity and commit."""
        self.db.delete(entity)
        self.db.commit()

    def count(self) -> int:
        """Count all rows of this model."""
        return self.db.query(self.model).count()
