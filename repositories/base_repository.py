"""
Base repository with common CRUD operations.

Provides a foundation for all domain-specific repositories.
"""

from typing import TypeVar, Generic, Optional, Type, Any
from sqlmodel import Session, SQLModel

T = TypeVar("T", bound=SQLModel)


class BaseRepository(Generic[T]):
    """
    Generic base repository with common CRUD operations.

    Type Parameters:
        T: SQLModel entity type
    """

    def __init__(self, db_session: Session, model_class: Type[T]):
        """
        Initialize repository.

        Args:
            db_session: SQLModel database session
            model_class: The SQLModel class this repository manages
        """
        self.db = db_session
        self.model_class = model_class

    def get_by_id(self, id: Any) -> Optional[T]:
        """
        Get entity by primary key.

        Returns:
            Entity if found, None otherwise
        """
        return self.db.get(self.model_class, id)

    def save(self, entity: T) -> T:
        """
        Insert or update an entity and commit.

        Args:
            entity: New or modified entity

        Returns:
            The entity refreshed from the database
        """
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity
