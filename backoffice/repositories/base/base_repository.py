"""
Base repository: one model, one session, and soft-delete aware
statement helpers shared by the domain repositories.
"""

from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from backoffice.models.base import BaseModel, SoftDeleteModel

# Type variable for model classes
ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseRepository(Generic[ModelType]):
    """
    Base repository bound to one model and one session.
    """

    def __init__(self, model: Type[ModelType], db: Session):
        """
        Initialize repository.

        Args:
            model: SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def _live(self, stmt, model: Optional[Type[BaseModel]] = None):
        """Restrict a statement to rows that are not soft-deleted."""
        model = model or self.model
        if issubclass(model, SoftDeleteModel):
            return stmt.where(model.deleted_at.is_(None))
        return stmt

