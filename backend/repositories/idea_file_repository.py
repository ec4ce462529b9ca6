"""
Idea file repository for database operations.
"""

from typing import Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class IdeaFileRepository(BaseRepository[db_models.IdeaFile]):
    """Repository for IdeaFile entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.IdeaFile, db)

    def get_for_idea(self, idea_id: int, file_id: int) -> Optional[db_models.IdeaFile]:
        """Get a file only if it is attached to idea_id."""
        return (
            self.db.query(db_models.IdeaFile)
            .filter(
                db_models.IdeaFile.id == file_id,
                db_models.IdeaFile.idea_id == idea_id,
            )
            .first()
        )
