"""
Idea repository for database operations.
"""

from typing import Any, List, Optional

from sqlalchemy.orm import Session, joinedload, selectinload

import repositories.db_models as db_models
from .base import BaseRepository


class IdeaRepository(BaseRepository[db_models.Idea]):
    """Repository for Idea entity database operations."""

    def __init__(self, db: Session):
        """
        Initialize idea repository.

        Args:
            db: Database session
        """
        super().__init__(db_models.Idea, db)

    def _with_relations(self):
        """Base query eager-loading the author projection and attached files."""
        return self.db.query(db_models.Idea).options(
            joinedload(db_models.Idea.author),
            selectinload(db_models.Idea.idea_files),
        )

    def get_with_relations(self, idea_id: int) -> Optional[db_models.Idea]:
        """
        Get an idea with its author and files loaded.

        Args:
            idea_id: Idea ID

        Returns:
            Idea if found, None otherwise
        """
        return self._with_relations().filter(db_models.Idea.id == idea_id).first()

    def get_owned(self, idea_id: int, user_id: str) -> Optional[db_models.Idea]:
        """Get an idea only if it belongs to user_id."""
        return (
            self._with_relations()
            .filter(db_models.Idea.id == idea_id, db_models.Idea.user_id == user_id)
            .first()
        )

    def get_by_user(self, user_id: str) -> List[db_models.Idea]:
        """
        Get all ideas of an author, newest first.

        Args:
            user_id: Profile ID of the author

        Returns:
            List of ideas in every status
        """
        return (
            self._with_relations()
            .filter(db_models.Idea.user_id == user_id)
            .order_by(db_models.Idea.created_at.desc(), db_models.Idea.id.desc())
            .all()
        )

    def get_approved(
        self,
        category: Optional[str] = None,
        skip: int = 0,
        limit: int = 20,
    ) -> List[db_models.Idea]:
        """
        Get approved ideas for public browsing, newest first.

        Args:
            category: Optional exact category label
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of approved ideas
        """
        query = self._with_relations().filter(
            db_models.Idea.status == db_models.IdeaStatus.APPROVED
        )
        if category:
            query = query.filter(db_models.Idea.category == category)
        return (
            query.order_by(db_models.Idea.created_at.desc(), db_models.Idea.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_featured(self, limit: int) -> List[db_models.Idea]:
        """Get approved and featured ideas, newest first."""
        return (
            self._with_relations()
            .filter(
                db_models.Idea.status == db_models.IdeaStatus.APPROVED,
                db_models.Idea.is_featured.is_(True),
            )
            .order_by(db_models.Idea.created_at.desc(), db_models.Idea.id.desc())
            .limit(limit)
            .all()
        )

    def get_pending(self, limit: int) -> List[db_models.Idea]:
        """
        Get ideas awaiting moderation, oldest first.

        Args:
            limit: Maximum number of ideas (the working-set cap)

        Returns:
            Submitted ideas with author and files loaded
        """
        return (
            self._with_relations()
            .filter(db_models.Idea.status == db_models.IdeaStatus.SUBMITTED)
            .order_by(db_models.Idea.created_at.asc(), db_models.Idea.id.asc())
            .limit(limit)
            .all()
        )

    def count_by_status(self, status: db_models.IdeaStatus) -> int:
        """Count ideas in a given status."""
        return (
            self.db.query(db_models.Idea)
            .filter(db_models.Idea.status == status)
            .count()
        )

    def count_featured(self) -> int:
        """Count featured ideas regardless of status."""
        return (
            self.db.query(db_models.Idea)
            .filter(db_models.Idea.is_featured.is_(True))
            .count()
        )

    def apply_changes(
        self, idea: db_models.Idea, changes: dict[str, Any]
    ) -> db_models.Idea:
        """
        Set attributes on an idea and commit.

        Args:
            idea: Idea to modify
            changes: Mapping of column name to new value

        Returns:
            Updated idea
        """
        for field, value in changes.items():
            setattr(idea, field, value)
        return self.update(idea)
