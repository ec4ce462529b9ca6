"""
Contact request repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class ContactRequestRepository(BaseRepository[db_models.ContactRequest]):
    """Repository for ContactRequest entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.ContactRequest, db)

    def get_recent(self, skip: int = 0, limit: int = 50) -> List[db_models.ContactRequest]:
        """Get contact requests, newest first."""
        return (
            self.db.query(db_models.ContactRequest)
            .order_by(
                db_models.ContactRequest.created_at.desc(),
                db_models.ContactRequest.id.desc(),
            )
            .offset(skip)
            .limit(limit)
            .all()
        )
