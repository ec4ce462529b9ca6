"""
Profile repository for database operations.
"""

from typing import Optional

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class ProfileRepository(BaseRepository[db_models.Profile]):
    """Repository for Profile entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Profile, db)

    def get_by_email(self, email: str) -> Optional[db_models.Profile]:
        """
        Get profile by email.

        Args:
            email: Profile email

        Returns:
            Profile if found, None otherwise
        """
        return (
            self.db.query(db_models.Profile)
            .filter(db_models.Profile.email == email)
            .first()
        )
