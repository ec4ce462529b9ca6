"""
Event repository for database operations.
"""

from typing import List

from sqlalchemy.orm import Session

import repositories.db_models as db_models
from .base import BaseRepository


class EventRepository(BaseRepository[db_models.Event]):
    """Repository for Event entity database operations."""

    def __init__(self, db: Session):
        super().__init__(db_models.Event, db)

    def get_all_by_date(self) -> List[db_models.Event]:
        """Get every event, earliest event_date first."""
        return (
            self.db.query(db_models.Event)
            .order_by(db_models.Event.event_date.asc(), db_models.Event.id.asc())
            .all()
        )

    def get_published(self) -> List[db_models.Event]:
        """Get published events, earliest event_date first."""
        return (
            self.db.query(db_models.Event)
            .filter(db_models.Event.status == db_models.EventStatus.PUBLISHED)
            .order_by(db_models.Event.event_date.asc(), db_models.Event.id.asc())
            .all()
        )
