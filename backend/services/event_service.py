"""
Event Service

Manages showcase events. Admins create and publish; visitors see published
events only.
"""

from typing import List

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import EventNotFoundException
from repositories.event_repository import EventRepository


class EventService:
    """Service for event management."""

    @staticmethod
    def get_published_events(db: Session) -> List[db_models.Event]:
        return EventRepository(db).get_published()

    @staticmethod
    def get_all_events(db: Session) -> List[db_models.Event]:
        return EventRepository(db).get_all_by_date()

    @staticmethod
    def get_event(db: Session, event_id: int) -> db_models.Event:
        """
        Get an event by ID.

        Raises:
            EventNotFoundException: If the event does not exist
        """
        db_event = EventRepository(db).get_by_id(event_id)
        if not db_event:
            raise EventNotFoundException(event_id)
        return db_event

    @staticmethod
    def create_event(
        db: Session, auth: schemas.AuthContext, event: schemas.EventCreate
    ) -> db_models.Event:
        db_event = EventRepository(db).create(db_models.Event(**event.model_dump()))
        logger.info(f"Event {db_event.id} created by admin {auth.profile_id}")
        return db_event

    @staticmethod
    def update_event(
        db: Session,
        auth: schemas.AuthContext,
        event_id: int,
        event_update: schemas.EventUpdate,
    ) -> db_models.Event:
        """
        Apply a partial update, including publish and unpublish.

        Raises:
            EventNotFoundException: If the event does not exist
        """
        repo = EventRepository(db)
        db_event = EventService.get_event(db, event_id)
        for field, value in event_update.model_dump(exclude_unset=True).items():
            setattr(db_event, field, value)
        db_event = repo.update(db_event)
        logger.info(f"Event {event_id} updated by admin {auth.profile_id}")
        return db_event
