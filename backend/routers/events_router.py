from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import models.schemas as schemas
from repositories.database import get_db
from services import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=List[schemas.Event])
def list_published_events(db: Session = Depends(get_db)):
    """Published events, earliest first."""
    return EventService.get_published_events(db)
