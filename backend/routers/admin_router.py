from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from helpers.pagination import PaginationLimitLarge, PaginationSkip
from moderation.filters import ALL_CATEGORIES, FeaturedFilter
from repositories.database import get_db
from services import ContactService, EventService, IdeaService, StatsService

router = APIRouter(prefix="/admin", tags=["admin"])


# Moderation


@router.get("/ideas/pending", response_model=schemas.PendingIdeasResponse)
def get_pending_ideas(
    q: Optional[str] = Query(None, description="Free-text search"),
    category: str = Query(ALL_CATEGORIES, description='Category label or "all"'),
    featured: FeaturedFilter = Query(FeaturedFilter.ALL),
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    """
    Get the moderation working set: submitted ideas with author and files,
    oldest first.
    """
    ideas = IdeaService.get_pending_ideas(db, q, category, featured)
    return schemas.PendingIdeasResponse(ideas=ideas, total=len(ideas))


@router.get("/ideas/pending/categories", response_model=List[str])
def get_pending_categories(
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return IdeaService.get_pending_categories(db)


@router.patch("/ideas/{idea_id}", response_model=schemas.Idea)
def moderate_idea(
    idea_id: int,
    moderation: schemas.IdeaModerate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    """
    Approve or reject a submitted idea and/or change its featured flag.

    Domain exceptions are caught by centralized exception handlers.
    """
    return IdeaService.moderate_idea(db, current, idea_id, moderation)


@router.get("/stats", response_model=schemas.AdminStats)
def get_stats(
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return StatsService.get_admin_stats(db)


# Events


@router.get("/events", response_model=List[schemas.Event])
def list_events(
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    """All events, drafts included, earliest first."""
    return EventService.get_all_events(db)


@router.post("/events", response_model=schemas.Event, status_code=status.HTTP_201_CREATED)
def create_event(
    event: schemas.EventCreate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return EventService.create_event(db, current, event)


@router.get("/events/{event_id}", response_model=schemas.Event)
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return EventService.get_event(db, event_id)


@router.put("/events/{event_id}", response_model=schemas.Event)
def update_event(
    event_id: int,
    event_update: schemas.EventUpdate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return EventService.update_event(db, current, event_id, event_update)


# Contact requests


@router.get("/contact-requests", response_model=List[schemas.ContactRequest])
def list_contact_requests(
    skip: PaginationSkip = 0,
    limit: PaginationLimitLarge = 50,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_admin_context),
):
    return ContactService.get_requests(db, skip=skip, limit=limit)
