from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from helpers.pagination import PaginationLimit, PaginationSkip
from models.enums import IDEA_CATEGORIES
from repositories.database import get_db
from services import IdeaFileService, IdeaService

router = APIRouter(prefix="/ideas", tags=["ideas"])


@router.get("", response_model=List[schemas.Idea])
def list_approved_ideas(
    category: Optional[str] = None,
    skip: PaginationSkip = 0,
    limit: PaginationLimit = 20,
    db: Session = Depends(get_db),
):
    """Browse approved ideas, newest first."""
    return IdeaService.get_approved_ideas(db, category=category, skip=skip, limit=limit)


@router.post("", response_model=schemas.Idea, status_code=status.HTTP_201_CREATED)
def create_idea(
    idea: schemas.IdeaCreate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    """
    Create a new idea as a draft.

    Domain exceptions are caught by centralized exception handlers.
    """
    return IdeaService.create_idea(db, current, idea)


@router.get("/featured", response_model=List[schemas.Idea])
def get_featured_ideas(db: Session = Depends(get_db)):
    return IdeaService.get_featured_ideas(db)


@router.get("/categories", response_model=List[str])
def get_categories():
    """Labels offered on the submission form."""
    return list(IDEA_CATEGORIES)


@router.get("/mine", response_model=List[schemas.Idea])
def get_my_ideas(
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    # Every status, drafts included
    return IdeaService.get_my_ideas(db, current)


@router.get("/{idea_id}", response_model=schemas.Idea)
def get_idea(
    idea_id: int,
    db: Session = Depends(get_db),
    current: Optional[schemas.AuthContext] = Depends(auth.get_optional_auth_context),
):
    """
    Get a single idea with its author and files.

    Ideas that are not approved are only visible to their author and admins.
    """
    return IdeaService.get_visible_idea(db, idea_id, current)


@router.put("/{idea_id}", response_model=schemas.Idea)
def update_idea(
    idea_id: int,
    idea_update: schemas.IdeaUpdate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    """Save changes as a draft, or submit for review with ``submit: true``."""
    return IdeaService.update_idea(db, current, idea_id, idea_update)


@router.post(
    "/{idea_id}/files",
    response_model=schemas.IdeaFile,
    status_code=status.HTTP_201_CREATED,
)
def attach_file(
    idea_id: int,
    file: schemas.IdeaFileCreate,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    return IdeaFileService.attach_file(db, current, idea_id, file)


@router.delete("/{idea_id}/files/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(
    idea_id: int,
    file_id: int,
    db: Session = Depends(get_db),
    current: schemas.AuthContext = Depends(auth.get_auth_context),
):
    IdeaFileService.delete_file(db, current, idea_id, file_id)
