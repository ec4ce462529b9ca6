"""Contact form router for visitor inquiries."""

from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

import authentication.auth as auth
import models.schemas as schemas
from helpers.rate_limiter import limiter
from models.config import settings
from repositories.database import get_db
from services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["contact"])


@router.post("", response_model=schemas.ContactRequest, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.CONTACT_RATE_LIMIT)
def submit_contact_form(
    request: Request,
    form: schemas.ContactRequestCreate,
    db: Session = Depends(get_db),
    current: Optional[schemas.AuthContext] = Depends(auth.get_optional_auth_context),
):
    """Submit a contact request.

    No authentication required; a signed-in caller is linked to the request.
    Rate limited per client address.

    Args:
        request: FastAPI request object (required for rate limiter)
        form: Name, email, message and optional idea_id

    Raises:
        IdeaNotFoundException: 404 if idea_id refers to a missing idea
    """
    return ContactService.submit_request(db, form, current)
