"""Contact form service.

Visitors use the contact form to reach the organisers, optionally about a
specific idea. Requests are stored for admins to follow up.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import IdeaNotFoundException
from repositories.contact_request_repository import ContactRequestRepository
from repositories.idea_repository import IdeaRepository


class ContactService:
    """Service for handling contact form submissions."""

    @staticmethod
    def submit_request(
        db: Session,
        request: schemas.ContactRequestCreate,
        auth: Optional[schemas.AuthContext] = None,
    ) -> db_models.ContactRequest:
        """
        Store a contact request.

        Args:
            db: Database session
            request: Form data
            auth: Caller context when signed in

        Returns:
            Stored request

        Raises:
            IdeaNotFoundException: If idea_id refers to a missing idea
        """
        if request.idea_id is not None and not IdeaRepository(db).get_by_id(
            request.idea_id
        ):
            raise IdeaNotFoundException(request.idea_id)

        db_request = ContactRequestRepository(db).create(
            db_models.ContactRequest(
                **request.model_dump(),
                user_id=auth.profile_id if auth else None,
            )
        )
        logger.info(
            f"Contact request {db_request.id} received"
            + (f" about idea {request.idea_id}" if request.idea_id else "")
        )
        return db_request

    @staticmethod
    def get_requests(
        db: Session, skip: int = 0, limit: int = 50
    ) -> List[db_models.ContactRequest]:
        return ContactRequestRepository(db).get_recent(skip=skip, limit=limit)
