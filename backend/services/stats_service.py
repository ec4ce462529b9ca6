"""
Stats Service

Counters for the admin dashboard and the landing page.
"""

from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from repositories.contact_request_repository import ContactRequestRepository
from repositories.idea_repository import IdeaRepository
from repositories.profile_repository import ProfileRepository
from services.event_service import EventService
from services.idea_service import IdeaService


class StatsService:
    """Service for aggregate counts."""

    @staticmethod
    def get_admin_stats(db: Session) -> schemas.AdminStats:
        """
        Build the admin dashboard counters.

        approval_rate is the approved share of all ideas in percent, rounded
        to one decimal, and None when there are no ideas yet.
        """
        idea_repo = IdeaRepository(db)
        total = idea_repo.count()
        approved = idea_repo.count_by_status(db_models.IdeaStatus.APPROVED)

        return schemas.AdminStats(
            total_ideas=total,
            approved_ideas=approved,
            pending_ideas=idea_repo.count_by_status(db_models.IdeaStatus.SUBMITTED),
            featured_ideas=idea_repo.count_featured(),
            total_profiles=ProfileRepository(db).count(),
            contact_requests=ContactRequestRepository(db).count(),
            approval_rate=round(approved / total * 100, 1) if total else None,
        )

    @staticmethod
    def get_home_page(db: Session) -> schemas.HomePage:
        """Assemble the landing page: featured ideas, counters and events."""
        return schemas.HomePage(
            featured_ideas=[
                schemas.Idea.model_validate(idea)
                for idea in IdeaService.get_featured_ideas(db)
            ],
            approved_ideas_count=IdeaRepository(db).count_by_status(
                db_models.IdeaStatus.APPROVED
            ),
            profiles_count=ProfileRepository(db).count(),
            events=[
                schemas.Event.model_validate(event)
                for event in EventService.get_published_events(db)
            ],
        )
