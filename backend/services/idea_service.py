"""
Idea Service

Handles authoring, public browsing and moderation of ideas.
"""

from typing import List, Optional

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.config import settings
from models.enums import IDEA_CATEGORIES
from models.exceptions import (
    IdeaNotFoundException,
    InvalidCategoryException,
    InvalidStatusTransitionException,
)
from moderation.filters import (
    ALL_CATEGORIES,
    FeaturedFilter,
    derive_categories,
    filter_ideas,
)
from repositories.idea_repository import IdeaRepository


class IdeaService:
    """Service for idea authoring, visibility rules and moderation."""

    @staticmethod
    def validate_category(category: Optional[str]) -> None:
        """
        Check a category against the submission form's label set.

        Raises:
            InvalidCategoryException: If the label is not offered on the form
        """
        if category is not None and category not in IDEA_CATEGORIES:
            raise InvalidCategoryException(category)

    @staticmethod
    def create_idea(
        db: Session, auth: schemas.AuthContext, idea: schemas.IdeaCreate
    ) -> db_models.Idea:
        """
        Create a draft idea owned by the caller.

        Args:
            db: Database session
            auth: Caller context
            idea: Idea data

        Returns:
            Created idea

        Raises:
            InvalidCategoryException: If the category label is unknown
        """
        IdeaService.validate_category(idea.category)

        repo = IdeaRepository(db)
        db_idea = db_models.Idea(
            **idea.model_dump(),
            user_id=auth.profile_id,
            status=db_models.IdeaStatus.DRAFT,
        )
        db_idea = repo.create(db_idea)
        logger.info(f"Idea {db_idea.id} created by {auth.profile_id}")
        return db_idea

    @staticmethod
    def update_idea(
        db: Session,
        auth: schemas.AuthContext,
        idea_id: int,
        idea_update: schemas.IdeaUpdate,
    ) -> db_models.Idea:
        """
        Edit one of the caller's ideas and save it as draft or submit it.

        Editing a rejected or approved idea puts it back through moderation.

        Raises:
            IdeaNotFoundException: If the idea does not exist or is not the caller's
            InvalidCategoryException: If the category label is unknown
        """
        repo = IdeaRepository(db)
        db_idea = repo.get_owned(idea_id, auth.profile_id)
        if not db_idea:
            raise IdeaNotFoundException(idea_id)

        changes = idea_update.model_dump(exclude_unset=True, exclude={"submit"})
        if "category" in changes:
            IdeaService.validate_category(changes["category"])

        changes["status"] = (
            db_models.IdeaStatus.SUBMITTED
            if idea_update.submit
            else db_models.IdeaStatus.DRAFT
        )
        db_idea = repo.apply_changes(db_idea, changes)
        logger.info(f"Idea {idea_id} saved as {db_idea.status.value} by {auth.profile_id}")
        return db_idea

    @staticmethod
    def get_my_ideas(db: Session, auth: schemas.AuthContext) -> List[db_models.Idea]:
        """Get the caller's ideas in every status, newest first."""
        return IdeaRepository(db).get_by_user(auth.profile_id)

    @staticmethod
    def get_visible_idea(
        db: Session, idea_id: int, auth: Optional[schemas.AuthContext] = None
    ) -> db_models.Idea:
        """
        Get an idea if the caller may see it.

        Approved ideas are public. Other statuses are visible to the author
        and to admins only; everyone else gets the same error as for a
        missing idea.

        Raises:
            IdeaNotFoundException: If missing or not visible to the caller
        """
        db_idea = IdeaRepository(db).get_with_relations(idea_id)
        if not db_idea:
            raise IdeaNotFoundException(idea_id)

        if db_idea.status != db_models.IdeaStatus.APPROVED:
            if auth is None or not (auth.is_admin or auth.owns(db_idea.user_id)):
                raise IdeaNotFoundException(idea_id)

        return db_idea

    @staticmethod
    def get_approved_ideas(
        db: Session, category: Optional[str] = None, skip: int = 0, limit: int = 20
    ) -> List[db_models.Idea]:
        return IdeaRepository(db).get_approved(category=category, skip=skip, limit=limit)

    @staticmethod
    def get_featured_ideas(db: Session) -> List[db_models.Idea]:
        return IdeaRepository(db).get_featured(settings.FEATURED_IDEAS_LIMIT)

    @staticmethod
    def get_pending_ideas(
        db: Session,
        search_term: Optional[str] = None,
        category: str = ALL_CATEGORIES,
        featured: FeaturedFilter = FeaturedFilter.ALL,
    ) -> List[schemas.Idea]:
        """
        Get the moderation working set, optionally filtered.

        The filters are the same pure functions the moderation queue applies
        client side, run over the capped pending set.

        Args:
            db: Database session
            search_term: Free-text filter
            category: Category label or "all"
            featured: all / featured / standard

        Returns:
            Submitted ideas, oldest first
        """
        pending = IdeaRepository(db).get_pending(settings.MODERATION_MAX_WORKING_SET)
        ideas = [schemas.Idea.model_validate(idea) for idea in pending]
        if len(ideas) >= settings.MODERATION_MAX_WORKING_SET:
            logger.warning(
                f"Pending ideas reached the working set limit of "
                f"{settings.MODERATION_MAX_WORKING_SET}"
            )
        return filter_ideas(ideas, search_term, category, featured)

    @staticmethod
    def get_pending_categories(db: Session) -> List[str]:
        """Distinct categories present in the moderation working set."""
        return derive_categories(IdeaService.get_pending_ideas(db))

    @staticmethod
    def moderate_idea(
        db: Session,
        auth: schemas.AuthContext,
        idea_id: int,
        moderation: schemas.IdeaModerate,
    ) -> db_models.Idea:
        """
        Apply a moderation verdict and/or featured flag to an idea.

        A verdict is only accepted while the idea is submitted; approved and
        rejected are final for the moderator. The featured flag can be
        changed in any status.

        Args:
            db: Database session
            auth: Admin context
            idea_id: Idea ID
            moderation: Partial update

        Returns:
            Updated idea

        Raises:
            IdeaNotFoundException: If the idea does not exist
            InvalidStatusTransitionException: If a verdict targets a non-submitted idea
        """
        repo = IdeaRepository(db)
        db_idea = repo.get_with_relations(idea_id)
        if not db_idea:
            raise IdeaNotFoundException(idea_id)

        changes = moderation.model_dump(exclude_none=True)
        if "status" in changes and db_idea.status != db_models.IdeaStatus.SUBMITTED:
            raise InvalidStatusTransitionException(
                idea_id, db_idea.status.value, changes["status"].value
            )

        db_idea = repo.apply_changes(db_idea, changes)
        logger.info(
            f"Admin {auth.profile_id} moderated idea {idea_id}: "
            + ", ".join(f"{key}={getattr(value, 'value', value)}" for key, value in changes.items())
        )
        return db_idea
