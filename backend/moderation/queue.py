"""
In-memory moderation queue.

Holds the working set of submitted ideas for one admin session, exposes the
filtered view and applies verdicts through an IdeaStore. Every operation
resolves to a ModerationResult; store failures never propagate to the caller.
"""

import enum
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel

from models.enums import IdeaStatus
from models.exceptions import InsufficientPermissionsException
from models.schemas import AuthContext, Idea
from moderation.filters import (
    ALL_CATEGORIES,
    FeaturedFilter,
    derive_categories,
    filter_ideas,
)
from moderation.store import IdeaStore, IdeaStoreError

DEFAULT_MAX_WORKING_SET = 1000


class ModerationAction(str, enum.Enum):
    LOAD = "load"
    APPROVE = "approve"
    REJECT = "reject"
    FEATURE = "feature"
    UNFEATURE = "unfeature"


class ModerationError(BaseModel):
    message: str
    code: Optional[str] = None
    status_code: Optional[int] = None
    details: Optional[str] = None
    hint: Optional[str] = None

    @classmethod
    def from_store_error(cls, error: IdeaStoreError) -> "ModerationError":
        return cls(
            message=error.message,
            code=error.code,
            status_code=error.status_code,
            details=error.details,
            hint=error.hint,
        )


class ModerationResult(BaseModel):
    """Outcome of a queue operation."""

    action: ModerationAction
    idea_id: Optional[int] = None
    ok: bool
    error: Optional[ModerationError] = None

    @classmethod
    def success(
        cls, action: ModerationAction, idea_id: Optional[int] = None
    ) -> "ModerationResult":
        return cls(action=action, idea_id=idea_id, ok=True)

    @classmethod
    def failure(
        cls,
        action: ModerationAction,
        error: ModerationError,
        idea_id: Optional[int] = None,
    ) -> "ModerationResult":
        return cls(action=action, idea_id=idea_id, ok=False, error=error)


class ModerationQueue:
    """
    Working set of ideas awaiting moderation, owned by a single admin session.

    The queue is meant to be driven from one event loop. Mutations for the
    same idea are serialized: while one is awaiting the store, another for
    that id is refused with ``mutation_in_progress`` and never dispatched.

    Attributes:
        search_term: Free-text filter, raw as entered
        category_filter: Category label or "all"
        featured_filter: all / featured / standard
        loading: True while load() awaits the store
    """

    def __init__(
        self,
        store: IdeaStore,
        auth: AuthContext,
        max_working_set: int = DEFAULT_MAX_WORKING_SET,
    ):
        if not auth.is_admin:
            raise InsufficientPermissionsException(
                "Moderation requires an admin profile"
            )
        self._store = store
        self._auth = auth
        self._max_working_set = max_working_set
        self._ideas: list[Idea] = []
        self._in_flight: set[int] = set()

        self.search_term = ""
        self.category_filter = ALL_CATEGORIES
        self.featured_filter = FeaturedFilter.ALL
        self.loading = False

    @property
    def ideas(self) -> list[Idea]:
        """Copy of the working set in load order."""
        return list(self._ideas)

    def __len__(self) -> int:
        return len(self._ideas)

    def get(self, idea_id: int) -> Optional[Idea]:
        for idea in self._ideas:
            if idea.id == idea_id:
                return idea
        return None

    def is_in_flight(self, idea_id: int) -> bool:
        return idea_id in self._in_flight

    def categories(self) -> list[str]:
        return derive_categories(self._ideas)

    def set_filters(
        self,
        search_term: Optional[str] = None,
        category: Optional[str] = None,
        featured: Optional[FeaturedFilter | str] = None,
    ) -> None:
        """
        Update any subset of the filters.

        Raises:
            ValueError: If featured is not all/featured/standard.
        """
        if search_term is not None:
            self.search_term = search_term
        if category is not None:
            self.category_filter = category
        if featured is not None:
            self.featured_filter = FeaturedFilter(featured)

    def reset_filters(self) -> None:
        self.search_term = ""
        self.category_filter = ALL_CATEGORIES
        self.featured_filter = FeaturedFilter.ALL

    def filtered(self) -> list[Idea]:
        """Working set narrowed by the current filters."""
        return filter_ideas(
            self._ideas, self.search_term, self.category_filter, self.featured_filter
        )

    async def load(self) -> ModerationResult:
        """
        Replace the working set with the store's pending ideas.

        On failure the working set is left empty.
        """
        action = ModerationAction.LOAD
        if self.loading:
            return ModerationResult.failure(
                action,
                ModerationError(message="A load is already running", code="load_in_progress"),
            )

        self.loading = True
        try:
            ideas = await self._store.fetch_pending()
        except IdeaStoreError as e:
            self._ideas = []
            logger.error(f"Failed to load moderation queue: {e}")
            return ModerationResult.failure(action, ModerationError.from_store_error(e))
        finally:
            self.loading = False

        self._ideas = list(ideas)
        if len(self._ideas) >= self._max_working_set:
            logger.warning(
                f"Moderation queue holds {len(self._ideas)} ideas, "
                f"at or above the working set limit of {self._max_working_set}"
            )
        logger.info(
            f"Loaded {len(self._ideas)} pending ideas for admin {self._auth.profile_id}"
        )
        return ModerationResult.success(action)

    async def approve(self, idea_id: int) -> ModerationResult:
        return await self._set_status(ModerationAction.APPROVE, idea_id, IdeaStatus.APPROVED)

    async def reject(self, idea_id: int) -> ModerationResult:
        return await self._set_status(ModerationAction.REJECT, idea_id, IdeaStatus.REJECTED)

    async def feature(self, idea_id: int) -> ModerationResult:
        return await self._set_featured(ModerationAction.FEATURE, idea_id, True)

    async def unfeature(self, idea_id: int) -> ModerationResult:
        return await self._set_featured(ModerationAction.UNFEATURE, idea_id, False)

    async def _set_status(
        self, action: ModerationAction, idea_id: int, status: IdeaStatus
    ) -> ModerationResult:
        result = await self._mutate(action, idea_id, {"status": status.value})
        if result.ok:
            self._ideas = [idea for idea in self._ideas if idea.id != idea_id]
            logger.info(f"Idea {idea_id} {status.value}, removed from queue")
        return result

    async def _set_featured(
        self, action: ModerationAction, idea_id: int, is_featured: bool
    ) -> ModerationResult:
        result = await self._mutate(action, idea_id, {"is_featured": is_featured})
        if result.ok:
            self._ideas = [
                idea.model_copy(update={"is_featured": is_featured})
                if idea.id == idea_id
                else idea
                for idea in self._ideas
            ]
            logger.info(f"Idea {idea_id} is_featured set to {is_featured}")
        return result

    async def _mutate(
        self, action: ModerationAction, idea_id: int, changes: dict[str, Any]
    ) -> ModerationResult:
        if self.get(idea_id) is None:
            return ModerationResult.failure(
                action,
                ModerationError(
                    message=f"Idea {idea_id} is not in the moderation queue",
                    code="not_in_queue",
                ),
                idea_id,
            )
        if idea_id in self._in_flight:
            return ModerationResult.failure(
                action,
                ModerationError(
                    message=f"Another change to idea {idea_id} is still pending",
                    code="mutation_in_progress",
                ),
                idea_id,
            )

        self._in_flight.add(idea_id)
        try:
            await self._store.update_idea(idea_id, changes)
        except IdeaStoreError as e:
            logger.error(f"Failed to {action.value} idea {idea_id}: {e}")
            return ModerationResult.failure(
                action, ModerationError.from_store_error(e), idea_id
            )
        finally:
            self._in_flight.discard(idea_id)

        return ModerationResult.success(action, idea_id)
