"""
Moderation engine: pure filters, the idea store client and the in-memory queue.

Nothing in this package reads server settings or opens a database session,
so the console can run against a remote API with only a token.
"""

from moderation.filters import (
    ALL_CATEGORIES,
    FeaturedFilter,
    derive_categories,
    filter_ideas,
)
from moderation.queue import (
    ModerationAction,
    ModerationError,
    ModerationQueue,
    ModerationResult,
)
from moderation.store import HttpIdeaStore, IdeaStore, IdeaStoreError

__all__ = [
    "ALL_CATEGORIES",
    "FeaturedFilter",
    "derive_categories",
    "filter_ideas",
    "ModerationAction",
    "ModerationError",
    "ModerationQueue",
    "ModerationResult",
    "HttpIdeaStore",
    "IdeaStore",
    "IdeaStoreError",
]
