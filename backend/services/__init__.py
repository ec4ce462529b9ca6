"""
Services layer for business logic.

This package contains service modules that encapsulate business logic
separate from the API routes.
"""

from .contact_service import ContactService
from .event_service import EventService
from .idea_file_service import IdeaFileService
from .idea_service import IdeaService
from .stats_service import StatsService

__all__ = [
    "ContactService",
    "EventService",
    "IdeaFileService",
    "IdeaService",
    "StatsService",
]
