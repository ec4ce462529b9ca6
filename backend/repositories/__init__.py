"""
Repository pattern implementation for data access layer.
"""

from .base import BaseRepository
from .contact_request_repository import ContactRequestRepository
from .event_repository import EventRepository
from .idea_file_repository import IdeaFileRepository
from .idea_repository import IdeaRepository
from .profile_repository import ProfileRepository

__all__ = [
    "BaseRepository",
    "ContactRequestRepository",
    "EventRepository",
    "IdeaFileRepository",
    "IdeaRepository",
    "ProfileRepository",
]
