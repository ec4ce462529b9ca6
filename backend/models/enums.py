"""Status and role enums shared by the database models, schemas and the moderation queue."""

import enum


class ProfileRole(str, enum.Enum):
    STUDENT = "student"
    ADMIN = "admin"


class IdeaStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class EventStatus(str, enum.Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


# Statuses a moderator may move a submitted idea to
MODERATION_OUTCOMES = frozenset({IdeaStatus.APPROVED, IdeaStatus.REJECTED})

# Labels offered on the idea submission form
IDEA_CATEGORIES: tuple[str, ...] = (
    "Technology",
    "Healthcare",
    "Education",
    "Finance",
    "Sustainability",
    "E-commerce",
    "Social Impact",
    "Food & Agriculture",
    "Transportation",
    "Entertainment",
    "Real Estate",
    "Energy",
)
