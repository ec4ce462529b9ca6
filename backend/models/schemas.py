from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from models.enums import (
    MODERATION_OUTCOMES,
    EventStatus,
    IdeaStatus,
    ProfileRole,
)


def normalize_tags(value: Union[str, List[str], None]) -> List[str]:
    """
    Turn form input into a clean tag list.

    Accepts a comma-separated string or a list; items are trimmed and empty
    items dropped. Order is kept.
    """
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


# Profile Schemas
class Author(BaseModel):
    """Read-only author projection embedded in ideas."""

    full_name: Optional[str] = None
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class Profile(Author):
    id: str
    role: ProfileRole


# Idea File Schemas
class IdeaFileCreate(BaseModel):
    file_name: str = Field(..., min_length=1)
    file_type: Optional[str] = None
    file_size: int = Field(default=0, ge=0)
    file_url: str = Field(..., min_length=1)


class IdeaFile(BaseModel):
    id: int
    idea_id: Optional[int] = None
    file_name: str
    file_type: Optional[str] = None
    file_size: int = 0
    file_url: str
    preview_kind: str = "none"
    size_label: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Idea Schemas
class IdeaCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    problem_statement: str = Field(..., min_length=1)
    solution: str = Field(..., min_length=1)
    market_opportunity: Optional[str] = None
    team_description: Optional[str] = None
    category: str
    tags: List[str] = []
    whatsapp_group_url: Optional[str] = None

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Union[str, List[str], None]) -> List[str]:
        return normalize_tags(value)

    @field_validator("whatsapp_group_url", mode="before")
    @classmethod
    def blank_url_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class IdeaUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    problem_statement: Optional[str] = Field(default=None, min_length=1)
    solution: Optional[str] = Field(default=None, min_length=1)
    market_opportunity: Optional[str] = None
    team_description: Optional[str] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    whatsapp_group_url: Optional[str] = None
    # False saves a draft, True sends the idea to the moderation queue
    submit: bool = False

    @field_validator("tags", mode="before")
    @classmethod
    def split_tags(cls, value: Union[str, List[str], None]) -> Optional[List[str]]:
        if value is None:
            return None
        return normalize_tags(value)


class Idea(BaseModel):
    """
    Idea record as served by the API and held by the moderation queue.

    Every field a client may find absent is Optional so the queue's search
    can skip it instead of failing.
    """

    id: int
    user_id: Optional[str] = None
    title: Optional[str] = None
    problem_statement: Optional[str] = None
    solution: Optional[str] = None
    market_opportunity: Optional[str] = None
    team_description: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = []
    whatsapp_group_url: Optional[str] = None
    status: IdeaStatus
    is_featured: bool = False
    author: Optional[Author] = None
    idea_files: List[IdeaFile] = []
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_are_empty(cls, value: Optional[List[str]]) -> List[str]:
        return list(value or [])

    @field_validator("idea_files", mode="before")
    @classmethod
    def null_files_are_empty(cls, value: Optional[list]) -> list:
        return list(value or [])


class IdeaModerate(BaseModel):
    """Partial moderation update: a verdict, a featured flag, or both."""

    status: Optional[IdeaStatus] = None
    is_featured: Optional[bool] = None

    @model_validator(mode="after")
    def check_update(self) -> "IdeaModerate":
        if self.status is None and self.is_featured is None:
            raise ValueError("Provide status and/or is_featured")
        if self.status is not None and self.status not in MODERATION_OUTCOMES:
            raise ValueError("status must be 'approved' or 'rejected'")
        return self


class PendingIdeasResponse(BaseModel):
    ideas: List[Idea]
    total: int


class AdminStats(BaseModel):
    total_ideas: int
    approved_ideas: int
    pending_ideas: int
    featured_ideas: int
    total_profiles: int
    contact_requests: int
    approval_rate: Optional[float] = Field(
        default=None, description="Approved share of all ideas in percent"
    )


# Event Schemas
class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: datetime
    location: Optional[str] = None
    registration_link: Optional[str] = None
    status: EventStatus = EventStatus.DRAFT
    is_featured: bool = False

    @field_validator("description", "location", "registration_link", mode="before")
    @classmethod
    def blank_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class EventUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    registration_link: Optional[str] = None
    status: Optional[EventStatus] = None
    is_featured: Optional[bool] = None


class Event(BaseModel):
    id: int
    title: str
    description: Optional[str]
    event_date: datetime
    location: Optional[str]
    registration_link: Optional[str]
    status: EventStatus
    is_featured: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Contact Schemas
class ContactRequestCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    message: str = Field(..., min_length=1, max_length=5000)
    idea_id: Optional[int] = None


class ContactRequest(BaseModel):
    id: int
    name: str
    email: str
    message: str
    idea_id: Optional[int]
    user_id: Optional[str]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Landing page
class HomePage(BaseModel):
    featured_ideas: List[Idea]
    approved_ideas_count: int
    profiles_count: int
    events: List[Event]


# Authorization
class AuthContext(BaseModel):
    """
    Who is calling, resolved once per request (or console session).

    Services and the moderation queue receive this object instead of
    looking the caller's role up again.
    """

    profile_id: str
    role: ProfileRole = ProfileRole.STUDENT
    email: Optional[str] = None
    full_name: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN

    def owns(self, user_id: Optional[str]) -> bool:
        return user_id is not None and user_id == self.profile_id
