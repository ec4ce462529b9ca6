"""
Database models using SQLAlchemy 2.0 style with Mapped type hints.

Tables: profiles, ideas, idea_files, events, contact_requests.
"""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from helpers import file_preview
from models.enums import EventStatus, IdeaStatus, ProfileRole
from repositories.database import Base


def _utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class Profile(Base):
    __tablename__ = "profiles"

    # Subject claim of the identity provider token
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[Optional[str]] = mapped_column(String, index=True, nullable=True)
    full_name: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    role: Mapped[ProfileRole] = mapped_column(
        Enum(ProfileRole), default=ProfileRole.STUDENT, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    ideas: Mapped[List["Idea"]] = relationship("Idea", back_populates="author")

    @property
    def is_admin(self) -> bool:
        return self.role == ProfileRole.ADMIN


class Idea(Base):
    __tablename__ = "ideas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("profiles.id"), nullable=False
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    problem_statement: Mapped[str] = mapped_column(Text, nullable=False)
    solution: Mapped[str] = mapped_column(Text, nullable=False)
    market_opportunity: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    team_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    whatsapp_group_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[IdeaStatus] = mapped_column(
        Enum(IdeaStatus), default=IdeaStatus.DRAFT, nullable=False
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=_utc_now, onupdate=_utc_now
    )

    author: Mapped["Profile"] = relationship("Profile", back_populates="ideas")
    idea_files: Mapped[List["IdeaFile"]] = relationship(
        "IdeaFile",
        back_populates="idea",
        cascade="all, delete-orphan",
        order_by="IdeaFile.id",
    )

    __table_args__ = (
        Index("ix_ideas_status", "status"),
        Index("ix_ideas_user_status", "user_id", "status"),
        Index("ix_ideas_featured", "status", "is_featured"),
    )


class IdeaFile(Base):
    __tablename__ = "idea_files"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    idea_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("ideas.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name: Mapped[str] = mapped_column(String, nullable=False)
    file_type: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    file_size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    file_url: Mapped[str] = mapped_column(String, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    idea: Mapped["Idea"] = relationship("Idea", back_populates="idea_files")

    @property
    def preview_kind(self) -> str:
        return file_preview.preview_kind(self.file_type, self.file_name)

    @property
    def size_label(self) -> str:
        return file_preview.format_file_size(self.file_size)


class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    event_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    registration_link: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    status: Mapped[EventStatus] = mapped_column(
        Enum(EventStatus), default=EventStatus.DRAFT, nullable=False
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)

    __table_args__ = (Index("ix_events_status_date", "status", "event_date"),)


class ContactRequest(Base):
    __tablename__ = "contact_requests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    email: Mapped[str] = mapped_column(String, nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    idea_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("ideas.id", ondelete="SET NULL"), nullable=True
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("profiles.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utc_now)
