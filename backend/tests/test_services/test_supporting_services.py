"""Unit tests for the event, contact, file and stats services."""

from datetime import datetime

import pytest

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import (
    EventNotFoundException,
    IdeaFileNotFoundException,
    IdeaNotFoundException,
)
from services import ContactService, EventService, IdeaFileService, StatsService


class TestEventService:
    """Tests for EventService."""

    def test_published_only(self, db_session, make_event):
        published = make_event()
        make_event(status=db_models.EventStatus.DRAFT)

        assert [e.id for e in EventService.get_published_events(db_session)] == [published.id]

    def test_create_and_update(self, db_session, admin_context):
        event = EventService.create_event(
            db_session,
            admin_context,
            schemas.EventCreate(
                title="Hack Night", event_date=datetime(2026, 12, 5, 19), location=""
            ),
        )
        assert event.location is None
        assert event.status == db_models.EventStatus.DRAFT

        updated = EventService.update_event(
            db_session,
            admin_context,
            event.id,
            schemas.EventUpdate(status=db_models.EventStatus.PUBLISHED, is_featured=True),
        )
        assert updated.status == db_models.EventStatus.PUBLISHED
        assert updated.is_featured is True
        assert updated.title == "Hack Night"

    def test_missing(self, db_session):
        with pytest.raises(EventNotFoundException):
            EventService.get_event(db_session, 1)


class TestContactService:
    """Tests for ContactService."""

    def test_submit(self, db_session, student_context, approved_idea):
        request = ContactService.submit_request(
            db_session,
            schemas.ContactRequestCreate(
                name="Investor",
                email="money@example.com",
                message="Let's talk",
                idea_id=approved_idea.id,
            ),
            student_context,
        )

        assert request.user_id == student_context.profile_id
        assert ContactService.get_requests(db_session)[0].id == request.id

    def test_unknown_idea(self, db_session):
        with pytest.raises(IdeaNotFoundException):
            ContactService.submit_request(
                db_session,
                schemas.ContactRequestCreate(
                    name="X", email="x@example.com", message="Hi", idea_id=77
                ),
            )


class TestIdeaFileService:
    """Tests for IdeaFileService."""

    def test_attach_then_delete(self, db_session, student_context, draft_idea):
        db_file = IdeaFileService.attach_file(
            db_session,
            student_context,
            draft_idea.id,
            schemas.IdeaFileCreate(
                file_name="photo.jpg",
                file_type="image/jpeg",
                file_size=1024,
                file_url="https://files.example.com/photo.jpg",
            ),
        )
        assert db_file.preview_kind == "image"
        assert db_file.size_label == "1.00 KB"

        IdeaFileService.delete_file(db_session, student_context, draft_idea.id, db_file.id)
        assert db_session.get(db_models.IdeaFile, db_file.id) is None

    def test_file_of_another_idea(self, db_session, student_context, draft_idea, make_idea):
        other = make_idea()
        db_file = IdeaFileService.attach_file(
            db_session,
            student_context,
            other.id,
            schemas.IdeaFileCreate(file_name="a.pdf", file_url="https://f/a.pdf"),
        )

        with pytest.raises(IdeaFileNotFoundException):
            IdeaFileService.delete_file(db_session, student_context, draft_idea.id, db_file.id)

    def test_non_owner(self, db_session, other_context, draft_idea):
        with pytest.raises(IdeaNotFoundException):
            IdeaFileService.attach_file(
                db_session,
                other_context,
                draft_idea.id,
                schemas.IdeaFileCreate(file_name="a.pdf", file_url="https://f/a.pdf"),
            )

    def test_files_deleted_with_idea(self, db_session, student_context, draft_idea):
        db_file = IdeaFileService.attach_file(
            db_session,
            student_context,
            draft_idea.id,
            schemas.IdeaFileCreate(file_name="a.pdf", file_url="https://f/a.pdf"),
        )
        file_id = db_file.id

        db_session.delete(draft_idea)
        db_session.commit()

        assert db_session.get(db_models.IdeaFile, file_id) is None


class TestStatsService:
    """Tests for StatsService."""

    def test_approval_rate_rounding(self, db_session, make_idea):
        make_idea(status=db_models.IdeaStatus.APPROVED)
        make_idea()
        make_idea()

        stats = StatsService.get_admin_stats(db_session)

        assert stats.approval_rate == 33.3
        assert stats.pending_ideas == 2

    def test_home_page_respects_featured_limit(self, db_session, make_idea, monkeypatch):
        from models.config import settings

        monkeypatch.setattr(settings, "FEATURED_IDEAS_LIMIT", 2)
        for _ in range(3):
            make_idea(status=db_models.IdeaStatus.APPROVED, is_featured=True)

        home = StatsService.get_home_page(db_session)

        assert len(home.featured_ideas) == 2
        assert home.approved_ideas_count == 3
