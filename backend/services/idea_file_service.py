"""
Idea File Service

Records metadata of files uploaded to the external file store and attached
to an idea. The binary itself never passes through this service.
"""

from loguru import logger
from sqlalchemy.orm import Session

import models.schemas as schemas
import repositories.db_models as db_models
from models.exceptions import IdeaFileNotFoundException, IdeaNotFoundException
from repositories.idea_file_repository import IdeaFileRepository
from repositories.idea_repository import IdeaRepository


class IdeaFileService:
    """Service for attaching and removing idea files."""

    @staticmethod
    def _get_owned_idea(
        db: Session, auth: schemas.AuthContext, idea_id: int
    ) -> db_models.Idea:
        db_idea = IdeaRepository(db).get_owned(idea_id, auth.profile_id)
        if not db_idea:
            raise IdeaNotFoundException(idea_id)
        return db_idea

    @staticmethod
    def attach_file(
        db: Session,
        auth: schemas.AuthContext,
        idea_id: int,
        file: schemas.IdeaFileCreate,
    ) -> db_models.IdeaFile:
        """
        Attach an uploaded file to one of the caller's ideas.

        Args:
            db: Database session
            auth: Caller context
            idea_id: Idea ID
            file: File metadata returned by the file store

        Returns:
            Created file record

        Raises:
            IdeaNotFoundException: If the idea does not exist or is not the caller's
        """
        IdeaFileService._get_owned_idea(db, auth, idea_id)
        db_file = IdeaFileRepository(db).create(
            db_models.IdeaFile(idea_id=idea_id, **file.model_dump())
        )
        logger.info(f"File {db_file.id} attached to idea {idea_id}")
        return db_file

    @staticmethod
    def delete_file(
        db: Session, auth: schemas.AuthContext, idea_id: int, file_id: int
    ) -> None:
        """
        Remove a file record from one of the caller's ideas.

        Raises:
            IdeaNotFoundException: If the idea does not exist or is not the caller's
            IdeaFileNotFoundException: If the file is not attached to that idea
        """
        IdeaFileService._get_owned_idea(db, auth, idea_id)
        repo = IdeaFileRepository(db)
        db_file = repo.get_for_idea(idea_id, file_id)
        if not db_file:
            raise IdeaFileNotFoundException(file_id)
        repo.delete(db_file)
        logger.info(f"File {file_id} removed from idea {idea_id}")
