"""
Repository pattern for database operations.

``InterviewRepository`` works inside a caller-owned session;
``InterviewStore`` is the append-only facade the rest of the application
uses, opening one session per operation.
"""

import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hireflow.db.models import Base, InterviewModel
from hireflow.db.session import Database
from hireflow.errors import NotFoundError, PersistenceError
from hireflow.schemas import InterviewRecord

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Base)


class BaseRepository(ABC, Generic[T]):
    """Abstract base repository with read and insert operations."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @property
    @abstractmethod
    def _model_class(self) -> type[T]:
        """Get the model class for this repository."""
        ...

    async def get_by_id(self, entity_id: UUID) -> T | None:
        """
        Get an entity by its ID.

        Args:
            entity_id: The entity's UUID.

        Returns:
            The entity if found, None otherwise.
        """
        return await self._session.get(self._model_class, entity_id)

    async def create(self, entity: T) -> T:
        """
        Insert a new entity.

        Args:
            entity: The entity to create.

        Returns:
            The created entity.
        """
        self._session.add(entity)
        await self._session.flush()
        await self._session.refresh(entity)
        return entity


class InterviewRepository(BaseRepository[InterviewModel]):
    """Repository for interview operations."""

    @property
    def _model_class(self) -> type[InterviewModel]:
        """Get the model class."""
        return InterviewModel

    async def list_recent(self, limit: int | None = None) -> list[InterviewModel]:
        """
        List interviews, newest first.

        Args:
            limit: Maximum number to return (all if None).

        Returns:
            Interviews ordered by date descending.
        """
        stmt = select(InterviewModel).order_by(InterviewModel.date.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def save_record(self, record: InterviewRecord) -> InterviewModel:
        """
        Insert an interview record.

        Args:
            record: The record to persist.

        Returns:
            The created row, with its generated id.
        """
        return await self.create(InterviewModel.from_record(record))


class InterviewStore:
    """
    Append-only access to persisted interviews.

    Performs no access control; callers are expected to have authorized
    the request already. There is no update or delete.
    """

    def __init__(self, database: Database) -> None:
        self._database = database

    async def list(self) -> list[InterviewRecord]:
        """Return every interview, newest first."""
        try:
            async with self._database.session() as session:
                rows = await InterviewRepository(session).list_recent()
                return [row.to_record() for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list interviews: {e}", exc_info=True)
            raise PersistenceError(str(e), public_message="Fetch failed") from e

    async def get(self, interview_id: str | UUID) -> InterviewRecord:
        """
        Fetch one interview.

        Raises:
            NotFoundError: If no interview has this id (including malformed ids).
        """
        try:
            key = interview_id if isinstance(interview_id, UUID) else UUID(str(interview_id))
        except ValueError:
            raise NotFoundError(f"Interview not found: {interview_id}", public_message="Interview not found")

        try:
            async with self._database.session() as session:
                row = await InterviewRepository(session).get_by_id(key)
                record = row.to_record() if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to load interview {key}: {e}", exc_info=True)
            raise PersistenceError(str(e), public_message="Fetch failed") from e

        if record is None:
            raise NotFoundError(f"Interview not found: {key}", public_message="Interview not found")
        return record

    async def save(self, record: InterviewRecord) -> InterviewRecord:
        """
        Persist a new interview.

        Returns:
            The stored record including its generated id.

        Raises:
            PersistenceError: If the write did not commit.
        """
        try:
            async with self._database.session() as session:
                row = await InterviewRepository(session).save_record(record)
                saved = row.to_record()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save interview for {record.candidate_id}: {e}", exc_info=True)
            raise PersistenceError(str(e), public_message="Failed to save interview") from e

        logger.info(f"Saved interview {saved.id} for candidate {saved.candidate_id}")
        return saved
