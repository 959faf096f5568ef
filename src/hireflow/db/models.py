"""
SQLAlchemy models for database persistence.

Interviews are stored as one row each, with the transcript and the
evaluation kept as JSON documents.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, String, Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from hireflow.schemas import InterviewRecord


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class InterviewModel(Base):
    """Database model for completed interviews."""

    __tablename__ = "interviews"

    id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    candidate_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    candidate_name: Mapped[str] = mapped_column(
        String(255),
        default="Anonymous",
        nullable=False,
    )
    date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_now_utc,
        nullable=False,
        index=True,
    )
    messages: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list, nullable=False)
    feedback: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)

    @classmethod
    def from_record(cls, record: InterviewRecord) -> "InterviewModel":
        """Build a row from a record, generating an id if it has none."""
        data = record.to_json_dict()
        return cls(
            id=record.id or uuid4(),
            candidate_id=record.candidate_id,
            candidate_name=record.candidate_name,
            date=record.date,
            messages=data["messages"],
            feedback=data["feedback"],
        )

    def to_record(self) -> InterviewRecord:
        """Convert the row back into an InterviewRecord."""
        date = self.date
        if date.tzinfo is None:
            # SQLite drops tzinfo; values were written as UTC.
            date = date.replace(tzinfo=timezone.utc)
        return InterviewRecord.model_validate(
            {
                "id": self.id,
                "candidateId": self.candidate_id,
                "candidateName": self.candidate_name,
                "date": date,
                "messages": self.messages,
                "feedback": self.feedback,
            }
        )
