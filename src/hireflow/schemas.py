"""
Pydantic schemas for the interview lifecycle.

Defines transcripts, evaluation feedback, persisted interview records and
the results returned by ingestion, turns and finalization. JSON field names
are camelCase on the wire; Python attributes are snake_case.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


def _now_utc() -> datetime:
    """Get current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dict with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class MessageRole(str, Enum):
    """Speaker of a transcript message."""

    USER = "user"
    AI = "ai"
    SYSTEM = "system"


class Verdict(str, Enum):
    """Final hiring recommendation."""

    HIRE = "Hire"
    NO_HIRE = "No Hire"
    REVIEW = "Review"


class TranscriptMessage(CamelModel):
    """A single message of the interview chat."""

    role: MessageRole = Field(..., description="Who sent the message")
    content: str = Field(..., description="Message text")
    timestamp: datetime = Field(default_factory=_now_utc, description="When the message was sent")

    @field_validator("role", mode="before")
    @classmethod
    def _normalise_role(cls, value: Any) -> Any:
        # Chat clients label the model's turns "assistant".
        if isinstance(value, str) and value.strip().lower() == "assistant":
            return MessageRole.AI
        return value


class Feedback(CamelModel):
    """Structured evaluation produced once per interview."""

    technical_score: int = Field(..., ge=0, le=100, description="Technical skills score (0-100)")
    communication_score: int = Field(..., ge=0, le=100, description="Communication score (0-100)")
    summary: str = Field(..., description="Short performance summary")
    strengths: list[str] = Field(..., description="Observed strengths")
    weaknesses: list[str] = Field(..., description="Areas for improvement")
    verdict: Verdict = Field(..., description="Hire, No Hire or Review")


class InterviewRecord(CamelModel):
    """A completed interview as held by the interview store."""

    id: UUID | None = Field(default=None, description="Generated by the store on save")
    candidate_id: str = Field(..., min_length=1, description="Correlates with vector-store entries")
    candidate_name: str = Field(default="Anonymous", description="Display name of the candidate")
    date: datetime = Field(default_factory=_now_utc, description="When the record was created")
    messages: list[TranscriptMessage] = Field(default_factory=list, description="Chronological transcript")
    feedback: Feedback = Field(..., description="Evaluation of the interview")


class SkillGroups(CamelModel):
    """Skills grouped the way the resume parser reports them."""

    languages: list[str] = Field(default_factory=list)
    frameworks: list[str] = Field(default_factory=list)
    tools: list[str] = Field(default_factory=list)
    databases: list[str] = Field(default_factory=list)

    def flatten(self) -> list[str]:
        """All skills in group order."""
        return [*self.languages, *self.frameworks, *self.tools, *self.databases]


class ParsedResume(CamelModel):
    """Structured fields extracted from resume text."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    skills: SkillGroups = Field(default_factory=SkillGroups)
    experience: list[dict[str, Any]] = Field(default_factory=list)
    education: list[dict[str, Any]] = Field(default_factory=list)
    projects: list[dict[str, Any]] = Field(default_factory=list)
    summary: str | None = None
    years_of_experience: float | None = None


class IngestionResult(CamelModel):
    """Outcome of a resume upload."""

    id: str = Field(..., description="Candidate identifier the resume was stored under")
    parsed_data: ParsedResume | None = Field(default=None, description="Structured fields, if parsing succeeded")
    skills: list[str] = Field(default_factory=list, description="Flattened skill list")
    text_length: int = Field(..., description="Characters of extracted text")


class TurnReply(CamelModel):
    """Interviewer reply to one candidate message."""

    reply: str
    context_used: str


class FinalizeResult(CamelModel):
    """Outcome of ending an interview."""

    interview_id: UUID
    feedback: Feedback
    record: InterviewRecord = Field(..., exclude=True)
