"""
Request bodies accepted by the HTTP API.
"""

from pydantic import Field

from hireflow.schemas import CamelModel, TranscriptMessage


class ChatRequest(CamelModel):
    """One candidate message for the interviewer."""

    message: str | None = Field(default=None, description="Latest candidate message")
    candidate_id: str | None = Field(default=None, description="Restricts retrieval to this candidate's resume")


class EndInterviewRequest(CamelModel):
    """Finished transcript plus candidate identity."""

    messages: list[TranscriptMessage] = Field(default_factory=list)
    candidate_id: str | None = None
    candidate_name: str | None = None
    candidate_email: str | None = None
