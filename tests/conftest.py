"""
Shared test doubles.

Fakes stand in for the LLM, document extraction, the identity provider,
email and PDF rendering so tests never touch the network.
"""

from typing import Any

import pytest
import pytest_asyncio

from hireflow.api.auth import AuthenticatedUser, TokenVerifier
from hireflow.db.session import Database
from hireflow.errors import AuthError, GenerationError
from hireflow.ingestion.extractor import TextExtractorBase
from hireflow.models.llm_client import LLMClientBase, LLMResponse, Message
from hireflow.notifications.email_service import EmailResult
from hireflow.schemas import Feedback, InterviewRecord

HIRE_EVALUATION = (
    '{"technicalScore":80,"communicationScore":75,"summary":"Strong candidate",'
    '"strengths":["React"],"weaknesses":["Testing"],"verdict":"Hire"}'
)

VALID_TOKEN = "valid-token"


class FakeLLMClient(LLMClientBase):
    """Returns queued replies and records every prompt it was given."""

    def __init__(self, replies: list[str] | None = None, default: str = "") -> None:
        self.replies = list(replies or [])
        self.default = default
        self.prompts: list[str] = []
        self.chat_calls: list[list[Message]] = []
        self.fail_with: Exception | None = None

    def _next(self) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        return self.replies.pop(0) if self.replies else self.default

    async def chat(self, messages, temperature=0.7, max_tokens=None, **kwargs) -> LLMResponse:
        self.chat_calls.append(list(messages))
        return LLMResponse(content=self._next(), finish_reason="stop", model="fake")

    async def complete(self, prompt, temperature=0.7, max_tokens=None, **kwargs) -> LLMResponse:
        self.prompts.append(prompt)
        return LLMResponse(content=self._next(), finish_reason="stop", model="fake")


class FakeExtractor(TextExtractorBase):
    """Treats the uploaded bytes as UTF-8 text."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def extract(self, data: bytes, filename: str = "") -> str:
        self.calls.append(filename)
        return data.decode("utf-8")


class FakeTokenVerifier(TokenVerifier):
    """Accepts only VALID_TOKEN."""

    async def verify(self, token: str) -> AuthenticatedUser:
        if token != VALID_TOKEN:
            raise AuthError("Invalid or expired token")
        return AuthenticatedUser(id="user-1", email="recruiter@example.com")


class FakeEmailService:
    """Records sends instead of delivering them."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.candidate_emails: list[dict[str, Any]] = []
        self.hr_notifications: list[dict[str, Any]] = []

    async def send_interview_completion_email(self, to, candidate_name, feedback, pdf_attachment=None):
        if self.fail:
            raise ConnectionError("SMTP down")
        self.candidate_emails.append(
            {"to": to, "candidate_name": candidate_name, "feedback": feedback, "pdf": pdf_attachment}
        )
        return EmailResult(success=True, message_id="<fake@hireflow.ai>")

    async def send_hr_notification(self, candidate_name, feedback, interview_id):
        if self.fail:
            raise ConnectionError("SMTP down")
        self.hr_notifications.append(
            {"candidate_name": candidate_name, "feedback": feedback, "interview_id": interview_id}
        )
        return EmailResult(success=True, message_id="<fake-hr@hireflow.ai>")


class FakeReportRenderer:
    """Returns a fixed PDF payload or fails on demand."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.rendered: list[InterviewRecord] = []

    async def render(self, record: InterviewRecord) -> bytes:
        if self.fail:
            raise RuntimeError("renderer broke")
        self.rendered.append(record)
        return b"%PDF-1.4 fake"


@pytest.fixture
def sample_feedback() -> Feedback:
    """Create a passing evaluation."""
    return Feedback(
        technical_score=80,
        communication_score=75,
        summary="Strong candidate",
        strengths=["React"],
        weaknesses=["Testing"],
        verdict="Hire",
    )


@pytest.fixture
def failing_llm() -> FakeLLMClient:
    """Create an LLM client whose every call times out."""
    llm = FakeLLMClient()
    llm.fail_with = GenerationError("Ollama timed out after 120 seconds")
    return llm


@pytest_asyncio.fixture
async def database(tmp_path):
    """A fresh SQLite database with the schema created."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_all()
    yield db
    await db.dispose()
