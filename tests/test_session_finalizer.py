"""
Tests for interview finalization.
"""

import pytest
from conftest import HIRE_EVALUATION, FakeEmailService, FakeLLMClient, FakeReportRenderer

from hireflow.agents.evaluator import EvaluationAgent
from hireflow.db.repository import InterviewStore
from hireflow.errors import MalformedEvaluationError, PersistenceError, ValidationError
from hireflow.orchestrator.session_finalizer import SessionFinalizer
from hireflow.schemas import InterviewRecord, TranscriptMessage, Verdict


class FailingStore:
    """Store whose saves always fail."""

    async def save(self, record: InterviewRecord) -> InterviewRecord:
        raise PersistenceError("disk full")


@pytest.fixture
def transcript() -> list[TranscriptMessage]:
    """Create a two-message transcript."""
    return [
        TranscriptMessage(role="ai", content="Tell me about your React experience."),
        TranscriptMessage(role="user", content="Five years building React and Node apps."),
    ]


class TestSessionFinalizer:
    """Tests for SessionFinalizer."""

    @pytest.mark.asyncio
    async def test_persists_one_record_with_evaluation(self, database, transcript) -> None:
        """Test that one evaluated record is saved and notifications go out."""
        store = InterviewStore(database)
        emails = FakeEmailService()
        renderer = FakeReportRenderer()
        finalizer = SessionFinalizer(EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)), store, renderer, emails)

        result = await finalizer.finalize(
            transcript,
            "cand1",
            candidate_name="Ada Lovelace",
            candidate_email="ada@example.com",
        )

        records = await store.list()
        assert len(records) == 1
        saved = records[0]
        assert saved.id == result.interview_id
        assert saved.candidate_name == "Ada Lovelace"
        assert saved.feedback.verdict in set(Verdict)
        assert saved.feedback == result.feedback
        assert [m.content for m in saved.messages] == [m.content for m in transcript]

        assert len(renderer.rendered) == 1
        assert emails.candidate_emails[0]["to"] == "ada@example.com"
        assert emails.candidate_emails[0]["pdf"] == b"%PDF-1.4 fake"
        assert emails.hr_notifications[0]["interview_id"] == str(result.interview_id)

    @pytest.mark.asyncio
    async def test_malformed_evaluation_persists_nothing(self, database, transcript) -> None:
        """Test that a malformed evaluation saves nothing."""
        store = InterviewStore(database)
        emails = FakeEmailService()
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default="Great candidate, would hire!")),
            store,
            FakeReportRenderer(),
            emails,
        )

        with pytest.raises(MalformedEvaluationError):
            await finalizer.finalize(transcript, "cand1")

        assert await store.list() == []
        assert emails.hr_notifications == []

    @pytest.mark.asyncio
    async def test_side_effect_failures_do_not_fail_finalize(self, database, transcript) -> None:
        """Test that failing side effects do not fail finalize."""
        store = InterviewStore(database)
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)),
            store,
            FakeReportRenderer(fail=True),
            FakeEmailService(fail=True),
        )

        result = await finalizer.finalize(transcript, "cand1", candidate_email="ada@example.com")

        assert result.feedback.verdict == Verdict.HIRE
        assert len(await store.list()) == 1

    @pytest.mark.asyncio
    async def test_pdf_failure_still_emails_without_attachment(self, database, transcript) -> None:
        """Test emailing without an attachment when the PDF fails."""
        emails = FakeEmailService()
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)),
            InterviewStore(database),
            FakeReportRenderer(fail=True),
            emails,
        )

        await finalizer.finalize(transcript, "cand1", candidate_email="ada@example.com")

        assert emails.candidate_emails[0]["pdf"] is None
        assert len(emails.hr_notifications) == 1

    @pytest.mark.asyncio
    async def test_no_candidate_email_only_notifies_hr(self, database, transcript) -> None:
        """Test that only HR is notified without a candidate address."""
        emails = FakeEmailService()
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)),
            InterviewStore(database),
            FakeReportRenderer(),
            emails,
        )

        result = await finalizer.finalize(transcript, "cand1")

        assert emails.candidate_emails == []
        assert emails.hr_notifications[0]["candidate_name"] == "Anonymous"
        assert result.record.candidate_name == "Anonymous"

    @pytest.mark.asyncio
    async def test_schedule_defers_side_effects(self, database, transcript) -> None:
        """Test deferring side effects to a scheduler."""
        emails = FakeEmailService()
        scheduled = []
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)),
            InterviewStore(database),
            FakeReportRenderer(),
            emails,
        )

        await finalizer.finalize(transcript, "cand1", schedule=lambda fn, *args: scheduled.append((fn, args)))

        assert emails.hr_notifications == []
        fn, args = scheduled[0]
        await fn(*args)
        assert len(emails.hr_notifications) == 1

    @pytest.mark.asyncio
    async def test_persistence_failure_propagates(self, transcript) -> None:
        """Test that a save failure propagates."""
        finalizer = SessionFinalizer(EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)), FailingStore())

        with pytest.raises(PersistenceError):
            await finalizer.finalize(transcript, "cand1")

    @pytest.mark.asyncio
    async def test_requires_candidate_and_messages(self, transcript) -> None:
        """Test that a candidate id and messages are required."""
        finalizer = SessionFinalizer(EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)), FailingStore())

        with pytest.raises(ValidationError):
            await finalizer.finalize(transcript, "")
        with pytest.raises(ValidationError):
            await finalizer.finalize([], "cand1")

    @pytest.mark.asyncio
    async def test_candidate_email_gets_name_as_given(self, database, transcript) -> None:
        """Test that a nameless candidate is not greeted with the stored default."""
        emails = FakeEmailService()
        finalizer = SessionFinalizer(
            EvaluationAgent(FakeLLMClient(default=HIRE_EVALUATION)),
            InterviewStore(database),
            FakeReportRenderer(),
            emails,
        )

        result = await finalizer.finalize(transcript, "cand1", candidate_email="ada@example.com")

        assert result.record.candidate_name == "Anonymous"
        assert emails.candidate_emails[0]["candidate_name"] is None
        assert emails.hr_notifications[0]["candidate_name"] == "Anonymous"
