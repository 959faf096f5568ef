"""
Interview finalization.

Ends an interview: evaluates the transcript, persists the record and then
runs the best-effort follow-ups (PDF report, candidate email, HR
notification). A failure in any follow-up is logged and never affects the
saved record or the caller's response.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Protocol

from hireflow.agents.evaluator import EvaluationAgent
from hireflow.errors import ValidationError
from hireflow.schemas import FinalizeResult, InterviewRecord, TranscriptMessage

logger = logging.getLogger(__name__)

# Hands a coroutine function and its arguments to something that runs it
# after the response is sent (e.g. FastAPI BackgroundTasks.add_task).
Scheduler = Callable[..., Any]


class InterviewStoreProtocol(Protocol):
    async def save(self, record: InterviewRecord) -> InterviewRecord: ...


class ReportRendererProtocol(Protocol):
    async def render(self, record: InterviewRecord) -> bytes: ...


class NotifierProtocol(Protocol):
    async def send_interview_completion_email(
        self,
        to: str,
        candidate_name: str,
        feedback: Any,
        pdf_attachment: bytes | None = None,
    ) -> Any: ...

    async def send_hr_notification(
        self,
        candidate_name: str,
        feedback: Any,
        interview_id: str,
    ) -> Any: ...


class SessionFinalizer:
    """
    Coordinates the end of an interview.

    Order is fixed: evaluate, then save, then the follow-ups. Nothing is
    persisted when evaluation fails.
    """

    def __init__(
        self,
        evaluator: EvaluationAgent,
        store: InterviewStoreProtocol,
        report_renderer: ReportRendererProtocol | None = None,
        email_service: NotifierProtocol | None = None,
    ) -> None:
        """
        Initialize the finalizer.

        Args:
            evaluator: Agent producing the Feedback.
            store: Interview store the record is appended to.
            report_renderer: PDF renderer for the candidate attachment.
            email_service: Candidate and HR notifier.
        """
        self._evaluator = evaluator
        self._store = store
        self._report_renderer = report_renderer
        self._email_service = email_service

    async def finalize(
        self,
        messages: Sequence[TranscriptMessage],
        candidate_id: str,
        candidate_name: str | None = None,
        candidate_email: str | None = None,
        schedule: Scheduler | None = None,
    ) -> FinalizeResult:
        """
        Evaluate and persist a finished interview.

        Args:
            messages: Full chronological transcript.
            candidate_id: Identifier the resume was stored under.
            candidate_name: Display name, "Anonymous" when absent.
            candidate_email: Address for the results email, if any.
            schedule: Runs the follow-ups later when given; otherwise they
                are awaited before returning.

        Returns:
            The new interview id and its feedback.

        Raises:
            ValidationError: If the candidate id or transcript is missing.
            GenerationError: If the evaluation call fails.
            MalformedEvaluationError: If the evaluation cannot be parsed.
            PersistenceError: If the record could not be saved.
        """
        if not candidate_id:
            raise ValidationError("candidateId is required")
        if not messages:
            raise ValidationError("messages must not be empty")

        logger.info(f"Finalizing interview for candidate {candidate_id} ({len(messages)} messages)")
        feedback = await self._evaluator.evaluate(messages)

        record = InterviewRecord(
            candidate_id=candidate_id,
            candidate_name=candidate_name or "Anonymous",
            messages=list(messages),
            feedback=feedback,
        )
        saved = await self._store.save(record)
        logger.info(f"Interview {saved.id} saved with verdict {feedback.verdict.value}")

        if schedule is not None:
            schedule(self.run_side_effects, saved, candidate_email, candidate_name)
        else:
            await self.run_side_effects(saved, candidate_email, candidate_name)

        return FinalizeResult(interview_id=saved.id, feedback=feedback, record=saved)

    async def run_side_effects(
        self,
        record: InterviewRecord,
        candidate_email: str | None,
        candidate_name: str | None = None,
    ) -> None:
        """
        Render the report and send notifications. Never raises.

        ``candidate_name`` is the name as the caller gave it; the email
        greeting falls back to "Candidate" rather than the stored "Anonymous".
        """
        pdf_bytes: bytes | None = None

        if self._report_renderer is not None:
            pdf_bytes = await self._best_effort(
                "PDF generation",
                record,
                lambda: self._report_renderer.render(record),
            )

        if self._email_service is None:
            return

        if candidate_email:
            await self._best_effort(
                "Candidate email",
                record,
                lambda: self._email_service.send_interview_completion_email(
                    candidate_email,
                    candidate_name,
                    record.feedback,
                    pdf_attachment=pdf_bytes,
                ),
            )

        await self._best_effort(
            "HR notification",
            record,
            lambda: self._email_service.send_hr_notification(
                record.candidate_name,
                record.feedback,
                str(record.id),
            ),
        )

    @staticmethod
    async def _best_effort(
        label: str,
        record: InterviewRecord,
        step: Callable[[], Awaitable[Any]],
    ) -> Any:
        try:
            return await step()
        except Exception as e:
            logger.warning(f"{label} failed for interview {record.id}: {e}", exc_info=True)
            return None
