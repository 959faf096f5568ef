"""
Tests for email notifications.
"""

import smtplib

import pytest

from hireflow.config import Settings
from hireflow.notifications.email_service import EmailService
from hireflow.schemas import Feedback, Verdict


@pytest.fixture
def preview_service() -> EmailService:
    """Create an email service with SMTP unconfigured."""
    return EmailService(Settings(smtp_host="", smtp_user="", smtp_password=""))


@pytest.fixture
def smtp_settings() -> Settings:
    """Create settings with SMTP configured."""
    return Settings(
        smtp_host="smtp.example.com",
        smtp_port=2525,
        smtp_user="mailer",
        smtp_password="secret",
        email_from="noreply@hireflow.ai",
        hr_email="talent@example.com",
    )


class RecordingSMTP:
    """Captures sent messages in place of smtplib.SMTP."""

    sent: list = []

    def __init__(self, host, port, timeout=None) -> None:
        self.host = host
        self.port = port

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        return None

    def starttls(self) -> None:
        pass

    def login(self, user, password) -> None:
        pass

    def send_message(self, msg) -> None:
        RecordingSMTP.sent.append(msg)


class RefusingSMTP(RecordingSMTP):
    def login(self, user, password) -> None:
        raise smtplib.SMTPAuthenticationError(535, b"bad credentials")


class TestCandidateEmail:
    """Tests for the candidate results email."""

    def test_subject_and_attachment(self, preview_service: EmailService, sample_feedback: Feedback) -> None:
        """Test the subject, PDF attachment and score styling."""
        msg = preview_service.build_candidate_email(
            "ada@example.com",
            "Ada Lovelace",
            sample_feedback,
            pdf_attachment=b"%PDF-1.4",
        )

        assert msg["Subject"] == "Interview Results - Hire ✅"
        assert msg["From"] == "noreply@hireflow.ai"
        attachments = list(msg.iter_attachments())
        assert len(attachments) == 1
        assert attachments[0].get_filename() == "Interview_Report_Ada_Lovelace.pdf"
        assert attachments[0].get_content_type() == "application/pdf"

        html_part = msg.get_body(preferencelist=("html",))
        html = html_part.get_content()
        assert "#16a34a" in html
        assert "80/100" in html
        assert "<li>React</li>" in html

    def test_verdict_emoji(self, preview_service: EmailService, sample_feedback: Feedback) -> None:
        """Test the verdict emoji in the subject."""
        no_hire = sample_feedback.model_copy(update={"verdict": Verdict.NO_HIRE})
        review = sample_feedback.model_copy(update={"verdict": Verdict.REVIEW})

        assert preview_service.build_candidate_email("a@b.c", "A", no_hire)["Subject"].endswith("❌")
        assert preview_service.build_candidate_email("a@b.c", "A", review)["Subject"].endswith("⏳")

    def test_user_text_is_escaped(self, preview_service: EmailService, sample_feedback: Feedback) -> None:
        """Test that names and feedback are HTML-escaped."""
        feedback = sample_feedback.model_copy(update={"strengths": ["<script>alert(1)</script>"]})

        msg = preview_service.build_candidate_email("a@b.c", "<b>Eve</b>", feedback)
        html = msg.get_body(preferencelist=("html",)).get_content()

        assert "<script>" not in html
        assert "&lt;b&gt;Eve&lt;/b&gt;" in html
        assert list(msg.iter_attachments()) == []

    def test_missing_name_greets_candidate(self, preview_service: EmailService, sample_feedback: Feedback) -> None:
        """Test that an email without a name greets "Candidate"."""
        msg = preview_service.build_candidate_email("a@b.c", None, sample_feedback)

        assert "Hi Candidate," in msg.get_body(preferencelist=("plain",)).get_content()
        assert "Anonymous" not in msg.get_body(preferencelist=("html",)).get_content()


class TestSending:
    """Tests for delivery."""

    @pytest.mark.asyncio
    async def test_preview_mode_does_not_send(self, preview_service: EmailService, sample_feedback: Feedback) -> None:
        """Test that preview mode reports success without sending."""
        result = await preview_service.send_interview_completion_email("ada@example.com", "Ada", sample_feedback)

        assert result.success
        assert result.preview
        assert result.message_id

    @pytest.mark.asyncio
    async def test_hr_notification_over_smtp(self, smtp_settings, sample_feedback, monkeypatch) -> None:
        """Test sending the HR notification over SMTP."""
        RecordingSMTP.sent = []
        monkeypatch.setattr(smtplib, "SMTP", RecordingSMTP)

        result = await EmailService(smtp_settings).send_hr_notification("Ada Lovelace", sample_feedback, "abc-123")

        assert result.success
        assert not result.preview
        msg = RecordingSMTP.sent[0]
        assert msg["To"] == "talent@example.com"
        assert msg["Subject"] == "New Interview: Ada Lovelace - Hire"
        assert "abc-123" in msg.get_body(preferencelist=("plain",)).get_content()

    @pytest.mark.asyncio
    async def test_smtp_failure_is_reported(self, smtp_settings, sample_feedback, monkeypatch) -> None:
        """Test that an SMTP failure is returned, not raised."""
        monkeypatch.setattr(smtplib, "SMTP", RefusingSMTP)

        result = await EmailService(smtp_settings).send_interview_completion_email("a@b.c", "A", sample_feedback)

        assert not result.success
        assert "bad credentials" in result.error
