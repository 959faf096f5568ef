"""
Email notifications.

Sends the candidate their results (with the PDF report attached) and tells
HR that an interview finished. Without SMTP credentials the service runs in
preview mode: messages are built and logged but not delivered.
"""

from __future__ import annotations

import asyncio
import html
import logging
import smtplib
from datetime import datetime, timezone
from email.message import EmailMessage
from email.utils import make_msgid

from pydantic import BaseModel, Field

from hireflow.config import Settings, get_settings
from hireflow.reports.pdf_report import report_filename
from hireflow.schemas import Feedback, Verdict

logger = logging.getLogger(__name__)

VERDICT_COLORS = {
    Verdict.HIRE: "#16a34a",
    Verdict.NO_HIRE: "#dc2626",
}
VERDICT_EMOJI = {
    Verdict.HIRE: "✅",
    Verdict.NO_HIRE: "❌",
}
DEFAULT_VERDICT_COLOR = "#eab308"
DEFAULT_VERDICT_EMOJI = "⏳"


class EmailResult(BaseModel):
    """Outcome of one send attempt. Failures are reported, not raised."""

    success: bool
    message_id: str | None = None
    preview: bool = Field(default=False, description="Built and logged but not delivered")
    error: str | None = None


def verdict_style(verdict: Verdict) -> tuple[str, str]:
    """Colour and emoji shown next to a verdict."""
    return (
        VERDICT_COLORS.get(verdict, DEFAULT_VERDICT_COLOR),
        VERDICT_EMOJI.get(verdict, DEFAULT_VERDICT_EMOJI),
    )


def _list_items(items: list[str]) -> str:
    return "".join(f"<li>{html.escape(item)}</li>" for item in items)


class EmailService:
    """SMTP notifier for interview results."""

    CANDIDATE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: -apple-system, 'Segoe UI', Roboto, Arial, sans-serif; line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #2563eb; color: white; padding: 30px; border-radius: 10px 10px 0 0; text-align: center; }}
    .content {{ background: #f8fafc; padding: 30px; border-radius: 0 0 10px 10px; }}
    .card {{ background: white; padding: 20px; border-radius: 8px; margin: 20px 0; }}
    .score {{ font-size: 32px; font-weight: bold; color: {color}; }}
    .verdict {{ display: inline-block; padding: 10px 20px; background: {color}; color: white; border-radius: 20px; font-weight: bold; }}
    .footer {{ text-align: center; color: #64748b; font-size: 12px; margin-top: 30px; }}
  </style>
</head>
<body>
  <div class="header">
    <h1>HireFlow AI</h1>
    <p>Technical Interview Results</p>
  </div>
  <div class="content">
    <h2>Hi {name},</h2>
    <p>Thank you for completing your technical interview with HireFlow AI. Here are your results:</p>
    <div class="card">
      <h3>Performance Scores</h3>
      <p><strong>Technical Skills:</strong> <span class="score">{technical}/100</span></p>
      <p><strong>Communication:</strong> <span class="score">{communication}/100</span></p>
      <p><strong>Final Verdict:</strong> <span class="verdict">{emoji} {verdict}</span></p>
    </div>
    {sections}
    {attachment_note}
    <p>Best of luck with your job search!</p>
    <p>Best regards,<br><strong>HireFlow AI Team</strong></p>
  </div>
  <div class="footer">
    <p>This is an automated email from HireFlow AI Interview Platform</p>
    <p>&copy; {year} HireFlow AI. All rights reserved.</p>
  </div>
</body>
</html>
"""

    HR_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
  <style>
    body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
    .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
    .header {{ background: #2563eb; color: white; padding: 20px; border-radius: 8px; }}
    .content {{ background: #f8fafc; padding: 20px; margin-top: 20px; border-radius: 8px; }}
    .highlight {{ background: #fef3c7; padding: 10px; border-left: 4px solid #f59e0b; margin: 15px 0; }}
  </style>
</head>
<body>
  <div class="container">
    <div class="header"><h2>New Interview Completed</h2></div>
    <div class="content">
      <p><strong>Candidate:</strong> {name}</p>
      <p><strong>Technical Score:</strong> {technical}/100</p>
      <p><strong>Communication Score:</strong> {communication}/100</p>
      <p><strong>Verdict:</strong> {verdict}</p>
      <div class="highlight"><p><strong>Quick Summary:</strong> {summary}</p></div>
      <p>View full details in your HireFlow AI dashboard.</p>
      <p><small>Interview ID: {interview_id}</small></p>
    </div>
  </div>
</body>
</html>
"""

    def __init__(self, settings: Settings | None = None) -> None:
        """
        Initialize the email service.

        Args:
            settings: Application settings (SMTP credentials, sender, HR address).
        """
        self._settings = settings or get_settings()
        if not self._settings.smtp_configured:
            logger.warning("Email credentials not configured. Emails will be logged, not sent.")

    @property
    def preview_mode(self) -> bool:
        return not self._settings.smtp_configured

    def build_candidate_email(
        self,
        to: str,
        candidate_name: str | None,
        feedback: Feedback,
        pdf_attachment: bytes | None = None,
    ) -> EmailMessage:
        """Compose the results email sent to the candidate."""
        color, emoji = verdict_style(feedback.verdict)

        sections = []
        if feedback.summary:
            sections.append(f'<div class="card"><h3>Summary</h3><p>{html.escape(feedback.summary)}</p></div>')
        if feedback.strengths:
            sections.append(f'<div class="card"><h3>Strengths</h3><ul>{_list_items(feedback.strengths)}</ul></div>')
        if feedback.weaknesses:
            sections.append(
                f'<div class="card"><h3>Areas for Improvement</h3><ul>{_list_items(feedback.weaknesses)}</ul></div>'
            )

        body = self.CANDIDATE_TEMPLATE.format(
            color=color,
            emoji=emoji,
            name=html.escape(candidate_name or "Candidate"),
            technical=feedback.technical_score,
            communication=feedback.communication_score,
            verdict=html.escape(feedback.verdict.value),
            sections="\n    ".join(sections),
            attachment_note=(
                "<p>A detailed PDF report is attached to this email for your records.</p>" if pdf_attachment else ""
            ),
            year=datetime.now(timezone.utc).year,
        )

        msg = EmailMessage()
        msg["Subject"] = f"Interview Results - {feedback.verdict.value} {emoji}"
        msg["From"] = self._settings.email_from
        msg["To"] = to
        msg["Message-ID"] = make_msgid(domain="hireflow.ai")
        msg.set_content(
            f"Hi {candidate_name or 'Candidate'},\n\n"
            f"Technical Skills: {feedback.technical_score}/100\n"
            f"Communication: {feedback.communication_score}/100\n"
            f"Final Verdict: {feedback.verdict.value}\n\n"
            f"{feedback.summary}\n"
        )
        msg.add_alternative(body, subtype="html")

        if pdf_attachment:
            msg.add_attachment(
                pdf_attachment,
                maintype="application",
                subtype="pdf",
                filename=report_filename(candidate_name or "Candidate"),
            )
        return msg

    def build_hr_email(self, candidate_name: str | None, feedback: Feedback, interview_id: str) -> EmailMessage:
        """Compose the HR notification for a finished interview."""
        name = candidate_name or "Anonymous"
        body = self.HR_TEMPLATE.format(
            name=html.escape(name),
            technical=feedback.technical_score,
            communication=feedback.communication_score,
            verdict=html.escape(feedback.verdict.value),
            summary=html.escape(feedback.summary or "No summary available"),
            interview_id=html.escape(interview_id),
        )

        msg = EmailMessage()
        msg["Subject"] = f"New Interview: {name} - {feedback.verdict.value}"
        msg["From"] = self._settings.email_from
        msg["To"] = self._settings.hr_email
        msg["Message-ID"] = make_msgid(domain="hireflow.ai")
        msg.set_content(
            f"Candidate: {name}\n"
            f"Technical Score: {feedback.technical_score}/100\n"
            f"Communication Score: {feedback.communication_score}/100\n"
            f"Verdict: {feedback.verdict.value}\n"
            f"Interview ID: {interview_id}\n"
        )
        msg.add_alternative(body, subtype="html")
        return msg

    async def send_interview_completion_email(
        self,
        to: str,
        candidate_name: str | None,
        feedback: Feedback,
        pdf_attachment: bytes | None = None,
    ) -> EmailResult:
        """Send the candidate their results."""
        try:
            msg = self.build_candidate_email(to, candidate_name, feedback, pdf_attachment)
        except Exception as e:
            logger.error(f"Failed to build candidate email: {e}", exc_info=True)
            return EmailResult(success=False, error=str(e))
        return await self._send(msg)

    async def send_hr_notification(
        self,
        candidate_name: str | None,
        feedback: Feedback,
        interview_id: str,
    ) -> EmailResult:
        """Tell HR a new interview was completed."""
        try:
            msg = self.build_hr_email(candidate_name, feedback, interview_id)
        except Exception as e:
            logger.error(f"Failed to build HR notification: {e}", exc_info=True)
            return EmailResult(success=False, error=str(e))
        return await self._send(msg)

    async def _send(self, msg: EmailMessage) -> EmailResult:
        message_id = msg["Message-ID"]

        if self.preview_mode:
            logger.info(f"Email preview (not sent) | to={msg['To']} | subject={msg['Subject']} | id={message_id}")
            return EmailResult(success=True, message_id=message_id, preview=True)

        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, lambda: self._deliver(msg))
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email sending failed to {msg['To']}: {e}")
            return EmailResult(success=False, error=str(e))

        logger.info(f"Email sent to {msg['To']}: {msg['Subject']}")
        return EmailResult(success=True, message_id=message_id)

    def _deliver(self, msg: EmailMessage) -> None:
        s = self._settings
        with smtplib.SMTP(s.smtp_host, s.smtp_port, timeout=20) as server:
            if s.smtp_use_tls:
                server.starttls()
            server.login(s.smtp_user, s.smtp_password)
            server.send_message(msg)
