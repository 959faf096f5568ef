"""
PDF interview report.

Renders an InterviewRecord to a printable report with reportlab's canvas:
candidate details, colour-coded scores, verdict, summary, strengths,
weaknesses and a condensed transcript.
"""

from __future__ import annotations

import asyncio
import logging
import re
from datetime import datetime, timezone
from io import BytesIO

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from hireflow.errors import ReportError
from hireflow.schemas import InterviewRecord, MessageRole, Verdict

logger = logging.getLogger(__name__)

TRANSCRIPT_PREVIEW_MESSAGES = 10

BRAND = HexColor("#2563eb")
MUTED = HexColor("#64748b")
HEADING = HexColor("#1e293b")
BODY = HexColor("#475569")
FAINT = HexColor("#94a3b8")
GREEN = HexColor("#16a34a")
AMBER = HexColor("#eab308")
RED = HexColor("#dc2626")

MARGIN = 50
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def score_color(score: int) -> HexColor:
    """Green from 70, amber from 50, red below."""
    if score >= 70:
        return GREEN
    if score >= 50:
        return AMBER
    return RED


def verdict_color(verdict: Verdict) -> HexColor:
    if verdict == Verdict.HIRE:
        return GREEN
    if verdict == Verdict.NO_HIRE:
        return RED
    return AMBER


def report_filename(candidate_name: str | None) -> str:
    """Download filename for a candidate's report, whitespace runs as underscores."""
    name = re.sub(r"\s+", "_", candidate_name or "Anonymous")
    return f"Interview_Report_{name}.pdf"


class _PageWriter:
    """Top-down text cursor over a canvas that starts new pages as needed."""

    def __init__(self, pdf: canvas.Canvas, width: float, height: float) -> None:
        self.pdf = pdf
        self.width = width
        self.height = height
        self.y = height - MARGIN

    @property
    def text_width(self) -> float:
        return self.width - 2 * MARGIN

    def new_page(self) -> None:
        self.pdf.showPage()
        self.y = self.height - MARGIN

    def _ensure_room(self, needed: float) -> None:
        if self.y - needed < MARGIN:
            self.new_page()

    def space(self, amount: float) -> None:
        self.y -= amount

    def centered(self, text: str, size: int, color: HexColor, font: str = FONT_BOLD) -> None:
        self._ensure_room(size * 1.4)
        self.pdf.setFont(font, size)
        self.pdf.setFillColor(color)
        self.pdf.drawCentredString(self.width / 2, self.y - size, text)
        self.y -= size * 1.4

    def heading(self, text: str) -> None:
        self.space(8)
        self.paragraph(text, size=18, color=HEADING, font=FONT_BOLD)
        self.space(4)

    def paragraph(
        self,
        text: str,
        size: int = 12,
        color: HexColor = BODY,
        font: str = FONT,
        indent: float = 0,
    ) -> None:
        leading = size * 1.3
        lines = simpleSplit(text, font, size, self.text_width - indent) or [""]
        self.pdf.setFont(font, size)
        self.pdf.setFillColor(color)
        for line in lines:
            if self.y - leading < MARGIN:
                self.new_page()
                self.pdf.setFont(font, size)
                self.pdf.setFillColor(color)
            self.pdf.drawString(MARGIN + indent, self.y - size, line)
            self.y -= leading

    def labelled(self, label: str, value: str, value_color: HexColor, size: int = 14) -> None:
        """A muted label followed by a coloured value on the same line."""
        self._ensure_room(size * 1.5)
        self.pdf.setFont(FONT, size)
        self.pdf.setFillColor(BODY)
        self.pdf.drawString(MARGIN, self.y - size, label)
        offset = self.pdf.stringWidth(label, FONT, size) + 6
        self.pdf.setFont(FONT_BOLD, size + 2)
        self.pdf.setFillColor(value_color)
        self.pdf.drawString(MARGIN + offset, self.y - size, value)
        self.y -= size * 1.5

    def bullet(self, marker: str, marker_color: HexColor, text: str) -> None:
        size = 12
        self._ensure_room(size * 1.3)
        self.pdf.setFont(FONT_BOLD, size)
        self.pdf.setFillColor(marker_color)
        self.pdf.drawString(MARGIN, self.y - size, marker)
        self.paragraph(text, size=size, indent=16)
        self.space(2)


def _format_date(value: datetime) -> str:
    return value.strftime("%B %d, %Y %I:%M %p")


def render_interview_pdf(record: InterviewRecord, generated_at: datetime | None = None) -> bytes:
    """
    Render an interview report.

    Args:
        record: The persisted interview.
        generated_at: Timestamp for the footer (now if None).

    Returns:
        PDF bytes.
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    feedback = record.feedback

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=LETTER)
    pdf.setTitle(f"Interview Report - {record.candidate_name}")
    width, height = LETTER
    w = _PageWriter(pdf, width, height)

    w.centered("HireFlow AI", 24, BRAND)
    w.centered("Technical Interview Report", 16, MUTED, font=FONT)
    w.space(20)

    w.heading("Candidate Information")
    w.paragraph(f"Name: {record.candidate_name or 'Anonymous'}")
    w.paragraph(f"Candidate ID: {record.candidate_id}")
    w.paragraph(f"Interview Date: {_format_date(record.date)}")
    w.space(16)

    w.heading("Performance Scores")
    w.labelled("Technical Score:", f"{feedback.technical_score}/100", score_color(feedback.technical_score))
    w.labelled(
        "Communication Score:",
        f"{feedback.communication_score}/100",
        score_color(feedback.communication_score),
    )
    w.labelled("Final Verdict:", feedback.verdict.value, verdict_color(feedback.verdict))
    w.space(16)

    if feedback.summary:
        w.heading("Summary")
        w.paragraph(feedback.summary)
        w.space(16)

    if feedback.strengths:
        w.heading("Strengths")
        for strength in feedback.strengths:
            w.bullet("+", GREEN, strength)
        w.space(10)

    if feedback.weaknesses:
        w.heading("Areas for Improvement")
        for weakness in feedback.weaknesses:
            w.bullet("-", RED, weakness)
        w.space(10)

    if record.messages:
        w.new_page()
        w.heading("Interview Transcript")
        for message in record.messages[:TRANSCRIPT_PREVIEW_MESSAGES]:
            speaker = "Candidate" if message.role == MessageRole.USER else "AI Interviewer"
            w.paragraph(f"{speaker}:", size=11, color=BRAND, font=FONT_BOLD)
            w.paragraph(message.content, size=11)
            w.space(6)

        remaining = len(record.messages) - TRANSCRIPT_PREVIEW_MESSAGES
        if remaining > 0:
            w.paragraph(f"... and {remaining} more messages", size=10, color=FAINT)

    pdf.setFont(FONT, 10)
    pdf.setFillColor(FAINT)
    pdf.drawCentredString(width / 2, MARGIN / 2, f"Generated by HireFlow AI on {generated_at.strftime('%m/%d/%Y')}")

    pdf.save()
    buffer.seek(0)
    return buffer.read()


class PDFReportRenderer:
    """Async wrapper that renders reports off the event loop."""

    async def render(self, record: InterviewRecord) -> bytes:
        """
        Render a record to PDF bytes.

        Raises:
            ReportError: If rendering fails.
        """
        loop = asyncio.get_event_loop()
        try:
            data = await loop.run_in_executor(None, lambda: render_interview_pdf(record))
        except Exception as e:
            logger.error(f"PDF rendering failed for interview {record.id}: {e}", exc_info=True)
            raise ReportError(str(e)) from e

        logger.info(f"Rendered PDF report for interview {record.id} ({len(data)} bytes)")
        return data
