"""
HTTP routes.

Handlers stay thin: they validate input, call one service from the
container and shape the JSON response. Errors propagate as HireFlowError
and are rendered by the handlers registered in ``hireflow.api.app``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile
from fastapi.responses import Response

from hireflow.api.auth import AuthenticatedUser, require_auth
from hireflow.api.schemas import ChatRequest, EndInterviewRequest
from hireflow.errors import ValidationError
from hireflow.reports.pdf_report import report_filename

logger = logging.getLogger(__name__)

router = APIRouter()


def get_container(request: Request) -> Any:
    """The ServiceContainer built at startup."""
    return request.app.state.container


@router.get("/")
async def health() -> dict[str, str]:
    return {
        "status": "Active",
        "message": "HireFlow AI Backend is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.post("/api/upload")
async def upload_resume(
    resume: UploadFile | None = File(default=None),
    candidate_id: str | None = Form(default=None, alias="candidateId"),
    container: Any = Depends(get_container),
) -> dict[str, Any]:
    """Extract, parse and index an uploaded resume."""
    if resume is None:
        raise ValidationError("No file uploaded")

    data = await resume.read()
    result = await container.ingestion.ingest(data, filename=resume.filename or "", candidate_id=candidate_id)
    return {
        "success": True,
        "message": "Resume processed and stored in memory.",
        **result.to_json_dict(),
    }


@router.post("/api/chat")
async def chat(body: ChatRequest, container: Any = Depends(get_container)) -> dict[str, Any]:
    """Produce the interviewer's next reply."""
    if not body.message or not body.message.strip():
        raise ValidationError("Message is required")

    reply = await container.interviewer.next_turn(body.message, candidate_id=body.candidate_id)
    return reply.to_json_dict()


@router.post("/api/interview/end")
async def end_interview(
    body: EndInterviewRequest,
    background_tasks: BackgroundTasks,
    user: AuthenticatedUser = Depends(require_auth),
    container: Any = Depends(get_container),
) -> dict[str, Any]:
    """Evaluate and store a finished interview; notifications run after the response."""
    if not body.candidate_id:
        raise ValidationError("candidateId is required")
    if not body.messages:
        raise ValidationError("messages are required")

    logger.info(f"User {user.id} ending interview for candidate {body.candidate_id}")
    result = await container.finalizer.finalize(
        body.messages,
        body.candidate_id,
        candidate_name=body.candidate_name,
        candidate_email=body.candidate_email,
        schedule=background_tasks.add_task,
    )
    return {"success": True, **result.to_json_dict()}


@router.get("/api/interviews")
async def list_interviews(
    _: AuthenticatedUser = Depends(require_auth),
    container: Any = Depends(get_container),
) -> list[dict[str, Any]]:
    """All interviews, newest first."""
    records = await container.store.list()
    return [record.to_json_dict() for record in records]


@router.get("/api/interviews/{interview_id}/export")
async def export_interview(
    interview_id: str,
    _: AuthenticatedUser = Depends(require_auth),
    container: Any = Depends(get_container),
) -> Response:
    """Download one interview as a PDF report."""
    record = await container.store.get(interview_id)
    pdf_bytes = await container.report_renderer.render(record)
    filename = report_filename(record.candidate_name)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
