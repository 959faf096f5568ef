"""
Evaluation agent.

Scores a finished interview transcript. The model must answer with a single
strict JSON object; anything else is fatal to finalization.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError as PydanticValidationError

from hireflow.errors import GenerationError, MalformedEvaluationError
from hireflow.models.llm_client import LLMClientBase, strip_code_fences
from hireflow.schemas import Feedback, TranscriptMessage

logger = logging.getLogger(__name__)


def format_transcript(messages: Sequence[TranscriptMessage]) -> str:
    """Flatten a transcript into ``role: content`` lines."""
    return "\n".join(f"{m.role.value}: {m.content}" for m in messages)


def parse_feedback(raw: str) -> Feedback:
    """
    Parse an evaluation reply into Feedback.

    Code fences are stripped first; no other repair is attempted.

    Raises:
        MalformedEvaluationError: If the text is not JSON of the expected shape.
    """
    cleaned = strip_code_fences(raw)
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedEvaluationError(f"Evaluation is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise MalformedEvaluationError("Evaluation JSON is not an object")

    try:
        return Feedback.model_validate(payload)
    except PydanticValidationError as e:
        raise MalformedEvaluationError(f"Evaluation JSON has the wrong shape: {e}") from e


class EvaluationAgent:
    """LLM-based transcript evaluator."""

    EVALUATION_PROMPT = """Analyze this technical interview transcript.
TRANSCRIPT:
{transcript}

Generate a JSON summary of the candidate's performance.
Strictly follow this JSON format (no markdown, just raw json):
{{
  "technicalScore": (0-100),
  "communicationScore": (0-100),
  "summary": "2 sentence summary",
  "strengths": ["point 1", "point 2"],
  "weaknesses": ["point 1", "point 2"],
  "verdict": "Hire" or "No Hire" or "Review"
}}"""

    def __init__(self, llm_client: LLMClientBase) -> None:
        self._llm_client = llm_client

    async def evaluate(self, messages: Sequence[TranscriptMessage]) -> Feedback:
        """
        Evaluate a transcript.

        Raises:
            GenerationError: If the model call fails.
            MalformedEvaluationError: If the reply cannot be parsed.
        """
        prompt = self.EVALUATION_PROMPT.format(transcript=format_transcript(messages))
        response = await self._llm_client.complete(prompt, temperature=0.2)
        if not response.content:
            raise GenerationError("LLM returned an empty evaluation")

        try:
            return parse_feedback(response.content)
        except MalformedEvaluationError:
            logger.error(f"Malformed evaluation from LLM: {response.content[:500]}")
            raise
