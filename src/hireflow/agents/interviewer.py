"""
Interviewer agent.

Produces the next interviewer utterance for a candidate message, grounded
in resume context pulled fresh from the vector store on every turn.

The agent keeps no conversation state: earlier turns are not part of the
prompt, so coherence across turns depends entirely on retrieval.
"""

from __future__ import annotations

import logging

from hireflow.errors import GenerationError
from hireflow.models.llm_client import LLMClientBase
from hireflow.retrieval.context import ContextRetriever
from hireflow.schemas import TurnReply

logger = logging.getLogger(__name__)

NO_CONTEXT_PROMPT = "No specific resume context found. Ask general technical questions."

CONTEXT_FOUND = "Found relevant resume info"
CONTEXT_MISSING = "No context found"


class InterviewerAgent:
    """Stateless technical interviewer persona ("HireFlow")."""

    TURN_PROMPT = """You are an AI Technical Recruiter named "HireFlow".

Your Goal: Conduct a technical screening interview for a Software Engineering role.

CONTEXT FROM CANDIDATE'S RESUME:
"{context}"

INSTRUCTIONS:
1. Use the Context above to ask specific questions about their experience.
2. Keep your responses concise (max 2-3 sentences).
3. Be professional but conversational.
4. Do not reveal that you were given this context text directly.
5. If the candidate answers correctly, move to a harder topic.

USER'S LATEST MESSAGE: "{message}"

Generate the next interview question or response:"""

    def __init__(self, llm_client: LLMClientBase, retriever: ContextRetriever) -> None:
        """
        Initialize the interviewer.

        Args:
            llm_client: LLM client used for generation.
            retriever: Resume context retriever.
        """
        self._llm_client = llm_client
        self._retriever = retriever

    def build_prompt(self, context: str, message: str) -> str:
        """Compose the single-turn prompt."""
        return self.TURN_PROMPT.format(context=context or NO_CONTEXT_PROMPT, message=message)

    async def next_turn(self, message: str, candidate_id: str | None = None) -> TurnReply:
        """
        Generate the interviewer's reply to a candidate message.

        Args:
            message: The candidate's latest message.
            candidate_id: Restrict context retrieval to this candidate.

        Returns:
            The raw model reply and a note on whether context was used.

        Raises:
            GenerationError: If the model call fails or returns nothing.
        """
        context = await self._retriever.retrieve(message, candidate_id)
        prompt = self.build_prompt(context, message)

        response = await self._llm_client.complete(prompt)
        if not response.content:
            raise GenerationError("LLM returned an empty reply")

        logger.debug(f"Generated reply of {len(response.content)} chars (context: {bool(context)})")
        return TurnReply(
            reply=response.content,
            context_used=CONTEXT_FOUND if context else CONTEXT_MISSING,
        )
