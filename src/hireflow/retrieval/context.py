"""
Resume context retrieval.

Turns a free-text query into a block of resume text for the interview
prompt. Retrieval never raises: a failing store degrades to no context.
"""

import logging

from hireflow.retrieval.vector_store import VectorStoreBase

logger = logging.getLogger(__name__)

# Number of chunks pulled into each prompt.
TOP_K = 2

NO_CONTEXT_FOUND = (
    "No specific resume context found for this topic. Ask general technical questions."
)


class ContextRetriever:
    """Fetches the most relevant resume chunks for a query."""

    def __init__(self, vector_store: VectorStoreBase) -> None:
        self._vector_store = vector_store

    async def retrieve(self, query: str, candidate_id: str | None = None) -> str:
        """
        Retrieve resume context for a query.

        Args:
            query: Free-text query, usually the candidate's latest message.
            candidate_id: Restrict the search to this candidate's resume.

        Returns:
            The top matches joined by a blank line, NO_CONTEXT_FOUND when
            nothing matched, or an empty string when the store failed.
        """
        filter_metadata = {"candidateId": candidate_id} if candidate_id else None
        try:
            results = await self._vector_store.search(
                query,
                top_k=TOP_K,
                filter_metadata=filter_metadata,
            )
        except Exception as e:
            logger.error(f"Vector store query failed: {e}", exc_info=True)
            return ""

        if not results:
            return NO_CONTEXT_FOUND

        return "\n\n".join(r.document.content for r in results[:TOP_K])
