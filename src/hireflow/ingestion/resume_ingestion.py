"""
Resume ingestion service.

Extracts text from an uploaded resume, parses structured fields on a
best-effort basis, and stores the full text in the vector store under the
candidate identifier.
"""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

from hireflow.agents.resume_parser import ResumeParseOutcome, ResumeParserBase
from hireflow.errors import CollaboratorError, EmptyDocumentError
from hireflow.ingestion.extractor import TextExtractorBase
from hireflow.retrieval.vector_store import VectorStoreBase
from hireflow.schemas import IngestionResult

logger = logging.getLogger(__name__)

DEFAULT_MIN_CHARS = 10


class ResumeIngestionService:
    """
    Service for ingesting candidate resumes.

    Re-ingesting the same candidate appends another vector-store entry;
    nothing is updated in place.
    """

    def __init__(
        self,
        extractor: TextExtractorBase,
        vector_store: VectorStoreBase,
        resume_parser: ResumeParserBase | None = None,
        min_chars: int = DEFAULT_MIN_CHARS,
    ) -> None:
        """
        Initialize the ingestion service.

        Args:
            extractor: Document text extractor.
            vector_store: Store receiving the resume text.
            resume_parser: Optional structured-field parser.
            min_chars: Minimum extracted characters to accept a resume.
        """
        self._extractor = extractor
        self._vector_store = vector_store
        self._resume_parser = resume_parser
        self._min_chars = min_chars

    @staticmethod
    def resolve_candidate_id(candidate_id: str | None, filename: str) -> str:
        """Pick the identifier: explicit id, else filename, else a generated one."""
        if candidate_id and candidate_id.strip():
            return candidate_id.strip()
        if filename and filename.strip():
            return filename.strip()
        return f"resume-{uuid4().hex[:8]}"

    async def _parse(self, text: str) -> ResumeParseOutcome:
        if self._resume_parser is None:
            return ResumeParseOutcome(success=False, error="Resume parser not configured")
        try:
            return await self._resume_parser.parse(text)
        except Exception as e:
            logger.warning(f"Resume parsing raised, continuing with text only: {e}")
            return ResumeParseOutcome(success=False, error=str(e))

    async def ingest(
        self,
        file_bytes: bytes,
        filename: str = "",
        candidate_id: str | None = None,
    ) -> IngestionResult:
        """
        Ingest an uploaded resume.

        Args:
            file_bytes: Raw document content.
            filename: Original filename (fallback identifier).
            candidate_id: Optional explicit candidate identifier.

        Returns:
            Identifier, parsed fields (or None), skills and text length.

        Raises:
            ExtractionError: If no text could be extracted.
            EmptyDocumentError: If the text is shorter than the minimum.
            CollaboratorError: If the vector store write fails.
        """
        logger.info(f"Received resume: {filename or '<unnamed>'}")

        text = (await self._extractor.extract(file_bytes, filename)).strip()
        logger.info(f"Extracted {len(text)} characters")

        if len(text) < self._min_chars:
            raise EmptyDocumentError(
                f"Extracted text is {len(text)} characters; at least {self._min_chars} required",
                public_message="Resume text is too short or empty",
            )

        outcome = await self._parse(text)
        if not outcome.success:
            logger.warning(f"Resume parsing failed, continuing with text only: {outcome.error}")

        resume_id = self.resolve_candidate_id(candidate_id, filename)
        try:
            await self._vector_store.add_text(text, {"candidateId": resume_id})
        except Exception as e:
            logger.error(f"Error adding resume for {resume_id} to vector store: {e}", exc_info=True)
            raise CollaboratorError(
                f"Vector store write failed for {resume_id}: {e}",
                public_message="Failed to process resume",
            ) from e

        logger.info(f"Resume for {resume_id} added to vector store")
        return IngestionResult(
            id=resume_id,
            parsed_data=outcome.data if outcome.success else None,
            skills=outcome.extracted_skills if outcome.success else [],
            text_length=len(text),
        )

    async def ingest_from_file(
        self,
        file_path: str | Path,
        candidate_id: str | None = None,
    ) -> IngestionResult:
        """
        Ingest a resume from a local file.

        Raises:
            FileNotFoundError: If the file doesn't exist.
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Resume file not found: {path}")

        logger.info(f"Ingesting resume from file: {path}")
        return await self.ingest(path.read_bytes(), filename=path.name, candidate_id=candidate_id)
