"""
Document text extraction.

PDF resumes go through pdfplumber; .docx resumes through python-docx.
Both libraries are synchronous, so extraction runs in the default executor.
"""

from __future__ import annotations

import asyncio
import io
import logging
from abc import ABC, abstractmethod

from hireflow.errors import ExtractionError

logger = logging.getLogger(__name__)


class TextExtractorBase(ABC):
    """Abstract base class for document text extractors."""

    @abstractmethod
    async def extract(self, data: bytes, filename: str = "") -> str:
        """
        Extract plain text from an uploaded document.

        Args:
            data: Raw file content.
            filename: Original filename, used to pick a parser.

        Returns:
            Extracted text (may be empty for image-only documents).

        Raises:
            ExtractionError: If the document cannot be read.
        """
        ...


def _read_pdf(data: bytes) -> str:
    import pdfplumber

    text_parts = []
    with pdfplumber.open(io.BytesIO(data)) as pdf:
        for page in pdf.pages:
            text = page.extract_text()
            if text:
                text_parts.append(text)
    return "\n\n".join(text_parts)


def _read_docx(data: bytes) -> str:
    from docx import Document

    doc = Document(io.BytesIO(data))
    paragraphs = [para.text for para in doc.paragraphs if para.text.strip()]
    return "\n".join(paragraphs)


class DocumentTextExtractor(TextExtractorBase):
    """Extracts text from PDF and .docx resumes."""

    async def extract(self, data: bytes, filename: str = "") -> str:
        if not data:
            raise ExtractionError("Uploaded file is empty")

        reader = _read_docx if filename.lower().endswith(".docx") else _read_pdf
        loop = asyncio.get_event_loop()
        try:
            text = await loop.run_in_executor(None, reader, data)
        except Exception as e:
            logger.error(f"Text extraction failed for '{filename or '<unnamed>'}': {e}")
            raise ExtractionError(f"Could not extract text from '{filename}': {e}") from e

        logger.debug(f"Extracted {len(text)} characters from '{filename}'")
        return text
