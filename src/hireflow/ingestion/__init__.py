"""
Ingestion module for candidate resumes.

Provides document text extraction and the resume ingestion service.
"""

from hireflow.ingestion.extractor import DocumentTextExtractor, TextExtractorBase
from hireflow.ingestion.resume_ingestion import ResumeIngestionService

__all__ = [
    "DocumentTextExtractor",
    "ResumeIngestionService",
    "TextExtractorBase",
]
