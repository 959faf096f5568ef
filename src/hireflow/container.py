"""
Service container.

Constructs every collaborator explicitly, wires them into the services and
tears them down again. Anything may be passed in pre-built, which is how
tests substitute fakes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hireflow.agents.evaluator import EvaluationAgent
from hireflow.agents.interviewer import InterviewerAgent
from hireflow.agents.resume_parser import ResumeParser
from hireflow.api.auth import SupabaseTokenVerifier, TokenVerifier
from hireflow.config import Settings, get_settings
from hireflow.db.repository import InterviewStore
from hireflow.db.session import Database
from hireflow.ingestion.extractor import DocumentTextExtractor, TextExtractorBase
from hireflow.ingestion.resume_ingestion import ResumeIngestionService
from hireflow.models.llm_client import LLMClient, LLMClientBase
from hireflow.notifications.email_service import EmailService
from hireflow.orchestrator.session_finalizer import SessionFinalizer
from hireflow.reports.pdf_report import PDFReportRenderer
from hireflow.retrieval.context import ContextRetriever
from hireflow.retrieval.vector_store import VectorStoreBase, build_vector_store

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Every long-lived collaborator and the services built on them."""

    settings: Settings
    llm_client: LLMClientBase
    vector_store: VectorStoreBase
    database: Database
    store: InterviewStore
    token_verifier: TokenVerifier
    email_service: EmailService
    report_renderer: PDFReportRenderer
    resume_parser: ResumeParser
    ingestion: ResumeIngestionService
    retriever: ContextRetriever
    interviewer: InterviewerAgent
    evaluator: EvaluationAgent
    finalizer: SessionFinalizer

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        *,
        llm_client: LLMClientBase | None = None,
        vector_store: VectorStoreBase | None = None,
        database: Database | None = None,
        extractor: TextExtractorBase | None = None,
        token_verifier: TokenVerifier | None = None,
        email_service: EmailService | None = None,
        report_renderer: PDFReportRenderer | None = None,
    ) -> "ServiceContainer":
        """
        Build and initialize the container.

        Creates the database schema if needed.

        Args:
            settings: Application settings (cached settings if None).
            llm_client: LLM client override.
            vector_store: Vector store override.
            database: Database override.
            extractor: Document text extractor override.
            token_verifier: Auth verifier override.
            email_service: Notifier override.
            report_renderer: PDF renderer override.

        Returns:
            A ready container; call ``close()`` when done.
        """
        settings = settings or get_settings()

        llm_client = llm_client or LLMClient(
            base_url=settings.llm_base_url,
            model=settings.llm_model_name,
            timeout=settings.llm_timeout,
        )
        vector_store = vector_store or build_vector_store(settings)
        database = database or Database(settings.database_url, echo=settings.debug)
        await database.create_all()

        token_verifier = token_verifier or SupabaseTokenVerifier(
            settings.supabase_url,
            settings.supabase_service_role_key,
            timeout=settings.auth_timeout,
        )
        email_service = email_service or EmailService(settings)
        report_renderer = report_renderer or PDFReportRenderer()

        store = InterviewStore(database)
        resume_parser = ResumeParser(llm_client)
        retriever = ContextRetriever(vector_store)
        evaluator = EvaluationAgent(llm_client)

        container = cls(
            settings=settings,
            llm_client=llm_client,
            vector_store=vector_store,
            database=database,
            store=store,
            token_verifier=token_verifier,
            email_service=email_service,
            report_renderer=report_renderer,
            resume_parser=resume_parser,
            ingestion=ResumeIngestionService(
                extractor or DocumentTextExtractor(),
                vector_store,
                resume_parser=resume_parser,
                min_chars=settings.min_resume_chars,
            ),
            retriever=retriever,
            interviewer=InterviewerAgent(llm_client, retriever),
            evaluator=evaluator,
            finalizer=SessionFinalizer(evaluator, store, report_renderer, email_service),
        )
        logger.info("Service container initialized")
        return container

    async def close(self) -> None:
        """Release clients and pooled connections."""
        await self.llm_client.close()
        await self.token_verifier.close()
        await self.vector_store.close()
        await self.database.dispose()
        logger.info("Service container closed")
