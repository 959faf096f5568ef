"""
Vector store interface and implementations.

Stores resume text keyed by candidate identifier and answers semantic
similarity queries for retrieval-augmented interview turns.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from hireflow.config import Settings, get_settings

if TYPE_CHECKING:
    from chromadb.api.models.Collection import Collection

logger = logging.getLogger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9+#.]+")
_STOPWORDS = {
    "a", "about", "an", "and", "are", "at", "be", "by", "can", "did", "do",
    "does", "for", "from", "have", "how", "i", "in", "is", "it", "me", "my",
    "of", "on", "or", "tell", "that", "the", "this", "to", "was", "what",
    "when", "where", "which", "who", "why", "with", "you", "your",
}


class Document(BaseModel):
    """A document stored in the vector store."""

    doc_id: UUID = Field(default_factory=uuid4, description="Unique document identifier")
    content: str = Field(..., description="Document text content")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Document metadata")


class SearchResult(BaseModel):
    """Result of a vector search query."""

    document: Document = Field(..., description="The matched document")
    score: float = Field(..., description="Similarity score (higher is closer)")


class VectorStoreBase(ABC):
    """Abstract base class for vector stores."""

    @abstractmethod
    async def add_documents(self, documents: list[Document]) -> list[UUID]:
        """
        Add documents to the vector store.

        Every call appends; documents are never merged or deduplicated.

        Args:
            documents: Documents to add.

        Returns:
            List of document IDs.
        """
        ...

    @abstractmethod
    async def search(
        self,
        query: str,
        top_k: int = 5,
        filter_metadata: dict[str, Any] | None = None,
    ) -> list[SearchResult]:
        """
        Search for documents similar to the query.

        Args:
            query: Search query text.
            top_k: Number of results to return.
            filter_metadata: Optional exact-match metadata filters.

        Returns:
            Search results, best match first.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Get the number of documents in the store."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Remove every document from the store."""
        ...

    async def add_text(self, text: str, metadata: dict[str, Any]) -> UUID:
        """Store a single text with metadata and return its document ID."""
        ids = await self.add_documents([Document(content=text, metadata=metadata)])
        return ids[0]

    async def close(self) -> None:
        """Release any held resources."""
        return None


def _tokens(text: str) -> set[str]:
    # Keep "node.js" / "c++" intact but drop sentence punctuation.
    terms = {t.strip(".") for t in _TOKEN_RE.findall(text.lower())}
    return {t for t in terms if t and t not in _STOPWORDS}


class InMemoryVectorStore(VectorStoreBase):
    """
    Process-local vector store.

    Ranks documents by the share of query terms they contain. Used for
    development and tests; contents are lost when the process exits.
    """

    def __init__(self) -> None:
        self._documents: dict[UUID, Document] = {}

    async def add_documents(self, documents: list[Document]) -> list[UUID]:
        doc_ids = []
        for doc in documents:
            self._documents[doc.doc_id] = doc
            doc_ids.append(doc.doc_id)
        return doc_ids

    async def search(
        self,
        query: str,
        top_k: int = 5,
        filter_metadata: dict[str, Any] | None = None,
    ) -> list[SearchResult]:
        query_terms = _tokens(query)
        if not query_terms:
            return []

        results = []
        for doc in self._documents.values():
            if filter_metadata and not all(
                doc.metadata.get(k) == v for k, v in filter_metadata.items()
            ):
                continue

            overlap = len(query_terms & _tokens(doc.content))
            if overlap:
                results.append(SearchResult(document=doc, score=overlap / len(query_terms)))

        results.sort(key=lambda r: r.score, reverse=True)
        return results[:top_k]

    async def count(self) -> int:
        return len(self._documents)

    async def clear(self) -> None:
        self._documents.clear()


class ChromaVectorStore(VectorStoreBase):
    """
    Vector store backed by a persistent ChromaDB collection.

    Embeddings are computed with a sentence-transformers model unless another
    embedding function is supplied. ChromaDB is synchronous, so every call
    runs in the default executor.
    """

    def __init__(
        self,
        collection_name: str | None = None,
        persist_path: str | None = None,
        embedding_model: str | None = None,
        embedding_function: Any = None,
    ) -> None:
        """
        Initialize the vector store.

        Args:
            collection_name: Name of the collection to use (uses config if not provided).
            persist_path: Path to persist the store (uses config if not provided).
            embedding_model: Embedding model name (uses config if not provided).
            embedding_function: Chroma embedding function; defaults to a
                sentence-transformers function for ``embedding_model``.
        """
        settings = get_settings()
        self._collection_name = collection_name or settings.vector_collection
        self._persist_path = persist_path or settings.vector_store_path
        self._embedding_model = embedding_model or settings.embedding_model
        self._embedding_function = embedding_function
        self._client: Any = None
        self._collection: "Collection | None" = None

    def _get_collection(self) -> "Collection":
        """Open the client and collection on first use."""
        if self._collection is None:
            import chromadb
            from chromadb.utils import embedding_functions

            self._client = chromadb.PersistentClient(path=self._persist_path)
            embedder = self._embedding_function
            if embedder is None:
                embedder = embedding_functions.SentenceTransformerEmbeddingFunction(
                    model_name=self._embedding_model,
                )
            self._collection = self._client.get_or_create_collection(
                name=self._collection_name,
                embedding_function=embedder,
                metadata={"hnsw:space": "cosine"},
            )
            logger.info(
                f"Opened Chroma collection '{self._collection_name}' at {self._persist_path}"
            )
        return self._collection

    async def _run(self, func, *args, **kwargs):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: func(*args, **kwargs))

    def _add_sync(self, documents: list[Document]) -> list[UUID]:
        self._get_collection().add(
            ids=[str(doc.doc_id) for doc in documents],
            documents=[doc.content for doc in documents],
            metadatas=[doc.metadata or {"source": "resume"} for doc in documents],
        )
        return [doc.doc_id for doc in documents]

    def _search_sync(
        self,
        query: str,
        top_k: int,
        filter_metadata: dict[str, Any] | None,
    ) -> list[SearchResult]:
        collection = self._get_collection()
        if collection.count() == 0:
            return []

        where: dict[str, Any] | None = None
        if filter_metadata:
            clauses = [{k: v} for k, v in filter_metadata.items()]
            where = clauses[0] if len(clauses) == 1 else {"$and": clauses}

        raw = collection.query(
            query_texts=[query],
            n_results=min(top_k, collection.count()),
            where=where,
            include=["documents", "metadatas", "distances"],
        )

        results = []
        ids = raw.get("ids", [[]])[0]
        docs = raw.get("documents", [[]])[0]
        metas = raw.get("metadatas", [[]])[0]
        distances = raw.get("distances", [[]])[0]
        for doc_id, content, meta, distance in zip(ids, docs, metas, distances):
            results.append(
                SearchResult(
                    document=Document(doc_id=UUID(doc_id), content=content, metadata=meta or {}),
                    score=1.0 - float(distance),
                )
            )
        return results

    def _clear_sync(self) -> None:
        collection = self._get_collection()
        self._client.delete_collection(collection.name)
        self._collection = None

    async def add_documents(self, documents: list[Document]) -> list[UUID]:
        if not documents:
            return []
        return await self._run(self._add_sync, documents)

    async def search(
        self,
        query: str,
        top_k: int = 5,
        filter_metadata: dict[str, Any] | None = None,
    ) -> list[SearchResult]:
        return await self._run(self._search_sync, query, top_k, filter_metadata)

    async def count(self) -> int:
        return await self._run(lambda: self._get_collection().count())

    async def clear(self) -> None:
        await self._run(self._clear_sync)
        logger.info(f"Cleared Chroma collection '{self._collection_name}'")


def build_vector_store(settings: Settings | None = None) -> VectorStoreBase:
    """Create the vector store selected by ``settings.vector_store_backend``."""
    settings = settings or get_settings()
    if settings.vector_store_backend == "memory":
        logger.warning("Using in-memory vector store; resumes will not survive a restart")
        return InMemoryVectorStore()
    return ChromaVectorStore(
        collection_name=settings.vector_collection,
        persist_path=settings.vector_store_path,
        embedding_model=settings.embedding_model,
    )
