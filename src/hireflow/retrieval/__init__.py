"""
Retrieval module for vector store and semantic search.

Provides the resume vector store and the context retriever used for
retrieval-augmented interview turns.
"""

from hireflow.retrieval.context import NO_CONTEXT_FOUND, TOP_K, ContextRetriever
from hireflow.retrieval.vector_store import (
    ChromaVectorStore,
    Document,
    InMemoryVectorStore,
    SearchResult,
    VectorStoreBase,
    build_vector_store,
)

__all__ = [
    "ChromaVectorStore",
    "ContextRetriever",
    "Document",
    "InMemoryVectorStore",
    "NO_CONTEXT_FOUND",
    "SearchResult",
    "TOP_K",
    "VectorStoreBase",
    "build_vector_store",
]
