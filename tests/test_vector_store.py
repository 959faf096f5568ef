"""
Tests for the ChromaDB-backed vector store.

A keyword-count embedder replaces the sentence-transformers model so the
collection can be built without downloading weights.
"""

import re

import pytest
import pytest_asyncio
from chromadb.api.types import EmbeddingFunction

from hireflow.retrieval.context import ContextRetriever
from hireflow.retrieval.vector_store import ChromaVectorStore

VOCABULARY = ["react", "node", "redux", "firmware", "embedded", "kubernetes", "python"]


class KeywordEmbedding(EmbeddingFunction):
    """Embeds text as vocabulary counts plus a constant bias term."""

    def __call__(self, input):
        vectors = []
        for text in input:
            words = re.findall(r"[a-z]+", text.lower())
            vectors.append([float(words.count(term)) for term in VOCABULARY] + [0.5])
        return vectors


@pytest.fixture
def chroma(tmp_path) -> ChromaVectorStore:
    """Create an empty Chroma store in a temporary directory."""
    return ChromaVectorStore(
        collection_name="test_resumes",
        persist_path=str(tmp_path / "chroma"),
        embedding_function=KeywordEmbedding(),
    )


@pytest_asyncio.fixture
async def populated(chroma: ChromaVectorStore) -> ChromaVectorStore:
    """Create a Chroma store holding resumes for two candidates."""
    await chroma.add_text("React and Node developer for five years", {"candidateId": "cand1"})
    await chroma.add_text("React Redux state management", {"candidateId": "cand1"})
    await chroma.add_text("React Native mobile apps", {"candidateId": "cand1"})
    await chroma.add_text("Embedded firmware engineer", {"candidateId": "cand2"})
    return chroma


class TestChromaVectorStore:
    """Tests for ChromaVectorStore."""

    @pytest.mark.asyncio
    async def test_empty_collection_returns_no_results(self, chroma: ChromaVectorStore) -> None:
        """Test that searching an empty collection short-circuits to an empty list."""
        assert await chroma.search("React") == []
        assert await chroma.count() == 0

    @pytest.mark.asyncio
    async def test_best_match_first_with_similarity_score(self, populated: ChromaVectorStore) -> None:
        """Test that results are ordered by similarity and scored from distance."""
        results = await populated.search("firmware", top_k=4)

        assert results[0].document.content == "Embedded firmware engineer"
        assert results[0].document.metadata == {"candidateId": "cand2"}
        assert -1.0 <= results[-1].score <= results[0].score <= 1.0

    @pytest.mark.asyncio
    async def test_candidate_filter(self, populated: ChromaVectorStore) -> None:
        """Test that the candidate filter excludes other candidates' resumes."""
        results = await populated.search("React firmware", top_k=5, filter_metadata={"candidateId": "cand2"})

        assert [r.document.content for r in results] == ["Embedded firmware engineer"]

    @pytest.mark.asyncio
    async def test_filter_without_matches(self, populated: ChromaVectorStore) -> None:
        """Test that a filter matching no documents returns nothing."""
        assert await populated.search("React", filter_metadata={"candidateId": "nobody"}) == []

    @pytest.mark.asyncio
    async def test_retriever_caps_context_at_two_documents(self, populated: ChromaVectorStore) -> None:
        """Test that retrieved context joins at most two resume chunks."""
        context = await ContextRetriever(populated).retrieve("React", candidate_id="cand1")

        parts = context.split("\n\n")
        assert len(parts) == 2
        assert all("React" in part for part in parts)

    @pytest.mark.asyncio
    async def test_clear_empties_collection(self, populated: ChromaVectorStore) -> None:
        """Test that clear removes every document and the store stays usable."""
        await populated.clear()

        assert await populated.count() == 0
        await populated.add_text("Python developer", {"candidateId": "cand3"})
        assert await populated.count() == 1
