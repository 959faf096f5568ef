"""
Tests for interview persistence.
"""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from hireflow.db.repository import InterviewStore
from hireflow.errors import NotFoundError
from hireflow.schemas import Feedback, InterviewRecord, TranscriptMessage


def _record(candidate_id: str, date: datetime, feedback: Feedback) -> InterviewRecord:
    """Build an unsaved interview record."""
    return InterviewRecord(
        candidate_id=candidate_id,
        candidate_name=f"Candidate {candidate_id}",
        date=date,
        messages=[TranscriptMessage(role="user", content=f"hello from {candidate_id}")],
        feedback=feedback,
    )


class TestInterviewStore:
    """Tests for InterviewStore."""

    @pytest.mark.asyncio
    async def test_save_generates_id(self, database, sample_feedback) -> None:
        """Test that saving assigns an id."""
        store = InterviewStore(database)

        saved = await store.save(_record("cand1", datetime.now(timezone.utc), sample_feedback))

        assert saved.id is not None
        fetched = await store.get(saved.id)
        assert fetched.candidate_id == "cand1"
        assert fetched.feedback.technical_score == 80
        assert fetched.messages[0].content == "hello from cand1"
        assert fetched.date.tzinfo is not None

    @pytest.mark.asyncio
    async def test_get_accepts_string_id(self, database, sample_feedback) -> None:
        """Test fetching by a string id."""
        store = InterviewStore(database)
        saved = await store.save(_record("cand1", datetime.now(timezone.utc), sample_feedback))

        fetched = await store.get(str(saved.id))

        assert fetched.id == saved.id

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, database, sample_feedback) -> None:
        """Test that listing is newest first."""
        store = InterviewStore(database)
        now = datetime.now(timezone.utc)
        await store.save(_record("old", now - timedelta(days=2), sample_feedback))
        await store.save(_record("new", now, sample_feedback))
        await store.save(_record("mid", now - timedelta(days=1), sample_feedback))

        records = await store.list()

        assert [r.candidate_id for r in records] == ["new", "mid", "old"]

    @pytest.mark.asyncio
    async def test_unknown_id_is_not_found(self, database) -> None:
        """Test that an unknown id is not found."""
        store = InterviewStore(database)

        with pytest.raises(NotFoundError):
            await store.get(uuid4())

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, database) -> None:
        """Test that a malformed id is not found."""
        store = InterviewStore(database)

        with pytest.raises(NotFoundError) as exc_info:
            await store.get("not-a-uuid")

        assert exc_info.value.public_message == "Interview not found"
