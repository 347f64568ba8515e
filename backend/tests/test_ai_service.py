"""
NoteForge Backend: AI Service Unit Tests
========================================

What:  Tests for AIService with a mocked gateway and a mocked note loader.

What we test:
    ✅ Preconditions checked before the gateway is called
    ✅ Results written to the right note field
    ✅ Title cleaning
    ✅ Elaborate falls back to the title
    ✅ Free-text prompt validation
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from noteforge.exceptions import DatabaseError, NotFoundError, UpstreamError, ValidationError
from noteforge.models.note import Note
from noteforge.services.ai_service import AIService
from noteforge.services.note_service import NoteService


def make_row(**fields) -> Note:
    now = datetime(2024, 1, 15, tzinfo=timezone.utc)
    values = dict(
        id=uuid.uuid4(), title=None, body="", summary="", elaboration="",
        tags=[], created_at=now, updated_at=now,
    )
    values.update(fields)
    return Note(**values)


@pytest.fixture
def notes():
    loader = MagicMock(spec=NoteService)
    loader.load_note = AsyncMock()
    return loader


@pytest.fixture
def service(mock_llm, notes):
    return AIService(llm=mock_llm, notes=notes)


class TestSummarizeAndTitle:

    @pytest.mark.asyncio
    async def test_summarize_writes_summary(self, service, notes, mock_llm, mock_db_session):
        row = make_row(body="a long body")
        notes.load_note.return_value = row
        mock_llm.generate.return_value = "short"

        result = await service.summarize_note(mock_db_session, str(row.id))

        assert result == "short"
        assert row.summary == "short"
        assert row.body == "a long body"
        mock_db_session.flush.assert_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["summarize_note", "generate_note_title"])
    async def test_empty_body_is_not_found(self, service, notes, mock_llm, mock_db_session, method):
        notes.load_note.return_value = make_row(title="has a title")

        with pytest.raises(NotFoundError, match="body is empty"):
            await getattr(service, method)(mock_db_session, "any")

        mock_llm.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_title_is_cleaned_and_stored(self, service, notes, mock_llm, mock_db_session):
        row = make_row(title="old", body="text")
        notes.load_note.return_value = row
        mock_llm.generate.return_value = '  "My Title"  '

        result = await service.generate_note_title(mock_db_session, str(row.id))

        assert result == "My Title"
        assert row.title == "My Title"

    @pytest.mark.asyncio
    async def test_upstream_error_leaves_note_untouched(self, service, notes, mock_llm, mock_db_session):
        row = make_row(body="text")
        notes.load_note.return_value = row
        mock_llm.generate.side_effect = UpstreamError("down")

        with pytest.raises(UpstreamError):
            await service.summarize_note(mock_db_session, str(row.id))

        assert row.summary == ""
        mock_db_session.flush.assert_not_awaited()


class TestElaborate:

    @pytest.mark.asyncio
    async def test_prefers_body(self, service, notes, mock_llm, mock_db_session):
        row = make_row(title="title", body="body text")
        notes.load_note.return_value = row

        await service.elaborate_note(mock_db_session, str(row.id))

        assert mock_llm.generate.await_args.args[0].endswith('"body text"')
        assert row.elaboration == "AI text"

    @pytest.mark.asyncio
    async def test_falls_back_to_title(self, service, notes, mock_llm, mock_db_session):
        row = make_row(title="only title")
        notes.load_note.return_value = row

        await service.elaborate_note(mock_db_session, str(row.id))

        assert mock_llm.generate.await_args.args[0].endswith('"only title"')

    @pytest.mark.asyncio
    async def test_nothing_to_elaborate(self, service, notes, mock_llm, mock_db_session):
        notes.load_note.return_value = make_row(title="")

        with pytest.raises(ValidationError):
            await service.elaborate_note(mock_db_session, "any")

        mock_llm.generate.assert_not_awaited()


class TestRunPrompt:

    @pytest.mark.asyncio
    async def test_summarize(self, service, mock_llm):
        mock_llm.generate.return_value = "sum"

        assert await service.run_prompt("summarize", "some text") == "sum"
        mock_llm.generate.assert_awaited_once_with(
            'Summarize the following text concisely: "some text"'
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task_type,prompt", [(None, "x"), ("summarize", None), ("", ""), ("elaborate", "")])
    async def test_missing_input(self, service, mock_llm, task_type, prompt):
        with pytest.raises(ValidationError, match="Prompt and type are required."):
            await service.run_prompt(task_type, prompt)
        mock_llm.generate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_type(self, service, mock_llm):
        with pytest.raises(ValidationError, match="Invalid LLM type."):
            await service.run_prompt("translate", "x")
        mock_llm.generate.assert_not_awaited()


class TestStoreFailures:

    @pytest.mark.asyncio
    async def test_flush_failure_becomes_database_error(self, service, notes, mock_llm, mock_db_session):
        row = make_row(body="text")
        notes.load_note.return_value = row
        mock_llm.generate.return_value = "A Title"
        mock_db_session.flush.side_effect = RuntimeError("value too long")

        with pytest.raises(DatabaseError) as exc_info:
            await service.generate_note_title(mock_db_session, str(row.id))

        assert exc_info.value.context["note_id"] == str(row.id)
