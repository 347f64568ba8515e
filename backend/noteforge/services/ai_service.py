"""
NoteForge Backend: AI Note Actions
==================================

What:  Summarize / generate-title / elaborate, on stored notes or on free text.
How:   Load the note → pick the source text → build the prompt → call the
       LLM gateway → write the result onto the note.
Who:   Called by the LLM route handlers.

Preconditions are checked before the gateway is called, so a request that
cannot succeed never reaches the upstream API:
    summarize, generate-title: note missing or body empty → NotFoundError (404)
    elaborate:                 note missing → NotFoundError (404)
                               body and title both empty → ValidationError (400)
"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from noteforge.exceptions import DatabaseError, NotFoundError, ValidationError
from noteforge.models.note import Note, utcnow
from noteforge.schemas.note import LLMTask
from noteforge.services.gemini_service import gemini_service
from noteforge.services.llm_base import LLMService
from noteforge.services.note_service import NoteService, note_service
from noteforge.services.prompts import build_prompt, postprocess

logger = logging.getLogger(__name__)

# Note attribute each task writes its result into
TARGET_FIELDS = {
    LLMTask.SUMMARIZE: "summary",
    LLMTask.GENERATE_TITLE: "title",
    LLMTask.ELABORATE: "elaboration",
}


class AIService:
    def __init__(self, llm: Optional[LLMService] = None, notes: Optional[NoteService] = None):
        self.llm = llm or gemini_service
        self.notes = notes or note_service

    async def _ask(self, task: LLMTask, subject: str) -> str:
        logger.info("Running %s prompt (%d chars of subject)", task.value, len(subject))
        text = await self.llm.generate(build_prompt(task, subject))
        return postprocess(task, text)

    async def _body_of(self, db: AsyncSession, note_id: str) -> Note:
        note = await self.notes.load_note(db, note_id)
        if not note.body:
            raise NotFoundError(
                resource="note",
                resource_id=str(note_id),
                message="Note not found or body is empty.",
            )
        return note

    async def _store(self, db: AsyncSession, note: Note, task: LLMTask, text: str) -> str:
        try:
            setattr(note, TARGET_FIELDS[task], text)
            note.updated_at = utcnow()
            await db.flush()
        except Exception as e:
            logger.error("Database error storing %s on note %s: %s", task.value, note.id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error saving the AI result",
                context={"note_id": str(note.id), "error_type": type(e).__name__},
            )
        logger.info("Stored %s result on note %s", task.value, note.id)
        return text

    async def summarize_note(self, db: AsyncSession, note_id: str) -> str:
        note = await self._body_of(db, note_id)
        summary = await self._ask(LLMTask.SUMMARIZE, note.body)
        return await self._store(db, note, LLMTask.SUMMARIZE, summary)

    async def generate_note_title(self, db: AsyncSession, note_id: str) -> str:
        note = await self._body_of(db, note_id)
        title = await self._ask(LLMTask.GENERATE_TITLE, note.body)
        return await self._store(db, note, LLMTask.GENERATE_TITLE, title)

    async def elaborate_note(self, db: AsyncSession, note_id: str) -> str:
        note = await self.notes.load_note(db, note_id)
        source_text = note.body or note.title
        if not source_text:
            raise ValidationError(message="Note has no title or body to elaborate on.")
        elaboration = await self._ask(LLMTask.ELABORATE, source_text)
        return await self._store(db, note, LLMTask.ELABORATE, elaboration)

    async def run_prompt(self, task_type: Optional[str], prompt: Optional[str]) -> str:
        """
        Applies a template to free text; nothing is stored.

        Raises:
            ValidationError: prompt or type missing, or type not a known task.
        """
        if not prompt or not task_type:
            raise ValidationError(message="Prompt and type are required.")
        try:
            task = LLMTask(task_type)
        except ValueError:
            raise ValidationError(message="Invalid LLM type.", field="type") from None
        return await self._ask(task, prompt)


ai_service = AIService()
