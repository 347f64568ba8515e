"""
NoteForge Backend: Note Service (Repository Layer)
==================================================

What:  CRUD operations on notes, one store call each.
How:   Receives the request-scoped AsyncSession from the route, issues the
       query, and converts rows into NoteResponse models.
Who:   Called by the /api/notes route handlers.

Error Translation:
    Row missing / malformed id  → NotFoundError (404)
    Title and body both empty   → ValidationError (400)
    Any other failure           → DatabaseError (500), details logged

NoteService is stateless; every call gets its dependencies as arguments.
"""

import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from noteforge.exceptions import DatabaseError, NotFoundError, ValidationError
from noteforge.models.note import Note, utcnow
from noteforge.schemas.note import NoteCreate, NoteResponse, NoteUpdate

logger = logging.getLogger(__name__)


def parse_note_id(note_id: str) -> uuid.UUID:
    """
    Converts a path id into a UUID.

    A malformed id can never match a stored note, so it is reported the same
    way as an unknown one.
    """
    try:
        return uuid.UUID(str(note_id))
    except ValueError:
        raise NotFoundError(resource="note", resource_id=str(note_id), message="Note not found.") from None


def matches_query(note: NoteResponse, query: str) -> bool:
    """
    Case-insensitive substring match on title, body and every tag.

    Same rule as the search box of the browser client.
    """
    needle = query.lower()
    if note.title and needle in note.title.lower():
        return True
    if needle in (note.body or "").lower():
        return True
    return any(needle in tag.lower() for tag in note.tags)


class NoteService:
    """
    Business logic layer for note CRUD.

    Responsibilities:
        - create_note() / create_titled_note(): insert with presence checks
        - list_notes(): every note, newest first, optional text filter
        - get_note() / update_note() / delete_note(): by id, NotFoundError if absent
        - load_note(): ORM row for callers that modify AI fields (AIService)
    """

    async def load_note(self, db: AsyncSession, note_id: str) -> Note:
        """
        Fetches the ORM row for `note_id`.

        Raises:
            NotFoundError: No note with that id.
            DatabaseError: Query execution failed.
        """
        key = parse_note_id(note_id)
        try:
            result = await db.execute(select(Note).where(Note.id == key))
            note = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the note. Please try again.",
                context={"note_id": str(note_id)},
            )

        if note is None:
            raise NotFoundError(resource="note", resource_id=str(note_id), message="Note not found.")
        return note

    async def _insert(self, db: AsyncSession, note: Note) -> NoteResponse:
        try:
            db.add(note)
            await db.flush()
        except Exception as e:
            logger.error("Database error creating note: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error creating note",
                context={"error_type": type(e).__name__},
            )
        logger.info("Note created: %s", note.id)
        return NoteResponse.model_validate(note)

    async def create_note(self, db: AsyncSession, payload: NoteCreate) -> NoteResponse:
        """
        Creates a note from title/body/tags.

        Raises:
            ValidationError: Both title and body are empty or absent.
            DatabaseError: Insert failed.
        """
        if not payload.title and not payload.body:
            raise ValidationError(message="Either title or body is required.", field="title")

        note = Note(
            title=payload.title,
            body=payload.body or "",
            tags=list(payload.tags or []),
        )
        return await self._insert(db, note)

    async def create_titled_note(self, db: AsyncSession, title: Optional[str]) -> NoteResponse:
        """Creates a note with only a title; the title is required."""
        if not title:
            raise ValidationError(message="A title is required.", field="title")
        return await self._insert(db, Note(title=title, body="", tags=[]))

    async def list_notes(self, db: AsyncSession, query: Optional[str] = None) -> List[NoteResponse]:
        """
        All notes ordered by created_at descending.

        Args:
            query: Optional filter text (see matches_query). Blank means no filter.
        """
        try:
            result = await db.execute(select(Note).order_by(desc(Note.created_at)))
            notes = [NoteResponse.model_validate(n) for n in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing notes: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Error fetching notes",
                context={"error_type": type(e).__name__},
            )

        if query and query.strip():
            notes = [n for n in notes if matches_query(n, query.strip())]
        return notes

    async def get_note(self, db: AsyncSession, note_id: str) -> NoteResponse:
        note = await self.load_note(db, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(self, db: AsyncSession, note_id: str, payload: NoteUpdate) -> NoteResponse:
        """
        Applies the fields present in `payload` to the note.

        Fields missing from the request body are left untouched; a supplied
        tag list replaces the stored one.
        """
        note = await self.load_note(db, note_id)
        changes = payload.changes()

        try:
            for field, value in changes.items():
                setattr(note, field, list(value) if field == "tags" else value)
            note.updated_at = utcnow()
            await db.flush()
        except Exception as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error updating note",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note %s updated: %s", note.id, ", ".join(sorted(changes)) or "no fields")
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, note_id: str) -> str:
        """Removes the note permanently and returns a confirmation message."""
        note = await self.load_note(db, note_id)
        try:
            await db.delete(note)
            await db.flush()
        except Exception as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Error deleting note",
                context={"note_id": str(note_id), "error_type": type(e).__name__},
            )

        logger.info("Note %s deleted", note_id)
        return "Note successfully deleted."


note_service = NoteService()
