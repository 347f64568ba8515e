"""
NoteForge Backend: Notes Route Handlers
=======================================

What:  CRUD on /api/notes plus the three AI actions on a stored note.
How:   Extracts path/body data, delegates to NoteService / AIService,
       returns JSON. Errors propagate to the global handlers in main.py.

Route Inventory:
    POST   /api/notes[/]                   create (201)
    POST   /api/notes/title-only           create from a title alone (201)
    GET    /api/notes[/]                   list, newest first (?q= filter)
    GET    /api/notes/{id}                 read
    PUT    /api/notes/{id}                 partial update
    DELETE /api/notes/{id}                 delete
    POST   /api/notes/{id}/summarize       AI summary → note.summary
    POST   /api/notes/{id}/generate-title  AI title → note.title
    POST   /api/notes/{id}/elaborate       AI paragraph → note.elaboration
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from noteforge.database import get_db_session
from noteforge.schemas.note import (
    AIResponse,
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteResponse,
    NoteTitleCreate,
    NoteUpdate,
)
from noteforge.services.ai_service import ai_service
from noteforge.services.note_service import note_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["Notes"])

NOT_FOUND = {404: {"description": "Note not found", "model": ErrorResponse}}
SERVER_ERROR = {500: {"description": "Server error", "model": ErrorResponse}}
BAD_REQUEST = {400: {"description": "Missing required input", "model": ErrorResponse}}


# ── CRUD ──────────────────────────────────────────────────────────────────


@router.post(
    "",
    status_code=201,
    response_model=NoteResponse,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Create a note",
    description="Creates a note from title, body and tags. Title or body must be non-empty.",
)
@router.post("/", status_code=201, response_model=NoteResponse, include_in_schema=False)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(db, payload)


@router.post(
    "/title-only",
    status_code=201,
    response_model=NoteResponse,
    responses={**BAD_REQUEST, **SERVER_ERROR},
    summary="Create a note with only a title",
)
async def create_titled_note(
    payload: NoteTitleCreate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_titled_note(db, payload.title)


@router.get(
    "",
    response_model=List[NoteResponse],
    responses=SERVER_ERROR,
    summary="List notes",
    description=(
        "Returns every note, newest first. `q` keeps only notes whose title, "
        "body or a tag contains the text (case-insensitive)."
    ),
)
@router.get("/", response_model=List[NoteResponse], include_in_schema=False)
async def list_notes(
    q: Optional[str] = Query(default=None, description="Case-insensitive filter text"),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db, query=q)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Get a single note by ID",
)
async def get_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db, note_id)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Update a note",
    description="Changes only the fields present in the body. `tags` replaces the whole list.",
)
async def update_note(
    note_id: str,
    payload: NoteUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.update_note(db, note_id, payload)


@router.delete(
    "/{note_id}",
    response_model=MessageResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    message = await note_service.delete_note(db, note_id)
    return MessageResponse(message=message)


# ── AI actions on a stored note ───────────────────────────────────────────


@router.post(
    "/{note_id}/summarize",
    response_model=AIResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Summarize the note body",
)
async def summarize_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> AIResponse:
    return AIResponse(ai_response=await ai_service.summarize_note(db, note_id))


@router.post(
    "/{note_id}/generate-title",
    response_model=AIResponse,
    responses={**NOT_FOUND, **SERVER_ERROR},
    summary="Generate a title from the note body",
)
async def generate_note_title(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> AIResponse:
    return AIResponse(ai_response=await ai_service.generate_note_title(db, note_id))


@router.post(
    "/{note_id}/elaborate",
    response_model=AIResponse,
    responses={**BAD_REQUEST, **NOT_FOUND, **SERVER_ERROR},
    summary="Expand the note body (or title) into a paragraph",
)
async def elaborate_note(
    note_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> AIResponse:
    return AIResponse(ai_response=await ai_service.elaborate_note(db, note_id))
