"""
NoteForge Backend: Free-text LLM Route
======================================

POST /api/notes/llm takes `{"type", "prompt"}`, applies the matching prompt
template and returns the upstream text. Nothing is read from or written to
the note store.
"""

import logging

from fastapi import APIRouter

from noteforge.schemas.note import AIResponse, ErrorResponse, LLMRequest
from noteforge.services.ai_service import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/notes", tags=["LLM"])


@router.post(
    "/llm",
    response_model=AIResponse,
    responses={
        400: {"description": "Missing prompt/type or unknown type", "model": ErrorResponse},
        500: {"description": "LLM request failed", "model": ErrorResponse},
    },
    summary="Run a prompt template on free text",
    description="`type` is one of summarize, generate-title, elaborate.",
)
async def run_llm(payload: LLMRequest) -> AIResponse:
    text = await ai_service.run_prompt(payload.type, payload.prompt)
    return AIResponse(ai_response=text)
