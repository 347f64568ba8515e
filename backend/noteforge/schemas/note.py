"""
NoteForge Backend: Pydantic Request/Response Schemas
====================================================

What:  Pydantic models defining the API contract between the browser client
       and the backend.
How:   FastAPI validates request bodies against these models, serializes
       responses through them, and builds the OpenAPI docs from them.

Schemas are separate from the SQLAlchemy model so the wire format
(camelCase timestamps, `aiResponse`) can differ from column names.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Body of POST /api/notes.

    Both title and body are optional here; the "at least one of them"
    rule is a business rule enforced by NoteService (400, not 422).
    """
    title: Optional[str] = Field(default=None, description="Note title")
    body: Optional[str] = Field(default="", description="Note text")
    tags: Optional[List[str]] = Field(default_factory=list, description="Ordered tag labels")


class NoteTitleCreate(BaseModel):
    """Body of POST /api/notes/title-only."""
    title: Optional[str] = Field(default=None, description="Note title (required)")


class NoteUpdate(BaseModel):
    """
    Body of PUT /api/notes/{id}.

    Only the fields present in the JSON body are applied. A `tags` list
    replaces the stored list as a whole.
    """
    title: Optional[str] = None
    body: Optional[str] = None
    tags: Optional[List[str]] = None

    def changes(self) -> dict:
        """Fields the client actually sent, with nulls normalized."""
        data = self.model_dump(exclude_unset=True)
        if "body" in data and data["body"] is None:
            data["body"] = ""
        if "tags" in data and data["tags"] is None:
            data["tags"] = []
        return data


class LLMTask(str, Enum):
    """Prompt templates offered by the gateway."""
    SUMMARIZE = "summarize"
    GENERATE_TITLE = "generate-title"
    ELABORATE = "elaborate"


class LLMRequest(BaseModel):
    """
    Body of POST /api/notes/llm.

    `type` stays a plain string so an unknown value is reported as a
    400 "Invalid LLM type." instead of a schema error.
    """
    type: Optional[str] = Field(default=None, description="summarize | generate-title | elaborate")
    prompt: Optional[str] = Field(default=None, description="Subject text for the template")


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteResponse(BaseModel):
    """
    Full representation of a note.

    Serialized with camelCase keys (`createdAt`, `updatedAt`).
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: uuid.UUID = Field(description="Unique note identifier (UUID)")
    title: Optional[str] = Field(default=None)
    body: str = Field(default="")
    summary: str = Field(default="")
    elaboration: str = Field(default="")
    tags: List[str] = Field(default_factory=list)
    created_at: datetime = Field(description="When the note was created (UTC ISO 8601)")
    updated_at: datetime = Field(description="When the note was last modified (UTC ISO 8601)")

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        # SQLite hands back naive datetimes; everything is stored in UTC
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v


class AIResponse(BaseModel):
    """Result of any LLM-backed route: `{"aiResponse": "..."}`."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    ai_response: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "note with ID '...' was not found",
            "request_id": "1f0c2a9b"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    llm: str = Field(description="LLM upstream: available, unavailable, not_configured")
    uptime_seconds: float = Field(description="Seconds since service started")
