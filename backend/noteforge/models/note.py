"""
NoteForge Backend: Note SQLAlchemy Model
========================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic and `init_models()`
       read this for the schema.
Who:   Used by NoteService and AIService for all note persistence.

Table Design:
    - UUID primary key generated in Python (portable between SQLite and PostgreSQL)
    - title nullable; body/summary/elaboration NOT NULL with '' default
    - tags: JSON array of strings, order preserved as sent by the client
    - created_at / updated_at: UTC with timezone; updated_at refreshed on every UPDATE

    Index on created_at DESC serves the only list ordering the API offers.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Index, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from noteforge.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Note(Base):
    """
    One user note.

    Lifecycle:
        1. Created by POST /api/notes (title and/or body required)
        2. Edited in place by PUT (title, body, tags)
        3. AI fields written by the summarize / generate-title / elaborate routes
        4. Deleted permanently by DELETE
    """

    __tablename__ = "notes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier, assigned on creation",
    )

    title: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Optional note title (AI generate-title writes here)",
    )

    body: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Free-form note text",
    )

    summary: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Set only by the summarize operation",
    )

    elaboration: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Set only by the elaborate operation",
    )

    # Always reassigned as a whole list; JSON columns do not track in-place edits
    tags: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered list of text labels",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        comment="When this note was created (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="When this note was last modified (UTC)",
    )

    __table_args__ = (
        Index("idx_notes_created_at", created_at.desc()),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, created_at='{self.created_at}')>"
