"""
NoteForge Backend: Application Package
======================================

What:  Marks the `noteforge` directory as a Python package.
Who:   Imported by uvicorn, Alembic, pytest and the `noteforge` console script.

Architecture Note:
    The backend is split into the same thin layers throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (repository, AI, LLM)    │  ← Business rules, prompts
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The browser client lives in `noteforge/static/` and is served by the
    same process at `/`.
"""

__version__ = "1.0.0"
