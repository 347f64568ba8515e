# Routes package init
"""
NoteForge Backend: API Routes Package
=====================================

Route Inventory:
    - notes.py:   /api/notes CRUD and the per-note AI actions
    - llm.py:     POST /api/notes/llm (templates on free text)
    - health.py:  GET  /health

Routes stay thin: read the request, call a service, return the schema.
"""
