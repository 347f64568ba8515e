# Services package init
"""
NoteForge Backend: Services Layer
=================================

Service Inventory:
    - NoteService:   note CRUD over the async session (repository)
    - LLMService:    abstract generative-text gateway
    - GeminiService: Google Gemini implementation of LLMService
    - prompts:       the summarize / generate-title / elaborate templates
    - AIService:     loads a note, prompts the gateway, stores the result
"""
