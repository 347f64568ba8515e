"""
NoteForge Backend: Custom Exception Hierarchy
=============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services; caught by the handlers in main.py.

Exception Hierarchy:
    NoteForgeError (base)
    ├── ValidationError   → 400 Bad Request
    ├── NotFoundError     → 404 Not Found
    ├── ConfigError       → 500 (LLM gateway is not configured)
    ├── UpstreamError     → 500 (generative-text API call failed)
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class NoteForgeError(Exception):
    """
    Base exception for all NoteForge application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NoteForgeError):
    """
    Raised when client input is missing a required value.

    When:    Creating a note with neither title nor body, elaborating a note
             with nothing to elaborate on, an LLM request without prompt/type.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(NoteForgeError):
    """
    Raised when a requested resource does not exist.

    When:    Any /api/notes/{id} route with an unknown or malformed id, and the
             summarize/generate-title routes when the note has no body.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"The requested {resource} was not found"
            if resource_id:
                message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConfigError(NoteForgeError):
    """
    Raised when the LLM gateway is called without an API key.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "LLM_API_KEY is not configured.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(NoteForgeError):
    """
    Raised when the generative-text API does not answer with success.

    When:    HTTP error status, authentication failure, transport error.
             There is no retry; the first failure surfaces to the caller.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "The AI service request failed.",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class DatabaseError(NoteForgeError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is generic; details such as the
    original exception type stay in `context` and the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
