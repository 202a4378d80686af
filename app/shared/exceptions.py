# app/shared/exceptions.py
"""
Domain errors raised by services and engines.
Mapped to HTTP responses by the handlers registered in app/main.py.
"""
from typing import Optional


class ClinicalError(Exception):
    """Base class for every error surfaced to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationError(ClinicalError):
    """Malformed or missing required input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        return {"message": self.message, "field": self.field}


class NotFound(ClinicalError):
    status_code = 404


class GenerationFailed(ClinicalError):
    """The text-generation capability errored or returned unusable output."""

    status_code = 502


class Unauthorized(ClinicalError):
    status_code = 401
