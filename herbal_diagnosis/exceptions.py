"""
Name: Typed Service Exceptions

Responsibilities:
  - Stable error_code per failure class
  - error_id for correlating responses with logs
  - Human-readable message without secrets

Collaborators:
  - exception_handlers.py: maps boundary errors to HTTP problem responses
  - application/diagnosis_chain.py: absorbs generation/parse errors into fallback

Notes:
  - Only InvalidInputError is meant to reach API callers; the rest are absorbed
    inside the pipeline and recorded in response metadata
"""

from __future__ import annotations

from uuid import uuid4


class HerbalDiagnosisError(Exception):
    """Base class for internal errors."""

    error_code: str = "DIAGNOSIS_ERROR"

    def __init__(
        self,
        message: str,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.message = message
        self.error_id = error_id or str(uuid4())
        self.original_error = original_error
        super().__init__(message)


class InvalidInputError(HerbalDiagnosisError):
    """Missing or malformed symptoms/answers (rejected before the pipeline)."""

    error_code: str = "INVALID_INPUT"


class GenerationServiceError(HerbalDiagnosisError):
    """External generation call failed (network, timeout, non-2xx)."""

    error_code: str = "GENERATION_ERROR"

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_id: str | None = None,
        original_error: Exception | None = None,
    ):
        self.status_code = status_code
        super().__init__(message, error_id=error_id, original_error=original_error)

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class ResponseParseError(HerbalDiagnosisError):
    """Generation reply does not conform to the diagnosis schema."""

    error_code: str = "RESPONSE_PARSE_ERROR"


class KnowledgeSourceError(HerbalDiagnosisError):
    """A knowledge source could not be loaded."""

    error_code: str = "KNOWLEDGE_SOURCE_ERROR"


class HistoryStorageError(HerbalDiagnosisError):
    """Diagnosis history could not be persisted or read."""

    error_code: str = "HISTORY_STORAGE_ERROR"
