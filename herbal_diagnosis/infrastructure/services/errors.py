"""
Name: Provider Error Helpers

Responsibilities:
  - Extract an HTTP status code from SDK / httpx exceptions
  - Wrap provider failures into GenerationServiceError

Collaborators:
  - google_llm_service.py, openai_llm_service.py
"""

from __future__ import annotations

from ...exceptions import GenerationServiceError


def get_http_status_code(exception: BaseException) -> int | None:
    """R: Extract an HTTP status code from different exception types.

    Supports (best-effort):
      - google.genai.errors.APIError (attribute `code`)
      - httpx.HTTPStatusError (exception.response.status_code)
      - exceptions exposing `status_code` directly
    """
    code = getattr(exception, "code", None)
    # R: `code` may be a gRPC status on some SDKs; keep HTTP range only
    if isinstance(code, int) and code >= 100:
        return code

    response = getattr(exception, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    status_code = getattr(exception, "status_code", None)
    if isinstance(status_code, int):
        return status_code

    return None


def to_generation_error(provider: str, exception: Exception) -> GenerationServiceError:
    if isinstance(exception, GenerationServiceError):
        return exception
    return GenerationServiceError(
        f"{provider} generation failed: {type(exception).__name__}: {exception}",
        status_code=get_http_status_code(exception),
        original_error=exception,
    )
