"""
Name: OpenAI-Compatible Generation Service (Adapter)

Responsibilities:
  - Implement domain.services.GenerationService over /chat/completions
  - Map non-2xx responses, timeouts and connection errors to GenerationServiceError
  - Report token usage and finish reason

Collaborators:
  - httpx (HTTP client)
  - errors.to_generation_error

Constraints:
  - Bounded timeout on the httpx client
  - No retry: one attempt, then the chain falls back
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from ...domain.entities import ChatMessage, LLMResponse, LLMUsage
from ...exceptions import GenerationServiceError
from ...logger import logger
from .errors import to_generation_error


class OpenAIChatService:
    """
    R: OpenAI-compatible chat completions implementation of GenerationService.
    """

    DEFAULT_MODEL_ID = "gpt-3.5-turbo"
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str,
        *,
        model_id: str | None = None,
        base_url: str | None = None,
        timeout_seconds: float = 30.0,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        resolved_key = (api_key or "").strip()
        if not resolved_key:
            logger.error("OpenAIChatService: OPENAI_API_KEY not configured")
            raise GenerationServiceError("OPENAI_API_KEY not configured")

        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()
        self._url = (base_url or self.DEFAULT_BASE_URL).rstrip("/") + "/chat/completions"
        self._headers = {
            "Authorization": f"Bearer {resolved_key}",
            "Content-Type": "application/json",
        }
        self._client = http_client or httpx.Client(timeout=timeout_seconds)

        logger.info(
            "OpenAIChatService initialized",
            extra={"model_id": self._model_id, "timeout_seconds": timeout_seconds},
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    def invoke(
        self,
        messages: List[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> LLMResponse:
        payload = {
            "model": self._model_id,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "temperature": temperature,
            "max_tokens": max_output_tokens,
        }

        try:
            response = self._client.post(self._url, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            error = to_generation_error("OpenAI", exc)
            logger.error(
                "OpenAIChatService: Request failed",
                extra={"model_id": self._model_id, "error_type": type(exc).__name__},
            )
            raise error from exc

        if not response.is_success:
            message = _error_message(response)
            logger.error(
                "OpenAIChatService: Non-success status",
                extra={"model_id": self._model_id, "status_code": response.status_code},
            )
            raise GenerationServiceError(
                f"OpenAI API error: {message}", status_code=response.status_code
            )

        try:
            data = response.json()
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            raise GenerationServiceError(
                "OpenAI API returned an unexpected payload",
                status_code=response.status_code,
                original_error=exc,
            ) from exc

        if not isinstance(content, str) or not content.strip():
            raise GenerationServiceError("OpenAI generation returned an empty reply")

        return LLMResponse(
            content=content,
            model=str(data.get("model") or self._model_id),
            finish_reason=str(choice.get("finish_reason") or "unknown"),
            usage=_usage(data.get("usage")),
        )

    def close(self) -> None:
        self._client.close()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "request failed"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason_phrase or "request failed"


def _usage(usage: Optional[Dict[str, Any]]) -> LLMUsage | None:
    if not isinstance(usage, dict):
        return None
    return LLMUsage(
        prompt_tokens=int(usage.get("prompt_tokens") or 0),
        completion_tokens=int(usage.get("completion_tokens") or 0),
        total_tokens=int(usage.get("total_tokens") or 0),
    )
