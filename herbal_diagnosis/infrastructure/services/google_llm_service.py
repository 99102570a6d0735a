"""
Name: Google Gemini Generation Service (Adapter)

Responsibilities:
  - Implement domain.services.GenerationService with Google GenAI (Gemini)
  - Map chat messages to system_instruction + contents
  - Report token usage and finish reason
  - Wrap every provider failure into GenerationServiceError

Collaborators:
  - google.genai.Client: external SDK
  - errors.to_generation_error: status code extraction

Constraints:
  - Bounded timeout configured on the client (HttpOptions, milliseconds)
  - No retry: the chain falls back after one attempt
"""

from __future__ import annotations

from typing import List, Optional

from google import genai
from google.genai import types

from ...domain.entities import ChatMessage, LLMResponse, LLMUsage
from ...exceptions import GenerationServiceError
from ...logger import logger
from .errors import to_generation_error


class GoogleLLMService:
    """
    R: Google Gemini implementation of GenerationService.
    """

    DEFAULT_MODEL_ID = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: str,
        *,
        model_id: str | None = None,
        timeout_seconds: float = 30.0,
        client: Optional[genai.Client] = None,
    ) -> None:
        """
        Args:
            api_key: Google API key (injected from Settings)
            model_id: Model override (default: gemini-1.5-flash)
            timeout_seconds: Per-call timeout
            client: Prebuilt genai client (tests)

        Raises:
            GenerationServiceError: no API key and no client injected
        """
        resolved_key = (api_key or "").strip()
        if not resolved_key and client is None:
            logger.error("GoogleLLMService: GOOGLE_API_KEY not configured")
            raise GenerationServiceError("GOOGLE_API_KEY not configured")

        self._client = client or genai.Client(
            api_key=resolved_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )
        self._model_id = (model_id or self.DEFAULT_MODEL_ID).strip()

        logger.info(
            "GoogleLLMService initialized",
            extra={"model_id": self._model_id, "timeout_seconds": timeout_seconds},
        )

    @property
    def model_id(self) -> str:
        return self._model_id

    @staticmethod
    def _split_messages(messages: List[ChatMessage]):
        system_parts = [m.content for m in messages if m.role == "system"]
        contents = [
            types.Content(
                role="model" if m.role == "assistant" else "user",
                parts=[types.Part(text=m.content)],
            )
            for m in messages
            if m.role != "system"
        ]
        return "\n\n".join(system_parts) or None, contents

    def invoke(
        self,
        messages: List[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> LLMResponse:
        system_instruction, contents = self._split_messages(messages)
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )

        try:
            response = self._client.models.generate_content(
                model=self._model_id, contents=contents, config=config
            )
        except Exception as exc:
            error = to_generation_error("Google", exc)
            logger.error(
                "GoogleLLMService: Generation failed",
                extra={"model_id": self._model_id, "status_code": error.status_code},
            )
            raise error from exc

        text = (getattr(response, "text", None) or "").strip()
        if not text:
            raise GenerationServiceError("Google generation returned an empty reply")

        return LLMResponse(
            content=text,
            model=self._model_id,
            finish_reason=self._finish_reason(response),
            usage=self._usage(response),
        )

    @staticmethod
    def _finish_reason(response) -> str:
        candidates = getattr(response, "candidates", None) or []
        if not candidates:
            return "unknown"
        reason = getattr(candidates[0], "finish_reason", None)
        if reason is None:
            return "unknown"
        return str(getattr(reason, "value", reason)).lower()

    @staticmethod
    def _usage(response) -> LLMUsage | None:
        usage = getattr(response, "usage_metadata", None)
        if usage is None:
            return None
        prompt_tokens = getattr(usage, "prompt_token_count", None) or 0
        completion_tokens = getattr(usage, "candidates_token_count", None) or 0
        total_tokens = getattr(usage, "total_token_count", None) or (
            prompt_tokens + completion_tokens
        )
        return LLMUsage(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=total_tokens,
        )
