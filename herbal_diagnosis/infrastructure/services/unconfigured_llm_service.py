"""
Name: Unconfigured Generation Service

Responsibilities:
  - Stand in for a provider when LLM_PROVIDER=none
  - Fail every call so the chains degrade to their deterministic fallbacks
"""

from typing import List

from ...domain.entities import ChatMessage, LLMResponse
from ...exceptions import GenerationServiceError


class UnconfiguredLLMService:
    """R: GenerationService that is never available."""

    MODEL_ID = "unconfigured"

    @property
    def model_id(self) -> str:
        return self.MODEL_ID

    def invoke(
        self,
        messages: List[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> LLMResponse:
        raise GenerationServiceError(
            "Generation service not configured", status_code=503
        )
