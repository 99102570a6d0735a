"""
Name: Herbal Chat Chain

Responsibilities:
  - Answer free-form follow-up questions with a persona prompt
  - Add the prior diagnosis (category + herbs) as context when given
  - Return a fixed apology on any failure

Collaborators:
  - domain.services.GenerationService
  - infrastructure/prompts: chat templates

Constraints:
  - No retrieval, no parsing (reply used verbatim), no retry
  - invoke() never raises
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..domain.entities import ChainMetadata, ChatMessage, ChatOutput, DiagnosisRecord
from ..domain.services import GenerationService
from ..infrastructure.prompts.loader import CHAT_SYSTEM, CHAT_USER, PromptLoader
from ..logger import logger
from ..timing import StageTimings
from .diagnosis_chain import GenerationConfig

CHAT_APOLOGY = (
    "We're sorry, the service is busy right now. Please try again in a little while."
)


@dataclass
class ChatInput:
    message: str
    diagnosis: Optional[DiagnosisRecord] = None


def diagnosis_context(diagnosis: Optional[DiagnosisRecord]) -> str:
    if diagnosis is None:
        return ""
    return (
        f"Current user condition: {diagnosis.category}\n"
        f"Recommended herbs: {', '.join(diagnosis.recommended_herbs)}\n\n"
    )


class HerbalChatChain:
    """R: Single-call persona chat with apology fallback."""

    def __init__(
        self,
        llm: GenerationService,
        prompt_loader: PromptLoader,
        generation_config: GenerationConfig = GenerationConfig(),
    ):
        self.llm = llm
        self.prompt_loader = prompt_loader
        self.generation_config = generation_config

    def invoke(self, chat_input: ChatInput) -> ChatOutput:
        timings = StageTimings()
        try:
            system_prompt = self.prompt_loader.format(CHAT_SYSTEM)
            user_prompt = self.prompt_loader.format(
                CHAT_USER,
                context=diagnosis_context(chat_input.diagnosis),
                message=chat_input.message,
            )
            with timings.measure("llm"):
                response = self.llm.invoke(
                    [
                        ChatMessage(role="system", content=system_prompt),
                        ChatMessage(role="user", content=user_prompt),
                    ],
                    temperature=self.generation_config.temperature,
                    max_output_tokens=self.generation_config.max_output_tokens,
                )
        except Exception as exc:
            logger.warning(
                "Chat chain returned apology",
                extra={"error_type": type(exc).__name__, "error": str(exc)},
            )
            return ChatOutput(
                reply=CHAT_APOLOGY,
                metadata=ChainMetadata(
                    processing_time_ms=timings.total_ms,
                    rag_used=False,
                    error=str(exc) or type(exc).__name__,
                    timings=timings.to_dict(),
                ),
            )

        metadata = ChainMetadata(
            processing_time_ms=timings.total_ms,
            rag_used=False,
            llm_response=response,
            timings=timings.to_dict(),
        )
        logger.info(
            "Chat chain completed",
            extra={"llm_tokens": metadata.llm_tokens, **metadata.timings},
        )
        return ChatOutput(reply=response.content, metadata=metadata)
