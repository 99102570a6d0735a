"""
Name: Herbal Diagnosis Chain

Responsibilities:
  - Orchestrate prompt preparation, one generation call and strict parsing
  - Substitute the deterministic fallback on any failure
  - Record sources, usage, timings and the failure cause in metadata

Collaborators:
  - application/prompt_strategies.py: AugmentedPromptStrategy / DirectPromptStrategy
  - domain.services.GenerationService: external generation call
  - application/response_parser.py: parse_diagnosis_record
  - application/fallback.py: generate_fallback_result

Constraints:
  - invoke() never raises; degradation is reported via metadata.error
  - No retry: one attempt, then fallback
  - No HTTP concerns

Notes:
  - Strategy is chosen once at construction (with_rag / direct)
  - Stages timed: prepare, llm, parse
"""

from __future__ import annotations

from dataclasses import dataclass

from ..domain.entities import ChainMetadata, ChainOutput, ChatMessage
from ..domain.services import GenerationService
from ..infrastructure.prompts.loader import PromptLoader
from ..logger import logger
from ..timing import StageTimings
from .fallback import generate_fallback_result
from .prompt_strategies import (
    AugmentedPromptStrategy,
    ChainInput,
    DirectPromptStrategy,
    PromptStrategy,
    describe_answers,
)
from .rag_pipeline import HerbalRAGPipeline
from .response_parser import parse_diagnosis_record


@dataclass(frozen=True)
class GenerationConfig:
    """R: Sampling parameters sent with every generation call."""

    temperature: float = 0.7
    max_output_tokens: int = 1000


class HerbalDiagnosisChain:
    """
    R: Prompt -> generation -> strict parse, with rule-based fallback.
    """

    def __init__(
        self,
        llm: GenerationService,
        strategy: PromptStrategy,
        generation_config: GenerationConfig = GenerationConfig(),
    ):
        self.llm = llm
        self.strategy = strategy
        self.generation_config = generation_config

    @classmethod
    def with_rag(
        cls,
        llm: GenerationService,
        pipeline: HerbalRAGPipeline,
        generation_config: GenerationConfig = GenerationConfig(),
    ) -> "HerbalDiagnosisChain":
        return cls(llm, AugmentedPromptStrategy(pipeline), generation_config)

    @classmethod
    def direct(
        cls,
        llm: GenerationService,
        prompt_loader: PromptLoader,
        generation_config: GenerationConfig = GenerationConfig(),
    ) -> "HerbalDiagnosisChain":
        return cls(llm, DirectPromptStrategy(prompt_loader), generation_config)

    def invoke(self, chain_input: ChainInput) -> ChainOutput:
        """
        R: Run one diagnosis.

        Returns:
            ChainOutput with the parsed record, or the fallback record with
            metadata.error set (sources empty, rag_used False)
        """
        timings = StageTimings()
        try:
            with timings.measure("prepare"):
                prepared = self.strategy.prepare(chain_input)

            with timings.measure("llm"):
                response = self.llm.invoke(
                    [
                        ChatMessage(role="system", content=prepared.system_prompt),
                        ChatMessage(role="user", content=prepared.user_prompt),
                    ],
                    temperature=self.generation_config.temperature,
                    max_output_tokens=self.generation_config.max_output_tokens,
                )

            with timings.measure("parse"):
                record = parse_diagnosis_record(response.content)

        except Exception as exc:
            # R: Any failure (prompt, network, timeout, schema) degrades to fallback
            processing_time_ms = timings.total_ms
            logger.warning(
                "Diagnosis chain fell back to rule-based result",
                extra={
                    "strategy": self.strategy.name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                    **timings.to_dict(),
                },
            )
            return ChainOutput(
                result=generate_fallback_result(chain_input.symptoms),
                metadata=ChainMetadata(
                    sources=[],
                    processing_time_ms=processing_time_ms,
                    rag_used=False,
                    error=str(exc) or type(exc).__name__,
                    timings=timings.to_dict(),
                ),
            )

        metadata = ChainMetadata(
            sources=list(prepared.sources),
            processing_time_ms=timings.total_ms,
            rag_used=prepared.rag_used,
            llm_response=response,
            rag_details=prepared.rag_details,
            timings=timings.to_dict(),
        )
        logger.info(
            "Diagnosis chain completed",
            extra={
                "strategy": self.strategy.name,
                "category": record.category,
                "sources": len(metadata.sources),
                "checked_answers": describe_answers(chain_input.answers),
                "llm_tokens": metadata.llm_tokens,
                **metadata.timings,
            },
        )
        return ChainOutput(result=record, metadata=metadata)
