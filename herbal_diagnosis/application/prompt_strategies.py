"""
Name: Diagnosis Prompt Strategies

Responsibilities:
  - Prepare the system/user prompts for one diagnosis request
  - Report which documents (if any) grounded the prompt

Collaborators:
  - application/rag_pipeline.py: AugmentedPromptStrategy delegates to it
  - infrastructure/prompts: templates
  - application/diagnosis_chain.py: chooses one strategy at construction

Notes:
  - Augmented: scorer + retrieval context + strict schema (rag_used=True)
  - Direct: minimal prompt listing symptoms (rag_used=False)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol, Sequence

from ..domain.entities import AnswerSet, Document
from ..infrastructure.prompts.loader import DIRECT_SYSTEM, DIRECT_USER, PromptLoader
from .rag_pipeline import HerbalRAGPipeline


@dataclass
class ChainInput:
    """R: Input of one diagnosis invocation."""

    symptoms: List[str]
    answers: Dict[str, bool] = field(default_factory=dict)


@dataclass
class PreparedPrompt:
    system_prompt: str
    user_prompt: str
    sources: List[Document] = field(default_factory=list)
    rag_used: bool = False
    rag_details: Dict[str, Any] = field(default_factory=dict)


class PromptStrategy(Protocol):
    name: str

    def prepare(self, chain_input: ChainInput) -> PreparedPrompt:
        ...


class AugmentedPromptStrategy:
    """
    R: Knowledge-grounded prompt (scored recommendation + retrieved documents).
    """

    name = "augmented"

    def __init__(self, pipeline: HerbalRAGPipeline):
        self.pipeline = pipeline

    def prepare(self, chain_input: ChainInput) -> PreparedPrompt:
        retrieval = self.pipeline.perform_diagnosis(chain_input.answers)
        system_prompt, user_prompt = self.pipeline.generate_prompt(
            retrieval.context, chain_input.symptoms, chain_input.answers
        )
        return PreparedPrompt(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            sources=retrieval.sources,
            rag_used=True,
            rag_details=retrieval.details,
        )


class DirectPromptStrategy:
    """R: Minimal prompt without retrieval."""

    name = "direct"

    def __init__(self, prompt_loader: PromptLoader):
        self.prompt_loader = prompt_loader

    def prepare(self, chain_input: ChainInput) -> PreparedPrompt:
        return PreparedPrompt(
            system_prompt=self.prompt_loader.format(DIRECT_SYSTEM),
            user_prompt=self.prompt_loader.format(
                DIRECT_USER, symptoms=join_symptoms(chain_input.symptoms)
            ),
        )


def join_symptoms(symptoms: Sequence[str]) -> str:
    return ", ".join(symptoms)


def describe_answers(answers: AnswerSet) -> int:
    """R: Number of checked answers (logged by the chain)."""
    return sum(1 for value in answers.values() if value is True)
