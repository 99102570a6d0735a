"""
Name: Diagnosis RAG Pipeline

Responsibilities:
  - Score answers and derive the recommendation
  - Build the retrieval query (recipe names + active answer ids)
  - Split ranked documents by type and assemble the diagnostic context
  - Render the diagnosis prompts

Collaborators:
  - domain/scoring.py: pure scoring rules
  - application/retriever.py: KeywordRetriever
  - application/context_builder.py: DiagnosticContextBuilder
  - infrastructure/prompts: PromptLoader

Notes:
  - rag_details mirrors what the diagnosis response exposes: totals,
    average score, categories, macro scores and the recommendation
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..domain.entities import (
    DOCUMENT_TYPE_GENERAL,
    DOCUMENT_TYPE_RECIPE,
    DOCUMENT_TYPE_SYMPTOM,
    AnswerSet,
    CategoryScoreMap,
    Document,
    Recommendation,
    RetrievalResult,
)
from ..domain.scoring import DEFAULT_THRESHOLDS, ScoringThresholds, diagnose_answers
from ..infrastructure.prompts.loader import (
    DIAGNOSIS_SYSTEM,
    DIAGNOSIS_USER,
    PromptLoader,
)
from ..logger import logger
from .context_builder import DiagnosticContextBuilder, build_retrieved_context
from .retriever import KeywordRetriever

CHECK_MARK = "✓"


@dataclass
class DiagnosisRetrieval:
    """R: Output of perform_diagnosis."""

    recommendation: Recommendation
    macro_scores: CategoryScoreMap
    query: str
    context: str
    results: List[RetrievalResult]
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def sources(self) -> List[Document]:
        return [result.document for result in self.results]


@dataclass
class ContextRetrieval:
    """R: Output of retrieve_context (simple variant)."""

    query: str
    context: str
    results: List[RetrievalResult]
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def sources(self) -> List[Document]:
        return [result.document for result in self.results]


def active_answer_ids(answers: AnswerSet) -> List[str]:
    """R: Ids answered exactly True, in the caller's order."""
    return [key for key, value in answers.items() if value is True]


def summarize_results(results: Sequence[RetrievalResult]) -> Dict[str, Any]:
    categories: List[Optional[str]] = []
    for result in results:
        category = result.document.metadata.category
        if category not in categories:
            categories.append(category)
    total = len(results)
    return {
        "totalResults": total,
        "avgScore": (sum(r.score for r in results) / total) if total else 0.0,
        "categories": categories,
    }


class HerbalRAGPipeline:
    """
    R: Scorer + retriever + context builder + prompt rendering.

    Args:
        retriever: KeywordRetriever over the knowledge store
        prompt_loader: Versioned templates
        context_builder: Section assembler (default DiagnosticContextBuilder)
        thresholds: Scoring thresholds
        retrieval_top_k: Documents retrieved for a diagnosis (default 5)
        context_top_k: Documents retrieved for the simple variant (default 3)
    """

    def __init__(
        self,
        retriever: KeywordRetriever,
        prompt_loader: PromptLoader,
        context_builder: Optional[DiagnosticContextBuilder] = None,
        thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
        retrieval_top_k: int = 5,
        context_top_k: int = 3,
    ):
        self.retriever = retriever
        self.prompt_loader = prompt_loader
        self.context_builder = context_builder or DiagnosticContextBuilder()
        self.thresholds = thresholds
        self.retrieval_top_k = retrieval_top_k
        self.context_top_k = context_top_k

    def perform_diagnosis(self, answers: AnswerSet) -> DiagnosisRetrieval:
        macro_scores, recommendation = diagnose_answers(answers, self.thresholds)

        search_terms = [recommendation.primary_recipe]
        if recommendation.secondary_recipe:
            search_terms.append(recommendation.secondary_recipe)
        query = " ".join(search_terms + active_answer_ids(answers))

        results = self.retriever.retrieve(query, self.retrieval_top_k)

        recipe_results = [r for r in results if r.document.type == DOCUMENT_TYPE_RECIPE]
        symptom_results = [r for r in results if r.document.type == DOCUMENT_TYPE_SYMPTOM]
        general_results = [
            r for r in results if r.document.type in ("", DOCUMENT_TYPE_GENERAL)
        ]

        context = self.context_builder.build(
            recipe_results, symptom_results, general_results, recommendation
        )

        details = summarize_results(results)
        details["scores"] = dict(macro_scores)
        details["recommendation"] = recommendation.to_dict()

        logger.info(
            "Diagnosis retrieval completed",
            extra={
                "primary_recipe": recommendation.primary_recipe,
                "confidence": recommendation.confidence,
                "documents": len(results),
                "recipe_docs": len(recipe_results),
                "symptom_docs": len(symptom_results),
                "general_docs": len(general_results),
            },
        )
        return DiagnosisRetrieval(
            recommendation=recommendation,
            macro_scores=macro_scores,
            query=query,
            context=context,
            results=results,
            details=details,
        )

    def retrieve_context(
        self, symptoms: Sequence[str], answers: AnswerSet
    ) -> ContextRetrieval:
        query = " ".join(symptoms) + " " + " ".join(active_answer_ids(answers))
        results = self.retriever.retrieve(query, self.context_top_k)
        return ContextRetrieval(
            query=query,
            context=build_retrieved_context(results),
            results=results,
            details=summarize_results(results),
        )

    def generate_prompt(
        self, context: str, symptoms: Sequence[str], answers: AnswerSet
    ) -> Tuple[str, str]:
        """
        R: Render (system_prompt, user_prompt) for a diagnosis.
        """
        system_prompt = self.prompt_loader.format(DIAGNOSIS_SYSTEM, context=context)
        checked = "\n".join(f"{CHECK_MARK} {key}" for key in active_answer_ids(answers))
        user_prompt = self.prompt_loader.format(
            DIAGNOSIS_USER,
            symptoms=", ".join(symptoms),
            answers=checked or "(none)",
        )
        return system_prompt, user_prompt
