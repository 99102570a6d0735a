"""
Name: Diagnostic Context Builder

Responsibilities:
  - Assemble the knowledge package injected into the diagnosis prompt
  - Order sections: diagnosis summary, recipes, symptoms, reference
  - Omit sections that have no documents (no empty headers)

Collaborators:
  - domain.entities: RetrievalResult, Recommendation
  - application/rag_pipeline.py: caller

Notes:
  - Built once per request, never cached
  - Retrieval results arrive already ranked by score
"""

from typing import List, Sequence

from ..domain.entities import Recommendation, RetrievalResult
from ..logger import logger

DIAGNOSIS_HEADER = "[DIAGNOSIS]"
RECIPE_HEADER = "[RECIPE DETAILS]"
SYMPTOM_HEADER = "[RELATED SYMPTOMS]"
REFERENCE_HEADER = "[REFERENCE]"

MAX_SYMPTOM_DOCS = 3
MAX_GENERAL_DOCS = 2


def format_confidence(confidence: float) -> str:
    return f"{round(confidence * 100)}%"


def _section(header: str, results: Sequence[RetrievalResult]) -> str:
    body = "".join(f"{result.document.content}\n\n" for result in results)
    return f"{header}\n{body}"


class DiagnosticContextBuilder:
    """
    R: Build the context text from the recommendation and ranked documents.
    """

    def build(
        self,
        recipe_results: Sequence[RetrievalResult],
        symptom_results: Sequence[RetrievalResult],
        general_results: Sequence[RetrievalResult],
        recommendation: Recommendation,
    ) -> str:
        parts: List[str] = [self._summary(recommendation)]

        if recipe_results:
            parts.append(_section(RECIPE_HEADER, recipe_results))
        if symptom_results:
            parts.append(_section(SYMPTOM_HEADER, symptom_results[:MAX_SYMPTOM_DOCS]))
        if general_results:
            parts.append(_section(REFERENCE_HEADER, general_results[:MAX_GENERAL_DOCS]))

        context = "".join(parts)
        logger.debug(
            "Built diagnostic context",
            extra={
                "recipe_docs": len(recipe_results),
                "symptom_docs": min(len(symptom_results), MAX_SYMPTOM_DOCS),
                "general_docs": min(len(general_results), MAX_GENERAL_DOCS),
                "context_chars": len(context),
            },
        )
        return context

    @staticmethod
    def _summary(recommendation: Recommendation) -> str:
        lines = [
            DIAGNOSIS_HEADER,
            f"Recommended recipe: {recommendation.primary_recipe}",
        ]
        if recommendation.secondary_recipe:
            lines.append(f"Companion recipe: {recommendation.secondary_recipe}")
        lines.append(f"Rationale: {recommendation.logic}")
        lines.append(f"Confidence: {format_confidence(recommendation.confidence)}")
        return "\n".join(lines) + "\n\n"


def build_retrieved_context(results: Sequence[RetrievalResult]) -> str:
    """
    R: Simple context: one [category] header per document, then its content.
    """
    return "".join(
        f"[{result.document.metadata.category or result.document.type}]\n"
        f"{result.document.content}\n\n"
        for result in results
    )
