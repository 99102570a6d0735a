"""
Name: Diagnosis RAG Pipeline Unit Tests

Responsibilities:
  - Verify recommendation, retrieval query and rag details
  - Verify prompt rendering for both answer shapes
  - Verify the simple context variant

Notes:
  - Uses the packaged corpus and v1 templates (no external services)
"""

import pytest

from herbal_diagnosis.application.rag_pipeline import (
    HerbalRAGPipeline,
    active_answer_ids,
    summarize_results,
)
from herbal_diagnosis.application.retriever import KeywordRetriever
from herbal_diagnosis.domain.entities import RetrievalResult
from herbal_diagnosis.domain.scoring import INSUFFICIENT_DATA
from herbal_diagnosis.infrastructure.knowledge import KnowledgeStore
from herbal_diagnosis.infrastructure.prompts import PromptLoader

RHYTHM_ANSWERS = {"M6": True, "M7": True, "M8": True, "M9": True, "F1": False}


@pytest.fixture
def pipeline() -> HerbalRAGPipeline:
    return HerbalRAGPipeline(
        retriever=KeywordRetriever(KnowledgeStore()),
        prompt_loader=PromptLoader(),
    )


@pytest.mark.unit
class TestPerformDiagnosis:
    def test_recommendation_and_query(self, pipeline):
        retrieval = pipeline.perform_diagnosis(RHYTHM_ANSWERS)

        assert retrieval.recommendation.primary_recipe == "Rhythm Circulation Steam"
        assert retrieval.recommendation.confidence == 0.8
        assert retrieval.query == "Rhythm Circulation Steam M6 M7 M8 M9"
        assert retrieval.macro_scores["hormonal-blood"] == 4

    def test_retrieves_at_most_top_k(self, pipeline):
        retrieval = pipeline.perform_diagnosis(RHYTHM_ANSWERS)

        assert 0 < len(retrieval.results) <= 5
        assert retrieval.sources == [r.document for r in retrieval.results]
        scores = [r.score for r in retrieval.results]
        assert scores == sorted(scores, reverse=True)

    def test_context_starts_with_diagnosis_block(self, pipeline):
        retrieval = pipeline.perform_diagnosis(RHYTHM_ANSWERS)

        assert retrieval.context.startswith(
            "[DIAGNOSIS]\nRecommended recipe: Rhythm Circulation Steam\n"
        )
        assert "Confidence: 80%" in retrieval.context

    def test_details_expose_scores_and_recommendation(self, pipeline):
        retrieval = pipeline.perform_diagnosis(RHYTHM_ANSWERS)
        details = retrieval.details

        assert details["totalResults"] == len(retrieval.results)
        assert details["scores"] == {
            "hormonal-blood": 4,
            "immune-water": 0,
            "nerve-essence-qi": 0,
        }
        assert details["recommendation"]["primaryRecipe"] == "Rhythm Circulation Steam"
        assert details["avgScore"] > 0

    def test_empty_answers_ask_for_more_data(self, pipeline):
        retrieval = pipeline.perform_diagnosis({})

        assert retrieval.recommendation.primary_recipe == INSUFFICIENT_DATA
        assert retrieval.query == INSUFFICIENT_DATA

    def test_uses_configured_top_k(self):
        pipeline = HerbalRAGPipeline(
            retriever=KeywordRetriever(KnowledgeStore()),
            prompt_loader=PromptLoader(),
            retrieval_top_k=2,
        )

        assert len(pipeline.perform_diagnosis(RHYTHM_ANSWERS).results) <= 2


@pytest.mark.unit
class TestGeneratePrompt:
    def test_renders_context_symptoms_and_checked_answers(self, pipeline):
        system_prompt, user_prompt = pipeline.generate_prompt(
            "[DIAGNOSIS]\nRecommended recipe: Detox Steam\n\n",
            ["swelling", "heavy legs"],
            {"F8": True, "F9": False, "M10": True},
        )

        assert "Recommended recipe: Detox Steam" in system_prompt
        assert '"statusSummary"' in system_prompt
        assert "{context}" not in system_prompt
        assert "swelling, heavy legs" in user_prompt
        assert "✓ F8\n✓ M10" in user_prompt
        assert "F9" not in user_prompt

    def test_no_checked_answers(self, pipeline):
        _, user_prompt = pipeline.generate_prompt("", ["tired"], {"M1": False})

        assert "(none)" in user_prompt


@pytest.mark.unit
class TestRetrieveContext:
    def test_simple_variant(self, pipeline):
        retrieval = pipeline.retrieve_context(["stress", "insomnia"], {"M1": True})

        assert retrieval.query == "stress insomnia M1"
        assert len(retrieval.results) <= 3
        assert retrieval.results
        first = retrieval.results[0].document
        assert retrieval.context.startswith(
            f"[{first.metadata.category or first.type}]\n{first.content}\n\n"
        )


@pytest.mark.unit
class TestHelpers:
    def test_active_answer_ids_keep_order(self):
        assert active_answer_ids({"F2": True, "M1": False, "M3": True}) == ["F2", "M3"]

    def test_summarize_results(self, make_document):
        results = [
            RetrievalResult(make_document("a", "x", category="water"), 1.0),
            RetrievalResult(make_document("b", "y", category="water"), 0.5),
            RetrievalResult(make_document("c", "z", category="qi"), 0.0),
        ]

        assert summarize_results(results) == {
            "totalResults": 3,
            "avgScore": 0.5,
            "categories": ["water", "qi"],
        }

    def test_summarize_empty_results(self):
        assert summarize_results([]) == {
            "totalResults": 0,
            "avgScore": 0.0,
            "categories": [],
        }
