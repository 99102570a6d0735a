"""
Name: Diagnostic Context Builder Unit Tests

Responsibilities:
  - Verify summary block, section order and omitted empty sections
  - Verify per-section document caps
  - Verify the simple [category] context format
"""

import pytest

from herbal_diagnosis.application.context_builder import (
    DiagnosticContextBuilder,
    build_retrieved_context,
    format_confidence,
)
from herbal_diagnosis.domain.entities import Recommendation, RetrievalResult


def _results(make_document, prefix, count, **metadata):
    return [
        RetrievalResult(
            document=make_document(f"{prefix}{i}", f"{prefix} content {i}", **metadata),
            score=1.0,
        )
        for i in range(count)
    ]


SINGLE = Recommendation(
    primary_recipe="Detox Steam", logic="immune-water leads", confidence=0.8
)


@pytest.mark.unit
class TestDiagnosticContextBuilder:
    def test_summary_block(self):
        context = DiagnosticContextBuilder().build([], [], [], SINGLE)

        assert context == (
            "[DIAGNOSIS]\n"
            "Recommended recipe: Detox Steam\n"
            "Rationale: immune-water leads\n"
            "Confidence: 80%\n\n"
        )

    def test_companion_recipe_line(self):
        dual = Recommendation(
            primary_recipe="Rhythm Circulation Steam",
            secondary_recipe="Detox Steam",
            logic="close",
            confidence=0.9,
        )

        context = DiagnosticContextBuilder().build([], [], [], dual)

        assert "Companion recipe: Detox Steam\n" in context
        assert "Confidence: 90%" in context

    def test_sections_in_fixed_order(self, make_document):
        context = DiagnosticContextBuilder().build(
            _results(make_document, "recipe", 1, type="recipe"),
            _results(make_document, "symptom", 1, type="symptom"),
            _results(make_document, "general", 1),
            SINGLE,
        )

        positions = [
            context.index(header)
            for header in ("[DIAGNOSIS]", "[RECIPE DETAILS]", "[RELATED SYMPTOMS]", "[REFERENCE]")
        ]
        assert positions == sorted(positions)
        assert "[RECIPE DETAILS]\nrecipe content 0\n\n" in context

    def test_empty_sections_are_omitted(self, make_document):
        context = DiagnosticContextBuilder().build(
            [], _results(make_document, "symptom", 1, type="symptom"), [], SINGLE
        )

        assert "[RECIPE DETAILS]" not in context
        assert "[REFERENCE]" not in context
        assert "[RELATED SYMPTOMS]" in context

    def test_caps_symptom_and_reference_documents(self, make_document):
        context = DiagnosticContextBuilder().build(
            [],
            _results(make_document, "symptom", 5, type="symptom"),
            _results(make_document, "general", 4),
            SINGLE,
        )

        assert "symptom content 2" in context
        assert "symptom content 3" not in context
        assert "general content 1" in context
        assert "general content 2" not in context


@pytest.mark.unit
class TestRetrievedContext:
    def test_uses_category_header(self, make_document):
        results = _results(make_document, "water", 1, category="water")

        assert build_retrieved_context(results) == "[water]\nwater content 0\n\n"

    def test_falls_back_to_document_type(self, make_document):
        results = _results(make_document, "doc", 1, type="recipe")

        assert build_retrieved_context(results) == "[recipe]\ndoc content 0\n\n"

    def test_empty_results_give_empty_context(self):
        assert build_retrieved_context([]) == ""


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [(0.8, "80%"), (0.1, "10%"), (1.0, "100%")])
def test_format_confidence(value, expected):
    assert format_confidence(value) == expected
