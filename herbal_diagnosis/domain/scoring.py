"""
Name: Diagnostic Scoring Rules

Responsibilities:
  - Map questionnaire answers to fine category counts
  - Combine fine categories into the three macro groups
  - Turn macro scores into a recipe recommendation with confidence

Collaborators:
  - application/rag_pipeline.py: scores answers before retrieval
  - routes.py: validates answer ids against SYMPTOM_CATEGORY_TABLE

Constraints:
  - Pure functions: no I/O, no shared state, fresh dicts per call
  - Only answers that are exactly True count

Notes:
  - Thresholds are named configuration values (ScoringThresholds); the
    defaults reproduce the questionnaire's published rules
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .entities import AnswerSet, CategoryScoreMap, Recommendation

# R: Fine category per questionnaire id
SYMPTOM_CATEGORY_TABLE: Dict[str, str] = {
    "M1": "autonomic-nervous",
    "M2": "autonomic-nervous",
    "M3": "autonomic-nervous",
    "M4": "autonomic-nervous",
    "M5": "autonomic-nervous",
    "M6": "hormonal",
    "M7": "hormonal",
    "M8": "hormonal",
    "M9": "hormonal",
    "M10": "immune",
    "M11": "immune",
    "F1": "qi",
    "F2": "qi",
    "F3": "qi",
    "F4": "blood",
    "F5": "blood",
    "F6": "blood-stagnation",
    "F7": "blood",
    "F8": "water",
    "F9": "water",
    "F10": "water",
    "F11": "water",
    "F12": "essence",
    "F13": "essence",
    "F14": "essence",
    "F15": "essence",
    "F16": "essence",
}

# R: Fine categories in first-seen order (stable iteration)
FINE_CATEGORIES: Tuple[str, ...] = tuple(dict.fromkeys(SYMPTOM_CATEGORY_TABLE.values()))

# R: Macro groups A, B, C (order is the tie-break order)
MACRO_GROUPS: Dict[str, Tuple[str, ...]] = {
    "hormonal-blood": ("hormonal", "blood", "blood-stagnation"),
    "immune-water": ("immune", "water"),
    "nerve-essence-qi": ("autonomic-nervous", "essence", "qi"),
}

MACRO_RECIPES: Dict[str, str] = {
    "hormonal-blood": "Rhythm Circulation Steam",
    "immune-water": "Detox Steam",
    "nerve-essence-qi": "Restful Sleep Steam",
}

DEFAULT_RECIPE = MACRO_RECIPES["hormonal-blood"]

INSUFFICIENT_DATA = "insufficient-data"
INSUFFICIENT_DATA_LOGIC = "too few checked items — retake with more answers"


@dataclass(frozen=True)
class ScoringThresholds:
    """
    R: Decision thresholds of get_recommendation.

    Attributes:
        insufficient_data_max_total: Totals at or below this ask for more answers
        single_recipe_min_gap: Top-vs-second gap that yields one recipe
        dual_recipe_max_gap: Top-vs-second gap that yields two recipes
        single_confidence / dual_confidence / default_confidence / insufficient_confidence
    """

    insufficient_data_max_total: int = 3
    single_recipe_min_gap: int = 2
    dual_recipe_max_gap: int = 1
    single_confidence: float = 0.8
    dual_confidence: float = 0.9
    default_confidence: float = 0.5
    insufficient_confidence: float = 0.1


DEFAULT_THRESHOLDS = ScoringThresholds()


def calculate_category_scores(answers: AnswerSet) -> CategoryScoreMap:
    """
    R: Count checked answers per fine category.

    Every fine category is present in the result (0 when nothing matched).
    Unknown ids and non-True values are ignored.
    """
    scores: CategoryScoreMap = {category: 0 for category in FINE_CATEGORIES}
    for symptom_id, category in SYMPTOM_CATEGORY_TABLE.items():
        if answers.get(symptom_id) is True:
            scores[category] += 1
    return scores


def combine_macro_scores(fine_scores: CategoryScoreMap) -> CategoryScoreMap:
    """R: Sum fine categories into macro groups (A, B, C order)."""
    return {
        group: sum(fine_scores.get(category, 0) for category in members)
        for group, members in MACRO_GROUPS.items()
    }


def calculate_scores(answers: AnswerSet) -> CategoryScoreMap:
    return combine_macro_scores(calculate_category_scores(answers))


def get_recommendation(
    macro_scores: CategoryScoreMap,
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> Recommendation:
    """
    R: Decide the recipe recommendation from macro scores.

    Rules (evaluated in order):
      1. total <= insufficient_data_max_total -> insufficient-data (0.1)
      2. gap >= single_recipe_min_gap -> top group's recipe (0.8)
      3. gap <= dual_recipe_max_gap -> top + second recipes (0.9)
      4. otherwise -> default recipe (0.5)

    Ties keep the macro group order (sorted() is stable).
    """
    total = sum(macro_scores.values())
    if total <= thresholds.insufficient_data_max_total:
        return Recommendation(
            primary_recipe=INSUFFICIENT_DATA,
            logic=INSUFFICIENT_DATA_LOGIC,
            confidence=thresholds.insufficient_confidence,
        )

    ranked: List[Tuple[str, int]] = sorted(
        macro_scores.items(), key=lambda item: item[1], reverse=True
    )
    top_group, top_score = ranked[0]
    second_group, second_score = ranked[1] if len(ranked) > 1 else ("", 0)
    gap = top_score - second_score

    if gap >= thresholds.single_recipe_min_gap:
        return Recommendation(
            primary_recipe=MACRO_RECIPES.get(top_group, DEFAULT_RECIPE),
            logic=(
                f"{top_group} scored highest and leads the next group by "
                f"{gap} points, so a single recipe is recommended"
            ),
            confidence=thresholds.single_confidence,
        )

    if gap <= thresholds.dual_recipe_max_gap:
        return Recommendation(
            primary_recipe=MACRO_RECIPES.get(top_group, DEFAULT_RECIPE),
            secondary_recipe=MACRO_RECIPES.get(second_group, MACRO_RECIPES["immune-water"]),
            logic=(
                f"{top_group} and {second_group} are within {gap} point(s) of each "
                "other, so both recipes are suggested together"
            ),
            confidence=thresholds.dual_confidence,
        )

    return Recommendation(
        primary_recipe=DEFAULT_RECIPE,
        logic="default",
        confidence=thresholds.default_confidence,
    )


def diagnose_answers(
    answers: AnswerSet,
    thresholds: ScoringThresholds = DEFAULT_THRESHOLDS,
) -> Tuple[CategoryScoreMap, Recommendation]:
    macro_scores = calculate_scores(answers)
    return macro_scores, get_recommendation(macro_scores, thresholds)


def is_known_symptom_id(symptom_id: str) -> bool:
    return symptom_id in SYMPTOM_CATEGORY_TABLE
