"""
Name: Rule-Based Fallback Diagnosis

Responsibilities:
  - Produce a fully populated DiagnosisRecord without any external call
  - Pick one of four fixed results by keywords in the symptom text

Collaborators:
  - application/diagnosis_chain.py: used on any generation/parse failure

Constraints:
  - Deterministic; every field non-empty
  - Branch priority: stress > hormonal > cold/fatigue > general
"""

from dataclasses import replace
from typing import Sequence, Tuple

from ..domain.entities import DiagnosisRecord

STRESS_KEYWORDS: Tuple[str, ...] = ("stress", "anxiety", "anxious", "sleep", "insomnia")
HORMONAL_KEYWORDS: Tuple[str, ...] = (
    "pain",
    "menstrual",
    "menstruation",
    "period",
    "hormone",
    "hormonal",
    "pms",
)
COLD_KEYWORDS: Tuple[str, ...] = (
    "cold",
    "chill",
    "fatigue",
    "tired",
    "circulation",
)

STRESS_RESULT = DiagnosisRecord(
    category="Stress & Mental Care",
    status_summary="Signs of physical and mental tension and stress. Relaxation is recommended.",
    recommended_herbs=["chamomile", "lavender", "passion flower", "lemon balm"],
    benefits=["relaxation", "better sleep quality", "stress relief", "calmer nerves"],
    advice="Keep a regular sleep rhythm and make time to unwind before bed.",
    instructions="Steam for 15-20 minutes one hour before bed, enjoying the aroma with deep breaths.",
    duration="2-3 weeks",
    frequency="daily",
    precautions="Consult a doctor before use during pregnancy or breastfeeding.",
)

HORMONAL_RESULT = DiagnosisRecord(
    category="Hormone Balance & Women's Health",
    status_summary="Hormone balance needs support. Natural care can help.",
    recommended_herbs=["rose", "clary sage", "geranium", "chaste tree"],
    benefits=["hormone balance", "menstrual pain relief", "healthier skin", "steadier mood"],
    advice="Eat a balanced diet, exercise moderately and get enough sleep.",
    instructions="Use for 20 minutes daily starting one week before menstruation, relaxed and warm.",
    duration="1-2 months",
    frequency="daily",
    precautions="Avoid use during pregnancy or breastfeeding.",
)

COLD_RESULT = DiagnosisRecord(
    category="Cold & Circulation Care",
    status_summary="Signs of a cold body and poor circulation. Warming care should help.",
    recommended_herbs=["ginger", "cinnamon", "clove", "rosemary"],
    benefits=["better circulation", "higher metabolism", "less cold sensitivity", "more energy"],
    advice="Eat warming foods and take longer baths. Moderate exercise also helps.",
    instructions="Take a 20-30 minute steam before bathing. Combining it with a foot bath is recommended.",
    duration="effects usually felt after 2-3 weeks of regular use",
    frequency="3-4 times a week",
    precautions="People with high blood pressure should consult a doctor before use.",
)

GENERAL_RESULT = DiagnosisRecord(
    category="General Wellness Maintenance",
    status_summary="Overall wellness maintenance and refreshment are recommended.",
    recommended_herbs=["chamomile", "lavender", "rosemary", "nettle"],
    benefits=["refreshment", "antioxidant support", "immune support", "relaxation"],
    advice="Keep up balanced habits and build regular self-care into your routine.",
    instructions="Steam for 15-20 minutes, 2-3 times a week, whenever you want to relax.",
    duration="ongoing use recommended",
    frequency="2-3 times a week",
    precautions="Adjust how often you use it to how you feel.",
)


def _mentions(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def generate_fallback_result(symptoms: Sequence[str]) -> DiagnosisRecord:
    """
    R: Deterministic diagnosis from symptom keywords.
    """
    text = " ".join(symptoms).lower()
    if _mentions(text, STRESS_KEYWORDS):
        template = STRESS_RESULT
    elif _mentions(text, HORMONAL_KEYWORDS):
        template = HORMONAL_RESULT
    elif _mentions(text, COLD_KEYWORDS):
        template = COLD_RESULT
    else:
        template = GENERAL_RESULT
    # R: Fresh lists per call; the templates are shared
    return replace(
        template,
        recommended_herbs=list(template.recommended_herbs),
        benefits=list(template.benefits),
    )
