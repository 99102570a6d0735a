"""
Name: Recipe Cards

Responsibilities:
  - Convert a diagnosis into the recipe cards shown by the chat UI
"""

from typing import List

from ..domain.entities import DiagnosisRecord, Recipe


def recipes_from_diagnosis(record: DiagnosisRecord) -> List[Recipe]:
    """R: Exactly one card built from the diagnosis."""
    return [
        Recipe(
            id="1",
            name=f"{record.category} Blend",
            description=record.status_summary,
            ingredients=list(record.recommended_herbs),
            benefits=list(record.benefits),
            instructions=record.instructions,
        )
    ]
