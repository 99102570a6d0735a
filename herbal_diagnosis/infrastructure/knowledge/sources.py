"""
Name: Knowledge Corpus Sources

Responsibilities:
  - Load herbal knowledge, recipe and symptom entries from packaged JSON
  - Render each entry into a Document (content + searchable metadata)

Collaborators:
  - infrastructure/knowledge/store.py: merges sources in a fixed order
  - data/*.json: hand-authored corpus

Constraints:
  - A malformed file or entry raises KnowledgeSourceError (the store isolates it)
  - Rendering is deterministic (retrieval scores depend on it)
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ...domain.entities import (
    DOCUMENT_TYPE_GENERAL,
    DOCUMENT_TYPE_RECIPE,
    DOCUMENT_TYPE_SYMPTOM,
    Document,
    DocumentMetadata,
)
from ...exceptions import KnowledgeSourceError

# R: Directory containing the packaged corpus
DATA_DIR = Path(__file__).parent / "data"


def _read_json(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError as exc:
        raise KnowledgeSourceError(
            f"Knowledge file not found: {path}", original_error=exc
        ) from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise KnowledgeSourceError(
            f"Knowledge file unreadable: {path}", original_error=exc
        ) from exc
    if not isinstance(data, dict):
        raise KnowledgeSourceError(f"Knowledge file must hold a JSON object: {path}")
    return data


def _entries(data: Dict[str, Any], key: str, path: Path) -> List[Dict[str, Any]]:
    entries = data.get(key)
    if not isinstance(entries, list):
        raise KnowledgeSourceError(f"'{key}' must be a list in {path}")
    return entries


def _str_tuple(values: Any) -> tuple:
    if values is None:
        return ()
    if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
        raise ValueError("expected a list of strings")
    return tuple(values)


class HerbalKnowledgeSource:
    """R: General herbal knowledge documents (topic articles)."""

    name = "herbal"

    def __init__(self, path: Path = DATA_DIR / "herbal_knowledge.json"):
        self.path = Path(path)

    def load(self) -> List[Document]:
        data = _read_json(self.path)
        documents: List[Document] = []
        for entry in _entries(data, "documents", self.path):
            try:
                content = entry["content"]
                if isinstance(content, list):
                    content = "\n".join(content)
                metadata = entry.get("metadata") or {}
                documents.append(
                    Document(
                        id=str(entry["id"]),
                        content=str(content),
                        metadata=DocumentMetadata(
                            type=DOCUMENT_TYPE_GENERAL,
                            category=metadata.get("category"),
                            symptoms=_str_tuple(metadata.get("symptoms")),
                            herbs=_str_tuple(metadata.get("herbs")),
                            benefits=_str_tuple(metadata.get("benefits")),
                        ),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise KnowledgeSourceError(
                    f"Invalid herbal knowledge entry in {self.path}",
                    original_error=exc,
                ) from exc
        return documents


class RecipeSource:
    """R: Recipe documents (one per steam recipe)."""

    name = "recipe"

    def __init__(self, path: Path = DATA_DIR / "recipes.json"):
        self.path = Path(path)

    @staticmethod
    def render(entry: Dict[str, Any]) -> str:
        return "\n".join(
            [
                entry["title"],
                f"[Categories]: {', '.join(entry['categories'])}",
                f"[Target symptoms]: {', '.join(entry['symptoms'])}",
                f"[Description]: {entry['description']}",
                f"[Herbs]: {', '.join(entry['herbs'])}",
                f"[Recipe type]: {entry.get('type', DOCUMENT_TYPE_RECIPE)}",
            ]
        )

    def load(self) -> List[Document]:
        data = _read_json(self.path)
        documents: List[Document] = []
        for entry in _entries(data, "recipes", self.path):
            try:
                documents.append(
                    Document(
                        id=str(entry["id"]),
                        content=self.render(entry),
                        metadata=DocumentMetadata(
                            type=DOCUMENT_TYPE_RECIPE,
                            title=entry["title"],
                            symptoms=_str_tuple(entry["symptoms"]),
                            herbs=_str_tuple(entry["herbs"]),
                            extra={
                                "categories": _str_tuple(entry["categories"]),
                                "description": entry["description"],
                            },
                        ),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise KnowledgeSourceError(
                    f"Invalid recipe entry in {self.path}", original_error=exc
                ) from exc
        return documents


class SymptomSource:
    """R: Symptom documents (one per questionnaire item M1-M11, F1-F16)."""

    name = "symptom"

    def __init__(self, path: Path = DATA_DIR / "symptoms.json"):
        self.path = Path(path)

    @staticmethod
    def render(entry: Dict[str, Any]) -> str:
        pattern = entry.get("pattern") or entry["category"]
        return "\n".join(
            [
                f"Symptom ID: {entry['id']}",
                f"Symptom: {entry['text']}",
                f"This symptom relates to a {pattern} imbalance, and care with "
                f"{entry['recipe']} is considered effective.",
                f"In Eastern medicine a {pattern} disorder signals that the body's "
                "balance is off,",
                "and suitable herbal steam care can help improve the constitution.",
            ]
        )

    def load(self) -> List[Document]:
        data = _read_json(self.path)
        documents: List[Document] = []
        for entry in _entries(data, "symptoms", self.path):
            try:
                symptom_id = str(entry["id"])
                documents.append(
                    Document(
                        id=symptom_id,
                        content=self.render(entry),
                        metadata=DocumentMetadata(
                            type=DOCUMENT_TYPE_SYMPTOM,
                            category=entry["category"],
                            extra={
                                "symptom_id": symptom_id,
                                "symptom_text": entry["text"],
                                "recommended_recipe": entry["recipe"],
                                "category_type": (
                                    "main_symptom"
                                    if symptom_id.startswith("M")
                                    else "functional_symptom"
                                ),
                            },
                        ),
                    )
                )
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise KnowledgeSourceError(
                    f"Invalid symptom entry in {self.path}", original_error=exc
                ) from exc
        return documents


def default_sources() -> List[Any]:
    """R: Sources in merge order: herbal -> recipe -> symptom."""
    return [HerbalKnowledgeSource(), RecipeSource(), SymptomSource()]
