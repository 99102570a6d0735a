"""
Name: Domain Entities

Responsibilities:
  - Define core entities of the diagnosis pipeline (Document, Recommendation,
    DiagnosisRecord, chain outputs, history records)
  - Provide the camelCase wire form of a diagnosis
  - Provide type safety for the domain layer

Collaborators:
  - None (pure domain layer, no external dependencies)

Constraints:
  - No dependencies on infrastructure or frameworks
  - Corpus entities are frozen (immutable after load)

Notes:
  - Per-request entities (RetrievalResult, ChainOutput, ...) are created fresh
    and never reused across requests
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple

# R: Answer set supplied per request (question id -> checked)
AnswerSet = Mapping[str, bool]

# R: Category name -> non-negative count
CategoryScoreMap = Dict[str, int]

DOCUMENT_TYPE_GENERAL = "general"
DOCUMENT_TYPE_RECIPE = "recipe"
DOCUMENT_TYPE_SYMPTOM = "symptom"


@dataclass(frozen=True)
class DocumentMetadata:
    """
    R: Searchable metadata of a knowledge document.

    Attributes:
        type: general | recipe | symptom
        category: Topic or fine symptom category (optional)
        symptoms: Symptom keywords covered by the document
        herbs: Herbs mentioned by the document
        benefits: Expected benefits
        title: Display title (optional)
        extra: Source-specific fields (recipe categories, symptom id, ...)
    """

    type: str = DOCUMENT_TYPE_GENERAL
    category: Optional[str] = None
    symptoms: Tuple[str, ...] = ()
    herbs: Tuple[str, ...] = ()
    benefits: Tuple[str, ...] = ()
    title: Optional[str] = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """
        R: Serializable form in a fixed key order (empty values omitted).

        The retriever scores against the JSON of this dict, so the order must
        stay stable for retrieval to be deterministic.
        """
        data: Dict[str, Any] = {"type": self.type}
        if self.title:
            data["title"] = self.title
        if self.category:
            data["category"] = self.category
        if self.symptoms:
            data["symptoms"] = list(self.symptoms)
        if self.herbs:
            data["herbs"] = list(self.herbs)
        if self.benefits:
            data["benefits"] = list(self.benefits)
        for key, value in self.extra.items():
            if value in (None, "", [], ()):
                continue
            data[key] = list(value) if isinstance(value, tuple) else value
        return data


@dataclass(frozen=True)
class Document:
    """
    R: Knowledge corpus entry.

    Attributes:
        id: Unique identifier (corpus-wide)
        content: Text searched and injected into prompts
        metadata: Searchable metadata
    """

    id: str
    content: str
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)

    @property
    def type(self) -> str:
        return self.metadata.type


@dataclass(frozen=True)
class RetrievalResult:
    """R: A scored document for one query (score >= 0)."""

    document: Document
    score: float


@dataclass(frozen=True)
class Recommendation:
    """
    R: Output of the diagnostic scorer.

    Attributes:
        primary_recipe: Recipe name (or "insufficient-data")
        secondary_recipe: Second recipe for near ties (optional)
        logic: Human-readable rationale
        confidence: Value in [0, 1]
    """

    primary_recipe: str
    logic: str
    confidence: float
    secondary_recipe: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "primaryRecipe": self.primary_recipe,
            "logic": self.logic,
            "confidence": self.confidence,
        }
        if self.secondary_recipe:
            data["secondaryRecipe"] = self.secondary_recipe
        return data


@dataclass(frozen=True)
class DiagnosisRecord:
    """
    R: Structured diagnosis (the generation target schema).

    Wire form uses camelCase keys; see to_dict / WIRE_FIELDS.
    """

    category: str
    status_summary: str
    recommended_herbs: List[str]
    benefits: List[str]
    advice: str
    instructions: str
    duration: str
    frequency: str
    precautions: str

    # R: wire key -> attribute name, in schema order
    WIRE_FIELDS = (
        ("category", "category"),
        ("statusSummary", "status_summary"),
        ("recommendedHerbs", "recommended_herbs"),
        ("benefits", "benefits"),
        ("advice", "advice"),
        ("instructions", "instructions"),
        ("duration", "duration"),
        ("frequency", "frequency"),
        ("precautions", "precautions"),
    )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for wire_key, attr in self.WIRE_FIELDS:
            value = getattr(self, attr)
            data[wire_key] = list(value) if isinstance(value, list) else value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "DiagnosisRecord":
        """R: Build from the camelCase wire form (no validation)."""
        return cls(**{attr: data[wire_key] for wire_key, attr in cls.WIRE_FIELDS})


@dataclass(frozen=True)
class LLMUsage:
    """R: Token accounting reported by the generation service."""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass(frozen=True)
class LLMResponse:
    """R: Reply of the generation service."""

    content: str
    model: str
    finish_reason: str
    usage: Optional[LLMUsage] = None


@dataclass(frozen=True)
class ChatMessage:
    """R: One message sent to the generation service."""

    role: Literal["system", "user", "assistant"]
    content: str


@dataclass
class ChainMetadata:
    """
    R: Metadata attached to every chain output.

    Attributes:
        sources: Documents used as context (empty on fallback)
        processing_time_ms: Elapsed time of the whole invocation
        rag_used: Whether the knowledge corpus contributed to the prompt
        llm_response: Raw generation reply (success only)
        error: Cause of the fallback (fallback only)
        rag_details: Retrieval summary (totals, average score, scores, recommendation)
        timings: Per-stage timings in milliseconds
    """

    sources: List[Document] = field(default_factory=list)
    processing_time_ms: int = 0
    rag_used: bool = False
    llm_response: Optional[LLMResponse] = None
    error: Optional[str] = None
    rag_details: Dict[str, Any] = field(default_factory=dict)
    timings: Dict[str, float] = field(default_factory=dict)

    @property
    def llm_usage(self) -> Optional[LLMUsage]:
        return self.llm_response.usage if self.llm_response else None

    @property
    def llm_tokens(self) -> Optional[int]:
        usage = self.llm_usage
        return usage.total_tokens if usage else None


@dataclass
class ChainOutput:
    """R: Result of the diagnosis chain."""

    result: DiagnosisRecord
    metadata: ChainMetadata


@dataclass
class ChatOutput:
    """R: Result of the chat chain (reply used verbatim)."""

    reply: str
    metadata: ChainMetadata


@dataclass(frozen=True)
class Recipe:
    """R: Recipe card handed to the chat UI collaborator."""

    id: str
    name: str
    description: str
    ingredients: List[str]
    benefits: List[str]
    instructions: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "ingredients": list(self.ingredients),
            "benefits": list(self.benefits),
            "instructions": self.instructions,
        }


@dataclass
class DiagnosisHistoryRecord:
    """
    R: Persisted diagnosis (handed to the history store).

    Attributes:
        key: Storage key "diagnosis_{user_id}_{epoch_ms}_{suffix}"
        user_id: Owner of the record
        symptoms: Symptom descriptions of the request
        answers: Answer set of the request
        result: Diagnosis returned to the user
        metadata: timestamp (ISO 8601), version, processing_time_ms, rag_used, ...
    """

    key: str
    user_id: str
    symptoms: List[str]
    answers: Dict[str, bool]
    result: DiagnosisRecord
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def timestamp(self) -> str:
        return str(self.metadata.get("timestamp", ""))
