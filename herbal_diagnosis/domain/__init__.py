"""Domain layer exports"""

from .entities import (
    ChainMetadata,
    ChainOutput,
    ChatMessage,
    ChatOutput,
    DiagnosisHistoryRecord,
    DiagnosisRecord,
    Document,
    DocumentMetadata,
    LLMResponse,
    LLMUsage,
    Recipe,
    Recommendation,
    RetrievalResult,
)
from .repositories import DiagnosisHistoryRepository
from .services import GenerationService, KnowledgeSource

__all__ = [
    "ChainMetadata",
    "ChainOutput",
    "ChatMessage",
    "ChatOutput",
    "DiagnosisHistoryRecord",
    "DiagnosisRecord",
    "Document",
    "DocumentMetadata",
    "LLMResponse",
    "LLMUsage",
    "Recipe",
    "Recommendation",
    "RetrievalResult",
    "DiagnosisHistoryRepository",
    "GenerationService",
    "KnowledgeSource",
]
