"""
Name: Get Diagnosis History Use Case

Responsibilities:
  - List a user's most recent diagnoses as summaries

Collaborators:
  - domain.repositories.DiagnosisHistoryRepository
"""

from dataclasses import dataclass
from typing import List, Optional

from ...domain.repositories import DiagnosisHistoryRepository
from ...exceptions import HistoryStorageError, InvalidInputError
from ...logger import logger


@dataclass(frozen=True)
class DiagnosisSummary:
    id: str
    timestamp: str
    category: str
    symptoms: List[str]
    processing_time_ms: Optional[int]
    rag_used: Optional[bool]


class GetDiagnosisHistoryUseCase:
    """R: Newest-first history summaries of one user."""

    def __init__(self, repository: DiagnosisHistoryRepository, limit: int = 10):
        self.repository = repository
        self.limit = limit

    def execute(self, user_id: str) -> List[DiagnosisSummary]:
        """
        Raises:
            InvalidInputError: blank user id
            HistoryStorageError: storage failure
        """
        if not (user_id or "").strip():
            raise InvalidInputError("User ID required")

        try:
            records = self.repository.list_recent(user_id, limit=self.limit)
        except HistoryStorageError:
            raise
        except Exception as exc:
            logger.error(
                "History retrieval failed",
                extra={"error_type": type(exc).__name__},
                exc_info=True,
            )
            raise HistoryStorageError(
                "Failed to retrieve history", original_error=exc
            ) from exc

        return [
            DiagnosisSummary(
                id=record.key,
                timestamp=record.timestamp,
                category=record.result.category,
                symptoms=list(record.symptoms),
                processing_time_ms=record.metadata.get("processing_time_ms"),
                rag_used=record.metadata.get("rag_used"),
            )
            for record in records
        ]
