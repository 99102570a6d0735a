"""
Name: In-Memory Diagnosis History Repository

Responsibilities:
  - Store diagnosis records in memory, keyed by record.key
  - List a user's records newest first, capped
"""

from threading import Lock
from typing import Dict, List

from ...domain.entities import DiagnosisHistoryRecord
from ...domain.repositories import DiagnosisHistoryRepository


def history_key_prefix(user_id: str) -> str:
    return f"diagnosis_{user_id}_"


class InMemoryDiagnosisHistoryRepository(DiagnosisHistoryRepository):
    """
    R: Thread-safe in-memory history repository.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._records: Dict[str, DiagnosisHistoryRecord] = {}

    def save(self, record: DiagnosisHistoryRecord) -> None:
        with self._lock:
            self._records[record.key] = record

    def list_recent(self, user_id: str, limit: int = 10) -> List[DiagnosisHistoryRecord]:
        prefix = history_key_prefix(user_id)
        with self._lock:
            # R: Ids may themselves contain "_", so the prefix alone is not enough
            matches = [
                record
                for key, record in self._records.items()
                if key.startswith(prefix) and record.user_id == user_id
            ]
        # R: ISO 8601 UTC timestamps sort lexicographically
        matches.sort(key=lambda record: record.timestamp, reverse=True)
        if limit <= 0:
            return []
        return matches[:limit]
