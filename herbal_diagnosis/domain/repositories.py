"""
Name: Domain Repository Interfaces

Responsibilities:
  - Define the contract for diagnosis history persistence
  - Enable dependency inversion (use cases don't depend on a storage engine)

Collaborators:
  - domain.entities: DiagnosisHistoryRecord
  - Implementations in infrastructure.repositories

Constraints:
  - Pure interfaces (Protocol), no implementation

Notes:
  - Keys follow "diagnosis_{user_id}_{epoch_ms}_{suffix}"; listing matches by owner
"""

from typing import List, Protocol

from .entities import DiagnosisHistoryRecord


class DiagnosisHistoryRepository(Protocol):
    """
    R: Interface for diagnosis history storage.

    Implementations must provide:
      - Keyed save (last write wins for the same key)
      - Per-user listing, newest first, capped
    """

    def save(self, record: DiagnosisHistoryRecord) -> None:
        """
        R: Persist a diagnosis record under record.key.

        Raises:
            HistoryStorageError: storage unavailable
        """
        ...

    def list_recent(self, user_id: str, limit: int = 10) -> List[DiagnosisHistoryRecord]:
        """
        R: Records of a user sorted by timestamp descending, at most `limit`.
        """
        ...
