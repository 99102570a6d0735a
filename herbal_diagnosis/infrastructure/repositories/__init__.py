"""Infrastructure repositories"""

from .in_memory_history_repo import InMemoryDiagnosisHistoryRepository

__all__ = ["InMemoryDiagnosisHistoryRepository"]
