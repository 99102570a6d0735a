"""Application use cases"""

from .chat import ChatRequestInput, ChatUseCase
from .diagnose import DiagnoseInput, DiagnoseResult, DiagnoseUseCase
from .get_history import DiagnosisSummary, GetDiagnosisHistoryUseCase

__all__ = [
    "ChatRequestInput",
    "ChatUseCase",
    "DiagnoseInput",
    "DiagnoseResult",
    "DiagnoseUseCase",
    "DiagnosisSummary",
    "GetDiagnosisHistoryUseCase",
]
