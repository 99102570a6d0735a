"""
Name: Diagnose Use Case

Responsibilities:
  - Run the diagnosis chain for one request
  - Build the recipe cards for the chat UI
  - Persist the result to history when a user id is given (best-effort)

Collaborators:
  - application/diagnosis_chain.py: HerbalDiagnosisChain
  - domain.repositories.DiagnosisHistoryRepository
  - application/recipes.py

Constraints:
  - Storage failures never change the diagnosis response
  - No HTTP concerns
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from ...domain.entities import ChainOutput, DiagnosisHistoryRecord, Recipe
from ...domain.repositories import DiagnosisHistoryRepository
from ...logger import logger
from ..diagnosis_chain import HerbalDiagnosisChain
from ..prompt_strategies import ChainInput
from ..recipes import recipes_from_diagnosis

HISTORY_VERSION = "rag_llm_v1"


@dataclass
class DiagnoseInput:
    """
    R: Input data for Diagnose use case.

    Attributes:
        symptoms: Symptom descriptions (validated at the boundary)
        answers: Questionnaire answers (id -> checked)
        user_id: Owner for history persistence (optional)
    """

    symptoms: List[str]
    answers: Dict[str, bool] = field(default_factory=dict)
    user_id: Optional[str] = None


@dataclass
class DiagnoseResult:
    output: ChainOutput
    recipes: List[Recipe]
    history_key: Optional[str] = None

    @property
    def recommendation(self) -> Optional[dict]:
        return self.output.metadata.rag_details.get("recommendation")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DiagnoseUseCase:
    """R: Diagnosis + best-effort history save."""

    def __init__(
        self,
        chain: HerbalDiagnosisChain,
        history_repository: DiagnosisHistoryRepository,
        clock: Callable[[], datetime] = _utc_now,
    ):
        self.chain = chain
        self.history_repository = history_repository
        self.clock = clock

    def execute(self, input_data: DiagnoseInput) -> DiagnoseResult:
        output = self.chain.invoke(
            ChainInput(symptoms=list(input_data.symptoms), answers=dict(input_data.answers))
        )
        result = DiagnoseResult(output=output, recipes=recipes_from_diagnosis(output.result))

        if input_data.user_id:
            result.history_key = self._store(input_data, output)

        return result

    def _store(self, input_data: DiagnoseInput, output: ChainOutput) -> Optional[str]:
        now = self.clock()
        # R: Suffix keeps two saves within the same millisecond apart
        key = (
            f"diagnosis_{input_data.user_id}_{int(now.timestamp() * 1000)}"
            f"_{uuid4().hex[:8]}"
        )
        metadata = output.metadata
        record = DiagnosisHistoryRecord(
            key=key,
            user_id=input_data.user_id,
            symptoms=list(input_data.symptoms),
            answers=dict(input_data.answers),
            result=output.result,
            metadata={
                "timestamp": now.isoformat(timespec="milliseconds"),
                "version": HISTORY_VERSION,
                "processing_time_ms": metadata.processing_time_ms,
                "rag_used": metadata.rag_used,
                "sources_count": len(metadata.sources),
                "llm_tokens": metadata.llm_tokens,
                "error": metadata.error,
            },
        )
        try:
            self.history_repository.save(record)
        except Exception as exc:
            # R: Best-effort; the diagnosis is already computed
            logger.warning(
                "Failed to store diagnosis history",
                extra={"history_key": key, "error_type": type(exc).__name__},
                exc_info=True,
            )
            return None

        logger.info("Stored diagnosis history", extra={"history_key": key})
        return key
