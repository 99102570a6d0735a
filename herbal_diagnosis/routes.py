"""
Name: Herbal Diagnosis API Controllers

Responsibilities:
  - Expose HTTP endpoints for diagnosis, chat, history and the questionnaire
  - Delegate business logic to application use cases
  - Validate requests and serialize responses using Pydantic models
  - Wire dependencies via FastAPI DI container

Collaborators:
  - application.use_cases: DiagnoseUseCase, ChatUseCase, GetDiagnosisHistoryUseCase
  - container: Dependency providers for the store and use cases
  - domain.scoring: questionnaire ids

Constraints:
  - Synchronous endpoints (generation is a blocking call; FastAPI runs them in a threadpool)
  - Unknown answer ids are rejected before the pipeline runs

Notes:
  - This module stays thin (controllers only)
  - Limits are read from Settings when a request is validated, not at import
"""

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .application.use_cases import (
    ChatRequestInput,
    ChatUseCase,
    DiagnoseInput,
    DiagnoseUseCase,
    GetDiagnosisHistoryUseCase,
)
from .config import get_settings
from .container import (
    get_chat_use_case,
    get_diagnose_use_case,
    get_history_use_case,
    get_knowledge_store,
)
from .domain.entities import DOCUMENT_TYPE_SYMPTOM, ChainMetadata, DiagnosisRecord
from .domain.scoring import SYMPTOM_CATEGORY_TABLE, is_known_symptom_id
from .error_responses import OPENAPI_ERROR_RESPONSES
from .infrastructure.knowledge import KnowledgeStore

# R: Create API router for diagnosis endpoints
router = APIRouter(responses=OPENAPI_ERROR_RESPONSES)


class DiagnoseReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    symptoms: list[str] = Field(
        ..., min_length=1, description="Free-text symptom descriptions"
    )
    answers: dict[str, bool] = Field(
        default_factory=dict, description="Questionnaire answers (id -> checked)"
    )
    user_id: str | None = Field(
        default=None,
        alias="userId",
        max_length=128,
        description="Owner for history persistence (optional)",
    )

    @field_validator("symptoms")
    @classmethod
    def symptoms_within_limits(cls, v: list[str]) -> list[str]:
        settings = get_settings()
        if len(v) > settings.max_symptoms:
            raise ValueError(f"at most {settings.max_symptoms} symptoms allowed")
        cleaned = [item.strip() for item in v]
        if any(not item for item in cleaned):
            raise ValueError("symptoms must not be blank")
        if any(len(item) > settings.max_symptom_chars for item in cleaned):
            raise ValueError(
                f"each symptom must be at most {settings.max_symptom_chars} chars"
            )
        return cleaned

    @field_validator("answers")
    @classmethod
    def answers_known(cls, v: dict[str, bool]) -> dict[str, bool]:
        unknown = sorted(key for key in v if not is_known_symptom_id(key))
        if unknown:
            raise ValueError(f"unknown answer ids: {', '.join(unknown)}")
        return v

    @field_validator("user_id")
    @classmethod
    def blank_user_is_anonymous(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class DiagnosisPayload(BaseModel):
    """R: Diagnosis record in its camelCase wire form."""

    model_config = ConfigDict(populate_by_name=True)

    category: str
    status_summary: str = Field(alias="statusSummary")
    recommended_herbs: list[str] = Field(alias="recommendedHerbs")
    benefits: list[str]
    advice: str
    instructions: str
    duration: str
    frequency: str
    precautions: str

    def to_record(self) -> DiagnosisRecord:
        return DiagnosisRecord(
            category=self.category,
            status_summary=self.status_summary,
            recommended_herbs=list(self.recommended_herbs),
            benefits=list(self.benefits),
            advice=self.advice,
            instructions=self.instructions,
            duration=self.duration,
            frequency=self.frequency,
            precautions=self.precautions,
        )


class ChatReq(BaseModel):
    message: str = Field(..., min_length=1, description="User question")
    diagnosis: DiagnosisPayload | None = None

    @field_validator("message")
    @classmethod
    def message_within_limits(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message must not be blank")
        limit = get_settings().max_message_chars
        if len(v) > limit:
            raise ValueError(f"message must be at most {limit} chars")
        return v


def _metadata_payload(metadata: ChainMetadata) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "processingTimeMs": metadata.processing_time_ms,
        "ragUsed": metadata.rag_used,
        "sourcesCount": len(metadata.sources),
    }
    if metadata.llm_tokens is not None:
        payload["llmTokens"] = metadata.llm_tokens
    if metadata.error:
        payload["error"] = metadata.error
    return payload


@router.post("/diagnose", tags=["diagnosis"])
def diagnose(
    req: DiagnoseReq,
    use_case: DiagnoseUseCase = Depends(get_diagnose_use_case),
):
    result = use_case.execute(
        DiagnoseInput(symptoms=req.symptoms, answers=req.answers, user_id=req.user_id)
    )
    body: dict[str, Any] = {
        "success": True,
        "diagnosis": result.output.result.to_dict(),
        "recipes": [recipe.to_dict() for recipe in result.recipes],
        "metadata": _metadata_payload(result.output.metadata),
    }
    if result.recommendation is not None:
        body["recommendation"] = result.recommendation
    return body


@router.post("/chat", tags=["chat"])
def chat(
    req: ChatReq,
    use_case: ChatUseCase = Depends(get_chat_use_case),
):
    output = use_case.execute(
        ChatRequestInput(
            message=req.message,
            diagnosis=req.diagnosis.to_record() if req.diagnosis else None,
        )
    )
    metadata: dict[str, Any] = {"processingTimeMs": output.metadata.processing_time_ms}
    if output.metadata.llm_tokens is not None:
        metadata["llmTokens"] = output.metadata.llm_tokens
    if output.metadata.error:
        metadata["error"] = output.metadata.error
    return {"success": True, "response": output.reply, "metadata": metadata}


@router.get("/history/{user_id}", tags=["history"])
def history(
    user_id: str,
    use_case: GetDiagnosisHistoryUseCase = Depends(get_history_use_case),
):
    summaries = use_case.execute(user_id)
    return {
        "success": True,
        "history": [
            {
                "id": summary.id,
                "timestamp": summary.timestamp,
                "category": summary.category,
                "symptoms": summary.symptoms,
                "processingTimeMs": summary.processing_time_ms,
                "ragUsed": summary.rag_used,
            }
            for summary in summaries
        ],
    }


@router.get("/questions", tags=["diagnosis"])
def questions(store: KnowledgeStore = Depends(get_knowledge_store)):
    """
    R: Questionnaire catalog.

    Symptom documents supply the question text; ids missing from the corpus
    are listed with their id as text.
    """
    texts: dict[str, str] = {}
    for document in store.documents():
        if document.type != DOCUMENT_TYPE_SYMPTOM:
            continue
        symptom_id = document.metadata.extra.get("symptom_id")
        if symptom_id:
            texts.setdefault(symptom_id, document.metadata.extra.get("symptom_text", ""))

    return {
        "success": True,
        "questions": [
            {"id": symptom_id, "text": texts.get(symptom_id) or symptom_id, "category": category}
            for symptom_id, category in SYMPTOM_CATEGORY_TABLE.items()
        ],
    }
