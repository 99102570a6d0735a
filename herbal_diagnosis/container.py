"""
Name: Dependency Injection Container

Responsibilities:
  - Wire up dependencies for the application
  - Provide factory functions for use cases
  - Manage one instance per process of the store, provider and chains
  - Enable dependency injection in FastAPI endpoints

Collaborators:
  - infrastructure.knowledge: KnowledgeStore
  - infrastructure.services: Google / OpenAI / Fake / Unconfigured providers
  - infrastructure.repositories: InMemoryDiagnosisHistoryRepository
  - application: pipeline, chains, use cases
  - FastAPI Depends(): Dependency injection mechanism

Constraints:
  - Manual DI (no library like dependency-injector)
  - Singletons via functools.lru_cache

Notes:
  - This is the composition root (where dependencies are wired)
  - Tests override providers via app.dependency_overrides or cache_clear()
"""

from functools import lru_cache

from .application.chat_chain import HerbalChatChain
from .application.diagnosis_chain import GenerationConfig, HerbalDiagnosisChain
from .application.rag_pipeline import HerbalRAGPipeline
from .application.retriever import KeywordRetriever
from .application.use_cases import (
    ChatUseCase,
    DiagnoseUseCase,
    GetDiagnosisHistoryUseCase,
)
from .config import get_settings
from .domain.repositories import DiagnosisHistoryRepository
from .domain.scoring import ScoringThresholds
from .domain.services import GenerationService
from .infrastructure.knowledge import KnowledgeStore
from .infrastructure.prompts import PromptLoader, get_prompt_loader
from .infrastructure.repositories import InMemoryDiagnosisHistoryRepository
from .infrastructure.services import (
    FakeLLMService,
    GoogleLLMService,
    OpenAIChatService,
    UnconfiguredLLMService,
)


@lru_cache
def get_knowledge_store() -> KnowledgeStore:
    """R: Get singleton knowledge store (loaded lazily, once)."""
    return KnowledgeStore()


@lru_cache
def get_history_repository() -> DiagnosisHistoryRepository:
    """
    R: Get singleton history repository.

    Returns:
        In-memory implementation of DiagnosisHistoryRepository
    """
    return InMemoryDiagnosisHistoryRepository()


@lru_cache
def get_llm_service() -> GenerationService:
    """
    R: Get singleton generation service for the configured provider.
    """
    settings = get_settings()
    provider = settings.llm_provider
    model_id = settings.resolved_llm_model()

    if provider == "fake":
        return FakeLLMService()
    if provider == "none":
        return UnconfiguredLLMService()
    if provider == "openai":
        return OpenAIChatService(
            api_key=settings.openai_api_key,
            model_id=model_id,
            base_url=settings.openai_base_url,
            timeout_seconds=settings.llm_timeout_seconds,
        )
    return GoogleLLMService(
        api_key=settings.google_api_key,
        model_id=model_id,
        timeout_seconds=settings.llm_timeout_seconds,
    )


def get_generation_config() -> GenerationConfig:
    settings = get_settings()
    return GenerationConfig(
        temperature=settings.llm_temperature,
        max_output_tokens=settings.llm_max_output_tokens,
    )


def get_scoring_thresholds() -> ScoringThresholds:
    settings = get_settings()
    return ScoringThresholds(
        insufficient_data_max_total=settings.insufficient_data_max_total,
        single_recipe_min_gap=settings.single_recipe_min_gap,
        dual_recipe_max_gap=settings.dual_recipe_max_gap,
    )


@lru_cache
def get_rag_pipeline() -> HerbalRAGPipeline:
    settings = get_settings()
    prompt_loader: PromptLoader = get_prompt_loader()
    return HerbalRAGPipeline(
        retriever=KeywordRetriever(
            get_knowledge_store(),
            category_candidate_k=settings.category_candidate_k,
        ),
        prompt_loader=prompt_loader,
        thresholds=get_scoring_thresholds(),
        retrieval_top_k=settings.retrieval_top_k,
        context_top_k=settings.context_top_k,
    )


@lru_cache
def get_diagnosis_chain() -> HerbalDiagnosisChain:
    """R: RAG_ENABLED selects the augmented or the direct prompt strategy."""
    settings = get_settings()
    if settings.rag_enabled:
        return HerbalDiagnosisChain.with_rag(
            get_llm_service(), get_rag_pipeline(), get_generation_config()
        )
    return HerbalDiagnosisChain.direct(
        get_llm_service(), get_prompt_loader(), get_generation_config()
    )


@lru_cache
def get_chat_chain() -> HerbalChatChain:
    return HerbalChatChain(
        get_llm_service(), get_prompt_loader(), get_generation_config()
    )


def get_diagnose_use_case() -> DiagnoseUseCase:
    return DiagnoseUseCase(
        chain=get_diagnosis_chain(),
        history_repository=get_history_repository(),
    )


def get_chat_use_case() -> ChatUseCase:
    return ChatUseCase(chain=get_chat_chain())


def get_history_use_case() -> GetDiagnosisHistoryUseCase:
    return GetDiagnosisHistoryUseCase(
        repository=get_history_repository(),
        limit=get_settings().history_limit,
    )
