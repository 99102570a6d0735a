"""
Name: Pytest Configuration and Shared Fixtures

Responsibilities:
  - Configure test environment (fake provider, no .env file)
  - Provide reusable domain fixtures and mocked generation services
  - Reset cached singletons between tests

Collaborators:
  - pytest: Test framework
  - unittest.mock: Mocking library
  - herbal_diagnosis.domain: Domain entities and protocols

Notes:
  - Environment defaults are set BEFORE the package reads Settings
  - Fixtures are auto-discovered by pytest
"""

import json
import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LLM_PROVIDER", "fake")
os.environ.setdefault("LOG_JSON", "true")

from herbal_diagnosis import config as app_config  # noqa: E402

app_config.Settings.model_config["env_file"] = None

from herbal_diagnosis import container  # noqa: E402
from herbal_diagnosis.domain.entities import (  # noqa: E402
    DiagnosisRecord,
    Document,
    DocumentMetadata,
    LLMResponse,
    LLMUsage,
)
from herbal_diagnosis.domain.services import GenerationService  # noqa: E402
from herbal_diagnosis.infrastructure.prompts import get_prompt_loader  # noqa: E402


def pytest_configure(config) -> None:
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )


_CACHED_FACTORIES = (
    app_config.get_settings,
    get_prompt_loader,
    container.get_knowledge_store,
    container.get_history_repository,
    container.get_llm_service,
    container.get_rag_pipeline,
    container.get_diagnosis_chain,
    container.get_chat_chain,
)


@pytest.fixture(autouse=True)
def reset_singletons():
    """R: Every test starts with fresh settings and service handles."""
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()
    yield
    for factory in _CACHED_FACTORIES:
        factory.cache_clear()


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def sample_record() -> DiagnosisRecord:
    """R: A complete, valid diagnosis record."""
    return DiagnosisRecord(
        category="Detox Steam",
        status_summary="Water metabolism is sluggish.",
        recommended_herbs=["mugwort", "rosemary"],
        benefits=["less swelling", "lighter body"],
        advice="Cut down on cold drinks.",
        instructions="Steam for 15 minutes.",
        duration="3 weeks",
        frequency="twice a week",
        precautions="Avoid during pregnancy.",
    )


@pytest.fixture
def sample_record_json(sample_record: DiagnosisRecord) -> str:
    """R: The sample record in its camelCase wire form."""
    return json.dumps(sample_record.to_dict())


@pytest.fixture
def make_document():
    """R: Factory for small corpus documents."""

    def _make(doc_id: str, content: str, **metadata) -> Document:
        return Document(id=doc_id, content=content, metadata=DocumentMetadata(**metadata))

    return _make


# ============================================================================
# Mock Service Fixtures
# ============================================================================


@pytest.fixture
def mock_llm(sample_record_json: str) -> Mock:
    """
    R: Create a mock GenerationService.

    Pre-configured behaviors:
    - invoke() returns the sample record JSON with 30 total tokens
    - Can be overridden with return_value or side_effect in tests
    """
    mock = Mock(spec=GenerationService)
    mock.model_id = "mock-llm"
    mock.invoke.return_value = LLMResponse(
        content=sample_record_json,
        model="mock-llm",
        finish_reason="stop",
        usage=LLMUsage(prompt_tokens=10, completion_tokens=20, total_tokens=30),
    )
    return mock
