"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Keep the scoring thresholds and generation budget as named values

Collaborators:
  - main.py: validates settings in lifespan
  - container.py: reads settings to wire the generation service and chains
  - routes.py: reads settings for request validation limits

Constraints:
  - No business logic, pure configuration
  - Provider credentials are only required for the provider in use

Notes:
  - Singleton via lru_cache
  - LLM_PROVIDER=none keeps the service running in deterministic fallback mode
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SUPPORTED_LLM_PROVIDERS = frozenset({"google", "openai", "fake", "none"})

# R: Default model per provider (overridable via LLM_MODEL)
DEFAULT_MODELS = {
    "google": "gemini-1.5-flash",
    "openai": "gpt-3.5-turbo",
    "fake": "fake-llm-v1",
    "none": "unconfigured",
}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/production/test)
        log_level: Root log level (default: INFO)
        log_json: Emit JSON logs (default: True)
        llm_provider: google | openai | fake | none (default: google)
        google_api_key: Google Gemini API key
        openai_api_key: OpenAI-compatible API key
        openai_base_url: Base URL of the OpenAI-compatible API
        llm_model: Model override (default depends on provider)
        llm_temperature: Sampling temperature (default: 0.7)
        llm_max_output_tokens: Max output tokens (default: 1000)
        llm_timeout_seconds: Timeout of the generation call (default: 30)
        rag_enabled: Use the knowledge corpus in the diagnosis prompt (default: True)
        retrieval_top_k: Documents retrieved for a diagnosis (default: 5)
        context_top_k: Documents retrieved for the simple context variant (default: 3)
        category_candidate_k: Candidate pool for category filtering (default: 10)
        prompt_version: Prompt template version (default: v1)
        history_limit: Max history entries returned per user (default: 10)
        max_symptoms: Max symptoms per request (default: 50)
        max_symptom_chars: Max length of one symptom description (default: 200)
        max_message_chars: Max chat message length (default: 2_000)
        insufficient_data_max_total: Totals at or below this need more answers (default: 3)
        single_recipe_min_gap: Gap that yields a single recipe (default: 2)
        dual_recipe_max_gap: Gap that yields a dual recipe (default: 1)
    """

    # Environment
    app_env: str = "development"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # Generation service
    llm_provider: str = "google"
    google_api_key: str = ""
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    llm_model: str = ""
    llm_temperature: float = 0.7
    llm_max_output_tokens: int = 1000
    llm_timeout_seconds: float = 30.0

    # Retrieval
    rag_enabled: bool = True
    retrieval_top_k: int = 5
    context_top_k: int = 3
    category_candidate_k: int = 10
    prompt_version: str = "v1"

    # History
    history_limit: int = 10

    # API limits
    max_symptoms: int = 50
    max_symptom_chars: int = 200
    max_message_chars: int = 2_000

    # Scoring thresholds
    insufficient_data_max_total: int = 3
    single_recipe_min_gap: int = 2
    dual_recipe_max_gap: int = 1

    @field_validator("llm_provider")
    @classmethod
    def llm_provider_supported(cls, v: str) -> str:
        provider = (v or "google").strip().lower()
        if provider not in SUPPORTED_LLM_PROVIDERS:
            raise ValueError(
                "llm_provider must be one of: "
                + ", ".join(sorted(SUPPORTED_LLM_PROVIDERS))
            )
        return provider

    @field_validator("llm_temperature")
    @classmethod
    def llm_temperature_in_range(cls, v: float) -> float:
        if v < 0 or v > 2:
            raise ValueError("llm_temperature must be between 0 and 2")
        return v

    @field_validator(
        "llm_max_output_tokens",
        "retrieval_top_k",
        "context_top_k",
        "history_limit",
        "max_symptoms",
        "max_symptom_chars",
        "max_message_chars",
    )
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("value must be greater than 0")
        return v

    @field_validator("llm_timeout_seconds")
    @classmethod
    def timeout_must_be_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("llm_timeout_seconds must be greater than 0")
        return v

    @field_validator("category_candidate_k")
    @classmethod
    def candidate_pool_at_least_ten(cls, v: int) -> int:
        if v < 10:
            raise ValueError("category_candidate_k must be >= 10")
        return v

    @model_validator(mode="after")
    def validate_provider_credentials(self):
        if self.llm_provider == "google" and not self.google_api_key:
            raise ValueError(
                "GOOGLE_API_KEY is required when LLM_PROVIDER=google "
                "(use LLM_PROVIDER=fake or none to run without it)"
            )
        if self.llm_provider == "openai" and not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required when LLM_PROVIDER=openai")
        return self

    @model_validator(mode="after")
    def validate_thresholds(self):
        if self.insufficient_data_max_total < 0:
            raise ValueError("insufficient_data_max_total must be >= 0")
        if self.dual_recipe_max_gap >= self.single_recipe_min_gap:
            raise ValueError(
                f"dual_recipe_max_gap ({self.dual_recipe_max_gap}) must be less than "
                f"single_recipe_min_gap ({self.single_recipe_min_gap})"
            )
        return self

    def resolved_llm_model(self) -> str:
        """Model name to send to the provider."""
        return self.llm_model.strip() or DEFAULT_MODELS[self.llm_provider]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If required env vars are missing or invalid
    """
    return Settings()
