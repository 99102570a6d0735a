"""Infrastructure services"""

from .errors import get_http_status_code
from .fake_llm_service import FakeLLMService
from .google_llm_service import GoogleLLMService
from .openai_llm_service import OpenAIChatService
from .unconfigured_llm_service import UnconfiguredLLMService

__all__ = [
    "get_http_status_code",
    "FakeLLMService",
    "GoogleLLMService",
    "OpenAIChatService",
    "UnconfiguredLLMService",
]
