"""
Name: Generation Service Adapter Unit Tests

Responsibilities:
  - OpenAI-compatible adapter over httpx (MockTransport, no network)
  - Google adapter with a mocked genai client
  - Fake and unconfigured services
  - Status code extraction from SDK/httpx exceptions
"""

import json
from types import SimpleNamespace
from unittest.mock import Mock

import httpx
import pytest

from herbal_diagnosis.application.response_parser import parse_diagnosis_record
from herbal_diagnosis.domain.entities import ChatMessage
from herbal_diagnosis.exceptions import GenerationServiceError
from herbal_diagnosis.infrastructure.services import (
    FakeLLMService,
    GoogleLLMService,
    OpenAIChatService,
    UnconfiguredLLMService,
    get_http_status_code,
)

MESSAGES = [
    ChatMessage(role="system", content="Be brief."),
    ChatMessage(role="user", content="Hello"),
]


def _openai(handler) -> OpenAIChatService:
    return OpenAIChatService(
        "sk-test",
        model_id="gpt-test",
        base_url="https://llm.example.com/v1/",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


@pytest.mark.unit
class TestOpenAIChatService:
    def test_success(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(
                200,
                json={
                    "model": "gpt-test-0613",
                    "choices": [
                        {"message": {"content": "Hi there"}, "finish_reason": "stop"}
                    ],
                    "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
                },
            )

        response = _openai(handler).invoke(MESSAGES, temperature=0.3, max_output_tokens=64)

        assert response.content == "Hi there"
        assert response.model == "gpt-test-0613"
        assert response.finish_reason == "stop"
        assert response.usage.total_tokens == 7
        assert seen["url"] == "https://llm.example.com/v1/chat/completions"
        assert seen["auth"] == "Bearer sk-test"
        assert seen["body"] == {
            "model": "gpt-test",
            "messages": [
                {"role": "system", "content": "Be brief."},
                {"role": "user", "content": "Hello"},
            ],
            "temperature": 0.3,
            "max_tokens": 64,
        }

    def test_non_success_status_raises_with_code(self):
        def handler(request):
            return httpx.Response(429, json={"error": {"message": "Rate limit reached"}})

        with pytest.raises(GenerationServiceError) as exc_info:
            _openai(handler).invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

        assert exc_info.value.status_code == 429
        assert "Rate limit reached" in str(exc_info.value)

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(GenerationServiceError) as exc_info:
            _openai(handler).invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.original_error, httpx.ConnectTimeout)

    @pytest.mark.parametrize(
        "payload",
        [{"choices": []}, {"choices": [{"message": {"content": "  "}}]}, {"unexpected": 1}],
    )
    def test_unusable_payload_raises(self, payload):
        def handler(request):
            return httpx.Response(200, json=payload)

        with pytest.raises(GenerationServiceError):
            _openai(handler).invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

    def test_missing_api_key_rejected(self):
        with pytest.raises(GenerationServiceError, match="OPENAI_API_KEY"):
            OpenAIChatService("  ")


@pytest.mark.unit
class TestGoogleLLMService:
    def _service(self, client) -> GoogleLLMService:
        return GoogleLLMService("test-key", model_id="gemini-test", client=client)

    def test_success_maps_messages_and_usage(self):
        client = Mock()
        client.models.generate_content.return_value = SimpleNamespace(
            text=" Hello from Gemini ",
            candidates=[SimpleNamespace(finish_reason=SimpleNamespace(value="STOP"))],
            usage_metadata=SimpleNamespace(
                prompt_token_count=4, candidates_token_count=3, total_token_count=7
            ),
        )
        service = self._service(client)

        response = service.invoke(
            MESSAGES + [ChatMessage(role="assistant", content="Earlier reply")],
            temperature=0.5,
            max_output_tokens=100,
        )

        assert response.content == "Hello from Gemini"
        assert response.finish_reason == "stop"
        assert response.usage.total_tokens == 7
        assert service.model_id == "gemini-test"

        kwargs = client.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-test"
        assert [c.role for c in kwargs["contents"]] == ["user", "model"]
        assert "Be brief." in str(kwargs["config"].system_instruction)
        assert kwargs["config"].temperature == 0.5
        assert kwargs["config"].max_output_tokens == 100

    def test_sdk_error_is_wrapped_with_status(self):
        error = RuntimeError("quota")
        error.code = 429
        client = Mock()
        client.models.generate_content.side_effect = error

        with pytest.raises(GenerationServiceError) as exc_info:
            self._service(client).invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

        assert exc_info.value.status_code == 429
        assert exc_info.value.original_error is error

    def test_empty_reply_raises(self):
        client = Mock()
        client.models.generate_content.return_value = SimpleNamespace(
            text="", candidates=[], usage_metadata=None
        )

        with pytest.raises(GenerationServiceError, match="empty"):
            self._service(client).invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

    def test_missing_api_key_rejected(self):
        with pytest.raises(GenerationServiceError, match="GOOGLE_API_KEY"):
            GoogleLLMService("")


@pytest.mark.unit
class TestFakeLLMService:
    def test_diagnosis_prompt_gets_valid_record(self):
        messages = [
            ChatMessage(
                role="system",
                content="Knowledge base:\n[DIAGNOSIS]\nRecommended recipe: Detox Steam\n"
                "Reply with a single JSON object",
            ),
            ChatMessage(role="user", content="swelling"),
        ]

        response = FakeLLMService().invoke(messages, temperature=0.7, max_output_tokens=10)

        record = parse_diagnosis_record(response.content)
        assert record.category == "Detox Steam"
        assert response.model == "fake-llm-v1"
        assert response.usage.total_tokens > 0

    def test_is_deterministic(self):
        service = FakeLLMService()

        first = service.invoke(MESSAGES, temperature=0.7, max_output_tokens=10)
        second = service.invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

        assert first == second
        assert first.content.startswith("Simulated advice (")


@pytest.mark.unit
def test_unconfigured_service_always_fails():
    with pytest.raises(GenerationServiceError) as exc_info:
        UnconfiguredLLMService().invoke(MESSAGES, temperature=0.7, max_output_tokens=10)

    assert exc_info.value.status_code == 503


@pytest.mark.unit
class TestGetHttpStatusCode:
    def test_sdk_code_attribute(self):
        error = Exception("x")
        error.code = 503
        assert get_http_status_code(error) == 503

    def test_grpc_style_code_is_ignored(self):
        error = Exception("x")
        error.code = 8
        assert get_http_status_code(error) is None

    def test_httpx_status_error(self):
        request = httpx.Request("POST", "https://llm.example.com")
        response = httpx.Response(502, request=request)
        error = httpx.HTTPStatusError("bad gateway", request=request, response=response)

        assert get_http_status_code(error) == 502

    def test_status_code_attribute(self):
        assert get_http_status_code(GenerationServiceError("x", status_code=418)) == 418

    def test_unknown(self):
        assert get_http_status_code(ValueError("x")) is None
