"""
Name: Herbal Chat Chain Unit Tests

Responsibilities:
  - Verify persona prompt, optional diagnosis context and verbatim reply
  - Verify apology on any failure
"""

import pytest

from herbal_diagnosis.application.chat_chain import (
    CHAT_APOLOGY,
    ChatInput,
    HerbalChatChain,
    diagnosis_context,
)
from herbal_diagnosis.domain.entities import LLMResponse
from herbal_diagnosis.exceptions import GenerationServiceError
from herbal_diagnosis.infrastructure.prompts import PromptLoader


@pytest.fixture
def chat_chain(mock_llm) -> HerbalChatChain:
    mock_llm.invoke.return_value = LLMResponse(
        content="Try chamomile before bed.", model="mock-llm", finish_reason="stop"
    )
    return HerbalChatChain(mock_llm, PromptLoader())


@pytest.mark.unit
class TestHerbalChatChain:
    def test_reply_is_returned_verbatim(self, chat_chain):
        output = chat_chain.invoke(ChatInput(message="How do I sleep better?"))

        assert output.reply == "Try chamomile before bed."
        assert output.metadata.error is None
        assert output.metadata.rag_used is False

    def test_prompt_without_diagnosis(self, chat_chain, mock_llm):
        chat_chain.invoke(ChatInput(message="Is mugwort safe?"))

        system, user = mock_llm.invoke.call_args.args[0]
        assert system.role == "system"
        assert "health advisor" in system.content
        assert user.content.startswith("User question: Is mugwort safe?")

    def test_prompt_with_diagnosis(self, chat_chain, mock_llm, sample_record):
        chat_chain.invoke(ChatInput(message="How long?", diagnosis=sample_record))

        user = mock_llm.invoke.call_args.args[0][1]
        assert user.content.startswith(
            "Current user condition: Detox Steam\n"
            "Recommended herbs: mugwort, rosemary\n\n"
            "User question: How long?"
        )

    def test_failure_returns_apology(self, chat_chain, mock_llm):
        mock_llm.invoke.side_effect = GenerationServiceError("down", status_code=500)

        output = chat_chain.invoke(ChatInput(message="Hello?"))

        assert output.reply == CHAT_APOLOGY
        assert output.metadata.error == "down (status 500)"


@pytest.mark.unit
def test_diagnosis_context_empty_without_diagnosis():
    assert diagnosis_context(None) == ""
