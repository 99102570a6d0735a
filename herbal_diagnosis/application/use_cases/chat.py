"""
Name: Chat Use Case

Responsibilities:
  - Answer a follow-up question through the chat chain
"""

from dataclasses import dataclass
from typing import Optional

from ...domain.entities import ChatOutput, DiagnosisRecord
from ..chat_chain import ChatInput, HerbalChatChain


@dataclass
class ChatRequestInput:
    message: str
    diagnosis: Optional[DiagnosisRecord] = None


class ChatUseCase:
    """R: Thin wrapper over HerbalChatChain."""

    def __init__(self, chain: HerbalChatChain):
        self.chain = chain

    def execute(self, input_data: ChatRequestInput) -> ChatOutput:
        return self.chain.invoke(
            ChatInput(message=input_data.message, diagnosis=input_data.diagnosis)
        )
