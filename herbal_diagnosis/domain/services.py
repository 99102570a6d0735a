"""
Name: Domain Service Interfaces

Responsibilities:
  - Define the contract of the external text-generation service
  - Define the contract of a knowledge corpus source
  - Enable dependency inversion (chains don't depend on any provider)

Collaborators:
  - Implementations in infrastructure.services and infrastructure.knowledge

Constraints:
  - Pure interfaces (Protocol), no implementation
  - Must not leak provider-specific details

Notes:
  - Using typing.Protocol for structural subtyping
  - Failures surface as GenerationServiceError / KnowledgeSourceError
"""

from typing import List, Protocol

from .entities import ChatMessage, Document, LLMResponse


class GenerationService(Protocol):
    """
    R: Interface for chat-style text generation.

    Implementations must provide:
      - A single synchronous call with a bounded timeout
      - Token usage when the provider reports it
      - GenerationServiceError (with status_code when known) on any failure
    """

    @property
    def model_id(self) -> str:
        """R: Model identifier sent to the provider."""
        ...

    def invoke(
        self,
        messages: List[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> LLMResponse:
        """
        R: Generate a reply for the given messages.

        Args:
            messages: Ordered system/user/assistant messages
            temperature: Sampling temperature
            max_output_tokens: Output budget

        Returns:
            LLMResponse with content, model, finish reason and usage

        Raises:
            GenerationServiceError: timeout, connection error, non-2xx, empty reply
        """
        ...


class KnowledgeSource(Protocol):
    """R: One loadable slice of the knowledge corpus."""

    name: str

    def load(self) -> List[Document]:
        """
        R: Load all documents of this source.

        Raises:
            KnowledgeSourceError: source missing or malformed
        """
        ...
