"""
Name: Fake Generation Service (Deterministic)

Responsibilities:
  - Provide deterministic replies for testing/CI and local runs
  - Return a schema-valid diagnosis JSON when the prompt asks for JSON
  - Avoid external dependencies (no API calls)
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import List

from ...domain.entities import ChatMessage, LLMResponse, LLMUsage
from ...logger import logger

_RECIPE_LINE = re.compile(r"^Recommended recipe: (?P<recipe>.+)$", re.MULTILINE)


def _digest(messages: List[ChatMessage]) -> str:
    joined = "|".join(f"{m.role}:{m.content}" for m in messages)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:16]


def _build_diagnosis(system_prompt: str, digest: str) -> str:
    match = _RECIPE_LINE.search(system_prompt)
    category = match.group("recipe").strip() if match else "General Wellness"
    return json.dumps(
        {
            "category": category,
            "statusSummary": f"Simulated assessment ({digest}).",
            "recommendedHerbs": ["mugwort", "chamomile", "rosemary"],
            "benefits": ["relaxation", "better circulation"],
            "advice": "Keep a regular daily rhythm and rest well.",
            "instructions": "Steam for 15-20 minutes in a warm, quiet room.",
            "duration": "2-3 weeks",
            "frequency": "2-3 times a week",
            "precautions": "Consult a doctor during pregnancy or ongoing treatment.",
        },
        ensure_ascii=False,
    )


class FakeLLMService:
    """R: Deterministic GenerationService for tests/CI."""

    MODEL_ID = "fake-llm-v1"

    def __init__(self) -> None:
        logger.info("FakeLLMService initialized")

    @property
    def model_id(self) -> str:
        return self.MODEL_ID

    def invoke(
        self,
        messages: List[ChatMessage],
        *,
        temperature: float,
        max_output_tokens: int,
    ) -> LLMResponse:
        digest = _digest(messages)
        system_prompt = "\n".join(m.content for m in messages if m.role == "system")

        if "JSON" in system_prompt:
            content = _build_diagnosis(system_prompt, digest)
        else:
            question = messages[-1].content if messages else ""
            content = f"Simulated advice ({digest}) for: {question.strip()[:80]}"

        prompt_tokens = sum(len(m.content.split()) for m in messages)
        completion_tokens = len(content.split())
        return LLMResponse(
            content=content,
            model=self.MODEL_ID,
            finish_reason="stop",
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=prompt_tokens + completion_tokens,
            ),
        )
