"""
Coaching Advisor - Optional creative step after a deterministic verdict.

The advisor may only add suggestions. It never runs when the pre-check
rejected the proposal, and its output never changes the decision.

Implementations:
- GeminiCoachingAdvisor: google-genai in JSON mode
- MockCoachingAdvisor: tests (records call_count / last_request)
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from volume_governor.config import MODEL_ADVISOR

logger = logging.getLogger(__name__)


ADVISOR_SYSTEM_PROMPT = """
You are a bodybuilding coach reviewing a workout modification that has
already been checked against hard training limits. Suggest at most two short,
practical adjustments (under 30 words each). Do not change the decision.
Respond as JSON: {"suggestions": ["..."]}
"""


class CoachingAdvisor(ABC):
    """Optional suggestion source for validators."""

    @abstractmethod
    def suggest(self, request: Dict[str, Any]) -> List[str]:
        """
        Return extra suggestions for an allowed verdict.

        Args:
            request: Proposal summary, decision and reasons
        """
        pass


class GeminiCoachingAdvisor(CoachingAdvisor):

    def __init__(self, model_name: str = MODEL_ADVISOR, temperature: float = 0.3):
        self.model_name = model_name
        self.temperature = temperature

    def suggest(self, request: Dict[str, Any]) -> List[str]:
        from volume_governor.llm import call_json

        data = call_json(
            self.model_name,
            ADVISOR_SYSTEM_PROMPT,
            json.dumps(request, indent=2, default=str),
            temperature=self.temperature,
            required_keys=["suggestions"],
        )
        suggestions = data.get("suggestions") or []
        return [str(s) for s in suggestions if s][:2]


class MockCoachingAdvisor(CoachingAdvisor):

    def __init__(self, suggestions: Optional[List[str]] = None):
        self.suggestions = suggestions if suggestions is not None else ["Keep form strict on every set"]
        self.call_count = 0
        self.last_request: Optional[Dict[str, Any]] = None

    def suggest(self, request: Dict[str, Any]) -> List[str]:
        self.call_count += 1
        self.last_request = request
        return list(self.suggestions)


def get_coaching_advisor(use_mock: bool = False) -> CoachingAdvisor:
    """Factory: MockCoachingAdvisor when use_mock or USE_MOCK_LLM=true."""
    if use_mock or os.environ.get("USE_MOCK_LLM", "").lower() == "true":
        logger.info("Using MockCoachingAdvisor")
        return MockCoachingAdvisor()
    logger.info("Using GeminiCoachingAdvisor")
    return GeminiCoachingAdvisor()


__all__ = [
    "CoachingAdvisor",
    "GeminiCoachingAdvisor",
    "MockCoachingAdvisor",
    "get_coaching_advisor",
]
