"""
Exercise Collaborator - Generative exercise selection backends.

The collaborator receives a structured request (muscle targets, constraint
set, user context) and returns {"exercises": [...]}. Its output is untrusted:
muscle labels are normalized by the orchestrator before use.

Implementations:
- GeminiExerciseCollaborator: google-genai in JSON mode
- MockExerciseCollaborator: tests and dry runs
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Union

from volume_governor.config import MODEL_SELECTION

logger = logging.getLogger(__name__)


SELECTION_SYSTEM_PROMPT = """
You are an exercise selector for a bodybuilding coaching app.

Priority order (never violate a higher priority for a lower one):
1. Methodology limits: max_sets_per_exercise, max_total_sets_per_workout
2. Muscle directives: muscles with exercise_count 0 get no exercises;
   prefer_machines muscles get machine or cable movements
3. Fatigue: respect rir_floor, equipment_preference and banned_techniques
4. Volume adjustment percent

For each muscle target, pick exactly exercise_count exercises.
Return JSON:
{"exercises": [{"name": str, "sets": int, "reps": str, "rir": int,
  "primary_muscles": [str], "secondary_muscles": [str], "technique": str|null}]}
"""


class ExerciseCollaborator(ABC):
    """Generative exercise selector."""

    @abstractmethod
    def generate(self, request: Dict[str, Any]) -> Dict[str, Any]:
        """
        Generate exercises for a selection request.

        Args:
            request: Structured request built by the orchestrator

        Returns:
            {"exercises": [...]}
        """
        pass


class GeminiExerciseCollaborator(ExerciseCollaborator):

    def __init__(self, model_name: str = MODEL_SELECTION, temperature: float = 0.4):
        self.model_name = model_name
        self.temperature = temperature

    def generate(self, request: Dict[str, Any]) -> Dict[str, Any]:
        from volume_governor.llm import call_json

        return call_json(
            self.model_name,
            SELECTION_SYSTEM_PROMPT,
            json.dumps(request, indent=2, default=str),
            temperature=self.temperature,
            required_keys=["exercises"],
        )


ResponseSpec = Union[Dict[str, Any], List[Dict[str, Any]], Callable[[Dict[str, Any]], Dict[str, Any]]]


class MockExerciseCollaborator(ExerciseCollaborator):
    """
    Mock collaborator.

    Args:
        response: Fixed response ({"exercises": [...]} or a bare list), or a
            callable receiving the request
        error: Exception to raise instead of responding
    """

    def __init__(self, response: Optional[ResponseSpec] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.call_count = 0
        self.last_request: Optional[Dict[str, Any]] = None

    def generate(self, request: Dict[str, Any]) -> Dict[str, Any]:
        self.call_count += 1
        self.last_request = request
        if self.error is not None:
            raise self.error
        if callable(self.response):
            return self.response(request)
        if isinstance(self.response, list):
            return {"exercises": list(self.response)}
        if self.response is not None:
            return self.response
        return {"exercises": _default_exercises(request)}


def _default_exercises(request: Dict[str, Any]) -> List[Dict[str, Any]]:
    sets = request.get("constraints", {}).get("max_sets_per_exercise") or 3
    exercises = []
    for target in request.get("muscle_targets", []):
        for idx in range(target.get("exercise_count", 0)):
            exercises.append({
                "name": f"Mock {target['muscle']} exercise {idx + 1}",
                "sets": min(sets, 3),
                "reps": "8-12",
                "primary_muscles": [target["muscle"]],
                "secondary_muscles": [],
            })
    return exercises


def get_exercise_collaborator(use_mock: bool = False) -> ExerciseCollaborator:
    """Factory: MockExerciseCollaborator when use_mock or USE_MOCK_LLM=true."""
    if use_mock or os.environ.get("USE_MOCK_LLM", "").lower() == "true":
        logger.info("Using MockExerciseCollaborator")
        return MockExerciseCollaborator()
    logger.info("Using GeminiExerciseCollaborator")
    return GeminiExerciseCollaborator()


__all__ = [
    "ExerciseCollaborator",
    "GeminiExerciseCollaborator",
    "MockExerciseCollaborator",
    "get_exercise_collaborator",
    "SELECTION_SYSTEM_PROMPT",
]
