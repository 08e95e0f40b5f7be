"""
Validator Models - Proposals and immutable verdicts.

Verdict payloads are rendered directly to the user, so text is capped:
- reasoning: MAX_REASONING_WORDS (40)
- reason messages: MAX_REASON_WORDS (25)
- suggestions: MAX_SUGGESTION_WORDS (30)

Decision rule: any high-severity reason → rejected, any medium → caution,
otherwise approved.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from volume_governor.config import (
    MAX_REASON_WORDS,
    MAX_REASONING_WORDS,
    MAX_SUGGESTION_WORDS,
)
from volume_governor.fatigue.models import TechniqueId
from volume_governor.methodology.models import parse_technique


class Decision(str, Enum):
    APPROVED = "approved"
    CAUTION = "caution"
    REJECTED = "rejected"


class ReasonType(str, Enum):
    VOLUME_OVERLAP = "volume_overlap"
    FATIGUE = "fatigue"
    BALANCE = "balance"
    EXPERIENCE = "experience"
    RECOVERY = "recovery"
    REDUNDANCY = "redundancy"
    PHASE_MISMATCH = "phase_mismatch"
    FREQUENCY = "frequency"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def cap_words(text: str, limit: int) -> str:
    """Truncate text to at most `limit` words."""
    words = (text or "").split()
    if len(words) <= limit:
        return " ".join(words)
    return " ".join(words[:limit]).rstrip(",;:") + "…"


@dataclass(frozen=True)
class Reason:
    type: ReasonType
    severity: Severity
    message: str

    def __post_init__(self):
        object.__setattr__(self, "message", cap_words(self.message, MAX_REASON_WORDS))

    def to_dict(self) -> Dict[str, str]:
        return {
            "type": self.type.value,
            "severity": self.severity.value,
            "message": self.message,
        }


def decide(reasons: Iterable[Reason]) -> Decision:
    severities = {reason.severity for reason in reasons}
    if Severity.HIGH in severities:
        return Decision.REJECTED
    if Severity.MEDIUM in severities:
        return Decision.CAUTION
    return Decision.APPROVED


@dataclass(frozen=True)
class ValidationVerdict:
    """Immutable validator output."""
    decision: Decision
    reasons: Tuple[Reason, ...] = ()
    suggestions: Tuple[str, ...] = ()
    reasoning: str = ""
    validator: str = ""
    pre_check: bool = False

    def __post_init__(self):
        object.__setattr__(self, "reasons", tuple(self.reasons))
        object.__setattr__(self, "suggestions", tuple(
            cap_words(s, MAX_SUGGESTION_WORDS) for s in self.suggestions if s
        ))
        object.__setattr__(self, "reasoning", cap_words(self.reasoning, MAX_REASONING_WORDS))

    @property
    def approved(self) -> bool:
        return self.decision == Decision.APPROVED

    def has_reason(self, reason_type: ReasonType, severity: Optional[Severity] = None) -> bool:
        return any(
            r.type == reason_type and (severity is None or r.severity == severity)
            for r in self.reasons
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "validator": self.validator,
            "decision": self.decision.value,
            "reasons": [r.to_dict() for r in self.reasons],
            "suggestions": list(self.suggestions),
            "reasoning": self.reasoning,
            "pre_check": self.pre_check,
        }


# =============================================================================
# WORKOUT STATE & PROPOSALS
# =============================================================================

@dataclass(frozen=True)
class WorkoutExercise:
    """An exercise already in the workout."""
    name: str
    sets: int
    primary_muscles: Tuple[str, ...] = ()
    secondary_muscles: Tuple[str, ...] = ()
    technique: Optional[TechniqueId] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutExercise":
        return cls(
            name=data.get("name", ""),
            sets=int(data.get("sets", 0)),
            primary_muscles=tuple(data.get("primary_muscles", data.get("primaryMuscles", [])) or []),
            secondary_muscles=tuple(data.get("secondary_muscles", data.get("secondaryMuscles", [])) or []),
            technique=parse_technique(data.get("technique")),
        )


@dataclass(frozen=True)
class WorkoutSnapshot:
    """Current state of the workout being modified."""
    workout_id: str
    exercises: Tuple[WorkoutExercise, ...] = ()

    @property
    def total_sets(self) -> int:
        return sum(e.sets for e in self.exercises)

    def find(self, name: str) -> Optional[WorkoutExercise]:
        target = (name or "").strip().lower()
        for exercise in self.exercises:
            if exercise.name.strip().lower() == target:
                return exercise
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkoutSnapshot":
        return cls(
            workout_id=str(data.get("workout_id", data.get("id", ""))),
            exercises=tuple(WorkoutExercise.from_dict(e) for e in data.get("exercises", [])),
        )


@dataclass(frozen=True)
class AdditionProposal:
    """Add a new exercise to a workout."""
    user_id: str
    workout: WorkoutSnapshot
    exercise_name: str
    target_muscles: Tuple[str, ...]
    sets: int
    technique: Optional[TechniqueId] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdditionProposal":
        return cls(
            user_id=data.get("user_id", ""),
            workout=WorkoutSnapshot.from_dict(data.get("workout", {})),
            exercise_name=data.get("exercise_name", ""),
            target_muscles=tuple(data.get("target_muscles", [])),
            sets=int(data.get("sets", 0)),
            technique=parse_technique(data.get("technique")),
        )


@dataclass(frozen=True)
class ExtraSetProposal:
    """Add sets (optionally with a technique) to an existing exercise."""
    user_id: str
    workout: WorkoutSnapshot
    exercise_name: str
    extra_sets: int = 1
    technique: Optional[TechniqueId] = None


@dataclass(frozen=True)
class SubstitutionProposal:
    """Replace one exercise with another."""
    user_id: str
    workout: WorkoutSnapshot
    current_exercise: str
    replacement_exercise: str
    replacement_muscles: Tuple[str, ...] = ()
    replacement_sets: Optional[int] = None
    technique: Optional[TechniqueId] = None


@dataclass(frozen=True)
class SplitChangeProposal:
    """Change the split type of the current cycle."""
    user_id: str
    current_split: str
    target_split: str
    current_volume: Dict[str, int] = field(default_factory=dict)
    weak_point_muscles: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SplitChangeProposal":
        return cls(
            user_id=data.get("user_id", ""),
            current_split=data.get("current_split", ""),
            target_split=data.get("target_split", ""),
            current_volume=dict(data.get("current_volume") or {}),
            weak_point_muscles=tuple(data.get("weak_point_muscles") or ()),
        )


__all__ = [
    "Decision",
    "ReasonType",
    "Severity",
    "Reason",
    "cap_words",
    "decide",
    "ValidationVerdict",
    "WorkoutExercise",
    "WorkoutSnapshot",
    "AdditionProposal",
    "ExtraSetProposal",
    "SubstitutionProposal",
    "SplitChangeProposal",
]
