"""
Selection Models - Orchestrator request / collaborator output / result.

Key rules:
- GeneratedExercise holds the collaborator's output verbatim (untrusted labels)
- NormalizedExercise holds canonical keys derived from it
- SelectionResult never rewrites the collaborator's exercises; overshoot and
  limit violations are reported as advisory alerts
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.fatigue.models import FatigueContext
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.volume.models import LandmarkStatus


@dataclass
class SelectionRequest:
    """Input to ExerciseSelectionOrchestrator.select()."""
    user_id: str
    cycle_id: str
    methodology_id: str
    workout_id: str
    target_volume: Dict[str, int]  # raw muscle label -> target sets this session
    context: FatigueContext = field(default_factory=FatigueContext)
    workout_type: Optional[str] = None
    user_context: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class MuscleTarget:
    muscle: MuscleKey
    target_sets: int
    exercise_count: int
    status: LandmarkStatus
    prefer_machines: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "target_sets": self.target_sets,
            "exercise_count": self.exercise_count,
            "status": self.status.value,
            "prefer_machines": self.prefer_machines,
        }


@dataclass(frozen=True)
class GeneratedExercise:
    """One exercise as returned by the collaborator."""
    name: str
    sets: int
    reps: Any = None
    rir: Optional[int] = None
    primary_muscles: Tuple[str, ...] = ()
    secondary_muscles: Tuple[str, ...] = ()
    technique: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GeneratedExercise":
        if not isinstance(data, dict):
            raise ValueError(f"Exercise entry must be an object, got {type(data).__name__}")
        name = data.get("name")
        if not name:
            raise ValueError("Exercise entry missing 'name'")
        muscles = data.get("muscles") or {}
        if not isinstance(muscles, dict):
            raise ValueError(f"Exercise 'muscles' must be an object, got {type(muscles).__name__}")
        primary = data.get("primary_muscles", data.get("primaryMuscles", muscles.get("primary", [])))
        secondary = data.get("secondary_muscles", data.get("secondaryMuscles", muscles.get("secondary", [])))
        if isinstance(primary, str):
            primary = [primary]
        if isinstance(secondary, str):
            secondary = [secondary]
        return cls(
            name=str(name),
            sets=int(data.get("sets", 0)),
            reps=data.get("reps"),
            rir=data.get("rir"),
            primary_muscles=tuple(primary or ()),
            secondary_muscles=tuple(secondary or ()),
            technique=data.get("technique"),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sets": self.sets,
            "reps": self.reps,
            "rir": self.rir,
            "primary_muscles": list(self.primary_muscles),
            "secondary_muscles": list(self.secondary_muscles),
            "technique": self.technique,
        }


@dataclass(frozen=True)
class NormalizedExercise:
    name: str
    sets: int
    primary: Tuple[MuscleKey, ...]
    secondary: Tuple[MuscleKey, ...]
    unmatched: Tuple[str, ...] = ()
    inferred: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sets": self.sets,
            "primary": [m.value for m in self.primary],
            "secondary": [m.value for m in self.secondary],
            "unmatched": list(self.unmatched),
            "inferred": self.inferred,
        }


class AlertType(str, Enum):
    EXCEEDED_MRV = "exceeded_mrv"
    TOTAL_SETS_LIMIT = "total_sets_limit"
    SETS_PER_EXERCISE_LIMIT = "sets_per_exercise_limit"
    TARGET_VOLUME_DEVIATION = "target_volume_deviation"
    ZERO_TARGET_VIOLATION = "zero_target_violation"
    BANNED_TECHNIQUE = "banned_technique"
    UNMATCHED_MUSCLE = "unmatched_muscle"


@dataclass(frozen=True)
class SelectionAlert:
    """Advisory finding about the collaborator's output."""
    type: AlertType
    message: str
    muscle: Optional[MuscleKey] = None
    exercise: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type.value,
            "message": self.message,
            "muscle": self.muscle.value if self.muscle else None,
            "exercise": self.exercise,
        }


@dataclass
class SelectionResult:
    exercises: List[GeneratedExercise]
    normalized: List[NormalizedExercise]
    targets: List[MuscleTarget]
    constraints: ConstraintSet
    committed_volume: Dict[MuscleKey, int]
    credited_volume: Dict[MuscleKey, float]
    post_statuses: Dict[MuscleKey, LandmarkStatus]
    alerts: List[SelectionAlert] = field(default_factory=list)
    committed: bool = False

    @property
    def has_overshoot(self) -> bool:
        return any(a.type == AlertType.EXCEEDED_MRV for a in self.alerts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercises": [e.to_dict() for e in self.exercises],
            "normalized": [n.to_dict() for n in self.normalized],
            "targets": [t.to_dict() for t in self.targets],
            "constraints": self.constraints.to_dict(),
            "committed_volume": {k.value: v for k, v in self.committed_volume.items()},
            "credited_volume": {k.value: v for k, v in self.credited_volume.items()},
            "post_statuses": {k.value: v.value for k, v in self.post_statuses.items()},
            "alerts": [a.to_dict() for a in self.alerts],
            "committed": self.committed,
        }


__all__ = [
    "SelectionRequest",
    "MuscleTarget",
    "GeneratedExercise",
    "NormalizedExercise",
    "AlertType",
    "SelectionAlert",
    "SelectionResult",
]
