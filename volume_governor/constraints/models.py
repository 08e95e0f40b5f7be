"""
Constraint Models - Resolved constraint set for one decision.

Key rules:
- max_sets_per_exercise / max_total_sets_per_workout come from the
  methodology and are never altered by lower priorities
- volume_adjustment_percent is clamped to [-20, +20]
- Per-muscle directives carry landmark-driven caps (Priority 2)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional, Tuple

from volume_governor.fatigue.models import (
    ConstraintFlag,
    EquipmentPreference,
    TechniqueId,
)
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.volume.models import LandmarkStatus


@dataclass(frozen=True)
class MuscleDirective:
    """Landmark-driven directive for one muscle."""
    muscle: MuscleKey
    status: LandmarkStatus
    max_new_exercises: Optional[int] = None
    prefer_machines: bool = False
    reduce_sets: bool = False

    @property
    def blocks_new_work(self) -> bool:
        return self.max_new_exercises == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "status": self.status.value,
            "max_new_exercises": self.max_new_exercises,
            "prefer_machines": self.prefer_machines,
            "reduce_sets": self.reduce_sets,
        }


@dataclass(frozen=True)
class ConstraintSet:
    """Single ordered rule set handed to validators and the collaborator."""
    methodology_id: str
    max_sets_per_exercise: Optional[int]
    max_total_sets_per_workout: Optional[int]
    rir_floor: int
    equipment_preference: EquipmentPreference = EquipmentPreference.BALANCED
    banned_techniques: FrozenSet[TechniqueId] = frozenset()
    volume_adjustment_percent: int = 0
    muscle_directives: Dict[MuscleKey, MuscleDirective] = field(default_factory=dict)
    max_exercises_per_session: Optional[int] = None
    flags: FrozenSet[ConstraintFlag] = frozenset()
    sources: Tuple[str, ...] = ()

    def directive_for(self, muscle: MuscleKey) -> Optional[MuscleDirective]:
        return self.muscle_directives.get(muscle)

    def status_for(self, muscle: MuscleKey) -> LandmarkStatus:
        directive = self.muscle_directives.get(muscle)
        return directive.status if directive else LandmarkStatus.OPTIMAL

    def is_banned(self, technique: Optional[TechniqueId]) -> bool:
        return technique is not None and technique in self.banned_techniques

    def to_dict(self) -> Dict[str, Any]:
        return {
            "methodology_id": self.methodology_id,
            "max_sets_per_exercise": self.max_sets_per_exercise,
            "max_total_sets_per_workout": self.max_total_sets_per_workout,
            "rir_floor": self.rir_floor,
            "equipment_preference": self.equipment_preference.value,
            "banned_techniques": sorted(t.value for t in self.banned_techniques),
            "volume_adjustment_percent": self.volume_adjustment_percent,
            "muscle_directives": {
                muscle.value: directive.to_dict()
                for muscle, directive in sorted(
                    self.muscle_directives.items(), key=lambda item: item[0].value
                )
            },
            "max_exercises_per_session": self.max_exercises_per_session,
            "flags": sorted(f.value for f in self.flags),
            "sources": list(self.sources),
        }


__all__ = [
    "MuscleDirective",
    "ConstraintSet",
]
