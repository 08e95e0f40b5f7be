"""
Fatigue Models - Context, enums and constraint fragments.

FatigueContext is ephemeral: supplied fresh on every decision, never stored.
ConstraintFragment is the builder's output; fragments combine by
conservative merge (most restrictive wins per field).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional


class MesocyclePhase(str, Enum):
    ACCUMULATION = "accumulation"
    INTENSIFICATION = "intensification"
    DELOAD = "deload"
    TRANSITION = "transition"


class CaloricPhase(str, Enum):
    BULK = "bulk"
    CUT = "cut"
    MAINTENANCE = "maintenance"


class ReadinessBucket(str, Enum):
    HIGH_FATIGUE = "high_fatigue"
    MODERATE = "moderate"
    FRESH = "fresh"


class EquipmentPreference(str, Enum):
    """Ordered from least to most conservative."""
    FREE_WEIGHT_FAVORED = "free_weight_favored"
    BALANCED = "balanced"
    MACHINE_FAVORED = "machine_favored"

    @property
    def conservatism(self) -> int:
        return _EQUIPMENT_RANK[self]


_EQUIPMENT_RANK = {
    EquipmentPreference.FREE_WEIGHT_FAVORED: 0,
    EquipmentPreference.BALANCED: 1,
    EquipmentPreference.MACHINE_FAVORED: 2,
}


class TechniqueId(str, Enum):
    """Advanced intensity techniques."""
    DROP_SET = "drop_set"
    REST_PAUSE = "rest_pause"
    SUPERSET = "superset"
    TOP_SET_BACKOFF = "top_set_backoff"
    MYO_REPS = "myo_reps"
    GIANT_SET = "giant_set"
    CLUSTER_SET = "cluster_set"
    PYRAMID = "pyramid"
    FST7_PROTOCOL = "fst7_protocol"
    LOADED_STRETCHING = "loaded_stretching"
    MECHANICAL_DROP_SET = "mechanical_drop_set"
    LENGTHENED_PARTIALS = "lengthened_partials"
    FORCED_REPS = "forced_reps"
    PRE_EXHAUST = "pre_exhaust"


ALL_TECHNIQUES: FrozenSet[TechniqueId] = frozenset(TechniqueId)


class ConstraintFlag(str, Enum):
    """Advisory flags surfaced to the caller (never blocking)."""
    SUBOPTIMAL_SPLIT = "suboptimal_split"
    FAVOR_INTENSITY_PROGRESSION = "favor_intensity_progression"
    FAVOR_LOAD_FORM_PRECISION = "favor_load_form_precision"


def most_conservative_equipment(
    *preferences: Optional[EquipmentPreference],
) -> Optional[EquipmentPreference]:
    present = [p for p in preferences if p is not None]
    if not present:
        return None
    return max(present, key=lambda p: p.conservatism)


@dataclass(frozen=True)
class FatigueContext:
    """
    Per-decision fatigue inputs.

    Args:
        readiness_score: 1-5 self report, or None when unknown
        consecutive_training_days: Days trained in a row (>= 0)
        mesocycle_phase: Current mesocycle block
        caloric_phase: Optional caloric phase
        workouts_completed: Workouts done in the current cycle, if known
        total_planned_workouts: Workouts planned for the cycle, if known
    """
    readiness_score: Optional[float] = None
    consecutive_training_days: int = 0
    mesocycle_phase: MesocyclePhase = MesocyclePhase.ACCUMULATION
    caloric_phase: Optional[CaloricPhase] = None
    workouts_completed: Optional[int] = None
    total_planned_workouts: Optional[int] = None

    def __post_init__(self):
        score = self.readiness_score
        if score is not None:
            if isinstance(score, bool) or not isinstance(score, (int, float)) or math.isnan(score):
                raise ValueError(f"readiness_score must be a number, got {score!r}")
            if not 1 <= score <= 5:
                raise ValueError(f"readiness_score must be within 1..5, got {score}")
        if self.consecutive_training_days < 0:
            raise ValueError("consecutive_training_days must be >= 0")
        if self.workouts_completed is not None and self.workouts_completed < 0:
            raise ValueError("workouts_completed must be >= 0")
        # Accept plain strings for enums
        object.__setattr__(self, "mesocycle_phase", MesocyclePhase(self.mesocycle_phase))
        if self.caloric_phase is not None:
            object.__setattr__(self, "caloric_phase", CaloricPhase(self.caloric_phase))

    @property
    def is_mid_cycle(self) -> bool:
        """True when 0 < workouts_completed < total_planned_workouts."""
        if self.workouts_completed is None or self.total_planned_workouts is None:
            return False
        return 0 < self.workouts_completed < self.total_planned_workouts

    @property
    def cycle_progress(self) -> Optional[float]:
        if not self.total_planned_workouts or self.workouts_completed is None:
            return None
        return self.workouts_completed / self.total_planned_workouts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "readiness_score": self.readiness_score,
            "consecutive_training_days": self.consecutive_training_days,
            "mesocycle_phase": self.mesocycle_phase.value,
            "caloric_phase": self.caloric_phase.value if self.caloric_phase else None,
            "workouts_completed": self.workouts_completed,
            "total_planned_workouts": self.total_planned_workouts,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FatigueContext":
        return cls(
            readiness_score=data.get("readiness_score"),
            consecutive_training_days=int(data.get("consecutive_training_days", 0)),
            mesocycle_phase=MesocyclePhase(data.get("mesocycle_phase", "accumulation")),
            caloric_phase=CaloricPhase(data["caloric_phase"]) if data.get("caloric_phase") else None,
            workouts_completed=data.get("workouts_completed"),
            total_planned_workouts=data.get("total_planned_workouts"),
        )


@dataclass(frozen=True)
class ConstraintFragment:
    """
    Partial constraint produced by one overlay.

    None fields carry no opinion and never win a merge.
    """
    rir_delta: int = 0
    volume_adjustment_percent: Optional[int] = None
    equipment_preference: Optional[EquipmentPreference] = None
    banned_techniques: FrozenSet[TechniqueId] = frozenset()
    flags: FrozenSet[ConstraintFlag] = frozenset()
    sources: tuple = ()

    def merge(self, other: "ConstraintFragment") -> "ConstraintFragment":
        """Conservative merge: the more restrictive value wins on every field."""
        if self.volume_adjustment_percent is None:
            volume = other.volume_adjustment_percent
        elif other.volume_adjustment_percent is None:
            volume = self.volume_adjustment_percent
        else:
            volume = min(self.volume_adjustment_percent, other.volume_adjustment_percent)

        return ConstraintFragment(
            rir_delta=max(self.rir_delta, other.rir_delta),
            volume_adjustment_percent=volume,
            equipment_preference=most_conservative_equipment(
                self.equipment_preference, other.equipment_preference
            ),
            banned_techniques=self.banned_techniques | other.banned_techniques,
            flags=self.flags | other.flags,
            sources=self.sources + other.sources,
        )

    @classmethod
    def merge_all(cls, fragments: Iterable["ConstraintFragment"]) -> "ConstraintFragment":
        result: Optional[ConstraintFragment] = None
        for fragment in fragments:
            result = fragment if result is None else result.merge(fragment)
        return result or cls()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rir_delta": self.rir_delta,
            "volume_adjustment_percent": self.volume_adjustment_percent,
            "equipment_preference": (
                self.equipment_preference.value if self.equipment_preference else None
            ),
            "banned_techniques": sorted(t.value for t in self.banned_techniques),
            "flags": sorted(f.value for f in self.flags),
            "sources": list(self.sources),
        }


@dataclass(frozen=True)
class CaloricOverlay:
    """Priority-4 caloric modulation."""
    phase: CaloricPhase = CaloricPhase.MAINTENANCE
    volume_delta_percent: int = 0
    equipment_preference: Optional[EquipmentPreference] = None
    flags: FrozenSet[ConstraintFlag] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "volume_delta_percent": self.volume_delta_percent,
            "equipment_preference": (
                self.equipment_preference.value if self.equipment_preference else None
            ),
            "flags": sorted(f.value for f in self.flags),
        }


__all__ = [
    "MesocyclePhase",
    "CaloricPhase",
    "ReadinessBucket",
    "EquipmentPreference",
    "TechniqueId",
    "ALL_TECHNIQUES",
    "ConstraintFlag",
    "most_conservative_equipment",
    "FatigueContext",
    "ConstraintFragment",
    "CaloricOverlay",
]
