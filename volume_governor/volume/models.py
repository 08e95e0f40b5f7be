"""
Volume Models - Landmarks, ledger entries and landmark status.

Key rules:
- VolumeLandmarks enforce 0 <= mev < mav < mrv at construction
- LandmarkStatus is derived on every read, never stored
- Ledger entries are integers (sets), additive within a cycle
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from volume_governor.taxonomy.muscles import MuscleKey


class LandmarkStatus(str, Enum):
    """Volume status of a muscle relative to its landmarks."""
    BELOW_MEV = "below_mev"
    OPTIMAL = "optimal"
    APPROACHING_MAV = "approaching_mav"
    APPROACHING_MRV = "approaching_mrv"
    EXCEEDED_MRV = "exceeded_mrv"

    @property
    def severity(self) -> int:
        return _STATUS_SEVERITY[self]

    def is_more_severe_than(self, other: "LandmarkStatus") -> bool:
        return self.severity > other.severity


_STATUS_SEVERITY = {
    LandmarkStatus.BELOW_MEV: 0,
    LandmarkStatus.OPTIMAL: 1,
    LandmarkStatus.APPROACHING_MAV: 2,
    LandmarkStatus.APPROACHING_MRV: 3,
    LandmarkStatus.EXCEEDED_MRV: 4,
}


@dataclass(frozen=True)
class VolumeLandmarks:
    """Weekly set landmarks for one muscle under one methodology."""
    mev: int
    mav: int
    mrv: int

    def __post_init__(self):
        for name in ("mev", "mav", "mrv"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"Landmark {name} must be an int, got {value!r}")
        if not 0 <= self.mev < self.mav < self.mrv:
            raise ValueError(
                f"Landmarks must satisfy 0 <= mev < mav < mrv, got "
                f"mev={self.mev} mav={self.mav} mrv={self.mrv}"
            )

    def to_dict(self) -> Dict[str, int]:
        return {"mev": self.mev, "mav": self.mav, "mrv": self.mrv}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VolumeLandmarks":
        return cls(
            mev=int(data["mev"]),
            mav=int(data["mav"]),
            mrv=int(data["mrv"]),
        )


@dataclass(frozen=True)
class VolumeLedgerEntry:
    """Accumulated sets for one muscle within one cycle."""
    muscle: MuscleKey
    sets_accumulated: int
    cycle_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "sets_accumulated": self.sets_accumulated,
            "cycle_id": self.cycle_id,
        }


__all__ = [
    "LandmarkStatus",
    "VolumeLandmarks",
    "VolumeLedgerEntry",
]
