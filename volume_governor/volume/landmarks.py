"""
Landmark Evaluator - Classify muscle volume against MEV / MAV / MRV.

Checks run most-severe first, so the more severe status wins ties:
1. exceeded_mrv     current >= mrv
2. approaching_mrv  current / mrv >= APPROACHING_MRV_RATIO (0.70)
3. approaching_mav  current / mav >= APPROACHING_MAV_RATIO (0.80)
4. below_mev        current < mev
5. optimal

Missing landmarks → optimal (no opinion, never blocks).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from volume_governor.config import APPROACHING_MAV_RATIO, APPROACHING_MRV_RATIO
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.volume.models import LandmarkStatus, VolumeLandmarks

logger = logging.getLogger(__name__)


def evaluate(
    muscle: MuscleKey,
    current_volume: int,
    landmarks: Optional[VolumeLandmarks],
    mav_ratio: float = APPROACHING_MAV_RATIO,
    mrv_ratio: float = APPROACHING_MRV_RATIO,
) -> LandmarkStatus:
    """
    Evaluate a muscle's landmark status.

    Args:
        muscle: Canonical muscle key (used for logging only)
        current_volume: Sets accumulated this cycle
        landmarks: Methodology landmarks, or None when not configured

    Returns:
        LandmarkStatus
    """
    if landmarks is None:
        logger.debug("No landmarks for %s, defaulting to optimal", muscle)
        return LandmarkStatus.OPTIMAL

    if current_volume >= landmarks.mrv:
        return LandmarkStatus.EXCEEDED_MRV
    if current_volume / landmarks.mrv >= mrv_ratio:
        return LandmarkStatus.APPROACHING_MRV
    if current_volume / landmarks.mav >= mav_ratio:
        return LandmarkStatus.APPROACHING_MAV
    if current_volume < landmarks.mev:
        return LandmarkStatus.BELOW_MEV
    return LandmarkStatus.OPTIMAL


def evaluate_all(
    volume: Mapping[MuscleKey, int],
    landmarks_by_muscle: Mapping[MuscleKey, VolumeLandmarks],
    muscles: Optional[List[MuscleKey]] = None,
) -> Dict[MuscleKey, LandmarkStatus]:
    """
    Evaluate every muscle that has volume or landmarks.

    Args:
        volume: Current sets per muscle
        landmarks_by_muscle: Methodology landmarks
        muscles: Explicit muscle list (defaults to the union of both maps)
    """
    keys = muscles if muscles is not None else sorted(
        set(volume) | set(landmarks_by_muscle), key=lambda k: k.value
    )
    return {
        muscle: evaluate(muscle, volume.get(muscle, 0), landmarks_by_muscle.get(muscle))
        for muscle in keys
    }


@dataclass(frozen=True)
class VolumeProgress:
    """Progress of one muscle toward its cycle target."""
    muscle: MuscleKey
    target: int
    current: int

    @property
    def percentage(self) -> int:
        if self.target <= 0:
            return 0
        return round(self.current / self.target * 100)

    @property
    def remaining(self) -> int:
        return max(0, self.target - self.current)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "target": self.target,
            "current": self.current,
            "percentage": self.percentage,
            "remaining": self.remaining,
        }


def volume_progress(
    volume: Mapping[MuscleKey, int],
    targets: Mapping[MuscleKey, int],
) -> List[VolumeProgress]:
    """Progress per targeted muscle, largest target first."""
    rows = [
        VolumeProgress(muscle=muscle, target=target, current=volume.get(muscle, 0))
        for muscle, target in targets.items()
    ]
    return sorted(rows, key=lambda row: (-row.target, row.muscle.value))


__all__ = [
    "evaluate",
    "evaluate_all",
    "VolumeProgress",
    "volume_progress",
]
