"""
Fatigue & Periodization Context Builder.

Derives session-level constraint fragments from:
- readiness bucket (1-5 signal)
- consecutive training days overlay
- mesocycle phase overlay
- caloric phase (Priority 4, built separately)

Readiness buckets:
    < 2.5        high_fatigue  machine_favored, rir +1, all techniques banned, volume -10
    2.5 .. 3.5   moderate      pass-through
    >= 3.5       fresh         free_weight_favored, rir -1, volume 0

Consecutive days (suppressed while the cycle has <= 3 completed workouts):
    >= 3         rir +1, volume <= -10, machine_favored, all techniques banned
    >= 5         same, plus the advisory suboptimal_split flag

Overlays combine by conservative merge; methodology-fixed fields are never
touched here.
"""

from __future__ import annotations

import logging
from typing import Optional

from volume_governor.config import (
    CALORIC_VOLUME_ADJUSTMENT,
    CONSECUTIVE_DAYS_OVERLAY,
    CONSECUTIVE_DAYS_SUBOPTIMAL_SPLIT,
    DELOAD_VOLUME_ADJUSTMENT,
    FRESH_CYCLE_MAX_WORKOUTS,
    HIGH_FATIGUE_VOLUME_ADJUSTMENT,
    READINESS_FRESH_AT_OR_ABOVE,
    READINESS_HIGH_FATIGUE_BELOW,
    VOLUME_ADJUSTMENT_MAX,
)
from volume_governor.fatigue.models import (
    ALL_TECHNIQUES,
    CaloricOverlay,
    CaloricPhase,
    ConstraintFlag,
    ConstraintFragment,
    EquipmentPreference,
    FatigueContext,
    MesocyclePhase,
    ReadinessBucket,
)

logger = logging.getLogger(__name__)


# =============================================================================
# READINESS
# =============================================================================

def readiness_bucket(readiness_score: Optional[float]) -> ReadinessBucket:
    """Bucket a readiness score. Unknown readiness is treated as moderate."""
    if readiness_score is None:
        return ReadinessBucket.MODERATE
    if readiness_score < READINESS_HIGH_FATIGUE_BELOW:
        return ReadinessBucket.HIGH_FATIGUE
    if readiness_score < READINESS_FRESH_AT_OR_ABOVE:
        return ReadinessBucket.MODERATE
    return ReadinessBucket.FRESH


def build_readiness_overlay(readiness_score: Optional[float]) -> ConstraintFragment:
    bucket = readiness_bucket(readiness_score)
    if bucket == ReadinessBucket.HIGH_FATIGUE:
        return ConstraintFragment(
            rir_delta=1,
            volume_adjustment_percent=HIGH_FATIGUE_VOLUME_ADJUSTMENT,
            equipment_preference=EquipmentPreference.MACHINE_FAVORED,
            banned_techniques=ALL_TECHNIQUES,
            sources=("readiness:high_fatigue",),
        )
    if bucket == ReadinessBucket.FRESH:
        return ConstraintFragment(
            rir_delta=-1,
            volume_adjustment_percent=0,
            equipment_preference=EquipmentPreference.FREE_WEIGHT_FAVORED,
            sources=("readiness:fresh",),
        )
    return ConstraintFragment(sources=("readiness:moderate",))


# =============================================================================
# CONSECUTIVE DAYS
# =============================================================================

def build_consecutive_days_overlay(
    consecutive_days: int,
    workouts_completed: Optional[int] = None,
) -> Optional[ConstraintFragment]:
    """
    Overlay for back-to-back training days.

    Returns None when the overlay does not apply (too few days, or the cycle
    has just started).
    """
    if consecutive_days < CONSECUTIVE_DAYS_OVERLAY:
        return None
    if workouts_completed is not None and workouts_completed <= FRESH_CYCLE_MAX_WORKOUTS:
        logger.debug(
            "Consecutive-day overlay suppressed: fresh cycle (%d workouts)",
            workouts_completed,
        )
        return None

    flags = frozenset()
    if consecutive_days >= CONSECUTIVE_DAYS_SUBOPTIMAL_SPLIT:
        flags = frozenset({ConstraintFlag.SUBOPTIMAL_SPLIT})
        logger.info("Suboptimal split: %d consecutive training days", consecutive_days)

    return ConstraintFragment(
        rir_delta=1,
        volume_adjustment_percent=HIGH_FATIGUE_VOLUME_ADJUSTMENT,
        equipment_preference=EquipmentPreference.MACHINE_FAVORED,
        banned_techniques=ALL_TECHNIQUES,
        flags=flags,
        sources=(f"consecutive_days:{consecutive_days}",),
    )


# =============================================================================
# MESOCYCLE PHASE
# =============================================================================

def build_phase_overlay(phase: MesocyclePhase) -> Optional[ConstraintFragment]:
    if phase == MesocyclePhase.DELOAD:
        return ConstraintFragment(
            rir_delta=1,
            volume_adjustment_percent=DELOAD_VOLUME_ADJUSTMENT,
            banned_techniques=ALL_TECHNIQUES,
            sources=("phase:deload",),
        )
    if phase == MesocyclePhase.INTENSIFICATION:
        # Quality over quantity: stable patterns for heavier loading
        return ConstraintFragment(
            equipment_preference=EquipmentPreference.MACHINE_FAVORED,
            sources=("phase:intensification",),
        )
    return None


# =============================================================================
# COMBINED
# =============================================================================

def build_fatigue_overlay(context: FatigueContext) -> ConstraintFragment:
    """
    Build the Priority-3 fragment for a decision.

    Args:
        context: Fatigue context for this request

    Returns:
        Conservatively merged ConstraintFragment
    """
    fragments = [build_readiness_overlay(context.readiness_score)]

    consecutive = build_consecutive_days_overlay(
        context.consecutive_training_days, context.workouts_completed
    )
    if consecutive is not None:
        fragments.append(consecutive)

    phase = build_phase_overlay(context.mesocycle_phase)
    if phase is not None:
        fragments.append(phase)

    merged = ConstraintFragment.merge_all(fragments)
    logger.debug("Fatigue overlay for %s: %s", context.to_dict(), merged.to_dict())
    return merged


def build_caloric_overlay(
    caloric_phase: Optional[CaloricPhase],
    is_fixed_volume: bool,
    adjustment_percent: int = CALORIC_VOLUME_ADJUSTMENT,
    volume_ceiling_percent: int = VOLUME_ADJUSTMENT_MAX,
) -> CaloricOverlay:
    """
    Build the Priority-4 caloric overlay.

    Flexible-volume methodologies get a volume delta (bulk +, cut -) capped at
    the methodology's own ceiling; fixed-volume methodologies only get an
    advisory flag and keep their set counts.
    """
    if caloric_phase is None or caloric_phase == CaloricPhase.MAINTENANCE:
        return CaloricOverlay(phase=caloric_phase or CaloricPhase.MAINTENANCE)

    magnitude = max(0, min(adjustment_percent, volume_ceiling_percent))

    if caloric_phase == CaloricPhase.BULK:
        if is_fixed_volume:
            return CaloricOverlay(
                phase=caloric_phase,
                flags=frozenset({ConstraintFlag.FAVOR_INTENSITY_PROGRESSION}),
            )
        return CaloricOverlay(phase=caloric_phase, volume_delta_percent=magnitude)

    # Cut: reduced recovery capacity, stable equipment favored
    if is_fixed_volume:
        return CaloricOverlay(
            phase=caloric_phase,
            equipment_preference=EquipmentPreference.MACHINE_FAVORED,
            flags=frozenset({ConstraintFlag.FAVOR_LOAD_FORM_PRECISION}),
        )
    return CaloricOverlay(
        phase=caloric_phase,
        volume_delta_percent=-magnitude,
        equipment_preference=EquipmentPreference.MACHINE_FAVORED,
    )


__all__ = [
    "readiness_bucket",
    "build_readiness_overlay",
    "build_consecutive_days_overlay",
    "build_phase_overlay",
    "build_fatigue_overlay",
    "build_caloric_overlay",
]
