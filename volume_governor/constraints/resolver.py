"""
Constraint Resolver - Merge prioritized rule sources into a ConstraintSet.

Fixed merge order:
1. Methodology limits (Priority 1, copied verbatim, never overridden)
2. Landmark directives (Priority 2, per muscle)
   - exceeded_mrv: no new exercises for that muscle this session
   - approaching_mrv: at most one exercise, reduced sets, machines preferred
3. Fatigue / periodization overlay (Priority 3, conservative merge)
4. Caloric overlay (Priority 4, only fields not pinned above)

Pinning rules for Priority 4:
- volume is pinned when the fatigue overlay reduced it
- equipment is pinned when the fatigue overlay expressed a preference

resolve() is a pure function of its inputs.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from volume_governor.config import (
    APPROACHING_MRV_EXERCISE_CAP,
    EXCEEDED_MRV_EXERCISE_CAP,
    VOLUME_ADJUSTMENT_MAX,
    VOLUME_ADJUSTMENT_MIN,
)
from volume_governor.constraints.models import ConstraintSet, MuscleDirective
from volume_governor.fatigue.builder import build_caloric_overlay, build_fatigue_overlay
from volume_governor.fatigue.models import (
    CaloricOverlay,
    EquipmentPreference,
    FatigueContext,
)
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.volume.landmarks import evaluate_all
from volume_governor.volume.models import LandmarkStatus

logger = logging.getLogger(__name__)


def clamp_volume(percent: int, ceiling: int = VOLUME_ADJUSTMENT_MAX) -> int:
    upper = min(ceiling, VOLUME_ADJUSTMENT_MAX)
    return max(VOLUME_ADJUSTMENT_MIN, min(upper, percent))


def build_muscle_directives(
    landmark_statuses: Mapping[MuscleKey, LandmarkStatus],
) -> Dict[MuscleKey, MuscleDirective]:
    """Priority 2: per-muscle caps from landmark status."""
    directives: Dict[MuscleKey, MuscleDirective] = {}
    for muscle in sorted(landmark_statuses, key=lambda k: k.value):
        status = LandmarkStatus(landmark_statuses[muscle])
        if status == LandmarkStatus.EXCEEDED_MRV:
            directive = MuscleDirective(
                muscle=muscle,
                status=status,
                max_new_exercises=EXCEEDED_MRV_EXERCISE_CAP,
                prefer_machines=True,
                reduce_sets=True,
            )
        elif status == LandmarkStatus.APPROACHING_MRV:
            directive = MuscleDirective(
                muscle=muscle,
                status=status,
                max_new_exercises=APPROACHING_MRV_EXERCISE_CAP,
                prefer_machines=True,
                reduce_sets=True,
            )
        else:
            directive = MuscleDirective(muscle=muscle, status=status)
        directives[muscle] = directive
    return directives


def resolve(
    methodology: MethodologyConfig,
    landmark_statuses: Mapping[MuscleKey, LandmarkStatus],
    fatigue_context: FatigueContext,
    caloric_overlay: Optional[CaloricOverlay] = None,
) -> ConstraintSet:
    """
    Resolve the constraint set for one decision.

    Args:
        methodology: Methodology configuration (Priority 1)
        landmark_statuses: Landmark status per muscle (Priority 2)
        fatigue_context: Readiness / consecutive days / phase (Priority 3)
        caloric_overlay: Caloric modulation (Priority 4). Built from
            fatigue_context.caloric_phase when omitted.

    Returns:
        ConstraintSet
    """
    # Priority 1
    rir_floor = methodology.rir_target
    equipment = EquipmentPreference.BALANCED
    volume = 0
    sources = [f"methodology:{methodology.methodology_id}"]

    # Priority 2
    directives = build_muscle_directives(landmark_statuses)
    capped = [m.value for m, d in directives.items() if d.max_new_exercises is not None]
    if capped:
        sources.append("landmarks:" + ",".join(capped))

    # Priority 3
    fragment = build_fatigue_overlay(fatigue_context)
    rir_floor = max(0, rir_floor + fragment.rir_delta)
    volume_pinned = False
    equipment_pinned = False
    if fragment.volume_adjustment_percent is not None:
        volume = min(volume, fragment.volume_adjustment_percent)
        volume_pinned = fragment.volume_adjustment_percent < 0
    if fragment.equipment_preference is not None:
        equipment = fragment.equipment_preference
        equipment_pinned = True
    sources.extend(fragment.sources)

    # Priority 4
    if caloric_overlay is None:
        caloric_overlay = build_caloric_overlay(
            fatigue_context.caloric_phase,
            methodology.is_fixed_volume,
            volume_ceiling_percent=methodology.volume_ceiling_percent,
        )
    flags = set(fragment.flags) | set(caloric_overlay.flags)
    if caloric_overlay.volume_delta_percent and not methodology.is_fixed_volume:
        if volume_pinned:
            logger.debug("Caloric volume delta skipped: volume pinned by fatigue overlay")
        else:
            volume = volume + caloric_overlay.volume_delta_percent
            sources.append(f"caloric:{caloric_overlay.phase.value}")
    if caloric_overlay.equipment_preference is not None and not equipment_pinned:
        equipment = caloric_overlay.equipment_preference

    constraint_set = ConstraintSet(
        methodology_id=methodology.methodology_id,
        max_sets_per_exercise=methodology.max_sets_per_exercise,
        max_total_sets_per_workout=methodology.max_total_sets_per_workout,
        rir_floor=rir_floor,
        equipment_preference=equipment,
        banned_techniques=frozenset(fragment.banned_techniques),
        volume_adjustment_percent=clamp_volume(volume, methodology.volume_ceiling_percent),
        muscle_directives=directives,
        max_exercises_per_session=methodology.max_exercises_per_session,
        flags=frozenset(flags),
        sources=tuple(sources),
    )
    logger.debug("Resolved constraints: %s", constraint_set.to_dict())
    return constraint_set


def resolve_from_volume(
    methodology: MethodologyConfig,
    volume: Mapping[MuscleKey, int],
    fatigue_context: FatigueContext,
) -> ConstraintSet:
    """Evaluate landmarks for the current volume, then resolve."""
    statuses = evaluate_all(volume, methodology.landmarks)
    return resolve(methodology, statuses, fatigue_context)


__all__ = [
    "clamp_volume",
    "build_muscle_directives",
    "resolve",
    "resolve_from_volume",
]
