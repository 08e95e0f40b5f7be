"""
Inference - Exercise-name based muscle inference.

Two explicit fallback paths, both logged:
1. Head refinement: a generic label ("shoulders") is refined to a specific
   head when the exercise name makes the head obvious (rear delt fly,
   lateral raise, front raise).
2. Muscle inference: when a generated exercise carries no usable muscle
   labels, primary / secondary muscles are inferred from name keywords.

Patterns are ordered specific → generic; first match wins.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Pattern, Tuple

from volume_governor.taxonomy.muscles import MuscleKey

logger = logging.getLogger(__name__)


# =============================================================================
# HEAD REFINEMENT
# =============================================================================

HEAD_INFERENCE_RULES: List[Tuple[Pattern[str], MuscleKey]] = [
    (re.compile(r"rear[\s_-]*delt|face[\s_-]*pull|reverse[\s_-]*(pec[\s_-]*deck|fly|flye)|posterior[\s_-]*delt"),
     MuscleKey.SHOULDERS_REAR),
    (re.compile(r"lateral[\s_-]*raise|side[\s_-]*raise|y[\s_-]*raise|lateral[\s_-]*delt"),
     MuscleKey.SHOULDERS_SIDE),
    (re.compile(r"front[\s_-]*raise|anterior[\s_-]*raise|front[\s_-]*delt"),
     MuscleKey.SHOULDERS_FRONT),
]


def infer_head_from_exercise(
    generic: MuscleKey,
    exercise_name: Optional[str],
) -> Optional[MuscleKey]:
    """
    Refine a generic muscle key using the exercise name.

    Args:
        generic: The generic key that was matched (e.g. shoulders)
        exercise_name: Exercise name supplied alongside the label

    Returns:
        Specific head key, or None if no rule matched
    """
    if not exercise_name or generic != MuscleKey.SHOULDERS:
        return None

    name = exercise_name.lower()
    for pattern, head in HEAD_INFERENCE_RULES:
        if pattern.search(name):
            logger.info(
                "Inferred %s from generic '%s' via exercise name '%s'",
                head.value, generic.value, exercise_name,
            )
            return head
    return None


# =============================================================================
# MUSCLE INFERENCE FROM EXERCISE NAME
# =============================================================================

_M = MuscleKey

EXERCISE_MUSCLE_PATTERNS: List[Tuple[str, Tuple[MuscleKey, ...], Tuple[MuscleKey, ...]]] = [
    # Chest
    ("incline press", (_M.CHEST_UPPER,), (_M.SHOULDERS_FRONT, _M.TRICEPS)),
    ("decline press", (_M.CHEST_LOWER,), (_M.TRICEPS, _M.SHOULDERS_FRONT)),
    ("close grip", (_M.TRICEPS,), (_M.CHEST,)),
    ("bench press", (_M.CHEST,), (_M.SHOULDERS_FRONT, _M.TRICEPS)),
    ("chest fly", (_M.CHEST,), (_M.SHOULDERS_FRONT,)),
    ("pec deck", (_M.CHEST,), (_M.SHOULDERS_FRONT,)),
    ("cable fly", (_M.CHEST,), (_M.SHOULDERS_FRONT,)),
    ("dip", (_M.CHEST, _M.TRICEPS), (_M.SHOULDERS_FRONT,)),
    # Shoulders
    ("overhead press", (_M.SHOULDERS_FRONT,), (_M.TRICEPS,)),
    ("military press", (_M.SHOULDERS_FRONT,), (_M.TRICEPS,)),
    ("shoulder press", (_M.SHOULDERS_FRONT,), (_M.TRICEPS,)),
    ("lateral raise", (_M.SHOULDERS_SIDE,), ()),
    ("front raise", (_M.SHOULDERS_FRONT,), ()),
    ("rear delt", (_M.SHOULDERS_REAR,), (_M.UPPER_BACK,)),
    ("face pull", (_M.SHOULDERS_REAR,), (_M.UPPER_BACK, _M.TRAPS)),
    # Triceps
    ("tricep extension", (_M.TRICEPS,), ()),
    ("triceps extension", (_M.TRICEPS,), ()),
    ("pushdown", (_M.TRICEPS,), ()),
    ("skull crusher", (_M.TRICEPS,), ()),
    # Back
    ("romanian deadlift", (_M.HAMSTRINGS,), (_M.GLUTES, _M.LOWER_BACK)),
    ("deadlift", (_M.LOWER_BACK, _M.HAMSTRINGS), (_M.GLUTES, _M.TRAPS, _M.FOREARMS)),
    ("lat pulldown", (_M.LATS,), (_M.BICEPS, _M.UPPER_BACK)),
    ("pull up", (_M.LATS, _M.UPPER_BACK), (_M.BICEPS,)),
    ("chin up", (_M.LATS, _M.BICEPS), (_M.UPPER_BACK,)),
    ("barbell row", (_M.UPPER_BACK,), (_M.BICEPS, _M.LATS)),
    ("dumbbell row", (_M.UPPER_BACK,), (_M.BICEPS, _M.LATS)),
    ("t bar row", (_M.UPPER_BACK,), (_M.BICEPS, _M.LATS)),
    ("cable row", (_M.UPPER_BACK,), (_M.BICEPS,)),
    ("shrug", (_M.TRAPS,), ()),
    # Arms
    ("hammer curl", (_M.BICEPS,), (_M.FOREARMS,)),
    ("preacher curl", (_M.BICEPS,), ()),
    ("bicep curl", (_M.BICEPS,), (_M.FOREARMS,)),
    ("wrist curl", (_M.FOREARMS,), ()),
    # Legs
    ("leg curl", (_M.HAMSTRINGS,), ()),
    ("leg extension", (_M.QUADS,), ()),
    ("leg press", (_M.QUADS,), (_M.GLUTES, _M.HAMSTRINGS)),
    ("front squat", (_M.QUADS,), (_M.GLUTES,)),
    ("squat", (_M.QUADS,), (_M.GLUTES, _M.HAMSTRINGS)),
    ("lunge", (_M.QUADS,), (_M.GLUTES, _M.HAMSTRINGS)),
    ("hip thrust", (_M.GLUTES,), (_M.HAMSTRINGS,)),
    ("glute bridge", (_M.GLUTES,), (_M.HAMSTRINGS,)),
    ("calf raise", (_M.CALVES,), ()),
    ("adduction", (_M.ADDUCTORS,), ()),
    ("abduction", (_M.ABDUCTORS,), ()),
    # Core
    ("leg raise", (_M.ABS,), (_M.HIP_FLEXORS,)),
    ("russian twist", (_M.OBLIQUES,), (_M.ABS,)),
    ("crunch", (_M.ABS,), ()),
    ("plank", (_M.ABS,), (_M.LOWER_BACK,)),
    # Generic fallbacks
    ("press", (_M.CHEST,), (_M.SHOULDERS_FRONT, _M.TRICEPS)),
    ("fly", (_M.CHEST,), (_M.SHOULDERS_FRONT,)),
    ("row", (_M.UPPER_BACK,), (_M.BICEPS,)),
    ("pull", (_M.LATS, _M.UPPER_BACK), (_M.BICEPS,)),
    ("curl", (_M.BICEPS,), (_M.FOREARMS,)),
    ("extension", (_M.TRICEPS,), ()),
    ("raise", (_M.SHOULDERS,), ()),
]

_NAME_CLEAN_RE = re.compile(r"[\s_\-]+")


def infer_muscles_from_exercise_name(
    exercise_name: str,
) -> Tuple[List[MuscleKey], List[MuscleKey]]:
    """
    Infer (primary, secondary) muscles from an exercise name.

    Returns empty lists when nothing matches.
    """
    if not isinstance(exercise_name, str):
        return [], []

    name = _NAME_CLEAN_RE.sub(" ", exercise_name.lower()).strip()
    for pattern, primary, secondary in EXERCISE_MUSCLE_PATTERNS:
        if pattern in name:
            logger.info(
                "Inferred muscles for '%s' from pattern '%s'", exercise_name, pattern,
            )
            return list(primary), list(secondary)

    logger.warning("Could not infer muscle groups for exercise '%s'", exercise_name)
    return [], []


__all__ = [
    "HEAD_INFERENCE_RULES",
    "EXERCISE_MUSCLE_PATTERNS",
    "infer_head_from_exercise",
    "infer_muscles_from_exercise_name",
]
