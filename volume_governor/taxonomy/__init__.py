"""
Muscle taxonomy - canonical muscle keys and label normalization.

Modules:
- muscles: MuscleKey enum, synonym table, parent aggregation
- normalizer: normalize() / normalize_many() with Unmatched results
- inference: exercise-name based head refinement and muscle inference
"""

from volume_governor.taxonomy.muscles import (
    MuscleKey,
    MUSCLE_SYNONYMS,
    PARENT_MUSCLE,
    aggregate_to_parent,
    clean_label,
    parent_muscle,
)
from volume_governor.taxonomy.normalizer import (
    Unmatched,
    normalize,
    normalize_many,
)
from volume_governor.taxonomy.inference import (
    infer_head_from_exercise,
    infer_muscles_from_exercise_name,
)

__all__ = [
    "MuscleKey",
    "MUSCLE_SYNONYMS",
    "PARENT_MUSCLE",
    "aggregate_to_parent",
    "clean_label",
    "parent_muscle",
    "Unmatched",
    "normalize",
    "normalize_many",
    "infer_head_from_exercise",
    "infer_muscles_from_exercise_name",
]
