"""
Muscles - Canonical muscle keys and synonym tables.

Architecture:
- MuscleKey = closed set of canonical keys (output vocabulary, fixed spelling)
- MUSCLE_SYNONYMS = cleaned label -> canonical key (input vocabulary)
- PARENT_MUSCLE = head / region -> parent group (for aggregation)

Key rules:
- Every canonical key has an identity entry (normalization is idempotent)
- Synonym keys are stored in cleaned form: lowercase, single spaces, no underscores
- Generic "back" maps to upper_back (most common usage in pull workouts)
- Rotator cuff and shoulder stabilizers roll into generic shoulders
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, Mapping


class MuscleKey(str, Enum):
    """Canonical muscle identifiers."""
    CHEST = "chest"
    CHEST_UPPER = "chest_upper"
    CHEST_LOWER = "chest_lower"
    SHOULDERS = "shoulders"
    SHOULDERS_FRONT = "shoulders_front"
    SHOULDERS_SIDE = "shoulders_side"
    SHOULDERS_REAR = "shoulders_rear"
    TRICEPS = "triceps"
    TRICEPS_LONG = "triceps_long"
    TRICEPS_LATERAL = "triceps_lateral"
    TRICEPS_MEDIAL = "triceps_medial"
    LATS = "lats"
    UPPER_BACK = "upper_back"
    LOWER_BACK = "lowerBack"
    TRAPS = "traps"
    BICEPS = "biceps"
    FOREARMS = "forearms"
    QUADS = "quads"
    HAMSTRINGS = "hamstrings"
    GLUTES = "glutes"
    CALVES = "calves"
    ABS = "abs"
    OBLIQUES = "obliques"
    SERRATUS = "serratus"
    ADDUCTORS = "adductors"
    ABDUCTORS = "abductors"
    HIP_FLEXORS = "hipFlexors"


_SEPARATORS_RE = re.compile(r"[\s_\-]+")


def clean_label(label: str) -> str:
    """Lowercase, trim, and collapse whitespace / underscores / hyphens to one space."""
    return _SEPARATORS_RE.sub(" ", label.strip().lower()).strip()


# Generic keys that may be refined from the exercise name
GENERIC_KEYS = frozenset({MuscleKey.SHOULDERS})


# =============================================================================
# SYNONYM TABLE
# =============================================================================

_SYNONYMS: Dict[str, MuscleKey] = {
    # -------------------------------------------------------------------------
    # Chest
    # -------------------------------------------------------------------------
    "pectoralis major": MuscleKey.CHEST,
    "pectoralis minor": MuscleKey.CHEST,
    "pectoralis": MuscleKey.CHEST,
    "pectorals": MuscleKey.CHEST,
    "pectoral": MuscleKey.CHEST,
    "pecs": MuscleKey.CHEST,
    "pec": MuscleKey.CHEST,
    "pec major": MuscleKey.CHEST,
    "mid chest": MuscleKey.CHEST,
    "middle chest": MuscleKey.CHEST,
    "petto": MuscleKey.CHEST,
    "pettorali": MuscleKey.CHEST,
    "pettorale": MuscleKey.CHEST,

    "clavicular pectoralis": MuscleKey.CHEST_UPPER,
    "clavicular pec": MuscleKey.CHEST_UPPER,
    "clavicular pecs": MuscleKey.CHEST_UPPER,
    "clavicular head": MuscleKey.CHEST_UPPER,
    "upper pectoralis": MuscleKey.CHEST_UPPER,
    "upper pectoralis major": MuscleKey.CHEST_UPPER,
    "upper pec": MuscleKey.CHEST_UPPER,
    "upper pecs": MuscleKey.CHEST_UPPER,
    "pectoralis upper": MuscleKey.CHEST_UPPER,
    "upper chest": MuscleKey.CHEST_UPPER,
    "incline chest": MuscleKey.CHEST_UPPER,
    "petto alto": MuscleKey.CHEST_UPPER,
    "petto superiore": MuscleKey.CHEST_UPPER,

    "sternal pectoralis": MuscleKey.CHEST_LOWER,
    "sternal pec": MuscleKey.CHEST_LOWER,
    "sternal pecs": MuscleKey.CHEST_LOWER,
    "sternal head": MuscleKey.CHEST_LOWER,
    "lower pectoralis": MuscleKey.CHEST_LOWER,
    "lower pectoralis major": MuscleKey.CHEST_LOWER,
    "lower pec": MuscleKey.CHEST_LOWER,
    "lower pecs": MuscleKey.CHEST_LOWER,
    "pectoralis lower": MuscleKey.CHEST_LOWER,
    "lower chest": MuscleKey.CHEST_LOWER,
    "decline chest": MuscleKey.CHEST_LOWER,
    "petto basso": MuscleKey.CHEST_LOWER,
    "petto inferiore": MuscleKey.CHEST_LOWER,

    # -------------------------------------------------------------------------
    # Shoulders
    # -------------------------------------------------------------------------
    "deltoid": MuscleKey.SHOULDERS,
    "deltoids": MuscleKey.SHOULDERS,
    "deltoideus": MuscleKey.SHOULDERS,
    "shoulder": MuscleKey.SHOULDERS,
    "delts": MuscleKey.SHOULDERS,
    "delt": MuscleKey.SHOULDERS,
    "spalle": MuscleKey.SHOULDERS,
    "spalla": MuscleKey.SHOULDERS,
    "deltoidi": MuscleKey.SHOULDERS,
    "rotator cuff": MuscleKey.SHOULDERS,
    "supraspinatus": MuscleKey.SHOULDERS,
    "infraspinatus": MuscleKey.SHOULDERS,
    "teres minor": MuscleKey.SHOULDERS,
    "subscapularis": MuscleKey.SHOULDERS,
    "shoulder stabilizers": MuscleKey.SHOULDERS,

    "anterior deltoid": MuscleKey.SHOULDERS_FRONT,
    "anterior deltoids": MuscleKey.SHOULDERS_FRONT,
    "anterior delt": MuscleKey.SHOULDERS_FRONT,
    "front deltoid": MuscleKey.SHOULDERS_FRONT,
    "front delt": MuscleKey.SHOULDERS_FRONT,
    "front delts": MuscleKey.SHOULDERS_FRONT,
    "front shoulders": MuscleKey.SHOULDERS_FRONT,
    "deltoidi anteriori": MuscleKey.SHOULDERS_FRONT,
    "deltoide anteriore": MuscleKey.SHOULDERS_FRONT,

    "lateral deltoid": MuscleKey.SHOULDERS_SIDE,
    "lateral deltoids": MuscleKey.SHOULDERS_SIDE,
    "lateral delt": MuscleKey.SHOULDERS_SIDE,
    "middle deltoid": MuscleKey.SHOULDERS_SIDE,
    "medial deltoid": MuscleKey.SHOULDERS_SIDE,
    "side deltoid": MuscleKey.SHOULDERS_SIDE,
    "side delt": MuscleKey.SHOULDERS_SIDE,
    "side delts": MuscleKey.SHOULDERS_SIDE,
    "side shoulders": MuscleKey.SHOULDERS_SIDE,
    "deltoidi laterali": MuscleKey.SHOULDERS_SIDE,
    "deltoide laterale": MuscleKey.SHOULDERS_SIDE,

    "posterior deltoid": MuscleKey.SHOULDERS_REAR,
    "posterior deltoids": MuscleKey.SHOULDERS_REAR,
    "posterior delt": MuscleKey.SHOULDERS_REAR,
    "rear deltoid": MuscleKey.SHOULDERS_REAR,
    "rear delt": MuscleKey.SHOULDERS_REAR,
    "rear delts": MuscleKey.SHOULDERS_REAR,
    "rear shoulders": MuscleKey.SHOULDERS_REAR,
    "deltoidi posteriori": MuscleKey.SHOULDERS_REAR,
    "deltoide posteriore": MuscleKey.SHOULDERS_REAR,

    # -------------------------------------------------------------------------
    # Triceps
    # -------------------------------------------------------------------------
    "triceps brachii": MuscleKey.TRICEPS,
    "tricep": MuscleKey.TRICEPS,
    "tricipiti": MuscleKey.TRICEPS,
    "tricipite": MuscleKey.TRICEPS,

    "long head triceps": MuscleKey.TRICEPS_LONG,
    "triceps long head": MuscleKey.TRICEPS_LONG,
    "long head": MuscleKey.TRICEPS_LONG,

    "lateral head triceps": MuscleKey.TRICEPS_LATERAL,
    "triceps lateral head": MuscleKey.TRICEPS_LATERAL,
    "lateral head": MuscleKey.TRICEPS_LATERAL,

    "medial head triceps": MuscleKey.TRICEPS_MEDIAL,
    "triceps medial head": MuscleKey.TRICEPS_MEDIAL,
    "medial head": MuscleKey.TRICEPS_MEDIAL,

    # -------------------------------------------------------------------------
    # Back
    # -------------------------------------------------------------------------
    "latissimus dorsi": MuscleKey.LATS,
    "latissimus": MuscleKey.LATS,
    "lat": MuscleKey.LATS,
    "teres major": MuscleKey.LATS,
    "dorsali": MuscleKey.LATS,
    "dorsale": MuscleKey.LATS,
    "gran dorsale": MuscleKey.LATS,

    "rhomboids": MuscleKey.UPPER_BACK,
    "rhomboid": MuscleKey.UPPER_BACK,
    "upperback": MuscleKey.UPPER_BACK,
    "mid back": MuscleKey.UPPER_BACK,
    "middle back": MuscleKey.UPPER_BACK,
    "back": MuscleKey.UPPER_BACK,
    "back muscles": MuscleKey.UPPER_BACK,
    "entire back": MuscleKey.UPPER_BACK,
    "full back": MuscleKey.UPPER_BACK,
    "scapular stabilizers": MuscleKey.UPPER_BACK,
    "scapular": MuscleKey.UPPER_BACK,
    "teres": MuscleKey.UPPER_BACK,
    "schiena": MuscleKey.UPPER_BACK,
    "schiena alta": MuscleKey.UPPER_BACK,
    "romboidi": MuscleKey.UPPER_BACK,

    "lower back": MuscleKey.LOWER_BACK,
    "low back": MuscleKey.LOWER_BACK,
    "lumbar": MuscleKey.LOWER_BACK,
    "lumbars": MuscleKey.LOWER_BACK,
    "erector spinae": MuscleKey.LOWER_BACK,
    "erectors": MuscleKey.LOWER_BACK,
    "spinal erectors": MuscleKey.LOWER_BACK,
    "lombare": MuscleKey.LOWER_BACK,
    "lombari": MuscleKey.LOWER_BACK,
    "schiena bassa": MuscleKey.LOWER_BACK,

    "trapezius": MuscleKey.TRAPS,
    "trap": MuscleKey.TRAPS,
    "upper trapezius": MuscleKey.TRAPS,
    "middle trapezius": MuscleKey.TRAPS,
    "lower trapezius": MuscleKey.TRAPS,
    "upper traps": MuscleKey.TRAPS,
    "trapezi": MuscleKey.TRAPS,
    "trapezio": MuscleKey.TRAPS,

    # -------------------------------------------------------------------------
    # Arms
    # -------------------------------------------------------------------------
    "biceps brachii": MuscleKey.BICEPS,
    "bicep": MuscleKey.BICEPS,
    "brachialis": MuscleKey.BICEPS,
    "long head biceps": MuscleKey.BICEPS,
    "short head biceps": MuscleKey.BICEPS,
    "bicipiti": MuscleKey.BICEPS,
    "bicipite": MuscleKey.BICEPS,

    "forearm": MuscleKey.FOREARMS,
    "brachioradialis": MuscleKey.FOREARMS,
    "wrist flexors": MuscleKey.FOREARMS,
    "wrist extensors": MuscleKey.FOREARMS,
    "grip": MuscleKey.FOREARMS,
    "avambracci": MuscleKey.FOREARMS,
    "avambraccio": MuscleKey.FOREARMS,

    # -------------------------------------------------------------------------
    # Legs
    # -------------------------------------------------------------------------
    "quadriceps": MuscleKey.QUADS,
    "quadriceps femoris": MuscleKey.QUADS,
    "quad": MuscleKey.QUADS,
    "quadricep": MuscleKey.QUADS,
    "rectus femoris": MuscleKey.QUADS,
    "vastus lateralis": MuscleKey.QUADS,
    "vastus medialis": MuscleKey.QUADS,
    "vastus medialis oblique": MuscleKey.QUADS,
    "vmo": MuscleKey.QUADS,
    "vastus intermedius": MuscleKey.QUADS,
    "quadricipiti": MuscleKey.QUADS,
    "quadricipite": MuscleKey.QUADS,

    "hamstring": MuscleKey.HAMSTRINGS,
    "hams": MuscleKey.HAMSTRINGS,
    "biceps femoris": MuscleKey.HAMSTRINGS,
    "semitendinosus": MuscleKey.HAMSTRINGS,
    "semimembranosus": MuscleKey.HAMSTRINGS,
    "femorali": MuscleKey.HAMSTRINGS,
    "femorale": MuscleKey.HAMSTRINGS,
    "ischiocrurali": MuscleKey.HAMSTRINGS,

    "gluteus maximus": MuscleKey.GLUTES,
    "gluteus medius": MuscleKey.GLUTES,
    "gluteus minimus": MuscleKey.GLUTES,
    "gluteus": MuscleKey.GLUTES,
    "glute": MuscleKey.GLUTES,
    "gluteal": MuscleKey.GLUTES,
    "glute max": MuscleKey.GLUTES,
    "glute med": MuscleKey.GLUTES,
    "glutei": MuscleKey.GLUTES,
    "gluteo": MuscleKey.GLUTES,

    "gastrocnemius": MuscleKey.CALVES,
    "soleus": MuscleKey.CALVES,
    "calf": MuscleKey.CALVES,
    "polpacci": MuscleKey.CALVES,
    "polpaccio": MuscleKey.CALVES,

    "adductor": MuscleKey.ADDUCTORS,
    "adductor magnus": MuscleKey.ADDUCTORS,
    "adductor longus": MuscleKey.ADDUCTORS,
    "adductor brevis": MuscleKey.ADDUCTORS,
    "gracilis": MuscleKey.ADDUCTORS,
    "inner thigh": MuscleKey.ADDUCTORS,
    "adduttori": MuscleKey.ADDUCTORS,

    "abductor": MuscleKey.ABDUCTORS,
    "tensor fasciae latae": MuscleKey.ABDUCTORS,
    "tfl": MuscleKey.ABDUCTORS,
    "outer thigh": MuscleKey.ABDUCTORS,
    "abduttori": MuscleKey.ABDUCTORS,

    "iliopsoas": MuscleKey.HIP_FLEXORS,
    "hip flexor": MuscleKey.HIP_FLEXORS,
    "psoas": MuscleKey.HIP_FLEXORS,
    "iliacus": MuscleKey.HIP_FLEXORS,
    "flessori dell'anca": MuscleKey.HIP_FLEXORS,

    # -------------------------------------------------------------------------
    # Core
    # -------------------------------------------------------------------------
    "rectus abdominis": MuscleKey.ABS,
    "abdominals": MuscleKey.ABS,
    "abdominal": MuscleKey.ABS,
    "ab": MuscleKey.ABS,
    "core": MuscleKey.ABS,
    "anterior core": MuscleKey.ABS,
    "six pack": MuscleKey.ABS,
    "transverse abdominis": MuscleKey.ABS,
    "addominali": MuscleKey.ABS,
    "addome": MuscleKey.ABS,

    "oblique": MuscleKey.OBLIQUES,
    "obliqes": MuscleKey.OBLIQUES,  # common typo
    "external obliques": MuscleKey.OBLIQUES,
    "internal obliques": MuscleKey.OBLIQUES,
    "external oblique": MuscleKey.OBLIQUES,
    "internal oblique": MuscleKey.OBLIQUES,
    "obliqui": MuscleKey.OBLIQUES,

    "serratus anterior": MuscleKey.SERRATUS,
    "dentato": MuscleKey.SERRATUS,
    "dentato anteriore": MuscleKey.SERRATUS,
}


def _build_synonyms() -> Dict[str, MuscleKey]:
    table: Dict[str, MuscleKey] = {}
    # Identity mappings: snake_case and camelCase canonical spellings
    for key in MuscleKey:
        table[clean_label(key.value)] = key
        table[clean_label(key.name)] = key
    for label, key in _SYNONYMS.items():
        table[clean_label(label)] = key
    return table


MUSCLE_SYNONYMS: Mapping[str, MuscleKey] = _build_synonyms()


# =============================================================================
# AGGREGATION
# =============================================================================

PARENT_MUSCLE: Dict[MuscleKey, MuscleKey] = {
    MuscleKey.CHEST_UPPER: MuscleKey.CHEST,
    MuscleKey.CHEST_LOWER: MuscleKey.CHEST,
    MuscleKey.SHOULDERS_FRONT: MuscleKey.SHOULDERS,
    MuscleKey.SHOULDERS_SIDE: MuscleKey.SHOULDERS,
    MuscleKey.SHOULDERS_REAR: MuscleKey.SHOULDERS,
    MuscleKey.TRICEPS_LONG: MuscleKey.TRICEPS,
    MuscleKey.TRICEPS_LATERAL: MuscleKey.TRICEPS,
    MuscleKey.TRICEPS_MEDIAL: MuscleKey.TRICEPS,
}


def parent_muscle(key: MuscleKey) -> MuscleKey:
    """Return the parent group of a muscle head (or the key itself)."""
    return PARENT_MUSCLE.get(key, key)


def aggregate_to_parent(volume: Mapping[MuscleKey, int]) -> Dict[MuscleKey, int]:
    """
    Fold head-level volume into parent groups.

    {"shoulders_side": 6, "shoulders_rear": 4} -> {"shoulders": 10}
    """
    aggregated: Dict[MuscleKey, int] = {}
    for key, sets in volume.items():
        parent = parent_muscle(key)
        aggregated[parent] = aggregated.get(parent, 0) + sets
    return aggregated


__all__ = [
    "MuscleKey",
    "MUSCLE_SYNONYMS",
    "GENERIC_KEYS",
    "PARENT_MUSCLE",
    "clean_label",
    "parent_muscle",
    "aggregate_to_parent",
]
