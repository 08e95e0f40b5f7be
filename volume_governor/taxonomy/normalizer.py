"""
Normalizer - Map raw muscle labels to canonical MuscleKeys.

Algorithm:
1. Clean (lowercase, trim, collapse whitespace / underscores / hyphens)
2. Exact match against MUSCLE_SYNONYMS
3. Retry with trailing plural "s" stripped, then with spaces removed
4. Generic keys (shoulders) are refined from the exercise name when given
5. Otherwise Unmatched (logged, never raised)

Key rules:
- Pure and total: same input → same output, never raises
- Idempotent: normalize(normalize(x)) == normalize(x)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from volume_governor.taxonomy.inference import infer_head_from_exercise
from volume_governor.taxonomy.muscles import (
    GENERIC_KEYS,
    MUSCLE_SYNONYMS,
    MuscleKey,
    clean_label,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Unmatched:
    """A label that did not resolve to a canonical key."""
    raw: str
    cleaned: str

    def __str__(self) -> str:
        return self.raw


NormalizeResult = Union[MuscleKey, Unmatched]


def _lookup(cleaned: str) -> Optional[MuscleKey]:
    key = MUSCLE_SYNONYMS.get(cleaned)
    if key is not None:
        return key

    if cleaned.endswith("s") and len(cleaned) > 2:
        key = MUSCLE_SYNONYMS.get(cleaned[:-1])
        if key is not None:
            return key

    compact = cleaned.replace(" ", "")
    if compact != cleaned:
        key = MUSCLE_SYNONYMS.get(compact)
        if key is None and compact.endswith("s"):
            key = MUSCLE_SYNONYMS.get(compact[:-1])
    return key


def normalize(raw_label: Any, exercise_name: Optional[str] = None) -> NormalizeResult:
    """
    Normalize a raw muscle label.

    Args:
        raw_label: Free-text muscle name (anatomical, colloquial, Italian,
            or already canonical). Non-strings resolve to Unmatched.
        exercise_name: Optional exercise name used to refine generic labels

    Returns:
        MuscleKey, or Unmatched if the label could not be resolved
    """
    if isinstance(raw_label, Unmatched):
        return raw_label
    if isinstance(raw_label, MuscleKey):
        key = raw_label
    elif isinstance(raw_label, str):
        cleaned = clean_label(raw_label)
        key = _lookup(cleaned) if cleaned else None
        if key is None:
            logger.warning("Unmatched muscle label: '%s' (cleaned '%s')", raw_label, cleaned)
            return Unmatched(raw=raw_label, cleaned=cleaned)
    else:
        logger.warning("Unmatched non-string muscle label: %r", raw_label)
        return Unmatched(raw=repr(raw_label), cleaned="")

    if key in GENERIC_KEYS and exercise_name:
        refined = infer_head_from_exercise(key, exercise_name)
        if refined is not None:
            return refined
    return key


def normalize_many(
    labels: Optional[Iterable[Any]],
    exercise_name: Optional[str] = None,
) -> Tuple[List[MuscleKey], List[Unmatched]]:
    """
    Normalize a list of labels.

    Returns:
        (keys, unmatched) with keys de-duplicated in first-seen order
    """
    keys: List[MuscleKey] = []
    unmatched: List[Unmatched] = []
    for label in labels or []:
        result = normalize(label, exercise_name)
        if isinstance(result, Unmatched):
            unmatched.append(result)
        elif result not in keys:
            keys.append(result)
    return keys, unmatched


__all__ = [
    "Unmatched",
    "NormalizeResult",
    "normalize",
    "normalize_many",
]
