"""
Methodology Models - Read-only training approach configuration.

Parses the training approach document shape:
    {
        "id": "fst7",
        "name": "FST-7",
        "isFixedVolume": false,
        "variables": {
            "setsPerExercise": {"working": 4},
            "sets": {"range": [3, 4]},
            "sessionDuration": {"totalSets": [14, 20]},
            "rirTarget": {"normal": 1},
            "exercisesPerSession": 6,
            "volumeCeilingPercent": 20,
        },
        "volumeLandmarks": {"muscleGroups": {"chest": {"mev": 10, "mav": 16, "mrv": 20}}},
        "advancedTechniques": {"dropSet": {"minSets": 2, "requiresConsecutiveSets": false}},
    }

Key rules:
- Landmark muscle names are normalized; invalid rows are logged and skipped
- No advancedTechniques section means every technique is supported
- Snake-case column names (volume_landmarks, advanced_techniques) are accepted
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Optional

from volume_governor.config import (
    DEFAULT_RIR_TARGET,
    DEFAULT_SETS_PER_EXERCISE,
    VOLUME_ADJUSTMENT_MAX,
)
from volume_governor.fatigue.models import TechniqueId
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import Unmatched, normalize
from volume_governor.volume.models import VolumeLandmarks

logger = logging.getLogger(__name__)


# =============================================================================
# TECHNIQUES
# =============================================================================

_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")

# Aliases seen in approach documents
TECHNIQUE_ALIASES: Dict[str, TechniqueId] = {
    "dropset": TechniqueId.DROP_SET,
    "drop_sets": TechniqueId.DROP_SET,
    "restpause": TechniqueId.REST_PAUSE,
    "supersets": TechniqueId.SUPERSET,
    "myoreps": TechniqueId.MYO_REPS,
    "giant_sets": TechniqueId.GIANT_SET,
    "cluster_sets": TechniqueId.CLUSTER_SET,
    "cluster": TechniqueId.CLUSTER_SET,
    "fst7": TechniqueId.FST7_PROTOCOL,
    "fst_7": TechniqueId.FST7_PROTOCOL,
    "fst7_core_protocol": TechniqueId.FST7_PROTOCOL,
    "top_set": TechniqueId.TOP_SET_BACKOFF,
    "backoff_sets": TechniqueId.TOP_SET_BACKOFF,
    "loaded_stretch": TechniqueId.LOADED_STRETCHING,
    "partials": TechniqueId.LENGTHENED_PARTIALS,
    "pre_exhaustion": TechniqueId.PRE_EXHAUST,
}


def parse_technique(name: Any) -> Optional[TechniqueId]:
    """Resolve a technique name (snake, camel or alias form) to a TechniqueId."""
    if isinstance(name, TechniqueId):
        return name
    if not isinstance(name, str) or not name.strip():
        return None
    key = _CAMEL_RE.sub("_", name.strip()).lower().replace("-", "_").replace(" ", "_")
    try:
        return TechniqueId(key)
    except ValueError:
        pass
    if key in TECHNIQUE_ALIASES:
        return TECHNIQUE_ALIASES[key]
    for technique in TechniqueId:
        if key.startswith(technique.value):
            return technique
    return None


@dataclass(frozen=True)
class TechniqueRule:
    """Methodology constraints on one technique."""
    technique: TechniqueId
    min_sets: int = 1
    requires_consecutive_sets: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "technique": self.technique.value,
            "min_sets": self.min_sets,
            "requires_consecutive_sets": self.requires_consecutive_sets,
        }


# =============================================================================
# METHODOLOGY
# =============================================================================

@dataclass(frozen=True)
class MethodologyConfig:
    """Training methodology limits and landmarks."""
    methodology_id: str
    name: str = ""
    landmarks: Dict[MuscleKey, VolumeLandmarks] = field(default_factory=dict)
    max_sets_per_exercise: Optional[int] = None
    max_total_sets_per_workout: Optional[int] = None
    sets_per_exercise: int = DEFAULT_SETS_PER_EXERCISE
    max_exercises_per_session: Optional[int] = None
    is_fixed_volume: bool = False
    rir_target: int = DEFAULT_RIR_TARGET
    volume_ceiling_percent: int = VOLUME_ADJUSTMENT_MAX
    technique_rules: Dict[TechniqueId, TechniqueRule] = field(default_factory=dict)

    @property
    def supported_techniques(self) -> Optional[FrozenSet[TechniqueId]]:
        """Techniques the methodology allows; None when unrestricted."""
        if not self.technique_rules:
            return None
        return frozenset(self.technique_rules)

    def supports_technique(self, technique: TechniqueId) -> bool:
        supported = self.supported_techniques
        return supported is None or technique in supported

    def landmarks_for(self, muscle: MuscleKey) -> Optional[VolumeLandmarks]:
        return self.landmarks.get(muscle)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "methodology_id": self.methodology_id,
            "name": self.name,
            "landmarks": {k.value: v.to_dict() for k, v in self.landmarks.items()},
            "max_sets_per_exercise": self.max_sets_per_exercise,
            "max_total_sets_per_workout": self.max_total_sets_per_workout,
            "sets_per_exercise": self.sets_per_exercise,
            "max_exercises_per_session": self.max_exercises_per_session,
            "is_fixed_volume": self.is_fixed_volume,
            "rir_target": self.rir_target,
            "volume_ceiling_percent": self.volume_ceiling_percent,
            "technique_rules": {k.value: v.to_dict() for k, v in self.technique_rules.items()},
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], methodology_id: Optional[str] = None) -> "MethodologyConfig":
        """Parse an approach document (camelCase or snake_case)."""
        variables = data.get("variables") or {}

        sets_per_exercise_block = variables.get("setsPerExercise") or {}
        working = _as_int(sets_per_exercise_block.get("working")) if isinstance(
            sets_per_exercise_block, dict) else _as_int(sets_per_exercise_block)
        range_max = _range_max((variables.get("sets") or {}).get("range"))
        total_sets_max = _range_max((variables.get("sessionDuration") or {}).get("totalSets"))

        rir_block = variables.get("rirTarget")
        rir_target = _as_int(rir_block.get("normal")) if isinstance(rir_block, dict) else _as_int(rir_block)

        is_fixed = data.get("isFixedVolume", data.get("is_fixed_volume", False))

        return cls(
            methodology_id=str(methodology_id or data.get("id") or data.get("methodology_id") or ""),
            name=str(data.get("name", "")),
            landmarks=_parse_landmarks(data.get("volumeLandmarks", data.get("volume_landmarks"))),
            max_sets_per_exercise=_as_int(data.get("max_sets_per_exercise")) or working or range_max,
            max_total_sets_per_workout=_as_int(data.get("max_total_sets_per_workout")) or total_sets_max,
            sets_per_exercise=working or _as_int(data.get("sets_per_exercise")) or DEFAULT_SETS_PER_EXERCISE,
            max_exercises_per_session=_as_int(
                variables.get("exercisesPerSession", data.get("max_exercises_per_session"))
            ),
            is_fixed_volume=bool(is_fixed),
            rir_target=rir_target if rir_target is not None else DEFAULT_RIR_TARGET,
            volume_ceiling_percent=_as_int(
                variables.get("volumeCeilingPercent", data.get("volume_ceiling_percent"))
            ) or VOLUME_ADJUSTMENT_MAX,
            technique_rules=_parse_techniques(
                data.get("advancedTechniques", data.get("advanced_techniques"))
            ),
        )


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def _range_max(value: Any) -> Optional[int]:
    if isinstance(value, (list, tuple)) and len(value) >= 2:
        return _as_int(value[1])
    return None


def _parse_landmarks(block: Any) -> Dict[MuscleKey, VolumeLandmarks]:
    if not isinstance(block, dict):
        return {}
    groups = block.get("muscleGroups", block.get("muscle_groups", block))
    landmarks: Dict[MuscleKey, VolumeLandmarks] = {}
    for raw_muscle, row in (groups or {}).items():
        if not isinstance(row, dict) or not {"mev", "mav", "mrv"} <= set(row):
            continue
        key = normalize(raw_muscle)
        if isinstance(key, Unmatched):
            logger.warning("Skipping landmarks for unknown muscle '%s'", raw_muscle)
            continue
        try:
            landmarks[key] = VolumeLandmarks.from_dict(row)
        except (TypeError, ValueError) as e:
            logger.warning("Skipping invalid landmarks for %s: %s", raw_muscle, e)
    return landmarks


def _parse_techniques(block: Any) -> Dict[TechniqueId, TechniqueRule]:
    if isinstance(block, (list, tuple)):
        block = {name: {} for name in block}
    if not isinstance(block, dict):
        return {}
    rules: Dict[TechniqueId, TechniqueRule] = {}
    for raw_name, row in block.items():
        technique = parse_technique(raw_name)
        if technique is None:
            logger.debug("Ignoring unknown technique '%s'", raw_name)
            continue
        row = row if isinstance(row, dict) else {}
        rules[technique] = TechniqueRule(
            technique=technique,
            min_sets=_as_int(row.get("minSets", row.get("min_sets"))) or 1,
            requires_consecutive_sets=bool(
                row.get("requiresConsecutiveSets", row.get("requires_consecutive_sets", False))
            ),
        )
    return rules


__all__ = [
    "TECHNIQUE_ALIASES",
    "parse_technique",
    "TechniqueRule",
    "MethodologyConfig",
]
