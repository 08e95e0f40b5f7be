"""
Split-Type-Change Validator - Switching the split of the current cycle.

Impact analysis (deterministic):
- per muscle: (current_sets, estimated_new_sets, classification) where the
  classification threshold is a >20% relative change
- per muscle: times trained per cycle before / after

Volume estimates hold per-session muscle volume constant and scale by
frequency; weak-point muscles get +50% on a weak_point_focus split.

Recommendation:
- not_recommended: mid-cycle while readiness is in the high-fatigue bucket
- wait: any muscle swings >20% during a deload, or other medium concerns
- proceed: otherwise
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from volume_governor.config import SPLIT_CHANGE_THRESHOLD, WEAK_POINT_VOLUME_MULTIPLIER
from volume_governor.constraints.models import ConstraintSet
from volume_governor.errors import InvalidCount, MalformedProposal
from volume_governor.fatigue.builder import readiness_bucket
from volume_governor.fatigue.models import FatigueContext, MesocyclePhase, ReadinessBucket
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import Unmatched, normalize, normalize_many
from volume_governor.validators.base import BaseValidator, muscle_label
from volume_governor.validators.models import (
    Decision,
    Reason,
    ReasonType,
    Severity,
    SplitChangeProposal,
    ValidationVerdict,
)
from volume_governor.volume.ledger import validate_count

logger = logging.getLogger(__name__)


# =============================================================================
# SPLIT CHARACTERISTICS
# =============================================================================

class SplitType(str, Enum):
    PUSH_PULL_LEGS = "push_pull_legs"
    UPPER_LOWER = "upper_lower"
    FULL_BODY = "full_body"
    BRO_SPLIT = "bro_split"
    WEAK_POINT_FOCUS = "weak_point_focus"
    CUSTOM = "custom"


@dataclass(frozen=True)
class SplitProfile:
    cycle_days: Optional[int]
    frequency: Optional[int]  # times each muscle is trained per cycle
    session_sets: Optional[Tuple[int, int]]


SPLIT_PROFILES: Dict[SplitType, SplitProfile] = {
    SplitType.PUSH_PULL_LEGS: SplitProfile(6, 2, (12, 18)),
    SplitType.UPPER_LOWER: SplitProfile(4, 2, (15, 22)),
    SplitType.FULL_BODY: SplitProfile(3, 3, (10, 15)),
    SplitType.BRO_SPLIT: SplitProfile(5, 1, (20, 30)),
    SplitType.WEAK_POINT_FOCUS: SplitProfile(6, 2, None),
    SplitType.CUSTOM: SplitProfile(None, None, None),
}

WEAK_POINT_FREQUENCY = 3


class SplitRecommendation(str, Enum):
    PROCEED = "proceed"
    WAIT = "wait"
    NOT_RECOMMENDED = "not_recommended"


class ChangeClassification(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    SIMILAR = "similar"


RECOMMENDATION_FOR_DECISION = {
    Decision.APPROVED: SplitRecommendation.PROCEED,
    Decision.CAUTION: SplitRecommendation.WAIT,
    Decision.REJECTED: SplitRecommendation.NOT_RECOMMENDED,
}


def classify_change(
    before: float,
    after: float,
    threshold: float = SPLIT_CHANGE_THRESHOLD,
) -> ChangeClassification:
    """Classify a relative change; more than `threshold` counts as a change."""
    if before <= 0:
        return ChangeClassification.INCREASE if after > 0 else ChangeClassification.SIMILAR
    relative = (after - before) / before
    if relative > threshold:
        return ChangeClassification.INCREASE
    if relative < -threshold:
        return ChangeClassification.DECREASE
    return ChangeClassification.SIMILAR


# =============================================================================
# IMPACT MODELS
# =============================================================================

@dataclass(frozen=True)
class VolumeImpact:
    muscle: MuscleKey
    current_sets: int
    estimated_new_sets: int
    classification: ChangeClassification

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "current_sets": self.current_sets,
            "estimated_new_sets": self.estimated_new_sets,
            "classification": self.classification.value,
        }


@dataclass(frozen=True)
class FrequencyImpact:
    muscle: MuscleKey
    current_frequency: Optional[int]
    new_frequency: Optional[int]
    classification: ChangeClassification

    def to_dict(self) -> Dict[str, Any]:
        return {
            "muscle": self.muscle.value,
            "current_frequency": self.current_frequency,
            "new_frequency": self.new_frequency,
            "classification": self.classification.value,
        }


@dataclass(frozen=True)
class SplitChangeVerdict(ValidationVerdict):
    recommendation: SplitRecommendation = SplitRecommendation.PROCEED
    volume_changes: Tuple[VolumeImpact, ...] = ()
    frequency_changes: Tuple[FrequencyImpact, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["recommendation"] = self.recommendation.value
        data["volume_changes"] = [v.to_dict() for v in self.volume_changes]
        data["frequency_changes"] = [f.to_dict() for f in self.frequency_changes]
        return data


def parse_split(value: Any, field_name: str) -> SplitType:
    try:
        return SplitType(str(value).strip().lower())
    except ValueError:
        raise MalformedProposal(f"Unknown split type: {value!r}", field=field_name)


def _muscle_frequency(split: SplitType, muscle: MuscleKey, weak_points: frozenset) -> Optional[int]:
    if split == SplitType.WEAK_POINT_FOCUS and muscle in weak_points:
        return WEAK_POINT_FREQUENCY
    return SPLIT_PROFILES[split].frequency


def compute_impacts(
    proposal: SplitChangeProposal,
) -> Tuple[Tuple[VolumeImpact, ...], Tuple[FrequencyImpact, ...]]:
    """Per-muscle volume and frequency deltas for a split change."""
    current_split = parse_split(proposal.current_split, "current_split")
    target_split = parse_split(proposal.target_split, "target_split")
    weak_keys, _ = normalize_many(proposal.weak_point_muscles)
    weak_points = frozenset(weak_keys)

    volume: Dict[MuscleKey, int] = {}
    for raw, sets in (proposal.current_volume or {}).items():
        key = normalize(raw)
        if isinstance(key, Unmatched):
            continue
        try:
            count = validate_count(sets)
        except InvalidCount as e:
            raise MalformedProposal(f"current_volume[{raw!r}]: {e}", field="current_volume") from e
        volume[key] = volume.get(key, 0) + count
    for key in weak_points:
        volume.setdefault(key, 0)

    volume_changes: List[VolumeImpact] = []
    frequency_changes: List[FrequencyImpact] = []
    for muscle in sorted(volume, key=lambda k: k.value):
        current = volume[muscle]
        old_freq = _muscle_frequency(current_split, muscle, frozenset())
        new_freq = _muscle_frequency(target_split, muscle, weak_points)

        if target_split == SplitType.WEAK_POINT_FOCUS and muscle in weak_points:
            estimate = current * WEAK_POINT_VOLUME_MULTIPLIER
        elif old_freq and new_freq:
            estimate = current * new_freq / old_freq
        else:
            estimate = float(current)
        estimated = int(round(estimate))

        volume_changes.append(VolumeImpact(
            muscle=muscle,
            current_sets=current,
            estimated_new_sets=estimated,
            classification=classify_change(current, estimated),
        ))
        frequency_changes.append(FrequencyImpact(
            muscle=muscle,
            current_frequency=old_freq,
            new_frequency=new_freq,
            classification=(
                classify_change(old_freq, new_freq, threshold=0.0)
                if old_freq and new_freq else ChangeClassification.SIMILAR
            ),
        ))
    return tuple(volume_changes), tuple(frequency_changes)


# =============================================================================
# VALIDATOR
# =============================================================================

class SplitTypeChangeValidator(BaseValidator):
    """Validate a split-type change."""

    name = "split_change"
    required_fields = ("user_id", "current_split", "target_split")

    def validate(
        self,
        proposal: SplitChangeProposal,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig] = None,
    ) -> SplitChangeVerdict:
        verdict = super().validate(proposal, constraints, context, methodology)
        volume_changes, frequency_changes = compute_impacts(proposal)
        return SplitChangeVerdict(
            decision=verdict.decision,
            reasons=verdict.reasons,
            suggestions=verdict.suggestions,
            reasoning=verdict.reasoning,
            validator=verdict.validator,
            pre_check=verdict.pre_check,
            recommendation=RECOMMENDATION_FOR_DECISION[verdict.decision],
            volume_changes=volume_changes,
            frequency_changes=frequency_changes,
        )

    def require_identifiers(self, proposal: SplitChangeProposal) -> None:
        super().require_identifiers(proposal)
        parse_split(proposal.current_split, "current_split")
        parse_split(proposal.target_split, "target_split")

    def pre_check(
        self,
        proposal: SplitChangeProposal,
        constraints: ConstraintSet,
        methodology: Optional[MethodologyConfig],
    ) -> Optional[ValidationVerdict]:
        target = parse_split(proposal.target_split, "target_split")
        profile = SPLIT_PROFILES[target]
        limit = constraints.max_total_sets_per_workout
        if limit and profile.session_sets and profile.session_sets[0] > limit:
            return self.reject(Reason(
                ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                f"{target.value.replace('_', ' ').title()} sessions need {profile.session_sets[0]}+ sets; "
                f"methodology caps workouts at {limit}.",
            ), ["Pick a higher-frequency split with shorter sessions"])

        if target == SplitType.WEAK_POINT_FOCUS:
            weak_keys, _ = normalize_many(proposal.weak_point_muscles)
            if not weak_keys:
                return self.reject(Reason(
                    ReasonType.BALANCE, Severity.HIGH,
                    "Weak point focus needs at least one recognized focus muscle.",
                ))
        return None

    def evaluate(
        self,
        proposal: SplitChangeProposal,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig],
    ) -> Tuple[List[Reason], List[str]]:
        reasons: List[Reason] = []
        suggestions: List[str] = []

        current = parse_split(proposal.current_split, "current_split")
        target = parse_split(proposal.target_split, "target_split")
        if current == target and target != SplitType.CUSTOM:
            reasons.append(Reason(
                ReasonType.REDUNDANCY, Severity.HIGH,
                f"You are already on a {target.value.replace('_', ' ')} split.",
            ))
            return reasons, suggestions

        volume_changes, _ = compute_impacts(proposal)
        swings = [v for v in volume_changes if v.classification != ChangeClassification.SIMILAR]
        bucket = readiness_bucket(context.readiness_score)

        # Timing
        if context.is_mid_cycle and bucket == ReadinessBucket.HIGH_FATIGUE:
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.HIGH,
                "Mid-cycle while fatigued: you need recovery, not a new stimulus pattern.",
            ))
            suggestions.append("Finish the cycle with reduced volume or take a deload first")
        elif bucket == ReadinessBucket.HIGH_FATIGUE:
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.MEDIUM,
                "Readiness is low; change splits once readiness is above 3.5.",
            ))
        elif context.is_mid_cycle and 0.25 <= (context.cycle_progress or 0) < 0.75:
            reasons.append(Reason(
                ReasonType.FREQUENCY, Severity.MEDIUM,
                "Mid-cycle changes disrupt periodization; consider finishing the cycle first.",
            ))
            suggestions.append("Switch at the start of the next cycle")

        if context.mesocycle_phase == MesocyclePhase.DELOAD and swings:
            reasons.append(Reason(
                ReasonType.PHASE_MISMATCH, Severity.MEDIUM,
                f"Deload week: the change swings {len(swings)} muscle(s) by more than 20%.",
            ))
            suggestions.append("Apply the new split after the deload")

        # Landmarks on estimated volume
        landmarks = methodology.landmarks if methodology is not None else {}
        for impact in volume_changes:
            row = landmarks.get(impact.muscle)
            if row is None:
                continue
            label = muscle_label(impact.muscle)
            if impact.classification == ChangeClassification.INCREASE and impact.estimated_new_sets >= row.mrv:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.MEDIUM,
                    f"{label.capitalize()} would reach about {impact.estimated_new_sets} sets, at or above MRV ({row.mrv}).",
                ))
            elif impact.classification == ChangeClassification.DECREASE and impact.estimated_new_sets < row.mev:
                reasons.append(Reason(
                    ReasonType.BALANCE, Severity.LOW,
                    f"{label.capitalize()} would drop to about {impact.estimated_new_sets} sets, below MEV ({row.mev}).",
                ))

        return reasons, suggestions

    def summarize(self, proposal: SplitChangeProposal, decision: Decision, reasons: List[Reason]) -> str:
        change = (
            f"Switching from {str(proposal.current_split).replace('_', ' ')} to "
            f"{str(proposal.target_split).replace('_', ' ')}"
        )
        if not reasons:
            return f"{change} is well timed for your current state."
        verb = {
            Decision.APPROVED: "can proceed",
            Decision.CAUTION: "should wait",
            Decision.REJECTED: "is not recommended now",
        }[decision]
        return f"{change} {verb}. {reasons[0].message}"


__all__ = [
    "SplitType",
    "SplitProfile",
    "SPLIT_PROFILES",
    "SplitRecommendation",
    "ChangeClassification",
    "classify_change",
    "VolumeImpact",
    "FrequencyImpact",
    "SplitChangeVerdict",
    "compute_impacts",
    "SplitTypeChangeValidator",
]
