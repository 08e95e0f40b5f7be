"""
Extra-Set Validator - Adding sets to an exercise already in the workout.

Pre-check: workout total-set ceiling, per-exercise set ceiling, technique
support and technique minimum sets.

Contextual: landmark status of the exercise's primary muscles, phase rules
(accumulation fine, intensification prefers techniques over sets, deload
defeats recovery), readiness and technique bans.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.fatigue.builder import readiness_bucket
from volume_governor.fatigue.models import FatigueContext, MesocyclePhase, ReadinessBucket
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.validators.addition import check_total_sets_limit, phase_reasons
from volume_governor.validators.base import (
    BaseValidator,
    muscle_label,
    resolve_target_muscles,
)
from volume_governor.validators.models import (
    Decision,
    ExtraSetProposal,
    Reason,
    ReasonType,
    Severity,
    ValidationVerdict,
)
from volume_governor.volume.models import LandmarkStatus

logger = logging.getLogger(__name__)


class ExtraSetValidator(BaseValidator):
    """Validate adding sets to an existing exercise."""

    name = "extra_set"
    required_fields = ("user_id", "workout.workout_id", "exercise_name")

    def pre_check(
        self,
        proposal: ExtraSetProposal,
        constraints: ConstraintSet,
        methodology: Optional[MethodologyConfig],
    ) -> Optional[ValidationVerdict]:
        if proposal.extra_sets < 1:
            return self.reject(Reason(
                ReasonType.BALANCE, Severity.HIGH, "At least one extra set must be requested.",
            ))

        exercise = proposal.workout.find(proposal.exercise_name)
        if exercise is None:
            return self.reject(Reason(
                ReasonType.BALANCE, Severity.HIGH,
                f"{proposal.exercise_name} is not part of this workout.",
            ))

        total_reason = check_total_sets_limit(proposal.workout, proposal.extra_sets, constraints)
        if total_reason is not None:
            return self.reject(total_reason, ["Swap a set from another exercise instead"])

        per_exercise = constraints.max_sets_per_exercise
        if per_exercise and exercise.sets + proposal.extra_sets > per_exercise:
            return self.reject(Reason(
                ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                f"Methodology allows {per_exercise} sets per exercise; {exercise.name} "
                f"would reach {exercise.sets + proposal.extra_sets}.",
            ))

        technique = proposal.technique
        if technique is not None and methodology is not None:
            if not methodology.supports_technique(technique):
                return self.reject(Reason(
                    ReasonType.EXPERIENCE, Severity.HIGH,
                    f"{methodology.name or methodology.methodology_id} does not use "
                    f"{technique.value.replace('_', ' ')}.",
                ))
            rule = methodology.technique_rules.get(technique)
            if rule is not None and proposal.extra_sets < rule.min_sets:
                return self.reject(Reason(
                    ReasonType.EXPERIENCE, Severity.HIGH,
                    f"{technique.value.replace('_', ' ').capitalize()} needs at least "
                    f"{rule.min_sets} sets in this methodology.",
                ))
        return None

    def evaluate(
        self,
        proposal: ExtraSetProposal,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig],
    ) -> Tuple[List[Reason], List[str]]:
        reasons: List[Reason] = []
        suggestions: List[str] = []
        exercise = proposal.workout.find(proposal.exercise_name)

        muscles = resolve_target_muscles(exercise.primary_muscles, exercise.name)
        for muscle in muscles:
            label = muscle_label(muscle)
            status = constraints.status_for(muscle)
            if status == LandmarkStatus.EXCEEDED_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                    f"{label.capitalize()} is past MRV; extra sets cut into recovery.",
                ))
            elif status == LandmarkStatus.APPROACHING_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.MEDIUM,
                    f"{label.capitalize()} is close to MRV; one more set is the most to add.",
                ))
                suggestions.append("Keep the extra set at the prescribed RIR, no failure work")
            elif status == LandmarkStatus.APPROACHING_MAV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.LOW,
                    f"{label.capitalize()} is near MAV; returns from more sets are shrinking.",
                ))

        if constraints.is_banned(proposal.technique):
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.HIGH,
                f"{proposal.technique.value.replace('_', ' ').capitalize()} is banned today given current fatigue.",
            ))
        elif readiness_bucket(context.readiness_score) == ReadinessBucket.HIGH_FATIGUE:
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.MEDIUM,
                "Readiness is low today; extra sets add fatigue with little return.",
            ))

        if context.mesocycle_phase == MesocyclePhase.INTENSIFICATION:
            if proposal.technique is None:
                reasons.append(Reason(
                    ReasonType.PHASE_MISMATCH, Severity.LOW,
                    "Intensification favors intensity techniques over extra straight sets.",
                ))
                suggestions.append("Extend the last set with a technique instead of adding a set")
        else:
            reasons.extend(phase_reasons(context.mesocycle_phase, "extra sets"))

        return reasons, suggestions

    def summarize(self, proposal: ExtraSetProposal, decision: Decision, reasons: List[Reason]) -> str:
        sets_text = f"{proposal.extra_sets} extra set{'s' if proposal.extra_sets != 1 else ''}"
        if not reasons:
            return f"{sets_text} on {proposal.exercise_name} fits your current volume and phase."
        verb = {
            Decision.APPROVED: "fits",
            Decision.CAUTION: "is possible with trade-offs",
            Decision.REJECTED: "is not advised",
        }[decision]
        return f"{sets_text} on {proposal.exercise_name} {verb}. {reasons[0].message}"


__all__ = ["ExtraSetValidator"]
