"""
Substitution Validator - Replacing one exercise with another.

A like-for-like swap is volume neutral for the muscles both exercises share,
so landmark checks only apply to muscles the replacement newly loads.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.fatigue.models import EquipmentPreference, FatigueContext
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.taxonomy.muscles import parent_muscle
from volume_governor.validators.base import (
    BaseValidator,
    muscle_label,
    resolve_target_muscles,
)
from volume_governor.validators.models import (
    Decision,
    Reason,
    ReasonType,
    Severity,
    SubstitutionProposal,
    ValidationVerdict,
)
from volume_governor.volume.models import LandmarkStatus

logger = logging.getLogger(__name__)


class SubstitutionValidator(BaseValidator):
    """Validate swapping an exercise."""

    name = "substitution"
    required_fields = (
        "user_id", "workout.workout_id", "current_exercise", "replacement_exercise",
    )

    def pre_check(
        self,
        proposal: SubstitutionProposal,
        constraints: ConstraintSet,
        methodology: Optional[MethodologyConfig],
    ) -> Optional[ValidationVerdict]:
        current = proposal.workout.find(proposal.current_exercise)
        if current is None:
            return self.reject(Reason(
                ReasonType.BALANCE, Severity.HIGH,
                f"{proposal.current_exercise} is not part of this workout.",
            ))

        new_sets = proposal.replacement_sets if proposal.replacement_sets is not None else current.sets
        per_exercise = constraints.max_sets_per_exercise
        if per_exercise and new_sets > per_exercise:
            return self.reject(Reason(
                ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                f"Methodology allows {per_exercise} sets per exercise; the replacement has {new_sets}.",
            ))

        limit = constraints.max_total_sets_per_workout
        projected = proposal.workout.total_sets - current.sets + new_sets
        if limit and projected > limit:
            return self.reject(Reason(
                ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                f"The swap brings the workout to {projected} sets, above the {limit}-set limit.",
            ))

        if (proposal.technique is not None and methodology is not None
                and not methodology.supports_technique(proposal.technique)):
            return self.reject(Reason(
                ReasonType.EXPERIENCE, Severity.HIGH,
                f"{methodology.name or methodology.methodology_id} does not use "
                f"{proposal.technique.value.replace('_', ' ')}.",
            ))
        return None

    def evaluate(
        self,
        proposal: SubstitutionProposal,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig],
    ) -> Tuple[List[Reason], List[str]]:
        reasons: List[Reason] = []
        suggestions: List[str] = []
        current = proposal.workout.find(proposal.current_exercise)

        if proposal.replacement_exercise.strip().lower() == current.name.strip().lower():
            reasons.append(Reason(
                ReasonType.REDUNDANCY, Severity.MEDIUM,
                "The replacement is the same exercise.",
            ))
        elif proposal.workout.find(proposal.replacement_exercise) is not None:
            reasons.append(Reason(
                ReasonType.REDUNDANCY, Severity.MEDIUM,
                f"{proposal.replacement_exercise} is already in this workout.",
            ))

        old_muscles = resolve_target_muscles(current.primary_muscles, current.name)
        new_muscles = resolve_target_muscles(
            proposal.replacement_muscles, proposal.replacement_exercise
        )

        old_parents = {parent_muscle(m) for m in old_muscles}
        if old_muscles and new_muscles and not old_parents & {parent_muscle(m) for m in new_muscles}:
            reasons.append(Reason(
                ReasonType.BALANCE, Severity.MEDIUM,
                f"{proposal.replacement_exercise} trains "
                f"{', '.join(muscle_label(m) for m in new_muscles)}, not "
                f"{', '.join(muscle_label(m) for m in old_muscles)}.",
            ))

        for muscle in new_muscles:
            if muscle in old_muscles:
                continue
            label = muscle_label(muscle)
            status = constraints.status_for(muscle)
            if status == LandmarkStatus.EXCEEDED_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                    f"The swap adds {label} volume, which is already past MRV.",
                ))
            elif status == LandmarkStatus.APPROACHING_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.MEDIUM,
                    f"The swap adds {label} volume close to MRV.",
                ))
                suggestions.append("Choose a machine or cable option that isolates the original muscle")

        if constraints.is_banned(proposal.technique):
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.HIGH,
                f"{proposal.technique.value.replace('_', ' ').capitalize()} is banned today given current fatigue.",
            ))

        if constraints.equipment_preference == EquipmentPreference.MACHINE_FAVORED:
            suggestions.append("A machine or cable variation suits today's fatigue level")

        return reasons, suggestions

    def summarize(self, proposal: SubstitutionProposal, decision: Decision, reasons: List[Reason]) -> str:
        swap = f"Swapping {proposal.current_exercise} for {proposal.replacement_exercise}"
        if not reasons:
            return f"{swap} keeps the same stimulus within your limits."
        verb = {
            Decision.APPROVED: "works",
            Decision.CAUTION: "works with trade-offs",
            Decision.REJECTED: "is not advised",
        }[decision]
        return f"{swap} {verb}. {reasons[0].message}"


__all__ = ["SubstitutionValidator"]
