"""
Addition Validator - Adding a new exercise to a workout.

Pre-check (Priority 1, no collaborator call):
- workout already at/above max total sets
- proposed sets would push the workout past max total sets
- proposed sets above max sets per exercise
- technique not supported by the methodology

Contextual rules:
- exceeded_mrv on a target muscle → high volume_overlap
- approaching_mrv → medium volume_overlap + machine/cable suggestion
- approaching_mav → low volume_overlap (conservative end of volume)
- landmark exercise cap reached → medium volume_overlap
- deload → medium phase_mismatch, intensification → low phase_mismatch
- banned technique → high fatigue
- duplicate exercise → medium redundancy
- session exercise cap reached → medium balance
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.fatigue.models import (
    ConstraintFlag,
    EquipmentPreference,
    FatigueContext,
    MesocyclePhase,
)
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.taxonomy.normalizer import normalize_many
from volume_governor.validators.base import (
    BaseValidator,
    muscle_label,
    resolve_target_muscles,
)
from volume_governor.validators.models import (
    AdditionProposal,
    Decision,
    Reason,
    ReasonType,
    Severity,
    ValidationVerdict,
    WorkoutSnapshot,
)
from volume_governor.volume.models import LandmarkStatus

logger = logging.getLogger(__name__)

SUBSTITUTE_INSTEAD = "Consider substituting an existing exercise instead of adding a new one"
MACHINE_SUGGESTION = "Prefer a machine or cable variation for {muscle} and keep sets at the low end"


def check_total_sets_limit(
    workout: WorkoutSnapshot,
    added_sets: int,
    constraints: ConstraintSet,
) -> Optional[Reason]:
    """Return a high-severity reason if the workout total would break the hard limit."""
    limit = constraints.max_total_sets_per_workout
    if not limit:
        return None
    total = workout.total_sets
    if total >= limit:
        return Reason(
            ReasonType.VOLUME_OVERLAP,
            Severity.HIGH,
            f"Methodology caps workouts at {limit} total sets; this workout already has {total}.",
        )
    if total + added_sets > limit:
        return Reason(
            ReasonType.VOLUME_OVERLAP,
            Severity.HIGH,
            f"Adding {added_sets} sets brings the workout to {total + added_sets}, "
            f"above the {limit}-set limit.",
        )
    return None


def count_exercises_for(workout: WorkoutSnapshot, muscle) -> int:
    count = 0
    for exercise in workout.exercises:
        keys, _ = normalize_many(exercise.primary_muscles, exercise.name)
        if muscle in keys:
            count += 1
    return count


class AdditionValidator(BaseValidator):
    """Validate adding an exercise."""

    name = "addition"
    required_fields = ("user_id", "workout.workout_id", "exercise_name")

    def pre_check(
        self,
        proposal: AdditionProposal,
        constraints: ConstraintSet,
        methodology: Optional[MethodologyConfig],
    ) -> Optional[ValidationVerdict]:
        if proposal.sets < 1:
            return self.reject(Reason(
                ReasonType.BALANCE, Severity.HIGH, "An added exercise needs at least one working set.",
            ))

        total_reason = check_total_sets_limit(proposal.workout, proposal.sets, constraints)
        if total_reason is not None:
            return self.reject(total_reason, [SUBSTITUTE_INSTEAD])

        per_exercise = constraints.max_sets_per_exercise
        if per_exercise and proposal.sets > per_exercise:
            return self.reject(
                Reason(
                    ReasonType.VOLUME_OVERLAP,
                    Severity.HIGH,
                    f"Methodology allows at most {per_exercise} sets per exercise; "
                    f"{proposal.sets} were proposed.",
                ),
                [f"Reduce to {per_exercise} sets"],
            )

        if (proposal.technique is not None and methodology is not None
                and not methodology.supports_technique(proposal.technique)):
            return self.reject(Reason(
                ReasonType.EXPERIENCE,
                Severity.HIGH,
                f"{methodology.name or methodology.methodology_id} does not use "
                f"{proposal.technique.value.replace('_', ' ')}.",
            ))
        return None

    def evaluate(
        self,
        proposal: AdditionProposal,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig],
    ) -> Tuple[List[Reason], List[str]]:
        reasons: List[Reason] = []
        suggestions: List[str] = []

        muscles = resolve_target_muscles(proposal.target_muscles, proposal.exercise_name)
        if not muscles:
            reasons.append(Reason(
                ReasonType.BALANCE, Severity.LOW,
                "Target muscles not recognized; volume impact could not be checked.",
            ))

        for muscle in muscles:
            label = muscle_label(muscle)
            status = constraints.status_for(muscle)
            directive = constraints.directive_for(muscle)

            if status == LandmarkStatus.EXCEEDED_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.HIGH,
                    f"{label.capitalize()} is already past its recoverable volume (MRV) this cycle.",
                ))
                suggestions.append(f"Pick an exercise for a muscle other than {label}")
                continue

            if status == LandmarkStatus.APPROACHING_MRV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.MEDIUM,
                    f"{label.capitalize()} is close to its recoverable volume limit (MRV).",
                ))
                suggestions.append(MACHINE_SUGGESTION.format(muscle=label))
            elif status == LandmarkStatus.APPROACHING_MAV:
                reasons.append(Reason(
                    ReasonType.VOLUME_OVERLAP, Severity.LOW,
                    f"{label.capitalize()} is near its adaptive volume ceiling (MAV); stay at the conservative end.",
                ))

            if directive is not None and directive.max_new_exercises:
                existing = count_exercises_for(proposal.workout, muscle)
                if existing >= directive.max_new_exercises:
                    reasons.append(Reason(
                        ReasonType.VOLUME_OVERLAP, Severity.MEDIUM,
                        f"Workout already has {existing} {label} exercise(s); cap is "
                        f"{directive.max_new_exercises} near MRV.",
                    ))

        if proposal.workout.find(proposal.exercise_name) is not None:
            reasons.append(Reason(
                ReasonType.REDUNDANCY, Severity.MEDIUM,
                f"{proposal.exercise_name} is already in this workout.",
            ))
            suggestions.append("Add a set to the existing exercise or pick a different angle")

        cap = constraints.max_exercises_per_session
        if cap and len(proposal.workout.exercises) >= cap:
            reasons.append(Reason(
                ReasonType.BALANCE, Severity.MEDIUM,
                f"Workout already has {len(proposal.workout.exercises)} exercises; methodology suggests {cap}.",
            ))

        if constraints.is_banned(proposal.technique):
            reasons.append(Reason(
                ReasonType.FATIGUE, Severity.HIGH,
                f"{proposal.technique.value.replace('_', ' ').capitalize()} is banned today given current fatigue.",
            ))
            suggestions.append("Use straight sets at the prescribed RIR instead")

        reasons.extend(phase_reasons(context.mesocycle_phase, "additional exercises"))

        if constraints.equipment_preference == EquipmentPreference.MACHINE_FAVORED:
            suggestions.append("Favor machines or cables today for stable, lower-fatigue loading")

        if ConstraintFlag.SUBOPTIMAL_SPLIT in constraints.flags:
            reasons.append(Reason(
                ReasonType.RECOVERY, Severity.LOW,
                f"{context.consecutive_training_days} consecutive training days; consider a rest day soon.",
            ))

        return reasons, suggestions

    def summarize(self, proposal: AdditionProposal, decision: Decision, reasons: List[Reason]) -> str:
        if decision == Decision.APPROVED and not reasons:
            return f"{proposal.exercise_name} fits this workout within methodology and recovery limits."
        lead = reasons[0].message if reasons else ""
        prefix = {
            Decision.APPROVED: f"{proposal.exercise_name} fits.",
            Decision.CAUTION: f"{proposal.exercise_name} works with trade-offs.",
            Decision.REJECTED: f"{proposal.exercise_name} should not be added.",
        }[decision]
        return f"{prefix} {lead}"


def phase_reasons(phase: MesocyclePhase, what: str) -> List[Reason]:
    """Periodization reasons shared by addition and extra-set validators."""
    if phase == MesocyclePhase.DELOAD:
        return [Reason(
            ReasonType.PHASE_MISMATCH, Severity.MEDIUM,
            f"Deload week: {what} defeat the recovery purpose.",
        )]
    if phase == MesocyclePhase.INTENSIFICATION:
        return [Reason(
            ReasonType.PHASE_MISMATCH, Severity.LOW,
            "Intensification phase favors quality over quantity.",
        )]
    return []


__all__ = [
    "AdditionValidator",
    "check_total_sets_limit",
    "count_exercises_for",
    "phase_reasons",
]
