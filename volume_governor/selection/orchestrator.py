"""
Exercise Selection Orchestrator - Constraint-aware exercise generation.

Flow for one select() call:
1. Load methodology, snapshot the ledger, resolve the ConstraintSet
2. Derive per-muscle exercise counts: ceil(target_sets / sets_per_exercise),
   capped by landmark directives (a cap of 0 removes the muscle)
3. Call the collaborator (no ledger lock held)
4. Normalize returned muscle labels, inferring from the exercise name when
   the collaborator supplied none
5. Run advisory checks (limits, target tolerance, banned techniques)
6. Commit primary-muscle sets in one record_batch
7. Re-evaluate landmarks and alert on post-hoc exceeded_mrv

Any failure before step 6 leaves the ledger untouched. The collaborator's
exercises are returned as-is; violations are alerts, never rewrites.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Optional, Tuple

from volume_governor.config import SECONDARY_MUSCLE_CREDIT, TARGET_VOLUME_TOLERANCE
from volume_governor.constraints.models import ConstraintSet
from volume_governor.constraints.resolver import resolve
from volume_governor.errors import CollaboratorFailure
from volume_governor.methodology.models import MethodologyConfig, parse_technique
from volume_governor.methodology.provider import MethodologyProvider
from volume_governor.selection.collaborator import ExerciseCollaborator
from volume_governor.selection.models import (
    AlertType,
    GeneratedExercise,
    MuscleTarget,
    NormalizedExercise,
    SelectionAlert,
    SelectionRequest,
    SelectionResult,
)
from volume_governor.taxonomy.inference import infer_muscles_from_exercise_name
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import Unmatched, normalize, normalize_many
from volume_governor.volume.landmarks import evaluate_all
from volume_governor.volume.ledger import VolumeLedger
from volume_governor.volume.models import LandmarkStatus
from volume_governor.volume.store import InMemoryLedgerStore, LedgerStore

logger = logging.getLogger(__name__)


# =============================================================================
# TARGETS
# =============================================================================

def adjust_target(target_sets: int, volume_adjustment_percent: int) -> int:
    """Apply the resolved volume adjustment to a set target."""
    if target_sets <= 0:
        return 0
    return max(0, int(round(target_sets * (100 + volume_adjustment_percent) / 100.0)))


def exercise_count_for(target_sets: int, sets_per_exercise: int, cap: Optional[int] = None) -> int:
    """ceil(target / sets_per_exercise), limited by a directive cap."""
    if target_sets <= 0:
        return 0
    count = math.ceil(target_sets / max(1, sets_per_exercise))
    if cap is not None:
        count = min(count, cap)
    return count


def build_targets(
    target_volume: Dict[Any, int],
    constraints: ConstraintSet,
    methodology: MethodologyConfig,
) -> Tuple[List[MuscleTarget], List[str]]:
    """
    Normalize requested muscles and derive exercise counts.

    Returns:
        (targets, unmatched raw labels)
    """
    sets_per_exercise = methodology.sets_per_exercise
    if constraints.max_sets_per_exercise:
        sets_per_exercise = min(sets_per_exercise, constraints.max_sets_per_exercise)

    targets: Dict[MuscleKey, MuscleTarget] = {}
    unmatched: List[str] = []
    for raw, sets in target_volume.items():
        key = normalize(raw)
        if isinstance(key, Unmatched):
            unmatched.append(str(raw))
            continue
        adjusted = adjust_target(int(sets), constraints.volume_adjustment_percent)
        if key in targets:
            adjusted += targets[key].target_sets
        directive = constraints.directive_for(key)
        cap = directive.max_new_exercises if directive else None
        count = exercise_count_for(adjusted, sets_per_exercise, cap)
        if cap == 0 and adjusted:
            logger.warning("Skipping %s: exceeded MRV, no new exercises allowed", key.value)
        targets[key] = MuscleTarget(
            muscle=key,
            target_sets=adjusted,
            exercise_count=count,
            status=constraints.status_for(key),
            prefer_machines=bool(directive and directive.prefer_machines),
        )
    return list(targets.values()), unmatched


def build_collaborator_request(
    request: SelectionRequest,
    targets: List[MuscleTarget],
    constraints: ConstraintSet,
) -> Dict[str, Any]:
    return {
        "workout_id": request.workout_id,
        "workout_type": request.workout_type,
        "muscle_targets": [t.to_dict() for t in targets],
        "constraints": constraints.to_dict(),
        "user_context": dict(request.user_context),
    }


# =============================================================================
# NORMALIZATION
# =============================================================================

def normalize_exercise(exercise: GeneratedExercise) -> NormalizedExercise:
    primary, primary_unmatched = normalize_many(exercise.primary_muscles, exercise.name)
    secondary, secondary_unmatched = normalize_many(exercise.secondary_muscles, exercise.name)
    inferred = False
    if not primary:
        inferred_primary, inferred_secondary = infer_muscles_from_exercise_name(exercise.name)
        if inferred_primary:
            inferred = True
            primary = inferred_primary
            if not secondary:
                secondary = inferred_secondary
    secondary = [m for m in secondary if m not in primary]
    return NormalizedExercise(
        name=exercise.name,
        sets=exercise.sets,
        primary=tuple(primary),
        secondary=tuple(secondary),
        unmatched=tuple(u.raw for u in primary_unmatched + secondary_unmatched),
        inferred=inferred,
    )


def tally_volume(
    normalized: List[NormalizedExercise],
    secondary_credit: float = SECONDARY_MUSCLE_CREDIT,
) -> Tuple[Dict[MuscleKey, int], Dict[MuscleKey, float]]:
    """
    Returns:
        (committed primary sets, credited sets including secondary credit)
    """
    committed: Dict[MuscleKey, int] = {}
    credited: Dict[MuscleKey, float] = {}
    for ex in normalized:
        sets = max(0, ex.sets)
        for muscle in ex.primary:
            committed[muscle] = committed.get(muscle, 0) + sets
            credited[muscle] = credited.get(muscle, 0.0) + sets
        for muscle in ex.secondary:
            credited[muscle] = credited.get(muscle, 0.0) + sets * secondary_credit
    return committed, credited


# =============================================================================
# ADVISORY CHECKS
# =============================================================================

def check_limits(
    exercises: List[GeneratedExercise],
    constraints: ConstraintSet,
) -> List[SelectionAlert]:
    alerts: List[SelectionAlert] = []
    total = sum(max(0, e.sets) for e in exercises)
    limit = constraints.max_total_sets_per_workout
    if limit and total > limit:
        alerts.append(SelectionAlert(
            AlertType.TOTAL_SETS_LIMIT,
            f"Workout has {total} sets, limit is {limit}",
        ))
    per_exercise = constraints.max_sets_per_exercise
    for ex in exercises:
        if per_exercise and ex.sets > per_exercise:
            alerts.append(SelectionAlert(
                AlertType.SETS_PER_EXERCISE_LIMIT,
                f"{ex.name} has {ex.sets} sets, limit is {per_exercise}",
                exercise=ex.name,
            ))
        technique = parse_technique(ex.technique) if ex.technique else None
        if constraints.is_banned(technique):
            alerts.append(SelectionAlert(
                AlertType.BANNED_TECHNIQUE,
                f"{ex.name} uses {technique.value}, banned under current fatigue",
                exercise=ex.name,
            ))
    return alerts


def check_target_tolerance(
    targets: List[MuscleTarget],
    credited: Dict[MuscleKey, float],
    tolerance: float = TARGET_VOLUME_TOLERANCE,
) -> List[SelectionAlert]:
    alerts: List[SelectionAlert] = []
    for target in targets:
        actual = credited.get(target.muscle, 0.0)
        if target.target_sets == 0 or target.exercise_count == 0:
            if actual > 0 and target.exercise_count == 0:
                alerts.append(SelectionAlert(
                    AlertType.ZERO_TARGET_VIOLATION,
                    f"{target.muscle.value} should get no new work, got {actual:g} sets",
                    muscle=target.muscle,
                ))
            continue
        low = target.target_sets * (1 - tolerance)
        high = target.target_sets * (1 + tolerance)
        if actual < low or actual > high:
            alerts.append(SelectionAlert(
                AlertType.TARGET_VOLUME_DEVIATION,
                f"{target.muscle.value}: {actual:g} sets vs target {target.target_sets}",
                muscle=target.muscle,
            ))
    return alerts


def overshoot_alerts(
    committed: Dict[MuscleKey, int],
    statuses: Dict[MuscleKey, LandmarkStatus],
    volume: Dict[MuscleKey, int],
) -> List[SelectionAlert]:
    alerts = []
    for muscle in committed:
        if statuses.get(muscle) == LandmarkStatus.EXCEEDED_MRV:
            logger.warning(
                "Post-hoc overshoot: %s at %d sets exceeds MRV", muscle.value, volume.get(muscle, 0),
            )
            alerts.append(SelectionAlert(
                AlertType.EXCEEDED_MRV,
                f"{muscle.value} now at {volume.get(muscle, 0)} sets, above MRV",
                muscle=muscle,
            ))
    return alerts


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class ExerciseSelectionOrchestrator:
    """Generate exercises under resolved constraints and commit their volume."""

    def __init__(
        self,
        methodology_provider: MethodologyProvider,
        collaborator: ExerciseCollaborator,
        ledger_store: Optional[LedgerStore] = None,
    ):
        self.methodology_provider = methodology_provider
        self.collaborator = collaborator
        self.ledger_store = ledger_store or InMemoryLedgerStore()

    def select(self, request: SelectionRequest, dry_run: bool = False) -> SelectionResult:
        """
        Run one selection.

        Args:
            request: SelectionRequest
            dry_run: Skip the ledger commit; statuses are projected instead

        Raises:
            ConfigurationMissing: Methodology cannot be loaded
            CollaboratorFailure: Collaborator call failed or returned garbage
        """
        if not request.user_id or not request.cycle_id:
            raise ValueError("user_id and cycle_id are required")

        methodology = self.methodology_provider.get(request.methodology_id)
        ledger = VolumeLedger(request.user_id, self.ledger_store)
        before = ledger.snapshot(request.cycle_id)
        constraints = resolve(
            methodology, evaluate_all(before, methodology.landmarks), request.context,
        )

        targets, unmatched_targets = build_targets(request.target_volume, constraints, methodology)
        collab_request = build_collaborator_request(request, targets, constraints)

        logger.info(
            "Calling collaborator for user=%s workout=%s (%d muscle targets)",
            request.user_id, request.workout_id, len(targets),
        )
        exercises = self._generate(collab_request)

        normalized = [normalize_exercise(e) for e in exercises]
        committed, credited = tally_volume(normalized)

        alerts: List[SelectionAlert] = []
        for raw in unmatched_targets:
            alerts.append(SelectionAlert(AlertType.UNMATCHED_MUSCLE, f"Unknown target muscle '{raw}'"))
        for ex in normalized:
            for raw in ex.unmatched:
                alerts.append(SelectionAlert(
                    AlertType.UNMATCHED_MUSCLE, f"Unknown muscle '{raw}'", exercise=ex.name,
                ))
        alerts.extend(check_limits(exercises, constraints))
        alerts.extend(check_target_tolerance(targets, credited))

        if dry_run:
            after = dict(before)
            for muscle, sets in committed.items():
                after[muscle] = after.get(muscle, 0) + sets
        else:
            after = ledger.record_batch(request.cycle_id, committed)

        post_statuses = evaluate_all(after, methodology.landmarks, muscles=list(committed))
        alerts.extend(overshoot_alerts(committed, post_statuses, after))

        return SelectionResult(
            exercises=exercises,
            normalized=normalized,
            targets=targets,
            constraints=constraints,
            committed_volume=committed,
            credited_volume=credited,
            post_statuses=post_statuses,
            alerts=alerts,
            committed=not dry_run,
        )

    def _generate(self, collab_request: Dict[str, Any]) -> List[GeneratedExercise]:
        try:
            response = self.collaborator.generate(collab_request)
        except CollaboratorFailure:
            raise
        except Exception as e:
            logger.error("Collaborator call failed: %s", e)
            raise CollaboratorFailure(f"Exercise collaborator failed: {e}", cause=e) from e

        raw_exercises = response.get("exercises") if isinstance(response, dict) else None
        if not isinstance(raw_exercises, list):
            raise CollaboratorFailure("Collaborator response missing 'exercises' list")
        try:
            return [GeneratedExercise.from_dict(item) for item in raw_exercises]
        except (TypeError, ValueError) as e:
            raise CollaboratorFailure(f"Malformed collaborator exercise: {e}", cause=e) from e


__all__ = [
    "ExerciseSelectionOrchestrator",
    "adjust_target",
    "exercise_count_for",
    "build_targets",
    "normalize_exercise",
    "tally_volume",
    "check_limits",
    "check_target_tolerance",
]
