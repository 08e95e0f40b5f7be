"""
Base Validator - Shared two-phase contract.

Phases:
1. require_identifiers → MalformedProposal (error channel, not a verdict)
2. pre_check → immediate `rejected` citing the numeric Priority-1 limit.
   The coaching advisor is never invoked on this path.
3. evaluate → reasons + suggestions; decision from severities
4. advisor (optional) → extra suggestions for allowed verdicts only

Validators never raise for a bad proposal; a bad proposal is `rejected`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.errors import MalformedProposal
from volume_governor.fatigue.models import FatigueContext
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.taxonomy.inference import infer_muscles_from_exercise_name
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import normalize_many
from volume_governor.validators.advisor import CoachingAdvisor
from volume_governor.validators.models import (
    Decision,
    Reason,
    ValidationVerdict,
    decide,
)

logger = logging.getLogger(__name__)


class BaseValidator(ABC):
    """Base class for modification validators."""

    name = "base"
    required_fields: Tuple[str, ...] = ("user_id",)

    def __init__(self, advisor: Optional[CoachingAdvisor] = None):
        self.advisor = advisor

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    def validate(
        self,
        proposal: Any,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig] = None,
    ) -> ValidationVerdict:
        """
        Validate a proposal against resolved constraints.

        Raises:
            MalformedProposal: If required identifiers are missing
        """
        self.require_identifiers(proposal)

        rejection = self.pre_check(proposal, constraints, methodology)
        if rejection is not None:
            logger.info("%s pre-check rejected: %s", self.name, rejection.reasons[0].message)
            return rejection

        reasons, suggestions = self.evaluate(proposal, constraints, context, methodology)
        decision = decide(reasons)

        if self.advisor is not None and decision != Decision.REJECTED:
            suggestions = suggestions + self._advise(proposal, decision, reasons)

        verdict = ValidationVerdict(
            decision=decision,
            reasons=tuple(reasons),
            suggestions=tuple(_dedupe(suggestions)),
            reasoning=self.summarize(proposal, decision, reasons),
            validator=self.name,
        )
        logger.info("%s verdict: %s (%d reasons)", self.name, decision.value, len(reasons))
        return verdict

    def require_identifiers(self, proposal: Any) -> None:
        if proposal is None:
            raise MalformedProposal(f"{self.name}: proposal is required")
        for field_name in self.required_fields:
            value = _get_path(proposal, field_name)
            if value is None or (isinstance(value, str) and not value.strip()):
                raise MalformedProposal(
                    f"{self.name}: missing required field '{field_name}'", field=field_name
                )

    def pre_check(
        self,
        proposal: Any,
        constraints: ConstraintSet,
        methodology: Optional[MethodologyConfig],
    ) -> Optional[ValidationVerdict]:
        """Deterministic Priority-1 check. Return a rejected verdict or None."""
        return None

    @abstractmethod
    def evaluate(
        self,
        proposal: Any,
        constraints: ConstraintSet,
        context: FatigueContext,
        methodology: Optional[MethodologyConfig],
    ) -> Tuple[List[Reason], List[str]]:
        """Contextual verdict: return (reasons, suggestions)."""
        pass

    @abstractmethod
    def summarize(self, proposal: Any, decision: Decision, reasons: List[Reason]) -> str:
        pass

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def reject(self, reason: Reason, suggestions: Optional[List[str]] = None) -> ValidationVerdict:
        return ValidationVerdict(
            decision=Decision.REJECTED,
            reasons=(reason,),
            suggestions=tuple(suggestions or ()),
            reasoning=reason.message,
            validator=self.name,
            pre_check=True,
        )

    def _advise(self, proposal: Any, decision: Decision, reasons: List[Reason]) -> List[str]:
        request: Dict[str, Any] = {
            "validator": self.name,
            "decision": decision.value,
            "reasons": [r.to_dict() for r in reasons],
            "proposal": repr(proposal),
        }
        try:
            return list(self.advisor.suggest(request))
        except Exception as e:
            # Advisory only: the deterministic verdict stands without it
            logger.warning("%s advisor failed, keeping deterministic verdict: %s", self.name, e)
            return []


def resolve_target_muscles(labels: Any, exercise_name: Optional[str]) -> List[MuscleKey]:
    """
    Normalize proposal muscle labels, inferring from the exercise name when
    none resolve.
    """
    keys, unmatched = normalize_many(labels, exercise_name)
    if unmatched:
        logger.info("Dropped unmatched target muscles: %s", [u.raw for u in unmatched])
    if not keys and exercise_name:
        primary, _ = infer_muscles_from_exercise_name(exercise_name)
        keys = primary
    return keys


def muscle_label(muscle: MuscleKey) -> str:
    return muscle.value.replace("_", " ").replace("lowerBack", "lower back").replace(
        "hipFlexors", "hip flexors")


def _get_path(obj: Any, path: str) -> Any:
    value = obj
    for part in path.split("."):
        value = getattr(value, part, None)
        if value is None:
            return None
    return value


def _dedupe(items: List[str]) -> List[str]:
    seen = set()
    result = []
    for item in items:
        if item and item not in seen:
            seen.add(item)
            result.append(item)
    return result


__all__ = [
    "BaseValidator",
    "resolve_target_muscles",
    "muscle_label",
]
