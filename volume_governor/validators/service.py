"""
Validation Service - Request-scoped wiring for validators.

For one request:
1. Load methodology (ConfigurationMissing if it cannot be loaded)
2. Snapshot the user's ledger for the cycle
3. Evaluate landmarks and resolve the ConstraintSet once
4. Run the requested validator

The resolved ConstraintSet is pure, so it can be reused across several
validators in the same request via validate_many().
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from volume_governor.constraints.models import ConstraintSet
from volume_governor.constraints.resolver import resolve_from_volume
from volume_governor.fatigue.models import FatigueContext
from volume_governor.methodology.models import MethodologyConfig
from volume_governor.methodology.provider import MethodologyProvider
from volume_governor.validators.addition import AdditionValidator
from volume_governor.validators.advisor import CoachingAdvisor
from volume_governor.validators.base import BaseValidator
from volume_governor.validators.extra_set import ExtraSetValidator
from volume_governor.validators.models import ValidationVerdict
from volume_governor.validators.split_change import SplitTypeChangeValidator
from volume_governor.validators.substitution import SubstitutionValidator
from volume_governor.volume.ledger import VolumeLedger
from volume_governor.volume.store import InMemoryLedgerStore, LedgerStore

logger = logging.getLogger(__name__)


class ValidationService:
    """Validate workout modifications for a user-cycle."""

    def __init__(
        self,
        methodology_provider: MethodologyProvider,
        ledger_store: Optional[LedgerStore] = None,
        advisor: Optional[CoachingAdvisor] = None,
    ):
        self.methodology_provider = methodology_provider
        self.ledger_store = ledger_store or InMemoryLedgerStore()
        self.validators: Dict[str, BaseValidator] = {
            "addition": AdditionValidator(advisor),
            "extra_set": ExtraSetValidator(advisor),
            "substitution": SubstitutionValidator(advisor),
            "split_change": SplitTypeChangeValidator(advisor),
        }

    def prepare(
        self,
        user_id: str,
        cycle_id: str,
        methodology_id: str,
        context: FatigueContext,
    ) -> Tuple[MethodologyConfig, ConstraintSet]:
        """Load methodology and resolve constraints for the user's current volume."""
        methodology = self.methodology_provider.get(methodology_id)
        ledger = VolumeLedger(user_id, self.ledger_store)
        volume = ledger.snapshot(cycle_id)
        constraints = resolve_from_volume(methodology, volume, context)
        return methodology, constraints

    def validate(
        self,
        kind: str,
        proposal: Any,
        cycle_id: str,
        methodology_id: str,
        context: FatigueContext,
    ) -> ValidationVerdict:
        """
        Validate one proposal.

        Args:
            kind: addition | extra_set | substitution | split_change

        Raises:
            MalformedProposal: Missing identifiers
            ConfigurationMissing: Methodology cannot be loaded
        """
        return self.validate_many([(kind, proposal)], cycle_id, methodology_id, context)[0]

    def validate_many(
        self,
        requests: List[Tuple[str, Any]],
        cycle_id: str,
        methodology_id: str,
        context: FatigueContext,
    ) -> List[ValidationVerdict]:
        """Validate several proposals for the same user against one ConstraintSet."""
        if not requests:
            return []
        for kind, proposal in requests:
            if kind not in self.validators:
                raise ValueError(f"Unknown validator: {kind}")
            self.validators[kind].require_identifiers(proposal)

        user_id = requests[0][1].user_id
        methodology, constraints = self.prepare(user_id, cycle_id, methodology_id, context)

        verdicts = []
        for kind, proposal in requests:
            verdict = self.validators[kind].validate(proposal, constraints, context, methodology)
            verdicts.append(verdict)
        logger.info(
            "Validated %d proposal(s) for user=%s cycle=%s: %s",
            len(verdicts), user_id, cycle_id, [v.decision.value for v in verdicts],
        )
        return verdicts


__all__ = ["ValidationService"]
