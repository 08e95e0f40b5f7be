"""
Modification validators - deterministic gates for workout changes.

Modules:
- models: proposals, Reason, ValidationVerdict
- base: two-phase validator contract
- addition / extra_set / substitution / split_change: concrete validators
- advisor: optional coaching suggestions (never changes a decision)
- service: loads methodology + ledger, resolves constraints, validates
"""

from volume_governor.validators.models import (
    AdditionProposal,
    Decision,
    ExtraSetProposal,
    Reason,
    ReasonType,
    Severity,
    SplitChangeProposal,
    SubstitutionProposal,
    ValidationVerdict,
    WorkoutExercise,
    WorkoutSnapshot,
)
from volume_governor.validators.advisor import (
    CoachingAdvisor,
    GeminiCoachingAdvisor,
    MockCoachingAdvisor,
    get_coaching_advisor,
)
from volume_governor.validators.base import BaseValidator
from volume_governor.validators.addition import AdditionValidator
from volume_governor.validators.extra_set import ExtraSetValidator
from volume_governor.validators.substitution import SubstitutionValidator
from volume_governor.validators.split_change import (
    ChangeClassification,
    SplitChangeVerdict,
    SplitRecommendation,
    SplitType,
    SplitTypeChangeValidator,
    classify_change,
)
from volume_governor.validators.service import ValidationService

__all__ = [
    "AdditionProposal",
    "Decision",
    "ExtraSetProposal",
    "Reason",
    "ReasonType",
    "Severity",
    "SplitChangeProposal",
    "SubstitutionProposal",
    "ValidationVerdict",
    "WorkoutExercise",
    "WorkoutSnapshot",
    "CoachingAdvisor",
    "GeminiCoachingAdvisor",
    "MockCoachingAdvisor",
    "get_coaching_advisor",
    "BaseValidator",
    "AdditionValidator",
    "ExtraSetValidator",
    "SubstitutionValidator",
    "ChangeClassification",
    "SplitChangeVerdict",
    "SplitRecommendation",
    "SplitType",
    "SplitTypeChangeValidator",
    "classify_change",
    "ValidationService",
]
