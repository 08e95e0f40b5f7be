"""
Tests for the addition, extra-set and substitution validators.
"""

import pytest

from volume_governor.constraints import resolve
from volume_governor.errors import MalformedProposal
from volume_governor.fatigue import FatigueContext, MesocyclePhase, TechniqueId
from volume_governor.taxonomy import MuscleKey
from volume_governor.validators import (
    AdditionProposal,
    AdditionValidator,
    Decision,
    ExtraSetProposal,
    ExtraSetValidator,
    MockCoachingAdvisor,
    Reason,
    ReasonType,
    Severity,
    SubstitutionProposal,
    SubstitutionValidator,
    ValidationVerdict,
    WorkoutExercise,
    WorkoutSnapshot,
)
from volume_governor.validators.models import cap_words, decide
from volume_governor.volume import LandmarkStatus


def _workout(*exercises):
    return WorkoutSnapshot(
        workout_id="w1",
        exercises=tuple(
            WorkoutExercise(name=name, sets=sets, primary_muscles=tuple(muscles))
            for name, sets, muscles in exercises
        ),
    )


LEG_DAY = _workout(
    ("Back Squat", 3, ["quads"]),
    ("Romanian Deadlift", 3, ["hamstrings"]),
)

FULL_WORKOUT = _workout(
    ("Back Squat", 3, ["quads"]),
    ("Romanian Deadlift", 3, ["hamstrings"]),
    ("Bench Press", 3, ["chest"]),
    ("Barbell Row", 3, ["upper back"]),
    ("Overhead Press", 2, ["shoulders"]),
    ("Leg Curl", 2, ["hamstrings"]),
)  # 16 sets


def _addition(workout=LEG_DAY, name="Leg Extension", muscles=("quads",), sets=3, technique=None):
    return AdditionProposal(
        user_id="u1",
        workout=workout,
        exercise_name=name,
        target_muscles=tuple(muscles),
        sets=sets,
        technique=technique,
    )


# =============================================================================
# Verdict model
# =============================================================================


class TestVerdictModel:

    def test_decide(self):
        low = Reason(ReasonType.BALANCE, Severity.LOW, "x")
        medium = Reason(ReasonType.BALANCE, Severity.MEDIUM, "x")
        high = Reason(ReasonType.BALANCE, Severity.HIGH, "x")
        assert decide([]) == Decision.APPROVED
        assert decide([low]) == Decision.APPROVED
        assert decide([low, medium]) == Decision.CAUTION
        assert decide([medium, high]) == Decision.REJECTED

    def test_word_caps(self):
        long_text = " ".join(["word"] * 60)
        verdict = ValidationVerdict(
            decision=Decision.APPROVED,
            reasons=(Reason(ReasonType.BALANCE, Severity.LOW, long_text),),
            suggestions=(long_text,),
            reasoning=long_text,
        )
        assert len(verdict.reasoning.split()) == 40
        assert len(verdict.reasons[0].message.split()) == 25
        assert len(verdict.suggestions[0].split()) == 30

    def test_cap_words_short_text_untouched(self):
        assert cap_words("keep it short", 5) == "keep it short"

    def test_verdict_is_immutable(self):
        verdict = ValidationVerdict(decision=Decision.APPROVED)
        with pytest.raises(Exception):
            verdict.decision = Decision.REJECTED


# =============================================================================
# Addition
# =============================================================================


class TestAdditionPreCheck:

    def test_workout_at_limit_rejected_without_advisor(self, methodology):
        advisor = MockCoachingAdvisor()
        validator = AdditionValidator(advisor)
        constraints = resolve(methodology, {}, FatigueContext())
        assert constraints.max_total_sets_per_workout == 16
        assert FULL_WORKOUT.total_sets == 16

        verdict = validator.validate(_addition(workout=FULL_WORKOUT), constraints, FatigueContext(), methodology)

        assert verdict.decision == Decision.REJECTED
        assert verdict.pre_check
        assert verdict.has_reason(ReasonType.VOLUME_OVERLAP, Severity.HIGH)
        assert "16" in verdict.reasons[0].message
        assert advisor.call_count == 0

    def test_sets_that_overflow_limit(self, methodology):
        workout = _workout(("Back Squat", 3, ["quads"]), ("Leg Press", 3, ["quads"]),
                           ("Leg Curl", 3, ["hamstrings"]), ("Bench Press", 3, ["chest"]),
                           ("Calf Raise", 2, ["calves"]))  # 14 sets
        constraints = resolve(methodology, {}, FatigueContext())
        verdict = AdditionValidator().validate(_addition(workout=workout, sets=3), constraints, FatigueContext())
        assert verdict.decision == Decision.REJECTED

    def test_sets_per_exercise_limit(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext())
        verdict = AdditionValidator().validate(_addition(sets=4), constraints, FatigueContext())
        assert verdict.decision == Decision.REJECTED
        assert "3" in verdict.reasons[0].message

    def test_unsupported_technique(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext())
        verdict = AdditionValidator().validate(
            _addition(technique=TechniqueId.MYO_REPS), constraints, FatigueContext(), methodology,
        )
        assert verdict.decision == Decision.REJECTED
        assert verdict.has_reason(ReasonType.EXPERIENCE)

    def test_zero_sets(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext())
        verdict = AdditionValidator().validate(_addition(sets=0), constraints, FatigueContext())
        assert verdict.decision == Decision.REJECTED


class TestAdditionIdentifiers:

    @pytest.mark.parametrize("field_name,proposal", [
        ("user_id", AdditionProposal(user_id="", workout=LEG_DAY, exercise_name="Leg Extension",
                                     target_muscles=("quads",), sets=3)),
        ("workout.workout_id", AdditionProposal(user_id="u1", workout=WorkoutSnapshot(workout_id=""),
                                                exercise_name="Leg Extension",
                                                target_muscles=("quads",), sets=3)),
        ("exercise_name", AdditionProposal(user_id="u1", workout=LEG_DAY, exercise_name=" ",
                                           target_muscles=("quads",), sets=3)),
    ])
    def test_missing_identifier_raises(self, methodology, field_name, proposal):
        constraints = resolve(methodology, {}, FatigueContext())
        with pytest.raises(MalformedProposal) as exc_info:
            AdditionValidator().validate(proposal, constraints, FatigueContext())
        assert exc_info.value.field == field_name

    def test_none_proposal(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext())
        with pytest.raises(MalformedProposal):
            AdditionValidator().validate(None, constraints, FatigueContext())


class TestAdditionContext:

    def _verdict(self, methodology, status, context=None, advisor=None, **kwargs):
        context = context or FatigueContext()
        statuses = {MuscleKey.QUADS: status} if status else {}
        constraints = resolve(methodology, statuses, context)
        return AdditionValidator(advisor).validate(_addition(**kwargs), constraints, context, methodology)

    def test_optimal_approved(self, methodology):
        verdict = self._verdict(methodology, LandmarkStatus.OPTIMAL)
        assert verdict.decision == Decision.APPROVED
        assert verdict.reasoning

    def test_approaching_mav_low_severity(self, methodology):
        verdict = self._verdict(methodology, LandmarkStatus.APPROACHING_MAV)
        assert verdict.decision == Decision.APPROVED
        assert verdict.has_reason(ReasonType.VOLUME_OVERLAP, Severity.LOW)
        assert not any("machine" in s.lower() for s in verdict.suggestions)

    def test_approaching_mrv_caution_with_machine_suggestion(self, methodology):
        verdict = self._verdict(methodology, LandmarkStatus.APPROACHING_MRV)
        assert verdict.decision == Decision.CAUTION
        assert verdict.has_reason(ReasonType.VOLUME_OVERLAP, Severity.MEDIUM)
        assert any("machine" in s.lower() for s in verdict.suggestions)

    def test_exceeded_mrv_rejected(self, methodology):
        verdict = self._verdict(methodology, LandmarkStatus.EXCEEDED_MRV)
        assert verdict.decision == Decision.REJECTED
        assert verdict.has_reason(ReasonType.VOLUME_OVERLAP, Severity.HIGH)
        assert not verdict.pre_check

    def test_duplicate_exercise(self, methodology):
        verdict = self._verdict(methodology, None, name="back squat")
        assert verdict.has_reason(ReasonType.REDUNDANCY, Severity.MEDIUM)

    def test_banned_technique_under_fatigue(self, methodology):
        context = FatigueContext(readiness_score=2.0)
        verdict = self._verdict(methodology, None, context=context, technique=TechniqueId.DROP_SET)
        assert verdict.decision == Decision.REJECTED
        assert verdict.has_reason(ReasonType.FATIGUE, Severity.HIGH)

    def test_deload_phase(self, methodology):
        context = FatigueContext(mesocycle_phase=MesocyclePhase.DELOAD)
        verdict = self._verdict(methodology, None, context=context)
        assert verdict.decision == Decision.CAUTION
        assert verdict.has_reason(ReasonType.PHASE_MISMATCH, Severity.MEDIUM)

    def test_muscles_inferred_from_name(self, methodology):
        verdict = self._verdict(methodology, LandmarkStatus.APPROACHING_MRV, muscles=())
        assert verdict.decision == Decision.CAUTION

    def test_advisor_adds_suggestions_only(self, methodology):
        advisor = MockCoachingAdvisor(["Pause at the top of each rep"])
        verdict = self._verdict(methodology, LandmarkStatus.OPTIMAL, advisor=advisor)
        assert advisor.call_count == 1
        assert verdict.decision == Decision.APPROVED
        assert "Pause at the top of each rep" in verdict.suggestions

    def test_advisor_skipped_on_contextual_rejection(self, methodology):
        advisor = MockCoachingAdvisor()
        self._verdict(methodology, LandmarkStatus.EXCEEDED_MRV, advisor=advisor)
        assert advisor.call_count == 0

    def test_advisor_failure_keeps_verdict(self, methodology):
        class BrokenAdvisor(MockCoachingAdvisor):
            def suggest(self, request):
                raise RuntimeError("model unavailable")

        verdict = self._verdict(methodology, LandmarkStatus.OPTIMAL, advisor=BrokenAdvisor())
        assert verdict.decision == Decision.APPROVED


# =============================================================================
# Extra set
# =============================================================================


class TestExtraSet:

    def _validate(self, methodology, proposal, statuses=None, context=None):
        context = context or FatigueContext()
        constraints = resolve(methodology, statuses or {}, context)
        return ExtraSetValidator().validate(proposal, constraints, context, methodology)

    def _proposal(self, extra_sets=1, technique=None, name="Back Squat", workout=None):
        workout = workout or _workout(("Back Squat", 2, ["quads"]), ("Leg Curl", 2, ["hamstrings"]))
        return ExtraSetProposal(
            user_id="u1", workout=workout, exercise_name=name, extra_sets=extra_sets, technique=technique,
        )

    def test_approved(self, methodology):
        verdict = self._validate(methodology, self._proposal())
        assert verdict.decision == Decision.APPROVED

    def test_per_exercise_limit(self, methodology):
        verdict = self._validate(methodology, self._proposal(extra_sets=2))
        assert verdict.decision == Decision.REJECTED
        assert verdict.pre_check

    def test_exercise_not_in_workout(self, methodology):
        verdict = self._validate(methodology, self._proposal(name="Hack Squat"))
        assert verdict.decision == Decision.REJECTED

    def test_technique_min_sets(self, methodology):
        verdict = self._validate(methodology, self._proposal(technique=TechniqueId.REST_PAUSE))
        assert verdict.decision == Decision.REJECTED
        assert verdict.has_reason(ReasonType.EXPERIENCE)

    def test_approaching_mrv_caution(self, methodology):
        verdict = self._validate(
            methodology, self._proposal(), statuses={MuscleKey.QUADS: LandmarkStatus.APPROACHING_MRV},
        )
        assert verdict.decision == Decision.CAUTION

    def test_low_readiness_caution(self, methodology):
        verdict = self._validate(methodology, self._proposal(), context=FatigueContext(readiness_score=2.0))
        assert verdict.decision == Decision.CAUTION
        assert verdict.has_reason(ReasonType.FATIGUE, Severity.MEDIUM)

    def test_intensification_prefers_technique(self, methodology):
        context = FatigueContext(mesocycle_phase=MesocyclePhase.INTENSIFICATION)
        verdict = self._validate(methodology, self._proposal(), context=context)
        assert verdict.decision == Decision.APPROVED
        assert verdict.has_reason(ReasonType.PHASE_MISMATCH, Severity.LOW)


# =============================================================================
# Substitution
# =============================================================================


class TestSubstitution:

    def _validate(self, methodology, proposal, statuses=None, context=None):
        context = context or FatigueContext()
        constraints = resolve(methodology, statuses or {}, context)
        return SubstitutionValidator().validate(proposal, constraints, context, methodology)

    def _proposal(self, current="Back Squat", replacement="Leg Press", muscles=("quads",), sets=None):
        return SubstitutionProposal(
            user_id="u1",
            workout=LEG_DAY,
            current_exercise=current,
            replacement_exercise=replacement,
            replacement_muscles=tuple(muscles),
            replacement_sets=sets,
        )

    def test_same_muscle_swap_approved(self, methodology):
        verdict = self._validate(methodology, self._proposal())
        assert verdict.decision == Decision.APPROVED

    def test_missing_current_exercise(self, methodology):
        verdict = self._validate(methodology, self._proposal(current="Hack Squat"))
        assert verdict.decision == Decision.REJECTED
        assert verdict.pre_check

    def test_replacement_sets_over_limit(self, methodology):
        verdict = self._validate(methodology, self._proposal(sets=5))
        assert verdict.decision == Decision.REJECTED

    def test_different_muscle_caution(self, methodology):
        verdict = self._validate(methodology, self._proposal(replacement="Bench Press", muscles=("chest",)))
        assert verdict.decision == Decision.CAUTION
        assert verdict.has_reason(ReasonType.BALANCE, Severity.MEDIUM)

    def test_replacement_already_present(self, methodology):
        verdict = self._validate(
            methodology, self._proposal(replacement="Romanian Deadlift", muscles=("hamstrings",)),
        )
        assert verdict.has_reason(ReasonType.REDUNDANCY, Severity.MEDIUM)

    def test_new_muscle_past_mrv_rejected(self, methodology):
        verdict = self._validate(
            methodology,
            self._proposal(replacement="Bench Press", muscles=("chest",)),
            statuses={MuscleKey.CHEST: LandmarkStatus.EXCEEDED_MRV},
        )
        assert verdict.decision == Decision.REJECTED
