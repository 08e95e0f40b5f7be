"""
Tests for split-type change validation and impact analysis.
"""

import pytest

from volume_governor.constraints import resolve
from volume_governor.errors import MalformedProposal
from volume_governor.fatigue import FatigueContext, MesocyclePhase
from volume_governor.taxonomy import MuscleKey
from volume_governor.validators import (
    ChangeClassification,
    Decision,
    MockCoachingAdvisor,
    ReasonType,
    Severity,
    SplitChangeProposal,
    SplitRecommendation,
    SplitTypeChangeValidator,
    classify_change,
)
from volume_governor.validators.split_change import compute_impacts


def _proposal(current="upper_lower", target="push_pull_legs", volume=None, weak=()):
    return SplitChangeProposal(
        user_id="u1",
        current_split=current,
        target_split=target,
        current_volume=volume if volume is not None else {"quads": 12, "chest": 12},
        weak_point_muscles=tuple(weak),
    )


def _validate(methodology, proposal, context=None, advisor=None):
    context = context or FatigueContext()
    constraints = resolve(methodology, {}, context)
    return SplitTypeChangeValidator(advisor).validate(proposal, constraints, context, methodology)


class TestClassifyChange:

    def test_twenty_five_percent_is_increase(self):
        assert classify_change(12, 15) == ChangeClassification.INCREASE

    def test_eight_percent_is_similar(self):
        assert classify_change(12, 13) == ChangeClassification.SIMILAR

    def test_decrease(self):
        assert classify_change(12, 6) == ChangeClassification.DECREASE

    def test_exactly_twenty_percent_is_similar(self):
        assert classify_change(10, 12) == ChangeClassification.SIMILAR

    def test_from_zero(self):
        assert classify_change(0, 3) == ChangeClassification.INCREASE
        assert classify_change(0, 0) == ChangeClassification.SIMILAR


class TestImpacts:

    def test_same_frequency_keeps_volume(self):
        volume_changes, frequency_changes = compute_impacts(_proposal())
        by_muscle = {v.muscle: v for v in volume_changes}
        assert by_muscle[MuscleKey.QUADS].estimated_new_sets == 12
        assert by_muscle[MuscleKey.QUADS].classification == ChangeClassification.SIMILAR
        assert all(f.classification == ChangeClassification.SIMILAR for f in frequency_changes)

    def test_full_body_raises_frequency(self):
        volume_changes, frequency_changes = compute_impacts(_proposal(target="full_body"))
        quads = {v.muscle: v for v in volume_changes}[MuscleKey.QUADS]
        assert quads.estimated_new_sets == 18
        assert quads.classification == ChangeClassification.INCREASE
        freq = {f.muscle: f for f in frequency_changes}[MuscleKey.QUADS]
        assert (freq.current_frequency, freq.new_frequency) == (2, 3)
        assert freq.classification == ChangeClassification.INCREASE

    def test_bro_split_halves_frequency(self):
        volume_changes, _ = compute_impacts(_proposal(target="bro_split"))
        quads = {v.muscle: v for v in volume_changes}[MuscleKey.QUADS]
        assert quads.estimated_new_sets == 6
        assert quads.classification == ChangeClassification.DECREASE

    def test_weak_point_muscles_get_more_volume(self):
        volume_changes, frequency_changes = compute_impacts(
            _proposal(target="weak_point_focus", weak=["quadriceps"])
        )
        by_muscle = {v.muscle: v for v in volume_changes}
        assert by_muscle[MuscleKey.QUADS].estimated_new_sets == 18
        assert by_muscle[MuscleKey.CHEST].estimated_new_sets == 12
        freq = {f.muscle: f for f in frequency_changes}
        assert freq[MuscleKey.QUADS].new_frequency == 3

    @pytest.mark.parametrize("sets", ["lots", -3, 2.5, None, True])
    def test_invalid_volume_count_raises(self, sets):
        with pytest.raises(MalformedProposal) as exc_info:
            compute_impacts(_proposal(target="full_body", volume={"quads": sets}))
        assert exc_info.value.field == "current_volume"

    def test_whole_float_count_accepted(self):
        volume_changes, _ = compute_impacts(_proposal(volume={"quads": 12.0}))
        assert volume_changes[0].current_sets == 12

    def test_unknown_split_raises(self):
        with pytest.raises(MalformedProposal):
            compute_impacts(_proposal(target="bodypart_roulette"))


class TestSplitChangeValidator:

    def test_proceed_when_well_timed(self, methodology):
        verdict = _validate(methodology, _proposal())
        assert verdict.decision == Decision.APPROVED
        assert verdict.recommendation == SplitRecommendation.PROCEED
        assert verdict.volume_changes

    def test_same_split_rejected(self, methodology):
        verdict = _validate(methodology, _proposal(target="upper_lower"))
        assert verdict.recommendation == SplitRecommendation.NOT_RECOMMENDED
        assert verdict.has_reason(ReasonType.REDUNDANCY, Severity.HIGH)

    def test_mid_cycle_high_fatigue_not_recommended(self, methodology):
        context = FatigueContext(readiness_score=2.0, workouts_completed=6, total_planned_workouts=12)
        verdict = _validate(methodology, _proposal(), context=context)
        assert verdict.decision == Decision.REJECTED
        assert verdict.recommendation == SplitRecommendation.NOT_RECOMMENDED
        assert verdict.has_reason(ReasonType.FATIGUE, Severity.HIGH)

    def test_high_fatigue_outside_cycle_waits(self, methodology):
        verdict = _validate(methodology, _proposal(), context=FatigueContext(readiness_score=2.0))
        assert verdict.recommendation == SplitRecommendation.WAIT

    def test_deload_with_large_swing_waits(self, methodology):
        context = FatigueContext(mesocycle_phase=MesocyclePhase.DELOAD)
        verdict = _validate(methodology, _proposal(target="full_body"), context=context)
        assert verdict.recommendation == SplitRecommendation.WAIT
        assert verdict.has_reason(ReasonType.PHASE_MISMATCH, Severity.MEDIUM)

    def test_mid_cycle_disruption_waits(self, methodology):
        context = FatigueContext(readiness_score=4, workouts_completed=6, total_planned_workouts=12)
        verdict = _validate(methodology, _proposal(), context=context)
        assert verdict.recommendation == SplitRecommendation.WAIT
        assert verdict.has_reason(ReasonType.FREQUENCY, Severity.MEDIUM)

    def test_estimate_at_mrv_cautions(self, methodology):
        verdict = _validate(methodology, _proposal(target="full_body", volume={"quads": 16}))
        # 16 * 3 / 2 = 24 >= MRV 22
        assert verdict.recommendation == SplitRecommendation.WAIT
        assert verdict.has_reason(ReasonType.VOLUME_OVERLAP, Severity.MEDIUM)

    def test_session_minimum_above_workout_cap(self, methodology):
        # Bro split sessions need 20+ sets; methodology caps workouts at 16
        verdict = _validate(methodology, _proposal(target="bro_split"))
        assert verdict.decision == Decision.REJECTED
        assert verdict.pre_check
        assert verdict.volume_changes

    def test_weak_point_focus_requires_muscles(self, methodology):
        verdict = _validate(methodology, _proposal(target="weak_point_focus"))
        assert verdict.decision == Decision.REJECTED

    def test_missing_split_raises(self, methodology):
        with pytest.raises(MalformedProposal):
            _validate(methodology, _proposal(current=""))

    def test_to_dict(self, methodology):
        data = _validate(methodology, _proposal()).to_dict()
        assert data["recommendation"] == "proceed"
        assert {row["muscle"] for row in data["volume_changes"]} == {"quads", "chest"}

    def test_advisor_not_called_on_pre_check(self, methodology):
        advisor = MockCoachingAdvisor()
        _validate(methodology, _proposal(target="bro_split"), advisor=advisor)
        assert advisor.call_count == 0
