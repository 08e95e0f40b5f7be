"""
Tests for priority-ordered constraint resolution.
"""

from volume_governor.constraints import clamp_volume, resolve, resolve_from_volume
from volume_governor.fatigue import (
    CaloricPhase,
    ConstraintFlag,
    EquipmentPreference,
    FatigueContext,
    MesocyclePhase,
    TechniqueId,
)
from volume_governor.methodology import MethodologyConfig
from volume_governor.taxonomy import MuscleKey
from volume_governor.volume import LandmarkStatus


class TestMethodologyLimits:

    def test_fixed_fields_copied_verbatim(self, methodology):
        for ctx in (
            FatigueContext(),
            FatigueContext(readiness_score=1.5, consecutive_training_days=6, workouts_completed=10),
            FatigueContext(mesocycle_phase=MesocyclePhase.DELOAD, caloric_phase=CaloricPhase.CUT),
        ):
            constraints = resolve(methodology, {}, ctx)
            assert constraints.max_sets_per_exercise == 3
            assert constraints.max_total_sets_per_workout == 16
            assert constraints.max_exercises_per_session == 6
            assert constraints.methodology_id == "hypertrophy"

    def test_baseline_rir(self, methodology):
        assert resolve(methodology, {}, FatigueContext()).rir_floor == 2


class TestDeterminism:

    def test_identical_inputs_identical_output(self, methodology):
        statuses = {MuscleKey.QUADS: LandmarkStatus.APPROACHING_MRV}
        ctx = FatigueContext(readiness_score=2.0, consecutive_training_days=4, caloric_phase="cut")
        first = resolve(methodology, statuses, ctx)
        second = resolve(methodology, statuses, ctx)
        assert first == second
        assert first.to_dict() == second.to_dict()


class TestLandmarkDirectives:

    def test_exceeded_blocks_new_work(self, methodology):
        constraints = resolve(methodology, {MuscleKey.QUADS: LandmarkStatus.EXCEEDED_MRV}, FatigueContext())
        directive = constraints.directive_for(MuscleKey.QUADS)
        assert directive.max_new_exercises == 0
        assert directive.blocks_new_work

    def test_approaching_mrv_caps_at_one(self, methodology):
        constraints = resolve(methodology, {MuscleKey.QUADS: LandmarkStatus.APPROACHING_MRV}, FatigueContext())
        directive = constraints.directive_for(MuscleKey.QUADS)
        assert directive.max_new_exercises == 1
        assert directive.prefer_machines

    def test_optimal_has_no_cap(self, methodology):
        constraints = resolve(methodology, {MuscleKey.CHEST: LandmarkStatus.OPTIMAL}, FatigueContext())
        assert constraints.directive_for(MuscleKey.CHEST).max_new_exercises is None

    def test_status_for_unknown_muscle(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext())
        assert constraints.status_for(MuscleKey.CALVES) == LandmarkStatus.OPTIMAL

    def test_resolve_from_volume(self, methodology):
        constraints = resolve_from_volume(methodology, {MuscleKey.QUADS: 19}, FatigueContext())
        assert constraints.status_for(MuscleKey.QUADS) == LandmarkStatus.APPROACHING_MRV


class TestFatigueAndCaloric:

    def test_high_fatigue(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext(readiness_score=2.0))
        assert constraints.rir_floor == 3
        assert constraints.volume_adjustment_percent == -10
        assert constraints.equipment_preference == EquipmentPreference.MACHINE_FAVORED
        assert constraints.is_banned(TechniqueId.DROP_SET)

    def test_fresh_lowers_rir(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext(readiness_score=4.5))
        assert constraints.rir_floor == 1
        assert constraints.equipment_preference == EquipmentPreference.FREE_WEIGHT_FAVORED
        assert not constraints.banned_techniques

    def test_rir_never_negative(self):
        config = MethodologyConfig(methodology_id="failure", rir_target=0)
        assert resolve(config, {}, FatigueContext(readiness_score=5)).rir_floor == 0

    def test_bulk_adds_volume(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext(caloric_phase=CaloricPhase.BULK))
        assert constraints.volume_adjustment_percent == 15

    def test_bulk_cannot_undo_fatigue_cut(self, methodology):
        ctx = FatigueContext(readiness_score=2.0, caloric_phase=CaloricPhase.BULK)
        assert resolve(methodology, {}, ctx).volume_adjustment_percent == -10

    def test_cut_cannot_override_fresh_equipment(self, methodology):
        ctx = FatigueContext(readiness_score=4.5, caloric_phase=CaloricPhase.CUT)
        constraints = resolve(methodology, {}, ctx)
        assert constraints.equipment_preference == EquipmentPreference.FREE_WEIGHT_FAVORED
        assert constraints.volume_adjustment_percent == -15

    def test_cut_sets_equipment_when_fatigue_silent(self, methodology):
        constraints = resolve(methodology, {}, FatigueContext(caloric_phase=CaloricPhase.CUT))
        assert constraints.equipment_preference == EquipmentPreference.MACHINE_FAVORED

    def test_fixed_volume_ignores_caloric_delta(self):
        config = MethodologyConfig(methodology_id="fixed", is_fixed_volume=True)
        constraints = resolve(config, {}, FatigueContext(caloric_phase=CaloricPhase.BULK))
        assert constraints.volume_adjustment_percent == 0
        assert ConstraintFlag.FAVOR_INTENSITY_PROGRESSION in constraints.flags

    def test_deload_volume_clamped(self, methodology):
        ctx = FatigueContext(mesocycle_phase=MesocyclePhase.DELOAD, caloric_phase=CaloricPhase.CUT)
        assert resolve(methodology, {}, ctx).volume_adjustment_percent == -20


class TestClamp:

    def test_bounds(self):
        assert clamp_volume(35) == 20
        assert clamp_volume(-35) == -20
        assert clamp_volume(15, ceiling=10) == 10
