"""
Tests for fatigue, periodization and caloric overlays.
"""

import pytest

from volume_governor.fatigue import (
    ALL_TECHNIQUES,
    CaloricPhase,
    ConstraintFlag,
    ConstraintFragment,
    EquipmentPreference,
    FatigueContext,
    MesocyclePhase,
    ReadinessBucket,
    TechniqueId,
    build_caloric_overlay,
    build_consecutive_days_overlay,
    build_fatigue_overlay,
    build_phase_overlay,
    build_readiness_overlay,
    readiness_bucket,
)


# =============================================================================
# FatigueContext
# =============================================================================


class TestFatigueContext:

    def test_defaults(self):
        ctx = FatigueContext()
        assert ctx.readiness_score is None
        assert ctx.mesocycle_phase == MesocyclePhase.ACCUMULATION

    @pytest.mark.parametrize("score", [0, 5.5, float("nan"), True, "4"])
    def test_invalid_readiness(self, score):
        with pytest.raises(ValueError):
            FatigueContext(readiness_score=score)

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            FatigueContext(consecutive_training_days=-1)

    def test_string_enums_coerced(self):
        ctx = FatigueContext(mesocycle_phase="deload", caloric_phase="cut")
        assert ctx.mesocycle_phase == MesocyclePhase.DELOAD
        assert ctx.caloric_phase == CaloricPhase.CUT

    def test_mid_cycle(self):
        assert FatigueContext(workouts_completed=5, total_planned_workouts=12).is_mid_cycle
        assert not FatigueContext(workouts_completed=0, total_planned_workouts=12).is_mid_cycle
        assert not FatigueContext(workouts_completed=5).is_mid_cycle

    def test_from_dict(self):
        ctx = FatigueContext.from_dict({
            "readiness_score": 3,
            "consecutive_training_days": 2,
            "mesocycle_phase": "intensification",
        })
        assert ctx.readiness_score == 3
        assert ctx.mesocycle_phase == MesocyclePhase.INTENSIFICATION
        assert ctx.caloric_phase is None


# =============================================================================
# Readiness
# =============================================================================


class TestReadiness:

    @pytest.mark.parametrize("score,bucket", [
        (1, ReadinessBucket.HIGH_FATIGUE),
        (2.4, ReadinessBucket.HIGH_FATIGUE),
        (2.5, ReadinessBucket.MODERATE),
        (3.4, ReadinessBucket.MODERATE),
        (3.5, ReadinessBucket.FRESH),
        (5, ReadinessBucket.FRESH),
        (None, ReadinessBucket.MODERATE),
    ])
    def test_buckets(self, score, bucket):
        assert readiness_bucket(score) == bucket

    def test_high_fatigue_overlay(self):
        fragment = build_readiness_overlay(2.0)
        assert fragment.rir_delta == 1
        assert fragment.volume_adjustment_percent == -10
        assert fragment.equipment_preference == EquipmentPreference.MACHINE_FAVORED
        assert fragment.banned_techniques == ALL_TECHNIQUES

    def test_fresh_overlay(self):
        fragment = build_readiness_overlay(4.5)
        assert fragment.rir_delta == -1
        assert fragment.volume_adjustment_percent == 0
        assert fragment.equipment_preference == EquipmentPreference.FREE_WEIGHT_FAVORED
        assert not fragment.banned_techniques

    def test_moderate_overlay_has_no_opinion(self):
        fragment = build_readiness_overlay(3.0)
        assert fragment.rir_delta == 0
        assert fragment.volume_adjustment_percent is None
        assert fragment.equipment_preference is None


# =============================================================================
# Consecutive days and phase
# =============================================================================


class TestConsecutiveDays:

    def test_below_threshold(self):
        assert build_consecutive_days_overlay(2) is None

    def test_applies_at_three(self):
        fragment = build_consecutive_days_overlay(3)
        assert fragment.rir_delta == 1
        assert ConstraintFlag.SUBOPTIMAL_SPLIT not in fragment.flags

    def test_fresh_cycle_suppresses(self):
        assert build_consecutive_days_overlay(4, workouts_completed=3) is None
        assert build_consecutive_days_overlay(4, workouts_completed=4) is not None

    def test_suboptimal_split_flag(self):
        fragment = build_consecutive_days_overlay(5)
        assert ConstraintFlag.SUBOPTIMAL_SPLIT in fragment.flags


class TestPhase:

    def test_deload(self):
        fragment = build_phase_overlay(MesocyclePhase.DELOAD)
        assert fragment.volume_adjustment_percent == -20
        assert TechniqueId.DROP_SET in fragment.banned_techniques

    def test_intensification_prefers_machines(self):
        fragment = build_phase_overlay(MesocyclePhase.INTENSIFICATION)
        assert fragment.equipment_preference == EquipmentPreference.MACHINE_FAVORED

    def test_accumulation_no_overlay(self):
        assert build_phase_overlay(MesocyclePhase.ACCUMULATION) is None


# =============================================================================
# Merge
# =============================================================================


class TestConservativeMerge:

    def test_high_fatigue_plus_consecutive_days(self):
        ctx = FatigueContext(readiness_score=2.0, consecutive_training_days=4)
        fragment = build_fatigue_overlay(ctx)
        assert fragment.rir_delta == 1
        assert fragment.volume_adjustment_percent == -10

    def test_fresh_plus_consecutive_days_takes_conservative_side(self):
        ctx = FatigueContext(readiness_score=4.5, consecutive_training_days=4)
        fragment = build_fatigue_overlay(ctx)
        assert fragment.rir_delta == 1
        assert fragment.volume_adjustment_percent == -10
        assert fragment.equipment_preference == EquipmentPreference.MACHINE_FAVORED

    def test_deload_beats_fatigue_volume(self):
        ctx = FatigueContext(readiness_score=2.0, mesocycle_phase=MesocyclePhase.DELOAD)
        assert build_fatigue_overlay(ctx).volume_adjustment_percent == -20

    def test_merge_is_order_independent(self):
        a = build_readiness_overlay(4.5)
        b = build_consecutive_days_overlay(4)
        ab, ba = a.merge(b), b.merge(a)
        assert ab.rir_delta == ba.rir_delta
        assert ab.volume_adjustment_percent == ba.volume_adjustment_percent
        assert ab.equipment_preference == ba.equipment_preference

    def test_none_never_wins(self):
        merged = ConstraintFragment(volume_adjustment_percent=5).merge(ConstraintFragment())
        assert merged.volume_adjustment_percent == 5

    def test_merge_all_empty(self):
        assert ConstraintFragment.merge_all([]) == ConstraintFragment()


# =============================================================================
# Caloric
# =============================================================================


class TestCaloricOverlay:

    def test_bulk_flexible(self):
        overlay = build_caloric_overlay(CaloricPhase.BULK, is_fixed_volume=False)
        assert overlay.volume_delta_percent == 15
        assert overlay.equipment_preference is None

    def test_bulk_fixed_volume_only_flags(self):
        overlay = build_caloric_overlay(CaloricPhase.BULK, is_fixed_volume=True)
        assert overlay.volume_delta_percent == 0
        assert ConstraintFlag.FAVOR_INTENSITY_PROGRESSION in overlay.flags

    def test_cut_flexible(self):
        overlay = build_caloric_overlay(CaloricPhase.CUT, is_fixed_volume=False)
        assert overlay.volume_delta_percent == -15
        assert overlay.equipment_preference == EquipmentPreference.MACHINE_FAVORED

    def test_cut_fixed_volume(self):
        overlay = build_caloric_overlay(CaloricPhase.CUT, is_fixed_volume=True)
        assert overlay.volume_delta_percent == 0
        assert ConstraintFlag.FAVOR_LOAD_FORM_PRECISION in overlay.flags

    def test_capped_by_methodology_ceiling(self):
        overlay = build_caloric_overlay(CaloricPhase.BULK, False, adjustment_percent=15, volume_ceiling_percent=10)
        assert overlay.volume_delta_percent == 10

    def test_maintenance_and_none(self):
        assert build_caloric_overlay(CaloricPhase.MAINTENANCE, False).volume_delta_percent == 0
        assert build_caloric_overlay(None, False).phase == CaloricPhase.MAINTENANCE
