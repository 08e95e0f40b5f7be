"""
Fatigue & periodization - context models and overlay builders.

Modules:
- models: FatigueContext, enums, ConstraintFragment, CaloricOverlay
- builder: readiness / consecutive-day / phase / caloric overlays
"""

from volume_governor.fatigue.models import (
    ALL_TECHNIQUES,
    CaloricOverlay,
    CaloricPhase,
    ConstraintFlag,
    ConstraintFragment,
    EquipmentPreference,
    FatigueContext,
    MesocyclePhase,
    ReadinessBucket,
    TechniqueId,
)
from volume_governor.fatigue.builder import (
    build_caloric_overlay,
    build_consecutive_days_overlay,
    build_fatigue_overlay,
    build_phase_overlay,
    build_readiness_overlay,
    readiness_bucket,
)

__all__ = [
    "ALL_TECHNIQUES",
    "CaloricOverlay",
    "CaloricPhase",
    "ConstraintFlag",
    "ConstraintFragment",
    "EquipmentPreference",
    "FatigueContext",
    "MesocyclePhase",
    "ReadinessBucket",
    "TechniqueId",
    "build_caloric_overlay",
    "build_consecutive_days_overlay",
    "build_fatigue_overlay",
    "build_phase_overlay",
    "build_readiness_overlay",
    "readiness_bucket",
]
