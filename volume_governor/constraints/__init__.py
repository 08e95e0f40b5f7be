"""
Constraint resolution - prioritized merge into a ConstraintSet.

Modules:
- models: ConstraintSet, MuscleDirective
- resolver: resolve() / resolve_from_volume()
"""

from volume_governor.constraints.models import ConstraintSet, MuscleDirective
from volume_governor.constraints.resolver import (
    build_muscle_directives,
    clamp_volume,
    resolve,
    resolve_from_volume,
)

__all__ = [
    "ConstraintSet",
    "MuscleDirective",
    "build_muscle_directives",
    "clamp_volume",
    "resolve",
    "resolve_from_volume",
]
