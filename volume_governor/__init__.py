"""
Volume Governor - Training volume and exercise governance engine.

Deterministic rules around generative workout planning:
- taxonomy: free-text muscle labels -> canonical MuscleKey
- volume: per-user, per-cycle set ledger and landmark (MEV/MAV/MRV) status
- fatigue: readiness / consecutive days / phase / caloric overlays
- constraints: priority-ordered ConstraintSet resolution
- validators: approve / caution / reject workout modifications
- selection: collaborator-driven exercise selection under constraints
"""

from volume_governor.constraints import ConstraintSet, resolve
from volume_governor.errors import (
    CollaboratorFailure,
    ConfigurationMissing,
    GovernorError,
    InvalidCount,
    MalformedProposal,
)
from volume_governor.fatigue import FatigueContext
from volume_governor.methodology import MethodologyConfig
from volume_governor.taxonomy import MuscleKey, Unmatched, normalize
from volume_governor.volume import LandmarkStatus, VolumeLandmarks, VolumeLedger, evaluate

__version__ = "0.1.0"

__all__ = [
    "ConstraintSet",
    "resolve",
    "CollaboratorFailure",
    "ConfigurationMissing",
    "GovernorError",
    "InvalidCount",
    "MalformedProposal",
    "FatigueContext",
    "MethodologyConfig",
    "MuscleKey",
    "Unmatched",
    "normalize",
    "LandmarkStatus",
    "VolumeLandmarks",
    "VolumeLedger",
    "evaluate",
]
