"""
Volume tracking - ledger, stores and landmark evaluation.

Modules:
- models: VolumeLandmarks, VolumeLedgerEntry, LandmarkStatus
- store: LedgerStore backends (in-memory, Firestore)
- ledger: VolumeLedger with per-(user, cycle) locking
- landmarks: evaluate() / evaluate_all() / volume_progress()
"""

from volume_governor.volume.models import (
    LandmarkStatus,
    VolumeLandmarks,
    VolumeLedgerEntry,
)
from volume_governor.volume.store import (
    FirestoreLedgerStore,
    InMemoryLedgerStore,
    LedgerStore,
)
from volume_governor.volume.ledger import VolumeLedger, cycle_lock, validate_count
from volume_governor.volume.landmarks import (
    VolumeProgress,
    evaluate,
    evaluate_all,
    volume_progress,
)

__all__ = [
    "LandmarkStatus",
    "VolumeLandmarks",
    "VolumeLedgerEntry",
    "LedgerStore",
    "InMemoryLedgerStore",
    "FirestoreLedgerStore",
    "VolumeLedger",
    "cycle_lock",
    "validate_count",
    "VolumeProgress",
    "evaluate",
    "evaluate_all",
    "volume_progress",
]
