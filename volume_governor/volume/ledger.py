"""
Volume Ledger - Per-muscle set accumulation within a training cycle.

Operations:
- record_sets: additive, rejects invalid counts with InvalidCount
- record_batch: validate everything, then one atomic store write
- get_total: 0 for unseen muscles, never None
- reset_cycle: zero every entry (cycle-boundary events only)

Concurrency:
Read-modify-write operations for the same (user, cycle) are serialized by a
per-key threading.Lock held in a weak registry, so idle user-cycles do not
accumulate locks. No cross-user coordination.
"""

from __future__ import annotations

import logging
import math
import threading
import weakref
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from volume_governor.errors import InvalidCount
from volume_governor.taxonomy.muscles import MuscleKey
from volume_governor.taxonomy.normalizer import Unmatched, normalize
from volume_governor.volume.models import VolumeLedgerEntry
from volume_governor.volume.store import InMemoryLedgerStore, LedgerStore

logger = logging.getLogger(__name__)


# =============================================================================
# PER-(USER, CYCLE) LOCKS
# =============================================================================

_cycle_locks: "weakref.WeakValueDictionary[Tuple[str, str], threading.Lock]" = weakref.WeakValueDictionary()
_cycle_locks_guard = threading.Lock()


def _lock_for(user_id: str, cycle_id: str) -> threading.Lock:
    key = (user_id, cycle_id)
    with _cycle_locks_guard:
        lock = _cycle_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _cycle_locks[key] = lock
        return lock


@contextmanager
def cycle_lock(user_id: str, cycle_id: str) -> Iterator[None]:
    """Hold the mutual-exclusion scope for one user-cycle."""
    lock = _lock_for(user_id, cycle_id)
    with lock:
        yield


# =============================================================================
# VALIDATION
# =============================================================================

def validate_count(set_count: Any) -> int:
    """
    Validate a set count.

    Raises:
        InvalidCount: negative, NaN, non-integral, or bool values
    """
    if isinstance(set_count, bool):
        raise InvalidCount(f"Set count must be an integer, got {set_count!r}", value=set_count)
    if isinstance(set_count, float):
        if math.isnan(set_count) or math.isinf(set_count) or not set_count.is_integer():
            raise InvalidCount(f"Set count must be a whole number, got {set_count!r}", value=set_count)
        set_count = int(set_count)
    if not isinstance(set_count, int):
        raise InvalidCount(f"Set count must be an integer, got {set_count!r}", value=set_count)
    if set_count < 0:
        raise InvalidCount(f"Set count must be >= 0, got {set_count}", value=set_count)
    return set_count


def _muscle_key(muscle: Any) -> MuscleKey:
    key = normalize(muscle)
    if isinstance(key, Unmatched):
        raise ValueError(f"Unknown muscle for ledger: {muscle!r}")
    return key


# =============================================================================
# LEDGER
# =============================================================================

class VolumeLedger:
    """
    Volume ledger for one user.

    Args:
        user_id: Owner of the ledger
        store: Backend (defaults to a process-local InMemoryLedgerStore)
    """

    def __init__(self, user_id: str, store: Optional[LedgerStore] = None):
        if not user_id:
            raise ValueError("user_id is required")
        self.user_id = user_id
        self.store = store or InMemoryLedgerStore()

    def record_sets(self, muscle: MuscleKey, set_count: Any, cycle_id: str) -> int:
        """
        Add sets to a muscle's total for the cycle.

        Returns:
            The new total
        """
        count = validate_count(set_count)
        key = _muscle_key(muscle)
        with cycle_lock(self.user_id, cycle_id):
            if count:
                self.store.increment(self.user_id, cycle_id, {key.value: count})
            total = self.store.read(self.user_id, cycle_id).get(key.value, 0)
        logger.info(
            "Recorded %d sets for %s (user=%s, cycle=%s), total=%d",
            count, key.value, self.user_id, cycle_id, total,
        )
        return total

    def record_batch(self, cycle_id: str, sets_by_muscle: Mapping[Any, Any]) -> Dict[MuscleKey, int]:
        """
        Commit several muscles in one atomic write.

        Every count is validated before anything is written, so an invalid
        entry leaves the ledger untouched.

        Returns:
            Snapshot of the cycle after the commit
        """
        deltas: Dict[str, int] = {}
        for muscle, raw_count in sets_by_muscle.items():
            count = validate_count(raw_count)
            key = _muscle_key(muscle)
            if count:
                deltas[key.value] = deltas.get(key.value, 0) + count

        with cycle_lock(self.user_id, cycle_id):
            if deltas:
                self.store.increment(self.user_id, cycle_id, deltas)
            snapshot = self._snapshot_unlocked(cycle_id)
        logger.info(
            "Committed ledger batch (user=%s, cycle=%s): %s",
            self.user_id, cycle_id, deltas,
        )
        return snapshot

    def get_total(self, muscle: MuscleKey, cycle_id: str) -> int:
        key = normalize(muscle)
        if isinstance(key, Unmatched):
            return 0
        return self.store.read(self.user_id, cycle_id).get(key.value, 0)

    def reset_cycle(self, cycle_id: str) -> None:
        with cycle_lock(self.user_id, cycle_id):
            self.store.reset(self.user_id, cycle_id)
        logger.info("Reset ledger (user=%s, cycle=%s)", self.user_id, cycle_id)

    def snapshot(self, cycle_id: str) -> Dict[MuscleKey, int]:
        """Current totals for every recorded muscle in the cycle."""
        return self._snapshot_unlocked(cycle_id)

    def entries(self, cycle_id: str) -> List[VolumeLedgerEntry]:
        return [
            VolumeLedgerEntry(muscle=muscle, sets_accumulated=sets, cycle_id=cycle_id)
            for muscle, sets in self.snapshot(cycle_id).items()
        ]

    def _snapshot_unlocked(self, cycle_id: str) -> Dict[MuscleKey, int]:
        snapshot: Dict[MuscleKey, int] = {}
        for raw, sets in self.store.read(self.user_id, cycle_id).items():
            key = normalize(raw)
            if isinstance(key, Unmatched):
                logger.warning("Dropping unknown ledger muscle '%s'", raw)
                continue
            snapshot[key] = snapshot.get(key, 0) + sets
        return snapshot


__all__ = [
    "VolumeLedger",
    "cycle_lock",
    "validate_count",
]
