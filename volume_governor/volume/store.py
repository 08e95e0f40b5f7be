"""
Ledger Stores - Durable backends for the volume ledger.

Storage is keyed by (user_id, cycle_id, muscle). Backends:
- InMemoryLedgerStore: tests and local runs
- FirestoreLedgerStore: one document per (user, cycle) in LEDGER_COLLECTION

Firestore document layout (volume_ledgers/{user_id}__{cycle_id}):
    {
        "user_id": "...",
        "cycle_id": "...",
        "muscles": {"quads": 19, "chest": 12},
        "updated_at": SERVER_TIMESTAMP,
    }

Increments use firestore.Increment inside a single merge write, so a batch
commit is atomic per document.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional

from google.cloud import firestore

from volume_governor.config import LEDGER_COLLECTION

logger = logging.getLogger(__name__)


class LedgerStore(ABC):
    """Key-value backend for ledger counters."""

    @abstractmethod
    def read(self, user_id: str, cycle_id: str) -> Dict[str, int]:
        """Return {muscle: sets} for the cycle (empty when unseen)."""
        pass

    @abstractmethod
    def increment(self, user_id: str, cycle_id: str, deltas: Mapping[str, int]) -> None:
        """Atomically add every delta to the cycle's counters."""
        pass

    @abstractmethod
    def reset(self, user_id: str, cycle_id: str) -> None:
        """Zero every counter for the cycle."""
        pass


class InMemoryLedgerStore(LedgerStore):
    """Process-local store."""

    def __init__(self):
        self._data: Dict[tuple, Dict[str, int]] = {}
        self._lock = threading.Lock()

    def read(self, user_id: str, cycle_id: str) -> Dict[str, int]:
        with self._lock:
            return dict(self._data.get((user_id, cycle_id), {}))

    def increment(self, user_id: str, cycle_id: str, deltas: Mapping[str, int]) -> None:
        with self._lock:
            counters = self._data.setdefault((user_id, cycle_id), {})
            for muscle, delta in deltas.items():
                counters[muscle] = counters.get(muscle, 0) + delta

    def reset(self, user_id: str, cycle_id: str) -> None:
        with self._lock:
            self._data[(user_id, cycle_id)] = {}


class FirestoreLedgerStore(LedgerStore):
    """Firestore-backed store."""

    def __init__(self, db: Optional[firestore.Client] = None, collection: str = LEDGER_COLLECTION):
        self._db = db
        self.collection = collection

    @property
    def db(self) -> firestore.Client:
        if self._db is None:
            from volume_governor.firestore_client import get_db
            self._db = get_db()
        return self._db

    def _doc_ref(self, user_id: str, cycle_id: str):
        return self.db.collection(self.collection).document(f"{user_id}__{cycle_id}")

    def read(self, user_id: str, cycle_id: str) -> Dict[str, int]:
        doc = self._doc_ref(user_id, cycle_id).get()
        if not doc.exists:
            return {}
        muscles = (doc.to_dict() or {}).get("muscles", {}) or {}
        return {muscle: int(sets) for muscle, sets in muscles.items()}

    def increment(self, user_id: str, cycle_id: str, deltas: Mapping[str, int]) -> None:
        if not deltas:
            return
        self._doc_ref(user_id, cycle_id).set(
            {
                "user_id": user_id,
                "cycle_id": cycle_id,
                "muscles": {
                    muscle: firestore.Increment(delta)
                    for muscle, delta in deltas.items()
                },
                "updated_at": firestore.SERVER_TIMESTAMP,
            },
            merge=True,
        )
        logger.debug("Ledger increment %s/%s: %s", user_id, cycle_id, dict(deltas))

    def reset(self, user_id: str, cycle_id: str) -> None:
        # Overwrite without merge drops every muscle counter
        self._doc_ref(user_id, cycle_id).set({
            "user_id": user_id,
            "cycle_id": cycle_id,
            "muscles": {},
            "updated_at": firestore.SERVER_TIMESTAMP,
        })


__all__ = [
    "LedgerStore",
    "InMemoryLedgerStore",
    "FirestoreLedgerStore",
]
