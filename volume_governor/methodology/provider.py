"""
Methodology Providers - Load approach configurations (read-only).

Implementations:
- InMemoryMethodologyProvider: fixtures and CLI files
- FirestoreMethodologyProvider: APPROACHES_COLLECTION documents

Providers raise ConfigurationMissing when a methodology cannot be loaded.
This engine never writes back to the methodology source.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Union

from google.cloud import firestore

from volume_governor.config import APPROACHES_COLLECTION
from volume_governor.errors import ConfigurationMissing
from volume_governor.methodology.models import MethodologyConfig

logger = logging.getLogger(__name__)


class MethodologyProvider(ABC):
    """Read-only source of methodology configurations."""

    @abstractmethod
    def get(self, methodology_id: str) -> MethodologyConfig:
        """
        Load a methodology.

        Raises:
            ConfigurationMissing: If the methodology does not exist or is invalid
        """
        pass


class InMemoryMethodologyProvider(MethodologyProvider):

    def __init__(self, methodologies: Optional[Mapping[str, Union[MethodologyConfig, Dict[str, Any]]]] = None):
        self._methodologies: Dict[str, MethodologyConfig] = {}
        for methodology_id, config in (methodologies or {}).items():
            self.add(config if isinstance(config, MethodologyConfig)
                     else MethodologyConfig.from_dict(config, methodology_id=methodology_id))

    def add(self, config: MethodologyConfig) -> None:
        self._methodologies[config.methodology_id] = config

    def get(self, methodology_id: str) -> MethodologyConfig:
        config = self._methodologies.get(methodology_id)
        if config is None:
            raise ConfigurationMissing(
                f"Methodology not found: {methodology_id}", methodology_id=methodology_id
            )
        return config


class FirestoreMethodologyProvider(MethodologyProvider):

    def __init__(self, db: Optional[firestore.Client] = None, collection: str = APPROACHES_COLLECTION):
        self._db = db
        self.collection = collection

    @property
    def db(self) -> firestore.Client:
        if self._db is None:
            from volume_governor.firestore_client import get_db
            self._db = get_db()
        return self._db

    def get(self, methodology_id: str) -> MethodologyConfig:
        if not methodology_id:
            raise ConfigurationMissing("methodology_id is required")
        try:
            doc = self.db.collection(self.collection).document(methodology_id).get()
        except Exception as e:
            logger.error("Failed to load methodology %s: %s", methodology_id, e)
            raise ConfigurationMissing(
                f"Methodology could not be loaded: {methodology_id}", methodology_id=methodology_id
            ) from e

        if not doc.exists:
            raise ConfigurationMissing(
                f"Methodology not found: {methodology_id}", methodology_id=methodology_id
            )

        try:
            config = MethodologyConfig.from_dict(doc.to_dict() or {}, methodology_id=methodology_id)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigurationMissing(
                f"Methodology {methodology_id} is malformed: {e}", methodology_id=methodology_id
            ) from e

        logger.info(
            "Loaded methodology %s (%d landmark rows, fixed_volume=%s)",
            methodology_id, len(config.landmarks), config.is_fixed_volume,
        )
        return config


__all__ = [
    "MethodologyProvider",
    "InMemoryMethodologyProvider",
    "FirestoreMethodologyProvider",
]
