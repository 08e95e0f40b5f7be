"""
Methodology configuration - read-only approach limits and landmarks.

Modules:
- models: MethodologyConfig, TechniqueRule, parse_technique
- provider: in-memory and Firestore providers
"""

from volume_governor.methodology.models import (
    MethodologyConfig,
    TechniqueRule,
    parse_technique,
)
from volume_governor.methodology.provider import (
    FirestoreMethodologyProvider,
    InMemoryMethodologyProvider,
    MethodologyProvider,
)

__all__ = [
    "MethodologyConfig",
    "TechniqueRule",
    "parse_technique",
    "MethodologyProvider",
    "InMemoryMethodologyProvider",
    "FirestoreMethodologyProvider",
]
