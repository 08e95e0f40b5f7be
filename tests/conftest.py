"""
Shared fixtures: a hypertrophy methodology with quads landmarks {10, 18, 22}.
"""

import pytest

from volume_governor.methodology import InMemoryMethodologyProvider, MethodologyConfig
from volume_governor.taxonomy import MuscleKey
from volume_governor.volume import VolumeLandmarks


APPROACH_DOC = {
    "id": "hypertrophy",
    "name": "Hypertrophy Base",
    "isFixedVolume": False,
    "variables": {
        "setsPerExercise": {"working": 3},
        "sets": {"range": [2, 4]},
        "sessionDuration": {"totalSets": [12, 16]},
        "rirTarget": {"normal": 2},
        "exercisesPerSession": 6,
    },
    "volumeLandmarks": {
        "muscleGroups": {
            "quads": {"mev": 10, "mav": 18, "mrv": 22},
            "Chest": {"mev": 8, "mav": 16, "mrv": 20},
            "hamstrings": {"mev": 6, "mav": 12, "mrv": 16},
        }
    },
    "advancedTechniques": {
        "dropSet": {"minSets": 1},
        "restPause": {"minSets": 2},
    },
}


@pytest.fixture
def approach_doc():
    return dict(APPROACH_DOC)


@pytest.fixture
def methodology():
    return MethodologyConfig.from_dict(APPROACH_DOC)


@pytest.fixture
def plain_methodology():
    """Hand-built methodology without technique restrictions."""
    return MethodologyConfig(
        methodology_id="plain",
        name="Plain",
        landmarks={MuscleKey.QUADS: VolumeLandmarks(mev=10, mav=18, mrv=22)},
        max_sets_per_exercise=4,
        max_total_sets_per_workout=16,
    )


@pytest.fixture
def provider(methodology):
    return InMemoryMethodologyProvider({"hypertrophy": methodology})
