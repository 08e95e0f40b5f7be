"""
Exercise selection - generative collaborator bounded by resolved constraints.
"""

from volume_governor.selection.models import (
    AlertType,
    GeneratedExercise,
    MuscleTarget,
    NormalizedExercise,
    SelectionAlert,
    SelectionRequest,
    SelectionResult,
)
from volume_governor.selection.collaborator import (
    ExerciseCollaborator,
    GeminiExerciseCollaborator,
    MockExerciseCollaborator,
    get_exercise_collaborator,
)
from volume_governor.selection.orchestrator import ExerciseSelectionOrchestrator

__all__ = [
    "AlertType",
    "GeneratedExercise",
    "MuscleTarget",
    "NormalizedExercise",
    "SelectionAlert",
    "SelectionRequest",
    "SelectionResult",
    "ExerciseCollaborator",
    "GeminiExerciseCollaborator",
    "MockExerciseCollaborator",
    "get_exercise_collaborator",
    "ExerciseSelectionOrchestrator",
]
