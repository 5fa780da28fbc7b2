"""Marshmallow schemas validating service payloads."""

from .exercise import ExerciseCreateSchema
from .workout import WorkoutCreateSchema, WorkoutUpdateSchema
from .workout_exercise import WorkoutExerciseAddByNameSchema, WorkoutExerciseAddSchema
from .workout_set import (
    BulkSetCreateSchema,
    BulkSetItemSchema,
    SetCreateSchema,
    SetUpdateSchema,
)

__all__ = [
    "ExerciseCreateSchema",
    "WorkoutCreateSchema",
    "WorkoutUpdateSchema",
    "WorkoutExerciseAddSchema",
    "WorkoutExerciseAddByNameSchema",
    "SetCreateSchema",
    "SetUpdateSchema",
    "BulkSetItemSchema",
    "BulkSetCreateSchema",
]
