"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from liftlog.repositories.base import BaseRepository, apply_sorting, parse_sort_tokens
from liftlog.repositories.exercise import ExerciseRepository
from liftlog.repositories.workout import WorkoutRepository
from liftlog.repositories.workout_exercise import WorkoutExerciseRepository
from liftlog.repositories.workout_set import WorkoutSetRepository

__all__ = [
    # Base
    "BaseRepository",
    "apply_sorting",
    "parse_sort_tokens",
    # Domain
    "ExerciseRepository",
    "WorkoutRepository",
    "WorkoutExerciseRepository",
    "WorkoutSetRepository",
]
