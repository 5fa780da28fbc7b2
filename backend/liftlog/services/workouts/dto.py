from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from liftlog.services.exercises.dto import ExerciseOut

# ------------------------------ Output DTOs ------------------------------ #


@dataclass(frozen=True, slots=True)
class WorkoutOut:
    """
    Public projection of a workout.

    ``duration_minutes`` is ``None`` while the workout is in progress.
    """

    id: int
    user_id: str
    name: str
    started_at: datetime
    completed_at: datetime | None
    duration_minutes: int | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True, slots=True)
class WorkoutExerciseOut:
    """Exercise slot within a workout."""

    id: int
    workout_id: int
    exercise_id: int
    order: int
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class SetOut:
    """Logged set."""

    id: int
    workout_exercise_id: int
    set_number: int
    weight_kg: Decimal
    reps: int
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class WorkoutExerciseTreeOut:
    """Exercise slot with its catalog entry and sets ordered by ``set_number``."""

    id: int
    workout_id: int
    order: int
    exercise: ExerciseOut
    sets: list[SetOut]
