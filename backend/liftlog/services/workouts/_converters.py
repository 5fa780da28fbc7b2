from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import Row

from liftlog.models.exercise import Exercise
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from liftlog.schemas.common import to_utc
from liftlog.services.exercises.service import exercise_to_out

from ._dates import duration_minutes
from .dto import SetOut, WorkoutExerciseOut, WorkoutExerciseTreeOut, WorkoutOut


def _utc(value):
    return to_utc(value) if value is not None else None


def workout_to_out(row: Workout) -> WorkoutOut:
    started_at = to_utc(row.started_at)
    completed_at = _utc(row.completed_at)
    return WorkoutOut(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        started_at=started_at,
        completed_at=completed_at,
        duration_minutes=duration_minutes(started_at, completed_at),
        created_at=_utc(row.created_at),
        updated_at=_utc(row.updated_at),
    )


def workout_exercise_to_out(row: WorkoutExercise) -> WorkoutExerciseOut:
    return WorkoutExerciseOut(
        id=row.id,
        workout_id=row.workout_id,
        exercise_id=row.exercise_id,
        order=row.order,
        created_at=_utc(row.created_at),
    )


def set_to_out(row: WorkoutSet) -> SetOut:
    return SetOut(
        id=row.id,
        workout_exercise_id=row.workout_exercise_id,
        set_number=row.set_number,
        weight_kg=row.weight_kg,
        reps=row.reps,
        created_at=_utc(row.created_at),
    )


def tree_from_rows(
    rows: Iterable[Row[tuple[WorkoutExercise, Exercise, WorkoutSet | None]]],
) -> list[WorkoutExerciseTreeOut]:
    """
    Group flat ``(workout_exercise, exercise, set)`` rows by workout exercise.

    Input order is preserved for groups; sets are re-sorted by ``set_number``.
    """
    groups: dict[int, tuple[WorkoutExercise, Exercise, list[WorkoutSet]]] = {}
    for we, exercise, workout_set in rows:
        entry = groups.setdefault(we.id, (we, exercise, []))
        if workout_set is not None:
            entry[2].append(workout_set)

    return [
        WorkoutExerciseTreeOut(
            id=we.id,
            workout_id=we.workout_id,
            order=we.order,
            exercise=exercise_to_out(exercise),
            sets=[set_to_out(s) for s in sorted(sets, key=lambda s: (s.set_number, s.id))],
        )
        for we, exercise, sets in groups.values()
    ]
