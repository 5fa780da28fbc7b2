"""Resolve the owning :class:`Workout` of any node in the workout tree."""

from __future__ import annotations

from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet

from .common import is_owner

OwnedEntity = Workout | WorkoutExercise | WorkoutSet


def resolve_owning_workout(entity: OwnedEntity) -> Workout:
    """
    Walk up ``Set → WorkoutExercise → Workout`` to the aggregate root.

    Callers are expected to have loaded the parents (repositories join them).
    """
    if isinstance(entity, Workout):
        return entity
    if isinstance(entity, WorkoutExercise):
        return entity.workout
    if isinstance(entity, WorkoutSet):
        return entity.workout_exercise.workout
    raise TypeError(f"Unsupported entity: {type(entity).__name__}")


def owned_by(entity: OwnedEntity | None, user_id: str) -> bool:
    """Return ``True`` when ``entity`` exists and its root belongs to ``user_id``."""
    if entity is None:
        return False
    return is_owner(actor_id=user_id, owner_id=resolve_owning_workout(entity).user_id)
