from __future__ import annotations

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError

from liftlog.schemas.workout_exercise import (
    WorkoutExerciseAddByNameSchema,
    WorkoutExerciseAddSchema,
)
from liftlog.services._shared.base import BaseService
from liftlog.services._shared.dto import DeletedOut
from liftlog.services._shared.errors import ConflictError, NotFoundError

from ._converters import workout_exercise_to_out
from .dto import WorkoutExerciseOut

logger = logging.getLogger(__name__)


class WorkoutExerciseService(BaseService):
    """
    Attach and detach exercises on workouts owned by the caller.

    Positions are append-only: a new slot takes ``max(order) + 1`` (``0`` for
    an empty workout) and removed positions are never reused.
    """

    _add_schema = WorkoutExerciseAddSchema()
    _add_by_name_schema = WorkoutExerciseAddByNameSchema()

    def add(self, user_id: str, workout_id: int, payload: dict[str, Any]) -> WorkoutExerciseOut:
        """
        Append a catalog exercise to an owned workout.

        :param payload: ``{"exercise_id": int}``.
        :raises NotFoundOrUnauthorizedError: When the workout is missing or foreign.
        :raises NotFoundError: When the exercise does not exist.
        :raises ConflictError: When a concurrent append took the same position.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        data = self.validated(self._add_schema, payload)
        try:
            with self.rw_uow() as uow:
                workout = self.owned_workout(uow, user_id, workout_id)
                exercise = uow.exercises.get(data["exercise_id"])
                if exercise is None:
                    raise NotFoundError("Exercise", data["exercise_id"])
                row = uow.workout_exercises.append(workout_id=workout.id, exercise_id=exercise.id)
                out = workout_exercise_to_out(row)
        except IntegrityError as ie:
            raise ConflictError("WorkoutExercise", "order already taken") from ie
        self._log_added(user_id, out)
        return out

    def add_by_name(
        self, user_id: str, workout_id: int, payload: dict[str, Any]
    ) -> WorkoutExerciseOut:
        """
        Append an exercise by name, creating the catalog entry when missing.

        Ownership check, get-or-create and append share one unit of work.

        :param payload: ``{"exercise_name": str}``.
        :raises NotFoundOrUnauthorizedError: When the workout is missing or foreign.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        data = self.validated(self._add_by_name_schema, payload)
        try:
            with self.rw_uow() as uow:
                workout = self.owned_workout(uow, user_id, workout_id)
                exercise, _ = uow.exercises.get_or_create(data["exercise_name"])
                row = uow.workout_exercises.append(workout_id=workout.id, exercise_id=exercise.id)
                out = workout_exercise_to_out(row)
        except IntegrityError as ie:
            raise ConflictError("WorkoutExercise", "order already taken") from ie
        self._log_added(user_id, out)
        return out

    def remove(self, user_id: str, workout_exercise_id: int) -> DeletedOut:
        """
        Remove an exercise slot (and its sets) from an owned workout.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_exercise_id = self.ensure_id(workout_exercise_id, field="workout_exercise_id")
        with self.rw_uow() as uow:
            row = self.owned_workout_exercise(uow, user_id, workout_exercise_id)
            uow.workout_exercises.delete(row)
        logger.info(
            "Workout exercise removed",
            extra={"user_id": user_id, "workout_exercise_id": workout_exercise_id},
        )
        return DeletedOut(id=workout_exercise_id)

    @staticmethod
    def _log_added(user_id: str, out: WorkoutExerciseOut) -> None:
        logger.info(
            "Exercise added to workout",
            extra={
                "user_id": user_id,
                "workout_id": out.workout_id,
                "workout_exercise_id": out.id,
                "exercise_id": out.exercise_id,
            },
        )
