from __future__ import annotations

import logging
from typing import Any

from liftlog.models.workout import WorkoutSet
from liftlog.schemas.workout_set import BulkSetCreateSchema, SetCreateSchema, SetUpdateSchema
from liftlog.services._shared.base import BaseService
from liftlog.services._shared.dto import DeletedOut
from liftlog.services._shared.errors import NotFoundOrUnauthorizedError

from ._converters import set_to_out
from .dto import SetOut

logger = logging.getLogger(__name__)


class SetLogService(BaseService):
    """
    Log, correct and remove sets on workouts owned by the caller.

    Every mutation first proves ownership through the parent chain
    (Set → WorkoutExercise → Workout) inside the same unit of work.
    """

    _create_schema = SetCreateSchema()
    _update_schema = SetUpdateSchema()
    _bulk_schema = BulkSetCreateSchema()

    def create(self, user_id: str, workout_exercise_id: int, payload: dict[str, Any]) -> SetOut:
        """
        Log one set.

        :param payload: ``set_number``, ``weight_kg`` and ``reps``.
        :raises NotFoundOrUnauthorizedError: When the workout exercise is
            missing or foreign; nothing is inserted.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_exercise_id = self.ensure_id(workout_exercise_id, field="workout_exercise_id")
        data = self.validated(self._create_schema, payload)
        with self.rw_uow() as uow:
            parent = self.owned_workout_exercise(uow, user_id, workout_exercise_id)
            row = uow.sets.add(WorkoutSet(workout_exercise_id=parent.id, **data))
            out = set_to_out(row)
        logger.info(
            "Set logged",
            extra={"user_id": user_id, "workout_exercise_id": parent.id, "set_id": out.id},
        )
        return out

    def update(self, user_id: str, set_id: int, payload: dict[str, Any]) -> SetOut:
        """
        Replace weight and reps of an owned set.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        user_id = self.ensure_authenticated(user_id)
        set_id = self.ensure_id(set_id, field="set_id")
        data = self.validated(self._update_schema, payload)
        with self.rw_uow() as uow:
            row = self.owned_set(uow, user_id, set_id)
            uow.sets.assign_updates(row, data)
            out = set_to_out(row)
        logger.info(
            "Set updated", extra={"user_id": user_id, "set_id": set_id, "fields": sorted(data)}
        )
        return out

    def delete(self, user_id: str, set_id: int) -> DeletedOut:
        """
        Remove an owned set.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        user_id = self.ensure_authenticated(user_id)
        set_id = self.ensure_id(set_id, field="set_id")
        with self.rw_uow() as uow:
            row = self.owned_set(uow, user_id, set_id)
            uow.sets.delete(row)
        logger.info("Set deleted", extra={"user_id": user_id, "set_id": set_id})
        return DeletedOut(id=set_id)

    def create_many(self, user_id: str, workout_id: int, payload: dict[str, Any]) -> list[SetOut]:
        """
        Log several sets for one workout with a single bulk insert.

        Ownership is checked once on the workout; every ``workout_exercise_id``
        must belong to it. Either all sets are inserted or none is.

        :param payload: ``{"sets": [{workout_exercise_id, set_number, weight_kg, reps}, ...]}``.
        :raises NotFoundOrUnauthorizedError: When the workout is missing or
            foreign, or a referenced workout exercise is not part of it.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        items = self.validated(self._bulk_schema, payload)["sets"]
        with self.rw_uow() as uow:
            workout = self.owned_workout(uow, user_id, workout_id)
            wanted = {item["workout_exercise_id"] for item in items}
            missing = wanted - uow.workout_exercises.ids_in_workout(workout.id, wanted)
            if missing:
                raise NotFoundOrUnauthorizedError("WorkoutExercise", min(missing))
            rows = uow.sets.add_many(items)
            out = [set_to_out(r) for r in rows]
        logger.info(
            "Sets logged",
            extra={"user_id": user_id, "workout_id": workout_id, "count": len(out)},
        )
        return out
