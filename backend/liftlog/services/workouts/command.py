from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from liftlog.schemas.common import NAME_MAX_LENGTH
from liftlog.schemas.workout import WorkoutCreateSchema, WorkoutUpdateSchema
from liftlog.services._shared.base import BaseService
from liftlog.services._shared.dto import DeletedOut
from liftlog.services._shared.errors import (
    NotFoundOrUnauthorizedError,
    TransactionFailedError,
    ValidationFailedError,
)

from ._converters import workout_to_out
from .dto import WorkoutOut

logger = logging.getLogger(__name__)

DEFAULT_COPY_SUFFIX = " (Copy)"


def copy_name(name: str, suffix: str) -> str:
    """Append ``suffix`` to ``name``, trimming ``name`` so the result fits the column."""
    room = NAME_MAX_LENGTH - len(suffix)
    if room <= 0:
        return (name + suffix)[:NAME_MAX_LENGTH]
    return name[:room] + suffix


class WorkoutCommandService(BaseService):
    """
    Application service for workout lifecycle mutations.

    Notes
    -----
    - ``update`` and ``delete`` fold the ownership check into the write
      predicate (``id AND user_id``); zero affected rows means "not found".
    - ``duplicate`` runs in one unit of work: either the copy and all of its
      exercises exist afterwards, or nothing does.
    """

    _create_schema = WorkoutCreateSchema()
    _update_schema = WorkoutUpdateSchema()

    def create(self, user_id: str, payload: dict[str, Any]) -> WorkoutOut:
        """
        Insert a workout stamped with ``user_id``.

        :param payload: ``name``, ``started_at`` and optional ``completed_at``.
        :raises ValidationFailedError: On invalid payloads.
        """
        user_id = self.ensure_authenticated(user_id)
        data = self.validated(self._create_schema, payload)
        with self.rw_uow() as uow:
            row = uow.workouts.create_workout(user_id=user_id, **data)
            out = workout_to_out(row)
        logger.info("Workout created", extra={"user_id": user_id, "workout_id": out.id})
        return out

    def update(self, user_id: str, workout_id: int, payload: dict[str, Any]) -> WorkoutOut:
        """
        Apply a partial update with a single ``UPDATE ... RETURNING``.

        :raises NotFoundOrUnauthorizedError: When no owned row matched.
        :raises ValidationFailedError: On invalid payloads, including a
            completion earlier than the stored start.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        data = self.validated(self._update_schema, payload)
        try:
            with self.rw_uow() as uow:
                row = uow.workouts.update_for_user(user_id, workout_id, data)
                if row is None:
                    raise NotFoundOrUnauthorizedError("Workout", workout_id)
                out = workout_to_out(row)
        except IntegrityError as ie:
            raise ValidationFailedError(
                {"completed_at": ["completed_at must not be earlier than started_at."]}
            ) from ie
        logger.info(
            "Workout updated",
            extra={"user_id": user_id, "workout_id": workout_id, "fields": sorted(data)},
        )
        return out

    def delete(self, user_id: str, workout_id: int) -> DeletedOut:
        """
        Delete an owned workout; exercises and sets go with it.

        :raises NotFoundOrUnauthorizedError: When no owned row matched.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        with self.rw_uow() as uow:
            deleted_id = uow.workouts.delete_for_user(user_id, workout_id)
            if deleted_id is None:
                raise NotFoundOrUnauthorizedError("Workout", workout_id)
        logger.info("Workout deleted", extra={"user_id": user_id, "workout_id": deleted_id})
        return DeletedOut(id=deleted_id)

    def duplicate(self, user_id: str, workout_id: int) -> WorkoutOut:
        """
        Copy an owned workout and its exercise list into a new workout.

        The copy gets a suffixed name, ``started_at`` set to now and no
        ``completed_at``. Exercises keep their ``order``; sets are not copied.

        :raises NotFoundOrUnauthorizedError: When the source is missing or foreign.
        :raises TransactionFailedError: When any storage step fails; nothing
            is left behind.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        suffix = self.setting("WORKOUT_COPY_SUFFIX", DEFAULT_COPY_SUFFIX)
        try:
            with self.rw_uow() as uow:
                source = self.owned_workout(uow, user_id, workout_id)
                slots = uow.workout_exercises.list_for_workout(source.id)
                copy = uow.workouts.create_workout(
                    user_id=user_id,
                    name=copy_name(source.name, suffix),
                    started_at=datetime.now(timezone.utc),
                    completed_at=None,
                )
                uow.workout_exercises.add_many(
                    [
                        {"workout_id": copy.id, "exercise_id": s.exercise_id, "order": s.order}
                        for s in slots
                    ]
                )
                out = workout_to_out(copy)
        except SQLAlchemyError as exc:
            raise TransactionFailedError("duplicate_workout") from exc
        logger.info(
            "Workout duplicated",
            extra={
                "user_id": user_id,
                "workout_id": out.id,
                "source_workout_id": workout_id,
                "count": len(slots),
            },
        )
        return out
