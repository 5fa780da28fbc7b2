# liftlog/services/_shared/base.py
from __future__ import annotations

from typing import Any

from flask import current_app, has_app_context
from marshmallow import Schema

from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet
from liftlog.schemas.common import INT_MAX
from liftlog.services._shared.errors import (
    NotFoundOrUnauthorizedError,
    UnauthenticatedError,
    ValidationFailedError,
)
from liftlog.services._shared.policies.ownership import owned_by
from liftlog.services._shared.validation import Invalid, parse
from liftlog.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Guard every entry point: authenticated subject, positive ids, payloads.
    * Offer the ownership checks shared by every workout-tree mutation.
    * Keep services thin, orchestration-only, no web/ORM leakage.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    - Ownership failures never distinguish "missing" from "foreign".
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(
        self, *, isolation: str | None = None, enforce_db_readonly: bool = True
    ) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level (e.g. "READ COMMITTED").
        :type isolation: str | None
        :param enforce_db_readonly: Apply `SET TRANSACTION READ ONLY` when supported.
        :type enforce_db_readonly: bool
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
            enforce_db_readonly=enforce_db_readonly,
        )

    # ----------------------- Validation utilities ---------------------------

    @staticmethod
    def ensure_authenticated(user_id: Any) -> str:
        """
        Return ``user_id`` when it is a non-empty string.

        :raises UnauthenticatedError: For ``None``, blank or non-string values.
        """
        if not isinstance(user_id, str) or not user_id.strip():
            raise UnauthenticatedError()
        return user_id

    @staticmethod
    def ensure_id(value: Any, *, field: str = "id") -> int:
        """
        Return ``value`` when it is a positive integer within ``INT_MAX``.

        :raises ValidationFailedError: Otherwise (booleans included).
        """
        if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= INT_MAX:
            raise ValidationFailedError({field: [f"Must be an integer between 1 and {INT_MAX}."]})
        return value

    @staticmethod
    def validated(schema: Schema, payload: Any) -> dict[str, Any]:
        """
        Load ``payload`` with ``schema`` or raise before touching storage.

        :raises ValidationFailedError: When the payload is rejected.
        """
        result = parse(schema, payload)
        if isinstance(result, Invalid):
            raise ValidationFailedError(result.messages)
        return result.value

    @staticmethod
    def setting(key: str, default: Any) -> Any:
        """Read a config value from the active app, falling back to ``default``."""
        if has_app_context():
            return current_app.config.get(key, default)
        return default

    # --------------------------- Ownership ----------------------------------

    @staticmethod
    def owned_workout(uow: Any, user_id: str, workout_id: int) -> Workout:
        """
        Fetch a workout with a single ``id AND user_id`` predicate.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        workout = uow.workouts.get_for_user(user_id, workout_id)
        if workout is None:
            raise NotFoundOrUnauthorizedError("Workout", workout_id)
        return workout

    @staticmethod
    def owned_workout_exercise(uow: Any, user_id: str, workout_exercise_id: int) -> WorkoutExercise:
        """
        Fetch a workout exercise joined to its workout and check the owner.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        row = uow.workout_exercises.get_with_workout(workout_exercise_id)
        if not owned_by(row, user_id):
            raise NotFoundOrUnauthorizedError("WorkoutExercise", workout_exercise_id)
        return row

    @staticmethod
    def owned_set(uow: Any, user_id: str, set_id: int) -> WorkoutSet:
        """
        Fetch a set through the three-table join and check the owner.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        row = uow.sets.get_with_owner(set_id)
        if not owned_by(row, user_id):
            raise NotFoundOrUnauthorizedError("Set", set_id)
        return row
