from __future__ import annotations

from datetime import date, datetime

from liftlog.schemas.common import to_utc
from liftlog.services._shared.base import BaseService
from liftlog.services._shared.errors import NotFoundOrUnauthorizedError, ValidationFailedError

from ._converters import tree_from_rows, workout_to_out
from ._dates import day_bounds, resolve_tz
from .dto import WorkoutExerciseTreeOut, WorkoutOut


class WorkoutQueryService(BaseService):
    """
    Read-only access to workouts, always scoped to the requesting subject.

    Reads return ``None`` (or an empty list) for rows the subject does not own;
    they never reveal whether a foreign row exists.
    """

    def find(self, user_id: str, workout_id: int) -> WorkoutOut | None:
        """
        Fetch one workout with a single ``id AND user_id`` predicate.

        :returns: Projection, or ``None`` when missing or foreign.
        :rtype: :class:`WorkoutOut` | None
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        with self.ro_uow() as uow:
            row = uow.workouts.get_for_user(user_id, workout_id)
            return workout_to_out(row) if row is not None else None

    def get(self, user_id: str, workout_id: int) -> WorkoutOut:
        """
        Like :meth:`find` but raising on absence.

        :raises NotFoundOrUnauthorizedError: When missing or foreign.
        """
        out = self.find(user_id, workout_id)
        if out is None:
            raise NotFoundOrUnauthorizedError("Workout", workout_id)
        return out

    def list_for_user(self, user_id: str) -> list[WorkoutOut]:
        """Return every workout of ``user_id`` ordered by ``started_at``."""
        user_id = self.ensure_authenticated(user_id)
        with self.ro_uow() as uow:
            return [workout_to_out(r) for r in uow.workouts.list_for_user(user_id)]

    def list_active_between(
        self, user_id: str, day_start: datetime, day_end: datetime
    ) -> list[WorkoutOut]:
        """
        Return workouts active within ``[day_start, day_end]``.

        A workout is active when ``started_at <= day_end`` and it is either in
        progress or ``completed_at >= day_start``. Naive bounds are read as UTC.

        :raises ValidationFailedError: When a bound is not a datetime or the
            range is inverted.
        """
        user_id = self.ensure_authenticated(user_id)
        if not isinstance(day_start, datetime) or not isinstance(day_end, datetime):
            raise ValidationFailedError({"_schema": ["Day bounds must be datetimes."]})
        start, end = to_utc(day_start), to_utc(day_end)
        if end < start:
            raise ValidationFailedError({"day_end": ["Must not be earlier than day_start."]})
        with self.ro_uow() as uow:
            rows = uow.workouts.list_active_between(user_id, start, end)
            return [workout_to_out(r) for r in rows]

    def list_active_on(self, user_id: str, day: date, tz: str | None = None) -> list[WorkoutOut]:
        """
        Return workouts active on the local calendar ``day``.

        :param tz: IANA zone; defaults to the ``DEFAULT_TIMEZONE`` setting.
        :type tz: str | None
        """
        if isinstance(day, datetime) or not isinstance(day, date):
            raise ValidationFailedError({"day": ["Must be a calendar date."]})
        zone = resolve_tz(tz or self.setting("DEFAULT_TIMEZONE", "UTC"))
        start, end = day_bounds(day, zone)
        return self.list_active_between(user_id, start, end)

    def exercise_tree(self, user_id: str, workout_id: int) -> list[WorkoutExerciseTreeOut] | None:
        """
        Return the workout's exercises with their sets.

        :returns: ``None`` when the workout is missing or foreign (children are
            not queried); ``[]`` when it is owned but has no exercises yet.
        """
        user_id = self.ensure_authenticated(user_id)
        workout_id = self.ensure_id(workout_id, field="workout_id")
        with self.ro_uow() as uow:
            workout = uow.workouts.get_for_user(user_id, workout_id)
            if workout is None:
                return None
            return tree_from_rows(uow.workout_exercises.tree_rows(workout.id))
