from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, cast

from sqlalchemy import Select, and_, delete, or_, select, update
from sqlalchemy.orm import InstrumentedAttribute

from liftlog.models.workout import Workout
from liftlog.repositories.base import BaseRepository


class WorkoutRepository(BaseRepository[Workout]):
    """
    Persistence-only repository for :class:`Workout`.

    Every ``*_for_user`` method filters by ``id`` *and* ``user_id`` in the same
    predicate, so a foreign or missing row is indistinguishable from "no rows".
    """

    model = Workout

    # ---------------------------- Whitelists ----------------------------
    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "id": self.model.id,
            "name": self.model.name,
            "started_at": self.model.started_at,
            "completed_at": self.model.completed_at,
            "created_at": self.model.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "user_id": self.model.user_id}

    def _updatable_fields(self) -> set[str]:
        # user_id is stamped on insert and never reassigned
        return {"name", "started_at", "completed_at"}

    # ---------------------------- Lookups ----------------------------
    def get_for_user(self, user_id: str, workout_id: int) -> Workout | None:
        """
        Fetch a workout only when it belongs to ``user_id``.

        :param user_id: Authenticated subject identifier.
        :type user_id: str
        :param workout_id: Workout primary key.
        :type workout_id: int
        :returns: The workout or ``None`` when missing or foreign.
        :rtype: Workout | None
        """
        stmt = select(self.model).where(
            and_(self.model.id == workout_id, self.model.user_id == user_id)
        )
        return cast(Workout | None, self.session.execute(stmt).scalars().first())

    def list_for_user(self, user_id: str, *, sort: Iterable[str] | None = None) -> list[Workout]:
        """List every workout owned by ``user_id`` (``started_at`` ascending by default)."""
        return self.list(filters={"user_id": user_id}, sort=sort or ["started_at"])

    def list_active_between(
        self, user_id: str, day_start: datetime, day_end: datetime
    ) -> list[Workout]:
        """
        List workouts active on the calendar day ``[day_start, day_end]``.

        A workout is active when it started on or before ``day_end`` and is
        either still in progress or completed on or after ``day_start``.

        :param user_id: Authenticated subject identifier.
        :type user_id: str
        :param day_start: Inclusive UTC lower bound.
        :type day_start: datetime
        :param day_end: Inclusive UTC upper bound.
        :type day_end: datetime
        :returns: Matching workouts ordered by ``started_at``.
        :rtype: list[Workout]
        """
        stmt: Select[Any] = (
            select(self.model)
            .where(
                self.model.user_id == user_id,
                self.model.started_at <= day_end,
                or_(
                    self.model.completed_at.is_(None),
                    self.model.completed_at >= day_start,
                ),
            )
            .order_by(self.model.started_at.asc(), self.model.id.asc())
        )
        return list(self.session.execute(stmt).scalars().all())

    # ---------------------------- Mutations ----------------------------
    def create_workout(
        self,
        *,
        user_id: str,
        name: str,
        started_at: datetime,
        completed_at: datetime | None = None,
        flush: bool = True,
    ) -> Workout:
        """Stage a new workout stamped with ``user_id``."""
        row = self.model(
            user_id=user_id,
            name=name,
            started_at=started_at,
            completed_at=completed_at,
        )
        self.session.add(row)
        if flush:
            self.flush()
        return row

    def update_for_user(
        self, user_id: str, workout_id: int, fields: Mapping[str, Any]
    ) -> Workout | None:
        """
        Apply whitelisted ``fields`` with a single ``UPDATE ... RETURNING``.

        The ownership check and the write share one predicate, so there is no
        window between verifying and mutating.

        :returns: The updated workout, or ``None`` when no row matched.
        :rtype: Workout | None
        :raises ValueError: On non-updatable keys.
        """
        values = self._sanitize_update_fields(fields, strict=True)
        stmt = (
            update(self.model)
            .where(and_(self.model.id == workout_id, self.model.user_id == user_id))
            .values(**values)
            .returning(self.model)
            .execution_options(populate_existing=True)
        )
        return cast(Workout | None, self.session.execute(stmt).scalars().first())

    def delete_for_user(self, user_id: str, workout_id: int) -> int | None:
        """
        Delete a workout with a single ``DELETE ... RETURNING id``.

        Children are removed by the database (``ON DELETE CASCADE``).

        :returns: Deleted id, or ``None`` when no row matched.
        :rtype: int | None
        """
        stmt = (
            delete(self.model)
            .where(and_(self.model.id == workout_id, self.model.user_id == user_id))
            .returning(self.model.id)
        )
        return cast(int | None, self.session.execute(stmt).scalars().first())
