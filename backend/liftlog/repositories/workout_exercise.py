from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, cast

from sqlalchemy import Row, func, insert, select
from sqlalchemy.orm import InstrumentedAttribute, contains_eager

from liftlog.models.exercise import Exercise
from liftlog.models.workout import WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository


class WorkoutExerciseRepository(BaseRepository[WorkoutExercise]):
    """
    Persistence-only repository for :class:`WorkoutExercise`.

    Rows carry no ``user_id``; helpers that resolve the owner join the parent
    :class:`Workout` so services can check it in one round-trip.
    """

    model = WorkoutExercise

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "order": self.model.order}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {
            "workout_id": self.model.workout_id,
            "exercise_id": self.model.exercise_id,
        }

    # ---------------------------- Ordering ----------------------------
    def next_order(self, workout_id: int) -> int:
        """
        Return the next append-only position for ``workout_id``.

        ``max(order) + 1``, or ``0`` for an empty workout. Gaps left by removed
        rows are never reused.
        """
        stmt = select(func.max(self.model.order)).where(self.model.workout_id == workout_id)
        current = self.session.execute(stmt).scalar_one_or_none()
        return 0 if current is None else int(current) + 1

    # ---------------------------- Lookups ----------------------------
    def get_with_workout(self, workout_exercise_id: int) -> WorkoutExercise | None:
        """Fetch a workout exercise joined with its parent workout."""
        stmt = (
            select(self.model)
            .join(self.model.workout)
            .options(contains_eager(self.model.workout))
            .where(self.model.id == workout_exercise_id)
        )
        return cast(WorkoutExercise | None, self.session.execute(stmt).scalars().first())

    def list_for_workout(self, workout_id: int) -> list[WorkoutExercise]:
        return self.list(filters={"workout_id": workout_id}, sort=["order"])

    def ids_in_workout(self, workout_id: int, candidate_ids: Iterable[int]) -> set[int]:
        """Return the subset of ``candidate_ids`` that belong to ``workout_id``."""
        ids = set(candidate_ids)
        if not ids:
            return set()
        stmt = select(self.model.id).where(
            self.model.workout_id == workout_id, self.model.id.in_(ids)
        )
        return set(self.session.execute(stmt).scalars().all())

    def tree_rows(
        self, workout_id: int
    ) -> Sequence[Row[tuple[WorkoutExercise, Exercise, WorkoutSet | None]]]:
        """
        Return flat ``(workout_exercise, exercise, set | None)`` rows.

        Rows come ordered by ``order`` then ``set_number``; exercises without
        sets appear once with ``None`` in the set slot.
        """
        stmt = (
            select(self.model, Exercise, WorkoutSet)
            .join(Exercise, Exercise.id == self.model.exercise_id)
            .outerjoin(WorkoutSet, WorkoutSet.workout_exercise_id == self.model.id)
            .where(self.model.workout_id == workout_id)
            .order_by(self.model.order.asc(), WorkoutSet.set_number.asc(), WorkoutSet.id.asc())
        )
        return self.session.execute(stmt).all()

    # ---------------------------- Mutations ----------------------------
    def append(self, *, workout_id: int, exercise_id: int) -> WorkoutExercise:
        """Insert a row at the next position of ``workout_id``."""
        row = self.model(
            workout_id=workout_id,
            exercise_id=exercise_id,
            order=self.next_order(workout_id),
        )
        return self.add(row)

    def add_many(self, rows: Sequence[Mapping[str, Any]]) -> list[WorkoutExercise]:
        """
        Bulk insert ``rows`` with one ``INSERT ... RETURNING`` statement.

        :param rows: Mappings with ``workout_id``, ``exercise_id`` and ``order``.
        :returns: Inserted rows in parameter order.
        """
        if not rows:
            return []
        stmt = insert(self.model).returning(self.model, sort_by_parameter_order=True)
        return list(self.session.scalars(stmt, [dict(r) for r in rows]).all())

