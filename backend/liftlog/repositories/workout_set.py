from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, cast

from sqlalchemy import func, insert, select
from sqlalchemy.orm import InstrumentedAttribute, contains_eager

from liftlog.models.workout import WorkoutExercise, WorkoutSet
from liftlog.repositories.base import BaseRepository


class WorkoutSetRepository(BaseRepository[WorkoutSet]):
    """
    Persistence-only repository for :class:`WorkoutSet`.

    Sets are leaves of the ownership tree (Set → WorkoutExercise → Workout).
    """

    model = WorkoutSet

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "set_number": self.model.set_number}

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"workout_exercise_id": self.model.workout_exercise_id}

    def _updatable_fields(self) -> set[str]:
        return {"weight_kg", "reps"}

    def get_with_owner(self, set_id: int) -> WorkoutSet | None:
        """
        Fetch a set joined with its workout exercise and workout.

        :param set_id: Set primary key.
        :type set_id: int
        :returns: Set with ``workout_exercise.workout`` populated, or ``None``.
        :rtype: WorkoutSet | None
        """
        stmt = (
            select(self.model)
            .join(self.model.workout_exercise)
            .join(WorkoutExercise.workout)
            .options(
                contains_eager(self.model.workout_exercise).contains_eager(
                    WorkoutExercise.workout
                )
            )
            .where(self.model.id == set_id)
        )
        return cast(WorkoutSet | None, self.session.execute(stmt).scalars().first())

    def count_for(self, workout_exercise_id: int) -> int:
        """Return how many sets are logged for ``workout_exercise_id``."""
        stmt = select(func.count(self.model.id)).where(
            self.model.workout_exercise_id == workout_exercise_id
        )
        return int(self.session.execute(stmt).scalar_one())

    def list_for(self, workout_exercise_id: int) -> list[WorkoutSet]:
        return self.list(
            filters={"workout_exercise_id": workout_exercise_id}, sort=["set_number"]
        )

    def add_many(self, rows: Sequence[Mapping[str, Any]]) -> list[WorkoutSet]:
        """
        Bulk insert ``rows`` with one ``INSERT ... RETURNING`` statement.

        :param rows: Mappings with ``workout_exercise_id``, ``set_number``,
            ``weight_kg`` and ``reps``.
        :returns: Inserted sets in parameter order.
        """
        if not rows:
            return []
        stmt = insert(self.model).returning(self.model, sort_by_parameter_order=True)
        return list(self.session.scalars(stmt, [dict(r) for r in rows]).all())
