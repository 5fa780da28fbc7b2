from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import InstrumentedAttribute

from liftlog.models.exercise import Exercise
from liftlog.repositories.base import BaseRepository


class ExerciseRepository(BaseRepository[Exercise]):
    """
    Persistence-only repository for :class:`liftlog.models.exercise.Exercise`.

    Exercises are global reference data: lookups are never scoped by user.
    No commits are performed here.
    """

    model = Exercise

    def _sortable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        """
        Return safe and stable columns allowed for sorting.

        :returns: Public key → ORM attribute mapping.
        :rtype: Mapping[str, InstrumentedAttribute]
        """
        return {
            "id": self.model.id,
            "name": self.model.name,
            "created_at": self.model.created_at,
        }

    def _filterable_fields(self) -> Mapping[str, InstrumentedAttribute[Any]]:
        return {"id": self.model.id, "name": self.model.name}

    # ------------------------------- Lookups ---------------------------------

    def find_by_name(self, name: str) -> Exercise | None:
        """
        Fetch an exercise by its exact (already trimmed) name.

        :param name: Exercise name.
        :type name: str
        :returns: Matching exercise or ``None``.
        :rtype: Exercise | None
        """
        stmt = select(self.model).where(self.model.name == name)
        return cast(Exercise | None, self.session.execute(stmt).scalars().first())

    def list_by_name(self) -> list[Exercise]:
        """Return the whole catalog ordered alphabetically."""
        return self.list(sort=["name"])

    # ------------------------------ Mutations --------------------------------

    def create(self, name: str) -> Exercise:
        """
        Insert a new exercise and flush to surface unique violations.

        :raises sqlalchemy.exc.IntegrityError: When the name already exists.
        """
        return self.add(self.model(name=name))

    def get_or_create(self, name: str) -> tuple[Exercise, bool]:
        """
        Return the exercise named ``name``, inserting it when missing.

        The insert runs inside a SAVEPOINT. If a concurrent writer inserted the
        same name first, the unique violation rolls back only the SAVEPOINT and
        the winning row is fetched instead.

        :param name: Trimmed exercise name.
        :type name: str
        :returns: ``(exercise, created)`` tuple.
        :rtype: tuple[Exercise, bool]
        :raises sqlalchemy.exc.IntegrityError: When the insert fails and no row
            can be fetched afterwards.
        """
        existing = self.find_by_name(name)
        if existing is not None:
            return existing, False

        try:
            with self.session.begin_nested():
                row = self.model(name=name)
                self.session.add(row)
                self.session.flush()
        except IntegrityError:
            winner = self.find_by_name(name)
            if winner is None:
                raise
            return winner, False
        return row, True
