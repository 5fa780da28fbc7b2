# comments in English; strict reST docstrings
from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError

from liftlog.models.exercise import Exercise
from liftlog.repositories.exercise import ExerciseRepository
from liftlog.schemas.common import to_utc
from liftlog.schemas.exercise import ExerciseCreateSchema
from liftlog.services._shared.base import BaseService
from liftlog.services._shared.errors import ConflictError, NotFoundError
from liftlog.services.exercises.dto import ExerciseOut, SeedOut

logger = logging.getLogger(__name__)

DEFAULT_CATALOG: tuple[str, ...] = (
    "Back Squat",
    "Bench Press",
    "Deadlift",
    "Overhead Press",
    "Barbell Row",
    "Pull Up",
    "Dip",
    "Romanian Deadlift",
)


def exercise_to_out(row: Exercise) -> ExerciseOut:
    return ExerciseOut(
        id=row.id,
        name=row.name,
        created_at=to_utc(row.created_at) if row.created_at else None,
    )


class ExerciseCatalogService(BaseService):
    """
    Application service coordinating the **exercise catalog**.

    Responsibilities
    ----------------
    - List and look up exercises (global, not scoped to a subject).
    - Create exercises explicitly or idempotently by name.

    Notes
    -----
    - This service is framework-agnostic; no Flask/HTTP types leak here.
    - Names are trimmed before storage and compared exactly.
    - Unique constraint violations on explicit creation are translated to
      :class:`ConflictError`.
    """

    _schema = ExerciseCreateSchema()

    # ------------------------------------------------------------------ #
    # Read
    # ------------------------------------------------------------------ #

    def list_all(self) -> list[ExerciseOut]:
        """Return the catalog ordered by name."""
        with self.ro_uow() as uow:
            repo: ExerciseRepository = uow.exercises
            return [exercise_to_out(r) for r in repo.list_by_name()]

    def get(self, exercise_id: int) -> ExerciseOut:
        """
        Retrieve a single exercise by id.

        :param exercise_id: Exercise primary key.
        :type exercise_id: int
        :returns: Exercise projection.
        :rtype: :class:`ExerciseOut`
        :raises NotFoundError: When id does not exist.
        """
        exercise_id = self.ensure_id(exercise_id, field="exercise_id")
        with self.ro_uow() as uow:
            row = uow.exercises.get(exercise_id)
            if row is None:
                raise NotFoundError("Exercise", exercise_id)
            return exercise_to_out(row)

    def find_by_name(self, name: str) -> ExerciseOut | None:
        """
        Look up an exercise by exact (trimmed) name.

        :returns: Projection or ``None`` when the name is unknown.
        :rtype: :class:`ExerciseOut` | None
        :raises ValidationFailedError: When ``name`` is blank or too long.
        """
        data = self.validated(self._schema, {"name": name})
        with self.ro_uow() as uow:
            row = uow.exercises.find_by_name(data["name"])
            return exercise_to_out(row) if row is not None else None

    # ------------------------------------------------------------------ #
    # Write
    # ------------------------------------------------------------------ #

    def create(self, payload: dict[str, Any]) -> ExerciseOut:
        """
        Create an exercise.

        :param payload: ``{"name": str}``.
        :type payload: dict
        :returns: Persisted row as output projection.
        :rtype: :class:`ExerciseOut`
        :raises ValidationFailedError: On invalid payloads.
        :raises ConflictError: When the name already exists.
        """
        data = self.validated(self._schema, payload)
        try:
            with self.rw_uow() as uow:
                row = uow.exercises.create(data["name"])
                out = exercise_to_out(row)
        except IntegrityError as ie:
            raise ConflictError("Exercise", "name already exists") from ie
        logger.info("Exercise created", extra={"exercise_id": out.id})
        return out

    def get_or_create(self, name: str) -> ExerciseOut:
        """
        Return the exercise named ``name``, creating it when missing.

        Calling this twice with the same name yields the same row, including
        when a concurrent writer wins the insert.

        :raises ValidationFailedError: When ``name`` is blank or too long.
        """
        data = self.validated(self._schema, {"name": name})
        with self.rw_uow() as uow:
            row, created = uow.exercises.get_or_create(data["name"])
            out = exercise_to_out(row)
        if created:
            logger.info("Exercise created", extra={"exercise_id": out.id})
        return out

    def seed(self, names: Iterable[str] | None = None) -> SeedOut:
        """
        Get-or-create every name (defaults to :data:`DEFAULT_CATALOG`).

        :returns: Which names were inserted and which already existed.
        :rtype: :class:`SeedOut`
        """
        cleaned = [
            self.validated(self._schema, {"name": n})["name"] for n in (names or DEFAULT_CATALOG)
        ]
        result = SeedOut()
        with self.rw_uow() as uow:
            for name in dict.fromkeys(cleaned):
                _, created = uow.exercises.get_or_create(name)
                (result.created if created else result.existing).append(name)
        logger.info("Exercise catalog seeded", extra={"count": len(result.created)})
        return result
