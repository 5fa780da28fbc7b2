"""Exercise catalog model (global reference data)."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .workout import WorkoutExercise


class Exercise(PKMixin, ReprMixin, TimestampMixin, db.Model):
    """
    Named movement shared by every account.

    Rows are never owned by a user and are never removed as part of a workout's
    lifecycle. Names are stored trimmed and compared exactly.
    """

    __tablename__ = "exercises"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("name", name="uq_exercises_name"),
        CheckConstraint("length(name) > 0", name="name_not_empty"),
    )

    workout_exercises: Mapped[list[WorkoutExercise]] = relationship(
        "WorkoutExercise", back_populates="exercise", passive_deletes=True
    )
