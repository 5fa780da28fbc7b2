"""Workout aggregate: workouts, their ordered exercises and logged sets."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from liftlog.core.extensions import db

from .base import CreatedAtMixin, PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .exercise import Exercise


class Workout(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Aggregate root owned by a single authenticated subject.

    Notes
    -----
    - ``user_id`` is the opaque identifier issued by the identity provider. It
      is set on insert and never reassigned.
    - ``completed_at`` is ``NULL`` while the workout is in progress.
    - Deleting a workout removes its exercises and their sets at the database
      level (``ON DELETE CASCADE``), including bulk ``DELETE`` statements.
    """

    __tablename__ = "workouts"

    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    __table_args__ = (
        Index("ix_workouts_user_started", "user_id", "started_at"),
        CheckConstraint("length(name) > 0", name="name_not_empty"),
        CheckConstraint(
            "completed_at IS NULL OR completed_at >= started_at",
            name="completed_after_started",
        ),
    )

    exercises: Mapped[list[WorkoutExercise]] = relationship(
        "WorkoutExercise",
        back_populates="workout",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkoutExercise.order",
    )


class WorkoutExercise(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """
    Exercise slot inside a workout.

    Ownership is transitive: there is no ``user_id`` column, the owner is the
    parent :class:`Workout`'s ``user_id``. ``order`` is zero-based and
    append-only; removed slots leave gaps that are never reused.
    """

    __tablename__ = "workout_exercises"

    workout_id: Mapped[int] = mapped_column(
        ForeignKey("workouts.id", ondelete="CASCADE"), nullable=False
    )
    exercise_id: Mapped[int] = mapped_column(ForeignKey("exercises.id"), nullable=False)
    order: Mapped[int] = mapped_column("order", Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("workout_id", "order", name="uq_workout_exercises_workout_order"),
        CheckConstraint('"order" >= 0', name="order_not_negative"),
        Index("ix_workout_exercises_exercise", "exercise_id"),
    )

    workout: Mapped[Workout] = relationship("Workout", back_populates="exercises")
    exercise: Mapped[Exercise] = relationship(
        "Exercise", back_populates="workout_exercises", lazy="selectin"
    )
    sets: Mapped[list[WorkoutSet]] = relationship(
        "WorkoutSet",
        back_populates="workout_exercise",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="WorkoutSet.set_number",
    )


class WorkoutSet(PKMixin, CreatedAtMixin, ReprMixin, db.Model):
    """
    Logged set (weight x reps) for a workout exercise.

    ``set_number`` is 1-based and supplied by the caller as "current count + 1";
    uniqueness per workout exercise is not enforced here.
    """

    __tablename__ = "sets"

    workout_exercise_id: Mapped[int] = mapped_column(
        ForeignKey("workout_exercises.id", ondelete="CASCADE"), nullable=False
    )
    set_number: Mapped[int] = mapped_column(Integer, nullable=False)
    weight_kg: Mapped[Decimal] = mapped_column(Numeric(6, 2), nullable=False)
    reps: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("ix_sets_workout_exercise_number", "workout_exercise_id", "set_number"),
        CheckConstraint("set_number > 0", name="set_number_positive"),
        CheckConstraint("weight_kg >= 0", name="weight_not_negative"),
        CheckConstraint("reps > 0", name="reps_positive"),
    )

    workout_exercise: Mapped[WorkoutExercise] = relationship(
        "WorkoutExercise", back_populates="sets"
    )
