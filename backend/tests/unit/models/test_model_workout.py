from __future__ import annotations

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from liftlog.models import Exercise, Workout, WorkoutExercise, WorkoutSet
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from tests.factories.exercise import ExerciseFactory
from tests.factories.workout import WorkoutExerciseFactory, WorkoutFactory, WorkoutSetFactory


def _count(session, model, *where) -> int:
    stmt = select(func.count()).select_from(model)
    if where:
        stmt = stmt.where(*where)
    return session.execute(stmt).scalar_one()


class TestWorkoutModel:
    def test_repr_includes_id(self, session):
        w = WorkoutFactory()
        assert repr(w) == f"<Workout id={w.id}>"

    def test_server_timestamps_are_filled(self, session):
        w = WorkoutFactory()
        assert w.created_at is not None
        assert w.updated_at is not None

    def test_exercises_relationship_is_ordered(self, session):
        w = WorkoutFactory()
        WorkoutExerciseFactory(workout=w, order=2)
        WorkoutExerciseFactory(workout=w, order=0)
        WorkoutExerciseFactory(workout=w, order=1)
        session.expire_all()

        assert [we.order for we in w.exercises] == [0, 1, 2]

    def test_completed_before_started_is_rejected(self, session):
        session.add(
            Workout(
                user_id="u1",
                name="Backwards",
                started_at=datetime(2024, 1, 2, tzinfo=UTC),
                completed_at=datetime(2024, 1, 1, tzinfo=UTC),
            )
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_empty_name_is_rejected(self, session):
        session.add(Workout(user_id="u1", name="", started_at=datetime(2024, 1, 1, tzinfo=UTC)))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


class TestCascade:
    def test_bulk_delete_of_workout_removes_children(self, session):
        s = WorkoutSetFactory()
        set_id = s.id
        we_id = s.workout_exercise_id
        workout_id = s.workout_exercise.workout_id
        exercise_id = s.workout_exercise.exercise_id

        session.execute(delete(Workout).where(Workout.id == workout_id))
        session.commit()

        assert _count(session, WorkoutExercise, WorkoutExercise.id == we_id) == 0
        assert _count(session, WorkoutSet, WorkoutSet.id == set_id) == 0
        # catalog rows survive
        assert _count(session, Exercise, Exercise.id == exercise_id) == 1

    def test_deleting_workout_exercise_removes_its_sets(self, session):
        s = WorkoutSetFactory()
        set_id = s.id
        we_id = s.workout_exercise_id

        session.execute(delete(WorkoutExercise).where(WorkoutExercise.id == we_id))
        session.commit()

        assert _count(session, WorkoutSet, WorkoutSet.id == set_id) == 0


class TestWorkoutExerciseModel:
    def test_order_is_unique_per_workout(self, session):
        we = WorkoutExerciseFactory(order=0)
        session.add(
            WorkoutExercise(workout_id=we.workout_id, exercise_id=we.exercise_id, order=0)
        )
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()

    def test_same_order_allowed_in_other_workouts(self, session):
        WorkoutExerciseFactory(order=0)
        other = WorkoutExerciseFactory(order=0)
        assert other.id is not None

    def test_negative_order_is_rejected(self, session):
        w = WorkoutFactory()
        e = ExerciseFactory()
        session.add(WorkoutExercise(workout_id=w.id, exercise_id=e.id, order=-1))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()


class TestWorkoutSetModel:
    def test_weight_round_trips_as_decimal(self, session):
        s = WorkoutSetFactory(weight_kg=Decimal("102.50"))
        session.expire_all()
        assert s.weight_kg == Decimal("102.50")

    @pytest.mark.parametrize(
        "field,value",
        [("reps", 0), ("set_number", 0), ("weight_kg", Decimal("-1"))],
    )
    def test_check_constraints(self, session, field, value):
        we = WorkoutExerciseFactory()
        values = {"set_number": 1, "weight_kg": Decimal("10"), "reps": 5, field: value}
        session.add(WorkoutSet(workout_exercise_id=we.id, **values))
        with pytest.raises(IntegrityError):
            session.flush()
        session.rollback()
