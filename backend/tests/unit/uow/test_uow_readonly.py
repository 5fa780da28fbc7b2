from __future__ import annotations

from datetime import UTC, datetime

import pytest
from liftlog.models import Workout
from liftlog.uow import SQLAlchemyReadOnlyUnitOfWork as ROuow
from sqlalchemy import text
from tests.factories.workout import WorkoutFactory


class TestSQLAlchemyReadOnlyUnitOfWork:
    def test_allows_reads(self, app, db, session):
        w = WorkoutFactory(user_id="alice")
        workout_id = w.id

        with ROuow() as uow:
            assert uow.workouts.get_for_user("alice", workout_id) is not None

    def test_blocks_orm_flush_writes(self, app, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(
                Workout(user_id="alice", name="x", started_at=datetime(2024, 1, 1, tzinfo=UTC))
            )
            uow.session.flush()
        session.rollback()

    def test_blocks_core_dml(self, app, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="SQL statement blocked"):
            uow.session.execute(text("DELETE FROM workouts"))

    def test_disallows_commit(self, app, db, session):
        with ROuow() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_guards_are_removed_on_exit(self, app, db, session):
        with ROuow():
            pass
        w = WorkoutFactory()
        assert w.id is not None
