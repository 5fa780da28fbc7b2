from __future__ import annotations

import pytest
from liftlog.models import Exercise
from liftlog.repositories.exercise import ExerciseRepository
from sqlalchemy import func, select
from tests.factories.exercise import ExerciseFactory


class TestExerciseRepository:
    @pytest.fixture()
    def repo(self, session) -> ExerciseRepository:
        return ExerciseRepository(session=session)

    def test_find_by_name_is_exact(self, repo):
        e = ExerciseFactory(name="Deadlift")
        assert repo.find_by_name("Deadlift").id == e.id
        assert repo.find_by_name("deadlift") is None

    def test_list_by_name_sorts_alphabetically(self, repo):
        ExerciseFactory(name="Squat")
        ExerciseFactory(name="Bench Press")
        names = [e.name for e in repo.list_by_name()]
        assert names == sorted(names)

    def test_get_or_create_is_idempotent(self, repo, session):
        first, created_first = repo.get_or_create("Bench Press")
        second, created_second = repo.get_or_create("Bench Press")
        assert (created_first, created_second) == (True, False)
        assert first.id == second.id
        count = session.execute(
            select(func.count()).select_from(Exercise).where(Exercise.name == "Bench Press")
        ).scalar_one()
        assert count == 1

    def test_get_or_create_recovers_from_lost_race(self, repo, monkeypatch):
        winner = ExerciseFactory(name="Pull Up")
        calls = {"n": 0}
        original = ExerciseRepository.find_by_name

        def stale_first_lookup(self, name):
            calls["n"] += 1
            if calls["n"] == 1:
                return None  # the concurrent insert is not visible yet
            return original(self, name)

        monkeypatch.setattr(ExerciseRepository, "find_by_name", stale_first_lookup)

        row, created = repo.get_or_create("Pull Up")

        assert created is False
        assert row.id == winner.id
        assert calls["n"] == 2
