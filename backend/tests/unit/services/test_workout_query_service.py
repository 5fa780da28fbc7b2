from __future__ import annotations

from datetime import UTC, date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest
from liftlog.services._shared.errors import (
    NotFoundOrUnauthorizedError,
    UnauthenticatedError,
    ValidationFailedError,
)
from liftlog.services.workouts import WorkoutQueryService
from tests.factories.workout import WorkoutExerciseFactory, WorkoutFactory, WorkoutSetFactory


@pytest.fixture()
def service() -> WorkoutQueryService:
    return WorkoutQueryService()


class TestFind:
    def test_returns_owned_workout(self, service):
        w = WorkoutFactory(user_id="alice", name="Push")
        workout_id = w.id

        out = service.find("alice", workout_id)

        assert out is not None
        assert (out.id, out.user_id, out.name) == (workout_id, "alice", "Push")
        assert out.started_at == datetime(2024, 1, 1, 9, 0, tzinfo=UTC)
        assert out.completed_at is None
        assert out.duration_minutes is None

    def test_foreign_and_missing_look_the_same(self, service):
        w = WorkoutFactory(user_id="alice")
        workout_id = w.id

        assert service.find("bob", workout_id) is None
        assert service.find("bob", workout_id + 1000) is None

    def test_get_raises_single_signal(self, service):
        w = WorkoutFactory(user_id="alice")
        with pytest.raises(NotFoundOrUnauthorizedError) as exc:
            service.get("bob", w.id)
        assert exc.value.entity == "Workout"

    def test_duration_minutes_for_completed_workouts(self, service):
        w = WorkoutFactory(
            user_id="alice",
            started_at=datetime(2024, 1, 1, 9, 0, tzinfo=UTC),
            completed_at=datetime(2024, 1, 1, 10, 30, 59, tzinfo=UTC),
        )
        assert service.get("alice", w.id).duration_minutes == 90

    @pytest.mark.parametrize("user_id", [None, "", "   ", 42])
    def test_requires_authenticated_subject(self, service, user_id):
        with pytest.raises(UnauthenticatedError):
            service.find(user_id, 1)

    @pytest.mark.parametrize("workout_id", [0, -1, "1", True, None, 2**31, 2**63])
    def test_rejects_invalid_ids(self, service, workout_id):
        with pytest.raises(ValidationFailedError) as exc:
            service.find("alice", workout_id)
        assert "workout_id" in exc.value.messages


class TestListing:
    def test_list_for_user_is_scoped_and_ordered(self, service):
        second = WorkoutFactory(user_id="alice", started_at=datetime(2024, 2, 1, tzinfo=UTC))
        first = WorkoutFactory(user_id="alice", started_at=datetime(2024, 1, 1, tzinfo=UTC))
        WorkoutFactory(user_id="bob")
        expected = [first.id, second.id]

        assert [w.id for w in service.list_for_user("alice")] == expected
        assert service.list_for_user("carol") == []

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2024, 5, 1), False),  # day 0
            (date(2024, 5, 2), True),  # day 1
            (date(2024, 5, 4), True),
            (date(2024, 5, 6), True),  # day 5
            (date(2024, 5, 7), False),  # day 6
        ],
    )
    def test_active_on_completed_span(self, service, day, expected):
        w = WorkoutFactory(
            user_id="alice",
            started_at=datetime(2024, 5, 2, 10, tzinfo=UTC),
            completed_at=datetime(2024, 5, 6, 18, tzinfo=UTC),
        )
        workout_id = w.id
        ids = [o.id for o in service.list_active_on("alice", day)]
        assert (workout_id in ids) is expected

    def test_in_progress_is_active_every_later_day(self, service):
        w = WorkoutFactory(user_id="alice", started_at=datetime(2024, 5, 2, 10, tzinfo=UTC))
        workout_id = w.id

        assert service.list_active_on("alice", date(2024, 5, 1)) == []
        assert [o.id for o in service.list_active_on("alice", date(2024, 5, 2))] == [workout_id]
        assert [o.id for o in service.list_active_on("alice", date(2031, 12, 31))] == [workout_id]

    def test_active_on_uses_local_calendar_day(self, service):
        try:
            ZoneInfo("Europe/Madrid")
        except ZoneInfoNotFoundError:
            pytest.skip("tz database not available")
        w = WorkoutFactory(
            user_id="alice",
            started_at=datetime(2024, 5, 2, 23, 30, tzinfo=UTC),
            completed_at=datetime(2024, 5, 2, 23, 45, tzinfo=UTC),
        )
        workout_id = w.id

        # 23:30 UTC is already May 3rd in Madrid (UTC+2)
        assert service.list_active_on("alice", date(2024, 5, 2), tz="Europe/Madrid") == []
        madrid = service.list_active_on("alice", date(2024, 5, 3), tz="Europe/Madrid")
        assert [o.id for o in madrid] == [workout_id]

    def test_unknown_zone_is_a_validation_failure(self, service):
        with pytest.raises(ValidationFailedError) as exc:
            service.list_active_on("alice", date(2024, 5, 2), tz="Nowhere/Atlantis")
        assert "tz" in exc.value.messages

    def test_active_between_rejects_inverted_range(self, service):
        with pytest.raises(ValidationFailedError):
            service.list_active_between(
                "alice",
                datetime(2024, 5, 2, tzinfo=UTC),
                datetime(2024, 5, 1, tzinfo=UTC),
            )

    def test_active_between_treats_naive_bounds_as_utc(self, service):
        w = WorkoutFactory(user_id="alice", started_at=datetime(2024, 5, 2, 10, tzinfo=UTC))
        workout_id = w.id
        out = service.list_active_between(
            "alice", datetime(2024, 5, 2, 0, 0), datetime(2024, 5, 2, 23, 59, 59)
        )
        assert [o.id for o in out] == [workout_id]


class TestExerciseTree:
    def test_foreign_workout_is_none(self, service):
        we = WorkoutExerciseFactory(workout=WorkoutFactory(user_id="alice"))
        assert service.exercise_tree("bob", we.workout_id) is None

    def test_owned_empty_workout_is_empty_list(self, service):
        w = WorkoutFactory(user_id="alice")
        assert service.exercise_tree("alice", w.id) == []

    def test_groups_sets_under_ordered_exercises(self, service):
        w = WorkoutFactory(user_id="alice")
        bench = WorkoutExerciseFactory(workout=w, order=0)
        squat = WorkoutExerciseFactory(workout=w, order=1)
        WorkoutSetFactory(workout_exercise=squat, set_number=2, weight_kg=Decimal("100"))
        WorkoutSetFactory(workout_exercise=squat, set_number=1, weight_kg=Decimal("90"))
        bench_id, squat_id = bench.id, squat.id
        squat_exercise_name = squat.exercise.name

        tree = service.exercise_tree("alice", w.id)

        assert [node.id for node in tree] == [bench_id, squat_id]
        assert [node.order for node in tree] == [0, 1]
        assert tree[0].sets == []
        assert tree[1].exercise.name == squat_exercise_name
        assert [s.set_number for s in tree[1].sets] == [1, 2]
        assert [s.weight_kg for s in tree[1].sets] == [Decimal("90"), Decimal("100")]
