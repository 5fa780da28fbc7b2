from __future__ import annotations

import pytest
from liftlog.services.exercises import DEFAULT_CATALOG
from tests.factories.exercise import ExerciseFactory


@pytest.fixture()
def runner(app):
    return app.test_cli_runner()


def test_list_empty_catalog(runner):
    result = runner.invoke(args=["exercises", "list"])
    assert result.exit_code == 0
    assert result.output.strip() == "(no exercises)"


def test_list_prints_sorted_names(runner):
    squat = ExerciseFactory(name="Squat")
    bench = ExerciseFactory(name="Bench Press")
    expected = [f"{bench.id}", f"{squat.id}"]

    result = runner.invoke(args=["exercises", "list"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert [line.split()[0] for line in lines] == expected
    assert lines[0].endswith("Bench Press")
    assert lines[1].endswith("Squat")


def test_seed_named_exercises(runner):
    ExerciseFactory(name="Squat")

    result = runner.invoke(args=["exercises", "seed", "Squat", "Lunge"])

    assert result.exit_code == 0
    assert "Exercises: created=1 existing=1" in result.output
    assert "  + Lunge" in result.output


def test_seed_default_catalog_twice(runner):
    first = runner.invoke(args=["exercises", "seed"])
    second = runner.invoke(args=["exercises", "seed"])

    assert f"created={len(DEFAULT_CATALOG)} existing=0" in first.output
    assert f"created=0 existing={len(DEFAULT_CATALOG)}" in second.output


def test_seed_rejects_blank_names(runner):
    result = runner.invoke(args=["exercises", "seed", "   "])
    assert result.exit_code != 0
    assert "Seeding failed" in result.output
