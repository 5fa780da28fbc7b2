"""Schemas for attaching exercises to workouts."""

from __future__ import annotations

from marshmallow import Schema

from .common import name_field, positive_id


class WorkoutExerciseAddSchema(Schema):
    """Attach an existing catalog exercise by id."""

    exercise_id = positive_id(required=True)


class WorkoutExerciseAddByNameSchema(Schema):
    """Attach an exercise by name, creating it in the catalog when missing."""

    exercise_name = name_field(required=True)
