"""Exercise catalog schemas."""

from __future__ import annotations

from marshmallow import Schema

from .common import name_field


class ExerciseCreateSchema(Schema):
    """Payload for adding an exercise to the global catalog."""

    name = name_field(required=True)
