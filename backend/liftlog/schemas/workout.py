"""Workout payload schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, validates_schema

from .common import Timestamp, name_field


def _check_span(data: dict[str, Any]) -> None:
    started_at = data.get("started_at")
    completed_at = data.get("completed_at")
    if started_at is not None and completed_at is not None and completed_at < started_at:
        raise ValidationError(
            "completed_at must not be earlier than started_at.", field_name="completed_at"
        )


class WorkoutCreateSchema(Schema):
    """Payload for creating a workout."""

    name = name_field(required=True)
    started_at = Timestamp(required=True)
    completed_at = Timestamp(load_default=None, allow_none=True)

    @validates_schema
    def validate_span(self, data: dict[str, Any], **_: Any) -> None:
        _check_span(data)


class WorkoutUpdateSchema(Schema):
    """Partial workout update; at least one field is required."""

    name = name_field()
    started_at = Timestamp()
    completed_at = Timestamp(allow_none=True)

    @validates_schema
    def validate_fields(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("At least one field must be provided.")
        _check_span(data)
