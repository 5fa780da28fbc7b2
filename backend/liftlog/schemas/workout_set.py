"""Set logging schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .common import positive_id, weight_field


class SetCreateSchema(Schema):
    """Log one set for a workout exercise."""

    set_number = positive_id(required=True)
    weight_kg = weight_field(required=True)
    reps = positive_id(required=True)


class SetUpdateSchema(Schema):
    """Replace the weight and reps of a logged set."""

    weight_kg = weight_field(required=True)
    reps = positive_id(required=True)


class BulkSetItemSchema(SetCreateSchema):
    """Set log that names its workout exercise explicitly."""

    workout_exercise_id = positive_id(required=True)


class BulkSetCreateSchema(Schema):
    """Several set logs inserted together for one workout."""

    sets = fields.List(
        fields.Nested(BulkSetItemSchema),
        required=True,
        validate=validate.Length(min=1),
    )
