"""Common Marshmallow fields and helpers shared across schemas."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from marshmallow import ValidationError, fields, validate

NAME_MAX_LENGTH = 255
INT_MAX = 2**31 - 1


def to_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime (naive values are taken as UTC)."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Timestamp(fields.DateTime):
    """ISO-8601 datetime accepting ``datetime`` instances, normalized to UTC."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> datetime:
        if isinstance(value, datetime):
            return to_utc(value)
        return to_utc(super()._deserialize(value, attr, data, **kwargs))


class TrimmedString(fields.String):
    """String field stripping surrounding whitespace before validation."""

    def _deserialize(self, value: Any, attr: str | None, data: Any, **kwargs: Any) -> str:
        return super()._deserialize(value, attr, data, **kwargs).strip()


def name_field(**kwargs: Any) -> TrimmedString:
    """Trimmed, 1-255 character display name."""

    return TrimmedString(validate=validate.Length(min=1, max=NAME_MAX_LENGTH), **kwargs)


def positive_id(**kwargs: Any) -> fields.Integer:
    """Strict positive integer that fits a 32-bit signed column."""

    return fields.Integer(strict=True, validate=validate.Range(min=1, max=INT_MAX), **kwargs)


def validate_two_places(value: Decimal) -> None:
    """Reject decimals with a significant digit past the second decimal place."""

    exponent = value.normalize().as_tuple().exponent
    if isinstance(exponent, int) and exponent < -2:
        raise ValidationError("At most two decimal places are allowed.")


def weight_field(**kwargs: Any) -> fields.Decimal:
    """Non-negative weight in kilograms, at most ``9999.99``."""

    return fields.Decimal(
        validate=[
            validate.Range(min=Decimal("0"), max=Decimal("9999.99")),
            validate_two_places,
        ],
        **kwargs,
    )
