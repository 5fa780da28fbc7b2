"""Turn marshmallow loads into tagged results services can branch on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from marshmallow import Schema, ValidationError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Valid(Generic[T]):
    """Successfully loaded payload."""

    value: T


@dataclass(frozen=True, slots=True)
class Invalid:
    """Rejected payload with marshmallow-style messages."""

    messages: dict[str, Any]


ValidationResult = Valid[dict[str, Any]] | Invalid


def parse(schema: Schema, payload: Any) -> ValidationResult:
    """
    Load ``payload`` with ``schema`` without raising.

    :param schema: Marshmallow schema instance.
    :type schema: marshmallow.Schema
    :param payload: Raw input mapping.
    :type payload: Any
    :returns: :class:`Valid` with the loaded dict, or :class:`Invalid`.
    :rtype: ValidationResult
    """
    try:
        return Valid(schema.load(payload))
    except ValidationError as err:
        messages = err.normalized_messages()
        if not isinstance(messages, dict):
            messages = {"_schema": messages}
        return Invalid(messages)
