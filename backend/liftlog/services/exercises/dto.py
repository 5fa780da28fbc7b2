from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class ExerciseOut:
    """Public projection of a catalog exercise."""

    id: int
    name: str
    created_at: datetime | None


@dataclass(frozen=True, slots=True)
class SeedOut:
    """
    Outcome of seeding the catalog.

    :param created: Names inserted by this call.
    :type created: list[str]
    :param existing: Names that were already present.
    :type existing: list[str]
    """

    created: list[str] = field(default_factory=list)
    existing: list[str] = field(default_factory=list)
