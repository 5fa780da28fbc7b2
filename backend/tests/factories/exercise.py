"""Factory Boy definition for the exercise catalog."""

from __future__ import annotations

from liftlog.models.exercise import Exercise

import factory
from tests.factories import BaseFactory


class ExerciseFactory(BaseFactory):
    """Build persisted :class:`liftlog.models.exercise.Exercise`."""

    class Meta:
        model = Exercise

    id = None
    name = factory.Sequence(lambda n: f"Exercise {n}")
