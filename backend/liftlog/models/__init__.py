from liftlog.models.exercise import Exercise
from liftlog.models.workout import Workout, WorkoutExercise, WorkoutSet

__all__ = [
    "Exercise",
    "Workout",
    "WorkoutExercise",
    "WorkoutSet",
]
