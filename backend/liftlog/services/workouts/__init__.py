from .command import WorkoutCommandService
from .dto import SetOut, WorkoutExerciseOut, WorkoutExerciseTreeOut, WorkoutOut
from .exercises import WorkoutExerciseService
from .query import WorkoutQueryService
from .sets import SetLogService

__all__ = [
    "WorkoutCommandService",
    "WorkoutExerciseService",
    "WorkoutQueryService",
    "SetLogService",
    "WorkoutOut",
    "WorkoutExerciseOut",
    "WorkoutExerciseTreeOut",
    "SetOut",
]
