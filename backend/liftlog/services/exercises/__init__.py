from .dto import ExerciseOut, SeedOut
from .service import DEFAULT_CATALOG, ExerciseCatalogService

__all__ = ["DEFAULT_CATALOG", "ExerciseCatalogService", "ExerciseOut", "SeedOut"]
