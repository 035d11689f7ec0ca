"""Application services acting on behalf of a request context."""

from .exercise_matching import ExerciseMatcher, ExerciseResolver
from .exercises import ExerciseService
from .lift_logging import LiftLogService
from .one_rep_max import OneRepMaxCalculator, estimate_one_rep_max
from .pr_detection import PRDetectionService, PRRecalculationService
from .tsv_import import ImportResult, TsvImporter
from .workouts import WorkoutService

__all__ = [
    "estimate_one_rep_max",
    "ExerciseMatcher",
    "ExerciseResolver",
    "ExerciseService",
    "ImportResult",
    "LiftLogService",
    "OneRepMaxCalculator",
    "PRDetectionService",
    "PRRecalculationService",
    "TsvImporter",
    "WorkoutService",
]
