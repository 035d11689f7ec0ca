"""Data models for lift-tracker."""

from .exercises import BandType, Exercise, ExerciseAlias, ExerciseType
from .lift_log import LiftLog, LiftSet, PersonalRecord, PRStatus
from .user import RequestContext, User
from .workout import ParsedWorkout, Scheme, SchemeType, WodBlock, WodExercise, Workout

__all__ = [
    "BandType",
    "Exercise",
    "ExerciseAlias",
    "ExerciseType",
    "LiftLog",
    "LiftSet",
    "ParsedWorkout",
    "PersonalRecord",
    "PRStatus",
    "RequestContext",
    "Scheme",
    "SchemeType",
    "User",
    "WodBlock",
    "WodExercise",
    "Workout",
]
