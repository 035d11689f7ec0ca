"""Database layer for lift-tracker."""

from .engine import connect, get_db_path, init_db, seed_exercises
from .repositories import (
    ExerciseAliasRepository,
    ExerciseRepository,
    LiftLogRepository,
    PersonalRecordRepository,
    UserRepository,
    WorkoutRepository,
)

__all__ = [
    "connect",
    "ExerciseAliasRepository",
    "ExerciseRepository",
    "get_db_path",
    "init_db",
    "LiftLogRepository",
    "PersonalRecordRepository",
    "seed_exercises",
    "UserRepository",
    "WorkoutRepository",
]
