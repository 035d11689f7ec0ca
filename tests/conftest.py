"""Pytest configuration and fixtures."""

import asyncio
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from lift_tracker.db import ExerciseRepository, UserRepository, init_db, seed_exercises
from lift_tracker.models.exercises import Exercise, ExerciseType
from lift_tracker.models.lift_log import LiftLog, LiftSet
from lift_tracker.models.user import RequestContext, User


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def db_path(temp_db_path):
    """An initialized database with the global exercise library."""
    asyncio.run(init_db(temp_db_path))
    asyncio.run(seed_exercises(temp_db_path))
    return temp_db_path


@pytest.fixture
def user(db_path):
    """A user who sees global exercises."""
    user = User(name="Test User", email="test@example.com")
    asyncio.run(UserRepository(db_path).create(user))
    return user


@pytest.fixture
def other_user(db_path):
    """A second user, for ownership checks."""
    user = User(name="Other User", email="other@example.com")
    asyncio.run(UserRepository(db_path).create(user))
    return user


@pytest.fixture
def context(user):
    """Request context for `user`."""
    return RequestContext.for_user(user)


@pytest.fixture
def global_exercise(db_path):
    """Look up a seeded global exercise by title."""

    def lookup(title: str) -> Exercise:
        exercises = asyncio.run(ExerciseRepository(db_path).list_global())
        return next(e for e in exercises if e.title == title)

    return lookup


@pytest.fixture
def squat():
    """A regular exercise that has not been stored."""
    return Exercise(title="Back Squat", exercise_type=ExerciseType.REGULAR, id=1)


@pytest.fixture
def make_log():
    """Factory for unsaved lift logs with uniform sets."""

    def build(weight: float, reps: int = 5, day: int = 1, log_id: int | None = None,
              sets: int = 1) -> LiftLog:
        return LiftLog(
            user_id=1,
            exercise_id=1,
            logged_at=datetime(2024, 1, day, 9, 0),
            sets=[LiftSet(weight=weight, reps=reps) for _ in range(sets)],
            id=log_id,
        )

    return build
