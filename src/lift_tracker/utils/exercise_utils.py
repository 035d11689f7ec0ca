"""Utilities for exercise name normalization and display."""

import re

from ..models.exercises import Exercise, ExerciseAlias


def normalize_exercise_name(name: str) -> str:
    """Normalize an exercise name for comparison.

    Lowercases, treats hyphens and underscores as spaces, drops other
    punctuation and collapses whitespace, so "Push-ups", "push ups" and
    "PUSH UPS!" all become "push ups".
    """
    normalized = name.lower()

    # Hyphenated and snake_case names compare like spaced ones
    normalized = re.sub(r"[-_]+", " ", normalized)

    # Remove remaining punctuation
    normalized = re.sub(r"[^\w\s]", "", normalized)

    # Remove extra whitespace
    normalized = re.sub(r"\s+", " ", normalized).strip()

    return normalized


def display_name(exercise: Exercise, aliases: dict[int, ExerciseAlias]) -> str:
    """The user's alias for an exercise if they have one, otherwise its title."""
    alias = aliases.get(exercise.id)
    return alias.alias_name if alias else exercise.title


def group_exercises_by_owner(
    exercises: list[Exercise],
) -> dict[str, list[Exercise]]:
    """Split exercises into the user's own and global ones."""
    result: dict[str, list[Exercise]] = {"user": [], "global": []}
    for exercise in exercises:
        result["global" if exercise.is_global else "user"].append(exercise)
    return result
