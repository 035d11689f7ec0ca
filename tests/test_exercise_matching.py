"""Tests for exercise name normalization and matching."""

import asyncio

from lift_tracker.db import ExerciseRepository
from lift_tracker.models.exercises import Exercise, ExerciseAlias
from lift_tracker.models.user import RequestContext
from lift_tracker.services.exercise_matching import ExerciseMatcher, ExerciseResolver
from lift_tracker.services.exercises import ExerciseService
from lift_tracker.utils.exercise_utils import display_name, normalize_exercise_name


class TestNormalizeExerciseName:
    """Tests for normalize_exercise_name."""

    def test_case_hyphens_and_spacing(self):
        assert normalize_exercise_name("Push-ups") == "push ups"
        assert normalize_exercise_name("  push   ups ") == "push ups"
        assert normalize_exercise_name("PUSH_UPS!") == "push ups"

    def test_punctuation_removed(self):
        assert normalize_exercise_name("Farmer's Carry") == "farmers carry"


class TestExerciseMatcher:
    """Tests for ExerciseMatcher."""

    def setup_method(self):
        self.matcher = ExerciseMatcher()
        self.exercises = [
            Exercise(title="Push-ups", id=1),
            Exercise(title="Back Squat", id=2),
        ]

    def test_push_ups_matches_push_ups(self):
        match = self.matcher.find_best_match("Push ups", self.exercises)

        assert match is not None
        assert match.title == "Push-ups"

    def test_no_normalized_match_is_unmatched(self):
        assert self.matcher.find_best_match("Pushups", self.exercises) is None
        assert self.matcher.find_best_match("Bak Squat", self.exercises) is None

    def test_empty_name(self):
        assert self.matcher.find_best_match("  ", self.exercises) is None

    def test_alias_matches(self):
        aliases = {2: ExerciseAlias(user_id=1, exercise_id=2, alias_name="Squats")}

        match = self.matcher.find_best_match("squats", self.exercises, aliases)

        assert match.id == 2

    def test_own_exercise_beats_global(self):
        exercises = [
            Exercise(title="Push-ups", id=1),
            Exercise(title="Push Ups", user_id=7, id=9),
        ]

        match = self.matcher.find_best_match("push-ups", exercises)

        assert match.id == 9


def resolve(db_path, name, context):
    resolver = ExerciseResolver(db_path)
    exercises, aliases = asyncio.run(resolver.load_catalog(context))
    return resolver.matcher.find_best_match(name, exercises, aliases)


class TestExerciseResolver:
    """Tests for resolving names against stored exercises."""

    def test_resolves_against_global_library(self, db_path, context):
        match = resolve(db_path, "Push ups", context)

        assert match is not None
        assert match.title == "Push-ups"
        assert match.is_global

    def test_hidden_global_library(self, db_path, user):
        context = RequestContext(user_id=user.id, show_global_exercises=False)

        assert resolve(db_path, "Push ups", context) is None

    def test_other_users_exercises_are_invisible(self, db_path, context, other_user):
        other = Exercise(title="Sled Push", user_id=other_user.id)
        asyncio.run(ExerciseRepository(db_path).create(other))

        assert resolve(db_path, "Sled Push", context) is None
        assert resolve(db_path, "Back Squat", context).title == "Back Squat"

    def test_alias_changes_display_name(self, db_path, context, global_exercise):
        squat = global_exercise("Back Squat")
        service = ExerciseService(db_path)
        asyncio.run(service.set_alias(squat.id, "Squat", context))

        resolver = ExerciseResolver(db_path)
        exercises, aliases = asyncio.run(resolver.load_catalog(context))
        match = resolver.matcher.find_best_match("squat", exercises, aliases)

        assert match.id == squat.id
        assert display_name(match, aliases) == "Squat"
