"""Tests for one-rep-max estimation."""

import pytest

from lift_tracker.models.exercises import BandType, Exercise, ExerciseType
from lift_tracker.models.lift_log import LiftSet
from lift_tracker.services.one_rep_max import OneRepMaxCalculator, estimate_one_rep_max


class TestEstimateOneRepMax:
    """Tests for the Epley formula."""

    def test_epley(self):
        assert estimate_one_rep_max(200, 5) == pytest.approx(200 * (1 + 5 / 30))

    def test_single_rep_is_the_weight(self):
        assert estimate_one_rep_max(315, 1) == 315

    def test_zero_reps(self):
        assert estimate_one_rep_max(315, 0) == 0


class TestOneRepMaxCalculator:
    """Tests for OneRepMaxCalculator."""

    def test_best_set_wins(self, squat, make_log):
        log = make_log(200)
        log.sets.append(LiftSet(weight=220, reps=3))

        best = OneRepMaxCalculator().best_one_rep_max(log, squat)

        assert best == pytest.approx(220 * (1 + 3 / 30))

    def test_banded_exercise_never_has_a_value(self, make_log):
        banded = Exercise(title="Banded Pull-Apart", band_type=BandType.RESISTANCE)
        log = make_log(100, reps=10)

        calculator = OneRepMaxCalculator()

        assert calculator.best_one_rep_max(log, banded) is None
        assert calculator.format_one_rep_max(log, banded) is None

    def test_banded_set_is_skipped(self, squat, make_log):
        log = make_log(200)
        log.sets.append(LiftSet(weight=500, reps=10, band_color="red"))

        best = OneRepMaxCalculator().best_one_rep_max(log, squat)

        assert best == pytest.approx(200 * (1 + 5 / 30))

    @pytest.mark.parametrize("exercise_type", [ExerciseType.CARDIO, ExerciseType.STATIC_HOLD])
    def test_non_strength_types(self, exercise_type, make_log):
        exercise = Exercise(title="Row", exercise_type=exercise_type)

        assert OneRepMaxCalculator().best_one_rep_max(make_log(100), exercise) is None

    def test_bodyweight_is_added(self, make_log):
        pull_ups = Exercise(title="Pull-ups", exercise_type=ExerciseType.BODYWEIGHT)
        log = make_log(25, reps=1)

        assert OneRepMaxCalculator(bodyweight=180).best_one_rep_max(log, pull_ups) == 205

    def test_format(self, squat, make_log):
        text = OneRepMaxCalculator().format_one_rep_max(make_log(300, reps=1), squat, "kg")

        assert text == "300.0 kg"
