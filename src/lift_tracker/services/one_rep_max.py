"""One-rep-max estimation."""

from ..models.exercises import Exercise
from ..models.lift_log import LiftLog, LiftSet


def estimate_one_rep_max(weight: float, reps: int) -> float:
    """Epley estimate: weight * (1 + reps / 30).

    A single rep is its own 1RM; zero or negative reps give 0.
    """
    if reps <= 0:
        return 0.0
    if reps == 1:
        return float(weight)
    return weight * (1 + reps / 30)


class OneRepMaxCalculator:
    """Computes 1RM values for sets and logs of a given exercise.

    Banded exercises, banded sets and exercise types without weight based
    metrics (cardio, static holds) never produce a value.
    """

    def __init__(self, bodyweight: float = 0.0):
        # Added to the set weight for bodyweight exercises
        self.bodyweight = bodyweight

    def set_one_rep_max(self, lift_set: LiftSet, exercise: Exercise) -> float | None:
        """1RM for a single set, or None when not applicable."""
        if not exercise.supports_one_rep_max or lift_set.is_banded:
            return None
        if lift_set.reps <= 0:
            return None
        weight = lift_set.weight
        if exercise.is_bodyweight:
            weight += self.bodyweight
        return estimate_one_rep_max(weight, lift_set.reps)

    def best_one_rep_max(self, log: LiftLog, exercise: Exercise) -> float | None:
        """Highest set 1RM in a log, or None when no set qualifies."""
        values = [
            value
            for value in (self.set_one_rep_max(s, exercise) for s in log.sets)
            if value is not None
        ]
        return max(values) if values else None

    def format_one_rep_max(self, log: LiftLog, exercise: Exercise, unit: str = "lbs") -> str | None:
        """Display text for a log's 1RM, or None when it should not be shown."""
        value = self.best_one_rep_max(log, exercise)
        if value is None or value <= 0:
            return None
        return f"{value:.1f} {unit}"
