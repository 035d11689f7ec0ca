"""Creating, reading and deleting lift logs on behalf of a user."""

import logging
from datetime import datetime
from pathlib import Path

from ..db.repositories import ExerciseRepository, LiftLogRepository, WorkoutRepository
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.exercises import BAND_COLORS, Exercise
from ..models.lift_log import LiftLog, LiftSet, to_naive_local
from ..models.user import RequestContext
from .one_rep_max import OneRepMaxCalculator
from .pr_detection import PRDetectionService, PREvaluation

logger = logging.getLogger(__name__)

MAX_REPS = 100


def validate_sets(exercise: Exercise, sets: list[LiftSet]) -> None:
    """Check set values against the exercise type.

    Raises:
        ValidationError: with one message per offending field
    """
    errors: dict[str, str] = {}
    if not sets:
        errors["sets"] = "At least one set is required."

    for index, lift_set in enumerate(sets):
        if lift_set.reps < 1 or lift_set.reps > MAX_REPS:
            errors[f"sets.{index}.reps"] = f"Reps must be between 1 and {MAX_REPS}."
        if lift_set.weight < 0:
            errors[f"sets.{index}.weight"] = "Weight cannot be negative."
        if exercise.is_banded:
            if not lift_set.band_color:
                errors[f"sets.{index}.band_color"] = "Band color is required for banded exercises."
            elif lift_set.band_color not in BAND_COLORS:
                errors[f"sets.{index}.band_color"] = (
                    f"Band color must be one of: {', '.join(BAND_COLORS)}."
                )

    if errors:
        raise ValidationError(errors)


def build_sets(weight: float, reps: int, rounds: int, band_color: str | None = None,
               notes: str | None = None) -> list[LiftSet]:
    """Uniform sets as entered on a simple form (weight x reps x rounds)."""
    return [
        LiftSet(weight=weight, reps=reps, band_color=band_color, notes=notes)
        for _ in range(max(rounds, 0))
    ]


class LiftLogService:
    """Lift log operations scoped to the acting user."""

    def __init__(self, db_path: Path | None = None):
        self.exercise_repo = ExerciseRepository(db_path)
        self.log_repo = LiftLogRepository(db_path)
        self.workout_repo = WorkoutRepository(db_path)
        self.pr_service = PRDetectionService(db_path)

    async def get_exercise_for(self, exercise_id: int, context: RequestContext) -> Exercise:
        """Load an exercise the acting user is allowed to log against."""
        exercise = await self.exercise_repo.get(exercise_id)
        if exercise is None:
            raise NotFoundError(f"Exercise {exercise_id} not found")
        if not exercise.is_global and not context.owns(exercise.user_id):
            raise AuthorizationError("You cannot log against another user's exercise.")
        return exercise

    async def create(
        self,
        context: RequestContext,
        exercise_id: int,
        sets: list[LiftSet],
        logged_at: datetime | None = None,
        comments: str = "",
        workout_id: int | None = None,
    ) -> tuple[LiftLog, PREvaluation]:
        """Create a log with its sets, then evaluate PR status once.

        Timezone-aware `logged_at` values are stored as local time. If PR
        evaluation fails the log is removed again and the error re-raised.
        """
        exercise = await self.get_exercise_for(exercise_id, context)
        if exercise.is_banded:
            # Bands carry no weight
            for lift_set in sets:
                lift_set.weight = 0.0
        validate_sets(exercise, sets)

        if workout_id is not None:
            workout = await self.workout_repo.get(workout_id)
            if workout is None:
                raise NotFoundError(f"Workout {workout_id} not found")
            if not context.owns(workout.user_id):
                raise AuthorizationError("You cannot log against another user's workout.")

        if logged_at is None:
            logged_at = datetime.now().replace(microsecond=0)
        log = LiftLog(
            user_id=context.user_id,
            exercise_id=exercise.id,
            logged_at=to_naive_local(logged_at),
            sets=sets,
            comments=comments or "",
            workout_id=workout_id,
        )
        await self.log_repo.create(log)
        logger.debug("Created lift log %s for user %s", log.id, context.user_id)

        calculator = OneRepMaxCalculator(bodyweight=context.bodyweight)
        try:
            evaluation = await self.pr_service.detect_and_store(log, exercise, calculator)
        except Exception:
            logger.exception("PR evaluation failed for lift log %s, removing it", log.id)
            await self.log_repo.purge(log.id)
            raise
        return log, evaluation

    async def get(self, log_id: int, context: RequestContext) -> LiftLog:
        """Get one of the acting user's logs."""
        log = await self.log_repo.get(log_id)
        if log is None:
            raise NotFoundError(f"Lift log {log_id} not found")
        if not context.owns(log.user_id):
            raise AuthorizationError("You cannot view another user's lift log.")
        return log

    async def list_logs(self, context: RequestContext, exercise_id: int | None = None) -> list[LiftLog]:
        """The acting user's logs, newest first."""
        return await self.log_repo.list_for_user(context.user_id, exercise_id)

    async def update_comments(self, log_id: int, comments: str, context: RequestContext) -> LiftLog:
        """Edit a log's comments. PR state is left as it is."""
        log = await self.get(log_id, context)
        await self.log_repo.update_comments(log.id, comments)
        log.comments = comments
        return log

    async def delete(self, log_id: int, context: RequestContext) -> None:
        """Soft delete one of the acting user's logs."""
        log = await self.get(log_id, context)
        await self.log_repo.soft_delete(log.id)
        logger.info("Deleted lift log %s for user %s", log.id, context.user_id)
