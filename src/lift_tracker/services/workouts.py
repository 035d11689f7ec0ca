"""Workouts written in WOD notation and their link to the exercise catalog."""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..db.repositories import LiftLogRepository, WorkoutRepository
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.exercises import Exercise
from ..models.user import RequestContext
from ..models.workout import ParsedWorkout, SchemeType, WodExercise, Workout
from ..wod.parser import WodParser
from .exercise_matching import ExerciseResolver

logger = logging.getLogger(__name__)


@dataclass
class ResolvedExerciseLine:
    """An exercise line of a workout with its catalog match."""

    block_name: str
    line: WodExercise
    exercise: Exercise | None
    display_name: str | None = None

    @property
    def can_log_now(self) -> bool:
        """Only matched lines get a "log now" action."""
        return self.exercise is not None

    def prefill(self) -> tuple[int, int]:
        """Reps and rounds to start the log form with, taken from the scheme."""
        scheme = self.line.scheme
        if self.line.reps is not None:
            return self.line.reps, 1
        if scheme is None:
            return 1, 1
        if scheme.type == SchemeType.SETS_X_REPS:
            return scheme.reps, scheme.sets
        if scheme.type == SchemeType.SETS_X_REP_RANGE:
            return scheme.reps_min, scheme.sets
        if scheme.type == SchemeType.REPS_ONLY:
            return scheme.reps, 1
        return 1, 1

    def to_dict(self) -> dict:
        return {
            "block": self.block_name,
            "name": self.line.name,
            "line": self.line.line_number,
            "scheme": self.line.scheme.to_dict() if self.line.scheme else None,
            "reps": self.line.reps,
            "error": self.line.error,
            "exercise_id": self.exercise.id if self.exercise else None,
            "exercise_name": self.display_name,
            "can_log_now": self.can_log_now,
        }


class WorkoutService:
    """Workout CRUD plus name resolution for the workout view."""

    def __init__(self, db_path: Path | None = None, parser: WodParser | None = None):
        self.workout_repo = WorkoutRepository(db_path)
        self.log_repo = LiftLogRepository(db_path)
        self.resolver = ExerciseResolver(db_path)
        self.parser = parser or WodParser()

    async def create(
        self,
        context: RequestContext,
        name: str,
        wod_syntax: str | None = None,
        description: str = "",
    ) -> Workout:
        """Create a workout, parsing its WOD text when given.

        Scheme errors do not block saving; they are kept in `wod_parsed`.
        """
        if not name or not name.strip():
            raise ValidationError({"name": "The name field is required."})

        parsed = self.parser.parse(wod_syntax) if wod_syntax else None
        workout = Workout(
            user_id=context.user_id,
            name=name.strip(),
            description=description,
            wod_syntax=wod_syntax,
            wod_parsed=parsed,
        )
        await self.workout_repo.create(workout)
        if parsed is not None and parsed.has_errors:
            logger.info(
                "Workout %s saved with %d scheme errors", workout.id, len(parsed.errors)
            )
        return workout

    async def update(
        self,
        workout_id: int,
        context: RequestContext,
        name: str | None = None,
        description: str | None = None,
        wod_syntax: str | None = None,
    ) -> Workout:
        """Change the given fields of a workout; `None` leaves a field as it is.

        New WOD text is re-parsed. An empty string clears it.
        """
        if name is not None and not name.strip():
            raise ValidationError({"name": "The name field is required."})

        workout = await self.get(workout_id, context)
        if name is not None:
            workout.name = name.strip()
        if description is not None:
            workout.description = description
        if wod_syntax is not None:
            workout.wod_syntax = wod_syntax or None
            workout.wod_parsed = self.parser.parse(wod_syntax) if wod_syntax else None
        await self.workout_repo.update(workout)
        return workout

    async def get(self, workout_id: int, context: RequestContext) -> Workout:
        """Load one of the acting user's workouts."""
        workout = await self.workout_repo.get(workout_id)
        if workout is None:
            raise NotFoundError(f"Workout {workout_id} not found")
        if not context.owns(workout.user_id):
            raise AuthorizationError("You cannot access another user's workout.")
        return workout

    async def list_workouts(self, context: RequestContext) -> list[Workout]:
        return await self.workout_repo.list_for_user(context.user_id)

    async def resolve(
        self, parsed: ParsedWorkout, context: RequestContext
    ) -> list[ResolvedExerciseLine]:
        """Match every exercise line against the user's visible exercises."""
        exercises, aliases = await self.resolver.load_catalog(context)
        matcher = self.resolver.matcher
        lines: list[ResolvedExerciseLine] = []

        for block in parsed.blocks:
            for line in block.exercises:
                exercise = matcher.find_best_match(line.name, exercises, aliases)
                name = None
                if exercise is not None:
                    alias = aliases.get(exercise.id)
                    name = alias.alias_name if alias else exercise.title
                lines.append(ResolvedExerciseLine(block.name, line, exercise, name))

        return lines

    async def logs_for(self, workout: Workout) -> list:
        """Lift logs recorded against a workout."""
        return await self.log_repo.list_for_workout(workout.id)

    async def delete(self, workout_id: int, context: RequestContext) -> None:
        """Soft delete a workout; its lift logs stay but lose the reference."""
        workout = await self.get(workout_id, context)
        await self.workout_repo.soft_delete(workout.id)
        logger.info("Deleted workout %s for user %s", workout.id, context.user_id)
