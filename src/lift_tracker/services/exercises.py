"""Exercise catalog operations for a user."""

import logging
from pathlib import Path

from ..db.repositories import ExerciseAliasRepository, ExerciseRepository
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.exercises import BandType, Exercise, ExerciseAlias, ExerciseType
from ..models.user import RequestContext
from ..utils.exercise_utils import display_name, normalize_exercise_name

logger = logging.getLogger(__name__)


class ExerciseService:
    """Create, alias and delete exercises as the acting user."""

    def __init__(self, db_path: Path | None = None):
        self.exercise_repo = ExerciseRepository(db_path)
        self.alias_repo = ExerciseAliasRepository(db_path)

    async def list_with_names(self, context: RequestContext) -> list[tuple[Exercise, str]]:
        """Visible exercises paired with the name the user sees."""
        exercises = await self.exercise_repo.list_visible(context)
        aliases = await self.alias_repo.get_for_user(context.user_id)
        return [(exercise, display_name(exercise, aliases)) for exercise in exercises]

    async def create(
        self,
        context: RequestContext,
        title: str,
        exercise_type: str = ExerciseType.REGULAR.value,
        band_type: str | None = None,
        description: str = "",
    ) -> Exercise:
        """Create a user-owned exercise."""
        errors: dict[str, str] = {}
        if not title or not title.strip():
            errors["title"] = "The title field is required."
        try:
            parsed_type = ExerciseType(exercise_type)
        except ValueError:
            errors["exercise_type"] = f"Unknown exercise type '{exercise_type}'."
            parsed_type = ExerciseType.REGULAR
        try:
            parsed_band = BandType(band_type) if band_type else None
        except ValueError:
            errors["band_type"] = "Band type must be 'resistance' or 'assistance'."
            parsed_band = None
        if errors:
            raise ValidationError(errors)

        visible = await self.exercise_repo.list_visible(context)
        normalized = normalize_exercise_name(title)
        for existing in visible:
            if not existing.is_global and normalize_exercise_name(existing.title) == normalized:
                raise ValidationError({"title": f"You already have an exercise named '{existing.title}'."})

        exercise = Exercise(
            title=title.strip(),
            exercise_type=parsed_type,
            user_id=context.user_id,
            band_type=parsed_band,
            description=description,
        )
        await self.exercise_repo.create(exercise)
        logger.info("User %s created exercise %s (%s)", context.user_id, exercise.id, exercise.title)
        return exercise

    async def get_owned(self, exercise_id: int, context: RequestContext) -> Exercise:
        """Load an exercise the acting user owns."""
        exercise = await self.exercise_repo.get(exercise_id)
        if exercise is None:
            raise NotFoundError(f"Exercise {exercise_id} not found")
        if not context.owns(exercise.user_id):
            raise AuthorizationError("You can only change your own exercises.")
        return exercise

    async def set_band_type(
        self, exercise_id: int, band_type: str | None, context: RequestContext
    ) -> Exercise:
        """Change an owned exercise's band type (clears the bodyweight flag)."""
        exercise = await self.get_owned(exercise_id, context)
        try:
            exercise.set_band_type(band_type)
        except ValueError:
            raise ValidationError({"band_type": "Band type must be 'resistance' or 'assistance'."})
        await self.exercise_repo.update(exercise)
        return exercise

    async def delete(self, exercise_id: int, context: RequestContext) -> None:
        """Soft delete an owned exercise."""
        exercise = await self.get_owned(exercise_id, context)
        await self.exercise_repo.soft_delete(exercise.id)
        logger.info("User %s deleted exercise %s", context.user_id, exercise.id)

    async def set_alias(
        self, exercise_id: int, alias_name: str, context: RequestContext
    ) -> ExerciseAlias:
        """Set the acting user's display name for a visible exercise."""
        if not alias_name or not alias_name.strip():
            raise ValidationError({"alias_name": "The alias name field is required."})

        exercise = await self.exercise_repo.get(exercise_id)
        if exercise is None:
            raise NotFoundError(f"Exercise {exercise_id} not found")
        if not exercise.is_global and not context.owns(exercise.user_id):
            raise AuthorizationError("You cannot alias another user's exercise.")

        alias = ExerciseAlias(
            user_id=context.user_id, exercise_id=exercise.id, alias_name=alias_name.strip()
        )
        await self.alias_repo.upsert(alias)
        return alias

    async def remove_alias(self, exercise_id: int, context: RequestContext) -> None:
        """Drop the acting user's alias so the exercise shows its title again."""
        aliases = await self.alias_repo.get_for_user(context.user_id)
        if exercise_id not in aliases:
            raise NotFoundError(f"No alias for exercise {exercise_id}")
        await self.alias_repo.delete(context.user_id, exercise_id)
