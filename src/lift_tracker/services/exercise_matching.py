"""Match free-text exercise names against a user's exercise catalog."""

from pathlib import Path

from ..db.repositories import ExerciseAliasRepository, ExerciseRepository
from ..models.exercises import Exercise, ExerciseAlias
from ..models.user import RequestContext
from ..utils.exercise_utils import normalize_exercise_name


class ExerciseMatcher:
    """Resolves names by normalized equality.

    Matching is exact on the normalized form only (case, punctuation,
    hyphens and spacing are ignored). There is no similarity scoring, so a
    misspelled name stays unmatched.
    """

    def find_best_match(
        self,
        name: str,
        exercises: list[Exercise],
        aliases: dict[int, ExerciseAlias] | None = None,
    ) -> Exercise | None:
        """Find the exercise matching a name.

        Args:
            name: The exercise name as typed
            exercises: Candidate exercises, in priority order
            aliases: The user's aliases keyed by exercise ID

        Returns:
            The first exercise whose title or alias normalizes to the same
            string, or None
        """
        target = normalize_exercise_name(name)
        if not target:
            return None

        aliases = aliases or {}
        # Own exercises win over global ones with the same normalized title
        ordered = sorted(exercises, key=lambda e: e.is_global)

        for exercise in ordered:
            alias = aliases.get(exercise.id)
            if alias and normalize_exercise_name(alias.alias_name) == target:
                return exercise

        for exercise in ordered:
            if normalize_exercise_name(exercise.title) == target:
                return exercise

        return None


class ExerciseResolver:
    """Looks up names against the acting user's visible exercises."""

    def __init__(self, db_path: Path | None = None, matcher: ExerciseMatcher | None = None):
        self.exercise_repo = ExerciseRepository(db_path)
        self.alias_repo = ExerciseAliasRepository(db_path)
        self.matcher = matcher or ExerciseMatcher()

    async def load_catalog(
        self, context: RequestContext
    ) -> tuple[list[Exercise], dict[int, ExerciseAlias]]:
        """Visible exercises and aliases for the acting user."""
        exercises = await self.exercise_repo.list_visible(context)
        aliases = await self.alias_repo.get_for_user(context.user_id)
        return exercises, aliases
