"""Exercise catalog routes."""

from pathlib import Path

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from ...models.exercises import Exercise, ExerciseType
from ...models.user import RequestContext
from ...services.exercises import ExerciseService
from ...utils.exercise_utils import group_exercises_by_owner
from ..dependencies import get_context, get_db

router = APIRouter(prefix="/exercises", tags=["exercises"])


class ExerciseIn(BaseModel):
    title: str
    exercise_type: str = ExerciseType.REGULAR.value
    band_type: str | None = None
    description: str = ""


class AliasIn(BaseModel):
    alias_name: str


class ExercisePatch(BaseModel):
    band_type: str | None = None


def _exercise_out(exercise: Exercise, name: str) -> dict:
    return {
        "id": exercise.id,
        **exercise.to_dict(),
        "name": name,
        "is_global": exercise.is_global,
        "supports_one_rep_max": exercise.supports_one_rep_max,
    }


@router.get("")
async def list_exercises(
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """The acting user's exercises followed by visible global ones."""
    named = await ExerciseService(db_path).list_with_names(context)
    names = {exercise.id: name for exercise, name in named}
    grouped = group_exercises_by_owner([exercise for exercise, _ in named])
    return {
        owner: [_exercise_out(exercise, names[exercise.id]) for exercise in items]
        for owner, items in grouped.items()
    }


@router.post("", status_code=201)
async def create_exercise(
    body: ExerciseIn,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Create an exercise owned by the acting user."""
    exercise = await ExerciseService(db_path).create(
        context,
        body.title,
        exercise_type=body.exercise_type,
        band_type=body.band_type,
        description=body.description,
    )
    return _exercise_out(exercise, exercise.title)


@router.patch("/{exercise_id}")
async def update_exercise(
    exercise_id: int,
    body: ExercisePatch,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Change the band type of an owned exercise (null clears it)."""
    exercise = await ExerciseService(db_path).set_band_type(exercise_id, body.band_type, context)
    return _exercise_out(exercise, exercise.title)


@router.delete("/{exercise_id}", status_code=204)
async def delete_exercise(
    exercise_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Soft delete an exercise the acting user owns."""
    await ExerciseService(db_path).delete(exercise_id, context)
    return Response(status_code=204)


@router.put("/{exercise_id}/alias")
async def set_alias(
    exercise_id: int,
    body: AliasIn,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Set the acting user's display name for an exercise."""
    alias = await ExerciseService(db_path).set_alias(exercise_id, body.alias_name, context)
    return {"exercise_id": alias.exercise_id, "alias_name": alias.alias_name}


@router.delete("/{exercise_id}/alias", status_code=204)
async def remove_alias(
    exercise_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Remove the acting user's display name for an exercise."""
    await ExerciseService(db_path).remove_alias(exercise_id, context)
    return Response(status_code=204)
