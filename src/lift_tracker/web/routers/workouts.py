"""Workout routes: WOD text in, parsed and resolved workout out."""

from pathlib import Path

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ...models.user import RequestContext
from ...services.lift_logging import LiftLogService, build_sets
from ...services.workouts import WorkoutService
from ..dependencies import get_context, get_db, get_templates

router = APIRouter(prefix="/workouts", tags=["workouts"])


class WorkoutIn(BaseModel):
    name: str
    wod_syntax: str | None = None
    description: str = ""


class WorkoutUpdate(BaseModel):
    name: str | None = None
    wod_syntax: str | None = None
    description: str | None = None


@router.get("")
async def list_workouts(
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """The acting user's workouts, newest first."""
    workouts = await WorkoutService(db_path).list_workouts(context)
    return [workout.to_dict() for workout in workouts]


@router.post("", status_code=201)
async def create_workout(
    body: WorkoutIn,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Create a workout. Scheme errors are returned, not rejected."""
    workout = await WorkoutService(db_path).create(
        context, body.name, body.wod_syntax, body.description
    )
    return workout.to_dict()


@router.get("/{workout_id}")
async def get_workout(
    workout_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """A workout with each exercise line resolved against the catalog."""
    service = WorkoutService(db_path)
    workout = await service.get(workout_id, context)
    data = workout.to_dict()
    lines = await service.resolve(workout.wod_parsed, context) if workout.wod_parsed else []
    data["exercises"] = [line.to_dict() for line in lines]
    return data


@router.put("/{workout_id}")
async def update_workout(
    workout_id: int,
    body: WorkoutUpdate,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Update a workout. Omitted fields are kept; new WOD text is re-parsed."""
    workout = await WorkoutService(db_path).update(
        workout_id,
        context,
        name=body.name,
        description=body.description,
        wod_syntax=body.wod_syntax,
    )
    return workout.to_dict()


@router.get("/{workout_id}/view", response_class=HTMLResponse)
async def workout_view(
    request: Request,
    workout_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
    templates: Jinja2Templates = Depends(get_templates),
):
    """Workout page; only matched exercise lines get a "Log now" link."""
    service = WorkoutService(db_path)
    workout = await service.get(workout_id, context)
    lines = await service.resolve(workout.wod_parsed, context) if workout.wod_parsed else []
    logs = await service.logs_for(workout)

    return templates.TemplateResponse(
        request,
        "workout.html",
        {
            "workout": workout,
            "lines": lines,
            "errors": workout.wod_parsed.errors if workout.wod_parsed else [],
            "log_count": len(logs),
        },
    )


@router.post("/{workout_id}/log")
async def log_from_workout(
    workout_id: int,
    exercise_id: int = Form(...),
    weight: float = Form(0.0),
    reps: int = Form(...),
    rounds: int = Form(1),
    band_color: str | None = Form(None),
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Log a lift from the workout page, then go back to it."""
    sets = build_sets(weight, reps, rounds, band_color=band_color or None)
    await LiftLogService(db_path).create(context, exercise_id, sets, workout_id=workout_id)
    return RedirectResponse(url=f"/workouts/{workout_id}/view", status_code=303)


@router.delete("/{workout_id}", status_code=204)
async def delete_workout(
    workout_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Soft delete a workout; its lift logs keep existing without it."""
    await WorkoutService(db_path).delete(workout_id, context)
    return Response(status_code=204)
