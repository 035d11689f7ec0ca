"""Lift log routes, including TSV import and export."""

from datetime import datetime
from pathlib import Path

from fastapi import APIRouter, Body, Depends, Response
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from ...config import get_settings
from ...models.lift_log import LiftLog, LiftSet
from ...models.user import RequestContext
from ...services.lift_logging import LiftLogService
from ...services.one_rep_max import OneRepMaxCalculator
from ...services.tsv_import import TsvImporter
from ..dependencies import get_context, get_db

router = APIRouter(prefix="/lift-logs", tags=["lift-logs"])


class SetIn(BaseModel):
    weight: float = 0.0
    reps: int
    band_color: str | None = None
    notes: str | None = None


class LiftLogIn(BaseModel):
    exercise_id: int
    sets: list[SetIn] = Field(default_factory=list)
    logged_at: datetime | None = None
    comments: str = ""
    workout_id: int | None = None


class LiftLogPatch(BaseModel):
    comments: str


async def _log_out(log: LiftLog, service: LiftLogService, context: RequestContext) -> dict:
    data = log.to_dict()
    exercise = await service.exercise_repo.get(log.exercise_id, include_deleted=True)
    calculator = OneRepMaxCalculator(bodyweight=context.bodyweight)
    data["one_rep_max"] = (
        calculator.format_one_rep_max(log, exercise, get_settings().weight_unit)
        if exercise
        else None
    )
    return data


@router.get("")
async def list_lift_logs(
    exercise_id: int | None = None,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """The acting user's lift logs, newest first."""
    service = LiftLogService(db_path)
    logs = await service.list_logs(context, exercise_id)
    return [await _log_out(log, service, context) for log in logs]


@router.post("", status_code=201)
async def create_lift_log(
    body: LiftLogIn,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Log a lift and report whether it set a PR."""
    service = LiftLogService(db_path)
    sets = [
        LiftSet(weight=s.weight, reps=s.reps, band_color=s.band_color, notes=s.notes)
        for s in body.sets
    ]
    log, evaluation = await service.create(
        context,
        body.exercise_id,
        sets,
        logged_at=body.logged_at,
        comments=body.comments,
        workout_id=body.workout_id,
    )
    data = await _log_out(log, service, context)
    data["pr_reason"] = evaluation.reason()
    return data


@router.post("/import")
async def import_lift_logs(
    tsv: str = Body("", media_type="text/plain"),
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Import lift logs from a TSV request body."""
    result = await TsvImporter(db_path).import_lift_logs(tsv, context)
    return result.to_dict()


@router.get("/export", response_class=PlainTextResponse)
async def export_lift_logs(
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """The acting user's lift logs as TSV."""
    return await TsvImporter(db_path).export_lift_logs(context)


@router.get("/{log_id}")
async def get_lift_log(
    log_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """One of the acting user's lift logs."""
    service = LiftLogService(db_path)
    return await _log_out(await service.get(log_id, context), service, context)


@router.patch("/{log_id}")
async def update_lift_log(
    log_id: int,
    body: LiftLogPatch,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Edit a log's comments. PR state is not re-evaluated."""
    service = LiftLogService(db_path)
    log = await service.update_comments(log_id, body.comments, context)
    return await _log_out(log, service, context)


@router.delete("/{log_id}", status_code=204)
async def delete_lift_log(
    log_id: int,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """Soft delete one of the acting user's lift logs."""
    await LiftLogService(db_path).delete(log_id, context)
    return Response(status_code=204)
