"""Personal record routes."""

from pathlib import Path

from fastapi import APIRouter, Depends

from ...db import PersonalRecordRepository
from ...models.user import RequestContext
from ..dependencies import get_context, get_db

router = APIRouter(prefix="/prs", tags=["prs"])


@router.get("")
async def list_prs(
    exercise_id: int | None = None,
    context: RequestContext = Depends(get_context),
    db_path: Path = Depends(get_db),
):
    """PR events for the acting user, newest first."""
    records = await PersonalRecordRepository(db_path).list_for_user(context.user_id, exercise_id)
    return [record.to_dict() for record in records]
