"""Request-scoped dependencies shared by the routers."""

from pathlib import Path

from fastapi import Header, HTTPException, Request
from fastapi.templating import Jinja2Templates

from ..db import UserRepository
from ..models.user import RequestContext


def get_templates(request: Request) -> Jinja2Templates:
    """Get templates from app state."""
    return request.app.state.templates


def get_db(request: Request) -> Path:
    """Database path the app was created with."""
    return request.app.state.db_path


async def get_context(
    request: Request,
    x_user_id: int | None = Header(default=None),
) -> RequestContext:
    """Build the acting user's context from the X-User-Id header."""
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="X-User-Id header is required")

    user = await UserRepository(get_db(request)).get(x_user_id)
    if user is None:
        raise HTTPException(status_code=401, detail=f"Unknown user {x_user_id}")
    return RequestContext.for_user(user)
