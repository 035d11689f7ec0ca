"""FastAPI application for the lift-tracker web interface."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates

from ..db.engine import get_db_path, init_db
from ..errors import (
    AuthorizationError,
    LiftTrackerError,
    NotFoundError,
    ValidationError,
)
from .routers import exercises, lift_logs, prs, workouts

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the schema on startup when the database is new."""
    db_path = app.state.db_path
    if not db_path.exists():
        await init_db(db_path)
    yield


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(status_code=422, content={"detail": str(exc), "errors": exc.errors})

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(AuthorizationError)
    async def forbidden(request: Request, exc: AuthorizationError):
        logger.warning("Forbidden %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=403, content={"detail": str(exc)})

    # SchemeParseError, TsvImportError and anything else the user can fix
    @app.exception_handler(LiftTrackerError)
    async def bad_request(request: Request, exc: LiftTrackerError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})


def create_app(db_path: Path | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="lift-tracker",
        description="WOD notation, lift logging and personal records",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.db_path = db_path or get_db_path()
    app.state.templates = Jinja2Templates(directory=TEMPLATES_DIR)

    _register_error_handlers(app)

    app.include_router(exercises.router)
    app.include_router(lift_logs.router)
    app.include_router(prs.router)
    app.include_router(workouts.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": "0.1.0"}

    return app
