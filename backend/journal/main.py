"""FastAPI application entry point."""
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from journal.config import settings
from journal.database import Database
from journal.exceptions import JournalError, StorageError, ValidationError
from journal.logging_config import setup_logging
from journal.services import seed_service, session_service
from journal.services.notifier import Notifier, build_notifier

# Import routers
from journal.routers import admin, auth, entries, prompts

# Import all models so Base.metadata knows about them
from journal.models.user import User                          # noqa: F401
from journal.models.prompt import Prompt                      # noqa: F401
from journal.models.entry import Entry                        # noqa: F401
from journal.models.verification_code import VerificationCode  # noqa: F401

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(JournalError)
    async def handle_journal_error(request: Request, exc: JournalError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        logger.info("Rejected request to %s: %s", request.url.path, exc.errors())
        return _error(status.HTTP_400_BAD_REQUEST, ValidationError.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def handle_storage_error(request: Request, exc: SQLAlchemyError):
        logger.exception("Storage failure on %s %s", request.method, request.url.path)
        return _error(StorageError.status_code, StorageError.message)


def create_app(database: Optional[Database] = None, notifier: Optional[Notifier] = None) -> FastAPI:
    """Build the API around an explicit database handle and notifier."""
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title="Daily Journal",
        description="Daily prompts and personal journal entries with optional two-factor login",
        version="0.1.0",
    )
    app.state.database = database or Database(settings.DATABASE_URL)
    app.state.notifier = notifier or build_notifier(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    # Register routers
    app.include_router(auth.router, tags=["Auth"])
    app.include_router(prompts.router, tags=["Prompts"])
    app.include_router(entries.router, tags=["Entries"])
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])

    @app.on_event("startup")
    def on_startup():
        """Create tables and seed prompts (and the configured admin) if missing."""
        session_service.warn_if_insecure_secret()
        db_handle = app.state.database
        db_handle.create_all()
        db = db_handle.session()
        try:
            seed_service.seed(db, settings)
        finally:
            db.close()

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.database.dispose()

    @app.get("/api/health")
    def health_check():
        return {"status": "ok"}

    return app


app = create_app()
