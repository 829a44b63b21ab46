"""
FastAPI application initialization and configuration.
"""

from contextlib import asynccontextmanager
from typing import Any, Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from agents import InterviewAgent, ScreeningAgent
from api.routes import health
from api.routes.v1 import candidates, public
from core.config import Settings, get_settings
from core.integrations.email import EmailService
from core.middleware import (
    ErrorHandlingMiddleware,
    StructuredLoggingMiddleware,
    setup_error_handlers,
    setup_logging,
)
from core.storage import get_document_store
from database.engine import close_db, create_db_engine, create_session_factory, init_db

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    *,
    session_factory: Any = None,
    document_store: Any = None,
    scoring_engine: Any = None,
    notifier: Any = None,
    interview_assistant: Any = None,
) -> FastAPI:
    """
    Build the application.

    Collaborators default to the configured implementations; passing one in
    replaces it, which is how tests run the API against fakes. When a session
    factory is given the application does not manage a database engine.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
        engine = None
        if app.state.session_factory is None:
            engine = create_db_engine(settings.database_url, echo=settings.database_echo)
            await init_db(engine)
            app.state.session_factory = create_session_factory(engine)

        yield

        logger.info(f"Shutting down {settings.app_name}")
        if engine is not None:
            await close_db(engine)

    app = FastAPI(
        title=settings.app_name,
        description="Applicant tracking: candidate intake, screening and review",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.session_factory = session_factory
    app.state.document_store = document_store or get_document_store(settings)
    app.state.scoring_engine = scoring_engine or ScreeningAgent(
        model=settings.scoring_model, api_key=settings.google_api_key
    )
    app.state.interview_assistant = interview_assistant or InterviewAgent(
        model=settings.scoring_model, api_key=settings.google_api_key
    )
    app.state.notifier = notifier or EmailService.from_settings(settings)

    # Setup error handlers (before middleware)
    setup_error_handlers(app, debug=settings.debug)

    # Middleware executes in reverse order of registration
    app.add_middleware(StructuredLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Outermost: catches anything raised by the middleware above
    app.add_middleware(ErrorHandlingMiddleware, debug=settings.debug)

    app.include_router(health.router, tags=["Health"])
    app.include_router(public.router, prefix=settings.api_v1_prefix)
    app.include_router(candidates.router, prefix=settings.api_v1_prefix)

    if settings.storage_backend == "local":
        app.mount(
            "/files",
            StaticFiles(directory=settings.local_storage_path, check_dir=False),
            name="files",
        )

    return app


def run() -> None:
    """Console entry point: serve the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_logs=settings.json_logs)
    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
    )
