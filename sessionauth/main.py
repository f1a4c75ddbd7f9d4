"""FastAPI application factory. No business logic; only wiring and middleware."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from sessionauth.api import router as api_router
from sessionauth.core.config import Settings, get_settings
from sessionauth.core.context import AppContext, build_context
from sessionauth.core.database import init_db
from sessionauth.core.errors import validation_exception_handler
from sessionauth.core.logging import configure_logging
from sessionauth.middleware import ServerSessionMiddleware

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """
    Build the application around an AppContext.

    When no context is passed one is built from settings and disposed at
    shutdown; a caller-supplied context is left for the caller to close.
    """
    if settings is None:
        settings = context.settings if context is not None else get_settings()
    configure_logging(settings)
    owns_context = context is None
    if context is None:
        context = build_context(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("sessionauth API is starting (env=%s)", settings.APP_ENV)
        if settings.DATABASE_AUTO_CREATE:
            init_db(context.engine)
        yield
        logger.info("sessionauth API is shutting down")
        if owns_context:
            context.close()

    app = FastAPI(
        title="sessionauth API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(ServerSessionMiddleware, context=context)
    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "sessionauth API"}

    return app
