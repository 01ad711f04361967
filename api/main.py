"""
FastAPI application initialization and configuration.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import Settings, settings as default_settings
from database.engine import Database
from api.routes import health
from api.routes.v1 import jobs

from core.middleware import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    StructuredLoggingMiddleware,
    setup_logging,
    AuthenticationMiddleware,
)

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application for the given settings.

    The database handle is created in the lifespan and stored on
    ``app.state.database``.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifespan events."""
        logger.info(f"Starting {settings.app_name} in {settings.app_env} environment")
        database = Database(
            settings.database_url,
            echo=settings.database_echo,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        await database.init()
        app.state.database = database

        yield

        logger.info(f"Shutting down {settings.app_name}")
        await database.close()

    app = FastAPI(
        title=settings.app_name,
        description="Job board API: job postings with company and application details",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Setup error handlers (before middleware)
    setup_error_handlers(app, expose_details=settings.expose_error_details)

    # Add middleware (order matters - the last one added runs first)
    # 1. Authentication middleware (innermost - resolves the actor from the token)
    app.add_middleware(
        AuthenticationMiddleware,
        jwt_secret=settings.jwt_secret_key,
        jwt_algorithm=settings.jwt_algorithm,
        cookie_name=settings.auth_cookie_name,
    )

    # 2. Structured logging middleware (logs all requests/responses)
    app.add_middleware(
        StructuredLoggingMiddleware,
        log_request_body=settings.log_request_body,
        max_body_size=settings.log_max_body_size,
    )

    # 3. Error handling middleware (catches anything the handlers did not)
    app.add_middleware(
        ErrorHandlingMiddleware,
        debug=settings.debug,
        expose_details=settings.expose_error_details,
    )

    # 4. CORS middleware (outermost, so error responses carry CORS headers)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check routes
    app.include_router(health.router, tags=["Health"])

    # API v1 routes
    app.include_router(
        jobs.router,
        prefix=f"{settings.api_v1_prefix}/job",
        tags=["Jobs"],
    )

    return app


# Setup structured logging (do this first, before anything else)
setup_logging(
    log_level=default_settings.log_level,
    json_logs=default_settings.json_logs,
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=default_settings.debug,
        log_level=default_settings.log_level.lower(),
    )
