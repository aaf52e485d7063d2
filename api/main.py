from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from api.config.logging import get_logger, setup_logging
from api.config.settings import Settings, get_settings
from api.core.exceptions import (
    JobsAPIException,
    RequestContextMiddleware,
    general_exception_handler,
    http_exception_handler,
    jobs_api_exception_handler,
    request_validation_exception_handler,
)
from api.healthz import router as health_router
from api.infra.database import Database
from api.jobs.routes import router as jobs_router

logger = get_logger(__name__)


def create_app(
    settings: Settings | None = None, database: Database | None = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    When ``database`` is given the caller owns it; otherwise the lifespan
    opens one from ``settings`` and disposes of its pool on shutdown.
    """
    settings = settings or get_settings()

    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = database is None
        if owned:
            app.state.database = Database(settings)
        logger.info(
            "Jobs API starting",
            environment=settings.environment,
            dialect=app.state.database.dialect_name,
        )
        try:
            yield
        finally:
            if owned:
                await app.state.database.close()

    app = FastAPI(
        title=settings.app_name,
        description="Job submission with idempotency keys",
        version=settings.version,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_url="/openapi.json" if settings.enable_docs else None,
        docs_url="/docs" if settings.enable_docs else None,
        redoc_url=None,
    )

    if database is not None:
        app.state.database = database
    app.dependency_overrides[get_settings] = lambda: settings

    # Add middleware
    app.add_middleware(RequestContextMiddleware)

    # Add exception handlers
    app.add_exception_handler(JobsAPIException, jobs_api_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Include routers
    app.include_router(health_router, tags=["health"])
    app.include_router(jobs_router)

    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        workers=1 if settings.debug else settings.workers,
    )
