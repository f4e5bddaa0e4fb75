"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Optional

import asyncpg
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from pm_autopilot import __version__
from pm_autopilot.api.deps import container
from pm_autopilot.api.v1 import auth, content, dashboard, feedback, health, launches, prds, tasks, voc
from pm_autopilot.core.config import settings
from pm_autopilot.core.constants import API_PREFIX
from pm_autopilot.core.exceptions import PMAutopilotError
from pm_autopilot.core.logging import LogContext, get_logger, setup_logging
from pm_autopilot.core.security import generate_request_id
from pm_autopilot.repositories.postgres import create_schema

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.
    Handles startup and shutdown events.
    """
    logger.info(
        "Starting PM Autopilot",
        app_name=settings.app_name,
        env=settings.app_env,
        database=settings.database.backend,
    )

    pool: Optional[Any] = None
    if settings.database.backend == "postgres":
        pool = await asyncpg.create_pool(
            settings.database.url,
            min_size=settings.database.pool_min_size,
            max_size=settings.database.pool_max_size,
        )
        logger.info("Database pool created")
        if settings.database.auto_create_schema:
            await create_schema(pool)

    container.initialize(pool=pool)
    logger.info("Service container initialized")

    yield

    logger.info("Shutting down PM Autopilot")
    await container.close()
    if pool is not None:
        await pool.close()


# Create FastAPI application
app = FastAPI(
    title="PM Autopilot API",
    description="Customer feedback analysis, task ranking, PRD drafting and launch content generation",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.security.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next: Any) -> Any:
    """Tag every log line of a request with a request ID."""
    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    with LogContext(request_id=request_id):
        response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


# Exception handlers
@app.exception_handler(PMAutopilotError)
async def pm_autopilot_error_handler(
    request: Request,
    exc: PMAutopilotError,
) -> JSONResponse:
    """Handle custom application errors."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application error",
        error_code=exc.code,
        error_message=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle unexpected errors."""
    logger.exception(
        "Unexpected error",
        error=str(exc),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
            }
        },
    )


# Include routers
app.include_router(health.router, prefix=API_PREFIX, tags=["Health"])
app.include_router(auth.router, prefix=API_PREFIX, tags=["Auth"])
app.include_router(feedback.router, prefix=API_PREFIX, tags=["Feedback Sources"])
app.include_router(voc.router, prefix=API_PREFIX, tags=["VOC Analysis"])
app.include_router(tasks.router, prefix=API_PREFIX, tags=["Tasks"])
app.include_router(prds.router, prefix=API_PREFIX, tags=["PRDs"])
app.include_router(launches.router, prefix=API_PREFIX, tags=["Launches"])
app.include_router(content.router, prefix=API_PREFIX, tags=["Content Assets"])
app.include_router(dashboard.router, prefix=API_PREFIX, tags=["Dashboard"])

# Uploaded launch images
storage_root = Path(settings.storage.root)
storage_root.mkdir(parents=True, exist_ok=True)
app.mount("/storage", StaticFiles(directory=storage_root), name="storage")


# Root endpoint
@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": __version__,
        "docs": "/docs" if settings.debug else "Disabled in production",
    }


# API info endpoint
@app.get("/api")
async def api_info() -> dict[str, Any]:
    """API information endpoint."""
    return {
        "name": "PM Autopilot API",
        "version": __version__,
        "prefix": API_PREFIX,
        "endpoints": {
            "health": f"{API_PREFIX}/health",
            "auth": f"{API_PREFIX}/auth",
            "feedback_sources": f"{API_PREFIX}/feedback-sources",
            "voc": f"{API_PREFIX}/voc/analyze",
            "tasks": f"{API_PREFIX}/tasks",
            "prds": f"{API_PREFIX}/prds",
            "launches": f"{API_PREFIX}/launches",
            "content_assets": f"{API_PREFIX}/content-assets",
            "dashboard": f"{API_PREFIX}/dashboard/stats",
        },
    }


def run() -> None:
    """Run the development server."""
    import uvicorn

    uvicorn.run(
        "pm_autopilot.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
