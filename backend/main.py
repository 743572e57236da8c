"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, exception
handlers and configures lifespan.

Dependencies: fastapi, backend.api, backend.observability, backend.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.configs import Settings, get_settings
from backend.api import api_router
from backend.api.deps import ServiceContainer
from backend.core.exceptions import ResumeAnalyzerException
from backend.models.common import ErrorResponse
from backend.observability.logger import configure_logging
from backend.observability.middleware import (
    RequestLoggingMiddleware,
    CorrelationMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    Starts the session sweep and upload cleanup timers, and on shutdown
    stops them and closes every open event stream.
    """
    # Startup
    services: ServiceContainer = app.state.services
    configure_logging(services.settings.log_level)
    logger.info("Application startup: logging configured")

    services.start()
    logger.info("Application startup complete: background services running")

    yield

    # Shutdown
    await services.stop()
    logger.info("Application shutdown")


async def resume_analyzer_exception_handler(
    request: Request, exc: ResumeAnalyzerException
) -> JSONResponse:
    """Render application errors as ErrorResponse."""
    logger.warning(
        f"{exc.code}: {exc.message}",
        extra={"path": request.url.path, "error_code": exc.code, "details": exc.details},
    )
    body = ErrorResponse(error=exc.message, code=exc.code, details=exc.details or None)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as ErrorResponse."""
    errors = [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]
    body = ErrorResponse(
        error="Invalid request",
        code="VALIDATION_ERROR",
        details={"errors": errors},
    )
    return JSONResponse(status_code=400, content=body.model_dump(mode="json"))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render unexpected faults without leaking internals."""
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error_type": type(exc).__name__, "error_msg": str(exc)},
    )
    body = ErrorResponse(error="Internal server error", code="INTERNAL_ERROR")
    return JSONResponse(status_code=500, content=body.model_dump(mode="json"))


def create_app(
    settings: Settings | None = None,
    services: ServiceContainer | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Optional settings override (defaults to environment settings)
        services: Optional pre-built service container

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Resume Analyzer API",
        description="Resume upload, AI analysis and real-time progress streaming",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.services = services or ServiceContainer.from_settings(settings)

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.streaming.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ResumeAnalyzerException, resume_analyzer_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Register API routes
    app.include_router(api_router, prefix="/api")

    @app.get("/", tags=["health"])
    async def root() -> dict:
        return {
            "status": "OK",
            "message": "Resume Analyzer API is running",
            "environment": settings.environment,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "backend.main:app",
        host="localhost",
        port=8082,
        reload=True,
    )
