"""
FastAPI application entry point with application factory pattern.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from dialtester.core.config import settings
from dialtester.core.exceptions import DialTesterError
from dialtester.core.logging import setup_logging, get_logger
from dialtester.core.metrics import errors_total
from dialtester.middleware.metrics import normalize_path
from dialtester.api.health import router as health_router
from dialtester.core.database import create_tables, engine

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events.
    """
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    # Create database tables (in production, use migrations)
    if settings.ENVIRONMENT == "local":
        await create_tables()

    yield

    logger.info("Shutting down application")
    await engine.dispose()


def _validation_message(exc: RequestValidationError) -> str:
    """First human-readable message out of a pydantic error list."""
    for error in exc.errors():
        cause = (error.get("ctx") or {}).get("error")
        if cause is not None:
            return str(cause)
        field = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        return f"{field}: {error.get('msg')}" if field else str(error.get("msg"))
    return "Invalid request"


def create_app() -> FastAPI:
    """
    Application factory function.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description="Emotional response dial recording API",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DialTesterError)
    async def dial_tester_exception_handler(request: Request, exc: DialTesterError):
        errors_total.labels(error_type=type(exc).__name__, endpoint=normalize_path(request.url.path)).inc()
        log = logger.warning if exc.http_status < 500 else logger.error
        log(
            f"{type(exc).__name__}: {exc.message}",
            extra={"request": {"path": request.url.path, "method": request.method}},
        )
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors_total.labels(error_type="ValidationError", endpoint=normalize_path(request.url.path)).inc()
        details = [
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg"),
            }
            for error in exc.errors()
        ]
        logger.warning(
            f"Rejected request body: {details}",
            extra={"request": {"path": request.url.path, "method": request.method}},
        )
        return JSONResponse(
            status_code=400,
            content={"error": _validation_message(exc), "details": details},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        errors_total.labels(error_type=type(exc).__name__, endpoint=normalize_path(request.url.path)).inc()
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=exc,
            extra={"request": {"path": request.url.path, "method": request.method}},
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error"},
        )

    @app.get("/", tags=["Root"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "docs": "/docs",
            "health": "/health",
            "api": settings.API_PREFIX,
        }

    app.include_router(health_router, tags=["Health"])

    from dialtester.api.metrics import router as metrics_router
    app.include_router(metrics_router)

    from dialtester.api.v1 import (
        sessions_router, data_points_router, admin_router,
        export_router, websocket_router
    )

    app.include_router(sessions_router, prefix=settings.API_PREFIX)
    app.include_router(data_points_router, prefix=settings.API_PREFIX)
    app.include_router(admin_router, prefix=settings.API_PREFIX)
    app.include_router(export_router, prefix=settings.API_PREFIX)
    app.include_router(websocket_router, prefix=settings.API_PREFIX)

    from dialtester.middleware.logging import LoggingMiddleware
    from dialtester.middleware.metrics import MetricsMiddleware

    if settings.ENABLE_METRICS:
        app.add_middleware(MetricsMiddleware)

    app.add_middleware(LoggingMiddleware)

    return app


app = create_app()
