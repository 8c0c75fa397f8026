"""FastAPI application for humans.inc.

``create_app`` wires CORS, the health probes, the routers, the mapping of
domain exceptions to HTTP responses and the request logging middleware.
The module-level ``app`` is what uvicorn serves.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from humans.core.config import get_settings
from humans.core.logging import bind_correlation_id, clear_context, configure_logging, get_logger
from humans.domain.exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    BatchUpdateError,
    BioBlockExistsError,
    ConflictError,
    HumansError,
    NotFoundError,
    ProfileSetupRequiredError,
    StorageError,
    ValidationError,
)
from humans.infrastructure.persistence.database import (
    close_database,
    get_db_manager,
    init_database,
)
from humans.infrastructure.storage import get_storage_provider

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"

# Most specific class first; the first match wins.
ERROR_STATUS_CODES: list[tuple[type[HumansError], int]] = [
    (AuthenticationRequiredError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (ProfileSetupRequiredError, status.HTTP_428_PRECONDITION_REQUIRED),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (BatchUpdateError, status.HTTP_409_CONFLICT),
    (StorageError, status.HTTP_502_BAD_GATEWAY),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Set up logging and the database on startup; release the engine on shutdown."""
    settings = get_settings()
    configure_logging(settings)
    logger.info(
        "Starting humans.inc",
        version=settings.app_version,
        environment=settings.environment,
        storage_provider=settings.storage_provider,
    )

    try:
        await init_database()
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise

    yield

    await close_database()
    logger.info("humans.inc stopped")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    settings = get_settings()
    docs_enabled = settings.is_development

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Bio link pages built from ordered content blocks",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
        expose_headers=[CORRELATION_HEADER],
    )

    register_health_check(app)
    register_routes(app)
    register_exception_handlers(app)
    register_middleware(app)
    return app


def _service_info() -> dict[str, str]:
    settings = get_settings()
    return {"service": settings.app_name, "version": settings.app_version}


def register_health_check(app: FastAPI) -> None:
    """Register ``/health``, ``/live`` and ``/ready``.

    Only ``/ready`` touches dependencies: the database and the object
    store must both answer for the instance to take traffic.
    """

    @app.get("/health", tags=["health"])
    async def health_check():
        return {"status": "healthy", **_service_info()}

    @app.get("/live", tags=["health"])
    async def liveness_check():
        return {"status": "alive", **_service_info()}

    @app.get("/ready", tags=["health"])
    async def readiness_check():
        database_ok = await get_db_manager().check_connection()
        storage_ok, storage_message = await get_storage_provider().test_connection()
        checks = {
            "database": "connected" if database_ok else "disconnected",
            "storage": "available" if storage_ok else (storage_message or "unavailable"),
        }
        if database_ok and storage_ok:
            return {"status": "ready", **_service_info(), **checks}
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", **_service_info(), **checks},
        )


def register_routes(app: FastAPI) -> None:
    """Mount the routers under the API prefix; files are served under ``/files``."""
    from humans.infrastructure.api.routes import (
        auth_router,
        blocks_router,
        collections_router,
        files_router,
        onboarding_router,
        profile_router,
        public_router,
    )

    prefix = get_settings().api_prefix
    mounts = [
        ("auth", auth_router),
        ("profile", profile_router),
        ("blocks", blocks_router),
        ("collections", collections_router),
        ("onboarding", onboarding_router),
        ("public", public_router),
    ]
    for name, router in mounts:
        app.include_router(router, prefix=f"{prefix}/{name}", tags=[name])
    app.include_router(files_router, prefix="/files")

    @app.get(prefix, tags=["root"])
    async def api_root():
        return {
            **_service_info(),
            "api_version": prefix.rsplit("/", 1)[-1],
            "resources": [f"{prefix}/{name}" for name, _ in mounts],
        }


def error_status_code(exc: HumansError) -> int:
    """HTTP status code for a domain exception."""
    for error_class, status_code in ERROR_STATUS_CODES:
        if isinstance(exc, error_class):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_body(exc: HumansError) -> dict[str, Any]:
    """JSON body for a domain exception: error and message plus whatever
    the exception carries (field, code, redirect, failed ids)."""
    body: dict[str, Any] = {"error": exc.error, "message": exc.message}

    redirect = getattr(exc, "redirect", None)
    if redirect:
        body["redirect"] = redirect

    if isinstance(exc, ValidationError):
        body["field"] = exc.field
        body["code"] = exc.code
    elif isinstance(exc, ConflictError):
        body["field"] = exc.field
        if isinstance(exc, BioBlockExistsError):
            body["existing_block_id"] = exc.existing_block_id
    elif isinstance(exc, BatchUpdateError):
        body["failed_ids"] = exc.failed_ids
        body["failures"] = [
            {"id": failure.id, "reason": failure.reason} for failure in exc.failures
        ]

    return body


def register_exception_handlers(app: FastAPI) -> None:
    """Translate domain exceptions to JSON errors; anything else becomes a 500."""

    @app.exception_handler(HumansError)
    async def domain_exception_handler(request: Request, exc: HumansError):
        status_code = error_status_code(exc)
        log = logger.warning if status_code >= 500 else logger.info
        log(
            "Request failed",
            path=request.url.path,
            method=request.method,
            status_code=status_code,
            error=exc.message,
            exc_type=type(exc).__name__,
        )
        headers = (
            {"WWW-Authenticate": "Bearer"}
            if isinstance(exc, AuthenticationRequiredError)
            else None
        )
        return JSONResponse(status_code=status_code, content=error_body(exc), headers=headers)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": "Internal server error",
                "detail": str(exc) if get_settings().debug else "An unexpected error occurred",
            },
        )


def register_middleware(app: FastAPI) -> None:
    """Bind a correlation ID per request and log one line when it completes."""

    @app.middleware("http")
    async def logging_middleware(request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or f"cid_{uuid.uuid4().hex[:12]}"
        bind_correlation_id(correlation_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            return response
        finally:
            clear_context()


app = create_app()
