"""
FastAPI application factory and main app configuration.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.errors import APIError, ValidationError, status_for
from .api.routers import clinics, health, patients, queue
from .api.schemas.common import ErrorResponse
from .core.config import Settings, get_settings
from .core.structured_logger import configure_logging, get_logger
from .domain.errors import DomainError
from .middleware.identity_middleware import USER_ID_HEADER, USER_ROLE_HEADER, IdentityMiddleware
from .middleware.performance_middleware import PerformanceMiddleware
from .middleware.request_id_middleware import RequestIDMiddleware

logger = get_logger("careplus")


async def _connect_database(app: FastAPI, settings: Settings) -> None:
    """Open the Motor client and register Beanie documents."""
    import certifi
    from beanie import init_beanie
    from motor.motor_asyncio import AsyncIOMotorClient

    from .adapters.db.mongo.models import DOCUMENT_MODELS

    mongo_uri = settings.database.uri
    if not mongo_uri:
        raise RuntimeError("MONGO_URI must be set when STORE_BACKEND=mongo")

    # Enable TLS only for Atlas SRV URIs
    if mongo_uri.startswith("mongodb+srv://"):
        client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
            tz_aware=True,
            tls=True,
            tlsCAFile=certifi.where(),
            tlsAllowInvalidCertificates=False,
        )
    else:
        # Local/standard connection (no TLS)
        client = AsyncIOMotorClient(
            mongo_uri,
            serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms,
            tz_aware=True,
        )

    await init_beanie(database=client[settings.database.db_name], document_models=DOCUMENT_MODELS)
    app.state.mongo_client = client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)

    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        environment=settings.app_env,
        debug=settings.debug,
        store_backend=settings.store.backend,
    )

    app.state.mongo_client = None
    if settings.uses_memory_store:
        logger.warning("Using in-memory queue store; data is lost on restart")
    else:
        try:
            await _connect_database(app, settings)
        except Exception as e:
            logger.error("Database connection failed", error=str(e), error_type=type(e).__name__)
            raise
        logger.info("Database connection established", db_name=settings.database.db_name)

    yield

    # Shutdown
    if app.state.mongo_client is not None:
        app.state.mongo_client.close()
        app.state.mongo_client = None
        logger.info("Database connection closed")
    logger.info(f"Shutting down {settings.app_name}")


def _error_body(request: Request, error: str, message: str, details: dict = None) -> dict:
    req_id = getattr(request.state, "request_id", None)
    return ErrorResponse(
        error=error,
        message=message,
        request_id=req_id or "",
        details=details or {},
    ).model_dump(mode="json")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Daily first-come-first-served patient queues for clinics",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Customize OpenAPI schema to control tag order and document identity headers
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        from fastapi.openapi.utils import get_openapi
        openapi_schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
        )
        openapi_schema["tags"] = [
            {"name": "health", "description": "Health and readiness checks"},
            {"name": "queue", "description": "Join, leave and manage today's queue"},
            {"name": "patients", "description": "Patient-facing queue status"},
            {"name": "clinics", "description": "Clinic and fee lookup"},
        ]

        header_params = [
            {
                "name": USER_ID_HEADER,
                "in": "header",
                "required": True,
                "schema": {"type": "string", "pattern": "^[A-Za-z0-9_-]+$", "example": "U123"},
                "description": "Authenticated user ID",
            },
            {
                "name": USER_ROLE_HEADER,
                "in": "header",
                "required": True,
                "schema": {"type": "string", "enum": ["doctor", "patient"]},
                "description": "Role the user acts in for this request",
            },
        ]
        for path, methods in openapi_schema.get("paths", {}).items():
            if not (path.startswith("/queue") or path.startswith("/patients")):
                continue
            for operation in methods.values():
                operation.setdefault("parameters", []).extend(header_params)

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allowed_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allowed_methods,
        allow_headers=settings.cors.allowed_headers,
        max_age=600,
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )
    app.add_middleware(IdentityMiddleware)
    app.add_middleware(PerformanceMiddleware)
    # Outermost so every other middleware sees request.state.request_id
    app.add_middleware(RequestIDMiddleware)

    # Include routers in logical order: Health → Queue → Patients → Clinics
    app.include_router(health.router)
    app.include_router(queue.router)
    app.include_router(patients.router)
    app.include_router(clinics.router)

    @app.exception_handler(DomainError)
    async def domain_error_handler(request: Request, exc: DomainError):
        return JSONResponse(
            status_code=status_for(exc),
            content=_error_body(request, exc.error_code or "DOMAIN_ERROR", exc.message, exc.details),
        )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        logger.warning(
            "APIError",
            code=exc.code,
            http_status=exc.http_status,
            error_message=exc.message,
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(
            status_code=exc.http_status,
            content=_error_body(request, exc.code, exc.message, exc.details),
        )

    @app.exception_handler(RequestValidationError)
    async def pydantic_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "loc": [str(x) for x in error.get("loc", [])],
                "msg": error.get("msg", "Validation error"),
                "type": error.get("type", ""),
            }
            for error in exc.errors()
        ]
        logger.warning(
            "ValidationError",
            method=request.method,
            path=request.url.path,
            errors=errors,
            request_id=getattr(request.state, "request_id", None),
        )

        error_messages = [f"{' -> '.join(e['loc'])}: {e['msg']}" for e in errors]
        error = ValidationError(
            f"Input validation failed: {'; '.join(error_messages)}",
            {"errors": errors, "path": request.url.path},
        )
        return JSONResponse(
            status_code=error.http_status,
            content=_error_body(request, error.code, error.message, error.details),
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.error(
            "Unhandled error",
            error_type=type(exc).__name__,
            error=str(exc),
            request_id=getattr(request.state, "request_id", None),
        )
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request,
                "INTERNAL_ERROR",
                "An unexpected error has occurred. Please try again later.",
            ),
        )

    # Root endpoint
    @app.get("/", tags=["health"])
    async def root():
        """Root endpoint with API information."""
        settings = get_settings()
        return {
            "service": settings.app_name,
            "version": settings.app_version,
            "environment": settings.app_env,
            "status": "running",
            "docs": "/docs",
            "endpoints": {
                "health": "/health",
                "ready": "/health/ready",
                "join_queue": "POST /queue/join",
                "update_entry": "PUT /queue/update",
                "leave_queue": "POST /queue/leave",
                "doctor_queue": "GET /queue?clinic_id=",
                "patient_queue": "GET /patients/queue/active",
                "clinic": "GET /clinics/{clinic_id}",
            },
        }

    return app


# Create the app instance
app = create_app()
