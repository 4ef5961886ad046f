"""
Multi-Tenant Hospital Backend

Main FastAPI application entry point.
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hms.config import settings
from hms.database import engine, AsyncSessionLocal
from hms.api.v1.router import router as api_v1_router
from hms.core.exceptions import AppException
from hms.core.logging_config import configure_logging
from hms.core.middleware import tenant_context_middleware, get_request_tenant_id

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# LIFESPAN MANAGEMENT
# ═══════════════════════════════════════════════════════════════════════════════


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Startup: log configuration, check the database connection
    - Shutdown: dispose of the connection pool
    """
    logger.info(
        "Starting %s (env=%s, debug=%s, database=%s:%s/%s)",
        settings.app_name,
        settings.app_env,
        settings.debug,
        settings.postgres_host,
        settings.postgres_port,
        settings.postgres_db,
    )

    # Don't raise - let the app start anyway for health checks
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
        logger.info("Database connection successful")
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database connection failed: %s", e)

    yield

    await engine.dispose()
    logger.info("Shut down %s, database connections closed", settings.app_name)


# ═══════════════════════════════════════════════════════════════════════════════
# EXCEPTION HANDLERS
# ═══════════════════════════════════════════════════════════════════════════════


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle custom application exceptions."""
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "success": False,
                "detail": exc.detail,
                "status_code": exc.status_code,
            },
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle Pydantic validation errors with detailed field information."""
        errors = []
        for error in exc.errors():
            # Build field path (e.g., "body.email" or "query.limit")
            field_path = ".".join(str(loc) for loc in error["loc"])
            errors.append({
                "field": field_path,
                "message": error["msg"],
                "type": error["type"],
            })

        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={
                "success": False,
                "detail": "Validation error",
                "errors": errors,
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.exception(
            "Unhandled %s on %s %s (tenant=%s)",
            type(exc).__name__,
            request.method,
            request.url.path,
            get_request_tenant_id(request) or "-",
        )

        if settings.debug:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    "success": False,
                    "detail": str(exc),
                    "type": type(exc).__name__,
                    "traceback": "".join(traceback.format_exception(exc)),
                },
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "detail": "An unexpected error occurred. Please try again later.",
            },
        )


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTER REGISTRATION
# ═══════════════════════════════════════════════════════════════════════════════


def register_routers(app: FastAPI) -> None:
    """Register all API routers."""

    # ─────────────────────────────────────────────────────────────────────────
    # Health Check Endpoints
    # ─────────────────────────────────────────────────────────────────────────

    @app.get(
        "/health",
        tags=["Health"],
        summary="Health Check",
        description="Basic health check - returns OK if the application is running.",
        response_model=dict,
    )
    async def health_check() -> dict:
        """
        Basic health check endpoint.

        Used by load balancers and container orchestration to verify
        the application is running.
        """
        return {
            "status": "healthy",
            "app": settings.app_name,
            "environment": settings.app_env,
            "version": "1.0.0",
        }

    @app.get(
        "/ready",
        tags=["Health"],
        summary="Readiness Check",
        description="Checks if the application is ready to serve requests (including database).",
        response_model=dict,
    )
    async def readiness_check() -> dict:
        """
        Readiness check endpoint.

        Verifies the database is reachable and the platform registry exists.
        """
        checks = {
            "database": "unknown",
        }

        try:
            async with AsyncSessionLocal() as session:
                await session.execute(text("SELECT 1 FROM public.tenants LIMIT 1"))
            checks["database"] = "connected"
        except (SQLAlchemyError, OSError) as e:
            logger.warning("Readiness check failed: %s", e)
            checks["database"] = f"error: {type(e).__name__}"

        all_healthy = all(value == "connected" for value in checks.values())

        return {
            "status": "ready" if all_healthy else "not_ready",
            "checks": checks,
        }

    @app.get(
        "/",
        tags=["Root"],
        summary="API Root",
        description="Welcome endpoint with API information.",
    )
    async def root() -> dict:
        return {
            "message": f"Welcome to {settings.app_name}",
            "documentation": "/docs" if settings.debug else "Documentation disabled in production",
            "health": "/health",
            "ready": "/ready",
            "api_v1": settings.api_v1_prefix,
            "tenant_header": settings.tenant_header,
        }

    # ─────────────────────────────────────────────────────────────────────────
    # API Routers
    # ─────────────────────────────────────────────────────────────────────────

    app.include_router(
        api_v1_router,
        prefix=settings.api_v1_prefix,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# APPLICATION FACTORY
# ═══════════════════════════════════════════════════════════════════════════════


def create_application() -> FastAPI:
    """
    Application factory function.

    Creates and configures the FastAPI application instance with:
    - Logging
    - Metadata and documentation
    - CORS and tenant context middleware
    - Exception handlers
    - Route registration

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="""
## Multi-Tenant Hospital Backend API

Each hospital is a tenant with its own Postgres schema. Tenant-scoped
endpoints are routed by the `X-Tenant-ID` header.

### API Structure

- **`/api/v1/auth`** - Sign-up, verification, password reset, sign-in
- **`/api/v1/tenants`** - Tenant registry and schema lifecycle (platform admin)
- **`/api/v1/roles`**, **`/patients`**, **`/beds`** - Tenant resources
- **`/api/v1/notifications`** - Email, SMS and topic messages
- **`/api/v1/storage`** - Pre-signed upload and download URLs
- **`/health`** - Health check
- **`/ready`** - Readiness check (includes DB)
        """,
        version="1.0.0",
        # Disable docs in production
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )

    # ─────────────────────────────────────────────────────────────────────────
    # Middleware
    # ─────────────────────────────────────────────────────────────────────────
    app.middleware("http")(tenant_context_middleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    register_routers(app)

    return app


# ═══════════════════════════════════════════════════════════════════════════════
# APPLICATION INSTANCE
# ═══════════════════════════════════════════════════════════════════════════════

app = create_application()


# ═══════════════════════════════════════════════════════════════════════════════
# DEVELOPMENT SERVER
# ═══════════════════════════════════════════════════════════════════════════════

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hms.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        reload_dirs=["hms"] if settings.debug else None,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )
