"""Expense Tracker backend entry point."""

from collections.abc import Callable
from typing import Any, cast

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from loguru import logger
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from src.core.application import security as app_security
from src.core.config import settings
from src.core.domain.events import get_event_bus
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.database.session import check_db_health, close_db, init_db
from src.core.infrastructure.email.service import EmailService
from src.core.infrastructure.health import HealthStatus
from src.core.infrastructure.logging import setup_logging
from src.core.infrastructure.security import auth as infra_auth
from src.core.infrastructure.security import jwt as infra_jwt
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
    store_exception_handler,
    validation_exception_handler,
)
from src.core.interfaces.http.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.expenses.application import dependencies as expenses_app_deps
from src.modules.expenses.infrastructure import dependencies as expenses_infra_deps
from src.modules.users.application import dependencies as users_app_deps
from src.modules.users.infrastructure import dependencies as users_infra_deps
from src.modules.users.infrastructure.event_handlers import (
    register_user_event_handlers,
)

APP_VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


openapi_security_schemes = {
    "BearerAuth": {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
        "description": "Session credential returned by /api/auth/verify",
    },
}


def custom_openapi():
    """Add the bearer security scheme to the generated schema."""
    if app.openapi_schema:
        return app.openapi_schema
    from fastapi.openapi.utils import get_openapi

    schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )
    schema["components"] = schema.get("components", {})
    schema["components"]["securitySchemes"] = openapi_security_schemes
    app.openapi_schema = schema
    return schema


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting Expense Tracker backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    logger.info("Initializing database connection...")
    await init_db()

    register_user_event_handlers(get_event_bus())

    app.state.email_service = EmailService.from_settings(settings)
    if not app.state.email_service.is_available():
        logger.warning("Email delivery not configured; magic links go to the log")

    yield

    logger.info("Shutting down Expense Tracker backend...")
    await close_db()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Personal expense tracking with passwordless sign-in.\n\n"
        "## Authentication\n\n"
        "Request a magic link with `POST /api/auth/magic-link`, redeem it with "
        "`GET /api/auth/verify` and send the returned token as "
        "`Authorization: Bearer <token>`."
    ),
    version=APP_VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)
app.openapi = cast(Callable[[], dict[str, Any]], custom_openapi)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[app_security.get_current_auth] = infra_auth.get_current_auth
app.dependency_overrides[app_security.get_optional_auth] = (
    infra_auth.get_optional_auth
)
app.dependency_overrides[app_security.get_current_user_id] = (
    infra_auth.get_current_user_id_from_auth
)

app.dependency_overrides[users_app_deps.get_user_repository] = (
    users_infra_deps.get_user_repository
)
app.dependency_overrides[users_app_deps.get_magic_link_repository] = (
    users_infra_deps.get_magic_link_repository
)
app.dependency_overrides[users_app_deps.get_magic_link_notifier] = (
    users_infra_deps.get_magic_link_notifier
)
app.dependency_overrides[users_app_deps.get_token_service] = infra_jwt.get_token_service

app.dependency_overrides[expenses_app_deps.get_expense_repository] = (
    expenses_infra_deps.get_expense_repository
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_exception_handler(SQLAlchemyError, store_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# Rate limiting; routes opt in with @limiter.limit
app.state.limiter = limiter

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    The service is ``healthy`` when the database answers and email delivery is
    usable, ``degraded`` when only the database answers (magic links fall back
    to the log) and ``unhealthy`` otherwise.
    """
    db_health_result = await check_db_health()

    email_service: EmailService | None = getattr(app.state, "email_service", None)
    if email_service is None:
        email_service = EmailService.from_settings(settings)
    email_health_result = email_service.get_health_status()

    db_ok = db_health_result.status == HealthStatus.OK
    email_ok = email_health_result.status in (HealthStatus.OK, HealthStatus.SKIPPED)

    if db_ok and email_ok:
        overall_status = "healthy"
    elif db_ok:
        overall_status = "degraded"
    else:
        overall_status = "unhealthy"

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": APP_VERSION,
        "components": {
            "database": db_health_result.to_dict(),
            "email": email_health_result.to_dict(),
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
