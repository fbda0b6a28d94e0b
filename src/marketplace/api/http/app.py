"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.marketplace import __version__
from src.marketplace.api.http.app_data import ApplicationDependencies
from src.marketplace.api.http.error_handlers import register_error_handlers
from src.marketplace.api.http.routers import auth, health, products, users
from src.marketplace.api.utils.app_startup import configure_logging
from src.marketplace.core.services import AuthService, DbManageService, DbSessionService
from src.marketplace.runtime.config.config_data import ConfigData
from src.marketplace.runtime.context import get_config


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str):
        super().__init__(app)
        self._environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
        if self._environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security", "max-age=31536000; includeSubDomains"
            )
        return response


async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error"},
                headers={"X-Request-ID": request_id},
            )

        duration_ms = (time.perf_counter() - start) * 1000
        logger.bind(
            status_code=response.status_code,
            duration_ms=round(duration_ms, 1),
        ).info("request.end")
        response.headers.setdefault("X-Request-ID", request_id)
        return response


def build_dependencies(config: ConfigData) -> ApplicationDependencies:
    """Construct the long-lived services shared by every request."""
    return ApplicationDependencies(
        config=config,
        database_service=DbSessionService(config.database, config.app.environment),
        auth_service=AuthService(config.constants.auth),
    )


def create_app(
    config: ConfigData | None = None,
    dependencies: ApplicationDependencies | None = None,
) -> FastAPI:
    """Build the marketplace API.

    Args:
        config: Configuration to run with; defaults to the active context config.
        dependencies: Pre-built services, mainly for tests sharing an engine.
    """
    if config is None:
        config = dependencies.config if dependencies is not None else get_config()
    if dependencies is None:
        dependencies = build_dependencies(config)

    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up application in {} environment", config.app.environment)
        if config.database.auto_migrate:
            DbManageService(dependencies.database_service.engine).create_all()
        try:
            yield
        finally:
            logger.info("Shutting down application")
            dependencies.database_service.dispose()

    is_production = config.app.environment == "production"
    app = FastAPI(
        title=config.app.name,
        version=__version__,
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )
    app.state.app_dependencies = dependencies

    if is_production and "*" in config.app.cors.origins:
        raise RuntimeError(
            "CORS misconfigured: cannot use '*' with allow_credentials=True in production"
        )

    app.add_middleware(SecurityHeadersMiddleware, environment=config.app.environment)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.app.cors.origins,
        allow_credentials=config.app.cors.allow_credentials,
        allow_methods=config.app.cors.allow_methods,
        allow_headers=config.app.cors.allow_headers,
    )
    app.middleware("http")(log_requests)

    register_error_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router, prefix=config.app.api_prefix)
    app.include_router(users.router, prefix=config.app.api_prefix)
    app.include_router(products.router, prefix=config.app.api_prefix)

    return app


app = create_app()
