"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from src.storefront.api.http.app_data import ApplicationDependencies
from src.storefront.api.http.routers.auth import router as auth_router
from src.storefront.api.http.routers.health import router as health_router
from src.storefront.api.http.routers.service.product import router as product_router
from src.storefront.api.utils.app_startup import configure_logging
from src.storefront.core.exceptions import ErrorDetail
from src.storefront.runtime.config.config_data import ConfigData
from src.storefront.runtime.context import get_config
from src.storefront.runtime.init_db import init_db


# --- Security middleware ---
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, environment: str = "development"):
        super().__init__(app)
        self._environment = environment

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        response.headers.setdefault("X-Content-Type-Options", "nosniff")
        response.headers.setdefault("X-Frame-Options", "DENY")
        response.headers.setdefault(
            "Referrer-Policy", "strict-origin-when-cross-origin"
        )
        # HSTS only in prod
        if self._environment == "production":
            response.headers.setdefault(
                "Strict-Transport-Security",
                "max-age=31536000; includeSubDomains; preload",
            )
        return response


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    # Correlation / tracing
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.request_id = request_id

    xff = request.headers.get("x-forwarded-for")
    client_ip = (
        xff.split(",")[0].strip()
        if xff
        else request.client.host
        if request.client
        else "unknown"
    )

    # query strings may contain secrets; never logged
    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": client_ip,
        "user_agent": request.headers.get("user-agent", "unknown"),
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            # Attach correlation id
            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal Server Error", "request_id": request_id},
                headers={"X-Request-ID": request_id},
            )


# --- Error rendering ---
def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    request_id = _request_id(request)
    logger.bind(status_code=exc.status_code, error_type=type(exc).__name__).info(
        "request.rejected"
    )
    headers = dict(exc.headers or {})
    headers["X-Request-ID"] = request_id
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": jsonable_encoder(exc.detail), "request_id": request_id},
        headers=headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures as 400 with ``{code, description}`` entries."""
    request_id = _request_id(request)
    errors = [
        ErrorDetail(
            error.get("type", "ValidationFailed"),
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}",
        )
        for error in exc.errors()
    ]
    logger.bind(status_code=400, error_type=type(exc).__name__).info(
        "request.validation_error"
    )
    return JSONResponse(
        status_code=400,
        content={"detail": errors, "request_id": request_id},
        headers={"X-Request-ID": request_id},
    )


# --- FastAPI app setup ---
def create_app(config: ConfigData | None = None) -> FastAPI:
    """Build the application.

    ``config`` defaults to the process configuration from ``config.yaml``. All
    services are built from it inside the lifespan, once per process.
    """
    if config is None:
        config = get_config()
    config = config.resolve_defaults()
    is_production = config.app.environment == "production"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config)
        logger.info("Starting up application in {} environment", config.app.environment)
        # Validate configuration so we fail fast on misconfiguration
        config.validate_runtime()

        deps = ApplicationDependencies.from_config(config)
        init_db(deps.database_service, seed=config.seed.enabled)
        app.state.app_dependencies = deps
        try:
            yield
        finally:
            logger.info("Shutting down application")
            deps.database_service.dispose()

    app = FastAPI(
        title="storefront-api",
        lifespan=lifespan,
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
    )

    app.add_middleware(SecurityHeadersMiddleware, environment=config.app.environment)
    app.middleware("http")(log_requests)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    # --- Router registration ---
    app.include_router(auth_router, prefix="/auth")
    app.include_router(product_router, prefix="/api/products")
    app.include_router(health_router)

    return app


app = create_app()


def main() -> None:
    import uvicorn

    config = get_config()
    uvicorn.run(
        app,
        host=config.app.host,
        port=config.app.port,
        access_log=False,  # We handle access logging in middleware
    )


if __name__ == "__main__":
    main()
