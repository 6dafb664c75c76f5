from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from slowapi.errors import RateLimitExceeded

from api.observability import (
    configure_logging,
    monotonic_ms,
    new_request_id,
    request_log_fields,
    reset_request_id,
    set_request_id,
)
from api.ratelimit import limiter, rate_limit_exceeded_handler
from api.routes import router
from runpace.config import get_settings
from runpace.data_tables import load_engine_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = app.state.settings
    FastAPICache.init(InMemoryBackend(), prefix=settings.cache_prefix, expire=settings.cache_expire_seconds)
    app.state.cache_backend = "memory"
    logger.info(
        "cache_backend_initialized",
        extra={"cache_backend": "memory", "cache_expire_seconds": settings.cache_expire_seconds},
    )
    yield


async def request_context_and_logging(request: Request, call_next: Callable) -> Response:
    """Bind a request id for the duration of the call and log one line per request."""
    header_name = request.app.state.settings.request_id_header_name or "X-Request-ID"
    request_id = (request.headers.get(header_name) or "").strip() or new_request_id()
    token = set_request_id(request_id)
    started_ms = monotonic_ms()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        response.headers[header_name] = request_id
        return response
    except Exception:
        logger.exception("http_request_error", extra={"path": request.url.path})
        raise
    finally:
        logger.info(
            "http_request",
            extra=request_log_fields(
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=monotonic_ms() - started_ms,
                client_ip=getattr(request.client, "host", None),
            ),
        )
        reset_request_id(token)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    # Interactive docs are for local and staging use only
    docs_hidden = settings.is_production
    app = FastAPI(
        title="runpace API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None if docs_hidden else "/docs",
        redoc_url=None if docs_hidden else "/redoc",
        openapi_url=None if docs_hidden else "/openapi.json",
    )
    app.state.settings = settings
    # Loaded once, shared read-only by every request
    app.state.tables = load_engine_tables(settings)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.include_router(router)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=[settings.request_id_header_name],
    )
    app.middleware("http")(request_context_and_logging)
    return app


app = create_app()
