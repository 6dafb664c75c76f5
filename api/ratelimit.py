from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from runpace.config import Settings, get_settings


def client_key(request: Request) -> str:
    """First X-Forwarded-For hop when behind a proxy, else the peer address."""
    forwarded = (request.headers.get("X-Forwarded-For") or "").split(",")[0].strip()
    return forwarded or get_remote_address(request)


def compute_limit() -> str:
    """Limit shared by the calculation endpoints, read at request time."""
    return get_settings().compute_rate_limit


def build_limiter(settings: Settings) -> Limiter:
    return Limiter(
        key_func=client_key,
        storage_uri=settings.rate_limit_storage_uri,
        enabled=settings.rate_limit_enabled and settings.app_env != "test",
        headers_enabled=True,
    )


limiter = build_limiter(get_settings())


def rate_limit_exceeded_handler(request: Request, exc: Exception) -> JSONResponse:
    retry_after: Optional[str] = None
    if isinstance(exc, RateLimitExceeded):
        retry_after = getattr(exc, "retry_after", None)
    headers = {}
    if retry_after is not None:
        headers["Retry-After"] = str(retry_after)
    return JSONResponse(
        status_code=429,
        content={
            "detail": {
                "code": "RATE_LIMITED",
                "message": "Too many calculations, slow down",
            }
        },
        headers=headers,
    )
