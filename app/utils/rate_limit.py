"""Request rate limiting for /api paths."""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from limits import parse
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings

RATE_LIMIT_MESSAGE = "Too many requests from this IP, please try again later."
API_SCOPE = "api"

limiter = Limiter(key_func=get_remote_address)


def is_api_path(path: str) -> bool:
    return path == "/api" or path.startswith("/api/")


def rate_limited_response() -> JSONResponse:
    """Return the fixed error body for rate-limited requests."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": RATE_LIMIT_MESSAGE},
    )


async def api_rate_limit_middleware(request: Request, call_next):
    """Count every /api request against one window per client, before routing.

    Requests later rejected as unauthorized, malformed or unknown still count.
    """
    if is_api_path(request.url.path):
        item = parse(get_settings().api_rate_limit)
        if not limiter.limiter.hit(item, API_SCOPE, get_remote_address(request)):
            return rate_limited_response()
    return await call_next(request)
