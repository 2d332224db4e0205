"""Rate limiting using slowapi"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded

from app.core.config import settings

# Custom key function that honours proxies
def get_rate_limit_key(request: Request) -> str:
    """Get rate limit key based on client IP"""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        ip = forwarded.split(",")[0].strip()
    else:
        ip = request.client.host if request.client else "unknown"

    return f"ip:{ip}"

# Create limiter instance
limiter = Limiter(
    key_func=get_rate_limit_key,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)

# Custom rate limit exceeded handler
async def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded) -> Response:
    return JSONResponse(
        status_code=429,
        content={
            "success": False,
            "message": f"Too many requests. {exc.detail}",
            "error_code": "RATE_LIMIT_EXCEEDED",
            "request_id": getattr(request.state, "request_id", None),
        }
    )

# Rate limiting decorator for credential endpoints
auth_limiter = limiter.limit(settings.RATE_LIMIT_LOGIN)
