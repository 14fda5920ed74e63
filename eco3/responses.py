"""
eco3 API Response Utilities
Uniform error envelope and exception handlers
"""
from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional
from datetime import datetime, timezone

from .config import get_settings
from .logging_config import api_logger

settings = get_settings()


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Serialize a stored timestamp (naive values are UTC) as ISO-8601."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ============================================================
# ERROR ENVELOPE
# ============================================================

def error_body(
    message: str,
    error_code: Optional[str] = None,
    error: Optional[BaseException] = None,
) -> Dict[str, Any]:
    """Build {success:false, message, timestamp, error_code?, details?}."""
    body: Dict[str, Any] = {
        "success": False,
        "message": message,
        "timestamp": utc_timestamp(),
    }
    if error_code:
        body["error_code"] = error_code
    if error is not None and settings.environment == "development" and settings.debug:
        body["details"] = {
            "name": type(error).__name__,
            "message": str(error),
        }
    return body


class ApiException(HTTPException):
    """API exception carrying an error code for the envelope"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str = None,
        headers: Dict[str, str] = None,
    ):
        self.error_code = error_code or f"ERR_{status_code}"
        super().__init__(status_code=status_code, detail=message, headers=headers)


# Common exceptions
def bad_request(message: str, code: str = "BAD_REQUEST"):
    raise ApiException(400, message, code)

def unauthorized(message: str = "Authentication required", code: str = "UNAUTHORIZED"):
    raise ApiException(401, message, code, headers={"WWW-Authenticate": "Bearer"})

def not_found(message: str = "Resource not found", code: str = "NOT_FOUND"):
    raise ApiException(404, message, code)


# ============================================================
# EXCEPTION HANDLERS
# ============================================================

def http_error_code(exc: StarletteHTTPException) -> str:
    if isinstance(exc, ApiException):
        return exc.error_code
    return "NOT_FOUND" if exc.status_code == 404 else f"HTTP_{exc.status_code}"


async def api_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global handler: every error leaves a handler as the uniform envelope."""
    if isinstance(exc, StarletteHTTPException):
        error_code = http_error_code(exc)
        api_logger.warning(
            f"Request failed: {exc.detail}",
            status_code=exc.status_code,
            error_code=error_code,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail), error_code),
            headers=getattr(exc, "headers", None),
        )

    api_logger.error(f"Unexpected error: {exc}", error=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "INTERNAL_SERVER_ERROR", exc),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Schema violations in body, query or path are 400s."""
    api_logger.warning(
        "Validation error",
        path=request.url.path,
        errors=exc.errors(),
    )
    body = error_body("Validation error", "VALIDATION_ERROR", exc)
    if settings.environment == "development" and settings.debug:
        body["details"]["errors"] = [
            {"loc": list(err.get("loc", ())), "msg": err.get("msg")} for err in exc.errors()
        ]
    return JSONResponse(status_code=400, content=body)


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    api_logger.warning("Rate limit exceeded", path=request.url.path, limit=str(exc.detail))
    return JSONResponse(
        status_code=429,
        content=error_body(f"Too many requests: {exc.detail}", "RATE_LIMITED"),
    )
