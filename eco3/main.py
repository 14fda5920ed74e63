"""
eco3 API - FastAPI application entry point.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import get_settings
from .database import init_db
from .limiter import limiter
from .logging_config import api_logger
from .middleware import SecurityHeadersMiddleware, RequestLoggingMiddleware
from .responses import api_exception_handler, rate_limit_exception_handler, validation_exception_handler
from .routes import (
    auth_router,
    users_router,
    posts_router,
    comments_router,
    likes_router,
    notifications_router,
    events_router,
    health_router,
    spa_router,
)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Apply the schema once on startup."""
    init_db()
    api_logger.info(
        "eco3 server starting",
        port=settings.port,
        environment=settings.environment,
        jwt_secret_configured=bool(settings.jwt_secret),
    )
    yield
    api_logger.info("eco3 server stopped")


app = FastAPI(
    title="eco3 API",
    description="Backend API for the eco3 carbon-footprint tracker",
    version="1.0.0",
    docs_url="/api/docs" if settings.debug else None,
    redoc_url="/api/redoc" if settings.debug else None,
    openapi_url="/api/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# Rate limiter
app.state.limiter = limiter

# Uniform error envelope
app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(StarletteHTTPException, api_exception_handler)
app.add_exception_handler(Exception, api_exception_handler)

app.add_middleware(SecurityHeadersMiddleware)

if settings.debug:
    app.add_middleware(RequestLoggingMiddleware)

# CORS - a single allowed origin (the frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "Origin",
        "X-Requested-With",
    ],
    max_age=3600,
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(posts_router)
app.include_router(comments_router)
app.include_router(likes_router)
app.include_router(notifications_router)
app.include_router(events_router)
app.include_router(health_router)
# Must stay last: it matches every remaining GET path
app.include_router(spa_router)


def run():
    """Start the server with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run("eco3.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
