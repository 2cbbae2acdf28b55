"""
FastAPI application for HabitRPG.

Provides REST API endpoints for the web and mobile clients.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from tortoise import Tortoise

from habitrpg.config import config
from habitrpg.database.config import TORTOISE_ORM
from habitrpg.interfaces.api.routers import auth, habits, stats, user
from habitrpg.logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database on startup, close it on shutdown."""
    await Tortoise.init(config=TORTOISE_ORM)
    await Tortoise.generate_schemas()
    logger.info("Database initialized")
    yield
    await Tortoise.close_connections()
    logger.info("Database connections closed")


# Create FastAPI app
app = FastAPI(
    title="HabitRPG API",
    description="Gamified habit tracker: habits, XP, levels and streaks",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS configuration
# AICODE-NOTE: localhost is always allowed for dev, CORS_ORIGINS adds the rest
cors_origins = [
    "http://localhost:3000",  # Local web client
    "http://127.0.0.1:3000",
]
for origin in config.CORS_ORIGINS:
    cors_origins.append(origin.rstrip("/"))
if config.CORS_ORIGINS:
    logger.info(f"Added CORS origins: {', '.join(config.CORS_ORIGINS)}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log method, path, status and duration of every request."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"({duration_ms:.1f} ms)"
    )
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors and hide internals from the client."""
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path}: {exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An unexpected error occurred"},
    )


# Include routers
app.include_router(auth.router)
app.include_router(user.router)
app.include_router(stats.router)
app.include_router(habits.router)


@app.get("/api/health")
async def api_health():
    """API health check endpoint."""
    return {"status": "ok", "service": "habitrpg-api"}
