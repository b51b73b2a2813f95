from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from studynotion.api.courses import router as courses_router
from studynotion.api.health import router as health_router
from studynotion.api.metrics_endpoint import router as metrics_router
from studynotion.api.payments import router as payments_router
from studynotion.api.profile import router as profile_router
from studynotion.api.reviews import router as reviews_router
from studynotion.core.config import SETTINGS
from studynotion.core.logging import setup_logging
from studynotion.db.engine import engine, lifespan_db
from studynotion.db.redis import lifespan_redis
from studynotion.db.seed import seed_demo_data
from studynotion.middleware.metrics import MetricsMiddleware
from studynotion.middleware.request_context import (
    RequestContextMiddleware,
    install_request_context_filter,
)
from studynotion.repos.store import memory_store
from studynotion.services.errors import ServiceError

# Configure logging before anything else runs.
setup_logging(SETTINGS.log_level, json_format=SETTINGS.log_json)
install_request_context_filter()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Nested so teardown runs in reverse order.
    async with lifespan_db():
        async with lifespan_redis():
            if engine is None and SETTINGS.is_dev:
                await seed_demo_data(memory_store)
            yield


app = FastAPI(
    title="studynotion",
    lifespan=lifespan,
    docs_url="/docs" if SETTINGS.is_dev else None,
    redoc_url="/redoc" if SETTINGS.is_dev else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last-added runs first: RequestContext → Metrics → CORS → route handler.
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestContextMiddleware)


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _envelope(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


@app.exception_handler(ServiceError)
async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "%s: %s",
            type(exc).__name__,
            exc.message,
            exc_info=exc.__cause__ or exc,
        )
    else:
        logger.warning("%s: %s", type(exc).__name__, exc.message)
    return _envelope(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _envelope(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.warning("Invalid request body: %d error(s)", len(exc.errors()))
    return _envelope(400, "Invalid request body")


@app.exception_handler(Exception)
async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled %s", type(exc).__name__, exc_info=exc)
    return _envelope(500, "Something went wrong")


app.include_router(metrics_router)
app.include_router(health_router)
app.include_router(courses_router)
app.include_router(payments_router)
app.include_router(profile_router)
app.include_router(reviews_router)

logger.info(
    "studynotion started  env=%s log_level=%s port=%d docs=%s",
    SETTINGS.app_env,
    SETTINGS.log_level,
    SETTINGS.port,
    "on" if SETTINGS.is_dev else "off",
)
