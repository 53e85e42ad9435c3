"""SnapLink ASGI application: routers, middleware, error handlers and lifecycle hooks."""

import time

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from snaplink.api import api_router
from snaplink.core.config import settings
from snaplink.core.logging import setup_logging
from snaplink.core.rate_limit import close_rate_limiting, initialize_rate_limiting
from snaplink.core.redis import redis_manager
from snaplink.db import engine, init_db
from snaplink.middleware import RequestLoggingMiddleware

logger = setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.REQUEST_LOGGING_ENABLED:
    app.add_middleware(RequestLoggingMiddleware)

app.include_router(api_router)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # Keeps WWW-Authenticate and Retry-After on 401/429 answers
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=exc.headers,
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": exc.errors()}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Answer 500 with an ``error_id`` that can be found in the logs."""
    error_id = f"error-{time.time()}"

    logger.opt(exception=exc).error(
        f"Unhandled exception in {request.method} {request.url.path}",
        error_id=error_id,
        path_params=request.path_params,
        client_host=request.client.host if request.client else None,
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error occurred",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error",
        }
    )


@app.on_event("startup")
async def startup_event():
    logger.info(
        f"Starting {settings.APP_NAME} v{settings.APP_VERSION} "
        f"({settings.ENVIRONMENT.value}, short links under {settings.BASE_URL})"
    )

    if settings.DB_CREATE_TABLES:
        await init_db()

    if settings.RATE_LIMIT_ENABLED:
        await initialize_rate_limiting()
        logger.info(
            f"Link creation limited to {settings.RATE_LIMIT_SHORTEN_MAX} per "
            f"{settings.RATE_LIMIT_SHORTEN_WINDOW_SECONDS}s per user"
        )
    else:
        logger.info("Link creation rate limit disabled")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info(f"Shutting down {settings.APP_NAME}")
    await close_rate_limiting()
    await redis_manager.close()
    await engine.dispose()
