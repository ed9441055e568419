"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.hh_admin.api.router import router as admin_router
from src.hh_common.database import engine, ping_database
from src.hh_common.errors import AppError
from src.hh_common.response import error_response
from src.hh_completion.api.router import router as completion_router
from src.hh_gateway.middleware.request_log import RequestLogMiddleware
from src.hh_ledger.api.router import router as balance_router
from src.hh_notify.api.router import router as notification_router
from src.hh_streak.api.router import router as streak_router
from src.hh_streak.jobs.scheduler import streak_scheduler

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB, start the nightly job. Shutdown: stop job, dispose."""
    await ping_database()
    if settings.STREAK_JOB_ENABLED:
        streak_scheduler.start()
    else:
        logger.info("Streak scheduler disabled by STREAK_JOB_ENABLED")
    yield
    streak_scheduler.shutdown()
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    if exc.http_status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(balance_router, prefix="/api/v1")
app.include_router(completion_router, prefix="/api/v1")
app.include_router(streak_router, prefix="/api/v1")
app.include_router(notification_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
