"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from config.settings import settings
from src.rn_booking.api.router import router as booking_router
from src.rn_common.backend import build_repositories
from src.rn_common.database import engine
from src.rn_common.errors import AppError
from src.rn_common.response import error_response
from src.rn_gateway.middleware.request_log import RequestLogMiddleware
from src.rn_listing.api.router import router as listing_router
from src.rn_negotiation.api.router import router as negotiation_router

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build repositories, verify the DB when postgres. Shutdown: dispose."""
    app.state.repositories = build_repositories(settings)
    if settings.DATA_BACKEND == "postgres":
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    yield
    if settings.DATA_BACKEND == "postgres":
        await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message, exc.kind)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(listing_router, prefix="/api/v1")
app.include_router(negotiation_router, prefix="/api/v1")
app.include_router(booking_router, prefix="/api/v1")


@app.get("/health")
async def health(request: Request) -> dict[str, str]:
    return {
        "status": "ok",
        "version": VERSION,
        "backend": request.app.state.repositories.backend,
    }
