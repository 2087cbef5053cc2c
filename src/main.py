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
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.settings import settings
from src.rc_admin.api.router import router as admin_router
from src.rc_charge.api.router import router as charge_router
from src.rc_common.database import build_engine, build_session_factory
from src.rc_common.errors import AppError, InternalError
from src.rc_common.response import FieldError, error_response
from src.rc_document.api.router import router as document_router
from src.rc_gateway.api.router import router as auth_router
from src.rc_gateway.api.users_router import router as users_router
from src.rc_gateway.middleware.request_log import RequestLogMiddleware
from src.rc_notification.api.router import router as notification_router
from src.rc_payment.api.router import router as payment_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger("rc.app")

_VALIDATION_CODE = 9001


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: build the engine and verify the DB. Shutdown: dispose."""
    engine = build_engine(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    logger.info("%s started (prefix %s)", settings.APP_NAME, settings.API_PREFIX)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("AppError %d: %s", exc.code, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(exc.code, exc.message, _request_id(request)),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        FieldError(
            field=".".join(str(p) for p in err["loc"] if p != "body") or "body",
            message=err["msg"],
        )
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=error_response(
            _VALIDATION_CODE, "Validation failed", _request_id(request), errors
        ),
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc.status_code, str(exc.detail), _request_id(request)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    internal = InternalError()
    return JSONResponse(
        status_code=internal.http_status,
        content=error_response(internal.code, internal.message, _request_id(request)),
    )


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)
app.include_router(charge_router, prefix=settings.API_PREFIX)
app.include_router(payment_router, prefix=settings.API_PREFIX)
app.include_router(document_router, prefix=settings.API_PREFIX)
app.include_router(notification_router, prefix=settings.API_PREFIX)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
