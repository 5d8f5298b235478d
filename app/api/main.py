"""FastAPI application factory.

Assembles CORS, error handlers and all API routers.
This module is the authoritative app object; app/main.py re-exports it.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.cors import CORS_ALLOW_HEADERS, json_response
from app.api.routes.expiry import router as expiry_router
from app.api.routes.health import router as health_router
from app.api.routes.notifications import router as notifications_router
from app.core.logging import setup_logging
from app.core.settings import get_settings
from app.notification.direct import RecipientNotFoundError
from app.notification.email_sender import MailConfigurationError
from app.notification.expiry_sweep import SweepError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    setup_logging()
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=CORS_ALLOW_HEADERS,
)


@app.exception_handler(SweepError)
@app.exception_handler(MailConfigurationError)
@app.exception_handler(RecipientNotFoundError)
async def _error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Request %s %s failed: %s", request.method, request.url.path, exc)
    return json_response({"error": str(exc) or "Unknown error"}, status_code=500)


@app.exception_handler(Exception)
async def _unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return json_response({"error": str(exc) or "Unknown error"}, status_code=500)


app.include_router(health_router)
app.include_router(expiry_router)
app.include_router(notifications_router)
