from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import (
    AudienceUploadSettings,
    ExternalHTTPSettings,
    InsightsSettings,
    MetaAPISettings,
    ServerSettings,
    get_audience_upload_settings,
    get_external_http_settings,
    get_insights_settings,
    get_meta_api_settings,
    get_server_settings,
    missing_meta_env_vars,
)


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Raises RuntimeError listing every missing variable so the operator can
    fix all problems in one restart cycle. The relay must not serve traffic
    without Meta credentials.
    """

    missing = missing_meta_env_vars()
    if missing:
        raise RuntimeError(
            "Startup validation failed: missing required environment variables:\n"
            + "\n".join(f"  - {name}" for name in missing)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logging.getLogger(__name__).warning(
        "Rejected malformed request path=%s errors=%s", request.url.path, exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Malformed request body"},
    )


def create_app(
    *,
    meta_settings: MetaAPISettings | None = None,
    http_settings: ExternalHTTPSettings | None = None,
    upload_settings: AudienceUploadSettings | None = None,
    insights_settings: InsightsSettings | None = None,
    server_settings: ServerSettings | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Settings not passed explicitly are read from the environment; Meta
    credentials are validated before anything else.
    """

    if meta_settings is None:
        _validate_env()
        meta_settings = get_meta_api_settings()
    _configure_logging()

    server_settings = server_settings or get_server_settings()

    application = FastAPI(
        title="Meta Audience Relay",
        version="1.0.0",
    )
    application.state.meta_settings = meta_settings
    application.state.http_settings = http_settings or get_external_http_settings()
    application.state.upload_settings = upload_settings or get_audience_upload_settings()
    application.state.insights_settings = insights_settings or get_insights_settings()

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(server_settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    application.add_exception_handler(RequestValidationError, _request_validation_handler)

    from app.api.routers import custom_audience_router, meta_ads_router

    application.include_router(meta_ads_router)
    application.include_router(custom_audience_router)

    @application.get("/health")
    def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    logging.getLogger(__name__).info(
        "Meta audience relay configured ad_account=%s api_version=%s",
        meta_settings.account_path,
        meta_settings.api_version,
    )
    return application
