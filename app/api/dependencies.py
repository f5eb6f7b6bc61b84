"""
app/api/dependencies.py

Shared FastAPI dependencies wiring injected settings into services.
"""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request

from app.config import (
    AudienceUploadSettings,
    ExternalHTTPSettings,
    InsightsSettings,
    MetaAPISettings,
)
from app.connectors import MetaGraphConnector
from app.services.custom_audience_service import CustomAudienceService
from app.services.insights_service import InsightsService


def get_meta_settings(request: Request) -> MetaAPISettings:
    return request.app.state.meta_settings


def get_http_settings(request: Request) -> ExternalHTTPSettings:
    return request.app.state.http_settings


def get_upload_settings(request: Request) -> AudienceUploadSettings:
    return request.app.state.upload_settings


def get_insights_settings(request: Request) -> InsightsSettings:
    return request.app.state.insights_settings


def get_meta_connector(
    settings: MetaAPISettings = Depends(get_meta_settings),
    http_settings: ExternalHTTPSettings = Depends(get_http_settings),
) -> Iterator[MetaGraphConnector]:
    """
    Build a request-scoped Graph API connector and close its session afterwards.
    """

    connector = MetaGraphConnector(settings=settings, http_settings=http_settings)
    try:
        yield connector
    finally:
        connector.close()


def get_custom_audience_service(
    connector: MetaGraphConnector = Depends(get_meta_connector),
    upload_settings: AudienceUploadSettings = Depends(get_upload_settings),
) -> CustomAudienceService:
    return CustomAudienceService(connector=connector, batch_size=upload_settings.batch_size)


def get_insights_service(
    connector: MetaGraphConnector = Depends(get_meta_connector),
    insights_settings: InsightsSettings = Depends(get_insights_settings),
) -> InsightsService:
    return InsightsService(connector=connector, settings=insights_settings)
