"""
app/api/routers/meta_ads.py

Campaign insights passthrough endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse

from app.api.dependencies import get_insights_service
from app.schemas.errors import ErrorResponse
from app.services.insights_service import InsightsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["meta-ads"])


@router.get(
    "/api/meta-ads",
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse}},
)
def get_meta_ads_insights(
    since: str | None = Query(default=None, description="Start date (YYYY-MM-DD)"),
    until: str | None = Query(default=None, description="End date (YYYY-MM-DD)"),
    insights_service: InsightsService = Depends(get_insights_service),
) -> JSONResponse:
    """
    Return campaign-level insights exactly as the Graph API reported them.
    """

    logger.info("Received insights request since=%s until=%s", since, until)
    try:
        payload = insights_service.fetch_campaign_insights(since=since, until=until)
    except Exception as exc:
        logger.exception("Insights fetch failed since=%s until=%s error=%s", since, until, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to fetch data from Meta",
        ) from exc

    return JSONResponse(content=payload)
