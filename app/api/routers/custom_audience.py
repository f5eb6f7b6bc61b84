"""
app/api/routers/custom_audience.py

Custom-audience creation HTTP endpoint.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status
from pydantic import ValidationError

from app.api.dependencies import get_custom_audience_service
from app.schemas.custom_audience import (
    AUDIENCE_CREATED_MESSAGE,
    CustomAudienceRequest,
    CustomAudienceResponse,
)
from app.schemas.errors import ErrorResponse
from app.services.custom_audience_service import (
    AudienceCreationError,
    CustomAudienceInputError,
    CustomAudienceService,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["custom-audience"])


def _parse_request(payload: Any) -> CustomAudienceRequest:
    if (
        not isinstance(payload, dict)
        or not payload.get("name")
        or not isinstance(payload.get("customers"), list)
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields",
        )

    try:
        return CustomAudienceRequest.model_validate(payload)
    except ValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request body",
        ) from exc


@router.post(
    "/api/meta/custom-audience",
    response_model=CustomAudienceResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
def create_custom_audience(
    payload: Any = Body(default=None),
    audience_service: CustomAudienceService = Depends(get_custom_audience_service),
) -> CustomAudienceResponse:
    """
    Create a custom audience and upload the hashed customers to it.
    """

    request = _parse_request(payload)

    try:
        result = audience_service.create_and_populate(
            name=request.name,
            customers=[customer.to_record() for customer in request.customers],
            audience_id=request.audience_id,
        )
    except CustomAudienceInputError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc
    except AudienceCreationError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc),
        ) from exc
    except Exception as exc:
        logger.exception("Custom audience request failed name=%s error=%s", request.name, exc)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=str(exc) or "Internal server error",
        ) from exc

    return CustomAudienceResponse(
        success=result.success,
        audience_id=result.audience_id,
        uploaded=result.uploaded,
        message=AUDIENCE_CREATED_MESSAGE,
    )
