"""
app/schemas package marker.
"""

from app.schemas.custom_audience import (
    AUDIENCE_CREATED_MESSAGE,
    CustomAudienceRequest,
    CustomAudienceResponse,
    CustomerPayload,
)
from app.schemas.errors import ErrorResponse

__all__ = [
    "AUDIENCE_CREATED_MESSAGE",
    "CustomAudienceRequest",
    "CustomAudienceResponse",
    "CustomerPayload",
    "ErrorResponse",
]
