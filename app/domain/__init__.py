"""
app/domain package marker.
"""

from app.domain.custom_audience import (
    CANONICAL_FIELD_ORDER,
    AudienceBatch,
    AudienceUploadResult,
    BatchUploadOutcome,
    CustomerRecord,
    IdentifierField,
    SchemaGroup,
    UploadSession,
)

__all__ = [
    "CANONICAL_FIELD_ORDER",
    "AudienceBatch",
    "AudienceUploadResult",
    "BatchUploadOutcome",
    "CustomerRecord",
    "IdentifierField",
    "SchemaGroup",
    "UploadSession",
]
