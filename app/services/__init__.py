"""
app/services package marker.
"""

from app.services.audience_batching import BATCH_SIZE, SessionIdAllocator, build_batches, group_records, split_group
from app.services.custom_audience_service import (
    AudienceCreationError,
    CustomAudienceInputError,
    CustomAudienceService,
    ExistingAudienceSyncNotSupportedError,
    NoValidCustomerDataError,
)
from app.services.insights_service import InsightsService

__all__ = [
    "BATCH_SIZE",
    "SessionIdAllocator",
    "build_batches",
    "group_records",
    "split_group",
    "AudienceCreationError",
    "CustomAudienceInputError",
    "CustomAudienceService",
    "ExistingAudienceSyncNotSupportedError",
    "NoValidCustomerDataError",
    "InsightsService",
]
