"""
app/services/custom_audience_service.py

Creates a custom audience and populates it with hashed customer batches.
"""

from __future__ import annotations

import logging
from typing import Sequence

from app.connectors import ConnectorRequestError, MetaGraphConnector
from app.domain.custom_audience import (
    AudienceBatch,
    AudienceUploadResult,
    BatchUploadOutcome,
    CustomerRecord,
)
from app.services.audience_batching import BATCH_SIZE, build_batches, group_records

logger = logging.getLogger(__name__)


class CustomAudienceInputError(ValueError):
    """
    Raised for caller mistakes detected before any platform call.
    """


class NoValidCustomerDataError(CustomAudienceInputError):
    def __init__(self) -> None:
        super().__init__("No valid customer data to upload")


class ExistingAudienceSyncNotSupportedError(CustomAudienceInputError):
    def __init__(self, audience_id: str) -> None:
        super().__init__("Syncing to an existing audience is not supported")
        self.audience_id = audience_id


class AudienceCreationError(RuntimeError):
    """
    Raised when the platform rejects audience creation. No batch is attempted.
    """


class CustomAudienceService:
    """
    Coordinates audience creation and sequential batch uploads.
    """

    def __init__(
        self,
        *,
        connector: MetaGraphConnector,
        batch_size: int = BATCH_SIZE,
    ) -> None:
        self._connector = connector
        self._batch_size = max(1, batch_size)

    def create_and_populate(
        self,
        *,
        name: str,
        customers: Sequence[CustomerRecord],
        audience_id: str | None = None,
    ) -> AudienceUploadResult:
        """
        Create a new audience named `name` and upload every valid customer to it.
        """

        if audience_id:
            raise ExistingAudienceSyncNotSupportedError(audience_id)

        groups = group_records(customers)
        if not groups:
            raise NoValidCustomerDataError()

        try:
            created_id = self._connector.create_custom_audience(name=name)
        except ConnectorRequestError as exc:
            logger.error("Custom audience creation failed name=%s error=%s", name, exc)
            raise AudienceCreationError(str(exc)) from exc

        batches = build_batches(groups, batch_size=self._batch_size)
        logger.info(
            "Uploading custom audience audience_id=%s groups=%s batches=%s",
            created_id,
            len(groups),
            len(batches),
        )
        return self.upload_batches(audience_id=created_id, batches=batches)

    def upload_batches(
        self,
        *,
        audience_id: str,
        batches: Sequence[AudienceBatch],
    ) -> AudienceUploadResult:
        """
        Upload batches one after another. A failed batch counts as zero and
        never stops the remaining ones.
        """

        outcomes: list[BatchUploadOutcome] = []
        uploaded = 0

        for batch in batches:
            try:
                response = self._connector.add_users(audience_id=audience_id, batch=batch)
            except ConnectorRequestError as exc:
                logger.error(
                    "Batch upload failed audience_id=%s group=%s batch_seq=%s error=%s",
                    audience_id,
                    batch.group_key,
                    batch.session.batch_seq,
                    exc,
                )
                outcomes.append(self._failed_outcome(batch, str(exc)))
                continue
            except Exception as exc:
                logger.exception(
                    "Unhandled batch upload failure audience_id=%s group=%s batch_seq=%s error=%s",
                    audience_id,
                    batch.group_key,
                    batch.session.batch_seq,
                    exc,
                )
                outcomes.append(self._failed_outcome(batch, str(exc)))
                continue

            received = _as_count(response.get("num_received"))
            uploaded += received
            outcomes.append(
                BatchUploadOutcome(
                    group_key=batch.group_key,
                    batch_seq=batch.session.batch_seq,
                    rows_sent=len(batch.rows),
                    num_received=received,
                )
            )

        result = AudienceUploadResult(
            audience_id=audience_id,
            uploaded=uploaded,
            success=True,
            batches=tuple(outcomes),
        )
        logger.info(
            "Custom audience upload finished audience_id=%s uploaded=%s failed_batches=%s",
            audience_id,
            result.uploaded,
            result.failed_batches,
        )
        return result

    @staticmethod
    def _failed_outcome(batch: AudienceBatch, error: str) -> BatchUploadOutcome:
        return BatchUploadOutcome(
            group_key=batch.group_key,
            batch_seq=batch.session.batch_seq,
            rows_sent=len(batch.rows),
            num_received=0,
            error=error,
        )


def _as_count(value: object) -> int:
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0
