"""
tests/test_custom_audience_service.py

Audience creation and the sequential, partial-failure tolerant upload loop.
"""

from __future__ import annotations

import pytest

from app.connectors import ConnectorRequestError, MetaAPIError
from app.domain.custom_audience import CustomerRecord
from app.services.custom_audience_service import (
    AudienceCreationError,
    CustomAudienceService,
    ExistingAudienceSyncNotSupportedError,
    NoValidCustomerDataError,
)


def _customers(count: int) -> list[CustomerRecord]:
    return [CustomerRecord(email=f"user{index}@example.com") for index in range(count)]


def test_creates_audience_then_uploads(fake_connector_factory) -> None:
    connector = fake_connector_factory(upload_responses=[{"num_received": 3}])
    service = CustomAudienceService(connector=connector)

    result = service.create_and_populate(name="VIP buyers", customers=_customers(3))

    assert connector.created_names == ["VIP buyers"]
    assert len(connector.upload_calls) == 1
    assert connector.upload_calls[0][0] == connector.audience_id
    assert result.audience_id == connector.audience_id
    assert result.uploaded == 3
    assert result.success is True
    assert result.failed_batches == 0


def test_no_valid_customers_fails_before_creation(fake_connector_factory) -> None:
    connector = fake_connector_factory()
    service = CustomAudienceService(connector=connector)

    with pytest.raises(NoValidCustomerDataError):
        service.create_and_populate(name="empty", customers=[CustomerRecord(), CustomerRecord(email="")])

    assert connector.created_names == []
    assert connector.upload_calls == []


def test_existing_audience_sync_is_rejected(fake_connector_factory) -> None:
    connector = fake_connector_factory()
    service = CustomAudienceService(connector=connector)

    with pytest.raises(ExistingAudienceSyncNotSupportedError):
        service.create_and_populate(name="x", customers=_customers(1), audience_id="999")

    assert connector.created_names == []


def test_creation_error_aborts_without_uploads(fake_connector_factory) -> None:
    connector = fake_connector_factory(create_error=MetaAPIError("Invalid parameter", code=100))
    service = CustomAudienceService(connector=connector)

    with pytest.raises(AudienceCreationError, match="Invalid parameter"):
        service.create_and_populate(name="x", customers=_customers(2))

    assert connector.upload_calls == []


def test_failed_batch_does_not_stop_later_batches(fake_connector_factory) -> None:
    connector = fake_connector_factory(
        upload_responses=[MetaAPIError("Batch rejected"), {"num_received": 5}],
    )
    service = CustomAudienceService(connector=connector, batch_size=5)

    result = service.create_and_populate(name="x", customers=_customers(10))

    assert len(connector.upload_calls) == 2
    assert result.uploaded == 5
    assert result.success is True
    assert result.failed_batches == 1
    assert result.batches[0].error == "Batch rejected"
    assert result.batches[0].num_received == 0
    assert result.batches[1].num_received == 5


def test_timeout_and_unexpected_errors_count_as_zero(fake_connector_factory) -> None:
    connector = fake_connector_factory(
        upload_responses=[
            ConnectorRequestError("meta_graph: request timed out after 15s."),
            RuntimeError("boom"),
            {"num_received": 1},
        ],
    )
    service = CustomAudienceService(connector=connector, batch_size=1)

    result = service.create_and_populate(name="x", customers=_customers(3))

    assert result.uploaded == 1
    assert result.failed_batches == 2


def test_missing_num_received_counts_as_zero(fake_connector_factory) -> None:
    connector = fake_connector_factory(upload_responses=[{"audience_id": "1"}, {"num_received": "4"}])
    service = CustomAudienceService(connector=connector, batch_size=2)

    result = service.create_and_populate(name="x", customers=_customers(4))

    assert result.uploaded == 4
    assert result.failed_batches == 0


def test_batches_uploaded_in_group_then_sequence_order(fake_connector_factory) -> None:
    connector = fake_connector_factory()
    service = CustomAudienceService(connector=connector, batch_size=2)
    customers = [
        CustomerRecord(phone="1"),
        CustomerRecord(email="a@x.io"),
        CustomerRecord(phone="2"),
        CustomerRecord(phone="3"),
    ]

    service.create_and_populate(name="x", customers=customers)

    order = [(batch.group_key, batch.session.batch_seq) for _, batch in connector.upload_calls]
    assert order == [("PHONE", 1), ("PHONE", 2), ("EMAIL", 1)]
    flags = [batch.session.last_batch_flag for _, batch in connector.upload_calls]
    assert flags == [False, True, True]
