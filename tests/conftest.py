"""
Shared fakes and fixtures for the relay test suite.

Nothing here touches the network: the Graph API is replaced either by a fake
connector (service and API tests) or a fake `requests.Session` (connector tests).
"""

from __future__ import annotations

from typing import Any, Iterable

import pytest
import requests

from app.config import AudienceUploadSettings, ExternalHTTPSettings, MetaAPISettings
from app.domain.custom_audience import AudienceBatch


class FakeMetaConnector:
    """
    Stand-in for MetaGraphConnector that records every call.
    """

    def __init__(
        self,
        *,
        audience_id: str = "23850000000000001",
        create_error: Exception | None = None,
        upload_responses: Iterable[Any] | None = None,
        insights_response: Any = None,
        insights_error: Exception | None = None,
    ) -> None:
        self.audience_id = audience_id
        self.create_error = create_error
        self.upload_responses = list(upload_responses or [])
        self.insights_response = insights_response
        self.insights_error = insights_error
        self.created_names: list[str] = []
        self.upload_calls: list[tuple[str, AudienceBatch]] = []
        self.insights_calls: list[dict[str, Any]] = []
        self.closed = False

    def create_custom_audience(self, *, name: str, description: str | None = None) -> str:
        self.created_names.append(name)
        if self.create_error is not None:
            raise self.create_error
        return self.audience_id

    def add_users(self, *, audience_id: str, batch: AudienceBatch) -> dict[str, Any]:
        self.upload_calls.append((audience_id, batch))
        response = self.upload_responses.pop(0) if self.upload_responses else {"num_received": len(batch.rows)}
        if isinstance(response, Exception):
            raise response
        return response

    def get_insights(self, **kwargs: Any) -> Any:
        self.insights_calls.append(kwargs)
        if self.insights_error is not None:
            raise self.insights_error
        return self.insights_response

    def close(self) -> None:
        self.closed = True


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, *, invalid_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json
        self.text = "" if payload is None else str(payload)

    def json(self) -> Any:
        if self._invalid_json:
            raise ValueError("not json")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)


class FakeSession:
    """
    Replays canned responses (or raises canned exceptions) in order.
    """

    def __init__(self, responses: Iterable[Any]) -> None:
        self.responses = list(responses)
        self.calls: list[dict[str, Any]] = []
        self.closed = False

    def request(self, **kwargs: Any) -> FakeResponse:
        self.calls.append(kwargs)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def meta_settings() -> MetaAPISettings:
    return MetaAPISettings(access_token="test-token", ad_account_id="1234567890")


@pytest.fixture()
def http_settings() -> ExternalHTTPSettings:
    return ExternalHTTPSettings(timeout_seconds=5.0, max_retries=0, backoff_initial_seconds=0.0)


@pytest.fixture()
def upload_settings() -> AudienceUploadSettings:
    return AudienceUploadSettings(batch_size=10_000)


@pytest.fixture()
def fake_connector_factory():
    return FakeMetaConnector


@pytest.fixture()
def fake_session_factory():
    return FakeSession


@pytest.fixture()
def fake_response_factory():
    return FakeResponse
