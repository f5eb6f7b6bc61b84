"""
app/connectors/meta_graph_connector.py

Meta Graph API connector for campaign insights and custom audiences.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Sequence

import requests

from app.config import ExternalHTTPSettings, MetaAPISettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.domain.custom_audience import AudienceBatch

logger = logging.getLogger(__name__)

CUSTOM_AUDIENCE_SUBTYPE = "CUSTOM"
CUSTOMER_FILE_SOURCE = "USER_PROVIDED_ONLY"


class MetaAPIError(ConnectorRequestError):
    """
    Raised when the Graph API answers with an error object.
    """

    def __init__(
        self,
        message: str,
        *,
        error_type: str | None = None,
        code: int | None = None,
        fbtrace_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.code = code
        self.fbtrace_id = fbtrace_id

    @classmethod
    def from_payload(cls, payload: Any) -> "MetaAPIError | None":
        """
        Build an error from a Graph API `{"error": {...}}` body, or return None.
        """

        if not isinstance(payload, dict) or "error" not in payload:
            return None

        error = payload["error"]
        if not isinstance(error, dict):
            return cls(str(error))

        message = error.get("error_user_msg") or error.get("message") or "Unknown Meta API error"
        return cls(
            str(message),
            error_type=error.get("type"),
            code=error.get("code"),
            fbtrace_id=error.get("fbtrace_id"),
        )


class MetaGraphConnector(BaseConnector):
    """
    Thin client for the Graph API endpoints used by the relay.
    """

    def __init__(
        self,
        *,
        settings: MetaAPISettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="meta_graph", http_settings=http_settings, session=session)
        self._settings = settings

    def get_insights(
        self,
        *,
        since: str,
        until: str,
        fields: Sequence[str],
        level: str = "campaign",
    ) -> Any:
        """
        Query ad account insights and return the response body unchanged.
        """

        return self._call(
            method="GET",
            path=f"{self._settings.account_path}/insights",
            params={
                "fields": ",".join(fields),
                "level": level,
                "time_range": json.dumps({"since": since, "until": until}),
            },
        )

    def create_custom_audience(self, *, name: str, description: str | None = None) -> str:
        """
        Create an empty customer-list audience and return its id.
        """

        payload = self._call(
            method="POST",
            path=f"{self._settings.account_path}/customaudiences",
            data={
                "name": name,
                "subtype": CUSTOM_AUDIENCE_SUBTYPE,
                "customer_file_source": CUSTOMER_FILE_SOURCE,
                "description": description or self._settings.audience_description,
            },
        )
        audience_id = payload.get("id") if isinstance(payload, dict) else None
        if not audience_id:
            raise ConnectorRequestError(f"{self.source}: audience creation returned no id.")

        logger.info("Created custom audience audience_id=%s name=%s", audience_id, name)
        return str(audience_id)

    def add_users(self, *, audience_id: str, batch: AudienceBatch) -> dict[str, Any]:
        """
        Append one batch of hashed rows to an audience.
        """

        payload = self._call(
            method="POST",
            path=f"{audience_id}/users",
            data={
                "payload": json.dumps(
                    {
                        "schema": list(batch.schema),
                        "data": [list(row) for row in batch.rows],
                    }
                ),
                "session": json.dumps(batch.session.to_payload()),
            },
        )
        return payload if isinstance(payload, dict) else {}

    def _call(
        self,
        *,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        data: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._settings.graph_url}/{path}"
        auth = {"access_token": self._settings.access_token}
        if method == "GET":
            params = {**(params or {}), **auth}
        else:
            data = {**(data or {}), **auth}

        payload = self._request_json(method=method, url=url, params=params, data=data)
        error = MetaAPIError.from_payload(payload)
        if error is not None:
            logger.error(
                "Meta API returned error path=%s code=%s type=%s message=%s",
                path,
                error.code,
                error.error_type,
                error.message,
            )
            raise error
        return payload

    def _error_from_http_failure(self, exc: requests.HTTPError) -> ConnectorRequestError:
        if exc.response is not None:
            try:
                body = exc.response.json()
            except ValueError:
                body = None
            error = MetaAPIError.from_payload(body)
            if error is not None:
                return error
        return super()._error_from_http_failure(exc)
