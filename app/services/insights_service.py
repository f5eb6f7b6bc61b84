"""
app/services/insights_service.py

Campaign insights passthrough.
"""

from __future__ import annotations

from typing import Any

from app.config import InsightsSettings
from app.connectors import MetaGraphConnector


class InsightsService:
    def __init__(self, *, connector: MetaGraphConnector, settings: InsightsSettings) -> None:
        self._connector = connector
        self._settings = settings

    def fetch_campaign_insights(self, *, since: str | None = None, until: str | None = None) -> Any:
        """
        Fetch insights for the configured level and fields. Missing bounds fall
        back to the configured defaults.
        """

        return self._connector.get_insights(
            since=since or self._settings.default_since,
            until=until or self._settings.default_until,
            fields=self._settings.fields,
            level=self._settings.level,
        )
