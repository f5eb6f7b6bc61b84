"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

DEFAULT_INSIGHT_FIELDS: tuple[str, ...] = (
    "campaign_name",
    "impressions",
    "clicks",
    "spend",
    "cpc",
    "ctr",
    "date_start",
    "date_stop",
)


def load_env_files() -> None:
    """
    Load simple KEY=VALUE pairs from `.env` and `.env.local` (if present).
    Existing process environment variables are not overwritten.
    """

    project_root = Path(__file__).resolve().parents[1]
    for filename in (".env", ".env.local"):
        env_path = project_root / filename
        if not env_path.exists():
            continue

        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue

            key, value = line.split("=", 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")
            if key and key not in os.environ:
                os.environ[key] = value


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_float_env(name: str, default: float) -> float:
    """
    Read a float from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return float(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


def _get_optional_str_env(name: str) -> str | None:
    """
    Read an optional string value from environment variables.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _get_csv_env(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    items = tuple(item.strip() for item in raw_value.split(",") if item.strip())
    return items or default


def normalize_ad_account_id(account_id: str) -> str:
    """
    Return the ad account id in the `act_<id>` form expected by the Graph API.
    """

    stripped = account_id.strip()
    return stripped if stripped.startswith("act_") else f"act_{stripped}"


@dataclass(frozen=True)
class MetaAPISettings:
    """
    Credentials and endpoint settings for the Meta Graph API.
    """

    access_token: str
    ad_account_id: str
    api_version: str = "v21.0"
    base_url: str = "https://graph.facebook.com"
    audience_description: str = "Customer list uploaded via Meta audience relay"

    @property
    def graph_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/{self.api_version}"

    @property
    def account_path(self) -> str:
        return normalize_ad_account_id(self.ad_account_id)


@dataclass(frozen=True)
class ExternalHTTPSettings:
    """
    Shared HTTP behavior settings for outbound Graph API calls.
    """

    timeout_seconds: float = 15.0
    max_retries: int = 0
    backoff_initial_seconds: float = 0.5
    backoff_multiplier: float = 2.0
    rate_limit_per_second: float = 0.0


@dataclass(frozen=True)
class AudienceUploadSettings:
    """
    Runtime settings for custom-audience population.
    """

    batch_size: int = 10_000


@dataclass(frozen=True)
class InsightsSettings:
    """
    Defaults for the campaign insights passthrough.
    """

    default_since: str = "2025-01-01"
    default_until: str = "2025-01-30"
    level: str = "campaign"
    fields: tuple[str, ...] = DEFAULT_INSIGHT_FIELDS


@dataclass(frozen=True)
class ServerSettings:
    """
    HTTP server bind and CORS settings.
    """

    host: str = "0.0.0.0"
    port: int = 3000
    cors_allow_origins: tuple[str, ...] = ("*",)


def missing_meta_env_vars() -> list[str]:
    """
    Return the names of required Meta credentials absent from the environment.
    """

    missing: list[str] = []
    if not _get_optional_str_env("META_ACCESS_TOKEN"):
        missing.append("META_ACCESS_TOKEN")
    if not _get_optional_str_env("META_AD_ACCOUNT_ID"):
        missing.append("META_AD_ACCOUNT_ID")
    return missing


@lru_cache(maxsize=1)
def get_meta_api_settings() -> MetaAPISettings:
    """
    Return Meta Graph API settings from environment variables.

    Raises RuntimeError if the access token or ad account id is missing.
    """

    missing = missing_meta_env_vars()
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}.")

    return MetaAPISettings(
        access_token=_get_str_env("META_ACCESS_TOKEN", ""),
        ad_account_id=_get_str_env("META_AD_ACCOUNT_ID", ""),
        api_version=_get_str_env("META_GRAPH_API_VERSION", "v21.0"),
        base_url=_get_str_env("META_GRAPH_BASE_URL", "https://graph.facebook.com"),
        audience_description=_get_str_env(
            "META_AUDIENCE_DESCRIPTION",
            "Customer list uploaded via Meta audience relay",
        ),
    )


@lru_cache(maxsize=1)
def get_external_http_settings() -> ExternalHTTPSettings:
    """
    Return outbound HTTP settings from environment variables.
    """

    return ExternalHTTPSettings(
        timeout_seconds=max(0.1, _get_float_env("META_HTTP_TIMEOUT_SECONDS", 15.0)),
        max_retries=max(0, _get_int_env("META_HTTP_MAX_RETRIES", 0)),
        backoff_initial_seconds=max(0.0, _get_float_env("META_HTTP_BACKOFF_INITIAL_SECONDS", 0.5)),
        backoff_multiplier=max(1.0, _get_float_env("META_HTTP_BACKOFF_MULTIPLIER", 2.0)),
        rate_limit_per_second=max(0.0, _get_float_env("META_HTTP_RATE_LIMIT_PER_SECOND", 0.0)),
    )


@lru_cache(maxsize=1)
def get_audience_upload_settings() -> AudienceUploadSettings:
    """
    Return custom-audience upload settings from environment variables.
    """

    return AudienceUploadSettings(batch_size=max(1, _get_int_env("AUDIENCE_BATCH_SIZE", 10_000)))


@lru_cache(maxsize=1)
def get_insights_settings() -> InsightsSettings:
    return InsightsSettings(
        default_since=_get_str_env("INSIGHTS_DEFAULT_SINCE", "2025-01-01"),
        default_until=_get_str_env("INSIGHTS_DEFAULT_UNTIL", "2025-01-30"),
        level=_get_str_env("INSIGHTS_LEVEL", "campaign"),
        fields=_get_csv_env("INSIGHTS_FIELDS", DEFAULT_INSIGHT_FIELDS),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    return ServerSettings(
        host=_get_str_env("HOST", "0.0.0.0"),
        port=_get_int_env("PORT", 3000),
        cors_allow_origins=_get_csv_env("CORS_ALLOW_ORIGINS", ("*",)),
    )
