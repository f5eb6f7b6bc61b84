from __future__ import annotations

import pytest

from app import config
from app.config import MetaAPISettings, normalize_ad_account_id
from app.main import create_app

_META_VARS = ("META_ACCESS_TOKEN", "META_AD_ACCOUNT_ID")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    config.get_meta_api_settings.cache_clear()
    config.get_audience_upload_settings.cache_clear()
    config.get_external_http_settings.cache_clear()
    yield
    config.get_meta_api_settings.cache_clear()
    config.get_audience_upload_settings.cache_clear()
    config.get_external_http_settings.cache_clear()


def test_missing_credentials_block_startup(monkeypatch) -> None:
    for name in _META_VARS:
        monkeypatch.delenv(name, raising=False)

    with pytest.raises(RuntimeError) as ctx:
        create_app()

    assert "META_ACCESS_TOKEN" in str(ctx.value)
    assert "META_AD_ACCOUNT_ID" in str(ctx.value)


def test_blank_token_counts_as_missing(monkeypatch) -> None:
    monkeypatch.setenv("META_ACCESS_TOKEN", "   ")
    monkeypatch.setenv("META_AD_ACCOUNT_ID", "123")

    assert config.missing_meta_env_vars() == ["META_ACCESS_TOKEN"]
    with pytest.raises(RuntimeError):
        config.get_meta_api_settings()


def test_meta_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("META_ACCESS_TOKEN", "abc")
    monkeypatch.setenv("META_AD_ACCOUNT_ID", "987")
    monkeypatch.setenv("META_GRAPH_API_VERSION", "v20.0")

    settings = config.get_meta_api_settings()

    assert settings.access_token == "abc"
    assert settings.account_path == "act_987"
    assert settings.graph_url == "https://graph.facebook.com/v20.0"


def test_app_builds_from_env(monkeypatch) -> None:
    monkeypatch.setenv("META_ACCESS_TOKEN", "abc")
    monkeypatch.setenv("META_AD_ACCOUNT_ID", "987")

    application = create_app()

    assert application.state.meta_settings.ad_account_id == "987"
    assert application.state.upload_settings.batch_size >= 1


def test_batch_size_and_timeout_overrides(monkeypatch) -> None:
    monkeypatch.setenv("AUDIENCE_BATCH_SIZE", "500")
    monkeypatch.setenv("META_HTTP_TIMEOUT_SECONDS", "not-a-number")

    assert config.get_audience_upload_settings().batch_size == 500
    assert config.get_external_http_settings().timeout_seconds == 15.0
    assert config.get_external_http_settings().max_retries == 0


@pytest.mark.parametrize("raw, expected", [("123", "act_123"), ("act_123", "act_123"), (" 9 ", "act_9")])
def test_normalize_ad_account_id(raw: str, expected: str) -> None:
    assert normalize_ad_account_id(raw) == expected


def test_settings_are_frozen() -> None:
    settings = MetaAPISettings(access_token="t", ad_account_id="1")
    with pytest.raises(AttributeError):
        settings.access_token = "other"  # type: ignore[misc]
