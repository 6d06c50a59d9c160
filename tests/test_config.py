"""Tests for configuration loading."""

import pytest

from slack_relay.config import Settings, load_settings
from slack_relay.service import RelayService


def test_defaults(monkeypatch):
    for name in ("DATABASE_URL", "ENCRYPTION_KEY", "OWNER_MODE", "SLACK_API_URL", "HISTORY_PAGE_SIZE", "MENTION_SCAN_LIMIT"):
        monkeypatch.delenv(name, raising=False)

    cfg = Settings()

    assert cfg.database_url == "sqlite:///slack_relay.db"
    assert cfg.encryption_key == ""
    assert cfg.owner_mode == "caller"
    assert cfg.slack_api_url == "https://slack.com/api/"
    assert cfg.history_page_size == 200
    assert cfg.mention_scan_limit == 1000


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("ENCRYPTION_KEY", "secret")
    monkeypatch.setenv("OWNER_MODE", "verified")
    monkeypatch.setenv("HISTORY_PAGE_SIZE", "50")

    cfg = load_settings()

    assert cfg.database_url == "sqlite://"
    assert cfg.encryption_key == "secret"
    assert cfg.owner_mode == "verified"
    assert cfg.history_page_size == 50


@pytest.mark.parametrize(
    "overrides",
    [
        {"encryption_key": ""},
        {"owner_mode": "sometimes"},
        {"history_page_size": 0},
        {"mention_scan_limit": 0},
    ],
)
def test_validate_rejects(overrides):
    values = {"database_url": "sqlite://", "encryption_key": "secret", "owner_mode": "caller"}
    values.update(overrides)
    with pytest.raises(ValueError):
        Settings(**values).validate()


def test_service_from_settings():
    cfg = Settings(database_url="sqlite://", encryption_key="secret", owner_mode="verified")

    service = RelayService.from_settings(cfg)

    assert service.registry.owner_mode == "verified"
    assert service.mentions.page_size == cfg.history_page_size
