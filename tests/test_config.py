import pytest
from pydantic import ValidationError

from spendwise.config import Settings, get_settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("SPENDWISE_PAGE_SIZE", raising=False)
    s = Settings(_env_file=None)

    assert s.page_size == 10
    assert s.page_window == 5
    assert s.recent_limit == 6
    assert s.suggestion_limit == 5
    assert s.api_token is None


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("SPENDWISE_PAGE_SIZE", "25")
    monkeypatch.setenv("SPENDWISE_LOG_LEVEL", "debug")

    s = Settings(_env_file=None)

    assert s.page_size == 25
    assert s.log_level == "DEBUG"


def test_rejects_non_positive_sizes():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, page_size=0)


def test_get_settings_is_cached():
    get_settings.cache_clear()
    assert get_settings() is get_settings()


def test_configure_logging_is_idempotent():
    from spendwise.log import configure_logging, get_logger

    configure_logging("WARNING")
    configure_logging("INFO", json=True)
    get_logger("spendwise.test").info("configured", ok=True)
