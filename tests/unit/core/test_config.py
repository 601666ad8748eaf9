from __future__ import annotations

import pytest

from otpcrm.core.config import get_config
from otpcrm.core.exceptions import ConfigurationError


def test_defaults(monkeypatch):
    for name in ("LEAD_ID_PAD_WIDTH", "LEAD_ID_MAX_RETRIES", "DEFAULT_LIST_LIMIT", "ACTIVITY_PAGE_SIZE"):
        monkeypatch.delenv(name, raising=False)
    config = get_config("development")

    assert config.LEAD_ID_PAD_WIDTH == 4
    assert config.LEAD_ID_MAX_RETRIES == 5
    assert config.default_list_limit is None
    assert config.ACTIVITY_PAGE_SIZE == 100
    assert config.is_production is False


def test_default_list_limit_opt_in(monkeypatch):
    monkeypatch.setenv("DEFAULT_LIST_LIMIT", "250")
    assert get_config("development").default_list_limit == 250


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("LEAD_ID_PAD_WIDTH", "0"),
        ("LEAD_ID_MAX_RETRIES", "0"),
        ("DEFAULT_LIST_LIMIT", "-5"),
        ("ACTIVITY_PAGE_SIZE", "0"),
        ("LOG_LEVEL", "chatty"),
        ("DATABASE_URL", "mysql://user:pw@localhost/otpcrm"),
    ],
)
def test_invalid_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ConfigurationError):
        get_config("development")


def test_production_rejects_placeholder_credentials(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://otp:change_me@db:5432/otpcrm")
    with pytest.raises(ConfigurationError):
        get_config("production")
