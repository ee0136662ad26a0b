"""Unit tests for settings loaded from the environment."""

import importlib
from pathlib import Path

import pytest

from medicine_reminder.services.inventory import InventoryPolicy
from medicine_reminder.services.rules import LowStockRule

# The package re-exports the `settings` instance under the module's name
settings_module = importlib.import_module("medicine_reminder.config.settings")

ENV_KEYS = [
    "TELEGRAM_BOT_TOKEN",
    "TELEGRAM_CHAT_ID",
    "LOG_LEVEL",
    "LOGS_DIR",
    "SCHEDULER_INTERVAL_SECONDS",
    "REMINDER_TOLERANCE_MINUTES",
    "DEFAULT_TIMEZONE_OFFSET",
    "ALLOW_TAKEN_WITHOUT_STOCK",
    "LOW_STOCK_RULE",
    "NOTIFICATIONS_PERMISSION",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any application variables and no .env loading."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(settings_module, "load_dotenv", lambda **kwargs: None)
    return monkeypatch


def test_defaults(clean_env):
    settings = settings_module.Settings()

    assert settings.telegram_bot_token is None
    assert settings.telegram_chat_id is None
    assert settings.logs_dir is None
    assert settings.scheduler_interval_seconds == 60
    assert settings.reminder_tolerance_minutes == 1
    assert settings.allow_taken_without_stock is True
    assert settings.low_stock_rule == "doses"
    assert settings.notifications_permission == "default"


def test_environment_overrides(clean_env):
    clean_env.setenv("TELEGRAM_BOT_TOKEN", "secret-token")
    clean_env.setenv("TELEGRAM_CHAT_ID", "42")
    clean_env.setenv("LOGS_DIR", "var/logs")
    clean_env.setenv("ALLOW_TAKEN_WITHOUT_STOCK", "false")
    clean_env.setenv("LOW_STOCK_RULE", "Quantity")
    clean_env.setenv("REMINDER_TOLERANCE_MINUTES", "5")

    settings = settings_module.Settings()
    policy = InventoryPolicy.from_settings(settings)

    assert settings.telegram_chat_id == 42
    assert settings.logs_dir == Path("var/logs")
    assert "secret-token" not in repr(settings)
    assert policy == InventoryPolicy(
        allow_taken_without_stock=False,
        reminder_tolerance_minutes=5,
        low_stock_rule=LowStockRule.QUANTITY,
    )
