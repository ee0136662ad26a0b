"""Unit tests for application wiring."""

from datetime import datetime
from types import SimpleNamespace
from unittest.mock import MagicMock

from medicine_reminder.main import create_notifications
from medicine_reminder.services.inventory import MedicationInventory
from medicine_reminder.services.notifications import (
    LogTransport,
    PermissionState,
    TelegramTransport,
)


def make_settings(chat_id=None, permission="default"):
    return SimpleNamespace(telegram_chat_id=chat_id, notifications_permission=permission)


def test_headless_notifications_are_granted():
    """Headless runs deliver reminders to the log with default settings."""
    notifications = create_notifications(make_settings(), bot=None)
    inventory = MedicationInventory(notifier=notifications)
    inventory.add("Aspirin", "08:00", "2 pills", quantity=10)

    alerts = inventory.tick(datetime(2024, 1, 1, 8, 0))

    assert isinstance(notifications.transport, LogTransport)
    assert notifications.permission is PermissionState.GRANTED
    assert [alert.dispatched for alert in alerts] == [True]


def test_telegram_notifications_use_configured_permission():
    """With a bot the user decides, starting from the configured state."""
    notifications = create_notifications(make_settings(chat_id=42), bot=MagicMock())

    assert isinstance(notifications.transport, TelegramTransport)
    assert notifications.transport.chat_id == 42
    assert notifications.permission is PermissionState.DEFAULT


def test_telegram_without_chat_is_unsupported():
    notifications = create_notifications(
        make_settings(permission="granted"), bot=MagicMock()
    )

    assert notifications.supported is False
    assert notifications.send_system_notification("Title", "Body") is False
