"""Shared fixtures for tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from medicine_reminder.data.models import AlertKind
from medicine_reminder.services.inventory import InventoryPolicy, MedicationInventory
from medicine_reminder.services.notifications import NotificationDispatcher, PermissionState


@pytest.fixture
def transport():
    """Create mock notification transport.

    Returns:
        MagicMock: Callable transport recording (title, body) calls
    """
    return MagicMock()


@pytest.fixture
def notifications(transport):
    """Create NotificationDispatcher with permission granted.

    Args:
        transport: Mock transport fixture

    Returns:
        NotificationDispatcher: Dispatcher instance for testing
    """
    return NotificationDispatcher(transport=transport, permission=PermissionState.GRANTED)


@pytest.fixture
def recorder():
    """Create notifier that records every alert it receives.

    Returns:
        AlertRecorder: Notifier with helpers for counting alerts by kind
    """
    return AlertRecorder()


@pytest.fixture
def inventory(recorder):
    """Create MedicationInventory with default policy and recording notifier.

    Args:
        recorder: AlertRecorder fixture

    Returns:
        MedicationInventory: Inventory instance for testing
    """
    return MedicationInventory(notifier=recorder, policy=InventoryPolicy())


@pytest.fixture
def mock_message():
    """Create mock Message.

    Returns:
        MagicMock: Mocked Telegram Message
    """
    message = MagicMock()
    message.from_user.id = 123456789
    message.text = "test message"
    message.answer = AsyncMock()
    return message


@pytest.fixture
def mock_callback_query():
    """Create mock CallbackQuery.

    Returns:
        MagicMock: Mocked Telegram CallbackQuery
    """
    callback = MagicMock()
    callback.from_user.id = 123456789
    callback.data = "taken:1"
    callback.answer = AsyncMock()
    callback.message = MagicMock()
    callback.message.edit_text = AsyncMock()
    callback.message.delete = AsyncMock()
    return callback


class AlertRecorder:
    """Notifier double that keeps alerts in emission order."""

    def __init__(self):
        self.alerts = []

    def notify(self, alert):
        self.alerts.append(alert)
        alert.dispatched = True
        return True

    def of_kind(self, kind: AlertKind):
        return [alert for alert in self.alerts if alert.kind is kind]

    def kinds(self):
        return [alert.kind for alert in self.alerts]

    def clear(self):
        self.alerts.clear()
