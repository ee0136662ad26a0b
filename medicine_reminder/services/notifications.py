"""Notification delivery for the medicine reminder."""

import asyncio
import html
from enum import Enum
from typing import Callable, Optional

from aiogram import Bot
from aiogram.exceptions import TelegramAPIError, TelegramForbiddenError
from loguru import logger

from medicine_reminder.data.models import Alert

Transport = Callable[[str, str], None]


class PermissionState(str, Enum):
    """Whether the user allowed system notifications."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"


class LogTransport:
    """Transport that writes notifications to the log."""

    def __call__(self, title: str, body: str) -> None:
        logger.info(f"NOTIFICATION | {title} | {body}")


class TelegramTransport:
    """Transport that sends notifications as Telegram messages.

    Sending is scheduled on the running event loop and not awaited.
    Delivery errors are logged when the send task finishes.
    """

    def __init__(self, bot: Bot, chat_id: int):
        self.bot = bot
        self.chat_id = chat_id
        self._pending: set[asyncio.Task] = set()

    def __call__(self, title: str, body: str) -> None:
        # Raises RuntimeError outside of a running loop
        loop = asyncio.get_running_loop()
        text = f"<b>{html.escape(title)}</b>\n{html.escape(body)}"
        task = loop.create_task(self.bot.send_message(chat_id=self.chat_id, text=text))
        self._pending.add(task)
        task.add_done_callback(self._on_sent)

    def _on_sent(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if isinstance(error, TelegramForbiddenError):
            logger.warning(f"Chat {self.chat_id} blocked the bot: {error}")
        elif isinstance(error, TelegramAPIError):
            logger.error(f"Telegram API error sending notification to {self.chat_id}: {error}")
        elif error is not None:
            logger.opt(exception=error).error(
                f"Error sending notification to {self.chat_id}: {type(error).__name__}"
            )


class NotificationDispatcher:
    """Best-effort delivery of inventory alerts.

    Holds the notification permission and a transport. A missing
    transport means the platform has no notification support.
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        permission: PermissionState = PermissionState.DEFAULT,
    ):
        self.transport = transport
        self._permission = permission
        logger.debug(
            f"NotificationDispatcher initialized (permission: {permission.value}, "
            f"supported: {transport is not None})"
        )

    @property
    def permission(self) -> PermissionState:
        return self._permission

    @property
    def supported(self) -> bool:
        return self.transport is not None

    def request_permission(self, grant: bool) -> PermissionState:
        """Record the user's answer to a permission request.

        Args:
            grant: Whether the user allowed notifications

        Returns:
            Resulting permission state (unchanged when unsupported)
        """
        if not self.supported:
            logger.warning("Notification permission requested but notifications are not supported")
            return self._permission

        self._permission = PermissionState.GRANTED if grant else PermissionState.DENIED
        logger.info(f"Notification permission set to {self._permission.value}")
        return self._permission

    def send_system_notification(self, title: str, body: str) -> bool:
        """Send a notification if allowed.

        Returns:
            True if the notification was handed to the transport
        """
        if self.transport is None or self._permission is not PermissionState.GRANTED:
            logger.debug(f"Notification not sent ({self._permission.value}): {title}")
            return False

        try:
            self.transport(title, body)
        except Exception as e:
            logger.error(f"Error sending notification '{title}': {type(e).__name__}: {e}")
            return False

        return True

    def notify(self, alert: Alert) -> bool:
        """Dispatch an alert and record whether it went out."""
        alert.dispatched = self.send_system_notification(alert.title, alert.body)
        return alert.dispatched
