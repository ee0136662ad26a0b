"""Main entry point for the medicine reminder."""

import asyncio
import signal
import sys

from medicine_reminder.config import settings
from medicine_reminder.services import (
    InventoryPolicy,
    LogTransport,
    MedicationInventory,
    NotificationDispatcher,
    PermissionState,
    ReminderScheduler,
    TelegramTransport,
)
from medicine_reminder.utils import logger, setup_logger


def create_notifications(app_settings, bot=None) -> NotificationDispatcher:
    """Create the notification dispatcher for the run mode.

    Without a bot there is no one to ask for permission, so log
    notifications are granted up front.

    Args:
        app_settings: Application settings
        bot: Telegram bot, None when running headless

    Returns:
        NotificationDispatcher for the session
    """
    if bot is None:
        return NotificationDispatcher(
            transport=LogTransport(),
            permission=PermissionState.GRANTED,
        )

    if app_settings.telegram_chat_id is None:
        logger.warning("TELEGRAM_CHAT_ID not set, notifications are not supported")
        transport = None
    else:
        transport = TelegramTransport(bot, app_settings.telegram_chat_id)

    return NotificationDispatcher(
        transport=transport,
        permission=PermissionState(app_settings.notifications_permission),
    )


async def main():
    """Main application entry point."""
    setup_logger(console_level=settings.log_level, logs_dir=settings.logs_dir)

    logger.info("=" * 60)
    logger.info("Starting Medicine Reminder")
    logger.info("=" * 60)
    logger.info(f"Configuration: {settings!r}")

    bot = None
    if settings.telegram_bot_token:
        from medicine_reminder.bot.bot import create_bot, create_dispatcher

        bot = create_bot(settings.telegram_bot_token)
    else:
        logger.warning("TELEGRAM_BOT_TOKEN not set, running headless with log notifications")

    notifications = create_notifications(settings, bot)
    inventory = MedicationInventory(
        notifier=notifications,
        policy=InventoryPolicy.from_settings(settings),
    )

    shutdown_event = asyncio.Event()

    def signal_handler(sig, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {sig}, initiating graceful shutdown...")
        shutdown_event.set()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    async with ReminderScheduler(inventory) as scheduler:
        logger.info(f"Scheduler running every {scheduler.interval_seconds}s")

        if bot is None:
            await shutdown_event.wait()
        else:
            dp = create_dispatcher(inventory, notifications)
            polling_task = asyncio.create_task(
                dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
            )
            try:
                await shutdown_event.wait()
                logger.info("Shutdown signal received, stopping services...")
                await dp.stop_polling()
            finally:
                polling_task.cancel()
                try:
                    await polling_task
                except asyncio.CancelledError:
                    pass
                await bot.session.close()
                logger.info("Bot session closed")

    logger.info("=" * 60)
    logger.info("Medicine Reminder stopped")
    logger.info("=" * 60)


def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received KeyboardInterrupt, exiting...")
    except Exception as e:
        logger.opt(exception=e).critical(f"Fatal error: {type(e).__name__}")
        sys.exit(1)


if __name__ == "__main__":
    run()
