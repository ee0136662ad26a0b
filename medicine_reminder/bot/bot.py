"""Telegram bot initialization and setup."""

from typing import Optional

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from loguru import logger

from medicine_reminder.bot import handlers
from medicine_reminder.services.inventory import MedicationInventory
from medicine_reminder.services.notifications import NotificationDispatcher


def create_bot(token: str) -> Bot:
    """Create bot with HTML parse mode."""
    return Bot(
        token=token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )


def create_dispatcher(
    inventory: MedicationInventory,
    notifications: NotificationDispatcher,
) -> Dispatcher:
    """Create dispatcher with the session inventory injected into handlers.

    Args:
        inventory: Inventory shared by all handlers for this session
        notifications: Dispatcher holding the notification permission

    Returns:
        Dispatcher with handlers registered
    """
    dp = Dispatcher(inventory=inventory, notifications=notifications)
    dp.include_router(handlers.router)
    dp.startup.register(on_startup)
    dp.shutdown.register(on_shutdown)

    logger.info("Dispatcher initialized")
    return dp


async def on_startup(bot: Bot):
    """Handler called when bot starts."""
    bot_info = await bot.get_me()
    logger.info(f"Bot started: @{bot_info.username} (ID: {bot_info.id})")


async def on_shutdown(bot: Optional[Bot] = None):
    """Handler called when bot shuts down."""
    logger.info("Bot shutting down...")
