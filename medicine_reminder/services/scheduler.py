"""Reminder scheduler for the medicine reminder."""

import asyncio
from typing import Optional

from medicine_reminder.config import settings
from medicine_reminder.services.inventory import MedicationInventory
from medicine_reminder.utils import get_user_current_time, logger


class ReminderScheduler:
    """Background task that periodically scans the inventory for due reminders.

    Runs on the same event loop as the bot handlers, so scans and user
    actions never overlap. Can be used as an async context manager; the
    loop is always stopped on exit.
    """

    def __init__(
        self,
        inventory: MedicationInventory,
        interval_seconds: Optional[int] = None,
        timezone_offset: Optional[str] = None,
    ):
        """Initialize reminder scheduler.

        Args:
            inventory: Inventory to scan
            interval_seconds: Seconds between scans (default from settings)
            timezone_offset: Offset used to compute local time (default from settings)
        """
        self.inventory = inventory
        self.interval_seconds = interval_seconds or settings.scheduler_interval_seconds
        self.timezone_offset = timezone_offset or settings.default_timezone_offset

        self._running = False
        self._task: Optional[asyncio.Task] = None

        logger.info("ReminderScheduler initialized")

    @property
    def running(self) -> bool:
        return self._running

    async def start(self):
        """Start the scheduler loop."""
        if self._running:
            logger.warning("Scheduler already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._scheduler_loop())
        logger.info("Scheduler started")

    async def stop(self):
        """Stop the scheduler and release its task."""
        if not self._running:
            logger.warning("Scheduler not running")
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info("Scheduler stopped")

    async def __aenter__(self) -> "ReminderScheduler":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._running:
            await self.stop()

    async def _scheduler_loop(self):
        """Main scheduler loop that runs every interval_seconds."""
        logger.info(f"Scheduler loop started (interval: {self.interval_seconds}s)")

        while self._running:
            try:
                self.check_reminders()
            except Exception as e:
                logger.opt(exception=e).error(f"Error in scheduler loop: {type(e).__name__}")

            await asyncio.sleep(self.interval_seconds)

    def check_reminders(self):
        """Run one scan at the current local time."""
        now = get_user_current_time(self.timezone_offset)
        logger.debug(f"Checking reminders at {now.strftime('%H:%M')}")
        return self.inventory.tick(now)
