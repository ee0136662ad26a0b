"""Configuration settings for the medicine reminder."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        """Initialize settings by loading from .env file and environment variables."""
        # Load .env file if it exists
        env_path = Path(__file__).parent.parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        # Telegram Bot Configuration (only needed to run the bot)
        self.telegram_bot_token: Optional[str] = self._get_env("TELEGRAM_BOT_TOKEN")
        chat_id = self._get_env("TELEGRAM_CHAT_ID")
        self.telegram_chat_id: Optional[int] = int(chat_id) if chat_id else None

        # Application Configuration
        self.log_level: str = self._get_env("LOG_LEVEL", "INFO")
        logs_dir = self._get_env("LOGS_DIR")
        self.logs_dir: Optional[Path] = Path(logs_dir) if logs_dir else None
        self.scheduler_interval_seconds: int = int(
            self._get_env("SCHEDULER_INTERVAL_SECONDS", "60")
        )
        self.reminder_tolerance_minutes: int = int(
            self._get_env("REMINDER_TOLERANCE_MINUTES", "1")
        )

        # Timezone Configuration
        self.default_timezone_offset: str = self._get_env(
            "DEFAULT_TIMEZONE_OFFSET", "+00:00"
        )

        # Inventory policy
        self.allow_taken_without_stock: bool = self._get_bool_env(
            "ALLOW_TAKEN_WITHOUT_STOCK", True
        )
        self.low_stock_rule: str = self._get_env("LOW_STOCK_RULE", "doses").lower()

        # Initial notification permission: default, granted or denied
        self.notifications_permission: str = self._get_env(
            "NOTIFICATIONS_PERMISSION", "default"
        ).lower()

    def _get_env(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Get environment variable with optional default value.

        Args:
            key: Environment variable name
            default: Default value if variable is not set

        Returns:
            Environment variable value or default
        """
        return os.getenv(key, default)

    def _get_bool_env(self, key: str, default: bool) -> bool:
        """Get boolean environment variable ("1", "true", "yes", "on" are true)."""
        value = os.getenv(key)
        if value is None:
            return default
        return value.strip().lower() in ("1", "true", "yes", "on")

    def __repr__(self) -> str:
        """Return string representation of settings (without sensitive data)."""
        return (
            f"Settings("
            f"telegram_bot_token={'*' * 8}, "
            f"telegram_chat_id={self.telegram_chat_id}, "
            f"log_level={self.log_level}, "
            f"logs_dir={self.logs_dir}, "
            f"scheduler_interval_seconds={self.scheduler_interval_seconds}, "
            f"reminder_tolerance_minutes={self.reminder_tolerance_minutes}, "
            f"default_timezone_offset={self.default_timezone_offset}, "
            f"allow_taken_without_stock={self.allow_taken_without_stock}, "
            f"low_stock_rule={self.low_stock_rule}, "
            f"notifications_permission={self.notifications_permission}"
            f")"
        )
