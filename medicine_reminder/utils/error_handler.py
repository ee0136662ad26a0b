"""Error handling utilities for the medicine reminder."""

from typing import Optional

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramNetworkError,
)
from loguru import logger


def format_error_for_user(error: Exception) -> str:
    """Convert technical errors to user-friendly messages.

    Args:
        error: Exception to format

    Returns:
        Message suitable for sending back to the user
    """
    if isinstance(error, TelegramForbiddenError):
        return (
            "The bot cannot send you messages. "
            "Please check that you have not blocked it."
        )

    if isinstance(error, TelegramBadRequest):
        return "Something went wrong while handling the request. Please try again."

    if isinstance(error, TelegramNetworkError):
        return "A network error occurred. Please check your connection and try again."

    if isinstance(error, TelegramAPIError):
        return "A Telegram API error occurred. Please try again."

    # Validation errors from command parsing
    if isinstance(error, ValueError):
        return f"Invalid input: {error}"

    return "An internal error occurred. Please try again."


def log_operation(
    operation_name: str,
    medication_id: Optional[int] = None,
    **extra_context,
) -> None:
    """Log an operation with structured context.

    Args:
        operation_name: Name of the operation being performed
        medication_id: Medication ID (if applicable)
        **extra_context: Additional context to include in log
    """
    context = {
        "operation": operation_name,
    }

    if medication_id is not None:
        context["medication_id"] = medication_id

    context.update(extra_context)

    logger.bind(**context).info(f"Operation: {operation_name}")


__all__ = [
    "format_error_for_user",
    "log_operation",
]
