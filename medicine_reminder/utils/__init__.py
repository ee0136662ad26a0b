"""Utility functions for the medicine reminder."""

from .error_handler import format_error_for_user, log_operation
from .logger import logger, setup_logger
from .timezone import (
    get_user_current_time,
    is_time_to_take,
    minutes_between,
    parse_time_of_day,
    parse_timezone_offset,
)

__all__ = [
    # Time utilities
    "parse_timezone_offset",
    "get_user_current_time",
    "parse_time_of_day",
    "minutes_between",
    "is_time_to_take",
    # Logger utilities
    "setup_logger",
    "logger",
    # Error handling utilities
    "format_error_for_user",
    "log_operation",
]
