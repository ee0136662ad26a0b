"""Time utility functions for the medicine reminder."""

from datetime import datetime, timedelta, timezone

from loguru import logger

MINUTES_PER_DAY = 24 * 60


def parse_timezone_offset(offset_str: str) -> timedelta:
    """Parse timezone offset string to timedelta.

    Args:
        offset_str: Timezone offset in format "+03:00" or "-05:00"

    Returns:
        timedelta representing the offset

    Raises:
        ValueError: If offset string format is invalid

    Examples:
        >>> parse_timezone_offset("+03:00")
        datetime.timedelta(seconds=10800)
    """
    try:
        offset_str = offset_str.strip()

        if len(offset_str) != 6 or offset_str[0] not in ['+', '-']:
            raise ValueError(f"Invalid timezone offset format: {offset_str}")

        sign = 1 if offset_str[0] == '+' else -1

        hours_str, minutes_str = offset_str[1:].split(':')
        hours = int(hours_str)
        minutes = int(minutes_str)

        if not (0 <= hours <= 14):
            raise ValueError(f"Hours out of range: {hours}")
        if not (0 <= minutes <= 59):
            raise ValueError(f"Minutes out of range: {minutes}")

        return timedelta(minutes=sign * (hours * 60 + minutes))

    except (ValueError, IndexError) as e:
        logger.error(f"Failed to parse timezone offset '{offset_str}': {e}")
        raise ValueError(f"Invalid timezone offset format: {offset_str}") from e


def get_user_current_time(timezone_offset: str) -> datetime:
    """Get current wall-clock time for the configured offset.

    Args:
        timezone_offset: Offset from UTC (e.g., "+03:00", "-05:00")

    Returns:
        Current naive datetime shifted by the offset
    """
    offset = parse_timezone_offset(timezone_offset)
    utc_now = datetime.now(timezone.utc).replace(tzinfo=None)
    local_time = utc_now + offset

    logger.debug(
        f"Converted UTC {utc_now.strftime('%H:%M:%S')} to "
        f"local time {local_time.strftime('%H:%M:%S')} "
        f"(offset: {timezone_offset})"
    )

    return local_time


def parse_time_of_day(value: str) -> tuple[int, int]:
    """Parse "HH:MM" into an (hour, minute) pair.

    Raises:
        ValueError: If the value is not a valid 24-hour time
    """
    try:
        hour_str, minute_str = value.strip().split(':')
        hour, minute = int(hour_str), int(minute_str)
    except (ValueError, AttributeError) as e:
        raise ValueError(f"Invalid time format: {value!r}, expected HH:MM") from e

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise ValueError(f"Invalid time format: {value!r}, expected HH:MM")

    return hour, minute


def minutes_between(first: tuple[int, int], second: tuple[int, int]) -> int:
    """Distance in minutes between two times of day, wrapping at midnight.

    Examples:
        >>> minutes_between((23, 59), (0, 0))
        1
    """
    first_minutes = first[0] * 60 + first[1]
    second_minutes = second[0] * 60 + second[1]
    diff = abs(first_minutes - second_minutes)
    return min(diff, MINUTES_PER_DAY - diff)


def is_time_to_take(
    medication_time: str,
    current_time: datetime,
    tolerance_minutes: int = 1,
) -> bool:
    """Check if current time is within tolerance of the scheduled time.

    Args:
        medication_time: Scheduled time in "HH:MM" format
        current_time: Current local time
        tolerance_minutes: Maximum distance in minutes that still counts

    Returns:
        True if the reminder is due, False otherwise (including malformed times)

    Examples:
        >>> is_time_to_take("10:00", datetime(2024, 1, 1, 10, 1))
        True
        >>> is_time_to_take("10:00", datetime(2024, 1, 1, 10, 2))
        False
    """
    try:
        scheduled = parse_time_of_day(medication_time)
    except ValueError as e:
        logger.warning(f"Skipping reminder check: {e}")
        return False

    distance = minutes_between(scheduled, (current_time.hour, current_time.minute))
    if distance > tolerance_minutes:
        logger.debug(
            f"Not time yet: current {current_time.strftime('%H:%M')}, "
            f"scheduled {medication_time} ({distance} min away)"
        )
        return False

    logger.debug(f"Time to take: {medication_time}")
    return True
