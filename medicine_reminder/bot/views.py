"""Message formatting and command parsing for the Telegram front end."""

import html
from typing import Iterable, Optional

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from medicine_reminder.data.models import Frequency, MedicationRecord, ReminderStatus
from medicine_reminder.services.inventory import dose_amount_of, doses_remaining_of
from medicine_reminder.services.rules import (
    derive_form_defaults,
    is_insufficient_for_dose,
    is_low_stock,
    percent_remaining,
)
from medicine_reminder.utils import parse_time_of_day

GROUP_TITLES = {
    ReminderStatus.PENDING: "Pending",
    ReminderStatus.TAKEN: "Taken",
    ReminderStatus.MISSED: "Missed",
}

STATUS_ICONS = {
    ReminderStatus.PENDING: "⏰",
    ReminderStatus.TAKEN: "✅",
    ReminderStatus.MISSED: "❌",
}

FREQUENCY_LABELS = {
    Frequency.DAILY: "Daily",
    Frequency.WEEKLY: "Weekly",
    Frequency.MORNING_EVENING: "Morning & Evening",
    Frequency.AS_NEEDED: "As Needed",
}

ADD_USAGE = (
    "Usage: /add name; HH:MM; dosage[; frequency[; quantity[; threshold[; instructions]]]]\n"
    "Example: /add Aspirin; 08:00; 2 pills; daily; 30; 10"
)

BAR_WIDTH = 10


def stock_bar(quantity: int, refill_threshold: int) -> str:
    """Text progress bar for the stock level."""
    percent = percent_remaining(quantity, refill_threshold)
    filled = round(percent / 100 * BAR_WIDTH)
    return f"{'█' * filled}{'░' * (BAR_WIDTH - filled)} {percent}%"


def format_record(record: MedicationRecord) -> str:
    """Format one medication as a card."""
    name = html.escape(record.name)
    doses_left = doses_remaining_of(record)
    lines = [
        f"{STATUS_ICONS[record.status]} <b>{name}</b> at {record.time} "
        f"({FREQUENCY_LABELS[record.frequency]})",
        f"Dosage: {html.escape(record.dosage)}",
        f"Stock: {record.quantity} left ({doses_left} doses)",
        stock_bar(record.quantity, record.refill_threshold),
    ]
    if record.instructions:
        lines.append(f"Instructions: {html.escape(record.instructions)}")

    if record.status is ReminderStatus.PENDING:
        if is_low_stock(record.quantity, record.refill_threshold):
            noun = "dose" if doses_left == 1 else "doses"
            lines.append(
                f"⚠️ Low Inventory Alert: you only have {doses_left} {noun} "
                f"of {name} left. Consider refilling soon."
            )
        if is_insufficient_for_dose(record.quantity, dose_amount_of(record)):
            lines.append(
                f"🛑 Insufficient Quantity: you don't have enough {name} for a "
                f"complete dose ({html.escape(record.dosage)}). Please refill immediately."
            )

    return "\n".join(lines)


def format_low_stock_banner(records: Iterable[MedicationRecord]) -> Optional[str]:
    """Aggregate warning for low-stock medications, None when there are none."""
    names = [html.escape(record.name) for record in records]
    if not names:
        return None
    return (
        "⚠️ <b>Medicine Inventory Alert</b>\n"
        f"You're running low on: {', '.join(names)}. Please refill soon."
    )


def format_schedule(
    groups: dict[ReminderStatus, list[MedicationRecord]],
    low_stock: Iterable[MedicationRecord] = (),
) -> str:
    """Format the whole collection grouped by status."""
    total = sum(len(records) for records in groups.values())
    if total == 0:
        return "You have no medication reminders yet. Add one with /add."

    sections = []
    banner = format_low_stock_banner(low_stock)
    if banner:
        sections.append(banner)

    sections.append(
        "<b>Your Medication Reminders</b>\n"
        f"Total: {total} | "
        + " | ".join(
            f"{GROUP_TITLES[status]}: {len(groups.get(status, []))}"
            for status in ReminderStatus
        )
    )

    for status in ReminderStatus:
        records = groups.get(status, [])
        if not records:
            continue
        cards = "\n\n".join(f"#{record.id} {format_record(record)}" for record in records)
        sections.append(f"<b>{GROUP_TITLES[status]}</b>\n{cards}")

    return "\n\n".join(sections)


def build_record_keyboard(record: MedicationRecord) -> InlineKeyboardMarkup:
    """Inline buttons for one medication card."""
    rows = []
    if record.status is ReminderStatus.PENDING:
        rows.append([
            InlineKeyboardButton(text="Taken", callback_data=f"taken:{record.id}"),
            InlineKeyboardButton(text="Missed", callback_data=f"missed:{record.id}"),
        ])

    dose_amount = dose_amount_of(record)
    rows.append([
        InlineKeyboardButton(text=f"+{dose_amount}", callback_data=f"inc:{record.id}"),
        InlineKeyboardButton(text=f"-{dose_amount}", callback_data=f"dec:{record.id}"),
    ])
    rows.append([InlineKeyboardButton(text="Delete", callback_data=f"delete:{record.id}")])

    return InlineKeyboardMarkup(inline_keyboard=rows)


def _parse_count(value: str, field: str) -> int:
    try:
        count = int(value)
    except ValueError as e:
        raise ValueError(f"{field} must be a whole number, got {value!r}") from e
    if count < 0:
        raise ValueError(f"{field} cannot be negative")
    return count


def _parse_frequency(value: str) -> Frequency:
    normalized = value.strip().lower().replace(" & ", "-").replace(" ", "-")
    try:
        return Frequency(normalized)
    except ValueError as e:
        allowed = ", ".join(frequency.value for frequency in Frequency)
        raise ValueError(f"Unknown frequency {value!r}, expected one of: {allowed}") from e


def parse_add_command(arguments: Optional[str]) -> dict:
    """Parse the arguments of /add into keyword arguments for the inventory.

    Quantity and refill threshold fall back to values derived from the
    dosage when omitted.

    Raises:
        ValueError: If a required field is missing or a field is malformed
    """
    parts = [part.strip() for part in (arguments or "").split(";", 6)]
    parts += [""] * (7 - len(parts))
    name, time, dosage, frequency, quantity, threshold, instructions = parts[:7]

    if not name or not time or not dosage:
        raise ValueError(f"name, time and dosage are required.\n{ADD_USAGE}")

    hour, minute = parse_time_of_day(time)
    default_quantity, default_threshold = derive_form_defaults(dosage)

    return {
        "name": name,
        "time": f"{hour:02d}:{minute:02d}",
        "dosage": dosage,
        "instructions": instructions,
        "frequency": _parse_frequency(frequency) if frequency else Frequency.DAILY,
        "quantity": _parse_count(quantity, "Quantity") if quantity else default_quantity,
        "refill_threshold": (
            _parse_count(threshold, "Refill threshold") if threshold else default_threshold
        ),
    }


def parse_callback_data(data: str) -> tuple[str, int]:
    """Split "action:id" callback data.

    Raises:
        ValueError: If the data is malformed
    """
    action, _, raw_id = (data or "").partition(":")
    if not action or not raw_id:
        raise ValueError(f"Invalid callback data: {data!r}")
    return action, int(raw_id)
