"""Telegram bot handlers for the medicine reminder.

Handlers are thin: they parse input, call the inventory and render the
result. The inventory and notification dispatcher are injected by the
dispatcher as keyword arguments.
"""

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, Message

from medicine_reminder.bot.views import (
    ADD_USAGE,
    build_record_keyboard,
    format_record,
    format_schedule,
    parse_add_command,
    parse_callback_data,
)
from medicine_reminder.data.models import ReminderStatus
from medicine_reminder.services.inventory import MedicationInventory
from medicine_reminder.services.notifications import NotificationDispatcher, PermissionState
from medicine_reminder.utils import format_error_for_user, log_operation, logger

router = Router()

HELP_TEXT = (
    "💊 <b>Medicine Reminder</b>\n"
    "Keep track of your medications, get reminders and monitor your inventory.\n\n"
    f"{ADD_USAGE}\n\n"
    "/list - show reminders grouped by status\n"
    "/cards - show each reminder with action buttons\n"
    "/qty id quantity - set quantity on hand\n"
    "/delete id - remove a reminder\n"
    "/notifications on|off - enable or disable notifications"
)

CALLBACK_ACTIONS = ("taken", "missed", "inc", "dec", "delete")


@router.message(CommandStart())
@router.message(Command("help"))
async def handle_help_command(message: Message):
    """Handle /start and /help commands."""
    await message.answer(HELP_TEXT)


@router.message(Command("add"))
async def handle_add_command(
    message: Message,
    command: CommandObject,
    inventory: MedicationInventory,
):
    """Handle /add command - add a medication reminder.

    Args:
        message: Incoming message
        command: Parsed command with arguments
        inventory: Session inventory
    """
    try:
        fields = parse_add_command(command.args)
    except ValueError as e:
        logger.info(f"Rejected /add input: {e}")
        await message.answer(format_error_for_user(e))
        return

    record = inventory.add(**fields)
    log_operation("medication_added", medication_id=record.id, name=record.name)

    await message.answer(
        f"Reminder added: {record.name} at {record.time} ({record.frequency.value})\n\n"
        f"{format_record(record)}",
        reply_markup=build_record_keyboard(record),
    )


@router.message(Command("list"))
async def handle_list_command(message: Message, inventory: MedicationInventory):
    """Handle /list command - show reminders grouped by status."""
    text = format_schedule(inventory.group_by_status(), inventory.compute_low_stock_set())
    await message.answer(text)


@router.message(Command("cards"))
async def handle_cards_command(message: Message, inventory: MedicationInventory):
    """Handle /cards command - send each reminder with its buttons."""
    if not len(inventory):
        await message.answer("You have no medication reminders yet. Add one with /add.")
        return

    for records in inventory.group_by_status().values():
        for record in records:
            await message.answer(format_record(record), reply_markup=build_record_keyboard(record))


@router.message(Command("qty"))
async def handle_quantity_command(
    message: Message,
    command: CommandObject,
    inventory: MedicationInventory,
):
    """Handle /qty command - set quantity on hand."""
    try:
        raw_id, raw_quantity = (command.args or "").split()
        record = inventory.change_quantity(int(raw_id), int(raw_quantity))
    except ValueError as e:
        logger.info(f"Rejected /qty input {command.args!r}: {e}")
        await message.answer("Usage: /qty id quantity (quantity must be 0 or more)")
        return

    if record is None:
        await message.answer("Reminder not found.")
        return

    await message.answer(format_record(record), reply_markup=build_record_keyboard(record))


@router.message(Command("delete"))
async def handle_delete_command(
    message: Message,
    command: CommandObject,
    inventory: MedicationInventory,
):
    """Handle /delete command - remove a reminder."""
    try:
        medication_id = int((command.args or "").strip())
    except ValueError:
        await message.answer("Usage: /delete id")
        return

    if inventory.delete(medication_id):
        await message.answer("The reminder has been removed.")
    else:
        await message.answer("Reminder not found.")


@router.message(Command("notifications"))
async def handle_notifications_command(
    message: Message,
    command: CommandObject,
    notifications: NotificationDispatcher,
):
    """Handle /notifications command - user-initiated permission request."""
    answer = (command.args or "").strip().lower()

    if not notifications.supported:
        await message.answer("Notifications are not supported in this setup.")
        return

    if answer not in ("on", "off"):
        await message.answer(
            f"Notifications are currently {notifications.permission.value}. "
            "Use /notifications on or /notifications off."
        )
        return

    state = notifications.request_permission(answer == "on")
    log_operation("notification_permission", permission=state.value)

    if state is PermissionState.GRANTED:
        await message.answer("Notifications enabled. You will now receive medicine reminders.")
    else:
        await message.answer("Notifications disabled. You won't receive medicine reminders.")


@router.callback_query(F.data.regexp(rf"^({'|'.join(CALLBACK_ACTIONS)}):\d+$"))
async def handle_record_callback(callback: CallbackQuery, inventory: MedicationInventory):
    """Handle inline buttons on a medication card.

    Args:
        callback: Callback query from inline button
        inventory: Session inventory
    """
    try:
        action, medication_id = parse_callback_data(callback.data)
        log_operation("record_callback", medication_id=medication_id, action=action)

        if action == "delete":
            if inventory.delete(medication_id) and callback.message:
                await callback.message.delete()
            await callback.answer("Reminder deleted")
            return

        if action == "taken":
            record = inventory.change_status(medication_id, ReminderStatus.TAKEN)
        elif action == "missed":
            record = inventory.change_status(medication_id, ReminderStatus.MISSED)
        elif action == "inc":
            record = inventory.increase_quantity(medication_id)
        else:
            record = inventory.decrease_quantity(medication_id)
            if record is None and inventory.get(medication_id) is not None:
                await callback.answer("Not enough left to remove a dose", show_alert=True)
                return

        if record is None:
            await callback.answer("Reminder not found", show_alert=True)
            return

        if callback.message:
            try:
                await callback.message.edit_text(
                    format_record(record),
                    reply_markup=build_record_keyboard(record),
                )
            except TelegramBadRequest as e:
                # Raised when the card text did not change
                logger.debug(f"Card for medication {medication_id} not updated: {e}")

        await callback.answer("Updated ✓")

    except ValueError as e:
        logger.opt(exception=e).error(f"Invalid callback_data format: {callback.data!r}")
        await callback.answer(format_error_for_user(e), show_alert=True)
    except Exception as e:
        logger.opt(exception=e).error(
            f"Error handling record callback: {type(e).__name__}"
        )
        await callback.answer(format_error_for_user(e), show_alert=True)
