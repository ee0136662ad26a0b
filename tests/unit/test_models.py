"""Unit tests for data models."""

import pytest
from loguru import logger

from medicine_reminder.data.models import Frequency, ReminderStatus


def test_record_to_dict_uses_plain_values(inventory):
    record = inventory.add("Aspirin", "08:00", "2 pills", frequency="weekly", quantity=12)
    inventory.change_status(record.id, ReminderStatus.MISSED)

    assert record.to_dict() == {
        "id": record.id,
        "name": "Aspirin",
        "time": "08:00",
        "dosage": "2 pills",
        "instructions": "",
        "frequency": "weekly",
        "status": "missed",
        "quantity": 12,
        "refill_threshold": 5,
    }


def test_added_and_deleted_records_are_logged(inventory):
    """Add and delete write the full record to the debug log."""
    messages = []
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    try:
        record = inventory.add("Aspirin", "08:00", "2 pills", frequency=Frequency.AS_NEEDED)
        inventory.delete(record.id)
    finally:
        logger.remove(sink_id)

    text = "".join(messages)
    assert f"Added record: {record.to_dict()}" in text
    assert f"Deleted record: {record.to_dict()}" in text


def test_add_rejects_unknown_frequency(inventory, recorder):
    """Frequency is the one typed field the inventory checks."""
    with pytest.raises(ValueError):
        inventory.add("Aspirin", "08:00", "2 pills", frequency="hourly")

    assert len(inventory) == 0
    assert recorder.alerts == []
