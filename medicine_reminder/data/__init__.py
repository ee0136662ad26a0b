"""Data layer for the medicine reminder.

This module provides the in-memory data models.
"""

from .models import Alert, AlertKind, Frequency, MedicationRecord, ReminderStatus

__all__ = [
    "Alert",
    "AlertKind",
    "Frequency",
    "MedicationRecord",
    "ReminderStatus",
]
