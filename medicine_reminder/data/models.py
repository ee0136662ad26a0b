"""Data models for the medicine reminder."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReminderStatus(str, Enum):
    """State of a medication within the current reminder cycle."""

    PENDING = "pending"
    TAKEN = "taken"
    MISSED = "missed"


class Frequency(str, Enum):
    """How often a medication is taken. Informational only."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MORNING_EVENING = "morning-evening"
    AS_NEEDED = "as-needed"


class AlertKind(str, Enum):
    """Kinds of notifications the inventory emits."""

    ADDED = "added"
    DELETED = "deleted"
    TAKEN = "taken"
    MISSED = "missed"
    RUNNING_LOW = "running_low"
    OUT_OF_STOCK = "out_of_stock"
    INSUFFICIENT_QUANTITY = "insufficient_quantity"
    DEPLETED = "depleted"
    TIME_TO_TAKE = "time_to_take"


@dataclass
class MedicationRecord:
    """Medication data model.

    Attributes:
        id: Unique identifier, never reused within a session
        name: Name of the medication
        time: Time to take medication in HH:MM format (local time)
        dosage: Free-text dosage (e.g., "2 pills")
        instructions: Free-form notes
        frequency: Informational frequency, does not affect scheduling
        status: Current reminder cycle state
        quantity: Units currently on hand
        refill_threshold: Quantity at or below which low stock is raised
    """

    id: int
    name: str
    time: str
    dosage: str
    instructions: str = ""
    frequency: Frequency = Frequency.DAILY
    status: ReminderStatus = ReminderStatus.PENDING
    quantity: int = 0
    refill_threshold: int = 0

    def to_dict(self) -> dict:
        """Convert medication to a plain dictionary.

        Returns:
            Dictionary representation of the medication
        """
        return {
            "id": self.id,
            "name": self.name,
            "time": self.time,
            "dosage": self.dosage,
            "instructions": self.instructions,
            "frequency": self.frequency.value,
            "status": self.status.value,
            "quantity": self.quantity,
            "refill_threshold": self.refill_threshold,
        }


@dataclass
class Alert:
    """Notification emitted by the inventory.

    Attributes:
        kind: What happened
        title: Notification title
        body: Notification body
        medication_id: Record the alert is about, if any
        doses_remaining: Doses left at the time of the alert, if relevant
        dispatched: Whether the notification collaborator delivered it
    """

    kind: AlertKind
    title: str
    body: str
    medication_id: Optional[int] = None
    doses_remaining: Optional[int] = None
    dispatched: bool = False
