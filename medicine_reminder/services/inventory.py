"""Medication inventory: records, status transitions and stock alerts."""

import itertools
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional, Protocol, Union

from loguru import logger

from medicine_reminder.data.models import (
    Alert,
    AlertKind,
    Frequency,
    MedicationRecord,
    ReminderStatus,
)
from medicine_reminder.services.rules import (
    DEFAULT_QUANTITY,
    DEFAULT_REFILL_THRESHOLD,
    LowStockRule,
    check_low_stock,
    derive_dose_amount,
    derive_doses_remaining,
)
from medicine_reminder.utils import is_time_to_take, log_operation


class Notifier(Protocol):
    def notify(self, alert: Alert) -> bool:
        ...


@dataclass(frozen=True)
class InventoryPolicy:
    """Tunable inventory behavior.

    Attributes:
        allow_taken_without_stock: Mark taken even when stock is short of a dose
        reminder_tolerance_minutes: How close to the scheduled time a reminder fires
        low_stock_rule: Rule used by the aggregate low-stock list
    """

    allow_taken_without_stock: bool = True
    reminder_tolerance_minutes: int = 1
    low_stock_rule: LowStockRule = LowStockRule.DOSES

    @classmethod
    def from_settings(cls, settings) -> "InventoryPolicy":
        return cls(
            allow_taken_without_stock=settings.allow_taken_without_stock,
            reminder_tolerance_minutes=settings.reminder_tolerance_minutes,
            low_stock_rule=LowStockRule(settings.low_stock_rule),
        )


def dose_amount_of(record: MedicationRecord) -> int:
    return derive_dose_amount(record.dosage)


def doses_remaining_of(record: MedicationRecord) -> int:
    return derive_doses_remaining(record.quantity, dose_amount_of(record))


def compute_low_stock_set(
    records: Iterable[MedicationRecord],
    rule: LowStockRule = LowStockRule.DOSES,
) -> list[MedicationRecord]:
    """Pending records whose stock is low, in insertion order."""
    return [
        record for record in records
        if record.status is ReminderStatus.PENDING
        and check_low_stock(
            record.quantity, record.refill_threshold, dose_amount_of(record), rule
        )
    ]


class MedicationInventory:
    """Owner of the medication records for one session.

    All transitions happen here: adding, deleting, marking taken or
    missed, adjusting quantity and scanning for due reminders. Alerts
    are handed to the notifier; its result never changes inventory state.
    Unknown ids are ignored.
    """

    def __init__(
        self,
        notifier: Optional[Notifier] = None,
        policy: Optional[InventoryPolicy] = None,
    ):
        """Initialize inventory.

        Args:
            notifier: Collaborator that delivers alerts
            policy: Inventory policy, defaults to observed behavior
        """
        self.notifier = notifier
        self.policy = policy or InventoryPolicy()
        self._records: list[MedicationRecord] = []
        self._ids = itertools.count(1)
        logger.debug(f"MedicationInventory initialized with {self.policy}")

    @property
    def records(self) -> tuple[MedicationRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, medication_id: int) -> Optional[MedicationRecord]:
        for record in self._records:
            if record.id == medication_id:
                return record
        return None

    def add(
        self,
        name: str,
        time: str,
        dosage: str,
        instructions: str = "",
        frequency: Union[Frequency, str] = Frequency.DAILY,
        quantity: int = DEFAULT_QUANTITY,
        refill_threshold: int = DEFAULT_REFILL_THRESHOLD,
    ) -> MedicationRecord:
        """Add a medication to the end of the collection.

        Input is not validated here; the caller is responsible for
        non-empty name, time and dosage.

        Returns:
            Created record with status pending

        Raises:
            ValueError: If frequency is not a known Frequency value
        """
        record = MedicationRecord(
            id=next(self._ids),
            name=name,
            time=time,
            dosage=dosage,
            instructions=instructions,
            frequency=Frequency(frequency),
            status=ReminderStatus.PENDING,
            quantity=quantity,
            refill_threshold=refill_threshold,
        )
        self._records.append(record)

        logger.info(
            f"Added medication {record.id}: {name} at {time} "
            f"(dosage: {dosage}, quantity: {quantity}, threshold: {refill_threshold})"
        )
        logger.debug(f"Added record: {record.to_dict()}")
        self._emit(
            AlertKind.ADDED,
            "Medicine Reminder Added",
            f"{name} reminder has been set for {time} ({record.frequency.value})",
            record,
        )
        return record

    def delete(self, medication_id: int) -> bool:
        """Remove a medication. Deleting an unknown id does nothing.

        Returns:
            True if a record was removed
        """
        record = self.get(medication_id)
        if record is None:
            logger.debug(f"Delete ignored, medication {medication_id} not found")
            return False

        self._records.remove(record)
        logger.info(f"Deleted medication {medication_id} ({record.name})")
        logger.debug(f"Deleted record: {record.to_dict()}")
        self._emit(AlertKind.DELETED, "Reminder deleted", "The reminder has been removed", record)
        return True

    def change_status(
        self,
        medication_id: int,
        new_status: Union[ReminderStatus, str],
    ) -> Optional[MedicationRecord]:
        """Mark a medication taken or missed.

        Taking a dose removes one dose amount from stock. When stock is
        short of a dose nothing is removed and an insufficient quantity
        alert is raised; the status still becomes taken unless the policy
        forbids it.

        Returns:
            Updated record, or None if the id is unknown

        Raises:
            ValueError: If new_status is pending
        """
        new_status = ReminderStatus(new_status)
        if new_status is ReminderStatus.PENDING:
            raise ValueError("Status cannot be changed back to pending")

        record = self.get(medication_id)
        if record is None:
            logger.debug(f"Status change ignored, medication {medication_id} not found")
            return None

        if new_status is ReminderStatus.TAKEN:
            if not self._take_dose(record):
                return record
            record.status = ReminderStatus.TAKEN
            self._emit(
                AlertKind.TAKEN,
                f"{record.name} Taken",
                "Great job! You've marked this medicine as taken.",
                record,
            )
        else:
            record.status = ReminderStatus.MISSED
            self._emit(
                AlertKind.MISSED,
                f"{record.name} Missed",
                "You've marked this medicine as missed. Don't forget next time!",
                record,
            )

        logger.info(f"Medication {record.id} ({record.name}) marked {record.status.value}")
        return record

    def _take_dose(self, record: MedicationRecord) -> bool:
        """Remove one dose from stock.

        Returns:
            False if the status change must not proceed
        """
        dose_amount = dose_amount_of(record)

        if record.quantity < dose_amount:
            self._emit(
                AlertKind.INSUFFICIENT_QUANTITY,
                "Insufficient Quantity",
                f"Not enough {record.name} left for a complete dose.",
                record,
                doses_remaining=0,
            )
            if not self.policy.allow_taken_without_stock:
                logger.warning(
                    f"Refused to mark medication {record.id} taken: "
                    f"quantity {record.quantity} < dose {dose_amount}"
                )
                return False
            return True

        record.quantity -= dose_amount
        doses_left = derive_doses_remaining(record.quantity, dose_amount)
        logger.info(
            f"Took {dose_amount} of medication {record.id}, "
            f"{record.quantity} left ({doses_left} doses)"
        )

        if 0 < record.quantity <= record.refill_threshold:
            self._emit(
                AlertKind.RUNNING_LOW,
                f"{record.name} - Running Low",
                f"After taking this dose, you have {doses_left} doses left. "
                f"Please refill soon.",
                record,
                doses_remaining=doses_left,
            )
        elif record.quantity == 0:
            self._emit(
                AlertKind.OUT_OF_STOCK,
                f"{record.name} - Out of Stock!",
                "This was your last dose! You need to refill immediately.",
                record,
                doses_remaining=0,
            )
        return True

    def change_quantity(self, medication_id: int, new_quantity: int) -> Optional[MedicationRecord]:
        """Set quantity on hand and raise low-stock alerts.

        Returns:
            Updated record, or None if the id is unknown

        Raises:
            ValueError: If new_quantity is negative
        """
        if new_quantity < 0:
            raise ValueError(f"Quantity cannot be negative: {new_quantity}")

        record = self.get(medication_id)
        if record is None:
            logger.debug(f"Quantity change ignored, medication {medication_id} not found")
            return None

        record.quantity = new_quantity
        doses_left = doses_remaining_of(record)
        logger.info(
            f"Quantity of medication {record.id} set to {new_quantity} ({doses_left} doses)"
        )

        if 0 < new_quantity <= record.refill_threshold:
            noun = "dose" if doses_left == 1 else "doses"
            self._emit(
                AlertKind.RUNNING_LOW,
                f"{record.name} Running Low",
                f"You only have {doses_left} {noun} of {record.name} left. "
                f"Consider refilling soon.",
                record,
                doses_remaining=doses_left,
            )
        elif new_quantity == 0:
            self._emit(
                AlertKind.DEPLETED,
                f"{record.name} Depleted",
                f"You are out of {record.name}. Please refill as soon as possible.",
                record,
                doses_remaining=0,
            )
        return record

    def increase_quantity(self, medication_id: int) -> Optional[MedicationRecord]:
        """Add one dose amount to stock."""
        record = self.get(medication_id)
        if record is None:
            return None
        return self.change_quantity(medication_id, record.quantity + dose_amount_of(record))

    def decrease_quantity(self, medication_id: int) -> Optional[MedicationRecord]:
        """Remove one dose amount from stock.

        Returns:
            Updated record, or None if the id is unknown or stock is short
        """
        record = self.get(medication_id)
        if record is None:
            return None
        dose_amount = dose_amount_of(record)
        if record.quantity < dose_amount:
            logger.debug(f"Decrease refused for medication {medication_id}: stock below one dose")
            return None
        return self.change_quantity(medication_id, record.quantity - dose_amount)

    def group_by_status(self) -> dict[ReminderStatus, list[MedicationRecord]]:
        """Records grouped by status, each group in insertion order."""
        groups: dict[ReminderStatus, list[MedicationRecord]] = {
            status: [] for status in ReminderStatus
        }
        for record in self._records:
            groups[record.status].append(record)
        return groups

    def compute_low_stock_set(
        self,
        rule: Optional[LowStockRule] = None,
    ) -> list[MedicationRecord]:
        """Pending records with low stock under the policy's banner rule."""
        return compute_low_stock_set(self._records, rule or self.policy.low_stock_rule)

    def tick(self, now: datetime) -> list[Alert]:
        """Scan pending records and remind about the ones due now.

        Status is never changed here.

        Args:
            now: Current local time

        Returns:
            Reminder alerts emitted during this scan
        """
        alerts = []
        for record in list(self._records):
            if record.status is not ReminderStatus.PENDING:
                continue
            if not is_time_to_take(record.time, now, self.policy.reminder_tolerance_minutes):
                continue

            doses_left = doses_remaining_of(record)
            alerts.append(self._emit(
                AlertKind.TIME_TO_TAKE,
                f"Time to take {record.name}",
                f"Your dosage is {record.dosage}. You have {doses_left} doses remaining.",
                record,
                doses_remaining=doses_left,
            ))

        if alerts:
            logger.info(f"Sent {len(alerts)} reminder(s) at {now.strftime('%H:%M')}")
        return alerts

    def _emit(
        self,
        kind: AlertKind,
        title: str,
        body: str,
        record: Optional[MedicationRecord] = None,
        doses_remaining: Optional[int] = None,
    ) -> Alert:
        alert = Alert(
            kind=kind,
            title=title,
            body=body,
            medication_id=record.id if record else None,
            doses_remaining=doses_remaining,
        )
        if self.notifier is not None:
            self.notifier.notify(alert)
        log_operation(
            f"alert_{kind.value}",
            medication_id=alert.medication_id,
            dispatched=alert.dispatched,
        )
        return alert
