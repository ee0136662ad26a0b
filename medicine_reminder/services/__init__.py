"""Services for the medicine reminder."""

from .inventory import (
    InventoryPolicy,
    MedicationInventory,
    compute_low_stock_set,
    doses_remaining_of,
    dose_amount_of,
)
from .notifications import (
    LogTransport,
    NotificationDispatcher,
    PermissionState,
    TelegramTransport,
)
from .rules import (
    LowStockRule,
    derive_dose_amount,
    derive_doses_remaining,
    derive_form_defaults,
    percent_remaining,
)
from .scheduler import ReminderScheduler

__all__ = [
    "InventoryPolicy",
    "MedicationInventory",
    "compute_low_stock_set",
    "dose_amount_of",
    "doses_remaining_of",
    "LogTransport",
    "NotificationDispatcher",
    "PermissionState",
    "TelegramTransport",
    "LowStockRule",
    "derive_dose_amount",
    "derive_doses_remaining",
    "derive_form_defaults",
    "percent_remaining",
    "ReminderScheduler",
]
