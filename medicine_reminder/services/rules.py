"""Inventory rules: pure derivations over dosage text and stock levels."""

import re
from enum import Enum

from loguru import logger

DEFAULT_QUANTITY = 30
DEFAULT_REFILL_THRESHOLD = 5
SUPPLY_DAYS = 15
REFILL_DAYS = 5

_DIGITS_RE = re.compile(r"[0-9]+")


class LowStockRule(str, Enum):
    """Which comparison decides that stock is low."""

    QUANTITY = "quantity"
    DOSES = "doses"


def derive_dose_amount(dosage_text: str) -> int:
    """Units consumed per dose: the first integer in the dosage text.

    Falls back to 1 when the text has no digits. A parsed zero is clamped
    to 1 so the result is always usable as a divisor.

    Examples:
        >>> derive_dose_amount("2 pills")
        2
        >>> derive_dose_amount("take as needed")
        1
    """
    match = _DIGITS_RE.search(dosage_text or "")
    if match is None:
        return 1
    try:
        amount = int(match.group(0))
    except ValueError:
        return 1
    return max(amount, 1)


def derive_doses_remaining(quantity: int, dose_amount: int) -> int:
    """Whole doses left on hand."""
    return max(quantity, 0) // max(dose_amount, 1)


def is_low_stock(quantity: int, refill_threshold: int) -> bool:
    """Quantity-based low-stock test, the canonical rule for alerts."""
    return quantity <= refill_threshold


def is_low_stock_in_doses(quantity: int, refill_threshold: int, dose_amount: int) -> bool:
    """Dose-based low-stock test used by the aggregate banner."""
    dose_amount = max(dose_amount, 1)
    return derive_doses_remaining(quantity, dose_amount) <= refill_threshold // dose_amount


def is_insufficient_for_dose(quantity: int, dose_amount: int) -> bool:
    """True when there is not enough stock for one full dose."""
    return quantity < max(dose_amount, 1)


def check_low_stock(
    quantity: int,
    refill_threshold: int,
    dose_amount: int,
    rule: LowStockRule = LowStockRule.QUANTITY,
) -> bool:
    """Apply the selected low-stock rule."""
    if rule is LowStockRule.DOSES:
        return is_low_stock_in_doses(quantity, refill_threshold, dose_amount)
    return is_low_stock(quantity, refill_threshold)


def percent_remaining(quantity: int, refill_threshold: int) -> int:
    """Stock level as a percentage of three times the refill threshold."""
    if refill_threshold <= 0:
        return 100 if quantity > 0 else 0
    return min(100, round(quantity / (refill_threshold * 3) * 100))


def derive_form_defaults(dosage_text: str) -> tuple[int, int]:
    """Suggested (quantity, refill_threshold) for a new medication.

    A dosage with a number gets a 15-day supply and a 5-day refill
    threshold. Otherwise the form defaults are used.

    Examples:
        >>> derive_form_defaults("2 pills")
        (30, 10)
        >>> derive_form_defaults("as needed")
        (30, 5)
    """
    if _DIGITS_RE.search(dosage_text or "") is None:
        return DEFAULT_QUANTITY, DEFAULT_REFILL_THRESHOLD

    dose_amount = derive_dose_amount(dosage_text)
    defaults = dose_amount * SUPPLY_DAYS, dose_amount * REFILL_DAYS
    logger.debug(f"Form defaults for dosage '{dosage_text}': {defaults}")
    return defaults
