"""Unit tests for inventory rules."""

import pytest

from medicine_reminder.services.rules import (
    LowStockRule,
    check_low_stock,
    derive_dose_amount,
    derive_doses_remaining,
    derive_form_defaults,
    is_insufficient_for_dose,
    is_low_stock,
    is_low_stock_in_doses,
    percent_remaining,
)


@pytest.mark.parametrize(
    "dosage, expected",
    [
        ("2 pills", 2),
        ("take as needed", 1),
        ("", 1),
        ("500 mg twice", 500),
        ("1/2 tablet", 1),
        ("0 pills", 1),
        ("dose: 3 tabs, 2 times", 3),
    ],
)
def test_derive_dose_amount(dosage, expected):
    """Dose amount is the first integer in the text, at least 1."""
    assert derive_dose_amount(dosage) == expected


def test_derive_dose_amount_handles_none():
    """Missing dosage text falls back to a single unit."""
    assert derive_dose_amount(None) == 1


@pytest.mark.parametrize(
    "quantity, dose, expected",
    [
        (10, 2, 5),
        (0, 2, 0),
        (7, 2, 3),
        (5, 0, 5),
    ],
)
def test_derive_doses_remaining(quantity, dose, expected):
    """Doses remaining floors and never divides by zero."""
    assert derive_doses_remaining(quantity, dose) == expected


def test_low_stock_rules_disagree_when_threshold_not_multiple_of_dose():
    """Quantity rule and dose rule differ at the boundary."""
    # quantity 6, threshold 5, dose 2: 6 > 5 but 3 doses > floor(5 / 2) = 2
    assert not is_low_stock(6, 5)
    assert not is_low_stock_in_doses(6, 5, 2)

    # quantity 5, threshold 5, dose 2: 5 <= 5 but 2 doses <= 2 as well
    assert is_low_stock(5, 5)
    assert is_low_stock_in_doses(5, 5, 2)

    # quantity 7, threshold 6, dose 4: 7 > 6 yet 1 dose <= floor(6 / 4) = 1
    assert not is_low_stock(7, 6)
    assert is_low_stock_in_doses(7, 6, 4)


def test_check_low_stock_selects_rule():
    """check_low_stock dispatches on the rule."""
    assert check_low_stock(7, 6, 4, LowStockRule.DOSES)
    assert not check_low_stock(7, 6, 4, LowStockRule.QUANTITY)


def test_is_insufficient_for_dose():
    """Insufficient when stock is below one dose."""
    assert is_insufficient_for_dose(1, 2)
    assert not is_insufficient_for_dose(2, 2)
    assert is_insufficient_for_dose(0, 0)


@pytest.mark.parametrize(
    "quantity, threshold, expected",
    [
        (15, 5, 100),
        (30, 5, 100),
        (5, 5, 33),
        (0, 5, 0),
        (3, 0, 100),
        (0, 0, 0),
    ],
)
def test_percent_remaining(quantity, threshold, expected):
    """Percent is relative to three times the threshold and capped at 100."""
    assert percent_remaining(quantity, threshold) == expected


def test_form_defaults_follow_dose_amount():
    """A numeric dosage suggests a 15-day supply and a 5-day threshold."""
    assert derive_form_defaults("2 pills") == (30, 10)
    assert derive_form_defaults("1 tablet") == (15, 5)


def test_form_defaults_without_number():
    """Dosage without a number keeps the plain defaults."""
    assert derive_form_defaults("as needed") == (30, 5)
    assert derive_form_defaults("") == (30, 5)
