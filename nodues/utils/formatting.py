# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Formatting helpers for message copy."""

from decimal import Decimal

CURRENCY_SYMBOL = "₹"


def format_amount(value: Decimal | int | float | str | None) -> str:
    """Format a money amount the way students see it.

    Integral amounts print without decimals (10000, not 10000.00);
    fractional amounts keep only their significant digits.

    Args:
        value: Amount to format. None formats as "0".

    Returns:
        Formatted amount without currency symbol.
    """
    if value is None:
        return "0"

    amount = value if isinstance(value, Decimal) else Decimal(str(value))
    if amount == amount.to_integral_value():
        return str(int(amount))
    return format(amount.normalize(), "f")


def format_rupees(value: Decimal | int | float | str | None) -> str:
    """Format an amount with the rupee sign (e.g. ₹30000)."""
    return f"{CURRENCY_SYMBOL}{format_amount(value)}"


def pluralize(count: int, word: str) -> str:
    """Append "s" to a word when count is greater than one."""
    return word if count <= 1 else f"{word}s"
