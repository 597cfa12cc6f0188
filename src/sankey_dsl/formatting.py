"""Number formatting shared by diagnostics and the serializer."""

from __future__ import annotations


def format_number(value: float, precision: int = 5) -> str:
    """Format a number with at most ``precision`` decimals and no trailing zeros.

    216.7614485930364 -> '216.76145', 8.0 -> '8'.
    """
    text = f"{value:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        return "0"
    return text


def decimal_places(amount: str) -> int:
    """Count the digits to the right of the decimal point in a literal amount."""
    _, _, fraction = amount.partition(".")
    return len(fraction)
