"""Currency and percentage formatting for console output."""

from __future__ import annotations

from typing import Literal


def format_currency(value: float, symbol: str = "$") -> str:
    """Format a money amount, e.g. ``$1,234.50`` or ``-$3.00``."""
    if value < 0:
        return f"-{symbol}{abs(value):,.2f}"
    return f"{symbol}{value:,.2f}"


def format_percentage(value: float) -> str:
    """Format a 0-100 percentage, e.g. ``12.34%``."""
    return f"{value:.2f}%"


def format_signed(
    diff: float,
    kind: Literal["money", "percentage"] | None = None,
    symbol: str = "$",
) -> str:
    """Format a change as rich markup: green when positive, red when negative.

    Args:
        diff: Change to format
        kind: "money", "percentage", or None for a plain number
        symbol: Currency symbol used when kind is "money"

    Returns:
        Markup string, empty when diff is zero
    """
    if diff == 0:
        return ""

    if kind == "money":
        text = format_currency(diff, symbol)
    elif kind == "percentage":
        text = format_percentage(diff)
    else:
        text = str(diff)

    if diff > 0:
        return f"[green]+{text}[/green]"
    return f"[red]{text}[/red]"
