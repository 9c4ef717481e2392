"""Tests for console formatting helpers."""

from __future__ import annotations

from balancer.formatting import format_currency, format_percentage, format_signed


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_positive(self) -> None:
        assert format_currency(1234.5) == "$1,234.50"

    def test_negative(self) -> None:
        assert format_currency(-3) == "-$3.00"

    def test_custom_symbol(self) -> None:
        assert format_currency(10, symbol="€") == "€10.00"


class TestFormatPercentage:
    """Tests for format_percentage."""

    def test_rounds_to_two_places(self) -> None:
        assert format_percentage(12.345678) == "12.35%"

    def test_negative(self) -> None:
        assert format_percentage(-1.5) == "-1.50%"


class TestFormatSigned:
    """Tests for format_signed."""

    def test_zero_is_empty(self) -> None:
        """Test that unchanged values render nothing."""
        assert format_signed(0) == ""
        assert format_signed(0.0, "money") == ""

    def test_positive_quantity(self) -> None:
        assert format_signed(3) == "[green]+3[/green]"

    def test_negative_money(self) -> None:
        assert format_signed(-965.0, "money") == "[red]-$965.00[/red]"

    def test_positive_percentage(self) -> None:
        assert format_signed(2.5, "percentage") == "[green]+2.50%[/green]"
