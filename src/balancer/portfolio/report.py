"""Comparison of a portfolio before and after a calculation."""

from __future__ import annotations

from dataclasses import dataclass, field

from balancer.core.models import Portfolio


@dataclass
class PositionChange:
    """Before/after view of a single position.

    Attributes:
        ticker: Position ticker
        price: Price per share (unchanged by a calculation)
        target_percentage: Target allocation (0-100)
        old_quantity: Shares held before
        new_quantity: Shares held after
        old_percentage: Share of invested value before (0-100)
        new_percentage: Share of invested value after (0-100)
    """

    ticker: str
    price: float
    target_percentage: float
    old_quantity: int
    new_quantity: int
    old_percentage: float
    new_percentage: float

    @property
    def old_total(self) -> float:
        return self.old_quantity * self.price

    @property
    def new_total(self) -> float:
        return self.new_quantity * self.price

    @property
    def diff_quantity(self) -> int:
        return self.new_quantity - self.old_quantity

    @property
    def diff_total(self) -> float:
        return self.new_total - self.old_total

    @property
    def diff_percentage(self) -> float:
        return self.new_percentage - self.old_percentage

    @property
    def target_gap(self) -> float:
        """Percentage points still short of (positive) or over (negative) target."""
        return self.target_percentage - self.new_percentage


@dataclass
class RebalanceReport:
    """Result of comparing the portfolio before and after a calculation."""

    old: Portfolio
    new: Portfolio
    changes: list[PositionChange] = field(default_factory=list)

    @property
    def balance_diff(self) -> float:
        return self.new.balance - self.old.balance

    @property
    def target_sum(self) -> float:
        return self.old.target_sum

    @property
    def shares_bought(self) -> int:
        return sum(c.diff_quantity for c in self.changes)

    @property
    def cash_spent(self) -> float:
        return self.old.balance - self.new.balance

    @property
    def has_changes(self) -> bool:
        """Check if the calculation bought anything."""
        return any(c.diff_quantity != 0 for c in self.changes)


def _percentage(value: float, total: float) -> float:
    if total <= 0:
        return 0.0
    return value / total * 100


def build_report(old: Portfolio, new: Portfolio) -> RebalanceReport:
    """Compare two snapshots of the same portfolio.

    Percentages are relative to invested value (cash excluded), on each side.

    Args:
        old: Portfolio passed to the balancer
        new: Portfolio returned by the balancer

    Returns:
        RebalanceReport with one change per position of ``new``

    Raises:
        PositionNotFoundError: If ``new`` has a ticker missing from ``old``
    """
    old_total = old.total_value
    new_total = new.total_value

    changes = []
    for position in new.positions:
        previous = old.get_position(position.ticker)
        changes.append(
            PositionChange(
                ticker=position.ticker,
                price=position.price,
                target_percentage=position.target_percentage,
                old_quantity=previous.quantity,
                new_quantity=position.quantity,
                old_percentage=_percentage(previous.value, old_total),
                new_percentage=_percentage(position.value, new_total),
            )
        )

    return RebalanceReport(old=old, new=new, changes=changes)


def targets_complete(portfolio: Portfolio, tolerance: float = 0.01) -> bool:
    """Check whether the targets add up to 100%.

    This is the caller-side precondition for a meaningful calculation; the
    balancer itself accepts any targets.

    Args:
        portfolio: Portfolio to check
        tolerance: Allowed distance from 100, in percentage points
    """
    return abs(portfolio.target_sum - 100.0) <= tolerance
