"""Portfolio and position value records."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import Any

from balancer.core.exceptions import InvalidPortfolioError, PositionNotFoundError


@dataclass(frozen=True)
class Position:
    """A single holding and its target allocation.

    Attributes:
        ticker: Identifier, unique within a portfolio (case-sensitive)
        quantity: Whole shares currently held
        price: Current price per share
        target_percentage: Intended share of total allocatable value (0-100)
    """

    ticker: str
    quantity: int
    price: float
    target_percentage: float

    def __post_init__(self) -> None:
        """Validate position fields."""
        if not isinstance(self.ticker, str) or not self.ticker.strip():
            raise InvalidPortfolioError("ticker must be a non-empty string")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int):
            raise InvalidPortfolioError(
                f"{self.ticker}: quantity must be an integer, got {self.quantity!r}"
            )
        if self.quantity < 0:
            raise InvalidPortfolioError(
                f"{self.ticker}: quantity cannot be negative, got {self.quantity}"
            )
        if not math.isfinite(self.price):
            raise InvalidPortfolioError(
                f"{self.ticker}: price must be finite, got {self.price}"
            )
        if not math.isfinite(self.target_percentage) or not (
            0 <= self.target_percentage <= 100
        ):
            raise InvalidPortfolioError(
                f"{self.ticker}: target_percentage must be between 0 and 100, "
                f"got {self.target_percentage}"
            )

    @property
    def value(self) -> float:
        """Market value of the holding."""
        return self.quantity * self.price

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "ticker": self.ticker,
            "quantity": self.quantity,
            "price": self.price,
            "target_percentage": self.target_percentage,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Position:
        """Create a position from a dictionary produced by to_dict()."""
        return cls(
            ticker=data["ticker"],
            quantity=int(data["quantity"]),
            price=float(data["price"]),
            target_percentage=float(data["target_percentage"]),
        )


@dataclass(frozen=True)
class Portfolio:
    """Cash balance plus an ordered set of positions.

    Instances are never mutated; the ``with_*`` helpers return copies.
    """

    balance: float = 0.0
    positions: tuple[Position, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Normalize positions and validate invariants."""
        object.__setattr__(self, "positions", tuple(self.positions))

        if not math.isfinite(self.balance):
            raise InvalidPortfolioError(f"balance must be finite, got {self.balance}")
        if self.balance < 0:
            raise InvalidPortfolioError(
                f"balance cannot be negative, got {self.balance}"
            )

        seen: set[str] = set()
        for position in self.positions:
            if position.ticker in seen:
                raise InvalidPortfolioError(f"Duplicate ticker: {position.ticker}")
            seen.add(position.ticker)

    @property
    def tickers(self) -> list[str]:
        """Tickers in portfolio order."""
        return [p.ticker for p in self.positions]

    @property
    def total_value(self) -> float:
        """Market value of all positions, excluding cash."""
        return sum(p.value for p in self.positions)

    @property
    def total_available(self) -> float:
        """Position value plus uncommitted cash."""
        return self.total_value + self.balance

    @property
    def target_sum(self) -> float:
        """Sum of all target percentages."""
        return sum(p.target_percentage for p in self.positions)

    def get_position(self, ticker: str) -> Position:
        """Get a position by ticker.

        Raises:
            PositionNotFoundError: If no position has this ticker
        """
        for position in self.positions:
            if position.ticker == ticker:
                return position
        raise PositionNotFoundError(f"No position with ticker {ticker}")

    def has_position(self, ticker: str) -> bool:
        return ticker in self.tickers

    def with_balance(self, balance: float) -> Portfolio:
        return replace(self, balance=balance)

    def with_positions(self, positions: Iterable[Position]) -> Portfolio:
        return replace(self, positions=tuple(positions))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "balance": self.balance,
            "positions": [p.to_dict() for p in self.positions],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Portfolio:
        """Create a portfolio from a dictionary produced by to_dict()."""
        return cls(
            balance=float(data.get("balance", 0.0)),
            positions=tuple(Position.from_dict(p) for p in data.get("positions", [])),
        )
