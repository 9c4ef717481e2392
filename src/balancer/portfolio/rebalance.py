"""Greedy cash deployment toward target allocations."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from balancer.core.exceptions import InvalidPortfolioError, RebalanceError
from balancer.core.models import Portfolio, Position

# Upper bound on single-share purchases per calculation
DEFAULT_MAX_ITERATIONS = 1_000_000


@dataclass
class _Holding:
    """Working state for one position during a calculation."""

    position: Position
    quantity: int
    current_value: float
    target_value: float

    @property
    def deficit(self) -> float:
        return self.target_value - self.current_value


def validate_portfolio(portfolio: Portfolio) -> None:
    """Check the preconditions the purchase loop depends on.

    Raises:
        InvalidPortfolioError: If the portfolio cannot be rebalanced
    """
    if not isinstance(portfolio, Portfolio):
        raise InvalidPortfolioError(
            f"Expected a Portfolio, got {type(portfolio).__name__}"
        )

    for position in portfolio.positions:
        if position.price <= 0:
            raise InvalidPortfolioError(
                f"{position.ticker}: price must be positive, got {position.price}"
            )


class Balancer:
    """
    Deploys idle cash into whole shares to approach target allocations.

    Each pass recomputes every position's deficit (target value minus
    current value), then buys one share of each affordable under-target
    position, largest deficit first. Passes repeat until one buys nothing.
    Existing shares are never sold.

    Target values are fixed up front as a percentage of position value plus
    cash, so buying shares does not move the targets.

    Example:
        portfolio = Portfolio(
            balance=1000.0,
            positions=[
                Position("VTI", 0, 250.0, 60.0),
                Position("BND", 0, 75.0, 40.0),
            ],
        )
        result = Balancer().calculate(portfolio)
    """

    def __init__(self, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> None:
        """Initialize the balancer.

        Args:
            max_iterations: Maximum number of shares bought in one calculation.
                This bounds latency, so a valid portfolio whose balance
                covers more shares than this fails with RebalanceError.
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be positive, got {max_iterations}")
        self.max_iterations = max_iterations

    def calculate(self, portfolio: Portfolio) -> Portfolio:
        """Calculate the portfolio after deploying its cash balance.

        Args:
            portfolio: Current holdings, prices, targets and cash

        Returns:
            A new Portfolio with increased quantities and the remaining cash

        Raises:
            InvalidPortfolioError: If any price is not positive
            RebalanceError: If more than max_iterations shares would be bought
        """
        validate_portfolio(portfolio)

        total_available = portfolio.total_available
        holdings = [
            _Holding(
                position=p,
                quantity=p.quantity,
                current_value=p.value,
                target_value=total_available * (p.target_percentage / 100),
            )
            for p in portfolio.positions
        ]
        balance = portfolio.balance
        purchases = 0

        purchased = True
        while purchased:
            purchased = False

            # sorted() is stable, so equal deficits keep portfolio order
            candidates = sorted(
                (
                    h
                    for h in holdings
                    if h.deficit > 0 and h.position.price <= balance
                ),
                key=lambda h: h.deficit,
                reverse=True,
            )

            for holding in candidates:
                price = holding.position.price
                if balance < price:
                    continue

                holding.quantity += 1
                holding.current_value += price
                balance -= price
                purchased = True

                purchases += 1
                if purchases > self.max_iterations:
                    raise RebalanceError(
                        f"Exceeded {self.max_iterations} purchases; "
                        "raise max_iterations to allow larger calculations"
                    )

        logger.debug(
            f"Bought {purchases} shares across {len(holdings)} positions, "
            f"${portfolio.balance - balance:,.2f} deployed, "
            f"${balance:,.2f} remaining"
        )

        return Portfolio(
            balance=balance,
            positions=tuple(
                Position(
                    ticker=h.position.ticker,
                    quantity=h.quantity,
                    price=h.position.price,
                    target_percentage=h.position.target_percentage,
                )
                for h in holdings
            ),
        )


def calculate(
    portfolio: Portfolio, max_iterations: int = DEFAULT_MAX_ITERATIONS
) -> Portfolio:
    """Deploy a portfolio's cash with a default Balancer.

    Args:
        portfolio: Current holdings, prices, targets and cash
        max_iterations: Maximum number of shares bought

    Returns:
        A new Portfolio with the updated quantities and remaining cash
    """
    return Balancer(max_iterations=max_iterations).calculate(portfolio)
