"""Exception hierarchy for the balancer package."""


class BalancerError(Exception):
    """Base class for all balancer errors."""


class InvalidPortfolioError(BalancerError, ValueError):
    """Raised when a portfolio violates the rebalancer's preconditions."""


class RebalanceError(BalancerError):
    """Raised when a calculation cannot complete."""


class PositionNotFoundError(BalancerError, KeyError):
    """Raised when a ticker is not present in the portfolio."""

    def __str__(self) -> str:
        # KeyError wraps its message in quotes
        return str(self.args[0]) if self.args else ""


class PortfolioFileError(BalancerError):
    """Raised when a portfolio file cannot be read or is invalid."""
