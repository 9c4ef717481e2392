"""Core domain models and types."""

from balancer.core.exceptions import (
    BalancerError,
    InvalidPortfolioError,
    PortfolioFileError,
    PositionNotFoundError,
    RebalanceError,
)
from balancer.core.models import Portfolio, Position

__all__ = [
    "BalancerError",
    "InvalidPortfolioError",
    "Portfolio",
    "PortfolioFileError",
    "Position",
    "PositionNotFoundError",
    "RebalanceError",
]
