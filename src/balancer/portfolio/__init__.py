"""Cash deployment and result reporting."""

from balancer.portfolio.rebalance import (
    DEFAULT_MAX_ITERATIONS,
    Balancer,
    calculate,
    validate_portfolio,
)
from balancer.portfolio.report import (
    PositionChange,
    RebalanceReport,
    build_report,
    targets_complete,
)

__all__ = [
    "DEFAULT_MAX_ITERATIONS",
    "Balancer",
    "PositionChange",
    "RebalanceReport",
    "build_report",
    "calculate",
    "targets_complete",
    "validate_portfolio",
]
