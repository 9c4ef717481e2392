"""Settings and portfolio files."""

from balancer.config.portfolio_file import (
    PortfolioFile,
    PositionEntry,
    load_portfolio_file,
    save_portfolio_file,
)
from balancer.config.settings import Settings, get_settings, setup_logging

__all__ = [
    "PortfolioFile",
    "PositionEntry",
    "Settings",
    "get_settings",
    "load_portfolio_file",
    "save_portfolio_file",
    "setup_logging",
]
