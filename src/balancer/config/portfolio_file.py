"""YAML import and export of portfolios."""

from __future__ import annotations

from pathlib import Path

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from balancer.core.exceptions import InvalidPortfolioError, PortfolioFileError
from balancer.core.models import Portfolio, Position


class PositionEntry(BaseModel):
    """A position as written in a portfolio file."""

    ticker: str = Field(min_length=1)
    quantity: int = Field(default=0, ge=0)
    price: float = Field(allow_inf_nan=False)
    target: float = Field(default=0.0, ge=0, le=100)


class PortfolioFile(BaseModel):
    """Root object of a portfolio file."""

    balance: float = Field(default=0.0, ge=0)
    positions: list[PositionEntry] = Field(default_factory=list)

    def to_portfolio(self) -> Portfolio:
        return Portfolio(
            balance=self.balance,
            positions=tuple(
                Position(
                    ticker=p.ticker,
                    quantity=p.quantity,
                    price=p.price,
                    target_percentage=p.target,
                )
                for p in self.positions
            ),
        )

    @classmethod
    def from_portfolio(cls, portfolio: Portfolio) -> PortfolioFile:
        return cls(
            balance=portfolio.balance,
            positions=[
                PositionEntry(
                    ticker=p.ticker,
                    quantity=p.quantity,
                    price=p.price,
                    target=p.target_percentage,
                )
                for p in portfolio.positions
            ],
        )


def load_portfolio_file(path: Path | str) -> Portfolio:
    """Load a portfolio from a YAML file.

    Example file:
        balance: 1500
        positions:
          - ticker: VTI
            quantity: 4
            price: 250.10
            target: 60
          - ticker: BND
            price: 72.40
            target: 40

    Raises:
        PortfolioFileError: If the file is missing, malformed or invalid
    """
    path = Path(path)

    if not path.exists():
        raise PortfolioFileError(f"Portfolio file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse portfolio file: {e}")
        raise PortfolioFileError(f"Failed to parse {path}: {e}") from e

    if not isinstance(data, dict):
        raise PortfolioFileError(f"{path}: expected a mapping at the top level")

    try:
        portfolio = PortfolioFile(**data).to_portfolio()
    except (ValidationError, InvalidPortfolioError) as e:
        raise PortfolioFileError(f"Invalid portfolio in {path}: {e}") from e

    logger.info(f"Loaded {len(portfolio.positions)} positions from {path}")
    return portfolio


def save_portfolio_file(portfolio: Portfolio, path: Path | str) -> None:
    """Save a portfolio to a YAML file.

    Raises:
        PortfolioFileError: If the portfolio cannot be written to path
    """
    path = Path(path)

    try:
        data = PortfolioFile.from_portfolio(portfolio).model_dump()
    except ValidationError as e:
        raise PortfolioFileError(f"Cannot export portfolio: {e}") from e

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        logger.error(f"Failed to write portfolio file: {e}")
        raise PortfolioFileError(f"Failed to write {path}: {e}") from e

    logger.info(f"Saved portfolio to {path}")
