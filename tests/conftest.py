"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from balancer.core.models import Portfolio, Position
from balancer.storage.store import KeyValueStore, PortfolioStore


@pytest.fixture
def sample_position() -> Position:
    """Create a sample position for testing."""
    return Position(
        ticker="VTI",
        quantity=4,
        price=250.0,
        target_percentage=60.0,
    )


@pytest.fixture
def sample_portfolio() -> Portfolio:
    """Create a three-fund portfolio with idle cash."""
    return Portfolio(
        balance=1000.0,
        positions=(
            Position("VTI", 4, 250.0, 60.0),
            Position("VXUS", 5, 60.0, 25.0),
            Position("BND", 2, 75.0, 15.0),
        ),
    )


@pytest.fixture
def kv_store(tmp_path: Path) -> KeyValueStore:
    """Create a key/value store in a temporary directory."""
    return KeyValueStore(tmp_path / "test.db")


@pytest.fixture
def portfolio_store(kv_store: KeyValueStore) -> PortfolioStore:
    """Create an empty portfolio store."""
    return PortfolioStore(kv_store)
