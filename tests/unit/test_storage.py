"""Tests for key/value and portfolio storage."""

from __future__ import annotations

from pathlib import Path

import pytest

from balancer.core.exceptions import InvalidPortfolioError, PositionNotFoundError
from balancer.core.models import Portfolio, Position
from balancer.portfolio.rebalance import calculate
from balancer.storage.store import KeyValueStore, PortfolioStore, get_store


class TestKeyValueStore:
    """Tests for KeyValueStore."""

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test that the database directory is created."""
        db_path = tmp_path / "nested" / "dir" / "kv.db"
        KeyValueStore(db_path)
        assert db_path.exists()

    def test_get_missing_returns_default(self, kv_store: KeyValueStore) -> None:
        """Test defaults for absent keys."""
        assert kv_store.get("missing") is None
        assert kv_store.get("missing", {"a": 1}) == {"a": 1}

    def test_set_and_get(self, kv_store: KeyValueStore) -> None:
        """Test JSON round trip of nested values."""
        value = {"balance": 12.5, "positions": [{"ticker": "A"}]}
        kv_store.set("key", value)
        assert kv_store.get("key") == value

    def test_set_overwrites(self, kv_store: KeyValueStore) -> None:
        """Test that setting an existing key replaces its value."""
        kv_store.set("key", 1)
        kv_store.set("key", 2)
        assert kv_store.get("key") == 2
        assert kv_store.keys() == ["key"]

    def test_delete(self, kv_store: KeyValueStore) -> None:
        """Test deleting keys."""
        kv_store.set("key", "value")
        assert kv_store.delete("key") is True
        assert kv_store.delete("key") is False
        assert kv_store.get("key") is None

    def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Test that values survive reopening the database."""
        KeyValueStore(tmp_path / "kv.db").set("key", [1, 2, 3])
        assert KeyValueStore(tmp_path / "kv.db").get("key") == [1, 2, 3]


class TestPortfolioStore:
    """Tests for PortfolioStore."""

    def test_load_empty(self, portfolio_store: PortfolioStore) -> None:
        """Test that an empty store loads an empty portfolio."""
        assert portfolio_store.load() == Portfolio()

    def test_save_and_load(
        self, portfolio_store: PortfolioStore, sample_portfolio: Portfolio
    ) -> None:
        """Test saving a portfolio."""
        portfolio_store.save(sample_portfolio)
        assert portfolio_store.load() == sample_portfolio

    def test_save_calculated_portfolio(
        self, portfolio_store: PortfolioStore, sample_portfolio: Portfolio
    ) -> None:
        """Test applying a calculation result."""
        result = calculate(sample_portfolio)
        portfolio_store.save(result)
        assert portfolio_store.load() == result

    def test_set_balance(self, portfolio_store: PortfolioStore) -> None:
        """Test updating the cash balance."""
        portfolio_store.set_balance(250.0)
        assert portfolio_store.load().balance == 250.0

    def test_set_negative_balance_rejected(
        self, portfolio_store: PortfolioStore
    ) -> None:
        """Test that an invalid balance is not saved."""
        portfolio_store.set_balance(100.0)
        with pytest.raises(InvalidPortfolioError):
            portfolio_store.set_balance(-5.0)
        assert portfolio_store.load().balance == 100.0

    def test_add_position(self, portfolio_store: PortfolioStore) -> None:
        """Test that positions are appended in order."""
        portfolio_store.add_position(Position("A", 0, 10.0, 50.0))
        portfolio_store.add_position(Position("B", 1, 20.0, 50.0))

        assert portfolio_store.load().tickers == ["A", "B"]

    def test_add_duplicate_rejected(self, portfolio_store: PortfolioStore) -> None:
        """Test that an existing ticker cannot be added again."""
        portfolio_store.add_position(Position("A", 0, 10.0, 50.0))
        with pytest.raises(InvalidPortfolioError, match="A already exists"):
            portfolio_store.add_position(Position("A", 5, 10.0, 50.0))

    def test_update_position(
        self, portfolio_store: PortfolioStore, sample_portfolio: Portfolio
    ) -> None:
        """Test that updates change only the given fields."""
        portfolio_store.save(sample_portfolio)
        portfolio_store.update_position("VXUS", price=62.5)

        portfolio = portfolio_store.load()
        vxus = portfolio.get_position("VXUS")
        assert vxus.price == 62.5
        assert vxus.quantity == 5
        assert vxus.target_percentage == 25.0
        assert portfolio.tickers == ["VTI", "VXUS", "BND"]

    def test_update_all_fields(self, portfolio_store: PortfolioStore) -> None:
        """Test updating quantity, price and target together."""
        portfolio_store.add_position(Position("A", 0, 10.0, 50.0))
        portfolio_store.update_position(
            "A", quantity=3, price=11.0, target_percentage=100.0
        )
        assert portfolio_store.load().get_position("A") == Position(
            "A", 3, 11.0, 100.0
        )

    def test_update_missing_position(self, portfolio_store: PortfolioStore) -> None:
        """Test updating an unknown ticker."""
        with pytest.raises(PositionNotFoundError):
            portfolio_store.update_position("A", price=1.0)

    def test_update_invalid_value(self, portfolio_store: PortfolioStore) -> None:
        """Test that invalid updates are rejected."""
        portfolio_store.add_position(Position("A", 0, 10.0, 50.0))
        with pytest.raises(InvalidPortfolioError):
            portfolio_store.update_position("A", target_percentage=150.0)
        assert portfolio_store.load().get_position("A").target_percentage == 50.0

    def test_remove_position(
        self, portfolio_store: PortfolioStore, sample_portfolio: Portfolio
    ) -> None:
        """Test removing a position."""
        portfolio_store.save(sample_portfolio)
        portfolio_store.remove_position("VXUS")
        assert portfolio_store.load().tickers == ["VTI", "BND"]

    def test_remove_missing_position(self, portfolio_store: PortfolioStore) -> None:
        """Test removing an unknown ticker."""
        with pytest.raises(PositionNotFoundError):
            portfolio_store.remove_position("A")

    def test_custom_key(self, kv_store: KeyValueStore) -> None:
        """Test that stores with different keys are independent."""
        first = PortfolioStore(kv_store, key="first")
        second = PortfolioStore(kv_store, key="second")

        first.set_balance(10.0)
        assert second.load().balance == 0.0


class TestGetStore:
    """Tests for the get_store accessor."""

    def test_get_store_with_path(self, tmp_path: Path) -> None:
        """Test that a new path creates a new store."""
        store = get_store(tmp_path / "a.db")
        assert store.kv.db_path == tmp_path / "a.db"
        assert get_store() is store

        other = get_store(tmp_path / "b.db")
        assert other is not store
