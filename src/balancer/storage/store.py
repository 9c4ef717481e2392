"""SQLite key/value storage for the saved portfolio."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any

from loguru import logger

from balancer.core.exceptions import InvalidPortfolioError
from balancer.core.models import Portfolio, Position

# Default database path
DEFAULT_DB_PATH = Path.home() / ".balancer" / "balancer.db"

PORTFOLIO_KEY = "portfolio"


class KeyValueStore:
    """SQLite-backed store of JSON values by string key."""

    def __init__(self, db_path: Path | str | None = None) -> None:
        """Initialize the store.

        Args:
            db_path: Path to SQLite database. Defaults to ~/.balancer/balancer.db
        """
        self.db_path = Path(db_path) if db_path else DEFAULT_DB_PATH
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with row factory."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS kv_store (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            conn.commit()
            logger.debug(f"Database initialized at {self.db_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under a key, or default if absent."""
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()

        if row is None:
            return default
        return json.loads(row["value"])

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value under a key."""
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = excluded.updated_at
            """,
                (key, json.dumps(value), datetime.now().isoformat()),
            )
            conn.commit()

    def delete(self, key: str) -> bool:
        """Delete a key.

        Returns:
            True if deleted, False if not found
        """
        with self._get_connection() as conn:
            cursor = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            deleted = cursor.rowcount > 0
            conn.commit()

        return deleted

    def keys(self) -> list[str]:
        with self._get_connection() as conn:
            rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [row["key"] for row in rows]


class PortfolioStore:
    """Saved portfolio plus the edits a user makes to it.

    Every edit loads the current portfolio, builds a new one and saves it,
    so invalid edits are rejected before anything is written.
    """

    def __init__(self, kv: KeyValueStore, key: str = PORTFOLIO_KEY) -> None:
        self.kv = kv
        self.key = key

    def load(self) -> Portfolio:
        """Load the saved portfolio, or an empty one if nothing is saved."""
        data = self.kv.get(self.key)
        if data is None:
            return Portfolio()
        return Portfolio.from_dict(data)

    def save(self, portfolio: Portfolio) -> None:
        self.kv.set(self.key, portfolio.to_dict())
        logger.info(
            f"Saved portfolio with {len(portfolio.positions)} positions "
            f"and balance {portfolio.balance:,.2f}"
        )

    def set_balance(self, balance: float) -> Portfolio:
        portfolio = self.load().with_balance(balance)
        self.save(portfolio)
        return portfolio

    def add_position(self, position: Position) -> Portfolio:
        """Append a position.

        Raises:
            InvalidPortfolioError: If the ticker already exists
        """
        current = self.load()
        if current.has_position(position.ticker):
            raise InvalidPortfolioError(f"Position {position.ticker} already exists")

        portfolio = current.with_positions([*current.positions, position])
        self.save(portfolio)
        return portfolio

    def update_position(
        self,
        ticker: str,
        quantity: int | None = None,
        price: float | None = None,
        target_percentage: float | None = None,
    ) -> Portfolio:
        """Change fields of an existing position, keeping its place.

        Raises:
            PositionNotFoundError: If the ticker does not exist
        """
        current = self.load()
        existing = current.get_position(ticker)

        updated = Position(
            ticker=ticker,
            quantity=existing.quantity if quantity is None else quantity,
            price=existing.price if price is None else price,
            target_percentage=(
                existing.target_percentage
                if target_percentage is None
                else target_percentage
            ),
        )
        portfolio = current.with_positions(
            updated if p.ticker == ticker else p for p in current.positions
        )
        self.save(portfolio)
        return portfolio

    def remove_position(self, ticker: str) -> Portfolio:
        """Remove a position.

        Raises:
            PositionNotFoundError: If the ticker does not exist
        """
        current = self.load()
        current.get_position(ticker)

        portfolio = current.with_positions(
            p for p in current.positions if p.ticker != ticker
        )
        self.save(portfolio)
        return portfolio


_store: PortfolioStore | None = None


def get_store(db_path: Path | str | None = None) -> PortfolioStore:
    """Get or create the portfolio store.

    Args:
        db_path: Optional database path. Creates a new store if provided.

    Returns:
        PortfolioStore instance
    """
    global _store
    if _store is None or db_path is not None:
        _store = PortfolioStore(KeyValueStore(db_path))
    return _store
