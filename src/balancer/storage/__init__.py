"""Storage module for persisting the portfolio between runs."""

from balancer.storage.store import KeyValueStore, PortfolioStore, get_store

__all__ = ["KeyValueStore", "PortfolioStore", "get_store"]
