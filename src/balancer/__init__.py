"""Whole-share cash deployment toward target allocations."""

__version__ = "0.1.0"
