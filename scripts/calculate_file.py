#!/usr/bin/env python
"""
Calculate purchases for a portfolio stored in a YAML file.

This script can be run directly without installing the package:
    python scripts/calculate_file.py portfolio.yaml

Or after installing:
    balancer import portfolio.yaml && balancer calculate
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from balancer.config.portfolio_file import load_portfolio_file, save_portfolio_file
from balancer.core.exceptions import BalancerError
from balancer.formatting import format_currency, format_percentage
from balancer.portfolio.rebalance import calculate
from balancer.portfolio.report import build_report, targets_complete


def main(path: Path, output: Path | None = None) -> int:
    """Print the purchases for the portfolio in ``path``."""
    try:
        portfolio = load_portfolio_file(path)
    except BalancerError as e:
        print(f"Error: {e}")
        return 1

    print(f"\n{'='*50}")
    print("Balancer")
    print(f"{'='*50}")
    print(f"File: {path}")
    print(f"Positions: {len(portfolio.positions)}")
    print(f"Balance: {format_currency(portfolio.balance)}")

    if not targets_complete(portfolio):
        print(
            f"\nError: targets add up to {format_percentage(portfolio.target_sum)}, "
            "expected 100%"
        )
        return 1

    try:
        result = calculate(portfolio)
    except BalancerError as e:
        print(f"\nError: {e}")
        return 1

    report = build_report(portfolio, result)

    print()
    for change in report.changes:
        print(
            f"{change.ticker:<8} {change.old_quantity:>6} -> {change.new_quantity:<6} "
            f"{format_percentage(change.new_percentage):>8} "
            f"(target {format_percentage(change.target_percentage)})"
        )

    print(f"\nShares bought: {report.shares_bought}")
    print(f"Cash spent: {format_currency(report.cash_spent)}")
    print(f"Remaining balance: {format_currency(result.balance)}")

    if output is not None:
        try:
            save_portfolio_file(result, output)
        except BalancerError as e:
            print(f"\nError: {e}")
            return 1
        print(f"\nSaved result to {output}")

    return 0


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Calculate purchases for a portfolio")
    parser.add_argument("path", type=Path, help="YAML portfolio file")
    parser.add_argument(
        "--output", "-o", type=Path, default=None, help="Write the result to this file"
    )

    args = parser.parse_args()

    sys.exit(main(path=args.path, output=args.output))
