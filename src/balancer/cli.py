"""Command-line interface for the portfolio balancer."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from balancer.config.settings import get_settings, setup_logging
from balancer.core.exceptions import BalancerError
from balancer.core.models import Portfolio, Position
from balancer.formatting import format_currency, format_percentage, format_signed
from balancer.portfolio.rebalance import Balancer
from balancer.portfolio.report import build_report, targets_complete
from balancer.storage import PortfolioStore, get_store

app = typer.Typer(
    name="balancer",
    help="Deploy cash into whole shares to approach target allocations",
    add_completion=False,
)
console = Console()


@app.callback()
def main_callback() -> None:
    """Initialize logging on startup."""
    settings = get_settings()
    setup_logging(settings)


def _store() -> PortfolioStore:
    return get_store(get_settings().database_path)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[red]Error: {error}[/red]")
    raise typer.Exit(1)


def _print_portfolio(portfolio: Portfolio) -> None:
    """Print the positions table, balance and target sum."""
    symbol = get_settings().currency_symbol
    total_value = portfolio.total_value

    console.print(
        f"\n[bold]Balance:[/bold] {format_currency(portfolio.balance, symbol)}\n"
    )

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Ticker", style="bold")
    table.add_column("Quantity", justify="right")
    table.add_column("Price", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Current %", justify="right")
    table.add_column("Target %", justify="right")

    if not portfolio.positions:
        console.print("[dim]No positions[/dim]")
    else:
        for p in portfolio.positions:
            current_pct = p.value / total_value * 100 if total_value > 0 else 0.0
            table.add_row(
                p.ticker,
                str(p.quantity),
                format_currency(p.price, symbol),
                format_currency(p.value, symbol),
                format_percentage(current_pct),
                format_percentage(p.target_percentage),
            )
        console.print(table)

    target_color = (
        "green"
        if targets_complete(portfolio, get_settings().target_tolerance)
        else "yellow"
    )
    console.print(
        f"\nTarget sum: [{target_color}]"
        f"{format_percentage(portfolio.target_sum)}[/{target_color}]"
    )


@app.command()
def show() -> None:
    """Show the saved portfolio."""
    _print_portfolio(_store().load())


@app.command("balance")
def set_balance(
    amount: float = typer.Argument(..., help="Uncommitted cash to deploy"),
) -> None:
    """Set the cash balance."""
    try:
        portfolio = _store().set_balance(amount)
    except BalancerError as e:
        _fail(e)

    symbol = get_settings().currency_symbol
    console.print(
        f"[green]Balance set to {format_currency(portfolio.balance, symbol)}[/green]"
    )


@app.command("add")
def add_position(
    ticker: str = typer.Argument(..., help="Ticker of the new position"),
    price: float = typer.Option(..., "--price", "-p", help="Price per share"),
    target: float = typer.Option(
        0.0, "--target", "-t", help="Target allocation in percent (0-100)"
    ),
    quantity: int = typer.Option(0, "--quantity", "-q", help="Shares held"),
) -> None:
    """Add a position.

    Example: balancer add VTI --price 250.10 --target 60 --quantity 4
    """
    try:
        position = Position(
            ticker=ticker.strip(),
            quantity=quantity,
            price=price,
            target_percentage=target,
        )
        _store().add_position(position)
    except BalancerError as e:
        _fail(e)

    console.print(f"[green]Added {position.ticker}[/green]")


@app.command("update")
def update_position(
    ticker: str = typer.Argument(..., help="Ticker of the position to change"),
    price: float | None = typer.Option(None, "--price", "-p", help="Price per share"),
    target: float | None = typer.Option(
        None, "--target", "-t", help="Target allocation in percent (0-100)"
    ),
    quantity: int | None = typer.Option(None, "--quantity", "-q", help="Shares held"),
) -> None:
    """Change the quantity, price or target of a position."""
    ticker = ticker.strip()
    try:
        _store().update_position(
            ticker,
            quantity=quantity,
            price=price,
            target_percentage=target,
        )
    except BalancerError as e:
        _fail(e)

    console.print(f"[green]Updated {ticker}[/green]")


@app.command("remove")
def remove_position(
    ticker: str = typer.Argument(..., help="Ticker of the position to remove"),
) -> None:
    """Remove a position."""
    ticker = ticker.strip()
    try:
        _store().remove_position(ticker)
    except BalancerError as e:
        _fail(e)

    console.print(f"[green]Removed {ticker}[/green]")


@app.command("calculate")
def calculate(
    apply: bool = typer.Option(
        False, "--apply", help="Save the calculated portfolio"
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Calculate which shares to buy with the cash balance.

    Targets must add up to 100% before calculating.
    """
    settings = get_settings()
    store = _store()
    portfolio = store.load()

    if not targets_complete(portfolio, settings.target_tolerance):
        console.print(
            "[red]The sum of the targets must be 100%, "
            f"got {format_percentage(portfolio.target_sum)}[/red]"
        )
        raise typer.Exit(1)

    try:
        result = Balancer(max_iterations=settings.max_iterations).calculate(portfolio)
    except BalancerError as e:
        logger.error(f"Calculation failed: {e}")
        _fail(e)

    report = build_report(portfolio, result)
    symbol = settings.currency_symbol

    console.print(
        f"\n[bold]Result Balance:[/bold] "
        f"{format_currency(result.balance, symbol)} "
        f"{format_signed(report.balance_diff, 'money', symbol)}\n"
    )

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Ticker", style="bold")
    table.add_column("Quantity", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Result %", justify="right")
    table.add_column("Target %", justify="right")

    for change in report.changes:
        table.add_row(
            change.ticker,
            f"{change.new_quantity} {format_signed(change.diff_quantity)}",
            f"{format_currency(change.new_total, symbol)} "
            f"{format_signed(change.diff_total, 'money', symbol)}",
            f"{format_percentage(change.new_percentage)} "
            f"{format_signed(change.diff_percentage, 'percentage')}",
            format_percentage(change.target_percentage),
        )

    console.print(table)
    console.print(
        f"\nShares bought: {report.shares_bought}, "
        f"cash spent: {format_currency(report.cash_spent, symbol)}"
    )

    if not apply:
        return

    if not report.has_changes:
        console.print("\n[yellow]Nothing to apply.[/yellow]")
        return

    if not yes and not typer.confirm("\nApply these changes?"):
        console.print("Cancelled.")
        return

    store.save(result)
    console.print("\n[green]Portfolio updated.[/green]")


@app.command("import")
def import_portfolio(
    path: Path = typer.Argument(..., help="YAML portfolio file"),
) -> None:
    """Replace the saved portfolio with one read from a YAML file."""
    from balancer.config.portfolio_file import load_portfolio_file

    try:
        portfolio = load_portfolio_file(path)
    except BalancerError as e:
        _fail(e)

    _store().save(portfolio)
    console.print(
        f"[green]Imported {len(portfolio.positions)} positions from {path}[/green]"
    )


@app.command("export")
def export_portfolio(
    path: Path = typer.Argument(..., help="Destination YAML file"),
) -> None:
    """Write the saved portfolio to a YAML file."""
    from balancer.config.portfolio_file import save_portfolio_file

    try:
        save_portfolio_file(_store().load(), path)
    except BalancerError as e:
        _fail(e)

    console.print(f"[green]Exported portfolio to {path}[/green]")


@app.command("config")
def show_config() -> None:
    """Show effective settings."""
    settings = get_settings()

    console.print("\n[bold blue]Balancer Configuration[/bold blue]\n")
    console.print(f"  Database: {settings.database_path}")
    console.print(f"  Logs: {settings.logs_path}")
    console.print(f"  Log level: {settings.log_level}")
    console.print(f"  Max purchases per calculation: {settings.max_iterations:,}")
    console.print(f"  Target tolerance: {settings.target_tolerance} pp")
    console.print(f"  Currency symbol: {settings.currency_symbol}")
    console.print()


@app.command()
def version() -> None:
    """Show version information."""
    from balancer import __version__

    console.print(f"Balancer version {__version__}")


if __name__ == "__main__":
    app()
