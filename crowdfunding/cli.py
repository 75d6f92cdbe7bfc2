"""CLI for the crowdfunding ledger.

Provides operator commands for schema setup and transaction inspection.
"""

from typing import List, Optional

import typer
from rich.console import Console
from rich.table import Table

from crowdfunding.config import get_settings
from crowdfunding.constants import ALLOWED_STATUSES
from crowdfunding.core import Currencies, Transaction
from crowdfunding.database.connection import (
    create_engine_from_url,
    get_engine,
    init_db,
    make_session_factory,
)
from crowdfunding.exceptions import CrowdfundingError
from crowdfunding.monitoring import setup_logging

app = typer.Typer(
    name="crowdfunding",
    help="Crowdfunding ledger - transactions, currencies and users",
    add_completion=False,
)

console = Console()

DatabaseUrl = typer.Option(
    None,
    "--database-url",
    "-d",
    help="SQLAlchemy database URL (defaults to CROWDFUNDING_DATABASE_URL)",
)


def _engine(database_url: Optional[str]):
    if database_url:
        return create_engine_from_url(database_url)
    return get_engine()


def _session_factory(database_url: Optional[str]):
    return make_session_factory(_engine(database_url))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Configure logging before any command runs."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"log_level": "DEBUG"})
    setup_logging(settings)


@app.command("init-db")
def init_db_command(database_url: Optional[str] = DatabaseUrl) -> None:
    """Create the ledger tables if they don't exist."""
    init_db(_engine(database_url))
    console.print("[green]Database initialized[/green]")


@app.command("show-transaction")
def show_transaction(
    transaction_id: int = typer.Argument(..., help="Transaction ID"),
    secret: Optional[str] = typer.Option(
        None, "--secret", "-s", help="Secret for decrypting service data"
    ),
    database_url: Optional[str] = DatabaseUrl,
) -> None:
    """Print a transaction and, with a secret, its service data."""
    transaction = Transaction(_session_factory(database_url)).load(transaction_id)
    if not transaction.id:
        console.print(f"[red]Error:[/red] Transaction {transaction_id} not found")
        raise typer.Exit(code=1)

    table = Table(title=f"Transaction {transaction.id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name, value in transaction.to_dict().items():
        table.add_row(name, "" if value is None else str(value))
    console.print(table)

    secret = secret or get_settings().service_data_secret
    if secret:
        service_data = transaction.get_service_data(secret)
        console.print(f"Service data: {service_data or '(none)'}")


@app.command("set-status")
def set_status(
    transaction_id: int = typer.Argument(..., help="Transaction ID"),
    status: str = typer.Argument(..., help=f"One of: {', '.join(ALLOWED_STATUSES)}"),
    database_url: Optional[str] = DatabaseUrl,
) -> None:
    """Change the status of a stored transaction."""
    if status not in ALLOWED_STATUSES:
        console.print(f"[red]Error:[/red] Unknown status '{status}'")
        raise typer.Exit(code=2)

    transaction = Transaction(_session_factory(database_url)).load(transaction_id)
    try:
        transaction.set_status(status).update_status()
    except CrowdfundingError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"Transaction {transaction.id} is now [bold]{transaction.get_status()}[/bold]")


@app.command("currencies")
def list_currencies(
    code: Optional[List[str]] = typer.Option(None, "--code", "-c", help="Filter by code"),
    database_url: Optional[str] = DatabaseUrl,
) -> None:
    """List currencies, optionally filtered by code."""
    currencies = Currencies(_session_factory(database_url)).load(codes=code or [])

    table = Table(title="Currencies")
    for column in ("ID", "Code", "Title", "Symbol", "Position"):
        table.add_column(column)
    for item in currencies:
        table.add_row(
            str(item["id"]),
            item["code"],
            item["title"],
            item["symbol"] or "",
            "after" if item["position"] else "before",
        )
    console.print(table)


if __name__ == "__main__":
    app()
