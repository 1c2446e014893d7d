"""Mini README: Entry point CLI for the cashflow ledger.

This script exposes a Typer CLI to serve the JSON API with uvicorn, print a
summary of the stored session, or wipe it for a new game. Settings come from
``CASHFLOW_*`` environment variables when available.
"""

from __future__ import annotations

import typer
import uvicorn

from cashflow_ledger.configuration import get_settings
from cashflow_ledger.ledger import HoldingKind, LedgerSession
from cashflow_ledger.logging_utils import configure_root_logger

cli = typer.Typer(help="Track a Cashflow game session from the terminal or over HTTP.")


@cli.command()
def serve(
    host: str = typer.Option(None, help="Host interface to bind."),
    port: int = typer.Option(None, help="Port to listen on."),
    production: bool = typer.Option(
        False, help="Use production server settings (disable auto-reload)."
    ),
) -> None:
    """Start the JSON API using uvicorn."""

    settings = get_settings()
    effective_host = host or settings.interface_host
    effective_port = port or settings.interface_port
    configure_root_logger(settings.log_level)

    # Browsers cannot open 0.0.0.0, so point people at localhost instead.
    browser_host = "127.0.0.1" if effective_host in {"0.0.0.0", "::"} else effective_host
    typer.echo(
        f"Starting the cashflow ledger on {effective_host}:{effective_port}.\n"
        f"API docs: http://{browser_host}:{effective_port}/docs"
    )
    uvicorn.run(
        "cashflow_ledger.interface.web_app:create_application",
        host=effective_host,
        port=effective_port,
        factory=True,
        reload=not production,
    )


@cli.command()
def summary() -> None:
    """Print the stored session's key figures."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    session = LedgerSession.from_settings(settings)
    if session.setup_required:
        typer.echo("No game set up yet.")
        raise typer.Exit(code=1)

    state = session.state
    metrics = session.metrics()
    typer.echo(f"{state.player} ({state.profession}), auditor: {state.auditor or '-'}")
    if state.is_on_fast_track:
        typer.echo(f"Fast Track cash:        {state.fast_track_cash}")
        typer.echo(f"Payday:                 {metrics.payday_amount}")
        typer.echo(f"Business income:        {metrics.fast_track_investment_income}")
        typer.echo(f"Goal progress:          {metrics.fast_track_goal_progress:.1f}%")
        return
    typer.echo(f"Total income:           {metrics.total_income}")
    typer.echo(f"Passive income:         {metrics.passive_income}")
    typer.echo(f"Total expenses:         {metrics.total_expenses}")
    typer.echo(f"Monthly cashflow:       {metrics.monthly_cashflow}")
    typer.echo(f"Progress to freedom:    {metrics.progress_to_freedom:.1f}%")
    typer.echo(f"Available bank credit:  {metrics.max_loan}")
    for kind in HoldingKind:
        for holding in state.holdings(kind):
            typer.echo(f"  [{kind.value}] {holding.name}: cashflow {holding.cashflow} x {holding.count}")


@cli.command()
def reset(
    yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt."),
) -> None:
    """Delete the stored session so the next start runs setup again."""

    settings = get_settings()
    configure_root_logger(settings.log_level)
    if not yes:
        typer.confirm("All current game data will be deleted. Continue?", abort=True)
    LedgerSession.from_settings(settings).reset_session()
    typer.echo("Session reset.")


if __name__ == "__main__":
    cli()
