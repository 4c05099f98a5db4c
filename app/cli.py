"""Command line entry point: `tuition-tracker reminders run-now`."""
import asyncio
import logging
from datetime import datetime

import typer
from rich.console import Console
from rich.table import Table

import app.models.registry  # noqa: F401
from app.core.database import engine
from app.core.due_dates import calculate_days_due, is_valid_month
from app.core.exceptions import ReminderRunError
from app.cron.payment_reminders import SweepResult, run_all_reminders_now

cli = typer.Typer(
    name="tuition-tracker",
    help="Tuition payment tracking and parent reminders",
    no_args_is_help=True,
)
reminders_app = typer.Typer(help="Parent SMS reminders", no_args_is_help=True)
cli.add_typer(reminders_app, name="reminders")

console = Console()


def _sweeps_table(sweeps: list[SweepResult]) -> Table:
    table = Table(title="Reminder run", show_header=True)
    table.add_column("Type", style="cyan", no_wrap=True)
    table.add_column("Month")
    table.add_column("Processed", justify="right")
    table.add_column("Sent", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Skipped", justify="right", style="dim")
    for sweep in sweeps:
        table.add_row(
            sweep.notification_type,
            f"{sweep.month} {sweep.year}",
            str(sweep.processed),
            str(sweep.sent),
            str(sweep.failed),
            str(sweep.skipped),
        )
    return table


async def _run_now() -> list[SweepResult]:
    try:
        return await run_all_reminders_now(datetime.now())
    finally:
        await engine.dispose()


@reminders_app.command("run-now")
def run_now(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Send reminders for all unpaid records of the current and previous month, ignoring the schedule."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="[%(levelname)s] %(asctime)s %(name)s %(message)s",
    )
    console.print("[bold]Running reminders now...[/bold]")
    try:
        sweeps = asyncio.run(_run_now())
    except ReminderRunError as e:
        console.print(f"[red]Error running reminders:[/red] {e}")
        raise typer.Exit(code=1)
    console.print(_sweeps_table(sweeps))
    console.print("[green]Reminders run complete.[/green]")


@reminders_app.command("days-due")
def days_due(month: str = typer.Argument(..., help="Month code, e.g. FEB")) -> None:
    """Days an unpaid record for MONTH of this year has been outstanding today."""
    if not is_valid_month(month):
        console.print("[red]Invalid month code. Use JAN, FEB, MAR, etc.[/red]")
        raise typer.Exit(code=2)
    console.print(str(calculate_days_due(month, datetime.now())))


if __name__ == "__main__":
    cli()
