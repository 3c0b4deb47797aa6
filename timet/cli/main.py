"""
Main CLI entry point for timet.

This module provides the primary command-line interface using typer.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..core.time_tracker import ActiveItemError, TimeTracker
from ..db.models import ReportOptions
from ..utils.config import get_config_manager
from ..utils.formatting import format_timestamp, seconds_to_hms
from ..utils.notifier import notify_error, notify_start, notify_stop

# Create the main typer app
app = typer.Typer(
    name="timet",
    help="timet: a small command-line time tracker",
    add_completion=False,
)

# Initialize console for rich output
console = Console()

# Global tracker instance
tracker: Optional[TimeTracker] = None


def get_tracker() -> TimeTracker:
    """Get or initialize the global time tracker instance."""
    global tracker
    if tracker is None:
        config = get_config_manager()
        tracker = TimeTracker(
            config.get_data_dir(),
            db_name=config.get_database_path().name,
            datetime_format=config.get_datetime_format(),
            notes_width=config.get_notes_width(),
        )
    return tracker


@app.command()
def start(
    tag: str = typer.Argument(..., help="Tag of the activity to track"),
    notes: Optional[str] = typer.Argument(None, help="Optional notes"),
) -> None:
    """Start tracking time for a tag."""
    try:
        item = get_tracker().start(tag, notes)

        console.print(f"[green]✓[/green] Started tracking: [bold]{item.tag}[/bold]")
        if item.notes:
            console.print(f"[dim]Notes: {item.notes}[/dim]")
        console.print(f"[dim]Item ID: {item.id}[/dim]")
        notify_start(item.tag, item.notes)

    except Exception as e:
        console.print(f"[red]Error starting item: {e}[/red]")
        notify_error(str(e))
        raise typer.Exit(1)


@app.command()
def stop() -> None:
    """Stop the currently active item."""
    try:
        item = get_tracker().stop()
    except ActiveItemError:
        console.print("[yellow]No active item to stop[/yellow]")
        return
    except Exception as e:
        console.print(f"[red]Error stopping item: {e}[/red]")
        raise typer.Exit(1)

    duration = seconds_to_hms(item.duration or 0)
    console.print(f"[green]✓[/green] Stopped: [bold]{item.tag}[/bold]")
    console.print(f"[dim]Duration: {duration}[/dim]")
    notify_stop(item.tag, duration)


@app.command()
def resume(
    item_id: Optional[int] = typer.Argument(
        None, help="ID of the item to resume (defaults to the most recent)"
    ),
) -> None:
    """Start a new item with the tag and notes of a previous one."""
    try:
        item = get_tracker().resume(item_id)

        console.print(f"[green]✓[/green] Resumed tracking: [bold]{item.tag}[/bold]")
        if item.notes:
            console.print(f"[dim]Notes: {item.notes}[/dim]")
        console.print(f"[dim]Item ID: {item.id}[/dim]")
        notify_start(item.tag, item.notes)

    except Exception as e:
        console.print(f"[red]Error resuming item: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def cancel() -> None:
    """Discard the active item without recording it."""
    try:
        item = get_tracker().cancel()
    except ActiveItemError:
        console.print("[yellow]No active item to cancel[/yellow]")
        return
    except Exception as e:
        console.print(f"[red]Error canceling item: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Canceled active time tracking: [bold]{item.tag}[/bold]")


@app.command()
def summary(
    filter_expr: Optional[str] = typer.Argument(
        None,
        help="today, yesterday, week, month, all, YYYY-MM-DD or YYYY-MM-DD..YYYY-MM-DD",
    ),
    tag: Optional[str] = typer.Option(None, "--tag", "-t", help="Only include this tag"),
    csv_path: Optional[str] = typer.Option(None, "--csv", help="Export rows to a CSV file"),
    ics_path: Optional[str] = typer.Option(
        None, "--ics", help="Export closed items to an iCalendar file"
    ),
) -> None:
    """Show tracked time for a period, optionally exporting it."""
    try:
        config = get_config_manager()
        options = ReportOptions(
            filter_expr=filter_expr or config.get_default_filter(),
            tag=tag,
            csv_path=csv_path,
            ics_path=ics_path,
        )
        report = get_tracker().report(options.filter_expr, options.tag)

        console.print(report.generate_summary(), markup=False, highlight=False, soft_wrap=True)

        if options.csv_path:
            count = report.write_csv(options.csv_path)
            console.print(f"[green]✓[/green] Exported {count} items to {options.csv_path}")

        if options.ics_path:
            count = report.write_ical(options.ics_path)
            console.print(f"[green]✓[/green] Exported {count} events to {options.ics_path}")

    except Exception as e:
        console.print(f"[red]Error generating summary: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def edit(
    item_id: int = typer.Argument(..., help="ID of the item to edit"),
    field: Optional[str] = typer.Option(
        None, "--field", "-f", help="Field to change: tag, notes, start or end"
    ),
    value: Optional[str] = typer.Option(
        None, "--value", "-v", help="New value; times as HH:MM[:SS]"
    ),
) -> None:
    """Edit the tag, notes, start or end time of an item."""
    try:
        time_tracker = get_tracker()

        if field is None:
            field = Prompt.ask(
                "Field to edit", choices=list(TimeTracker.EDITABLE_FIELDS), default="tag"
            )
        if value is None:
            value = Prompt.ask(f"New {field}")

        item = time_tracker.edit(item_id, field, value)

        console.print(f"[green]✓[/green] Updated item {item.id}: {field}")

    except Exception as e:
        console.print(f"[red]Error editing item: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def delete(
    item_id: int = typer.Argument(..., help="ID of the item to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Delete an item so it no longer appears in reports."""
    try:
        if not yes and not Confirm.ask(f"Delete item {item_id}?"):
            console.print("[dim]Cancelled[/dim]")
            return

        item = get_tracker().delete(item_id)
        console.print(f"[green]✓[/green] Deleted item {item.id} ({item.tag})")

    except Exception as e:
        console.print(f"[red]Error deleting item: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def status() -> None:
    """Show the active item, if any."""
    try:
        time_tracker = get_tracker()
        active = time_tracker.get_active_item()

        if not active:
            if time_tracker.get_status() == "no_items":
                console.print("[dim]Nothing tracked yet[/dim]")
            else:
                console.print("[dim]No active item[/dim]")
            return

        elapsed = int(time_tracker.clock().timestamp()) - active.start

        table = Table(show_header=False, show_edge=False, pad_edge=False)
        table.add_column("Key", style="dim")
        table.add_column("Value")

        table.add_row("Tag", f"[bold]{active.tag}[/bold]")
        table.add_row("Started", format_timestamp(active.start, time_tracker.datetime_format))
        table.add_row("Duration", seconds_to_hms(elapsed))
        if active.notes:
            table.add_row("Notes", active.notes)
        table.add_row("ID", str(active.id))

        console.print("[green]● Active Item[/green]")
        console.print(table)

    except Exception as e:
        console.print(f"[red]Error getting status: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show timet version information."""
    from .. import __version__

    console.print(f"timet version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback that prints version and exits."""
    if value:
        version()
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    timet: a small command-line time tracker.

    Tracks tagged intervals of work in a local SQLite database.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )


if __name__ == "__main__":
    app()
