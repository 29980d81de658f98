"""
FILE: doerfy/cli/commands/timeboxes.py
PURPOSE: Time box commands (timebox ls, timebox set, timebox reset)
"""

import json
from dataclasses import asdict
from typing import Optional

import typer

from ..main import console, error_console, timebox_app
from ...core import service
from ...core.exceptions import DoerfyError
from ...formatting import TaskFormatter


@timebox_app.command("ls")
def timebox_ls(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List time boxes and their aging thresholds.

    Example:
        doerfy timebox ls
    """
    try:
        time_boxes = service.list_time_boxes()

        if json_output:
            typer.echo(json.dumps([asdict(tb) for tb in time_boxes], indent=2))
        elif raw:
            for tb in time_boxes:
                typer.echo(f"{tb.id}\t{tb.name}\t{tb.warn_threshold or '-'}\t{tb.expire_threshold or '-'}")
        else:
            console.print(TaskFormatter.create_time_box_table(time_boxes))

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@timebox_app.command("set")
def timebox_set(
    time_box_id: str = typer.Argument(..., help="Stage id: queue, do, doing, today, done"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Display name"),
    description: Optional[str] = typer.Option(None, "--desc", "-d", help="Description"),
    warn: Optional[int] = typer.Option(None, "--warn", "-w", help="Warn after N days"),
    expire: Optional[int] = typer.Option(None, "--expire", "-x", help="Overdue after N days"),
    clear: bool = typer.Option(False, "--clear", help="Remove both thresholds first"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Rename a time box or change its aging thresholds.

    The warning threshold must be below the expiry threshold.

    Example:
        doerfy timebox set doing --warn 4 --expire 5
        doerfy timebox set queue --name Backlog
        doerfy timebox set do --clear
    """
    try:
        time_box = service.update_time_box(
            time_box_id,
            name=name,
            description=description,
            warn_threshold=warn,
            expire_threshold=expire,
            clear_thresholds=clear,
        )

        if json_output:
            typer.echo(time_box.to_json())
        else:
            console.print(
                f"[green]✓[/green] Updated time box {time_box.id} ({time_box.name}): "
                f"warn={time_box.warn_threshold if time_box.warn_threshold is not None else '-'}, "
                f"expire={time_box.expire_threshold if time_box.expire_threshold is not None else '-'}"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@timebox_app.command("reset")
def timebox_reset(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Restore the stock time boxes (names and thresholds).

    Example:
        doerfy timebox reset --yes
    """
    if not yes and not typer.confirm("Reset all time boxes to defaults?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    try:
        time_boxes = service.reset_time_boxes()
        console.print(f"[green]✓[/green] Reset {len(time_boxes)} time box(es)")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
