"""
FILE: doerfy/cli/commands/schedule.py
PURPOSE: Scheduling commands (schedule, unschedule, reschedule)
"""

from typing import List, Optional

import typer

from ..main import app, console, error_console
from ...core import service
from ...core.dates import parse_date_input
from ...core.exceptions import DoerfyError
from ...core.recurrence import describe_rule


@app.command()
def schedule(
    task_id: int = typer.Argument(..., help="Task ID"),
    due: str = typer.Argument(..., help="Due date: YYYY-MM-DD, today, tomorrow or +N"),
    time: str = typer.Option("", "--time", "-t", help="Time of day (HH:MM)"),
    lead_days: int = typer.Option(0, "--lead-days", help="Start this many days early"),
    lead_hours: int = typer.Option(0, "--lead-hours", help="Start this many hours early"),
    repeat: Optional[str] = typer.Option(None, "--repeat", "-r", help="daily, weekly, monthly or yearly"),
    interval: int = typer.Option(1, "--every", help="Repeat every N days/weeks/months/years"),
    week_days: Optional[List[str]] = typer.Option(None, "--on", help="Weekday for weekly repeats (repeatable)"),
    month_day: Optional[int] = typer.Option(None, "--day", help="Day of month for monthly repeats"),
    workdays_only: bool = typer.Option(False, "--workdays", help="Move weekend dates to Monday"),
    until: Optional[str] = typer.Option(None, "--until", help="Stop repeating after this date"),
    times: Optional[int] = typer.Option(None, "--times", help="Stop after this many occurrences"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Schedule a task; its stage follows the due date automatically.

    Example:
        doerfy schedule 5 2025-03-14 --time 09:30
        doerfy schedule 5 +7 --lead-days 2
        doerfy schedule 5 today --repeat weekly --on mon --on thu
    """
    try:
        task = service.schedule_task(
            task_id,
            parse_date_input(due),
            time=time,
            lead_days=lead_days,
            lead_hours=lead_hours,
            repeat=repeat,
            interval=interval,
            week_days=week_days,
            month_day=month_day,
            workdays_only=workdays_only,
            end_date=parse_date_input(until) if until else None,
            occurrences=times,
        )

        if json_output:
            typer.echo(task.to_json())
        else:
            console.print(
                f"[green]✓[/green] Task {task.id} due {task.schedule.date}"
                f"{' ' + task.schedule.time if task.schedule.time else ''} "
                f"[dim](stage: {task.time_stage})[/dim]"
            )
            if task.schedule.recurring:
                console.print(f"  [dim]repeats {describe_rule(task.schedule.recurring)}[/dim]")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def unschedule(
    task_id: int = typer.Argument(..., help="Task ID"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Remove a task's schedule (it stays in its current stage).

    Example:
        doerfy unschedule 5
    """
    try:
        task = service.clear_schedule(task_id)
        if json_output:
            typer.echo(task.to_json())
        else:
            console.print(f"[green]✓[/green] Task {task.id} is no longer scheduled")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def reschedule(
    task_id: int = typer.Argument(..., help="Task ID"),
    due: str = typer.Argument(..., help="New due date: YYYY-MM-DD, today, tomorrow or +N"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Move a task to another day, keeping its time, lead time and repeat rule.

    Example:
        doerfy reschedule 5 tomorrow
    """
    try:
        task = service.reschedule_task(task_id, parse_date_input(due))
        if json_output:
            typer.echo(task.to_json())
        else:
            console.print(
                f"[green]✓[/green] Task {task.id} moved to {task.schedule.date} "
                f"[dim](stage: {task.time_stage})[/dim]"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
