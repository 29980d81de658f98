"""
FILE: doerfy/cli/commands/board.py
PURPOSE: Board and view commands (mv, reorder, board, lists, calendar, home, refresh)
"""

import json
from datetime import datetime
from typing import List, Optional

import typer

from ..main import app, console, error_console
from ...core import service
from ...core.constants import VIEW_CALENDAR, VIEW_LISTS, VIEW_TIMEBOX
from ...core.exceptions import DoerfyError
from ...core.filters import build_filter_store
from ...formatting import TaskFormatter, parse_task_ids


@app.command()
def mv(
    task_ids: str = typer.Argument(..., help="Task ID(s) to move (comma-separated)"),
    stage: str = typer.Argument(..., help="Target stage: queue, do, doing, today, done"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Move tasks to another stage (resets their aging counter).

    Example:
        doerfy mv 5 today
        doerfy mv 3,5,7 doing
    """
    try:
        ids = parse_task_ids(task_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid task ID(s): {task_ids}")
        raise typer.Exit(1)

    moved_tasks = []
    errors = []
    for task_id in ids:
        try:
            moved_tasks.append(service.move_task(task_id, stage))
        except DoerfyError as e:
            errors.append(str(e))

    if json_output:
        typer.echo(TaskFormatter.to_json_array(moved_tasks))
    elif raw:
        for task in moved_tasks:
            typer.echo(f"Moved task {task.id} to {task.time_stage}")
    else:
        for task in moved_tasks:
            console.print(f"[magenta]→[/magenta] Moved task {task.id} to [bold]{task.time_stage}[/bold]: {task.title}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not moved_tasks:
            raise typer.Exit(1)


@app.command()
def reorder(
    task_id: int = typer.Argument(..., help="Task to drag"),
    over_task_id: int = typer.Argument(..., help="Task to drop it onto"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Drag a task onto another one.

    Same stage: the task takes the other's place. Different stage: it moves
    into that stage just above the other task.

    Example:
        doerfy reorder 7 3
    """
    try:
        task = service.reorder_task(task_id, over_task_id)

        if json_output:
            typer.echo(task.to_json())
        else:
            console.print(
                f"[magenta]↕[/magenta] Task {task.id} is now #{task.position + 1} in [bold]{task.time_stage}[/bold]"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def board(
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Filter by list"),
    priority: Optional[List[str]] = typer.Option(None, "--priority", "-p", help="Filter by priority"),
    labels: Optional[List[str]] = typer.Option(None, "--label", help="Filter by label"),
    assignee: Optional[str] = typer.Option(None, "--assignee", "-a", help="Filter by assignee"),
    hide_done: bool = typer.Option(False, "--hide-done", help="Hide the done column"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show the time box board (one column per stage).

    Example:
        doerfy board
        doerfy board --list work --hide-done
    """
    try:
        service.refresh_tasks()
        filters = build_filter_store(
            VIEW_TIMEBOX,
            list_name=list_name,
            priority=priority,
            labels=labels,
            assignee=assignee,
        )
        columns = service.board(filters)

        if json_output:
            typer.echo(
                json.dumps(
                    {stage: [t.to_dict() for t in tasks] for stage, tasks in columns.items()},
                    indent=2,
                )
            )
        elif raw:
            for stage, tasks in columns.items():
                for line in TaskFormatter.to_raw_lines(tasks):
                    typer.echo(line)
        else:
            console.print(
                TaskFormatter.create_board(columns, service.list_time_boxes(), show_done=not hide_done)
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def lists(
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Only this list"),
    priority: Optional[List[str]] = typer.Option(None, "--priority", "-p", help="Filter by priority"),
    labels: Optional[List[str]] = typer.Option(None, "--label", help="Filter by label"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show tasks grouped by list.

    Example:
        doerfy lists
        doerfy lists --list work
    """
    try:
        filters = build_filter_store(
            VIEW_LISTS, list_name=list_name, priority=priority, labels=labels
        )
        grouped = service.list_view(filters)

        if json_output:
            typer.echo(
                json.dumps(
                    {name: [t.to_dict() for t in tasks] for name, tasks in grouped.items()},
                    indent=2,
                )
            )
        elif raw:
            for name, tasks in grouped.items():
                for task in tasks:
                    typer.echo(f"{name}\t{task.id}\t{task.title}")
        else:
            if not grouped:
                console.print("[dim]No tasks found[/dim]")
                return
            for name, tasks in grouped.items():
                console.print(TaskFormatter.create_table(tasks, title=name, show_list=False))

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def calendar(
    month: Optional[str] = typer.Argument(None, help="Month as YYYY-MM (default: this month)"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Filter by list"),
    labels: Optional[List[str]] = typer.Option(None, "--label", help="Filter by label"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show scheduled tasks on a month calendar.

    Example:
        doerfy calendar
        doerfy calendar 2025-03
    """
    try:
        year, month_number = _parse_month(month)
        filters = build_filter_store(VIEW_CALENDAR, list_name=list_name, labels=labels)
        grid = service.calendar_view(year, month_number, filters)
        events = [event for week in grid for _, day_events in week for event in day_events]

        if json_output:
            typer.echo(json.dumps([e.to_dict() for e in events], indent=2))
        elif raw:
            for event in events:
                typer.echo(f"{event.start.isoformat()}\t{event.task_id}\t{event.title}")
        else:
            console.print(TaskFormatter.create_calendar(grid, year, month_number))

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _parse_month(text: Optional[str]):
    if not text:
        today = datetime.now()
        return today.year, today.month
    try:
        year, month = text.split("-", 1)
        return int(year), int(month)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid month '{text}'. Use YYYY-MM")
        raise typer.Exit(1)


@app.command()
def home(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Home screen: today's tasks, aging tasks, upcoming schedule and a quote.

    Example:
        doerfy home
    """
    try:
        service.refresh_tasks()
        data = service.home_view()

        if json_output:
            typer.echo(
                json.dumps(
                    {
                        key: [t.to_dict() for t in value] if isinstance(value, list) else value
                        for key, value in data.items()
                    },
                    indent=2,
                )
            )
            return

        quote = data["quote"]
        console.print(f"\n[bold cyan]Hello, {data['user']}[/bold cyan] [dim]{data['date']}[/dim]")
        author = f" [dim]- {quote['author']}[/dim]" if quote.get("author") else ""
        console.print(f"[italic]\"{quote['text']}\"[/italic]{author}\n")

        for key, title in (("today", "Today"), ("aging", "Needs attention"), ("upcoming", "Upcoming")):
            tasks = data[key]
            if tasks:
                console.print(TaskFormatter.create_table(tasks, title=title, show_list=False))
            else:
                console.print(f"[bold]{title}[/bold] [dim]- nothing here[/dim]")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def refresh(
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Recalculate scheduled stages and aging for every task.

    Example:
        doerfy refresh
    """
    try:
        changed = service.refresh_tasks()

        if json_output:
            typer.echo(TaskFormatter.to_json_array(changed))
        else:
            console.print(f"[green]✓[/green] Refreshed {len(changed)} task(s)")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
