"""
FILE: doerfy/repl/display.py
PURPOSE: Render tasks and the three views inside the REPL
EXPORTS:
  - display_task() - One-line task summary
  - display_board() / display_lists() / display_calendar()
  - display_view() - Render whichever view is active
DEPENDENCIES:
  - rich (formatted output)
  - doerfy.core.service (view data)
  - doerfy.formatting (TaskFormatter)
NOTES:
  - Takes the REPLContext and console as parameters to avoid importing
    repl.main (which imports the command modules that import this one)
"""

from datetime import datetime
from typing import Optional, Tuple

from rich.console import Console

from ..core import service
from ..core.constants import VIEW_CALENDAR, VIEW_LISTS
from ..core.models import Task
from ..formatting import STAGE_STYLES, TaskFormatter, format_aging


def display_task(task: Task, message: str, console: Console) -> None:
    """Print ``message`` and a one-line summary of the task."""
    if message:
        console.print(f"[green]{message}[/green]")
    style = STAGE_STYLES.get(task.time_stage, "white")
    aging = format_aging(task)
    console.print(
        f"  [cyan]{task.id}[/cyan]: {task.title} [{style}]({task.time_stage})[/{style}]"
        + (f" {aging}" if aging else "")
    )


def _filter_note(context, console: Console) -> None:
    active = context.filters.active_filters(context.view)
    if active:
        parts = [
            f"{key}={','.join(value) if isinstance(value, list) else value}"
            for key, value in active.items()
        ]
        console.print(f"[dim]Filters: {'; '.join(parts)}[/dim]")


def display_board(context, console: Console) -> None:
    columns = service.board(context.filters)
    console.print(TaskFormatter.create_board(columns, service.list_time_boxes()))


def display_lists(context, console: Console) -> None:
    grouped = service.list_view(context.filters)
    if not grouped:
        console.print("[dim]No tasks found[/dim]")
        return
    for name, tasks in grouped.items():
        console.print(TaskFormatter.create_table(tasks, title=name, show_list=False))


def display_calendar(context, console: Console, month: Optional[Tuple[int, int]] = None) -> None:
    if month is None:
        today = datetime.now()
        month = (today.year, today.month)
    year, month_number = month
    grid = service.calendar_view(year, month_number, context.filters)
    console.print(TaskFormatter.create_calendar(grid, year, month_number))


def display_view(context, console: Console) -> None:
    """Render the active view with its filters."""
    _filter_note(context, console)
    if context.view == VIEW_LISTS:
        display_lists(context, console)
    elif context.view == VIEW_CALENDAR:
        display_calendar(context, console)
    else:
        display_board(context, console)
