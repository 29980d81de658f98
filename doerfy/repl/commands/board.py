"""
FILE: doerfy/repl/commands/board.py
PURPOSE: Board, view and scheduling command handlers for REPL
"""

from typing import Optional, Tuple

from ..main import console, repl_context
from ..parser import ParseResult
from ..display import display_board, display_calendar, display_lists, display_task
from .tasks import split_values, task_id_arg, task_ids_arg
from ...core import service
from ...core.dates import parse_date_input
from ...core.exceptions import DoerfyError
from ...core.recurrence import describe_rule
from ...formatting import TaskFormatter


def handle_mv_command(result: ParseResult) -> None:
    """
    Handle 'mv' command - move tasks to a stage.

    Usage:
        mv 5 today
        mv 3,5,7 doing
    """
    ids = task_ids_arg(result, "mv <task_id(s)> <stage>")
    if ids is None:
        return
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Target stage required")
        console.print("[dim]Usage: mv <task_id(s)> <queue|do|doing|today|done>[/dim]")
        return

    stage = result.args[1]
    for task_id in ids:
        try:
            task = service.move_task(task_id, stage)
            console.print(f"[magenta]→[/magenta] Moved task {task.id} to [bold]{task.time_stage}[/bold]: {task.title}")
        except DoerfyError as e:
            console.print(f"[red]Error:[/red] {e}")


def handle_reorder_command(result: ParseResult) -> None:
    """
    Handle 'reorder' command - drop one task onto another.

    Usage:
        reorder 7 3
    """
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Two task IDs required")
        console.print("[dim]Usage: reorder <task_id> <over_task_id>[/dim]")
        return
    try:
        task_id, over_id = int(result.args[0]), int(result.args[1])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid task ID(s): {' '.join(result.args[:2])}")
        return

    try:
        task = service.reorder_task(task_id, over_id)
        console.print(
            f"[magenta]↕[/magenta] Task {task.id} is now #{task.position + 1} in [bold]{task.time_stage}[/bold]"
        )
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_board_command(result: ParseResult) -> None:
    """Handle 'board' command - time box board with its filters."""
    try:
        display_board(repl_context, console)
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_lists_command(result: ParseResult) -> None:
    """Handle 'lists' command - tasks grouped by list."""
    try:
        display_lists(repl_context, console)
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def _parse_month(text: str) -> Optional[Tuple[int, int]]:
    try:
        year, month = text.split("-", 1)
        return int(year), int(month)
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid month '{text}'. Use YYYY-MM")
        return None


def handle_calendar_command(result: ParseResult) -> None:
    """
    Handle 'calendar' command - month grid of scheduled tasks.

    Usage:
        calendar
        calendar 2025-03
    """
    month = None
    if result.args:
        month = _parse_month(result.args[0])
        if month is None:
            return
    try:
        display_calendar(repl_context, console, month)
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_home_command(result: ParseResult) -> None:
    """Handle 'home' command - greeting, quote and today/aging/upcoming."""
    try:
        service.refresh_tasks()
        data = service.home_view()
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    quote = data["quote"]
    console.print(f"[bold cyan]Hello, {data['user']}[/bold cyan] [dim]{data['date']}[/dim]")
    author = f" [dim]- {quote['author']}[/dim]" if quote.get("author") else ""
    console.print(f"[italic]\"{quote['text']}\"[/italic]{author}\n")

    for key, title in (("today", "Today"), ("aging", "Needs attention"), ("upcoming", "Upcoming")):
        if data[key]:
            console.print(TaskFormatter.create_table(data[key], title=title, show_list=False))
        else:
            console.print(f"[bold]{title}[/bold] [dim]- nothing here[/dim]")


def handle_refresh_command(result: ParseResult) -> None:
    """Handle 'refresh' command - recalculate scheduled stages and aging."""
    try:
        changed = service.refresh_tasks()
        console.print(f"[green]✓[/green] Refreshed {len(changed)} task(s)")
        for task in changed:
            display_task(task, "", console)
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def _int_flag(result: ParseResult, name: str, default: Optional[int] = None) -> Optional[int]:
    value = result.flag(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"--{name} needs a whole number")


def handle_schedule_command(result: ParseResult) -> None:
    """
    Handle 'schedule' command - set a due date and optional repeat rule.

    Usage:
        schedule 5 2025-03-14 --time 09:30
        schedule 5 +7 --lead-days 2
        schedule 5 today --repeat weekly --on mon,thu
        schedule 5 today --repeat monthly --day 15 --times 6
    """
    task_id = task_id_arg(result, "schedule <task_id> <date> [--time HH:MM] [--repeat R]")
    if task_id is None:
        return
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Due date required")
        console.print("[dim]Dates: YYYY-MM-DD, today, tomorrow or +N[/dim]")
        return

    try:
        until = result.flag("until")
        repeat = result.flag("repeat")
        task = service.schedule_task(
            task_id,
            parse_date_input(result.args[1]),
            time=result.flag("time") if isinstance(result.flag("time"), str) else "",
            lead_days=_int_flag(result, "lead-days", 0),
            lead_hours=_int_flag(result, "lead-hours", 0),
            repeat=repeat if isinstance(repeat, str) else None,
            interval=_int_flag(result, "every", 1),
            week_days=split_values(result.flag("on")),
            month_day=_int_flag(result, "day"),
            workdays_only=bool(result.flag("workdays", False)),
            end_date=parse_date_input(until) if isinstance(until, str) else None,
            occurrences=_int_flag(result, "times"),
        )
    except (ValueError, DoerfyError) as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    when = task.schedule.date + (f" {task.schedule.time}" if task.schedule.time else "")
    console.print(f"[green]✓[/green] Task {task.id} due {when} [dim](stage: {task.time_stage})[/dim]")
    if task.schedule.recurring:
        console.print(f"  [dim]repeats {describe_rule(task.schedule.recurring)}[/dim]")


def handle_unschedule_command(result: ParseResult) -> None:
    """Handle 'unschedule' command - drop a task's schedule."""
    task_id = task_id_arg(result, "unschedule <task_id>")
    if task_id is None:
        return
    try:
        task = service.clear_schedule(task_id)
        console.print(f"[green]✓[/green] Task {task.id} is no longer scheduled")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_reschedule_command(result: ParseResult) -> None:
    """
    Handle 'reschedule' command - move a task to another calendar day.

    Usage:
        reschedule 5 tomorrow
    """
    task_id = task_id_arg(result, "reschedule <task_id> <date>")
    if task_id is None:
        return
    if len(result.args) < 2:
        console.print("[red]Error:[/red] New date required")
        return
    try:
        task = service.reschedule_task(task_id, parse_date_input(result.args[1]))
        console.print(
            f"[green]✓[/green] Task {task.id} moved to {task.schedule.date} "
            f"[dim](stage: {task.time_stage})[/dim]"
        )
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
