"""
FILE: doerfy/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Tables, board, calendar, detail panels and JSON for tasks
  - format_relative_date(iso_string, now) -> str
  - format_due(task) -> str
  - format_aging(task) -> str
  - parse_task_ids(id_string) -> List[int]
DEPENDENCIES:
  - rich (tables, panels)
  - json (serialization)
  - doerfy.core.models (Task, TimeBox, BannerConfig)
NOTES:
  - Centralized formatting logic so CLI and REPL print the same things
  - Stage and aging colours are defined once here
"""

import json
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .core.constants import (
    AGING_OVERDUE,
    AGING_WARNING,
    STAGE_DONE,
    TIME_STAGES,
)
from .core.dates import parse_iso
from .core.models import BannerConfig, Task, TimeBox
from .core.recurrence import describe_rule

STAGE_STYLES = {
    "queue": "dim",
    "do": "blue",
    "doing": "yellow",
    "today": "bright_magenta",
    "done": "green",
}

PRIORITY_STYLES = {"high": "red", "medium": "yellow", "low": "dim"}

AGING_STYLES = {AGING_WARNING: "yellow", AGING_OVERDUE: "bold red"}


def format_relative_date(iso_string: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Convert an ISO timestamp to human readable relative time.

    Returns "-" for empty input and the input itself when it cannot be
    parsed. Examples: "just now", "3 hours ago", "yesterday", "in 2 days",
    "tomorrow", "Jan 15", "Jan 15, 2024".
    """
    if not iso_string:
        return "-"

    dt = parse_iso(iso_string)
    if dt is None:
        return iso_string

    now = now or datetime.now()
    delta = now - dt

    if delta.total_seconds() < 0:
        ahead = -delta
        hours = ahead.total_seconds() / 3600
        if hours < 1:
            minutes = int(ahead.total_seconds() / 60)
            if minutes < 1:
                return "in a moment"
            return f"in {minutes} minute{'s' if minutes != 1 else ''}"
        if dt.date() == now.date():
            return f"in {int(hours)} hour{'s' if int(hours) != 1 else ''}"
        if dt.date() == now.date() + timedelta(days=1):
            return "tomorrow"
        days = (dt.date() - now.date()).days
        if days < 7:
            return f"in {days} days"
        return dt.strftime("%b %d") if dt.year == now.year else dt.strftime("%b %d, %Y")

    seconds = delta.total_seconds()
    if seconds < 60:
        return "just now"
    if seconds < 3600:
        minutes = int(seconds / 60)
        return f"{minutes} minute{'s' if minutes != 1 else ''} ago"
    if seconds < 86400:
        hours = int(seconds / 3600)
        return f"{hours} hour{'s' if hours != 1 else ''} ago"

    if dt.date() == now.date() - timedelta(days=1):
        return "yesterday"

    days = (now.date() - dt.date()).days
    if days < 7:
        return f"{days} days ago"
    if dt.year == now.year:
        return dt.strftime("%b %d")
    return dt.strftime("%b %d, %Y")


def format_due(task: Task) -> str:
    """Due date (and time) of a scheduled task, "-" otherwise."""
    if not task.is_scheduled:
        return "-"
    text = task.schedule.date[:10]
    if task.schedule.time:
        text += f" {task.schedule.time}"
    if task.schedule.recurring:
        text += " ↻"
    return text


def format_aging(task: Task) -> str:
    """Rich markup for the aging counter, e.g. "[bold red]-3d[/bold red]"."""
    style = AGING_STYLES.get(task.aging_status)
    if not style or task.status is None:
        return ""
    return f"[{style}]{task.status}d[/{style}]"


def _stage(stage: str) -> str:
    style = STAGE_STYLES.get(stage, "white")
    return f"[{style}]{stage}[/{style}]"


def _title(task: Task) -> str:
    title = task.title
    if task.highlighted:
        title = f"[bold]{title}[/bold]"
    if task.time_stage == STAGE_DONE:
        title = f"[strike dim]{task.title}[/strike dim]"
    return title


class TaskFormatter:
    """Centralized task display formatting."""

    @staticmethod
    def create_table(
        tasks: List[Task],
        title: str = "Tasks",
        show_stage: bool = True,
        show_list: bool = True,
    ) -> Table:
        """
        Create Rich table for tasks.

        Labels print under the title and the Due column only appears when
        a task is scheduled, so the table still fits an 80 column terminal.

        Args:
            tasks: List of tasks to display
            title: Table title
            show_stage: Whether to show the stage column
            show_list: Whether to show the list column
        """
        show_due = any(t.is_scheduled for t in tasks)

        table = Table(title=title, show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan", width=4, no_wrap=True)
        table.add_column("Title", style="white", min_width=16, ratio=1)
        if show_stage:
            table.add_column("Stage", width=6)
        if show_list:
            table.add_column("List", style="yellow", max_width=10)
        table.add_column("Pri", width=6)
        table.add_column("Age", width=5)
        if show_due:
            table.add_column("Due", max_width=10)

        for task in tasks:
            priority_style = PRIORITY_STYLES.get(task.priority, "white")
            label = _title(task)
            if task.labels:
                label += f"\n[dim]{', '.join(task.labels)}[/dim]"
            row = [str(task.id), label]
            if show_stage:
                row.append(_stage(task.time_stage))
            if show_list:
                row.append(task.list_name)
            row.extend(
                [
                    f"[{priority_style}]{task.priority}[/{priority_style}]",
                    format_aging(task),
                ]
            )
            if show_due:
                row.append(format_due(task))
            table.add_row(*row)

        return table

    @staticmethod
    def create_board(
        columns: Dict[str, List[Task]],
        time_boxes: List[TimeBox],
        show_done: bool = True,
    ) -> Table:
        """One table column per stage, tasks listed top to bottom by position."""
        names = {tb.id: tb for tb in time_boxes}
        stages = [s for s in TIME_STAGES if show_done or s != STAGE_DONE]

        table = Table(show_header=True, header_style="bold", expand=True, show_lines=False)
        for stage in stages:
            time_box = names.get(stage)
            header = time_box.name if time_box else stage
            count = len(columns.get(stage, []))
            style = STAGE_STYLES.get(stage, "white")
            table.add_column(f"[{style}]{header}[/{style}] [dim]({count})[/dim]", ratio=1)

        cells = []
        for stage in stages:
            lines = []
            for task in columns.get(stage, []):
                line = f"[cyan]{task.id}[/cyan] {_title(task)}"
                aging = format_aging(task)
                if aging:
                    line += f" {aging}"
                lines.append(line)
            cells.append("\n".join(lines) or "[dim]-[/dim]")
        table.add_row(*cells)
        return table

    @staticmethod
    def create_detail(task: Task, now: Optional[datetime] = None) -> Panel:
        """Property sheet of a single task, with checklist and history."""
        props = Table.grid(padding=(0, 2))
        props.add_column(style="bold cyan", no_wrap=True)
        props.add_column()

        props.add_row("Stage", _stage(task.time_stage))
        props.add_row("In stage since", format_relative_date(task.stage_entry_date, now))
        if task.aging_status:
            aging = format_aging(task)
            props.add_row("Aging", f"{task.aging_status} {aging}".strip())
        props.add_row("List", task.list_name)
        props.add_row("Priority", task.priority)
        props.add_row("Energy", task.energy)
        props.add_row("Assignee", task.assignee or "-")
        props.add_row("Location", task.location or "-")
        props.add_row("Story", task.story or "-")
        props.add_row("Labels", ", ".join(task.labels) or "-")
        props.add_row("Icon", task.icon)
        props.add_row(
            "Shown in",
            ", ".join(
                name
                for name, flag in (
                    ("time box", task.show_in_time_box),
                    ("lists", task.show_in_list),
                    ("calendar", task.show_in_calendar),
                )
                if flag
            )
            or "-",
        )
        if task.schedule:
            schedule = task.schedule
            props.add_row("Due", format_due(task) if schedule.enabled else "[dim]disabled[/dim]")
            if schedule.lead_days or schedule.lead_hours:
                props.add_row("Lead time", f"{schedule.lead_days}d {schedule.lead_hours}h")
            if schedule.recurring:
                props.add_row("Repeats", describe_rule(schedule.recurring))
        props.add_row("Created", format_relative_date(task.created_at, now))
        props.add_row("Updated", format_relative_date(task.updated_at, now))

        parts: List[Any] = [props]

        if task.description:
            parts.extend([Text(""), Text(task.description)])

        if task.checklist_items:
            parts.append(Text(""))
            for number, item in enumerate(task.checklist_items, start=1):
                mark = "[green]x[/green]" if item.completed else " "
                parts.append(f"  {number}. [{mark}] {item.text} [dim]({item.id})[/dim]")

        if task.history:
            history = Table(title="History", show_header=True, header_style="bold", box=None)
            history.add_column("Stage")
            history.add_column("Entered")
            history.add_column("Days", justify="right")
            history.add_column("By", style="dim")
            for entry in task.history:
                entered = parse_iso(entry.entry_date)
                history.add_row(
                    _stage(entry.time_stage),
                    entered.strftime("%Y-%m-%d %H:%M") if entered else "-",
                    "-" if entry.days_in_stage is None else str(entry.days_in_stage),
                    entry.user_id or "-",
                )
            parts.extend([Text(""), history])

        return Panel(Group(*parts), title=f"[cyan]{task.id}[/cyan] {task.title}", expand=False)

    @staticmethod
    def create_calendar(grid, year: int, month: int) -> Table:
        """Month grid as a Sunday-first table; each cell lists its events."""
        title = datetime(year, month, 1).strftime("%B %Y")
        table = Table(title=title, show_header=True, header_style="bold cyan", show_lines=True)
        for name in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"):
            table.add_column(name, ratio=1, vertical="top")

        today = datetime.now().date()
        for week in grid:
            cells = []
            for day, events in week:
                if day is None:
                    cells.append("")
                    continue
                header = f"[reverse]{day.day}[/reverse]" if day == today else f"[bold]{day.day}[/bold]"
                lines = [header]
                for event in events:
                    time_text = event.start.strftime("%H:%M") if event.task.schedule.time else ""
                    lines.append(f"[cyan]{event.task_id}[/cyan] {time_text} {event.title}".replace("  ", " "))
                cells.append("\n".join(lines))
            table.add_row(*cells)
        return table

    @staticmethod
    def create_time_box_table(time_boxes: List[TimeBox]) -> Table:
        table = Table(title="Time Boxes", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="cyan")
        table.add_column("Name")
        table.add_column("Warn", justify="right")
        table.add_column("Expire", justify="right")
        table.add_column("Description", style="dim")
        for tb in time_boxes:
            table.add_row(
                _stage(tb.id),
                tb.name,
                "-" if tb.warn_threshold is None else f"{tb.warn_threshold}d",
                "-" if tb.expire_threshold is None else f"{tb.expire_threshold}d",
                tb.description,
            )
        return table

    @staticmethod
    def create_banner_panel(config: BannerConfig) -> Panel:
        grid = Table.grid(padding=(0, 2))
        grid.add_column(style="bold cyan", no_wrap=True)
        grid.add_column()
        grid.add_row("Transition", f"{config.transition_time}s")
        grid.add_row("Autoplay", "on" if config.autoplay else "off")
        grid.add_row("Volume", f"{config.volume}%")
        grid.add_row("Quote rotation", "on" if config.quote_rotation else "off")
        grid.add_row("Quote duration", f"{config.quote_duration}s")
        grid.add_row(
            "Text style",
            ", ".join(f"{k}={v}" for k, v in config.text_style.items()),
        )
        for label, items, key in (
            ("Images", config.images, "url"),
            ("Audio", config.audio, "name"),
            ("Quotes", config.quotes, "text"),
        ):
            if not items:
                grid.add_row(label, "[dim]none[/dim]")
                continue
            lines = []
            for number, item in enumerate(items, start=1):
                text = str(item.get(key, ""))
                if key == "text" and item.get("author"):
                    text += f" [dim]- {item['author']}[/dim]"
                lines.append(f"{number}. {text}")
            grid.add_row(label, "\n".join(lines))
        return Panel(grid, title="Banner", expand=False)

    @staticmethod
    def to_json_array(tasks: List[Task]) -> str:
        """Convert task list to JSON array string."""
        return json.dumps([t.to_dict() for t in tasks], indent=2)

    @staticmethod
    def to_raw_lines(tasks: List[Task]) -> List[str]:
        """
        Plain text lines, one per task: "id<TAB>stage<TAB>title".

        Meant for piping into other tools.
        """
        return [f"{task.id}\t{task.time_stage}\t{task.title}" for task in tasks]


def parse_task_ids(id_string: str) -> List[int]:
    """
    Parse comma-separated task IDs (e.g. "1,2,3").

    Raises:
        ValueError: If any ID is not a valid integer
    """
    ids = [part.strip() for part in id_string.split(",")]
    return [int(part) for part in ids if part]
