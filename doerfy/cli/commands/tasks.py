"""
FILE: doerfy/cli/commands/tasks.py
PURPOSE: Task commands (add, ls, show, edit, desc, set, label, check, done, rm)
"""

import json
import os
import subprocess
import sys
import tempfile
from typing import List, Optional

import typer

from ..main import app, console, error_console
from ...core import service
from ...core.constants import VIEW_TIMEBOX
from ...core.dates import parse_date_input
from ...core.exceptions import DoerfyError, TaskNotFoundError
from ...core.filters import build_filter_store
from ...formatting import TaskFormatter, parse_task_ids


@app.command()
def add(
    title: str = typer.Argument(..., help="Task title"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="List name (default: personal)"),
    stage: str = typer.Option("queue", "--stage", "-s", help="Starting stage"),
    priority: str = typer.Option("medium", "--priority", "-p", help="high, medium or low"),
    energy: str = typer.Option("medium", "--energy", "-e", help="high, medium or low"),
    labels: Optional[List[str]] = typer.Option(None, "--label", help="Label (repeatable)"),
    description: str = typer.Option("", "--desc", "-d", help="Description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        doerfy add "Write documentation"
        doerfy add "Call the bank" --list errands --stage today --priority high
    """
    try:
        task = service.create_task(
            title=title,
            list_name=list_name,
            time_stage=stage,
            description=description,
            priority=priority,
            energy=energy,
            labels=labels,
        )

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.title}")
        else:
            console.print(
                f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {task.title} "
                f"[dim]({task.time_stage}, {task.list_name})[/dim]"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ls(
    stage: Optional[List[str]] = typer.Option(None, "--stage", "-s", help="Filter by stage (repeatable)"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Filter by list"),
    priority: Optional[List[str]] = typer.Option(None, "--priority", "-p", help="Filter by priority (repeatable)"),
    energy: Optional[List[str]] = typer.Option(None, "--energy", "-e", help="Filter by energy (repeatable)"),
    labels: Optional[List[str]] = typer.Option(None, "--label", help="Filter by label (repeatable)"),
    assignee: Optional[str] = typer.Option(None, "--assignee", "-a", help="Filter by assignee"),
    due: Optional[str] = typer.Option(None, "--due", help="Filter by due date (YYYY-MM-DD, today, +N)"),
    include_done: bool = typer.Option(False, "--all", help="Include done tasks"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks (done tasks hidden unless --all or --stage done).

    Example:
        doerfy ls
        doerfy ls --stage today --stage doing
        doerfy ls --list work --label finance --json
    """
    try:
        service.refresh_tasks()
        filters = build_filter_store(
            VIEW_TIMEBOX,
            time_stage=stage,
            list_name=list_name,
            priority=priority,
            energy=energy,
            labels=labels,
            assignee=assignee,
            due_date=parse_date_input(due) if due else None,
        )
        tasks = service.list_tasks(include_done=include_done or bool(stage))
        tasks = filters.filter_tasks(tasks, VIEW_TIMEBOX)

        if json_output:
            typer.echo(TaskFormatter.to_json_array(tasks))
        elif raw:
            for line in TaskFormatter.to_raw_lines(tasks):
                typer.echo(line)
        else:
            if not tasks:
                console.print("[dim]No tasks found[/dim]")
                return
            console.print(TaskFormatter.create_table(tasks))
            console.print(f"\n[dim]Total: {len(tasks)} task(s)[/dim]")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    task_id: int = typer.Argument(..., help="Task ID to view"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Show full details for a task: properties, schedule, checklist and history.

    Example:
        doerfy show 5
    """
    try:
        task = service.get_task_or_raise(task_id)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"Task #{task.id}")
            typer.echo(f"Title: {task.title}")
            typer.echo(f"Stage: {task.time_stage}")
            typer.echo(f"List: {task.list_name}")
            typer.echo(f"Priority: {task.priority}")
            if task.aging_status:
                typer.echo(f"Aging: {task.aging_status} {task.status or ''}".rstrip())
            if task.description:
                typer.echo(f"Description: {task.description}")
            for entry in task.history:
                typer.echo(f"History: {entry.time_stage} {entry.entry_date}")
        else:
            console.print(TaskFormatter.create_detail(task))

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def edit(
    task_id: int = typer.Argument(..., help="Task ID to edit"),
    new_title: str = typer.Argument(..., help="New task title"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Update a task's title.

    Example:
        doerfy edit 5 "Updated task title"
    """
    try:
        task = service.update_task_title(task_id, new_title)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"Updated task {task.id}: {task.title}")
        else:
            console.print(f"[blue]✎[/blue] Updated task {task.id}: {task.title}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def desc(
    task_id: int = typer.Argument(..., help="Task ID to edit description"),
    text: Optional[str] = typer.Argument(None, help="New description (opens $EDITOR when omitted)"),
):
    """
    Edit a task's description.

    With no text, opens $EDITOR (or notepad on Windows) with the current
    description; save and close the editor to update it.

    Example:
        doerfy desc 5
        doerfy desc 5 "Bring the signed forms"
    """
    try:
        task = service.get_task_or_raise(task_id)

        if text is None:
            editor = os.environ.get("EDITOR") or ("notepad" if sys.platform == "win32" else "nano")

            with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False, encoding="utf-8") as f:
                f.write(task.description or "")
                temp_path = f.name

            try:
                subprocess.run([editor, temp_path], check=True)
                with open(temp_path, "r", encoding="utf-8") as f:
                    text = f.read()
            finally:
                os.unlink(temp_path)

        task = service.update_task_description(task_id, text)

        if task.description:
            console.print(f"[blue]✎[/blue] Updated description for task {task.id}: {task.title}")
        else:
            console.print(f"[blue]✎[/blue] Cleared description for task {task.id}: {task.title}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except (OSError, subprocess.CalledProcessError) as e:
        error_console.print(f"[red]Error:[/red] Editor failed: {e}")
        raise typer.Exit(1)


@app.command("set")
def set_properties(
    task_id: int = typer.Argument(..., help="Task ID"),
    priority: Optional[str] = typer.Option(None, "--priority", "-p", help="high, medium or low"),
    energy: Optional[str] = typer.Option(None, "--energy", "-e", help="high, medium or low"),
    list_name: Optional[str] = typer.Option(None, "--list", "-l", help="Move to list"),
    location: Optional[str] = typer.Option(None, "--location", help="Location ('' clears)"),
    story: Optional[str] = typer.Option(None, "--story", help="Story ('' clears)"),
    icon: Optional[str] = typer.Option(None, "--icon", help="Icon colour"),
    assignee: Optional[str] = typer.Option(None, "--assignee", "-a", help="Assignee"),
    highlighted: Optional[bool] = typer.Option(None, "--highlight/--no-highlight", help="Highlight the task"),
    show_in_time_box: Optional[bool] = typer.Option(None, "--board/--no-board", help="Show on the time box board"),
    show_in_list: Optional[bool] = typer.Option(None, "--in-list/--no-in-list", help="Show in the lists view"),
    show_in_calendar: Optional[bool] = typer.Option(None, "--in-calendar/--no-in-calendar", help="Show on the calendar"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Change task properties.

    Example:
        doerfy set 5 --priority high --list work
        doerfy set 5 --location office --highlight
    """
    changes = {
        "priority": priority,
        "energy": energy,
        "list_name": list_name,
        "location": location,
        "story": story,
        "icon": icon,
        "assignee": assignee,
        "highlighted": highlighted,
        "show_in_time_box": show_in_time_box,
        "show_in_list": show_in_list,
        "show_in_calendar": show_in_calendar,
    }
    changes = {key: value for key, value in changes.items() if value is not None}
    if not changes:
        error_console.print("[red]Error:[/red] Nothing to change. See doerfy set --help")
        raise typer.Exit(1)

    try:
        task = service.update_task_properties(task_id, **changes)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"Updated task {task.id}: {', '.join(sorted(changes))}")
        else:
            console.print(
                f"[blue]✎[/blue] Updated task {task.id}: [dim]{', '.join(sorted(changes))}[/dim]"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def label(
    task_id: int = typer.Argument(..., help="Task ID"),
    labels: List[str] = typer.Argument(..., help="Labels to add (prefix with - to remove)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Add or remove labels.

    Example:
        doerfy label 5 finance urgent
        doerfy label 5 -- -urgent
    """
    try:
        task = None
        for name in labels:
            if name.startswith("-"):
                task = service.remove_label(task_id, name[1:])
            else:
                task = service.add_label(task_id, name)

        if json_output:
            typer.echo(task.to_json())
        else:
            console.print(f"[blue]✎[/blue] Task {task.id} labels: {', '.join(task.labels) or '-'}")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def check(
    task_id: int = typer.Argument(..., help="Task ID"),
    item: str = typer.Argument(..., help="Item text to add, or item number/id to toggle"),
    remove: bool = typer.Option(False, "--rm", help="Remove the item instead of toggling"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Manage a task's checklist.

    A number or existing item id toggles (or with --rm removes) that item,
    anything else is added as a new item.

    Example:
        doerfy check 5 "Book flights"
        doerfy check 5 1
        doerfy check 5 1 --rm
    """
    try:
        task = service.get_task_or_raise(task_id)
        known = {c.id for c in task.checklist_items}
        refers_to_item = item in known or (
            item.isdigit() and 1 <= int(item) <= len(task.checklist_items)
        )

        if remove:
            task = service.remove_checklist_item(task_id, item)
            action = "Removed"
        elif refers_to_item:
            task = service.toggle_checklist_item(task_id, item)
            action = "Toggled"
        else:
            task = service.add_checklist_item(task_id, item)
            action = "Added"

        if json_output:
            typer.echo(json.dumps([c.to_dict() for c in task.checklist_items], indent=2))
        else:
            done_count = sum(1 for c in task.checklist_items if c.completed)
            console.print(
                f"[green]✓[/green] {action} checklist item "
                f"[dim]({done_count}/{len(task.checklist_items)} done)[/dim]"
            )

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def done(
    task_ids: str = typer.Argument(..., help="Task ID(s) to complete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Complete one or more tasks. Repeating tasks roll to their next date.

    Example:
        doerfy done 5
        doerfy done 3,5,7
    """
    completed_tasks = []
    errors = []

    for id_str in task_ids.split(","):
        id_str = id_str.strip()
        if not id_str:
            continue
        try:
            completed_tasks.append(service.complete_task(int(id_str)))
        except ValueError:
            errors.append(f"Invalid task ID: {id_str}")
        except DoerfyError as e:
            errors.append(str(e))

    if json_output:
        typer.echo(TaskFormatter.to_json_array(completed_tasks))
    elif raw:
        for task in completed_tasks:
            typer.echo(f"Completed: {task.title}")
    else:
        for task in completed_tasks:
            if task.time_stage == "done":
                console.print(f"[green]✓[/green] Completed: {task.title}")
            else:
                console.print(
                    f"[green]✓[/green] Completed: {task.title} "
                    f"[dim](next: {task.schedule.date})[/dim]"
                )

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not completed_tasks:
            raise typer.Exit(1)


@app.command()
def rm(
    task_ids: str = typer.Argument(..., help="Task ID(s) to delete (comma-separated)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Delete one or more tasks permanently.

    Confirms before deleting multiple tasks (use -y to skip).

    Example:
        doerfy rm 5
        doerfy rm 3,5,7 --yes
    """
    try:
        ids = parse_task_ids(task_ids)
    except ValueError:
        error_console.print(f"[red]Error:[/red] Invalid task ID(s): {task_ids}")
        raise typer.Exit(1)

    if not yes and len(ids) > 1:
        console.print(f"[yellow]About to delete {len(ids)} task(s)[/yellow]")
        if not typer.confirm("Continue?", default=False):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    deleted_tasks = []
    errors = []
    for task_id in ids:
        try:
            task = service.get_task_or_raise(task_id)
            service.delete_task(task_id)
            deleted_tasks.append({"id": task.id, "title": task.title})
        except TaskNotFoundError as e:
            errors.append(str(e))

    if json_output:
        typer.echo(json.dumps(deleted_tasks, indent=2))
    elif raw:
        for task in deleted_tasks:
            typer.echo(f"Deleted task {task['id']}: {task['title']}")
    else:
        for task in deleted_tasks:
            console.print(f"[red]✗[/red] Deleted task {task['id']}: {task['title']}")

    if errors:
        for error in errors:
            error_console.print(f"[red]Error:[/red] {error}")
        if not deleted_tasks:
            raise typer.Exit(1)
