"""
FILE: doerfy/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL
"""

import os
import subprocess
import sys
import tempfile
from typing import List, Optional

from ..main import console, repl_context
from ..parser import ParseResult
from ..display import display_task
from ...core import service
from ...core.constants import STAGE_DONE
from ...core.exceptions import DoerfyError
from ...formatting import TaskFormatter, parse_task_ids

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def ask_confirmation(message: str) -> bool:
    """Ask user for confirmation (y/n)."""
    response = input(f"{message} (y/n): ").strip().lower()
    return response in ("y", "yes")


def task_ids_arg(result: ParseResult, usage: str) -> Optional[List[int]]:
    """Comma-separated ids from the first argument; prints usage when missing."""
    if not result.args:
        console.print("[red]Error:[/red] Task ID required")
        console.print(f"[dim]Usage: {usage}[/dim]")
        return None
    try:
        ids = parse_task_ids(result.args[0])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid task ID(s): {result.args[0]}")
        return None
    if not ids:
        console.print(f"[red]Error:[/red] Invalid task ID(s): {result.args[0]}")
        return None
    return ids


def task_id_arg(result: ParseResult, usage: str) -> Optional[int]:
    ids = task_ids_arg(result, usage)
    if ids is None:
        return None
    if len(ids) > 1:
        console.print("[red]Error:[/red] This command takes a single task ID")
        return None
    return ids[0]


def flag_bool(value) -> Optional[bool]:
    """
    Read a boolean flag: "--highlight" alone means True, otherwise the
    value must be yes/no, on/off, true/false or 1/0.
    """
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Expected yes or no, got '{value}'")


def split_values(value) -> List[str]:
    """Comma-separated flag values as a list (a bare flag gives nothing)."""
    if value is None or isinstance(value, bool):
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    Usage:
        add Buy groceries
        add "Call the bank" --list errands --stage today --priority high
        add "Plan trip" --label travel,summer --desc "Book flights first"
    """
    if not result.args:
        console.print("[red]Error:[/red] Task title required")
        console.print("[dim]Usage: add <title> [--list L] [--stage S] [--priority P][/dim]")
        return

    title = " ".join(result.args)

    # Fall back to the list the current view is filtered on
    list_name = result.flag("list")
    if not isinstance(list_name, str):
        list_name = repl_context.active_filters().get("list_name")
    description = result.flag("desc")
    if not isinstance(description, str):
        description = ""

    try:
        task = service.create_task(
            title=title,
            list_name=list_name,
            time_stage=str(result.flag("stage", "queue")),
            description=description,
            priority=str(result.flag("priority", "medium")),
            energy=str(result.flag("energy", "medium")),
            labels=split_values(result.flag("label")),
        )
        console.print(
            f"[green]✓ Created task [bold]#{task.id}[/bold]:[/green] {task.title} "
            f"[dim]({task.list_name}, {task.time_stage})[/dim]"
        )
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - table of tasks under the active view's filters.

    Usage:
        ls
        ls --all          (include done tasks)
        ls --stage doing
    """
    include_done = bool(result.flag("all", False))
    stage = result.flag("stage")

    try:
        if isinstance(stage, str):
            tasks = service.list_tasks(time_stage=stage)
        else:
            tasks = service.list_tasks(include_done=include_done)
        tasks = repl_context.filter_tasks(tasks)

        if not tasks:
            console.print("[dim]No tasks found[/dim]")
            return
        console.print(TaskFormatter.create_table(tasks, title=f"Tasks ({len(tasks)})"))
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_show_command(result: ParseResult) -> None:
    """
    Handle 'show' command - property sheet, checklist and history.

    Usage:
        show 5
    """
    task_id = task_id_arg(result, "show <task_id>")
    if task_id is None:
        return
    try:
        console.print(TaskFormatter.create_detail(service.get_task_or_raise(task_id)))
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - rename a task.

    Usage:
        edit 5 New title here
    """
    task_id = task_id_arg(result, "edit <task_id> <new title>")
    if task_id is None:
        return
    if len(result.args) < 2:
        console.print("[red]Error:[/red] New title required")
        console.print("[dim]Usage: edit <task_id> <new title>[/dim]")
        return
    try:
        task = service.update_task_title(task_id, " ".join(result.args[1:]))
        console.print(f"[blue]✎[/blue] Renamed task {task.id}: {task.title}")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def _edit_in_editor(initial: str) -> str:
    editor = os.environ.get("EDITOR") or ("notepad" if sys.platform == "win32" else "nano")
    with tempfile.NamedTemporaryFile(mode="w", suffix=".txt", delete=False, encoding="utf-8") as f:
        f.write(initial)
        temp_path = f.name
    try:
        subprocess.run([editor, temp_path], check=True)
        with open(temp_path, "r", encoding="utf-8") as f:
            return f.read()
    finally:
        os.unlink(temp_path)


def handle_desc_command(result: ParseResult) -> None:
    """
    Handle 'desc' command - set or clear a description.

    Usage:
        desc 5 Bring the signed forms
        desc 5            (opens $EDITOR)
    """
    task_id = task_id_arg(result, "desc <task_id> [text]")
    if task_id is None:
        return
    try:
        if len(result.args) > 1:
            text = " ".join(result.args[1:])
        else:
            text = _edit_in_editor(service.get_task_or_raise(task_id).description or "")

        task = service.update_task_description(task_id, text)
        verb = "Updated" if task.description else "Cleared"
        console.print(f"[blue]✎[/blue] {verb} description for task {task.id}: {task.title}")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
    except (OSError, subprocess.CalledProcessError) as e:
        console.print(f"[red]Error:[/red] Editor failed: {e}")


# REPL flag -> task property
_SET_FLAGS = {
    "priority": "priority",
    "energy": "energy",
    "list": "list_name",
    "location": "location",
    "story": "story",
    "icon": "icon",
    "assignee": "assignee",
    "highlight": "highlighted",
    "board": "show_in_time_box",
    "in-list": "show_in_list",
    "in-calendar": "show_in_calendar",
}
_BOOL_PROPERTIES = ("highlighted", "show_in_time_box", "show_in_list", "show_in_calendar")


def handle_set_command(result: ParseResult) -> None:
    """
    Handle 'set' command - change task properties.

    Usage:
        set 5 --priority high --list work
        set 5 --highlight            (--highlight no to turn off)
        set 5 --location ""          (clears)
    """
    task_id = task_id_arg(result, "set <task_id> --priority P --list L ...")
    if task_id is None:
        return

    unknown = [name for name in result.flags if name not in _SET_FLAGS]
    if unknown:
        console.print(f"[red]Error:[/red] Unknown option --{unknown[0]}")
        console.print(f"[dim]Options: {', '.join('--' + f for f in _SET_FLAGS)}[/dim]")
        return

    changes = {}
    try:
        for flag, key in _SET_FLAGS.items():
            if flag not in result.flags:
                continue
            value = result.flags[flag]
            if key in _BOOL_PROPERTIES:
                changes[key] = flag_bool(value)
            elif value is True:
                # "--location" with nothing after it clears
                changes[key] = ""
            else:
                changes[key] = value
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    if not changes:
        console.print("[red]Error:[/red] Nothing to change")
        return

    try:
        task = service.update_task_properties(task_id, **changes)
        console.print(f"[blue]✎[/blue] Updated task {task.id}: [dim]{', '.join(sorted(changes))}[/dim]")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_label_command(result: ParseResult) -> None:
    """
    Handle 'label' command - add labels, or remove ones prefixed with '-'.

    Usage:
        label 5 urgent home
        label 5 -urgent
    """
    task_id = task_id_arg(result, "label <task_id> <label> [-label]")
    if task_id is None:
        return
    if len(result.args) < 2:
        console.print("[red]Error:[/red] Label required")
        return
    try:
        task = None
        for name in result.args[1:]:
            if name.startswith("-") and len(name) > 1:
                task = service.remove_label(task_id, name[1:])
            else:
                task = service.add_label(task_id, name)
        labels = ", ".join(task.labels) if task.labels else "none"
        console.print(f"[blue]✎[/blue] Task {task.id} labels: [dim]{labels}[/dim]")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_check_command(result: ParseResult) -> None:
    """
    Handle 'check' command - checklist items.

    Usage:
        check 5 "Buy stamps"     (add an item)
        check 5 2                (toggle item 2)
        check 5 2 --rm           (remove item 2)
    """
    task_id = task_id_arg(result, "check <task_id> <text | item number>")
    if task_id is None:
        return
    if len(result.args) < 2:
        try:
            task = service.get_task_or_raise(task_id)
        except DoerfyError as e:
            console.print(f"[red]Error:[/red] {e}")
            return
        if not task.checklist_items:
            console.print("[dim]No checklist items[/dim]")
        for number, item in enumerate(task.checklist_items, start=1):
            mark = "[green]✓[/green]" if item.completed else " "
            console.print(f"  [{mark}] {number}. {item.text}")
        return

    item = " ".join(result.args[1:])
    try:
        task = service.get_task_or_raise(task_id)
        known = {c.id for c in task.checklist_items}
        is_reference = item in known or (item.isdigit() and 1 <= int(item) <= len(task.checklist_items))

        if result.flag("rm"):
            service.remove_checklist_item(task_id, item)
            console.print(f"[red]✗[/red] Removed checklist item {item} from task {task_id}")
        elif is_reference:
            task = service.toggle_checklist_item(task_id, item)
            done_count = sum(1 for c in task.checklist_items if c.completed)
            console.print(
                f"[green]✓[/green] Toggled item {item} "
                f"[dim]({done_count}/{len(task.checklist_items)} done)[/dim]"
            )
        else:
            task = service.add_checklist_item(task_id, item)
            console.print(f"[green]+[/green] Added item {len(task.checklist_items)} to task {task_id}: {item}")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_done_command(result: ParseResult) -> None:
    """
    Handle 'done' command - complete tasks (recurring ones roll forward).

    Usage:
        done 42
        done 1,2,3
    """
    ids = task_ids_arg(result, "done <task_id(s)>")
    if ids is None:
        return

    for task_id in ids:
        try:
            task = service.complete_task(task_id)
            if task.time_stage == STAGE_DONE:
                display_task(task, "✓ Completed:", console)
            else:
                display_task(task, f"↻ Next occurrence {task.schedule.date}:", console)
        except DoerfyError as e:
            console.print(f"[red]Error:[/red] {e}")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete tasks after confirmation.

    Usage:
        rm 42
        rm 1,2,3 --yes
    """
    ids = task_ids_arg(result, "rm <task_id(s)> [--yes]")
    if ids is None:
        return

    try:
        tasks = [service.get_task_or_raise(task_id) for task_id in ids]
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    if not result.flag("yes"):
        names = ", ".join(f"#{t.id} {t.title}" for t in tasks)
        if not ask_confirmation(f"Delete {names}?"):
            console.print("[yellow]Cancelled[/yellow]")
            return

    for task in tasks:
        try:
            service.delete_task(task.id)
            console.print(f"[red]✗[/red] Deleted task {task.id}: {task.title}")
        except DoerfyError as e:
            console.print(f"[red]Error:[/red] {e}")
