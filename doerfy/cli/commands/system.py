"""
FILE: doerfy/cli/commands/system.py
PURPOSE: System commands (seed, version, help, repl)
"""

import typer

from ..main import app, console, error_console
from ... import __version__
from ...core import service
from ...core.exceptions import DoerfyError


@app.command()
def seed(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation prompt"),
):
    """
    Fill the board with sample tasks (aging work, meetings, schedules).

    Example:
        doerfy seed --yes
    """
    if not yes and not typer.confirm("Add sample tasks to your board?", default=False):
        console.print("[yellow]Cancelled[/yellow]")
        raise typer.Exit(0)

    try:
        tasks = service.create_sample_tasks()
        service.refresh_tasks()
        console.print(f"[green]✓[/green] Added {len(tasks)} sample task(s). Try [bold]doerfy board[/bold]")

    except DoerfyError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """Show Doerfy version."""
    console.print(f"Doerfy v{__version__}")


@app.command()
def help():
    """Show available commands and usage."""
    console.print("\n[bold cyan]Doerfy[/bold cyan] - Time box task manager\n")
    console.print(f"[dim]Version {__version__}[/dim]\n")

    console.print("[bold]Usage:[/bold]")
    console.print("  doerfy [command] [options]")
    console.print("  doerfy                    [dim]# Launch interactive REPL (default)[/dim]\n")

    console.print("[bold]Commands:[/bold]")

    commands = [
        ("add", "Create a new task", 'doerfy add "Task title" [--list L] [--stage S]'),
        ("ls", "List tasks", "doerfy ls [--stage S] [--list L] [--label X] [--all]"),
        ("show", "View full task details and history", "doerfy show <task_id>"),
        ("edit", "Update task title", 'doerfy edit <task_id> "New title"'),
        ("desc", "Edit task description", "doerfy desc <task_id> [text]"),
        ("set", "Change task properties", "doerfy set <task_id> --priority high --list work"),
        ("label", "Add or remove labels", "doerfy label <task_id> name [-- -name]"),
        ("check", "Add or toggle checklist items", 'doerfy check <task_id> "text" | <n>'),
        ("done", "Complete task(s)", "doerfy done <task_id(s)>"),
        ("rm", "Delete task(s)", "doerfy rm <task_id(s)>"),
        ("mv", "Move task(s) to a stage", "doerfy mv <task_id(s)> <stage>"),
        ("reorder", "Drag a task onto another", "doerfy reorder <task_id> <over_id>"),
        ("board", "Time box board", "doerfy board [--hide-done]"),
        ("lists", "Tasks grouped by list", "doerfy lists"),
        ("calendar", "Month calendar of scheduled tasks", "doerfy calendar [YYYY-MM]"),
        ("home", "Today, aging and upcoming tasks", "doerfy home"),
        ("schedule", "Set a due date / repeat", "doerfy schedule <task_id> <date> [--repeat weekly]"),
        ("unschedule", "Remove a schedule", "doerfy unschedule <task_id>"),
        ("reschedule", "Move a task to another day", "doerfy reschedule <task_id> <date>"),
        ("refresh", "Recalculate stages and aging", "doerfy refresh"),
        ("timebox", "Show or change time boxes", "doerfy timebox ls | set <id> --warn N --expire N | reset"),
        ("banner", "Home banner media", "doerfy banner show | image URL | quote TEXT | audio URL | set"),
        ("seed", "Add sample tasks", "doerfy seed"),
        ("repl", "Launch interactive REPL", "doerfy repl"),
        ("version", "Show version", "doerfy version"),
        ("help", "Show this help message", "doerfy help"),
    ]

    for cmd, desc, example in commands:
        console.print(f"  [green]{cmd:10}[/green] {desc}")
        console.print(f"             [dim]{example}[/dim]\n")

    console.print("[bold]Global Options:[/bold]")
    console.print("  [yellow]--json[/yellow]    Output as JSON (for scripting)")
    console.print("  [yellow]--raw[/yellow]     Plain text output (no colors)")
    console.print("  [yellow]--help[/yellow]    Show detailed help for a command\n")

    console.print("[bold]Dates:[/bold] YYYY-MM-DD, today, tomorrow or +N (days from today)\n")


@app.command()
def repl():
    """
    Launch interactive REPL mode.

    The REPL provides:
    - Command history (up/down arrows)
    - Autocomplete (Tab key)
    - A current view (timebox, lists, calendar) with its own filters
    - Exit with Ctrl+D or type 'exit'

    Example:
        doerfy repl
    """
    from ...repl import main as repl_main

    try:
        repl_main()
    except Exception as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)
