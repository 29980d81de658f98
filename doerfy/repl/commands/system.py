"""
FILE: doerfy/repl/commands/system.py
PURPOSE: Time box, banner and system command handlers for REPL
"""

from rich.panel import Panel

from ..main import console
from ..parser import ParseResult
from .tasks import ask_confirmation, flag_bool
from ... import __version__
from ...core import service
from ...core.exceptions import DoerfyError
from ...formatting import TaskFormatter


def _int_or_none(value, name: str):
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"--{name} needs a whole number")


def handle_timebox_command(result: ParseResult) -> None:
    """
    Handle 'timebox' command - show or change time boxes.

    Usage:
        timebox                       (same as timebox ls)
        timebox set doing --warn 4 --expire 5
        timebox set queue --name Backlog
        timebox set do --clear
        timebox reset
    """
    sub = result.args[0].lower() if result.args else "ls"

    try:
        if sub == "ls":
            console.print(TaskFormatter.create_time_box_table(service.list_time_boxes()))

        elif sub == "set":
            if len(result.args) < 2:
                console.print("[red]Error:[/red] Time box id required")
                console.print("[dim]Usage: timebox set <id> [--warn N] [--expire N] [--name X] [--clear][/dim]")
                return
            name = result.flag("name")
            description = result.flag("desc")
            time_box = service.update_time_box(
                result.args[1].lower(),
                name=name if isinstance(name, str) else None,
                description=description if isinstance(description, str) else None,
                warn_threshold=_int_or_none(result.flag("warn"), "warn"),
                expire_threshold=_int_or_none(result.flag("expire"), "expire"),
                clear_thresholds=bool(result.flag("clear", False)),
            )
            warn = "-" if time_box.warn_threshold is None else time_box.warn_threshold
            expire = "-" if time_box.expire_threshold is None else time_box.expire_threshold
            console.print(f"[green]✓[/green] Updated {time_box.id} ({time_box.name}): warn={warn}, expire={expire}")

        elif sub == "reset":
            if not result.flag("yes") and not ask_confirmation("Reset all time boxes to defaults?"):
                console.print("[yellow]Cancelled[/yellow]")
                return
            time_boxes = service.reset_time_boxes()
            console.print(f"[green]✓[/green] Reset {len(time_boxes)} time box(es)")

        else:
            console.print(f"[red]Error:[/red] Unknown timebox command '{sub}'")
            console.print("[dim]Use: timebox ls | set | reset[/dim]")

    except (ValueError, DoerfyError) as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_banner_command(result: ParseResult) -> None:
    """
    Handle 'banner' command - home banner media and playback settings.

    Usage:
        banner                                  (show)
        banner image https://example.com/a.jpg
        banner quote "Well begun is half done" --author Aristotle
        banner audio https://example.com/rain.mp3 --name Rain
        banner set --volume 30 --transition 8 --rotate no
        banner rm quote 2
    """
    sub = result.args[0].lower() if result.args else "show"
    rest = result.args[1:]

    try:
        if sub == "show":
            console.print(TaskFormatter.create_banner_panel(service.get_banner_config()))

        elif sub in ("image", "audio", "quote"):
            if not rest:
                console.print(f"[red]Error:[/red] banner {sub} needs a value")
                return
            if sub == "image":
                config = service.add_banner_image(rest[0])
                console.print(f"[green]✓[/green] Added image #{len(config.images)}")
            elif sub == "audio":
                name = result.flag("name")
                config = service.add_banner_audio(rest[0], name if isinstance(name, str) else None)
                console.print(f"[green]✓[/green] Added track #{len(config.audio)}: {config.audio[-1]['name']}")
            else:
                author = result.flag("author")
                config = service.add_banner_quote(" ".join(rest), author if isinstance(author, str) else None)
                console.print(f"[green]✓[/green] Added quote #{len(config.quotes)}")

        elif sub == "set":
            service.update_banner_settings(
                transition_time=_int_or_none(result.flag("transition"), "transition"),
                autoplay=flag_bool(result.flag("autoplay")),
                volume=_int_or_none(result.flag("volume"), "volume"),
                quote_rotation=flag_bool(result.flag("rotate")),
                quote_duration=_int_or_none(result.flag("quote-duration"), "quote-duration"),
            )
            console.print("[green]✓[/green] Banner settings saved")

        elif sub == "rm":
            if len(rest) < 2 or not rest[1].isdigit():
                console.print("[red]Error:[/red] Usage: banner rm <image|quote|audio> <number>")
                return
            service.remove_banner_item(rest[0].lower(), int(rest[1]))
            console.print(f"[red]✗[/red] Removed {rest[0]} #{rest[1]}")

        else:
            console.print(f"[red]Error:[/red] Unknown banner command '{sub}'")
            console.print("[dim]Use: banner show | image | quote | audio | set | rm[/dim]")

    except (ValueError, DoerfyError) as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_seed_command(result: ParseResult) -> None:
    """Handle 'seed' command - add the sample tasks."""
    if not result.flag("yes") and not ask_confirmation("Add sample tasks to your board?"):
        console.print("[yellow]Cancelled[/yellow]")
        return
    try:
        tasks = service.create_sample_tasks()
        service.refresh_tasks()
        console.print(f"[green]✓[/green] Added {len(tasks)} sample task(s). Try [bold]board[/bold]")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_version_command(result: ParseResult) -> None:
    console.print(f"Doerfy v{__version__}")


def handle_help_command(result: ParseResult) -> None:
    """Handle 'help' command - show available commands."""
    help_text = """
[bold cyan]Tasks:[/bold cyan]

  [cyan]add <title> [--list L] [--stage S] [--priority P] [--label a,b][/cyan]
  [cyan]ls [--all] [--stage S][/cyan]          List tasks (active view filters apply)
  [cyan]show <id>[/cyan]                     Properties, checklist and history
  [cyan]edit <id> <title>[/cyan]             Rename a task
  [cyan]desc <id> [text][/cyan]              Set description ($EDITOR when no text)
  [cyan]set <id> --priority P --list L[/cyan]  Change properties (--highlight, --location ...)
  [cyan]label <id> name [-name][/cyan]       Add labels, remove with a leading -
  [cyan]check <id> <text|n> [--rm][/cyan]    Add, toggle or remove checklist items
  [cyan]done <id>[,<id>...][/cyan]           Complete tasks (repeating ones roll forward)
  [cyan]rm <id>[,<id>...] [--yes][/cyan]     Delete tasks

[bold cyan]Board:[/bold cyan]

  [cyan]mv <id>[,<id>...] <stage>[/cyan]     Move to queue, do, doing, today or done
  [cyan]reorder <id> <over_id>[/cyan]        Drop a task onto another
  [cyan]board[/cyan] / [cyan]lists[/cyan] / [cyan]calendar [YYYY-MM][/cyan]   Show a view
  [cyan]home[/cyan]                          Today, aging and upcoming tasks
  [cyan]refresh[/cyan]                       Recalculate stages and aging

[bold cyan]Scheduling:[/bold cyan]

  [cyan]schedule <id> <date> [--time HH:MM] [--lead-days N] [--lead-hours N][/cyan]
  [cyan]         [--repeat daily|weekly|monthly|yearly] [--every N] [--on mon,thu][/cyan]
  [cyan]         [--day N] [--workdays] [--until DATE] [--times N][/cyan]
  [cyan]unschedule <id>[/cyan] / [cyan]reschedule <id> <date>[/cyan]

[bold cyan]Views and filters:[/bold cyan]

  [cyan]view [timebox|lists|calendar][/cyan]  Switch view (each keeps its own filters)
  [cyan]filter [<key> <values>][/cyan]        Show or set filters on the active view
  [cyan]unfilter [<key>|all][/cyan]           Clear filters
  [dim]Keys: stage, list, priority, energy, label, assignee, location, story, due[/dim]

[bold cyan]Settings:[/bold cyan]

  [cyan]timebox [ls|set|reset][/cyan]         Time box names and aging thresholds
  [cyan]banner [show|image|quote|audio|set|rm][/cyan]  Home banner
  [cyan]seed[/cyan]                          Add sample tasks
  [cyan]help[/cyan] / [cyan]clear[/cyan] / [cyan]version[/cyan] / [cyan]exit[/cyan]

[dim]Dates: YYYY-MM-DD, today, tomorrow or +N[/dim]
"""
    console.print(Panel(help_text, title="Doerfy REPL Help", border_style="cyan"))


def handle_clear_command(result: ParseResult) -> None:
    """Clear the screen."""
    console.clear()
