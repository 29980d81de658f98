"""
FILE: doerfy/cli/main.py
PURPOSE: Typer-based CLI for one-shot Doerfy commands
EXPORTS:
  - app (Typer application)
  - timebox_app, banner_app (sub-command groups)
  - console, error_console (shared rich consoles)
  - main() (entry point)
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - doerfy.config / doerfy.logging_setup (startup)
  - doerfy.repl (interactive mode)
NOTES:
  - All listing commands support --json and --raw flags
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
  - Commands live in doerfy/cli/commands and register on import
"""

import typer
from rich.console import Console

from .. import __version__
from ..config import get_settings
from ..logging_setup import setup_logging

app = typer.Typer(
    name="doerfy",
    help="Time box task manager: queue, do, doing, today, done",
    add_completion=False,
)

timebox_app = typer.Typer(name="timebox", help="Time box (stage) configuration")
app.add_typer(timebox_app, name="timebox")

banner_app = typer.Typer(name="banner", help="Home banner images, quotes and audio")
app.add_typer(banner_app, name="banner")

console = Console()
error_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def default_command(ctx: typer.Context):
    """
    Doerfy - time box task manager.

    Run without a command to open the interactive REPL.
    """
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    if ctx.invoked_subcommand is None:
        from ..repl import main as repl_main

        try:
            repl_main()
        except Exception as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


# Import command modules to register commands with app
from .commands import (  # noqa: E402,F401
    add,
    ls,
    show,
    edit,
    desc,
    set_properties,
    label,
    check,
    done,
    rm,
    mv,
    reorder,
    board,
    lists,
    calendar,
    home,
    refresh,
    schedule,
    unschedule,
    reschedule,
    timebox_ls,
    timebox_set,
    timebox_reset,
    banner_show,
    banner_image,
    banner_quote,
    banner_audio,
    banner_set,
    banner_rm,
    seed,
    version,
    help,
    repl,
)


def main():
    """Main entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
