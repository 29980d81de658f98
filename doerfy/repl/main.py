"""
FILE: doerfy/repl/main.py
PURPOSE: Interactive REPL for the time box board with prompt-toolkit
EXPORTS:
  - REPLContext (session state: active view and per-view filters)
  - repl_context (the session's REPLContext)
  - console (shared rich console)
  - execute_command(result) -> bool
  - run_repl() - Main REPL loop
  - main() - Entry point for REPL mode
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - doerfy.core.service (business logic)
  - doerfy.core.filters (per-view filter state)
  - doerfy.repl.parser / completer / commands
NOTES:
  - The prompt shows the active view and how many filters it has
  - Bottom toolbar shows stage counts and rotating tips
  - Each view keeps its own filters for the whole session
  - Ctrl+D or "exit"/"quit" to exit
  - Calls service layer directly (not CLI layer)
"""

import logging
import sys
from dataclasses import dataclass, field
from typing import List

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from ..core import service
from ..core.constants import (
    AGING_OVERDUE,
    AGING_WARNING,
    STAGE_DOING,
    STAGE_QUEUE,
    STAGE_TODAY,
    VIEW_TIMEBOX,
)
from ..core.exceptions import DoerfyError
from ..core.filters import FilterStore
from ..core.models import Task
from .completer import create_completer
from .parser import ParseResult, parse_command

logger = logging.getLogger(__name__)

# Rich console for formatted output
console = Console()


# --- REPL Context (Persistent State) ---


@dataclass
class REPLContext:
    """
    Persistent context for the REPL session.

    Attributes:
        view: Active view (timebox, lists or calendar)
        filters: Filter criteria of every view
    """
    view: str = VIEW_TIMEBOX
    filters: FilterStore = field(default_factory=FilterStore)

    def active_filters(self):
        return self.filters.active_filters(self.view)

    def get_prompt(self) -> str:
        """
        Plain prompt string for simple input mode.

        Returns:
            Prompt like "doerfy:[timebox]> " or "doerfy:[lists|2 filters]> "
        """
        count = len(self.active_filters())
        if count:
            noun = "filter" if count == 1 else "filters"
            return f"doerfy:[{self.view}|{count} {noun}]> "
        return f"doerfy:[{self.view}]> "

    def filter_tasks(self, tasks: List[Task]) -> List[Task]:
        """Apply the active view's filters."""
        return self.filters.filter_tasks(tasks, self.view)


# Global REPL context (persists across commands in session)
repl_context = REPLContext()


def format_prompt() -> HTML:
    """Colored prompt with the active view and filter count."""
    count = len(repl_context.active_filters())
    view = f"<style fg='ansicyan'>{repl_context.view}</style>"
    if count:
        noun = "filter" if count == 1 else "filters"
        view += f"<style fg='ansiyellow'>|{count} {noun}</style>"
    return HTML(f"<b>doerfy</b>:[{view}]&gt; ")


# Tips shown in the bottom toolbar, rotated after every command
TIPS = [
    "Tab completes commands, stages and task ids",
    "view lists | view calendar | view timebox",
    "filter priority high   (unfilter all to reset)",
    "mv 3 doing moves a task and resets its aging",
    "schedule 3 +2 --time 09:30 sets a due date",
    "done 3,4,5 completes several tasks",
    "home shows today, aging and upcoming tasks",
]
_tip_index = 0


def get_bottom_toolbar() -> HTML:
    """Stage counts plus a rotating tip."""
    tip = TIPS[_tip_index % len(TIPS)]
    try:
        tasks = service.list_tasks(include_done=False)
        counts = {stage: 0 for stage in (STAGE_QUEUE, STAGE_DOING, STAGE_TODAY)}
        aging = 0
        for task in tasks:
            if task.time_stage in counts:
                counts[task.time_stage] += 1
            if task.aging_status in (AGING_WARNING, AGING_OVERDUE):
                aging += 1
        stats = (
            f"{counts[STAGE_TODAY]} today | {counts[STAGE_DOING]} doing | "
            f"{counts[STAGE_QUEUE]} queued | {aging} aging"
        )
        return HTML(f"<style bg='#444444' fg='#ffffff'> {stats} | {tip} </style>")
    except DoerfyError:
        return HTML("<style bg='#444444' fg='#ffffff'> Doerfy </style>")


# Import command handlers from command modules
from .commands import (  # noqa: E402
    handle_add_command,
    handle_ls_command,
    handle_show_command,
    handle_edit_command,
    handle_desc_command,
    handle_set_command,
    handle_label_command,
    handle_check_command,
    handle_done_command,
    handle_rm_command,
    handle_mv_command,
    handle_reorder_command,
    handle_board_command,
    handle_lists_command,
    handle_calendar_command,
    handle_home_command,
    handle_refresh_command,
    handle_schedule_command,
    handle_unschedule_command,
    handle_reschedule_command,
    handle_view_command,
    handle_filter_command,
    handle_unfilter_command,
    handle_timebox_command,
    handle_banner_command,
    handle_seed_command,
    handle_help_command,
    handle_clear_command,
    handle_version_command,
)


HANDLERS = {
    "add": handle_add_command,
    "ls": handle_ls_command,
    "show": handle_show_command,
    "edit": handle_edit_command,
    "desc": handle_desc_command,
    "set": handle_set_command,
    "label": handle_label_command,
    "check": handle_check_command,
    "done": handle_done_command,
    "rm": handle_rm_command,
    "mv": handle_mv_command,
    "reorder": handle_reorder_command,
    "board": handle_board_command,
    "lists": handle_lists_command,
    "calendar": handle_calendar_command,
    "home": handle_home_command,
    "refresh": handle_refresh_command,
    "schedule": handle_schedule_command,
    "unschedule": handle_unschedule_command,
    "reschedule": handle_reschedule_command,
    "view": handle_view_command,
    "filter": handle_filter_command,
    "unfilter": handle_unfilter_command,
    "timebox": handle_timebox_command,
    "banner": handle_banner_command,
    "seed": handle_seed_command,
    "help": handle_help_command,
    "clear": handle_clear_command,
    "version": handle_version_command,
}


def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    # Just Enter pressed
    if not command:
        return True

    handler = HANDLERS.get(command)
    if handler:
        handler(result)
        console.print()
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()

    return True


def run_repl() -> None:
    """
    Main REPL loop.

    Uses a prompt_toolkit session (history, completion, toolbar) on a
    real terminal and plain input() when piped.

    Exits on Ctrl+D, "exit" or "quit". Ctrl+C only cancels the line.
    """
    global _tip_index

    session = None
    use_simple_input = not (sys.stdin.isatty() and sys.stdout.isatty())

    if not use_simple_input:
        session = PromptSession(
            history=InMemoryHistory(),
            completer=create_completer(),
            complete_while_typing=True,
            bottom_toolbar=get_bottom_toolbar,
        )

    # Aging and scheduled stages are stale until recalculated
    try:
        service.refresh_tasks()
    except DoerfyError as e:
        console.print(f"[yellow]Warning:[/yellow] Could not refresh tasks: {e}")

    console.print("[bold cyan]Doerfy REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if use_simple_input:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    while True:
        user_input = ""
        try:
            if use_simple_input:
                user_input = input(repl_context.get_prompt())
            else:
                user_input = session.prompt(format_prompt)

            if not execute_command(parse_command(user_input)):
                break
            _tip_index += 1

        except KeyboardInterrupt:
            console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
            continue
        except EOFError:
            console.print()
            console.print("[dim]Goodbye![/dim]")
            break
        except Exception as e:
            # Keep the session alive; details go to the log file
            logger.exception("Command failed: %s", user_input)
            console.print(f"[red]Unexpected error:[/red] {e}")


def main() -> None:
    """
    Entry point for REPL mode.

    Called when user runs: doerfy repl (or plain doerfy)
    """
    try:
        run_repl()
    except Exception as e:
        logger.exception("REPL crashed")
        console.print(f"[red]Fatal error:[/red] {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
