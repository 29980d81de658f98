"""
FILE: doerfy/repl/commands/filters.py
PURPOSE: View switching and per-view filter handlers for REPL
"""

from typing import Dict, Tuple

from ..main import console, repl_context
from ..parser import ParseResult
from ..display import display_view
from ...core.constants import ENERGIES, PRIORITIES, TIME_STAGES, VIEWS
from ...core.dates import parse_date_input
from ...core.exceptions import DoerfyError, InvalidInputError
from ...core.filters import FILTER_KEYS, LIST_KEYS

# Short names accepted for filter keys
FILTER_ALIASES = {
    "stage": "time_stage",
    "list": "list_name",
    "label": "labels",
    "due": "due_date",
}

_ALLOWED_VALUES: Dict[str, Tuple[str, ...]] = {
    "time_stage": TIME_STAGES,
    "priority": PRIORITIES,
    "energy": ENERGIES,
}


def resolve_filter_key(name: str) -> str:
    """Map an alias to its filter key; raises for unknown names."""
    key = FILTER_ALIASES.get(name.lower(), name.lower())
    if key not in FILTER_KEYS:
        raise InvalidInputError(
            f"Unknown filter '{name}'. Use one of: {', '.join(sorted(set(FILTER_KEYS) | set(FILTER_ALIASES)))}"
        )
    return key


def parse_filter_value(key: str, values):
    """
    Turn the typed words into a criterion value.

    List keys take several values (space or comma separated); the others
    take one. Stage, priority and energy values are checked.
    """
    words = [part.strip() for value in values for part in value.split(",") if part.strip()]
    if not words:
        raise InvalidInputError(f"Filter '{key}' needs a value")

    allowed = _ALLOWED_VALUES.get(key)
    if allowed:
        words = [w.lower() for w in words]
        bad = [w for w in words if w not in allowed]
        if bad:
            raise InvalidInputError(f"Invalid {key} '{bad[0]}'. Must be one of: {', '.join(allowed)}")

    if key in LIST_KEYS:
        return words
    if key == "due_date":
        return parse_date_input(words[0])
    return " ".join(words)


def handle_view_command(result: ParseResult) -> None:
    """
    Handle 'view' command - switch the active view and render it.

    Usage:
        view                  (re-render the current view)
        view lists
        view calendar
    """
    if result.args:
        view = result.args[0].lower()
        if view not in VIEWS:
            console.print(f"[red]Error:[/red] Invalid view '{view}'")
            console.print(f"[dim]Views: {', '.join(VIEWS)}[/dim]")
            return
        repl_context.view = view
        console.print(f"✓ Switched to [cyan]{view}[/cyan] view")

    try:
        display_view(repl_context, console)
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")


def handle_filter_command(result: ParseResult) -> None:
    """
    Handle 'filter' command - show or set the active view's filters.

    Usage:
        filter                       (show active filters)
        filter priority high medium
        filter stage doing,today
        filter list work
        filter due tomorrow
    """
    view = repl_context.view
    if not result.args:
        active = repl_context.active_filters()
        if not active:
            console.print(f"[dim]No filters on the {view} view[/dim]")
            return
        console.print(f"Filters on [cyan]{view}[/cyan]:")
        for key, value in active.items():
            shown = ", ".join(value) if isinstance(value, list) else value
            console.print(f"  [yellow]{key}[/yellow] = {shown}")
        return

    try:
        key = resolve_filter_key(result.args[0])
        value = parse_filter_value(key, result.args[1:])
        repl_context.filters.set_filter(view, **{key: value})
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
        return

    shown = ", ".join(value) if isinstance(value, list) else value
    console.print(f"✓ Filtering [cyan]{view}[/cyan] by {key} = {shown}")


def handle_unfilter_command(result: ParseResult) -> None:
    """
    Handle 'unfilter' command - clear one filter or all of them.

    Usage:
        unfilter priority
        unfilter all          (or just: unfilter)
    """
    view = repl_context.view
    name = result.args[0].lower() if result.args else "all"

    try:
        if name == "all":
            repl_context.filters.clear_all_filters(view)
            console.print(f"✓ Cleared all filters on [cyan]{view}[/cyan]")
            return
        key = resolve_filter_key(name)
        repl_context.filters.clear_filter(view, key)
        console.print(f"✓ Cleared {key} filter on [cyan]{view}[/cyan]")
    except DoerfyError as e:
        console.print(f"[red]Error:[/red] {e}")
