"""
FILE: doerfy/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - DoerfyCompleter (Completer for command/arg completion)
  - create_completer() -> DoerfyCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - doerfy.core.service (task ids and list names, loaded lazily)
NOTES:
  - Command names at the start of the line
  - Task ids as the first argument of commands that take one
  - Stages after "mv <ids>", views after "view"
  - Filter keys after "filter"/"unfilter", then values for that key
  - List names after "--list" and "filter list"
  - Sub-commands for "timebox" and "banner", flags after "--"
  - Case-insensitive matching
"""

import sqlite3
from typing import Iterable, List

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.constants import ENERGIES, PRIORITIES, RECURRENCE_TYPES, TIME_STAGES, VIEWS, WEEKDAYS
from ..core.exceptions import DoerfyError


class DoerfyCompleter(Completer):
    """
    Custom completer for the Doerfy REPL.

    Provides context-aware autocomplete for commands, stages, views,
    filter keys, task ids and list names.
    """

    COMMANDS = {
        "add": "Create a new task",
        "ls": "List tasks",
        "show": "Task details and history",
        "edit": "Rename a task",
        "desc": "Set description",
        "set": "Change properties",
        "label": "Add or remove labels",
        "check": "Checklist items",
        "done": "Complete tasks",
        "rm": "Delete tasks",
        "mv": "Move tasks to a stage",
        "reorder": "Drop a task onto another",
        "board": "Time box board",
        "lists": "Tasks by list",
        "calendar": "Month calendar",
        "home": "Today, aging, upcoming",
        "refresh": "Recalculate stages and aging",
        "schedule": "Set a due date",
        "unschedule": "Remove a schedule",
        "reschedule": "Move to another day",
        "view": "Switch view",
        "filter": "Filter the active view",
        "unfilter": "Clear filters",
        "timebox": "Time box settings",
        "banner": "Home banner",
        "seed": "Add sample tasks",
        "help": "Show available commands",
        "clear": "Clear the screen",
        "version": "Show version",
        "exit": "Exit REPL",
        "quit": "Exit REPL",
    }

    # Commands whose first argument is a task id (or comma list of ids)
    ID_FIRST = (
        "show", "edit", "desc", "set", "label", "check", "done", "rm",
        "mv", "reorder", "schedule", "unschedule", "reschedule",
    )

    SUBCOMMANDS = {
        "timebox": ["ls", "set", "reset"],
        "banner": ["show", "image", "quote", "audio", "set", "rm"],
    }

    COMMAND_FLAGS = {
        "add": ["--list", "--stage", "--priority", "--energy", "--label", "--desc"],
        "ls": ["--all", "--stage"],
        "set": [
            "--priority", "--energy", "--list", "--location", "--story", "--icon",
            "--assignee", "--highlight", "--board", "--in-list", "--in-calendar",
        ],
        "check": ["--rm"],
        "rm": ["--yes"],
        "schedule": [
            "--time", "--lead-days", "--lead-hours", "--repeat", "--every",
            "--on", "--day", "--workdays", "--until", "--times",
        ],
        "timebox": ["--warn", "--expire", "--name", "--desc", "--clear", "--yes"],
        "banner": ["--author", "--name", "--transition", "--autoplay", "--volume", "--rotate", "--quote-duration"],
        "seed": ["--yes"],
    }

    # Flag -> fixed values offered after it
    FLAG_VALUES = {
        "--stage": TIME_STAGES,
        "--priority": PRIORITIES,
        "--energy": ENERGIES,
        "--repeat": RECURRENCE_TYPES,
        "--on": WEEKDAYS,
    }

    FILTER_KEYS = ["stage", "list", "priority", "energy", "label", "assignee", "location", "story", "due"]

    FILTER_VALUES = {
        "stage": TIME_STAGES,
        "time_stage": TIME_STAGES,
        "priority": PRIORITIES,
        "energy": ENERGIES,
        "due": ("today", "tomorrow"),
        "due_date": ("today", "tomorrow"),
    }

    def get_completions(self, document: Document, complete_event) -> Iterable[Completion]:
        """
        Generate completions based on the text before the cursor.

        The word being typed is the last word, or "" right after a space.
        """
        text = document.text_before_cursor
        words = text.split()
        typing = bool(words) and not text.endswith(" ")
        word = words[-1] if typing else ""
        # Words already finished before the one being typed
        done = words[:-1] if typing else words

        if not done:
            yield from self._match(word, self.COMMANDS)
            return

        command = done[0].lower()
        position = len(done)  # index of the word being typed

        # Values for the flag just before the cursor
        previous = done[-1].lower()
        if previous == "--list":
            yield from self._complete_list_names(word)
            return
        if previous in self.FLAG_VALUES:
            yield from self._match(word, self.FLAG_VALUES[previous])
            return

        if word.startswith("--"):
            yield from self._match(word, self.COMMAND_FLAGS.get(command, []), meta="flag")
            return

        if command in self.SUBCOMMANDS and position == 1:
            yield from self._match(word, self.SUBCOMMANDS[command])
            return

        if command == "timebox" and position == 2 and done[1].lower() == "set":
            yield from self._match(word, TIME_STAGES, meta="time box")
            return

        if command == "view" and position == 1:
            yield from self._match(word, VIEWS, meta="view")
            return

        if command == "unfilter" and position == 1:
            yield from self._match(word, self.FILTER_KEYS + ["all"], meta="filter")
            return

        if command == "filter":
            if position == 1:
                yield from self._match(word, self.FILTER_KEYS, meta="filter")
                return
            key = done[1].lower()
            if key in ("list", "list_name"):
                yield from self._complete_list_names(word)
            elif key in self.FILTER_VALUES:
                yield from self._match(word, self.FILTER_VALUES[key])
            return

        if command in self.ID_FIRST and position == 1:
            yield from self._complete_task_ids(word)
            return

        if command == "reorder" and position == 2:
            yield from self._complete_task_ids(word)
            return

        if command == "mv" and position == 2:
            yield from self._match(word, TIME_STAGES, meta="stage")
            return

    @staticmethod
    def _match(word: str, options, meta: str = "") -> Iterable[Completion]:
        """Options starting with ``word``; dict options carry their own meta."""
        word_lower = word.lower()
        for option in options:
            if option.lower().startswith(word_lower):
                display_meta = options[option] if isinstance(options, dict) else meta
                yield Completion(option, start_position=-len(word), display_meta=display_meta)

    def _complete_task_ids(self, word: str) -> Iterable[Completion]:
        """Task ids labelled with title and stage; completes after a comma too."""
        from ..core import service

        current = word.rpartition(",")[2]
        try:
            tasks = service.list_tasks()
        except (DoerfyError, sqlite3.Error):
            return

        for task in tasks[:200]:
            id_str = str(task.id)
            if id_str.startswith(current):
                title = task.title if len(task.title) <= 40 else task.title[:37] + "..."
                yield Completion(
                    id_str,
                    start_position=-len(current),
                    display=id_str,
                    display_meta=f"{title} [{task.time_stage}]",
                )

    def _complete_list_names(self, word: str) -> Iterable[Completion]:
        from ..core import service

        try:
            names: List[str] = service.list_names()
        except (DoerfyError, sqlite3.Error):
            return
        for name in names:
            if name.lower().startswith(word.lower()):
                text = f'"{name}"' if " " in name else name
                yield Completion(text, start_position=-len(word), display=text, display_meta="list")


def create_completer() -> DoerfyCompleter:
    """
    Create and return a DoerfyCompleter instance.

    Usage:
        completer = create_completer()
        session = PromptSession(completer=completer)
    """
    return DoerfyCompleter()
