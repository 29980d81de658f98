"""
FILE: doerfy/cli/commands/__init__.py
PURPOSE: CLI command modules
"""

from .tasks import (
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
)
from .board import (
    mv,
    reorder,
    board,
    lists,
    calendar,
    home,
    refresh,
)
from .schedule import (
    schedule,
    unschedule,
    reschedule,
)
from .timeboxes import (
    timebox_ls,
    timebox_set,
    timebox_reset,
)
from .banner import (
    banner_show,
    banner_image,
    banner_quote,
    banner_audio,
    banner_set,
    banner_rm,
)
from .system import (
    seed,
    version,
    help,
    repl,
)

__all__ = [
    "add",
    "ls",
    "show",
    "edit",
    "desc",
    "set_properties",
    "label",
    "check",
    "done",
    "rm",
    "mv",
    "reorder",
    "board",
    "lists",
    "calendar",
    "home",
    "refresh",
    "schedule",
    "unschedule",
    "reschedule",
    "timebox_ls",
    "timebox_set",
    "timebox_reset",
    "banner_show",
    "banner_image",
    "banner_quote",
    "banner_audio",
    "banner_set",
    "banner_rm",
    "seed",
    "version",
    "help",
    "repl",
]
