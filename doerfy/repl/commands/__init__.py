"""
FILE: doerfy/repl/commands/__init__.py
PURPOSE: REPL command handler modules
"""

from .tasks import (
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
)
from .board import (
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
)
from .filters import (
    handle_view_command,
    handle_filter_command,
    handle_unfilter_command,
)
from .system import (
    handle_timebox_command,
    handle_banner_command,
    handle_seed_command,
    handle_help_command,
    handle_clear_command,
    handle_version_command,
)

__all__ = [
    "handle_add_command",
    "handle_ls_command",
    "handle_show_command",
    "handle_edit_command",
    "handle_desc_command",
    "handle_set_command",
    "handle_label_command",
    "handle_check_command",
    "handle_done_command",
    "handle_rm_command",
    "handle_mv_command",
    "handle_reorder_command",
    "handle_board_command",
    "handle_lists_command",
    "handle_calendar_command",
    "handle_home_command",
    "handle_refresh_command",
    "handle_schedule_command",
    "handle_unschedule_command",
    "handle_reschedule_command",
    "handle_view_command",
    "handle_filter_command",
    "handle_unfilter_command",
    "handle_timebox_command",
    "handle_banner_command",
    "handle_seed_command",
    "handle_help_command",
    "handle_clear_command",
    "handle_version_command",
]
