"""
FILE: doerfy/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - TIME_STAGES: All stages in board order
  - ACTIVE_STAGES: Stages a task can age in (everything but done)
  - PRIORITIES / ENERGIES: Allowed property values
  - AGING_*: Derived aging labels
  - SCHEDULING_THRESHOLDS: Day windows used to place scheduled tasks
  - DEFAULT_TIME_BOXES: Stock time box configuration rows
  - VIEWS: Views that keep their own filter set
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Single source of truth for stage ids and default thresholds
  - Thresholds are whole days
"""

# Time stages (board order)
STAGE_QUEUE = "queue"
STAGE_DO = "do"
STAGE_DOING = "doing"
STAGE_TODAY = "today"
STAGE_DONE = "done"

TIME_STAGES = (STAGE_QUEUE, STAGE_DO, STAGE_DOING, STAGE_TODAY, STAGE_DONE)
ACTIVE_STAGES = (STAGE_QUEUE, STAGE_DO, STAGE_DOING, STAGE_TODAY)
DEFAULT_STAGE = STAGE_QUEUE

# Task properties
PRIORITIES = ("high", "medium", "low")
ENERGIES = ("high", "medium", "low")
DEFAULT_PRIORITY = "medium"
DEFAULT_ENERGY = "medium"
DEFAULT_LIST = "personal"
DEFAULT_ICON = "blue"
DEFAULT_TITLE = "New Task"

# Aging status labels
AGING_NORMAL = "normal"
AGING_WARNING = "warning"
AGING_OVERDUE = "overdue"
AGING_STATUSES = (AGING_NORMAL, AGING_WARNING, AGING_OVERDUE)

# Status counter written after a manual stage move
STATUS_RESET = "0"

# Days remaining (inclusive upper bound) for each scheduled stage.
# Anything beyond the "do" window falls back to the queue.
SCHEDULING_THRESHOLDS = {
    STAGE_TODAY: {"max": 0},
    STAGE_DOING: {"max": 7},
    STAGE_DO: {"max": 30},
}

# Recurrence
RECURRENCE_TYPES = ("daily", "weekly", "monthly", "yearly")
RECURRENCE_ENDS = ("endless", "date", "occurrences")
WEEKDAYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

# Views with independent filter sets
VIEW_TIMEBOX = "timebox"
VIEW_LISTS = "lists"
VIEW_CALENDAR = "calendar"
VIEWS = (VIEW_TIMEBOX, VIEW_LISTS, VIEW_CALENDAR)

# Stock time boxes (id, name, description, warn, expire, order)
DEFAULT_TIME_BOXES = (
    {
        "id": STAGE_QUEUE,
        "name": "Do Queue",
        "description": "Tasks waiting to be started",
        "warn_threshold": None,
        "expire_threshold": None,
        "order": 0,
    },
    {
        "id": STAGE_DO,
        "name": "Do",
        "description": "Tasks ready to be worked on",
        "warn_threshold": 24,
        "expire_threshold": 30,
        "order": 1,
    },
    {
        "id": STAGE_DOING,
        "name": "Doing",
        "description": "Tasks currently in progress",
        "warn_threshold": 6,
        "expire_threshold": 7,
        "order": 2,
    },
    {
        "id": STAGE_TODAY,
        "name": "Do Today",
        "description": "Tasks that need to be completed today",
        "warn_threshold": 1,
        "expire_threshold": 1,
        "order": 3,
    },
    {
        "id": STAGE_DONE,
        "name": "Done",
        "description": "Completed tasks",
        "warn_threshold": None,
        "expire_threshold": None,
        "order": 4,
    },
)

# Banner defaults
DEFAULT_TRANSITION_TIME = 5
DEFAULT_VOLUME = 50
DEFAULT_QUOTE_DURATION = 10
DEFAULT_TEXT_STYLE = {"font": "Inter", "size": 24, "color": "#FFFFFF"}
DEFAULT_QUOTE = "Create balance through a life of purpose and joy"
