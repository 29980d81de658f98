"""
FILE: doerfy/core/samples.py
PURPOSE: Demo board used by `doerfy seed`
EXPORTS:
  - SAMPLE_TASKS: Task templates with day offsets relative to "now"
NOTES:
  - entered: days ago the task entered its stage
  - due: days from today the task is scheduled for (None = unscheduled)
"""

SAMPLE_TASKS = (
    # Overdue / aging work
    {
        "title": "Complete Q4 Financial Report",
        "description": "Finalize and submit Q4 financial analysis and projections",
        "time_stage": "doing",
        "entered": 30,
        "list": "work",
        "priority": "high",
        "energy": "high",
        "location": "office",
        "labels": ["finance", "quarterly", "reports"],
        "icon": "purple",
        "show_in_calendar": True,
    },
    {
        "title": "Update Team Documentation",
        "description": "Review and update the team wiki and onboarding docs",
        "time_stage": "do",
        "entered": 15,
        "list": "team",
        "priority": "medium",
        "energy": "medium",
        "labels": ["documentation", "team"],
        "icon": "blue",
    },
    {
        "title": "Client Presentation Review",
        "description": "Go through the slides with the client success team",
        "time_stage": "doing",
        "entered": 10,
        "list": "client",
        "priority": "high",
        "energy": "high",
        "location": "office",
        "labels": ["client", "presentation"],
        "icon": "red",
        "show_in_calendar": True,
    },
    # Today
    {
        "title": "Team Stand-up Meeting",
        "description": "Daily sync with the team",
        "time_stage": "today",
        "entered": 0,
        "list": "team",
        "priority": "medium",
        "energy": "medium",
        "location": "office",
        "labels": ["meeting", "team"],
        "icon": "green",
        "show_in_calendar": True,
        "due": 0,
        "time": "09:30",
        "lead_hours": 1,
        "recurring": {"type": "daily", "interval": 1, "workdays_only": True},
    },
    {
        "title": "Project Status Update",
        "description": "Send the weekly status mail to stakeholders",
        "time_stage": "today",
        "entered": 0,
        "list": "work",
        "priority": "high",
        "energy": "high",
        "location": "office",
        "labels": ["project", "status"],
        "icon": "orange",
        "show_in_calendar": True,
        "due": 0,
        "time": "14:00",
    },
    {
        "title": "Review Pull Requests",
        "description": "Clear the review queue",
        "time_stage": "today",
        "entered": 0,
        "list": "development",
        "priority": "medium",
        "energy": "high",
        "labels": ["development", "code-review"],
        "icon": "blue",
    },
    # Upcoming
    {
        "title": "Monthly Team Review",
        "description": "Monthly retrospective and planning",
        "time_stage": "queue",
        "entered": 0,
        "list": "team",
        "priority": "high",
        "energy": "high",
        "location": "office",
        "labels": ["team", "review", "monthly"],
        "icon": "purple",
        "show_in_calendar": True,
        "due": 7,
        "time": "10:00",
        "lead_days": 2,
        "recurring": {"type": "monthly", "interval": 1, "month_day": 1},
    },
    {
        "title": "Client Project Demo",
        "description": "Demo the new release to the client",
        "time_stage": "queue",
        "entered": 0,
        "list": "client",
        "priority": "high",
        "energy": "high",
        "location": "office",
        "labels": ["client", "demo", "presentation"],
        "icon": "red",
        "show_in_calendar": True,
        "due": 10,
        "time": "15:00",
        "lead_days": 3,
    },
    {
        "title": "Weekly Code Review",
        "description": "Walk through the week's merged changes",
        "time_stage": "queue",
        "entered": 0,
        "list": "development",
        "priority": "medium",
        "energy": "high",
        "labels": ["development", "code-review", "team"],
        "icon": "green",
        "show_in_calendar": True,
        "due": 5,
        "time": "11:00",
        "lead_days": 1,
        "recurring": {"type": "weekly", "interval": 1, "week_days": ["wed"]},
    },
    # Backlog
    {
        "title": "Update Development Environment",
        "description": "Upgrade tooling and dependencies",
        "time_stage": "queue",
        "entered": 0,
        "list": "development",
        "priority": "low",
        "energy": "medium",
        "labels": ["development", "maintenance"],
        "icon": "gray",
    },
    {
        "title": "Research New Technologies",
        "description": "Research and evaluate new technologies for upcoming projects",
        "time_stage": "queue",
        "entered": 0,
        "list": "research",
        "priority": "low",
        "energy": "high",
        "labels": ["research", "technology"],
        "icon": "purple",
    },
)
