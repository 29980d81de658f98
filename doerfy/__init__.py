"""
Doerfy - time-boxed personal task manager.

Tasks flow through ordered stages (queue -> do -> doing -> today -> done),
age inside each stage and can be scheduled against a due date.
"""

__version__ = "0.4.0"
