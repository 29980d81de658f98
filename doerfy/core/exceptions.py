"""
FILE: doerfy/core/exceptions.py
PURPOSE: Custom exception classes for error handling
EXPORTS:
  - DoerfyError (base exception)
  - TaskNotFoundError
  - TimeBoxNotFoundError
  - ChecklistItemNotFoundError
  - InvalidInputError
  - InvalidStageError
  - InvalidDropTargetError
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - All exceptions inherit from DoerfyError for easy catching
  - Exceptions include context (IDs, stages) for helpful error messages
  - Service layer raises these, UI layers catch and display
"""


class DoerfyError(Exception):
    """Base exception for all Doerfy errors."""
    pass


class TaskNotFoundError(DoerfyError):
    """Task with given ID doesn't exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found")


class TimeBoxNotFoundError(DoerfyError):
    """Time box with given ID doesn't exist."""

    def __init__(self, time_box_id: str):
        self.time_box_id = time_box_id
        super().__init__(f"Time box '{time_box_id}' not found")


class ChecklistItemNotFoundError(DoerfyError):
    """Checklist item doesn't exist on the task."""

    def __init__(self, task_id: int, item_id: str):
        self.task_id = task_id
        self.item_id = item_id
        super().__init__(f"Checklist item '{item_id}' not found on task {task_id}")


class InvalidInputError(DoerfyError):
    """Input validation failed."""

    def __init__(self, message: str):
        super().__init__(message)


class InvalidStageError(InvalidInputError):
    """Stage name is not one of the known time stages."""

    def __init__(self, stage: str, valid=None):
        self.stage = stage
        message = f"Invalid stage '{stage}'"
        if valid:
            message += f". Must be one of: {', '.join(valid)}"
        super().__init__(message)


class InvalidDropTargetError(DoerfyError):
    """A task cannot be dropped onto the requested stage."""

    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"Cannot move a task from '{source}' to '{target}'")
