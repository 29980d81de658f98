"""
FILE: doerfy/repl/__init__.py
PURPOSE: REPL package for interactive board management
EXPORTS:
  - main() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - doerfy.core.service (business logic)
NOTES:
  - Entry point for interactive mode
  - Keeps the active view and per-view filters for the session
"""

from .main import main

__all__ = ["main"]
