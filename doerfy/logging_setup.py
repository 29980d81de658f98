"""
FILE: doerfy/logging_setup.py
PURPOSE: Configure stdlib logging for the CLI and REPL
EXPORTS:
  - setup_logging(level, log_file) -> None
DEPENDENCIES:
  - logging (stdlib)
  - rich.logging (RichHandler for the console)
NOTES:
  - Call once, at startup, before the first log call
  - Console output is quiet (WARNING) unless DOERFY_LOG_LEVEL says otherwise,
    the log file always gets DEBUG
  - Third-party loggers only reach the console at ERROR
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler


class _ConsoleNoiseFilter(logging.Filter):
    """Let doerfy logs through; other libraries only on errors."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "doerfy" or record.name.startswith("doerfy."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    level: Union[str, int] = logging.WARNING,
    log_file: Optional[Union[str, Path]] = None,
) -> None:
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    console_handler.setLevel(level)
    console_handler.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        try:
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        except OSError as e:
            logging.getLogger(__name__).warning("Cannot open log file %s: %s", log_file, e)
        else:
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(
                logging.Formatter(
                    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
                    datefmt="%Y-%m-%d %H:%M:%S",
                )
            )
            root.addHandler(file_handler)

    logging.captureWarnings(True)
