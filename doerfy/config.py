"""
FILE: doerfy/config.py
PURPOSE: Settings loaded from DOERFY_* environment variables
EXPORTS:
  - Settings (frozen dataclass)
  - get_settings() -> Settings
  - reset_settings() -> None
DEPENDENCIES:
  - os, getpass, pathlib (stdlib)
NOTES:
  - Nothing is required at import time; every value has a default
  - get_settings() caches one instance per process
"""

import getpass
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .core.constants import DEFAULT_LIST

ENV_PREFIX = "DOERFY"


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    return default if value is None or value.strip() == "" else value.strip()


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _default_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        # No login name in some containers
        return "me"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    db_path: Path
    log_file: Path
    log_level: str
    user: str
    default_list: str

    @staticmethod
    def from_env() -> "Settings":
        data_dir = _env_path(_k("HOME"), Path.home() / ".doerfy")
        return Settings(
            data_dir=data_dir,
            db_path=_env_path(_k("DB"), data_dir / "doerfy.db"),
            log_file=_env_path(_k("LOG_FILE"), data_dir / "doerfy.log"),
            log_level=_env(_k("LOG_LEVEL"), "WARNING").upper(),
            user=_env(_k("USER"), _default_user()),
            default_list=_env(_k("DEFAULT_LIST"), DEFAULT_LIST),
        )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Forget the cached settings (used by tests after changing the env)."""
    global _settings
    _settings = None
