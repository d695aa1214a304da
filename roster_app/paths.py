"""
roster_app/paths.py -- Data directory resolution.

The collection lives in the platform's user data directory (via
platformdirs) unless ``ROSTER_DATA_DIR`` points somewhere else.
"""

from __future__ import annotations

import os

from platformdirs import user_data_dir

from roster.persistence import STORAGE_KEY

_APP_NAME = "EmployeeRoster"
_APP_AUTHOR = "EmployeeRoster"

DATA_DIR_ENV = "ROSTER_DATA_DIR"

__all__ = ["DATA_DIR_ENV", "STORAGE_KEY", "get_data_dir", "get_user_data_dir"]


def get_user_data_dir() -> str:
    """Return the platform-appropriate user data directory."""
    path = user_data_dir(_APP_NAME, _APP_AUTHOR)
    os.makedirs(path, exist_ok=True)
    return path


def get_data_dir(override: str | None = None) -> str:
    """Return the directory holding the persisted collection.

    Precedence: *override* (e.g. a ``--data-dir`` flag), then the
    ``ROSTER_DATA_DIR`` environment variable, then the user data directory.
    """
    path = override or os.environ.get(DATA_DIR_ENV)
    if path:
        path = os.path.abspath(os.path.expanduser(path))
        os.makedirs(path, exist_ok=True)
        return path
    return get_user_data_dir()
