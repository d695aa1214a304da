"""
roster/storage.py -- Key-value storage backends.

The persistence adapter only needs two operations::

    load(key) -> str | None
    save(key, text) -> None

``MemoryStorage`` keeps values in a dict; ``FileStorage`` keeps one
``<key>.json`` file per key in a directory, written atomically.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Protocol

from roster.errors import PersistenceError
from roster.utils import atomic_write_text, read_text

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, value: str) -> None: ...


def _check_key(key: str) -> str:
    if not isinstance(key, str) or not _KEY_RE.match(key) or key in (".", ".."):
        raise ValueError(
            f"Invalid storage key {key!r}. "
            f"Use letters, digits, '.', '_' or '-'."
        )
    return key


class MemoryStorage:
    """Dict-backed storage.  Nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self._values.get(_check_key(key))

    def save(self, key: str, value: str) -> None:
        self._values[_check_key(key)] = value


class FileStorage:
    """One JSON file per key under *directory*.

    Parameters
    ----------
    directory : str or pathlib.Path
        Folder holding the files; created on first save.
    """

    def __init__(self, directory):
        self.directory = os.path.abspath(str(directory))

    def path_for(self, key: str) -> str:
        return os.path.join(self.directory, f"{_check_key(key)}.json")

    def load(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return read_text(path)
        except (OSError, UnicodeDecodeError) as exc:
            raise PersistenceError(f"Could not read '{path}': {exc}") from exc

    def save(self, key: str, value: str) -> None:
        path = self.path_for(key)
        try:
            atomic_write_text(path, value)
        except OSError as exc:
            raise PersistenceError(f"Could not write '{path}': {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(value), path)
