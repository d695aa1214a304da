"""
Shared utility functions for the employee roster core.

Holds the text I/O helpers used by the file storage backend and the
schema cleaning step that runs before ``jsonschema`` validation.

All writes use atomic temp-file-then-os.replace() so a crash mid-write
never leaves a half-written payload behind.
"""

import logging
import os
import tempfile

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Text I/O (atomic writes)
# ---------------------------------------------------------------------------

def read_text(path):
    """Read a UTF-8 text file, returning ``None`` if it does not exist.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the file.

    Returns
    -------
    str or None
        File contents, or ``None`` when the file is missing.

    Raises
    ------
    OSError
        For any failure other than the file being absent.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()
    except FileNotFoundError:
        return None


def atomic_write_text(path, text):
    """Atomically write *text* to *path*.

    Uses a temporary file in the same directory followed by
    ``os.replace()`` so that readers never see a partially-written file.
    Parent directories are created if they do not exist.

    Parameters
    ----------
    path : str or pathlib.Path
        Absolute path to the target file.
    text : str
        Content to write.
    """
    path = str(path)
    parent = os.path.dirname(path)
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(text)
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any failure.
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


# ---------------------------------------------------------------------------
# Schema cleaning (strips custom extensions for jsonschema validation)
# ---------------------------------------------------------------------------

_SCHEMA_SKIP_KEYS = {"$id", "title"}


def _is_extension(key) -> bool:
    return isinstance(key, str) and key.startswith("x-")


def clean_schema_for_validation(schema):
    """Return a copy of *schema* stripped of custom extension fields.

    Removes the top-level ``$id`` and ``title`` and every ``x-*`` keyword
    (``x-label``, ``x-messages``) at any depth, so ``jsonschema`` only
    sees standard keywords.

    Parameters
    ----------
    schema : dict
        The schema description, annotated with labels and messages.

    Returns
    -------
    dict
        A cleaned copy safe for ``jsonschema`` validators.
    """
    clean = {}
    for key, value in schema.items():
        if key in _SCHEMA_SKIP_KEYS or _is_extension(key):
            continue
        if isinstance(value, dict):
            clean[key] = _clean_schema_deep(value)
        elif isinstance(value, list):
            clean[key] = [
                _clean_schema_deep(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            clean[key] = value
    return clean


def _clean_schema_deep(obj):
    """Recursively remove custom extension keywords from nested schema objects."""
    result = {}
    for key, value in obj.items():
        if _is_extension(key):
            continue
        if isinstance(value, dict):
            result[key] = _clean_schema_deep(value)
        elif isinstance(value, list):
            result[key] = [
                _clean_schema_deep(item) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value
    return result
