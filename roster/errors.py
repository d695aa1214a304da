"""
roster/errors.py -- Exception types for the employee roster core.

None of these are fatal.  Validation errors go back to the caller for
correction, not-found errors are absorbed by the command surface, and
persistence errors never leave the persistence adapter.
"""

from __future__ import annotations


class RosterError(Exception):
    """Base class for all roster errors."""


class RecordValidationError(RosterError, ValueError):
    """A submission failed schema validation.

    Attributes
    ----------
    field_errors : dict[str, str]
        Field name -> human-readable message, one entry per violated field.
    """

    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Record failed validation ({len(self.field_errors)} field(s): {fields})")


class RecordNotFoundError(RosterError, LookupError):
    """No record with the given id is in the collection."""

    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(
            f"Could not find employee '{record_id}'. "
            f"It may have been deleted or the ID may be incorrect."
        )


class PersistenceError(RosterError):
    """Durable storage could not be read or written."""
