"""
roster_app/services/employee_service.py -- The roster's command surface.

Three user-facing operations drive the core:

    submit(raw)            validate -> reconcile -> store -> clear target
    select_for_edit(id)    make a record the editing target
    delete(id)             remove a record, clearing the target if needed

Each call runs to completion; the store persists after every mutation.
Unknown ids are never an error for the caller: they are logged and
reported through the return value.

Usage::

    from roster_app.services.employee_service import EmployeeService

    service = EmployeeService(store)
    outcome = service.submit(form_data)
    if not outcome.ok:
        show(outcome.errors)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from roster.entity_store import EntityStore
from roster.errors import RecordNotFoundError
from roster.reconciler import EventKind, reconcile
from roster.schema import form_values, full_name, validate
from roster_app.services.event_bus import EventBus

logger = logging.getLogger(__name__)

_NOTICES = {
    EventKind.CREATED: (
        "Employee Added",
        "A new employee has been successfully added to the system.",
    ),
    EventKind.UPDATED: (
        "Employee Updated",
        "The employee information has been successfully updated.",
    ),
}
_DELETED_NOTICE = (
    "Employee Deleted",
    "The employee has been removed from the system.",
)


@dataclass
class SubmitOutcome:
    """Result of ``EmployeeService.submit``.

    Either ``ok`` with the event ``kind`` and the stored ``record``, or not
    ``ok`` with one message per violated field in ``errors``.
    """
    ok: bool
    kind: EventKind | None = None
    record: dict[str, Any] | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def record_id(self) -> str | None:
        return self.record["id"] if self.record else None


class EmployeeService:
    """Command surface over an explicitly owned ``EntityStore``.

    Parameters
    ----------
    store : EntityStore
        The session's collection.
    bus : EventBus, optional
        Where events are announced.  Defaults to ``EventBus.instance()``.
    """

    def __init__(self, store: EntityStore, bus: EventBus | None = None):
        self._store = store
        self._bus = bus if bus is not None else EventBus.instance()
        self._editing_target_id: str | None = None

    # ------------------------------------------------------------------
    # Editing target
    # ------------------------------------------------------------------

    @property
    def editing_target_id(self) -> str | None:
        return self._editing_target_id

    @property
    def is_editing(self) -> bool:
        return self._editing_target_id is not None

    def select_for_edit(self, record_id: str) -> dict[str, Any] | None:
        """Make *record_id* the editing target.

        Returns the form values to re-populate the form with, or None
        (and changes nothing) if there is no such record.
        """
        record = self._store.get(record_id)
        if record is None:
            logger.info("Ignoring edit of unknown employee '%s'", record_id)
            return None
        self._editing_target_id = record_id
        self._bus.record_selected.emit(record_id)
        return form_values(record)

    def cancel_edit(self) -> None:
        """Drop the editing target so the next submit adds a new record."""
        self._clear_target()

    def _clear_target(self) -> None:
        if self._editing_target_id is None:
            return
        self._editing_target_id = None
        self._bus.edit_cleared.emit()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def submit(self, raw: dict[str, Any]) -> SubmitOutcome:
        """Validate *raw* and add or update a record.

        On validation failure nothing is stored and the editing target is
        kept, so the user can correct the form and submit again.
        """
        result = validate(raw)
        if not result.passed:
            self._bus.validation_failed.emit(dict(result.errors))
            return SubmitOutcome(ok=False, errors=result.errors)

        merged = reconcile(self._store.all(), result.record, self._editing_target_id)
        if merged.kind is EventKind.UPDATED:
            self._store.replace(merged.record_id, merged.record)
            self._bus.record_updated.emit(merged.record_id)
        else:
            self._store.insert(merged.record)
            self._bus.record_created.emit(merged.record_id)

        logger.info("%s employee '%s' (%s)", merged.kind.value, merged.record_id, full_name(merged.record))
        self._clear_target()
        self._notify(*_NOTICES[merged.kind])
        return SubmitOutcome(ok=True, kind=merged.kind, record=merged.record)

    def delete(self, record_id: str) -> bool:
        """Remove *record_id*.  Returns False if there was no such record."""
        try:
            self._store.remove(record_id)
        except RecordNotFoundError:
            logger.info("Ignoring delete of unknown employee '%s'", record_id)
            return False

        if self._editing_target_id == record_id:
            self._clear_target()
        self._bus.record_deleted.emit(record_id)
        self._notify(*_DELETED_NOTICE, variant="destructive")
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def records(self) -> list[dict[str, Any]]:
        return self._store.all()

    def get(self, record_id: str) -> dict[str, Any] | None:
        return self._store.get(record_id)

    def summary_rows(self) -> list[dict[str, Any]]:
        """Return the list-view row for every record, in collection order."""
        return [
            {
                "id": record["id"],
                "name": full_name(record),
                "email": record.get("email", ""),
                "department": record.get("department", ""),
                "position": record.get("position", ""),
                "status": record.get("status", ""),
            }
            for record in self._store.all()
        ]

    def _notify(self, title: str, description: str, variant: str = "default") -> None:
        self._bus.notification.emit(title, description, variant)
