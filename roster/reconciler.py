"""
roster/reconciler.py -- Merge a validated submission into the collection.

Decides between insert and update:

    - editing target present in the collection -> replace that record in
      place, keeping its id and position (UPDATED)
    - editing target set but no longer present -> insert with a fresh id
      (CREATED, flagged as a stale target)
    - no editing target -> append with a fresh id (CREATED)

The input collection is never modified; callers get a new list back.
"""

from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    CREATED = "Created"
    UPDATED = "Updated"


def _generate_id() -> str:
    """Return a new record id in the format ``<epoch-ms>-<12 hex chars>``.

    The millisecond prefix keeps ids ordered by creation time; the random
    suffix keeps two ids minted within the same millisecond apart.
    """
    return f"{time.time_ns() // 1_000_000}-{secrets.token_hex(6)}"


def fresh_id(
    existing_ids: Iterable[str],
    id_factory: Callable[[], str] | None = None,
) -> str:
    """Mint an id that does not collide with any of *existing_ids*."""
    taken = set(existing_ids)
    factory = id_factory or _generate_id
    new_id = factory()
    # Ensure no collision (extremely unlikely but handle it)
    while new_id in taken:
        new_id = factory()
    return new_id


@dataclass
class ReconcileResult:
    """Outcome of reconciling one submission."""
    records: list[dict[str, Any]]
    kind: EventKind
    record: dict[str, Any]
    stale_target: bool = False

    @property
    def record_id(self) -> str:
        return self.record["id"]


def reconcile(
    collection: Iterable[dict[str, Any]],
    record: dict[str, Any],
    editing_target_id: str | None = None,
    *,
    id_factory: Callable[[], str] | None = None,
) -> ReconcileResult:
    """Merge *record* into *collection*.

    Parameters
    ----------
    collection : iterable of dict
        The current records, in order.  Not modified.
    record : dict
        A record that has already passed ``roster.schema.validate``.
        Any ``id`` it carries is ignored.
    editing_target_id : str, optional
        Id of the record being edited, or None for a new record.
    id_factory : callable, optional
        Override for id generation (tests).

    Returns
    -------
    ReconcileResult
        The new collection, the event kind and the stored record.
    """
    records = [dict(r) for r in collection]

    if editing_target_id is not None:
        for index, existing in enumerate(records):
            if existing.get("id") == editing_target_id:
                updated = {**record, "id": editing_target_id}
                records[index] = updated
                return ReconcileResult(records, EventKind.UPDATED, dict(updated))
        logger.warning(
            "Editing target '%s' is no longer in the collection; "
            "saving the submission as a new record",
            editing_target_id,
        )

    new_id = fresh_id((r.get("id") for r in records), id_factory)
    created = {**record, "id": new_id}
    records.append(created)
    return ReconcileResult(
        records,
        EventKind.CREATED,
        dict(created),
        stale_target=editing_target_id is not None,
    )
