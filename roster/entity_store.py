"""
roster/entity_store.py -- In-memory ordered collection of employee records.

The store is the working state for a session.  It is created explicitly
and handed to whoever drives it; there is no module-level instance.

Every successful mutation is followed by exactly one call to the
persistence adapter with the full ordered collection.  Failed mutations
(unknown id, duplicate id) change nothing and write nothing.

Usage::

    from roster.entity_store import EntityStore

    store = EntityStore.rehydrate(adapter)
    store.insert({"id": "1700000000000-ab12cd34ef56", ...})
    store.replace(record_id, updated)
    store.remove(record_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Iterator

from roster.errors import RecordNotFoundError

if TYPE_CHECKING:
    from roster.persistence import PersistenceAdapter

logger = logging.getLogger(__name__)


class EntityStore:
    """Ordered collection of records keyed by ``id``.

    Parameters
    ----------
    persistence : PersistenceAdapter, optional
        Adapter synced after every mutation.  Without one the store is
        purely in-memory.
    records : iterable of dict, optional
        Initial records.  Loading them does not trigger a write.
    """

    def __init__(
        self,
        persistence: PersistenceAdapter | None = None,
        records: Iterable[dict[str, Any]] = (),
    ):
        self._persistence = persistence
        self._records: list[dict[str, Any]] = []
        for record in records:
            self._check_new(record)
            self._records.append(dict(record))

    @classmethod
    def rehydrate(cls, persistence: PersistenceAdapter) -> EntityStore:
        """Build a store from whatever *persistence* has saved."""
        records = persistence.rehydrate()
        logger.info("Loaded %d employee record(s) from storage", len(records))
        return cls(persistence, records)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def all(self) -> list[dict[str, Any]]:
        """Return copies of all records in collection order."""
        return [dict(r) for r in self._records]

    def get(self, record_id: str) -> dict[str, Any] | None:
        index = self._index_of(record_id)
        if index is None:
            return None
        return dict(self._records[index])

    def ids(self) -> list[str]:
        return [r["id"] for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return self._index_of(record_id) is not None

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(self.all())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, record: dict[str, Any]) -> None:
        """Append *record*.  It must carry an id not already in the store."""
        self._check_new(record)
        self._records.append(dict(record))
        logger.debug("Inserted employee '%s'", record["id"])
        self._sync()

    def replace(self, record_id: str, record: dict[str, Any]) -> None:
        """Replace the record with *record_id* in place, keeping its id.

        Raises
        ------
        RecordNotFoundError
            If no record has that id.
        """
        index = self._index_of(record_id)
        if index is None:
            raise RecordNotFoundError(record_id)
        self._records[index] = {**record, "id": record_id}
        logger.debug("Replaced employee '%s' at position %d", record_id, index)
        self._sync()

    def remove(self, record_id: str) -> dict[str, Any]:
        """Remove and return the record with *record_id*.

        Raises
        ------
        RecordNotFoundError
            If no record has that id.
        """
        index = self._index_of(record_id)
        if index is None:
            raise RecordNotFoundError(record_id)
        removed = self._records.pop(index)
        logger.debug("Removed employee '%s'", record_id)
        self._sync()
        return removed

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, record_id: object) -> int | None:
        for index, record in enumerate(self._records):
            if record["id"] == record_id:
                return index
        return None

    def _check_new(self, record: dict[str, Any]) -> None:
        record_id = record.get("id")
        if not isinstance(record_id, str) or not record_id:
            raise ValueError("Records must carry a non-empty string 'id' before entering the store.")
        if self._index_of(record_id) is not None:
            raise ValueError(f"An employee with id '{record_id}' is already in the store.")

    def _sync(self) -> None:
        if self._persistence is not None:
            self._persistence.persist(self.all())
