"""
roster/persistence.py -- Sync the employee collection to key-value storage.

The whole collection is written under one storage key as a versioned JSON
envelope::

    {"version": 1, "records": [{"id": "...", "firstName": "...", ...}, ...]}

Payloads written before the envelope existed (a bare JSON array of
records) are still read.

Nothing in here raises to the caller: a failed write is logged and the
in-memory collection carries on; a missing or unreadable payload loads as
an empty collection.

Usage::

    from roster.persistence import PersistenceAdapter
    from roster.storage import FileStorage

    adapter = PersistenceAdapter(FileStorage(data_dir))
    records = adapter.rehydrate()
    adapter.persist(records)
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from roster.reconciler import fresh_id
from roster.storage import KeyValueStorage

logger = logging.getLogger(__name__)

STORAGE_KEY = "employees"
PAYLOAD_VERSION = 1


class PersistedCollection(BaseModel):
    """The persisted envelope around the ordered record list."""

    model_config = ConfigDict(extra="ignore")

    version: int = PAYLOAD_VERSION
    # Entries are checked one by one in rehydrate() so that a single bad
    # entry does not discard the rest of the collection.
    records: list[Any] = Field(default_factory=list)


class PersistenceAdapter:
    """Best-effort bridge between the entity store and durable storage.

    Parameters
    ----------
    storage : KeyValueStorage
        Any object with ``load(key)`` and ``save(key, text)``.
    key : str, optional
        Storage key holding the collection (default ``"employees"``).
    """

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def serialize(self, records: Iterable[dict[str, Any]]) -> str:
        """Encode *records* as the persisted JSON payload."""
        envelope = PersistedCollection(records=[dict(r) for r in records])
        return envelope.model_dump_json()

    def persist(self, records: Iterable[dict[str, Any]]) -> bool:
        """Write the full collection.  Returns False if the write failed."""
        try:
            self.storage.save(self.key, self.serialize(records))
        except Exception:
            logger.exception("Failed to persist the employee collection under '%s'", self.key)
            return False
        return True

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def rehydrate(self) -> list[dict[str, Any]]:
        """Load the collection written by ``persist``.

        Returns an empty list when storage is absent, empty, unreadable
        or does not hold a record list.
        """
        try:
            text = self.storage.load(self.key)
        except Exception:
            logger.exception("Failed to read the employee collection under '%s'", self.key)
            return []

        if text is None or not text.strip():
            return []

        try:
            envelope = self.parse(text)
        except (ValueError, ValidationError, RecursionError) as exc:
            logger.warning("Ignoring unreadable employee payload under '%s': %s", self.key, exc)
            return []

        if envelope.version > PAYLOAD_VERSION:
            logger.warning(
                "Employee payload version %d is newer than supported version %d; "
                "loading records as-is",
                envelope.version, PAYLOAD_VERSION,
            )
        return _normalize_records(envelope.records)

    @staticmethod
    def parse(text: str) -> PersistedCollection:
        """Decode a payload into the envelope model.

        Raises
        ------
        ValueError
            If *text* is not JSON or is neither an envelope nor a list.
        RecursionError
            If *text* nests deeper than the decoder can follow.
        pydantic.ValidationError
            If the envelope fields have the wrong types.
        """
        data = json.loads(text)
        if isinstance(data, list):
            # Pre-envelope layout: the bare record array.
            return PersistedCollection(version=0, records=data)
        if isinstance(data, dict):
            return PersistedCollection.model_validate(data)
        raise ValueError(f"expected a JSON object or array, got {type(data).__name__}")


def _normalize_records(entries: list[Any]) -> list[dict[str, Any]]:
    """Keep usable entries and make their ids addressable.

    Records are otherwise taken as-is: fields missing or added by another
    schema version are left alone.
    """
    records: list[dict[str, Any]] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            logger.warning("Skipping persisted entry %d: not an object", index)
            continue
        record = dict(entry)
        record_id = record.get("id")
        if record_id is None or record_id == "":
            record["id"] = fresh_id(seen | _declared_ids(entries))
            logger.warning("Persisted entry %d had no id; assigned '%s'", index, record["id"])
        elif not isinstance(record_id, str):
            record["id"] = str(record_id)
        if record["id"] in seen:
            logger.warning("Skipping persisted entry %d: duplicate id '%s'", index, record["id"])
            continue
        seen.add(record["id"])
        records.append(record)
    return records


def _declared_ids(entries: list[Any]) -> set[str]:
    return {
        str(e["id"]) for e in entries
        if isinstance(e, dict) and e.get("id") not in (None, "")
    }
