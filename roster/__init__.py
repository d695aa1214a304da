"""
roster/ -- Validation and state-reconciliation core of the employee roster.

Submodules:
    schema        Employee schema description and the validate() gate.
    reconciler    Insert-vs-update decision and id minting.
    entity_store  Ordered in-memory collection, synced on every mutation.
    persistence   Versioned JSON payload over a key-value storage.
    storage       Memory and file-backed key-value storage.
    errors        Exception types.
"""

from roster.entity_store import EntityStore
from roster.persistence import PersistenceAdapter
from roster.reconciler import EventKind, reconcile
from roster.schema import ValidationResult, validate

__all__ = [
    "EntityStore",
    "EventKind",
    "PersistenceAdapter",
    "ValidationResult",
    "reconcile",
    "validate",
]
