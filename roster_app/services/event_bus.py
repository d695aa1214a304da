"""
roster_app/services/event_bus.py -- Application-wide event bus using Qt signals.

Singleton that provides typed signals for whatever presents the roster
(a form, a table, toast notifications).  The employee service emits;
presentation code connects.

Usage::

    from roster_app.services.event_bus import EventBus

    bus = EventBus.instance()
    bus.record_created.connect(my_handler)
    bus.notification.connect(show_toast)
"""

from __future__ import annotations

import threading

from PySide6.QtCore import QObject, Signal


class EventBus(QObject):
    """Application-wide signal bus for roster events.

    Signals
    -------
    record_created(str)
        A new employee was added.  Payload is the record id.
    record_updated(str)
        An existing employee was edited.  Payload is the record id.
    record_deleted(str)
        An employee was removed.  Payload is the record id.
    record_selected(str)
        An employee became the editing target.  Payload is the record id.
    edit_cleared()
        The editing target was cleared (after a submit, a delete of the
        target, or a cancel).
    validation_failed(object)
        A submission was rejected.  Payload is the field -> message dict.
    notification(str, str, str)
        A user-facing notice: title, description, variant
        (``"default"`` or ``"destructive"``).
    """

    # Record lifecycle
    record_created = Signal(str)
    record_updated = Signal(str)
    record_deleted = Signal(str)

    # Editing target
    record_selected = Signal(str)
    edit_cleared = Signal()

    # Feedback
    validation_failed = Signal(object)
    notification = Signal(str, str, str)

    # Singleton
    _instance: EventBus | None = None
    _lock = threading.Lock()

    @classmethod
    def instance(cls) -> EventBus:
        """Return the singleton EventBus instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton (for testing)."""
        with cls._lock:
            if cls._instance is not None:
                cls._instance.deleteLater()
            cls._instance = None
