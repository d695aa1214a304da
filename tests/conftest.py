"""
Shared pytest fixtures for the employee roster test suite.

Provides:
    - valid_employee: a complete, valid form submission
    - second_employee: another valid submission with different values
    - memory_storage / adapter: in-memory persistence
    - store: an empty EntityStore synced to ``adapter``
    - qapp: a QCoreApplication for signal/slot machinery
    - bus: a fresh EventBus per test
"""

import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Ensure roster/ and roster_app/ are importable regardless of where pytest
# is invoked
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parent.parent

if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from roster.entity_store import EntityStore  # noqa: E402
from roster.persistence import PersistenceAdapter  # noqa: E402
from roster.storage import MemoryStorage  # noqa: E402


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def valid_employee():
    """Return a valid submission with every required field filled in."""
    return {
        "firstName": "Jo",
        "lastName": "Li",
        "email": "jo@x.com",
        "phone": "1234567890",
        "position": "Eng",
        "salary": 50000,
        "hireDate": "2024-01-01",
        "address": "1 Main St",
        "city": "NY",
        "state": "NY",
        "zipCode": "10001",
        "country": "USA",
        "emergencyContact": "Al Li",
        "emergencyPhone": "0987654321",
        "status": "Active",
        "performanceRating": 3,
    }


@pytest.fixture
def second_employee():
    """Return another valid submission, as a form would post it (text numbers)."""
    return {
        "firstName": "Maria",
        "lastName": "Santos",
        "email": "maria.santos@example.com",
        "phone": "5551234567",
        "position": "Product Manager",
        "salary": "82000.50",
        "hireDate": "2021-06-15",
        "address": "42 Harbor Road",
        "city": "Boston",
        "state": "MA",
        "zipCode": "02110",
        "country": "USA",
        "emergencyContact": "Ana Santos",
        "emergencyPhone": "5559876543",
        "notes": "Leads the onboarding revamp.",
        "status": "On Leave",
        "performanceRating": "4.5",
        "projectAssignment": "Onboarding",
    }


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def adapter(memory_storage):
    return PersistenceAdapter(memory_storage)


@pytest.fixture
def store(adapter):
    return EntityStore(adapter)


@pytest.fixture
def qapp():
    """Make sure a QCoreApplication exists for signal/slot machinery."""
    from PySide6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def bus(qapp):
    """Return a fresh (non-singleton) EventBus."""
    from roster_app.services.event_bus import EventBus

    return EventBus()
