# tests/conftest.py

from datetime import datetime, timedelta

import pytest

from crm.database.crm_store import CRMStore
from crm.database.models import TaskPriority, create_communication, create_customer, create_task
from crm.tasks import ReminderSystem, TaskManager

NOW = datetime(2024, 3, 15, 12, 0)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def store() -> CRMStore:
    return CRMStore(notifications_enabled=True)


@pytest.fixture()
def customer(store):
    c = create_customer("John Smith", "john.smith@example.com", "555-123-4567", "Client",
                        "Key decision maker")
    store.add_customer(c)
    return c


@pytest.fixture()
def prospect(store):
    c = create_customer("Jane Doe", "jane.doe@example.com", "555-987-6543", "Prospect",
                        "Met at tech conference")
    store.add_customer(c)
    return c


@pytest.fixture()
def reminder_system(store) -> ReminderSystem:
    return ReminderSystem(store, check_interval=0.05)


@pytest.fixture()
def task_manager(store, reminder_system) -> TaskManager:
    return TaskManager(store, reminder_system)


@pytest.fixture()
def make_task(store):
    """Add a task due ``due_in`` from NOW for a customer."""

    def _make(customer, due_in=timedelta(days=1), priority=TaskPriority.MEDIUM,
              description="Follow up", completed=False):
        task = create_task(customer.id, description, NOW + due_in, priority)
        task.completed = completed
        store.add_task(task)
        return task

    return _make


@pytest.fixture()
def make_communication(store):
    """Add a communication timestamped ``age`` before NOW."""

    def _make(customer, comm_type="phone", age=timedelta(0), tags=None, notes="Called"):
        comm = create_communication(customer.id, comm_type, notes, tags)
        comm.timestamp = NOW - age
        store.add_communication(comm)
        return comm

    return _make
