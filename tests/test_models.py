# tests/test_models.py

from datetime import datetime, timedelta

from crm.database.models import (
    Communication,
    Task,
    TaskPriority,
    create_communication,
    create_customer,
    create_task,
    default_reminder_time,
)

DUE = datetime(2024, 3, 20, 9, 0)


def test_ids_are_unique() -> None:
    a = create_customer("A", "a@example.com", "", "Client")
    b = create_customer("A", "a@example.com", "", "Client")
    assert a.id != b.id
    assert len({Communication().id for _ in range(50)}) == 50


def test_reminder_lead_time_depends_on_priority() -> None:
    assert create_task("c", "x", DUE, TaskPriority.HIGH).reminder_time == DUE - timedelta(hours=48)
    assert create_task("c", "x", DUE, TaskPriority.MEDIUM).reminder_time == DUE - timedelta(hours=24)
    assert create_task("c", "x", DUE, TaskPriority.LOW).reminder_time == DUE - timedelta(hours=12)
    assert create_task("c", "x", DUE).priority is TaskPriority.MEDIUM


def test_explicit_reminder_time_is_kept() -> None:
    when = DUE - timedelta(hours=1)
    task = Task(customer_id="c", description="x", due_date=DUE, reminder_time=when)
    assert task.reminder_time == when
    assert default_reminder_time(DUE, TaskPriority.HIGH) == DUE - timedelta(days=2)


def test_task_overdue_and_pending() -> None:
    task = create_task("c", "x", DUE)
    assert task.is_pending
    assert task.is_overdue(DUE + timedelta(minutes=1))
    assert not task.is_overdue(DUE - timedelta(minutes=1))

    task.completed = True
    assert not task.is_pending
    assert not task.is_overdue(DUE + timedelta(days=10))


def test_communication_tags() -> None:
    comm = create_communication("c", "email", "Sent brochure", ["marketing"])
    assert comm.tags == ["marketing"]
    assert isinstance(comm.timestamp, datetime)

    comm.add_tag("follow-up")
    comm.remove_tag("marketing")
    comm.remove_tag("missing")
    assert comm.tags == ["follow-up"]


def test_communication_tag_lists_are_not_shared() -> None:
    a, b = Communication(), Communication()
    a.add_tag("x")
    assert b.tags == []
