# tests/test_task_manager.py

from datetime import timedelta

import pytest

from crm.core.exceptions import CRMError
from crm.database.models import TaskPriority, create_task


def test_add_and_complete_task(task_manager, store, customer, now) -> None:
    task = task_manager.add_task(create_task(customer.id, "Send proposal", now + timedelta(days=2)))
    assert store.get_task(task.id) is task

    task_manager.complete_task(task.id)
    assert store.get_task(task.id).completed
    assert store.get_pending_tasks() == []


def test_unknown_task_raises(task_manager, now) -> None:
    with pytest.raises(CRMError) as exc:
        task_manager.complete_task("missing")
    assert exc.value.code == "TASK_NOT_FOUND"

    with pytest.raises(CRMError):
        task_manager.set_reminder_time("missing", now)


def test_set_reminder_time_clears_notification_status(task_manager, reminder_system, customer,
                                                      make_task, now) -> None:
    task = make_task(customer, due_in=timedelta(hours=5))
    assert len(reminder_system.check_pending_tasks(now)) == 1
    assert reminder_system.check_pending_tasks(now) == []

    task_manager.set_reminder_time(task.id, now + timedelta(hours=1))
    assert task.reminder_time == now + timedelta(hours=1)
    assert not reminder_system.was_notified(task.id)

    assert reminder_system.check_pending_tasks(now) == []
    assert len(reminder_system.check_pending_tasks(now + timedelta(hours=2))) == 1


def test_snooze_reminder(task_manager, customer, make_task, now) -> None:
    task = make_task(customer)
    task_manager.snooze_reminder(task.id, 30, now=now)
    assert task.reminder_time == now + timedelta(minutes=30)

    with pytest.raises(CRMError):
        task_manager.snooze_reminder(task.id, 0)


def test_pending_tasks_for_customer_sorted_by_due(task_manager, customer, prospect, make_task) -> None:
    later = make_task(customer, due_in=timedelta(days=5))
    sooner = make_task(customer, due_in=timedelta(days=1))
    make_task(customer, completed=True)
    make_task(prospect)

    assert task_manager.get_pending_tasks_for_customer(customer.id) == [sooner, later]


def test_statistics(task_manager, customer, make_task, now) -> None:
    make_task(customer, due_in=-timedelta(days=1))
    make_task(customer, due_in=timedelta(hours=2), priority=TaskPriority.HIGH)
    make_task(customer, due_in=timedelta(days=3))
    make_task(customer, due_in=timedelta(days=30))
    make_task(customer, completed=True)

    stats = task_manager.get_statistics(now)
    assert stats == {
        "total_pending": 4,
        "overdue_count": 1,
        "high_priority": 1,
        "due_today": 1,
        "due_this_week": 2
    }
