# tests/test_reminder_system.py

import threading
import time
from datetime import timedelta

import pytest

from crm.core.exceptions import CRMError
from crm.database.models import TaskPriority
from crm.tasks import ReminderSystem


def test_reminder_fires_once_between_reminder_and_due(reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=timedelta(hours=10))  # MEDIUM: reminder 14h ago

    fired = reminder_system.check_pending_tasks(now)
    assert [(n.kind, n.task.id) for n in fired] == [("reminder", task.id)]
    assert fired[0].title == "Task Reminder"
    assert "Customer: John Smith" in fired[0].message

    assert reminder_system.check_pending_tasks(now + timedelta(minutes=1)) == []
    assert reminder_system.was_notified(task.id)


def test_no_reminder_before_reminder_time(reminder_system, customer, make_task, now) -> None:
    make_task(customer, due_in=timedelta(hours=30))
    assert reminder_system.check_pending_tasks(now) == []


def test_high_priority_reminds_earlier(reminder_system, customer, make_task, now) -> None:
    make_task(customer, due_in=timedelta(hours=30), priority=TaskPriority.HIGH)
    make_task(customer, due_in=timedelta(hours=11), priority=TaskPriority.LOW)
    make_task(customer, due_in=timedelta(hours=13), priority=TaskPriority.LOW)

    fired = reminder_system.check_pending_tasks(now)
    assert sorted(n.task.priority.value for n in fired) == ["HIGH", "LOW"]


def test_overdue_alert_fires_once(reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=-timedelta(hours=1))

    fired = reminder_system.check_pending_tasks(now)
    assert [n.kind for n in fired] == ["overdue"]
    assert fired[0].title == "Overdue Task Alert"
    assert fired[0].is_overdue

    assert reminder_system.check_pending_tasks(now + timedelta(hours=1)) == []
    assert reminder_system.was_notified(task.id, ReminderSystem.OVERDUE)
    assert not reminder_system.was_notified(task.id)


def test_reminded_task_later_gets_overdue_alert(reminder_system, customer, make_task, now) -> None:
    make_task(customer, due_in=timedelta(hours=1))

    assert [n.kind for n in reminder_system.check_pending_tasks(now)] == ["reminder"]
    later = now + timedelta(hours=2)
    assert [n.kind for n in reminder_system.check_pending_tasks(later)] == ["overdue"]


def test_completed_tasks_are_ignored(reminder_system, customer, make_task, now) -> None:
    make_task(customer, due_in=-timedelta(days=1), completed=True)
    make_task(customer, due_in=timedelta(hours=1), completed=True)
    assert reminder_system.check_pending_tasks(now) == []


def test_disabled_notifications_fire_nothing(store, reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=-timedelta(hours=1))
    store.update_setting("notifications_enabled", False)

    assert reminder_system.check_pending_tasks(now) == []
    assert not reminder_system.was_notified(task.id, ReminderSystem.OVERDUE)

    store.update_setting("notifications_enabled", True)
    assert len(reminder_system.check_pending_tasks(now)) == 1


def test_clear_notification_status_allows_refire(reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=timedelta(hours=1))
    assert len(reminder_system.check_pending_tasks(now)) == 1

    reminder_system.clear_notification_status(task.id)
    assert len(reminder_system.check_pending_tasks(now)) == 1


def test_handler_receives_notifications_and_failures_are_contained(reminder_system, customer,
                                                                    make_task, now) -> None:
    received = []
    reminder_system.set_notification_handler(received.append)
    make_task(customer, due_in=-timedelta(hours=1))
    assert len(reminder_system.check_pending_tasks(now)) == 1
    assert [n.kind for n in received] == ["overdue"]

    def broken(_):
        raise RuntimeError("display failed")

    reminder_system.set_notification_handler(broken)
    make_task(customer, due_in=-timedelta(hours=2), description="Second")
    assert [n.task.description for n in reminder_system.check_pending_tasks(now)] == ["Second"]


def test_unknown_customer_name_falls_back(store, reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=-timedelta(hours=1))
    store.customers.pop(customer.id)
    fired = reminder_system.check_pending_tasks(now)
    assert fired[0].customer_name == "Unknown"
    assert fired[0].task.id == task.id


def test_background_thread_polls_and_stops(reminder_system, customer, make_task) -> None:
    make_task(customer, due_in=-timedelta(days=3650))  # long overdue relative to wall clock
    fired = threading.Event()
    reminder_system.set_notification_handler(lambda n: fired.set())

    reminder_system.start()
    try:
        assert reminder_system.is_running
        assert fired.wait(2.0)
    finally:
        reminder_system.stop()
    assert not reminder_system.is_running


def test_set_check_interval_applies_to_running_poller(store) -> None:
    system = ReminderSystem(store, check_interval=5)
    polls = []
    original = system.check_pending_tasks

    def counting(now=None):
        polls.append(now)
        return original(now)

    system.check_pending_tasks = counting
    system.start()
    try:
        time.sleep(0.2)
        before = len(polls)
        system.set_check_interval(0.05)
        time.sleep(1.0)
        assert len(polls) - before > 3
        assert system.check_interval == 0.05
    finally:
        system.stop()


def test_set_check_interval_rejects_non_positive(reminder_system) -> None:
    with pytest.raises(CRMError) as exc:
        reminder_system.set_check_interval(0)
    assert exc.value.code == "VALIDATION_ERROR"
    assert reminder_system.check_interval == 0.05


def test_restart_after_stop_timeout_retires_old_thread(store) -> None:
    system = ReminderSystem(store, check_interval=5)
    system.start()
    old_thread = system._thread
    system.stop(timeout=0)

    system.start()
    try:
        old_thread.join(2.0)
        assert not old_thread.is_alive()
        assert system.is_running
        assert system._thread is not old_thread
    finally:
        system.stop()


def test_completing_task_forgets_its_notifications(store, reminder_system, customer, make_task, now) -> None:
    task = make_task(customer, due_in=-timedelta(hours=1))
    assert len(reminder_system.check_pending_tasks(now)) == 1
    assert reminder_system.was_notified(task.id, ReminderSystem.OVERDUE)

    task.completed = True
    store.update_task(task)
    assert not reminder_system.was_notified(task.id, ReminderSystem.OVERDUE)


def test_deleting_customer_forgets_their_task_notifications(store, reminder_system, customer, prospect,
                                                            make_task, now) -> None:
    gone = make_task(customer, due_in=timedelta(hours=1))
    kept = make_task(prospect, due_in=-timedelta(hours=1))
    assert len(reminder_system.check_pending_tasks(now)) == 2

    store.delete_customer(customer.id)
    assert not reminder_system.was_notified(gone.id)
    assert reminder_system.was_notified(kept.id, ReminderSystem.OVERDUE)
    assert reminder_system._notified == {f"overdue-{kept.id}"}
