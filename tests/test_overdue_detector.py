# tests/test_overdue_detector.py

from datetime import timedelta

import pytest

from crm.database.models import TaskPriority
from crm.tasks import OverdueDetector
from crm.tasks.overdue_detector import escalation_for


@pytest.mark.parametrize("days, level", [
    (0, "low"), (1, "low"), (2, "medium"), (3, "medium"),
    (4, "high"), (7, "high"), (8, "critical"), (30, "critical"),
])
def test_escalation_levels(days, level) -> None:
    assert escalation_for(days) == level


def test_check_overdue_items(store, customer, make_task, now) -> None:
    detector = OverdueDetector(store)
    old = make_task(customer, due_in=-timedelta(days=10), priority=TaskPriority.HIGH, description="Old")
    recent = make_task(customer, due_in=-timedelta(hours=5), description="Recent")
    make_task(customer, due_in=timedelta(days=1))
    make_task(customer, due_in=-timedelta(days=20), completed=True)

    items = detector.check_overdue_items(now)
    assert [i['id'] for i in items] == [old.id, recent.id]
    assert items[0]['overdue_days'] == 10
    assert items[0]['escalation'] == "critical"
    assert items[0]['priority'] == "high"
    assert items[0]['customer'] == "John Smith"
    assert items[1]['overdue_days'] == 0
    assert items[1]['escalation'] == "low"


def test_overdue_summary(store, customer, make_task, now) -> None:
    detector = OverdueDetector(store)
    make_task(customer, due_in=-timedelta(days=10), priority=TaskPriority.HIGH)
    make_task(customer, due_in=-timedelta(days=5), priority=TaskPriority.LOW)
    make_task(customer, due_in=-timedelta(days=3))

    summary = detector.get_overdue_summary(now)
    assert summary['total_overdue'] == 3
    assert summary['escalation_breakdown'] == {'low': 0, 'medium': 1, 'high': 1, 'critical': 1}
    assert summary['priority_breakdown'] == {'low': 1, 'medium': 1, 'high': 1}
    assert summary['average_overdue_days'] == 6.0
    assert summary['critical_items'] == 1
    assert summary['needs_immediate_attention'] == 2


def test_empty_summary(store) -> None:
    summary = OverdueDetector(store).get_overdue_summary()
    assert summary['total_overdue'] == 0
    assert summary['average_overdue_days'] == 0
