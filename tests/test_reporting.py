# tests/test_reporting.py

from datetime import timedelta

import pytest

from crm.core.exceptions import CRMError
from crm.services.reporting import (
    CustomerActivitySummary,
    communication_frequency,
    customer_activity_summaries,
    get_overall_statistics,
)


def test_daily_frequency(store, customer, make_communication, now) -> None:
    make_communication(customer, "phone")
    make_communication(customer, "phone", age=timedelta(hours=1))
    make_communication(customer, "email", age=timedelta(days=1))
    make_communication(customer, "meeting", age=timedelta(days=8))
    make_communication(customer, "fax")

    report = communication_frequency(store, "Daily", now)
    assert list(report) == ["03/09", "03/10", "03/11", "03/12", "03/13", "03/14", "03/15"]
    assert report["03/15"] == {"phone": 2, "email": 0, "meeting": 0}
    assert report["03/14"] == {"phone": 0, "email": 1, "meeting": 0}
    assert sum(sum(c.values()) for c in report.values()) == 3


def test_weekly_frequency_labels_latest_week_as_week_4(store, customer, make_communication, now) -> None:
    make_communication(customer, "phone", age=timedelta(days=2))
    make_communication(customer, "email", age=timedelta(days=10))
    make_communication(customer, "meeting", age=timedelta(days=27))
    make_communication(customer, "meeting", age=timedelta(days=29))

    report = communication_frequency(store, "Weekly", now)
    assert list(report) == ["Week 1 (02/23)", "Week 2 (03/01)", "Week 3 (03/08)", "Week 4 (03/15)"]
    assert report["Week 4 (03/15)"]["phone"] == 1
    assert report["Week 3 (03/08)"]["email"] == 1
    assert report["Week 1 (02/23)"]["meeting"] == 1
    assert sum(sum(c.values()) for c in report.values()) == 3


def test_monthly_frequency(store, customer, make_communication, now) -> None:
    make_communication(customer, "email", age=timedelta(days=40))
    make_communication(customer, "phone", age=timedelta(days=200))

    report = communication_frequency(store, "Monthly", now)
    assert list(report) == ["Oct 2023", "Nov 2023", "Dec 2023", "Jan 2024", "Feb 2024", "Mar 2024"]
    assert report["Feb 2024"]["email"] == 1
    assert sum(sum(c.values()) for c in report.values()) == 1


def test_unknown_period_raises(store, now) -> None:
    with pytest.raises(CRMError):
        communication_frequency(store, "Yearly", now)


def test_customer_activity_summaries(store, customer, prospect, make_task, make_communication) -> None:
    make_communication(customer)
    make_communication(customer)
    make_task(customer, completed=True)
    make_task(customer)
    make_task(customer)
    make_task(customer, completed=True)

    summaries = {s.customer_name: s for s in customer_activity_summaries(store)}
    john = summaries["John Smith"]
    assert (john.communication_count, john.task_count, john.completed_task_count) == (2, 4, 2)
    assert john.completion_rate == 50.0
    assert summaries["Jane Doe"].completion_rate == 0.0


def test_completion_rate_with_no_tasks() -> None:
    summary = CustomerActivitySummary("id", "A", communication_count=3, task_count=0, completed_task_count=0)
    assert summary.completion_rate == 0.0


def test_overall_statistics(store, customer, make_task, make_communication) -> None:
    assert get_overall_statistics(store)["completion_rate"] == 0.0

    make_communication(customer)
    make_task(customer, completed=True)
    make_task(customer)
    make_task(customer)

    stats = get_overall_statistics(store)
    assert stats["total_customers"] == 1
    assert stats["total_communications"] == 1
    assert stats["total_tasks"] == 3
    assert stats["completion_rate"] == 33.3
