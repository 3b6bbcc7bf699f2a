"""
Reporting service for communication frequency and customer activity.
"""

from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, List, Optional

from loguru import logger

from ..core.branding import COMMUNICATION_TYPES
from ..core.exceptions import CRMError
from ..database.crm_store import CRMStore


@dataclass
class CustomerActivitySummary:
    """Per-customer activity totals for the reporting tab."""
    customer_id: str
    customer_name: str
    communication_count: int
    task_count: int
    completed_task_count: int

    @property
    def completion_rate(self) -> float:
        """Completed tasks as a percentage of all tasks, 0 with no tasks."""
        if self.task_count == 0:
            return 0.0
        return self.completed_task_count / self.task_count * 100


def _empty_counts() -> Dict[str, int]:
    return {comm_type: 0 for comm_type in COMMUNICATION_TYPES}


def _months_back(moment: datetime, months: int) -> datetime:
    """Step back whole calendar months, keeping the first of the month."""
    index = moment.year * 12 + (moment.month - 1) - months
    return moment.replace(year=index // 12, month=index % 12 + 1, day=1,
                          hour=0, minute=0, second=0, microsecond=0)


def _count(buckets, label: str, comm_type: str):
    counts = buckets.get(label)
    if counts is not None and comm_type in counts:
        counts[comm_type] += 1


def communication_frequency(store: CRMStore, period: str = "Weekly",
                            now: Optional[datetime] = None) -> "OrderedDict[str, Dict[str, int]]":
    """
    Count communications by type over recent periods.

    Args:
        store: CRM store
        period: "Daily" (last 7 days), "Weekly" (last 4 weeks) or "Monthly" (last 6 months)
        now: Reference time (defaults to the current time)

    Returns:
        Ordered mapping of bucket label to per-type counts, oldest first
    """
    now = now or datetime.now()
    communications = store.get_all_communications()
    buckets = OrderedDict()

    if period == "Daily":
        for i in range(6, -1, -1):
            buckets[(now - timedelta(days=i)).strftime("%m/%d")] = _empty_counts()

        cutoff = now - timedelta(days=7)
        for comm in communications:
            if comm.timestamp > cutoff:
                _count(buckets, comm.timestamp.strftime("%m/%d"), comm.type)

    elif period == "Weekly":
        labels = {}
        for i in range(3, -1, -1):
            label = f"Week {4 - i} ({(now - timedelta(weeks=i)).strftime('%m/%d')})"
            labels[i] = label
            buckets[label] = _empty_counts()

        cutoff = now - timedelta(weeks=4)
        for comm in communications:
            if comm.timestamp <= cutoff:
                continue
            weeks_ago = next(
                (i for i in range(3) if comm.timestamp > now - timedelta(weeks=i + 1)), 3
            )
            _count(buckets, labels[weeks_ago], comm.type)

    elif period == "Monthly":
        for i in range(5, -1, -1):
            buckets[_months_back(now, i).strftime("%b %Y")] = _empty_counts()

        cutoff = _months_back(now, 5)
        for comm in communications:
            if comm.timestamp >= cutoff:
                _count(buckets, comm.timestamp.strftime("%b %Y"), comm.type)

    else:
        raise CRMError("VALIDATION_ERROR", f"Unknown report period: {period}")

    logger.debug(f"Built {period.lower()} communication frequency report ({len(communications)} communications)")
    return buckets


def customer_activity_summaries(store: CRMStore) -> List[CustomerActivitySummary]:
    """Summarise communications and task completion for every customer."""
    summaries = []
    for customer in store.get_all_customers():
        tasks = store.get_customer_tasks(customer.id)
        summaries.append(CustomerActivitySummary(
            customer_id=customer.id,
            customer_name=customer.name,
            communication_count=len(store.get_customer_communications(customer.id)),
            task_count=len(tasks),
            completed_task_count=len([t for t in tasks if t.completed])
        ))
    return summaries


def get_overall_statistics(store: CRMStore) -> Dict:
    """Headline totals shown above the reports."""
    task_stats = store.get_task_completion_stats()
    total = task_stats["total_tasks"]
    return {
        "total_customers": len(store.get_all_customers()),
        "total_communications": store.get_communication_stats()["total_communications"],
        "total_tasks": total,
        "completed_tasks": task_stats["completed_tasks"],
        "completion_rate": round(task_stats["completed_tasks"] / total * 100, 1) if total else 0.0
    }
