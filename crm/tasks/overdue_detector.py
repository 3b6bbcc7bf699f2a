"""
Overdue detector for identifying and tracking overdue tasks.
Classifies overdue tasks into escalation levels by how long they are past due.
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Optional

from loguru import logger

from ..database.crm_store import CRMStore, get_crm_store


ESCALATION_LEVELS = ("low", "medium", "high", "critical")


def escalation_for(overdue_days: int) -> str:
    """Map days overdue to an escalation level."""
    if overdue_days <= 1:
        return "low"
    elif overdue_days <= 3:
        return "medium"
    elif overdue_days <= 7:
        return "high"
    return "critical"


class OverdueDetector:
    """Detects and summarises overdue tasks."""

    def __init__(self, store: Optional[CRMStore] = None):
        self.store = store or get_crm_store()

    def check_overdue_items(self, now: Optional[datetime] = None) -> List[Dict]:
        """
        Check for overdue tasks.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            List of overdue items with details, most overdue first
        """
        current_time = now or datetime.now()
        overdue_items = []

        for task in self.store.filter_tasks(lambda t: t.is_overdue(current_time)):
            overdue_days = (current_time - task.due_date).days
            customer = self.store.get_customer(task.customer_id)

            overdue_items.append({
                'id': task.id,
                'title': task.description,
                'customer': customer.name if customer else "Unknown",
                'customer_id': task.customer_id,
                'due_date': task.due_date,
                'overdue_days': overdue_days,
                'escalation': escalation_for(overdue_days),
                'priority': task.priority.value.lower()
            })

        overdue_items.sort(key=lambda item: item['due_date'])
        return overdue_items

    def get_overdue_summary(self, now: Optional[datetime] = None) -> Dict:
        """Count overdue tasks by escalation level and priority."""
        items = self.check_overdue_items(now)

        by_escalation = Counter({level: 0 for level in ESCALATION_LEVELS})
        by_escalation.update(item['escalation'] for item in items)
        by_priority = Counter({level: 0 for level in ('low', 'medium', 'high')})
        by_priority.update(item['priority'] for item in items)

        average = sum(item['overdue_days'] for item in items) / len(items) if items else 0

        if by_escalation['critical']:
            logger.warning(f"{by_escalation['critical']} tasks are critically overdue")

        return {
            'total_overdue': len(items),
            'escalation_breakdown': dict(by_escalation),
            'priority_breakdown': dict(by_priority),
            'average_overdue_days': round(average, 1),
            'critical_items': by_escalation['critical'],
            'needs_immediate_attention': by_escalation['critical'] + by_escalation['high']
        }
