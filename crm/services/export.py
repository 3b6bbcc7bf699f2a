"""
CSV export of customers, tasks and communications.
"""

import csv
from typing import Dict, List, Sequence

from loguru import logger

from ..database.crm_store import CRMStore

CUSTOMER_HEADERS = ["id", "name", "email", "phone", "role", "notes"]
TASK_HEADERS = ["id", "customer", "description", "due_date", "priority", "reminder_time", "completed"]
COMMUNICATION_HEADERS = ["id", "customer", "type", "timestamp", "notes", "tags"]

_DATE_FORMAT = "%Y-%m-%d %H:%M"


def _fmt(moment) -> str:
    return moment.strftime(_DATE_FORMAT) if moment else ""


def _customer_name(store: CRMStore, customer_id: str) -> str:
    customer = store.get_customer(customer_id)
    return customer.name if customer else "Unknown"


def customer_rows(store: CRMStore) -> List[Dict]:
    return [
        {"id": c.id, "name": c.name, "email": c.email, "phone": c.phone,
         "role": c.role, "notes": c.notes}
        for c in store.get_all_customers()
    ]


def task_rows(store: CRMStore) -> List[Dict]:
    return [
        {"id": t.id, "customer": _customer_name(store, t.customer_id),
         "description": t.description, "due_date": _fmt(t.due_date),
         "priority": t.priority.value, "reminder_time": _fmt(t.reminder_time),
         "completed": "yes" if t.completed else "no"}
        for t in store.get_all_tasks()
    ]


def communication_rows(store: CRMStore) -> List[Dict]:
    return [
        {"id": c.id, "customer": _customer_name(store, c.customer_id), "type": c.type,
         "timestamp": _fmt(c.timestamp), "notes": c.notes, "tags": ", ".join(c.tags)}
        for c in store.get_all_communications()
    ]


def write_csv(path: str, headers: Sequence[str], rows: List[Dict]) -> int:
    """
    Write rows to a CSV file with a header row.

    Args:
        path: Destination file
        headers: Column names, also used as row keys
        rows: Row dictionaries; missing keys are written empty

    Returns:
        Number of data rows written
    """
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers)
        for row in rows:
            writer.writerow([row.get(h, "") for h in headers])
    logger.info(f"Exported {len(rows)} rows to {path}")
    return len(rows)
