"""
In-memory data layer: entity models, the central store and sample data.
"""

from .models import (
    Communication,
    Customer,
    Task,
    TaskPriority,
    create_communication,
    create_customer,
    create_task,
)
from .crm_store import CRMStore, EventType, get_crm_store

__all__ = [
    "Communication",
    "Customer",
    "Task",
    "TaskPriority",
    "create_communication",
    "create_customer",
    "create_task",
    "CRMStore",
    "EventType",
    "get_crm_store"
]
