"""
Central in-memory store for customers, communications and tasks.
Holds all entities keyed by identifier and notifies observers on change.
"""

import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from loguru import logger

from .models import Communication, Customer, Task
from ..core.branding import ALL_ROLES, ALL_TYPES
from ..core.config import get_settings
from ..core.exceptions import CRMError


class EventType(Enum):
    """Store events observers can subscribe to."""
    CUSTOMER_ADDED = "customer_added"
    CUSTOMER_UPDATED = "customer_updated"
    CUSTOMER_DELETED = "customer_deleted"
    COMMUNICATION_ADDED = "communication_added"
    COMMUNICATION_UPDATED = "communication_updated"
    TASK_ADDED = "task_added"
    TASK_UPDATED = "task_updated"


Observer = Callable[[Any], None]
CustomerPredicate = Callable[[Customer], bool]
TaskPredicate = Callable[[Task], bool]


class CRMStore:
    """In-memory CRM state with observer callbacks for UI refresh."""

    def __init__(self, notifications_enabled: bool = True):
        """Initialize an empty store."""
        self._lock = threading.RLock()
        self.customers: Dict[str, Customer] = {}
        self.communications: Dict[str, List[Communication]] = {}
        self.tasks: Dict[str, List[Task]] = {}
        self.settings: Dict[str, Any] = {
            "notifications_enabled": notifications_enabled
        }
        self._observers: Dict[EventType, List[Observer]] = {}

    # Customer management
    def add_customer(self, customer: Customer):
        with self._lock:
            self.customers[customer.id] = customer
        logger.debug(f"Added customer {customer.id} ({customer.name})")
        self._notify_observers(EventType.CUSTOMER_ADDED, customer)

    def update_customer(self, customer: Customer) -> bool:
        with self._lock:
            if customer.id not in self.customers:
                logger.warning(f"Cannot update unknown customer {customer.id}")
                return False
            self.customers[customer.id] = customer
        self._notify_observers(EventType.CUSTOMER_UPDATED, customer)
        return True

    def delete_customer(self, customer_id: str) -> bool:
        """Delete a customer together with their communications and tasks."""
        with self._lock:
            customer = self.customers.pop(customer_id, None)
            if customer is None:
                logger.warning(f"Cannot delete unknown customer {customer_id}")
                return False
            self.communications.pop(customer_id, None)
            self.tasks.pop(customer_id, None)
        logger.info(f"Deleted customer {customer_id} ({customer.name})")
        self._notify_observers(EventType.CUSTOMER_DELETED, customer)
        return True

    def get_customer(self, customer_id: str) -> Optional[Customer]:
        with self._lock:
            return self.customers.get(customer_id)

    def get_all_customers(self) -> List[Customer]:
        with self._lock:
            return list(self.customers.values())

    def search_customers(self, search_term: Optional[str] = None, role: Optional[str] = None) -> List[Customer]:
        """
        Search customers by substring and optional exact role.

        Args:
            search_term: Case-insensitive text matched against name, email,
                phone, role and notes. Empty matches everything.
            role: Exact role to keep, or None / "All Roles" for any role.

        Returns:
            Matching customers
        """
        term = (search_term or "").lower()
        filter_by_role = role is not None and role != ALL_ROLES

        def matches(customer: Customer) -> bool:
            matches_search = not term or any(
                term in (value or "").lower()
                for value in (customer.name, customer.email, customer.phone,
                              customer.role, customer.notes)
            )
            matches_role = not filter_by_role or customer.role == role
            return matches_search and matches_role

        return self.filter_customers(matches)

    def filter_customers(self, predicate: CustomerPredicate) -> List[Customer]:
        return [c for c in self.get_all_customers() if predicate(c)]

    # Common filter predicates for customer searches
    def name_contains(self, text: str) -> CustomerPredicate:
        return lambda customer: text.lower() in customer.name.lower()

    def email_contains(self, text: str) -> CustomerPredicate:
        return lambda customer: text.lower() in customer.email.lower()

    def phone_contains(self, text: str) -> CustomerPredicate:
        return lambda customer: text.lower() in customer.phone.lower()

    def has_role(self, role: str) -> CustomerPredicate:
        return lambda customer: customer.role == role

    def has_recent_communication(self, days: int, now: Optional[datetime] = None) -> CustomerPredicate:
        cutoff = (now or datetime.now()) - timedelta(days=days)
        return lambda customer: any(
            comm.timestamp > cutoff for comm in self.get_customer_communications(customer.id)
        )

    def has_pending_tasks(self) -> CustomerPredicate:
        return lambda customer: any(
            not task.completed for task in self.get_customer_tasks(customer.id)
        )

    # Communication management
    def add_communication(self, communication: Communication):
        with self._lock:
            self._require_customer(communication.customer_id)
            self.communications.setdefault(communication.customer_id, []).append(communication)
        self._notify_observers(EventType.COMMUNICATION_ADDED, communication)

    def update_communication(self, communication: Communication) -> bool:
        with self._lock:
            if not self._replace(self.communications, communication):
                logger.warning(f"Cannot update unknown communication {communication.id}")
                return False
        self._notify_observers(EventType.COMMUNICATION_UPDATED, communication)
        return True

    def get_customer_communications(self, customer_id: str) -> List[Communication]:
        with self._lock:
            return list(self.communications.get(customer_id, []))

    def get_all_communications(self) -> List[Communication]:
        with self._lock:
            return [comm for comms in self.communications.values() for comm in comms]

    def search_communications(self, customer_id: Optional[str] = None, comm_type: Optional[str] = None,
                              tag_search: Optional[str] = None) -> List[Communication]:
        """Search communications by owner, type and tag substring."""
        if customer_id:
            candidates = self.get_customer_communications(customer_id)
        else:
            candidates = self.get_all_communications()

        tag_lower = (tag_search or "").lower()
        results = []
        for comm in candidates:
            matches_type = comm_type is None or comm_type == ALL_TYPES or comm.type == comm_type
            matches_tag = not tag_lower or any(tag_lower in tag.lower() for tag in comm.tags)
            if matches_type and matches_tag:
                results.append(comm)
        return results

    # Task management
    def add_task(self, task: Task):
        with self._lock:
            self._require_customer(task.customer_id)
            self.tasks.setdefault(task.customer_id, []).append(task)
        self._notify_observers(EventType.TASK_ADDED, task)

    def update_task(self, task: Task) -> bool:
        with self._lock:
            if not self._replace(self.tasks, task):
                logger.warning(f"Cannot update unknown task {task.id}")
                return False
        self._notify_observers(EventType.TASK_UPDATED, task)
        return True

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.get_all_tasks() if t.id == task_id), None)

    def get_customer_tasks(self, customer_id: str) -> List[Task]:
        with self._lock:
            return list(self.tasks.get(customer_id, []))

    def get_all_tasks(self) -> List[Task]:
        with self._lock:
            return [task for tasks in self.tasks.values() for task in tasks]

    def get_pending_tasks(self) -> List[Task]:
        return [task for task in self.get_all_tasks() if not task.completed]

    def search_tasks(self, customer_id: Optional[str] = None, show_completed: bool = True) -> List[Task]:
        if customer_id:
            candidates = self.get_customer_tasks(customer_id)
        else:
            candidates = self.get_all_tasks()
        return [task for task in candidates if show_completed or not task.completed]

    def filter_tasks(self, predicate: TaskPredicate) -> List[Task]:
        return [task for task in self.get_all_tasks() if predicate(task)]

    # Settings management
    def update_setting(self, key: str, value: Any):
        with self._lock:
            self.settings[key] = value

    def get_setting(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self.settings.get(key, default)

    # Reporting
    def get_communication_stats(self) -> Dict[str, int]:
        return {"total_communications": len(self.get_all_communications())}

    def get_task_completion_stats(self) -> Dict[str, int]:
        tasks = self.get_all_tasks()
        return {
            "total_tasks": len(tasks),
            "completed_tasks": len([t for t in tasks if t.completed])
        }

    # Observers
    def register_observer(self, event_type: EventType, observer: Observer):
        self._observers.setdefault(event_type, []).append(observer)

    def remove_observer(self, event_type: EventType, observer: Observer):
        observers = self._observers.get(event_type, [])
        if observer in observers:
            observers.remove(observer)

    def _notify_observers(self, event_type: EventType, data: Any):
        for observer in list(self._observers.get(event_type, [])):
            try:
                observer(data)
            except Exception as e:
                logger.error(f"Observer for {event_type.value} failed: {e}")

    def _require_customer(self, customer_id: str):
        if customer_id not in self.customers:
            raise CRMError("CUSTOMER_NOT_FOUND", customer_id=customer_id)

    @staticmethod
    def _replace(index: Dict[str, list], item) -> bool:
        items = index.get(item.customer_id, [])
        for i, existing in enumerate(items):
            if existing.id == item.id:
                items[i] = item
                return True
        return False


# Global store instance
_crm_store = None

def get_crm_store() -> CRMStore:
    """Get the global CRM store instance."""
    global _crm_store
    if _crm_store is None:
        _crm_store = CRMStore(notifications_enabled=get_settings().notifications_enabled)
    return _crm_store
