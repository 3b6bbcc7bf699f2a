"""
View filters for the customer, communication and task tables.
"""

from datetime import datetime, timedelta
from typing import List, Optional

from ..core.branding import ALL_CUSTOMERS, ALL_TYPES, COMMUNICATION_TYPES
from ..database.crm_store import CRMStore
from ..database.models import Communication, Customer, Task

WITH_COMMUNICATIONS = "With Communications"
NO_COMMUNICATIONS = "No Communications"
ACTIVE_CUSTOMERS = "Active Customers"
RECENT_CUSTOMERS = "Recent Customers"

ACTIVE_DAYS = 90
RECENT_DAYS = 30


def customer_filter_options(roles: List[str]) -> List[str]:
    """Options for the customer filter dropdown."""
    return [ALL_CUSTOMERS, *roles, WITH_COMMUNICATIONS, NO_COMMUNICATIONS,
            ACTIVE_CUSTOMERS, RECENT_CUSTOMERS]


def communication_type_options() -> List[str]:
    return [ALL_TYPES, *COMMUNICATION_TYPES]


def _matches_search(customer: Customer, term: str) -> bool:
    return any(term in (value or "").lower()
               for value in (customer.name, customer.email, customer.role, customer.notes))


def filter_customers(store: CRMStore, selection: Optional[str] = None, search_text: str = "",
                     now: Optional[datetime] = None) -> List[Customer]:
    """
    Apply the customer dropdown and search box.

    Args:
        store: CRM store
        selection: Dropdown value; a role name or one of the activity filters
        search_text: Case-insensitive substring over name, email, role and notes
        now: Reference time for the activity filters

    Returns:
        Matching customers
    """
    now = now or datetime.now()
    selection = selection or ALL_CUSTOMERS

    if selection == ALL_CUSTOMERS:
        customers = store.get_all_customers()
    elif selection == WITH_COMMUNICATIONS:
        customers = store.filter_customers(lambda c: bool(store.get_customer_communications(c.id)))
    elif selection == NO_COMMUNICATIONS:
        customers = store.filter_customers(lambda c: not store.get_customer_communications(c.id))
    elif selection == ACTIVE_CUSTOMERS:
        customers = store.filter_customers(store.has_recent_communication(ACTIVE_DAYS, now))
    elif selection == RECENT_CUSTOMERS:
        cutoff = now - timedelta(days=RECENT_DAYS)

        def is_recent(customer: Customer) -> bool:
            comms = store.get_customer_communications(customer.id)
            return bool(comms) and min(c.timestamp for c in comms) > cutoff

        customers = store.filter_customers(is_recent)
    else:
        customers = store.filter_customers(store.has_role(selection))

    term = (search_text or "").strip().lower()
    if term:
        customers = [c for c in customers if _matches_search(c, term)]
    return customers


def filter_communications(store: CRMStore, comm_type: Optional[str] = None, tag_text: str = "",
                          customer_id: Optional[str] = None) -> List[Communication]:
    """Filter communications by type and tag substring, newest first."""
    comms = store.search_communications(customer_id, comm_type, (tag_text or "").strip())
    return sorted(comms, key=lambda c: c.timestamp, reverse=True)


def filter_tasks(store: CRMStore, show_completed: bool = True,
                 customer_id: Optional[str] = None) -> List[Task]:
    """Filter tasks by completion, earliest due first."""
    tasks = store.search_tasks(customer_id, show_completed)
    return sorted(tasks, key=lambda t: t.due_date or datetime.max)


def filter_customers_by_name(customers: List[Customer], text: str) -> List[Customer]:
    """Customers whose name contains ``text``, case-insensitively."""
    term = (text or "").strip().lower()
    if not term:
        return list(customers)
    return [c for c in customers if term in c.name.lower()]
