"""
Form input parsing and validation.
Turns raw dialog text into entities, raising CRMError with user-facing messages.
"""

from datetime import datetime, time
from typing import List, Optional

from ..core.branding import COMMUNICATION_TYPES
from ..core.exceptions import CRMError
from ..database.models import (
    Communication,
    Customer,
    Task,
    TaskPriority,
    create_communication,
    create_customer,
    create_task,
)

DUE_DATE_FORMAT = "%Y-%m-%d %H:%M"
REMINDER_DATE_FORMAT = "%Y-%m-%d"


def parse_tags(tags_text: Optional[str]) -> List[str]:
    """Split a comma-separated tag string, trimming and skipping blanks."""
    if not tags_text:
        return []
    return [tag.strip() for tag in tags_text.split(",") if tag.strip()]


def parse_priority(value) -> TaskPriority:
    if isinstance(value, TaskPriority):
        return value
    try:
        return TaskPriority[(value or "MEDIUM").strip().upper()]
    except KeyError:
        raise CRMError("VALIDATION_ERROR", f"Unknown priority: {value}")


def parse_due_date(text: str, date_format: str = DUE_DATE_FORMAT) -> datetime:
    try:
        return datetime.strptime(text.strip(), date_format)
    except ValueError:
        raise CRMError("INVALID_DATE", "Invalid date format. Please use YYYY-MM-DD HH:MM format.")


def reminder_time_slots() -> List[str]:
    """Half-hour time slots offered by the reminder dialog."""
    return [f"{hour:02d}:{minute:02d}" for hour in range(24) for minute in (0, 30)]


def parse_reminder_time(date_text: str, slot: str) -> datetime:
    """Combine a YYYY-MM-DD date and an HH:MM slot into a reminder time."""
    try:
        day = datetime.strptime((date_text or "").strip(), REMINDER_DATE_FORMAT).date()
        hour, minute = (int(part) for part in slot.split(":"))
        return datetime.combine(day, time(hour, minute))
    except (ValueError, AttributeError):
        raise CRMError("INVALID_DATE", "Invalid reminder date. Please use YYYY-MM-DD and a time slot.")


def format_reminder_parts(when: datetime):
    """Split a reminder time into the dialog's date text and HH:MM slot."""
    return when.strftime(REMINDER_DATE_FORMAT), when.strftime("%H:%M")


def _require_customer_fields(name: str, email: str):
    if not (name or "").strip() or not (email or "").strip():
        raise CRMError("VALIDATION_ERROR", "Name and email are required.")


def build_customer(name: str, email: str, phone: str = "", role: str = "Client", notes: str = "") -> Customer:
    """Create a customer from the add-customer form."""
    _require_customer_fields(name, email)
    return create_customer(name.strip(), email.strip(), (phone or "").strip(), role or "", notes or "")


def apply_customer_update(customer: Customer, name: str, email: str, phone: str = "",
                          role: str = "", notes: str = "") -> Customer:
    """Apply the update-customer form to an existing customer in place."""
    _require_customer_fields(name, email)
    customer.name = name.strip()
    customer.email = email.strip()
    customer.phone = (phone or "").strip()
    customer.role = role or customer.role
    customer.notes = notes or ""
    return customer


def build_communication(customer: Optional[Customer], comm_type: str, notes: str,
                        tags_text: str = "") -> Communication:
    """Create a communication from the log-communication form."""
    if customer is None or not (notes or "").strip():
        raise CRMError("VALIDATION_ERROR", "Customer and notes are required.")
    if comm_type not in COMMUNICATION_TYPES:
        raise CRMError("VALIDATION_ERROR", f"Unknown communication type: {comm_type}")
    return create_communication(customer.id, comm_type, notes.strip(), parse_tags(tags_text))


def build_task(customer: Optional[Customer], description: str, due_text: str,
               priority="MEDIUM", date_format: str = DUE_DATE_FORMAT) -> Task:
    """Create a task from the add-task form."""
    if customer is None or not (description or "").strip() or not (due_text or "").strip():
        raise CRMError("VALIDATION_ERROR", "All fields are required.")
    due_date = parse_due_date(due_text, date_format)
    return create_task(customer.id, description.strip(), due_date, parse_priority(priority))
