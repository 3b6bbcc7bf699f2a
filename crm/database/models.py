"""
Entity models for customers, tasks and communications.
Plain in-memory records with generated identifiers, plus factory helpers.
"""

import uuid
from datetime import datetime, timedelta
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


def generate_id() -> str:
    """Generate a globally unique opaque identifier."""
    return str(uuid.uuid4())


class TaskPriority(Enum):
    """Task priority levels."""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Hours before the due date at which the default reminder fires
REMINDER_LEAD_HOURS = {
    TaskPriority.HIGH: 48,
    TaskPriority.MEDIUM: 24,
    TaskPriority.LOW: 12
}


def default_reminder_time(due_date: datetime, priority: TaskPriority = TaskPriority.MEDIUM) -> datetime:
    """Return the default reminder time for a task due at ``due_date``."""
    return due_date - timedelta(hours=REMINDER_LEAD_HOURS[priority])


@dataclass
class Customer:
    """Represents a customer record."""
    name: str = ""
    email: str = ""
    phone: str = ""
    role: str = ""
    notes: str = ""
    id: str = field(default_factory=generate_id)


@dataclass
class Task:
    """Represents a follow-up task for a customer."""
    customer_id: str = ""
    description: str = ""
    due_date: datetime = None
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    reminder_time: Optional[datetime] = None
    id: str = field(default_factory=generate_id)

    def __post_init__(self):
        if self.reminder_time is None and self.due_date is not None:
            self.reminder_time = default_reminder_time(self.due_date, self.priority)

    @property
    def is_pending(self) -> bool:
        return not self.completed

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        """True when the task is incomplete and its due date has passed."""
        now = now or datetime.now()
        return not self.completed and self.due_date is not None and self.due_date < now


@dataclass
class Communication:
    """Represents a logged communication with a customer."""
    customer_id: str = ""
    type: str = "phone"  # phone, email, meeting
    notes: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    tags: List[str] = field(default_factory=list)
    id: str = field(default_factory=generate_id)

    def add_tag(self, tag: str):
        self.tags.append(tag)

    def remove_tag(self, tag: str):
        if tag in self.tags:
            self.tags.remove(tag)


def create_customer(name: str, email: str, phone: str, role: str, notes: str = "") -> Customer:
    """Create a new customer."""
    return Customer(name=name, email=email, phone=phone, role=role, notes=notes)


def create_communication(customer_id: str, comm_type: str, notes: str,
                         tags: Optional[List[str]] = None) -> Communication:
    """Create a new communication timestamped now."""
    communication = Communication(customer_id=customer_id, type=comm_type, notes=notes)
    for tag in tags or []:
        communication.add_tag(tag)
    return communication


def create_task(customer_id: str, description: str, due_date: datetime,
                priority: TaskPriority = TaskPriority.MEDIUM) -> Task:
    """Create a new task with a reminder derived from its priority."""
    return Task(
        customer_id=customer_id,
        description=description,
        due_date=due_date,
        priority=priority
    )
