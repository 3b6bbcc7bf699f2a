"""
Task manager for creating, completing and rescheduling customer tasks.
Keeps the reminder system in step when reminder times change.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

from loguru import logger

from ..core.exceptions import CRMError
from ..database.crm_store import CRMStore, get_crm_store
from ..database.models import Task, TaskPriority
from .reminder_system import ReminderSystem


class TaskManager:
    """Manages task tracking and reminder scheduling for customers."""

    def __init__(self, store: Optional[CRMStore] = None,
                 reminder_system: Optional[ReminderSystem] = None):
        """Initialize the task manager."""
        self.store = store or get_crm_store()
        self.reminder_system = reminder_system

    def add_task(self, task: Task) -> Task:
        """
        Add a task to the store.

        Args:
            task: Task to add; its customer must exist

        Returns:
            The added task
        """
        self.store.add_task(task)
        logger.info(f"Created task {task.id} for customer {task.customer_id}")
        return task

    def _get_task(self, task_id: str) -> Task:
        task = self.store.get_task(task_id)
        if task is None:
            raise CRMError("TASK_NOT_FOUND", task_id=task_id)
        return task

    def complete_task(self, task_id: str) -> Task:
        """
        Mark a task as completed.

        Args:
            task_id: ID of the task

        Returns:
            The updated task
        """
        task = self._get_task(task_id)
        task.completed = True
        self.store.update_task(task)
        logger.info(f"Completed task {task_id}")
        return task

    def set_reminder_time(self, task_id: str, when: datetime) -> Task:
        """
        Change when a task's reminder fires.

        Args:
            task_id: ID of the task
            when: New reminder time

        Returns:
            The updated task
        """
        task = self._get_task(task_id)
        task.reminder_time = when
        self.store.update_task(task)

        if self.reminder_system is not None:
            self.reminder_system.clear_notification_status(task_id)

        logger.info(f"Reminder for task {task_id} set to {when:%Y-%m-%d %H:%M}")
        return task

    def snooze_reminder(self, task_id: str, minutes: int, now: Optional[datetime] = None) -> Task:
        """
        Push a task's reminder forward from now.

        Args:
            task_id: ID of the task
            minutes: Number of minutes to snooze

        Returns:
            The updated task
        """
        if minutes <= 0:
            raise CRMError("VALIDATION_ERROR", "Snooze duration must be positive.")
        when = (now or datetime.now()) + timedelta(minutes=minutes)
        return self.set_reminder_time(task_id, when)

    def get_pending_tasks_for_customer(self, customer_id: str) -> List[Task]:
        """Get incomplete tasks for a customer, earliest due first."""
        tasks = self.store.search_tasks(customer_id, show_completed=False)
        return sorted(tasks, key=lambda t: t.due_date or datetime.max)

    def get_statistics(self, now: Optional[datetime] = None) -> Dict:
        """Get task statistics."""
        now = now or datetime.now()
        pending = self.store.get_pending_tasks()

        return {
            "total_pending": len(pending),
            "overdue_count": len([t for t in pending if t.is_overdue(now)]),
            "high_priority": len([t for t in pending if t.priority == TaskPriority.HIGH]),
            "due_today": len([t for t in pending if t.due_date and
                              t.due_date.date() == now.date()]),
            "due_this_week": len([t for t in pending if t.due_date and
                                  now <= t.due_date < now + timedelta(days=7)])
        }
