"""
Task reminder system with a background polling timer.
Periodically scans pending tasks and fires reminder and overdue notifications,
at most once per task for each kind.
"""

import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Set

from loguru import logger

from ..core.config import get_settings
from ..core.exceptions import CRMError
from ..database.crm_store import CRMStore, EventType, get_crm_store
from ..database.models import Task

DATE_DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


@dataclass
class TaskNotification:
    """A reminder or overdue alert raised for a task."""
    kind: str  # reminder, overdue
    task: Task
    customer_name: str

    @property
    def is_overdue(self) -> bool:
        return self.kind == ReminderSystem.OVERDUE

    @property
    def title(self) -> str:
        return "Overdue Task Alert" if self.is_overdue else "Task Reminder"

    @property
    def message(self) -> str:
        due = self.task.due_date.strftime(DATE_DISPLAY_FORMAT) if self.task.due_date else "N/A"
        return (f"Task: {self.task.description}\n"
                f"Customer: {self.customer_name}\n"
                f"Due Date: {due}\n"
                f"Priority: {self.task.priority.value}")


NotificationHandler = Callable[[TaskNotification], None]


class ReminderSystem:
    """Background scheduler that reminds about upcoming and overdue tasks."""

    REMINDER = "reminder"
    OVERDUE = "overdue"

    def __init__(self, store: Optional[CRMStore] = None, check_interval: Optional[float] = None):
        """Initialize the reminder system."""
        self.store = store or get_crm_store()
        self.check_interval = check_interval or get_settings().reminder_check_interval
        self.notification_handler: Optional[NotificationHandler] = None

        self._notified: Set[str] = set()
        self._notified_lock = threading.Lock()
        # each polling thread owns its stop event; the wake event cuts a wait short
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

        self.store.register_observer(EventType.TASK_UPDATED, self._on_task_updated)
        self.store.register_observer(EventType.CUSTOMER_DELETED, self._on_customer_deleted)

    def set_notification_handler(self, handler: Optional[NotificationHandler]):
        self.notification_handler = handler

    def set_check_interval(self, seconds: float):
        """Change the polling interval, waking a running poller so it applies now."""
        if seconds <= 0:
            raise CRMError("VALIDATION_ERROR", "Check interval must be positive.")
        self.check_interval = seconds
        self._wake_event.set()
        logger.info(f"Reminder check interval set to {seconds}s")

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        """Start polling in a daemon thread; checks once immediately."""
        if self.is_running:
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), name="reminder-system", daemon=True
        )
        self._thread.start()
        logger.info(f"Reminder system started (checking every {self.check_interval}s)")

    def stop(self, timeout: float = 2.0):
        """Stop polling."""
        self._stop_event.set()
        self._wake_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Reminder thread did not stop in time; it will exit after its current check")
        if thread is not None:
            logger.info("Reminder system stopped")
        self._thread = None

    def _run(self, stop_event: threading.Event):
        while not stop_event.is_set():
            try:
                self.check_pending_tasks()
            except Exception as e:
                logger.error(f"Error checking pending tasks: {e}")
            self._wake_event.wait(self.check_interval)
            self._wake_event.clear()

    def check_pending_tasks(self, now: Optional[datetime] = None) -> List[TaskNotification]:
        """
        Check pending tasks and send reminders where needed.

        Args:
            now: Reference time (defaults to the current time)

        Returns:
            Notifications fired during this check
        """
        if not self.store.get_setting("notifications_enabled", False):
            return []

        now = now or datetime.now()
        fired = []

        for task in self.store.get_pending_tasks():
            if task.due_date is None:
                continue

            if (task.reminder_time is not None
                    and task.reminder_time < now < task.due_date
                    and self._mark_notified(task.id)):
                fired.append(self._send(self.REMINDER, task))

            if task.due_date < now and self._mark_notified(self._overdue_key(task.id)):
                fired.append(self._send(self.OVERDUE, task))

        return fired

    def clear_notification_status(self, task_id: str):
        """Forget sent notifications for a task so it can be reminded again."""
        with self._notified_lock:
            self._notified.discard(task_id)
            self._notified.discard(self._overdue_key(task_id))

    def was_notified(self, task_id: str, kind: str = REMINDER) -> bool:
        key = self._overdue_key(task_id) if kind == self.OVERDUE else task_id
        with self._notified_lock:
            return key in self._notified

    def _mark_notified(self, key: str) -> bool:
        """Record a notification key; False if it was already recorded."""
        with self._notified_lock:
            if key in self._notified:
                return False
            self._notified.add(key)
            return True

    @staticmethod
    def _overdue_key(task_id: str) -> str:
        return f"overdue-{task_id}"

    def _send(self, kind: str, task: Task) -> TaskNotification:
        customer = self.store.get_customer(task.customer_id)
        notification = TaskNotification(
            kind=kind,
            task=task,
            customer_name=customer.name if customer else "Unknown"
        )
        summary = " | ".join(notification.message.splitlines())

        if kind == self.OVERDUE:
            logger.warning(f"OVERDUE TASK ALERT | {summary}")
        else:
            logger.info(f"TASK REMINDER | {summary}")

        if self.notification_handler is not None:
            try:
                self.notification_handler(notification)
            except Exception as e:
                logger.error(f"Notification handler failed for task {task.id}: {e}")

        return notification

    def _on_task_updated(self, task: Task):
        if task.completed:
            self.clear_notification_status(task.id)

    def _on_customer_deleted(self, _customer):
        live = {task.id for task in self.store.get_all_tasks()}
        with self._notified_lock:
            self._notified = {
                key for key in self._notified
                if key.removeprefix("overdue-") in live
            }
