"""
Task tracking: reminder polling, overdue detection and task management.
"""

from .reminder_system import ReminderSystem, TaskNotification
from .overdue_detector import OverdueDetector
from .task_manager import TaskManager

__all__ = [
    "ReminderSystem",
    "TaskNotification",
    "OverdueDetector",
    "TaskManager"
]
