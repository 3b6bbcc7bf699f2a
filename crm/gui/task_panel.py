"""
Task management panel for the GUI.
Lists customer tasks, overdue tasks by escalation level, and task statistics.
"""

from datetime import datetime
from tkinter import messagebox
from typing import Dict

import customtkinter as ctk
from loguru import logger

from ..core.branding import ESCALATION_COLORS, PRIORITY_COLORS
from ..core.exceptions import CRMError
from ..database.crm_store import EventType
from ..services.export import TASK_HEADERS, task_rows
from ..services.filters import filter_tasks
from ..tasks import OverdueDetector, TaskManager
from .dialogs import TaskDialog
from .reminder_dialog import ReminderDialog
from .table_panel import TablePanel

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def _fmt(moment) -> str:
    return moment.strftime(DISPLAY_FORMAT) if moment else ""


class TaskTable(TablePanel):
    """All tasks, with an optional completed filter and task actions."""

    columns = [("Customer", 160), ("Description", 280), ("Due Date", 130),
               ("Priority", 80), ("Reminder", 130), ("Status", 90)]

    def __init__(self, parent, task_manager: TaskManager, **kwargs):
        self.task_manager = task_manager
        self.store = task_manager.store
        super().__init__(parent, **kwargs)

        self.show_completed_var = ctk.BooleanVar(value=True)
        ctk.CTkCheckBox(
            self.toolbar,
            text="Show completed",
            variable=self.show_completed_var,
            command=self.refresh
        ).pack(side="left", padx=10, pady=5)

        self.count_label = ctk.CTkLabel(self.toolbar, text="", text_color="gray")
        self.count_label.pack(side="right", padx=10)

        self.add_action("Add Task", self.add_task, width=100)
        self.add_action("Mark Completed", self.complete_task)
        self.add_action("Set Reminders", self.open_reminder_dialog)
        self.add_action("Snooze (1hr)", lambda: self.snooze_task(60), width=110)
        self.add_action("Export CSV", self.export_tasks, width=100)

        for priority, color in PRIORITY_COLORS.items():
            self.tree.tag_configure(priority, foreground=color)
        self.tree.tag_configure("completed", foreground="gray")

    def refresh(self):
        now = datetime.now()
        tasks = filter_tasks(self.store, self.show_completed_var.get())

        self.clear_tree()
        for task in tasks:
            customer = self.store.get_customer(task.customer_id)
            if task.completed:
                status, tag = "Completed", "completed"
            else:
                status = "OVERDUE" if task.is_overdue(now) else "Pending"
                tag = task.priority.value

            self.insert_row(task.id, (
                customer.name if customer else "Unknown",
                task.description,
                _fmt(task.due_date),
                task.priority.value,
                _fmt(task.reminder_time),
                status
            ), tags=(tag,))
        self.count_label.configure(text=f"{len(tasks)} tasks")

    def _selected_task_id(self):
        task_id = self.selected_id()
        if task_id is None:
            messagebox.showinfo("Info", "Please select a task first.")
        return task_id

    def add_task(self):
        if not self.store.get_all_customers():
            messagebox.showinfo("Info", "Add a customer before creating tasks.")
            return
        TaskDialog(self.winfo_toplevel(), self.task_manager)

    def complete_task(self):
        task_id = self._selected_task_id()
        if task_id is None:
            return
        try:
            task = self.task_manager.complete_task(task_id)
        except CRMError as e:
            logger.error(f"Could not complete task {task_id}: {e}")
            messagebox.showerror("Error", e.message)
            return
        messagebox.showinfo("Task Completed", f"'{task.description}' is done.")

    def snooze_task(self, minutes: int):
        task_id = self._selected_task_id()
        if task_id is None:
            return
        try:
            task = self.task_manager.snooze_reminder(task_id, minutes)
        except CRMError as e:
            logger.error(f"Could not snooze task {task_id}: {e}")
            messagebox.showerror("Error", e.message)
            return
        messagebox.showinfo("Reminder Snoozed", f"Next reminder at {_fmt(task.reminder_time)}.")

    def open_reminder_dialog(self):
        ReminderDialog(self.winfo_toplevel(), self.task_manager)

    def export_tasks(self):
        self.ask_export_csv(TASK_HEADERS, task_rows(self.store), "Export Tasks")


class OverdueTable(TablePanel):
    """Overdue tasks, most overdue first, coloured by escalation level."""

    columns = [("Task", 260), ("Customer", 160), ("Due Date", 130),
               ("Days Overdue", 100), ("Escalation", 100), ("Priority", 80)]

    def __init__(self, parent, task_manager: TaskManager, detector: OverdueDetector, **kwargs):
        self.task_manager = task_manager
        self.detector = detector
        super().__init__(parent, **kwargs)

        self.alert_label = ctk.CTkLabel(self.toolbar, text="", font=ctk.CTkFont(size=12, weight="bold"))
        self.alert_label.pack(side="left", padx=10, pady=5)

        self.add_action("Resolve", self.resolve_selected, width=100)
        self.add_action("Overdue Report", self.show_report)

        for level, color in ESCALATION_COLORS.items():
            self.tree.tag_configure(level, foreground=color)

    def refresh(self):
        items = self.detector.check_overdue_items()
        critical = sum(1 for item in items if item['escalation'] == 'critical')

        self.clear_tree()
        for item in items:
            self.insert_row(item['id'], (
                item['title'],
                item['customer'],
                _fmt(item['due_date']),
                item['overdue_days'],
                item['escalation'].upper(),
                item['priority'].upper()
            ), tags=(item['escalation'],))

        if critical:
            self.alert_label.configure(
                text=f"{critical} critically overdue of {len(items)}", text_color=ESCALATION_COLORS['high']
            )
        elif items:
            self.alert_label.configure(text=f"{len(items)} overdue tasks", text_color="orange")
        else:
            self.alert_label.configure(text="No overdue tasks", text_color="green")

    def resolve_selected(self):
        task_id = self.selected_id()
        if task_id is None:
            messagebox.showinfo("Info", "Please select an overdue task first.")
            return
        try:
            self.task_manager.complete_task(task_id)
        except CRMError as e:
            logger.error(f"Could not resolve task {task_id}: {e}")
            messagebox.showerror("Error", e.message)

    def show_report(self):
        summary = self.detector.get_overdue_summary()
        breakdown = summary['escalation_breakdown']
        lines = [
            f"Overdue tasks as of {datetime.now().strftime(DISPLAY_FORMAT)}",
            "",
            f"Total overdue: {summary['total_overdue']}",
            f"Needing immediate attention: {summary['needs_immediate_attention']}",
            f"Average days overdue: {summary['average_overdue_days']}",
            "",
            "By escalation:",
            *[f"  {level.title()}: {count}" for level, count in breakdown.items()],
            "",
            "By priority:",
            *[f"  {level.title()}: {count}" for level, count in summary['priority_breakdown'].items()],
        ]

        window = ctk.CTkToplevel(self)
        window.title("Overdue Report")
        window.geometry("380x420")
        window.transient(self.winfo_toplevel())

        textbox = ctk.CTkTextbox(window, wrap="word")
        textbox.pack(fill="both", expand=True, padx=15, pady=(15, 5))
        textbox.insert("0.0", "\n".join(lines))
        textbox.configure(state="disabled")
        ctk.CTkButton(window, text="Close", command=window.destroy).pack(pady=10)


class StatisticsView(ctk.CTkScrollableFrame):
    """Grid of labelled counters for task and overdue statistics."""

    def show(self, sections: Dict[str, Dict]):
        for widget in self.winfo_children():
            widget.destroy()

        row = 0
        for title, stats in sections.items():
            ctk.CTkLabel(
                self, text=title, font=ctk.CTkFont(size=14, weight="bold")
            ).grid(row=row, column=0, columnspan=4, sticky="w", padx=10, pady=(12, 4))
            row += 1

            flat = {}
            for key, value in stats.items():
                if isinstance(value, dict):
                    flat.update({f"{key.split('_')[0]} {sub}": v for sub, v in value.items()})
                else:
                    flat[key] = value

            for index, (key, value) in enumerate(flat.items()):
                card = ctk.CTkFrame(self)
                card.grid(row=row + index // 4, column=index % 4, sticky="nsew", padx=5, pady=5)
                ctk.CTkLabel(card, text=str(value), font=ctk.CTkFont(size=18, weight="bold")).pack(padx=12, pady=(8, 0))
                ctk.CTkLabel(
                    card, text=key.replace('_', ' ').title(), font=ctk.CTkFont(size=10), text_color="gray"
                ).pack(padx=12, pady=(0, 8))
            row += (len(flat) + 3) // 4


class TaskPanel(ctk.CTkFrame):
    """Task management tab: tasks, overdue tasks and statistics."""

    def __init__(self, parent, task_manager: TaskManager, **kwargs):
        super().__init__(parent, **kwargs)
        self.task_manager = task_manager
        self.store = task_manager.store
        self.overdue_detector = OverdueDetector(self.store)

        self.tabview = ctk.CTkTabview(self)
        self.tabview.pack(fill="both", expand=True, padx=5, pady=5)

        self.task_table = TaskTable(self.tabview.add("Tasks"), task_manager, fg_color="transparent")
        self.task_table.pack(fill="both", expand=True)

        self.overdue_table = OverdueTable(
            self.tabview.add("Overdue"), task_manager, self.overdue_detector, fg_color="transparent"
        )
        self.overdue_table.pack(fill="both", expand=True)

        self.statistics = StatisticsView(self.tabview.add("Statistics"))
        self.statistics.pack(fill="both", expand=True, padx=5, pady=5)

        for event_type in (EventType.TASK_ADDED, EventType.TASK_UPDATED,
                           EventType.CUSTOMER_UPDATED, EventType.CUSTOMER_DELETED):
            self.store.register_observer(event_type, self.schedule_refresh)

        self.refresh_all_data()

    def schedule_refresh(self, *_):
        self.after(0, self.refresh_all_data)

    def refresh_all_data(self):
        """Reload every task view from the store."""
        try:
            self.task_table.refresh()
            self.overdue_table.refresh()
            self.statistics.show({
                "Tasks": self.task_manager.get_statistics(),
                "Overdue": self.overdue_detector.get_overdue_summary()
            })
        except Exception as e:
            logger.error(f"Error refreshing task views: {e}")
            messagebox.showerror("Error", f"Failed to refresh tasks: {str(e)}")
