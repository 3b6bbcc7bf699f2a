"""
Dialog for setting reminder times on a customer's pending tasks.
"""

from datetime import datetime
from tkinter import messagebox
from typing import Dict, List, Optional, Tuple

import customtkinter as ctk
from loguru import logger

from ..core.exceptions import CRMError
from ..database.models import Customer
from ..services import forms
from ..services.filters import filter_customers_by_name
from ..tasks import TaskManager


class ReminderDialog(ctk.CTkToplevel):
    """Pick a customer, then set a reminder date and time slot per pending task."""

    def __init__(self, parent, task_manager: TaskManager):
        super().__init__(parent)
        self.task_manager = task_manager
        self.selected_customer: Optional[Customer] = None
        self.task_rows: Dict[str, Tuple[ctk.CTkEntry, ctk.CTkOptionMenu]] = {}

        self.title("Set Task Reminders")
        self.geometry("680x560")
        self.transient(parent)
        self.grab_set()

        self.setup_ui()
        self.refresh_customers()

    def setup_ui(self):
        main_frame = ctk.CTkFrame(self)
        main_frame.pack(fill="both", expand=True, padx=20, pady=20)

        ctk.CTkLabel(
            main_frame,
            text="Set Task Reminders",
            font=ctk.CTkFont(size=18, weight="bold")
        ).pack(pady=(0, 10))

        # Customer search
        search_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        search_frame.pack(fill="x", pady=5)
        ctk.CTkLabel(search_frame, text="Customer:", width=90, anchor="w").pack(side="left")
        self.search_entry = ctk.CTkEntry(search_frame, placeholder_text="Type to filter by name")
        self.search_entry.pack(side="left", expand=True, fill="x")
        self.search_entry.bind("<KeyRelease>", lambda e: self.refresh_customers())

        self.customer_frame = ctk.CTkScrollableFrame(main_frame, height=110)
        self.customer_frame.pack(fill="x", pady=5)

        self.tasks_header = ctk.CTkLabel(
            main_frame,
            text="Select a customer to see pending tasks",
            font=ctk.CTkFont(size=14, weight="bold")
        )
        self.tasks_header.pack(anchor="w", pady=(10, 5))

        self.tasks_frame = ctk.CTkScrollableFrame(main_frame, height=220)
        self.tasks_frame.pack(fill="both", expand=True, pady=5)

        button_frame = ctk.CTkFrame(main_frame, fg_color="transparent")
        button_frame.pack(pady=(10, 0))
        ctk.CTkButton(button_frame, text="Save Reminders", command=self.save_reminders).pack(side="left", padx=10)
        ctk.CTkButton(button_frame, text="Close", command=self.destroy, fg_color="gray").pack(side="left", padx=10)

    def refresh_customers(self):
        for widget in self.customer_frame.winfo_children():
            widget.destroy()

        customers = filter_customers_by_name(
            self.task_manager.store.get_all_customers(), self.search_entry.get()
        )
        if not customers:
            ctk.CTkLabel(self.customer_frame, text="No matching customers", text_color="gray").pack(pady=10)
            return

        for customer in sorted(customers, key=lambda c: c.name.lower()):
            ctk.CTkButton(
                self.customer_frame,
                text=f"{customer.name} ({customer.role})",
                anchor="w",
                fg_color="transparent",
                border_width=1,
                command=lambda c=customer: self.select_customer(c)
            ).pack(fill="x", padx=5, pady=2)

    def select_customer(self, customer: Customer):
        self.selected_customer = customer
        self.show_tasks()

    def show_tasks(self):
        for widget in self.tasks_frame.winfo_children():
            widget.destroy()
        self.task_rows.clear()

        customer = self.selected_customer
        tasks = self.task_manager.get_pending_tasks_for_customer(customer.id)
        self.tasks_header.configure(text=f"Pending tasks for {customer.name} ({len(tasks)})")

        if not tasks:
            messagebox.showinfo("Information", f"No pending tasks found for {customer.name}", parent=self)
            return

        slots = forms.reminder_time_slots()
        for task in tasks:
            row = ctk.CTkFrame(self.tasks_frame)
            row.pack(fill="x", padx=5, pady=4)

            due = task.due_date.strftime("%Y-%m-%d %H:%M") if task.due_date else "N/A"
            ctk.CTkLabel(
                row,
                text=f"{task.description}\nDue: {due} | {task.priority.value}",
                justify="left",
                anchor="w"
            ).pack(side="left", fill="x", expand=True, padx=5)

            date_entry = ctk.CTkEntry(row, width=110, placeholder_text="YYYY-MM-DD")
            slot_menu = ctk.CTkOptionMenu(row, values=slots, width=90)
            if task.reminder_time:
                date_text, slot = forms.format_reminder_parts(task.reminder_time)
                date_entry.insert(0, date_text)
                slot_menu.set(slot if slot in slots else slots[0])
            date_entry.pack(side="left", padx=5)
            slot_menu.pack(side="left", padx=5)

            self.task_rows[task.id] = (date_entry, slot_menu)

    def collect_reminders(self) -> List[Tuple[str, datetime]]:
        reminders = []
        for task_id, (date_entry, slot_menu) in self.task_rows.items():
            if not date_entry.get().strip():
                continue
            reminders.append((task_id, forms.parse_reminder_time(date_entry.get(), slot_menu.get())))
        return reminders

    def save_reminders(self):
        """Apply every filled-in reminder, then report how many were updated."""
        if self.selected_customer is None or not self.task_rows:
            messagebox.showinfo("Information", "Select a customer with pending tasks first.", parent=self)
            return

        try:
            reminders = self.collect_reminders()
            for task_id, when in reminders:
                self.task_manager.set_reminder_time(task_id, when)
        except CRMError as e:
            logger.warning(f"Could not save reminders: {e.message}")
            messagebox.showerror("Error", e.message, parent=self)
            return

        messagebox.showinfo("Success", f"Reminder times updated for {len(reminders)} tasks", parent=self)
        self.destroy()
