"""
Modal dialogs for adding and editing customers, communications and tasks.
"""

from datetime import datetime, timedelta
from tkinter import messagebox
from typing import Callable, List, Optional

import customtkinter as ctk
from loguru import logger

from ..core.branding import COMMUNICATION_TYPES
from ..core.config import get_settings
from ..core.exceptions import CRMError
from ..database.crm_store import CRMStore
from ..database.models import Communication, Customer, TaskPriority
from ..services import forms
from ..tasks import TaskManager


class FormDialog(ctk.CTkToplevel):
    """Base modal dialog with labelled form rows and Save/Cancel buttons."""

    def __init__(self, parent, title: str, geometry: str = "500x420"):
        super().__init__(parent)
        self.title(title)
        self.geometry(geometry)
        self.transient(parent)  # Keep window on top of the main app
        self.grab_set()

        self.main_frame = ctk.CTkFrame(self)
        self.main_frame.pack(fill="both", expand=True, padx=20, pady=20)

        ctk.CTkLabel(
            self.main_frame,
            text=title,
            font=ctk.CTkFont(size=18, weight="bold")
        ).pack(pady=(0, 15))

    def add_row(self, label: str, widget_factory: Callable):
        row = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        row.pack(fill="x", pady=5)
        ctk.CTkLabel(row, text=label, width=110, anchor="w").pack(side="left")
        widget = widget_factory(row)
        widget.pack(side="left", expand=True, fill="x")
        return widget

    def add_entry(self, label: str, value: str = "", placeholder: str = "") -> ctk.CTkEntry:
        entry = self.add_row(label, lambda row: ctk.CTkEntry(row, width=320, placeholder_text=placeholder))
        if value:
            entry.insert(0, value)
        return entry

    def add_option(self, label: str, values: List[str], value: Optional[str] = None) -> ctk.CTkOptionMenu:
        menu = self.add_row(label, lambda row: ctk.CTkOptionMenu(row, values=values))
        menu.set(value if value in values else values[0])
        return menu

    def add_textbox(self, label: str, value: str = "", height: int = 90) -> ctk.CTkTextbox:
        textbox = self.add_row(label, lambda row: ctk.CTkTextbox(row, height=height))
        if value:
            textbox.insert("0.0", value)
        return textbox

    def add_buttons(self, save_text: str = "Save"):
        button_frame = ctk.CTkFrame(self.main_frame, fg_color="transparent")
        button_frame.pack(pady=(15, 0))

        ctk.CTkButton(button_frame, text=save_text, command=self.on_save).pack(side="left", padx=10)
        ctk.CTkButton(
            button_frame,
            text="Cancel",
            command=self.destroy,
            fg_color="gray"
        ).pack(side="left", padx=10)

    def on_save(self):
        """Run ``save`` and close, showing validation errors in place."""
        try:
            self.save()
        except CRMError as e:
            logger.warning(f"{self.title()}: {e.message}")
            messagebox.showerror("Error", e.message, parent=self)
            return
        self.destroy()

    def save(self):  # override
        pass

    @staticmethod
    def text_of(textbox: ctk.CTkTextbox) -> str:
        return textbox.get("0.0", "end").strip()


class CustomerDialog(FormDialog):
    """Add a new customer, or update an existing one."""

    def __init__(self, parent, store: CRMStore, customer: Optional[Customer] = None):
        self.store = store
        self.customer = customer
        super().__init__(parent, "Update Customer" if customer else "Add Customer")

        roles = get_settings().customer_roles
        current = customer or Customer(role=roles[0])
        self.name_entry = self.add_entry("Name:", current.name)
        self.email_entry = self.add_entry("Email:", current.email)
        self.phone_entry = self.add_entry("Phone:", current.phone)
        self.role_menu = self.add_option("Role:", roles, current.role)
        self.notes_text = self.add_textbox("Notes:", current.notes)
        self.add_buttons("Update" if customer else "Add")

    def save(self):
        values = dict(
            name=self.name_entry.get(),
            email=self.email_entry.get(),
            phone=self.phone_entry.get(),
            role=self.role_menu.get(),
            notes=self.text_of(self.notes_text)
        )
        if self.customer is None:
            customer = forms.build_customer(**values)
            self.store.add_customer(customer)
            logger.info(f"Added customer {customer.name}")
        else:
            forms.apply_customer_update(self.customer, **values)
            self.store.update_customer(self.customer)
            logger.info(f"Updated customer {self.customer.name}")


class CustomerChoiceMixin:
    """Customer dropdown whose labels map back to customers."""

    def customer_choices(self, store: CRMStore):
        self._customers_by_label = {}
        for customer in sorted(store.get_all_customers(), key=lambda c: c.name.lower()):
            label = f"{customer.name} <{customer.email}>"
            self._customers_by_label[label] = customer
        return list(self._customers_by_label) or [""]

    def chosen_customer(self, menu: ctk.CTkOptionMenu) -> Optional[Customer]:
        return self._customers_by_label.get(menu.get())

    @staticmethod
    def label_for(customer: Optional[Customer]) -> Optional[str]:
        return f"{customer.name} <{customer.email}>" if customer else None


class CommunicationDialog(CustomerChoiceMixin, FormDialog):
    """Log a communication with a customer."""

    def __init__(self, parent, store: CRMStore, customer: Optional[Customer] = None):
        self.store = store
        super().__init__(parent, "Log Communication", "520x440")

        self.customer_menu = self.add_option("Customer:", self.customer_choices(store), self.label_for(customer))
        self.type_menu = self.add_option("Type:", COMMUNICATION_TYPES)
        self.notes_text = self.add_textbox("Notes:")
        self.tags_entry = self.add_entry("Tags:", placeholder="comma, separated, tags")
        self.add_buttons("Log")

    def save(self):
        communication = forms.build_communication(
            self.chosen_customer(self.customer_menu),
            self.type_menu.get(),
            self.text_of(self.notes_text),
            self.tags_entry.get()
        )
        self.store.add_communication(communication)
        logger.info(f"Logged {communication.type} communication for customer {communication.customer_id}")


class TagsDialog(FormDialog):
    """Add tags to an existing communication."""

    def __init__(self, parent, store: CRMStore, communication: Communication):
        self.store = store
        self.communication = communication
        super().__init__(parent, "Add Tags", "460x240")

        current = ", ".join(communication.tags) or "none"
        ctk.CTkLabel(self.main_frame, text=f"Current tags: {current}", text_color="gray").pack(anchor="w")
        self.tags_entry = self.add_entry("New tags:", placeholder="comma, separated, tags")
        self.add_buttons("Add")

    def save(self):
        tags = forms.parse_tags(self.tags_entry.get())
        if not tags:
            raise CRMError("VALIDATION_ERROR", "Please enter at least one tag.")
        for tag in tags:
            self.communication.add_tag(tag)
        self.store.update_communication(self.communication)


class TaskDialog(CustomerChoiceMixin, FormDialog):
    """Create a task for a customer."""

    def __init__(self, parent, task_manager: TaskManager, customer: Optional[Customer] = None):
        self.task_manager = task_manager
        super().__init__(parent, "Add Task", "520x360")

        default_due = (datetime.now() + timedelta(days=1)).replace(second=0, microsecond=0)
        self.customer_menu = self.add_option(
            "Customer:", self.customer_choices(task_manager.store), self.label_for(customer)
        )
        self.description_entry = self.add_entry("Description:")
        self.due_entry = self.add_entry(
            "Due Date:", default_due.strftime(forms.DUE_DATE_FORMAT), placeholder="YYYY-MM-DD HH:MM"
        )
        self.priority_menu = self.add_option(
            "Priority:", [p.value for p in TaskPriority], TaskPriority.MEDIUM.value
        )
        self.add_buttons("Add")

    def save(self):
        task = forms.build_task(
            self.chosen_customer(self.customer_menu),
            self.description_entry.get(),
            self.due_entry.get(),
            self.priority_menu.get(),
            get_settings().date_format
        )
        self.task_manager.add_task(task)
