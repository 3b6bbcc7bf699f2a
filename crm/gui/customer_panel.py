"""
Customer management panel: filterable customer table with add, update and delete.
"""

from tkinter import messagebox

import customtkinter as ctk
from loguru import logger

from ..core.branding import ALL_CUSTOMERS, WARNING_COLOR
from ..core.config import get_settings
from ..database.crm_store import CRMStore, EventType
from ..services.export import CUSTOMER_HEADERS, customer_rows
from ..services.filters import customer_filter_options, filter_customers
from .dialogs import CustomerDialog
from .table_panel import TablePanel


class CustomerPanel(TablePanel):
    """Customer management tab."""

    columns = [("Name", 180), ("Email", 220), ("Phone", 130), ("Role", 100),
               ("Communications", 120), ("Open Tasks", 90)]

    def __init__(self, parent, store: CRMStore, **kwargs):
        self.store = store
        super().__init__(parent, **kwargs)

        self.setup_toolbar()
        self.setup_actions()

        for event_type in (EventType.CUSTOMER_ADDED, EventType.CUSTOMER_UPDATED,
                           EventType.CUSTOMER_DELETED, EventType.COMMUNICATION_ADDED,
                           EventType.TASK_ADDED, EventType.TASK_UPDATED):
            self.store.register_observer(event_type, self.schedule_refresh)

        self.tree.bind("<Double-1>", lambda e: self.update_customer())
        self.refresh()

    def setup_toolbar(self):
        ctk.CTkLabel(self.toolbar, text="Filter:").pack(side="left", padx=(10, 5))
        self.filter_menu = ctk.CTkOptionMenu(
            self.toolbar,
            values=customer_filter_options(get_settings().customer_roles),
            command=lambda _: self.refresh(),
            width=180
        )
        self.filter_menu.set(ALL_CUSTOMERS)
        self.filter_menu.pack(side="left", padx=5, pady=5)

        ctk.CTkLabel(self.toolbar, text="Search:").pack(side="left", padx=(15, 5))
        self.search_entry = ctk.CTkEntry(
            self.toolbar,
            placeholder_text="Name, email, role or notes",
            width=260
        )
        self.search_entry.pack(side="left", padx=5, pady=5)
        self.search_entry.bind("<KeyRelease>", lambda e: self.refresh())

        self.count_label = ctk.CTkLabel(self.toolbar, text="", text_color="gray")
        self.count_label.pack(side="right", padx=10)

    def setup_actions(self):
        self.add_action("Add Customer", self.add_customer)
        self.add_action("Update Customer", self.update_customer)
        self.add_action("Delete Customer", self.delete_customer, fg_color=WARNING_COLOR)
        self.add_action("Export CSV", self.export_customers, width=100)

    def refresh(self):
        """Reload the table with the current filter and search text."""
        try:
            customers = filter_customers(self.store, self.filter_menu.get(), self.search_entry.get())
        except Exception as e:
            logger.error(f"Error refreshing customers: {e}")
            messagebox.showerror("Error", f"Failed to refresh customers: {str(e)}")
            return

        self.clear_tree()
        for customer in sorted(customers, key=lambda c: c.name.lower()):
            open_tasks = len([t for t in self.store.get_customer_tasks(customer.id) if not t.completed])
            self.insert_row(customer.id, (
                customer.name,
                customer.email,
                customer.phone,
                customer.role,
                len(self.store.get_customer_communications(customer.id)),
                open_tasks
            ))
        self.count_label.configure(text=f"{len(customers)} customers")

    def selected_customer(self):
        customer_id = self.selected_id()
        if customer_id is None:
            messagebox.showinfo("Info", "Please select a customer first.")
            return None
        return self.store.get_customer(customer_id)

    def add_customer(self):
        CustomerDialog(self.winfo_toplevel(), self.store)

    def update_customer(self):
        customer = self.selected_customer()
        if customer is not None:
            CustomerDialog(self.winfo_toplevel(), self.store, customer)

    def delete_customer(self):
        customer = self.selected_customer()
        if customer is None:
            return

        result = messagebox.askyesno(
            "Confirm",
            f"Delete {customer.name} together with their communications and tasks?"
        )
        if result and not self.store.delete_customer(customer.id):
            messagebox.showerror("Error", "Failed to delete customer.")

    def export_customers(self):
        self.ask_export_csv(CUSTOMER_HEADERS, customer_rows(self.store), "Export Customers")
