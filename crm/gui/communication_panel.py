"""
Communication tracking panel: log communications and filter them by type or tag.
"""

from tkinter import messagebox

import customtkinter as ctk

from ..core.branding import ALL_TYPES
from ..database.crm_store import CRMStore, EventType
from ..services.export import COMMUNICATION_HEADERS, communication_rows
from ..services.filters import communication_type_options, filter_communications
from .dialogs import CommunicationDialog, TagsDialog
from .table_panel import TablePanel


class CommunicationPanel(TablePanel):
    """Communication tracking tab."""

    columns = [("Date", 130), ("Customer", 170), ("Type", 80), ("Notes", 340), ("Tags", 180)]

    def __init__(self, parent, store: CRMStore, **kwargs):
        self.store = store
        self._communications = {}
        super().__init__(parent, **kwargs)

        self.setup_toolbar()
        self.add_action("Log Communication", self.log_communication, width=150)
        self.add_action("Add Tags", self.add_tags)
        self.add_action("Export CSV", self.export_communications, width=100)

        for event_type in (EventType.COMMUNICATION_ADDED, EventType.COMMUNICATION_UPDATED,
                           EventType.CUSTOMER_UPDATED, EventType.CUSTOMER_DELETED):
            self.store.register_observer(event_type, self.schedule_refresh)

        self.refresh()

    def setup_toolbar(self):
        ctk.CTkLabel(self.toolbar, text="Type:").pack(side="left", padx=(10, 5))
        self.type_menu = ctk.CTkOptionMenu(
            self.toolbar,
            values=communication_type_options(),
            command=lambda _: self.refresh(),
            width=120
        )
        self.type_menu.set(ALL_TYPES)
        self.type_menu.pack(side="left", padx=5, pady=5)

        ctk.CTkLabel(self.toolbar, text="Tag:").pack(side="left", padx=(15, 5))
        self.tag_entry = ctk.CTkEntry(self.toolbar, placeholder_text="Filter by tag", width=200)
        self.tag_entry.pack(side="left", padx=5, pady=5)
        self.tag_entry.bind("<KeyRelease>", lambda e: self.refresh())

    def refresh(self):
        communications = filter_communications(self.store, self.type_menu.get(), self.tag_entry.get())
        self._communications = {c.id: c for c in communications}

        self.clear_tree()
        for comm in communications:
            customer = self.store.get_customer(comm.customer_id)
            self.insert_row(comm.id, (
                comm.timestamp.strftime("%Y-%m-%d %H:%M"),
                customer.name if customer else "Unknown",
                comm.type,
                comm.notes.replace("\n", " "),
                ", ".join(comm.tags)
            ))

    def log_communication(self):
        if not self.store.get_all_customers():
            messagebox.showinfo("Info", "Add a customer before logging communications.")
            return
        CommunicationDialog(self.winfo_toplevel(), self.store)

    def add_tags(self):
        communication = self._communications.get(self.selected_id())
        if communication is None:
            messagebox.showinfo("Info", "Please select a communication first.")
            return
        TagsDialog(self.winfo_toplevel(), self.store, communication)

    def export_communications(self):
        self.ask_export_csv(COMMUNICATION_HEADERS, communication_rows(self.store), "Export Communications")
