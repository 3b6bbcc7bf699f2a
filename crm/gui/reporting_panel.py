"""
Reporting panel: communication frequency and customer activity summaries.
"""

import tkinter as tk
from tkinter import ttk, messagebox

import customtkinter as ctk
from loguru import logger

from ..core.branding import COMMUNICATION_TYPES, REPORT_PERIODS
from ..database.crm_store import CRMStore, EventType
from ..services.reporting import (
    communication_frequency,
    customer_activity_summaries,
    get_overall_statistics,
)


def _make_tree(parent, columns):
    tree = ttk.Treeview(parent, columns=[c for c, _ in columns], show="headings", height=8)
    for col, width in columns:
        tree.heading(col, text=col)
        tree.column(col, width=width, anchor=tk.W)
    tree.pack(fill="both", expand=True, padx=10, pady=5)
    return tree


class ReportingPanel(ctk.CTkFrame):
    """Reports over the whole store, refreshed on demand."""

    def __init__(self, parent, store: CRMStore, **kwargs):
        super().__init__(parent, **kwargs)
        self.store = store

        self.summary_label = ctk.CTkLabel(self, text="", font=ctk.CTkFont(size=12))
        self.summary_label.pack(anchor="w", padx=15, pady=(10, 5))

        # Communication frequency
        freq_header = ctk.CTkFrame(self, fg_color="transparent")
        freq_header.pack(fill="x", padx=10)
        ctk.CTkLabel(
            freq_header,
            text="Communication Frequency Report",
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(side="left", padx=5)

        self.period_menu = ctk.CTkOptionMenu(
            freq_header,
            values=REPORT_PERIODS,
            command=lambda _: self.refresh(),
            width=110
        )
        self.period_menu.set("Weekly")
        self.period_menu.pack(side="right", padx=5)
        ctk.CTkLabel(freq_header, text="Time Period:").pack(side="right", padx=5)

        self.frequency_tree = _make_tree(
            self,
            [("Period", 160)] + [(t.title(), 90) for t in COMMUNICATION_TYPES] + [("Total", 90)]
        )

        # Customer activity
        ctk.CTkLabel(
            self,
            text="Customer Activity Summary",
            font=ctk.CTkFont(size=14, weight="bold")
        ).pack(anchor="w", padx=15, pady=(10, 0))

        self.activity_tree = _make_tree(self, [
            ("Customer", 200), ("Communications", 120), ("Tasks", 80),
            ("Completed", 90), ("Completion Rate", 120)
        ])

        ctk.CTkButton(self, text="Refresh Report", command=self.refresh, width=130).pack(pady=10)

        for event_type in EventType:
            self.store.register_observer(event_type, lambda _: self.after(0, self.refresh))

        self.refresh()

    def refresh(self):
        """Rebuild every report from the store."""
        try:
            stats = get_overall_statistics(self.store)
            frequency = communication_frequency(self.store, self.period_menu.get())
            summaries = customer_activity_summaries(self.store)
        except Exception as e:
            logger.error(f"Error building reports: {e}")
            messagebox.showerror("Error", f"Failed to build reports: {str(e)}")
            return

        self.summary_label.configure(text=(
            f"Customers: {stats['total_customers']}  |  "
            f"Communications: {stats['total_communications']}  |  "
            f"Tasks: {stats['completed_tasks']}/{stats['total_tasks']} completed "
            f"({stats['completion_rate']}%)"
        ))

        self.frequency_tree.delete(*self.frequency_tree.get_children())
        for label, counts in frequency.items():
            values = [counts[t] for t in COMMUNICATION_TYPES]
            self.frequency_tree.insert("", tk.END, values=[label, *values, sum(values)])

        self.activity_tree.delete(*self.activity_tree.get_children())
        for summary in sorted(summaries, key=lambda s: s.customer_name.lower()):
            self.activity_tree.insert("", tk.END, values=[
                summary.customer_name,
                summary.communication_count,
                summary.task_count,
                summary.completed_task_count,
                f"{summary.completion_rate:.1f}%"
            ])
