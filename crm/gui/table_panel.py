"""
Base panel with a toolbar and a Treeview table.
"""

import tkinter as tk
from tkinter import ttk, messagebox, filedialog
from typing import Dict, List, Optional, Sequence, Tuple

import customtkinter as ctk
from loguru import logger

from ..services.export import write_csv


class TablePanel(ctk.CTkFrame):
    """A panel showing records in a Treeview, keyed by record id."""

    columns: List[Tuple[str, int]] = []

    def __init__(self, parent, **kwargs):
        super().__init__(parent, **kwargs)

        self.toolbar = ctk.CTkFrame(self)
        self.toolbar.pack(fill="x", padx=10, pady=(10, 5))

        table_frame = ctk.CTkFrame(self)
        table_frame.pack(fill="both", expand=True, padx=10, pady=5)

        # Treeview expects a list of column IDs (strings), not tuples
        col_ids = [c for c, _ in self.columns]
        self.tree = ttk.Treeview(table_frame, columns=col_ids, show="headings", selectmode="browse")

        vsb = ttk.Scrollbar(table_frame, orient="vertical", command=self.tree.yview)
        self.tree.configure(yscrollcommand=vsb.set)
        self.tree.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)
        vsb.pack(side=tk.RIGHT, fill=tk.Y)

        for col, width in self.columns:
            self.tree.heading(col, text=col)
            self.tree.column(col, width=width, anchor=tk.W)

        self.actions = ctk.CTkFrame(self)
        self.actions.pack(fill="x", padx=10, pady=(5, 10))

    def add_action(self, text: str, command, width: int = 130, **kwargs) -> ctk.CTkButton:
        button = ctk.CTkButton(self.actions, text=text, command=command, width=width, **kwargs)
        button.pack(side="left", padx=5, pady=5)
        return button

    def clear_tree(self):
        for iid in self.tree.get_children():
            self.tree.delete(iid)

    def insert_row(self, record_id: str, values: Sequence, tags: Tuple[str, ...] = ()):
        self.tree.insert("", tk.END, iid=record_id, values=list(values), tags=tags)

    def selected_id(self) -> Optional[str]:
        selection = self.tree.selection()
        return selection[0] if selection else None

    def schedule_refresh(self, *_):
        """Refresh on the Tk thread; used as a store observer."""
        self.after(0, self.refresh)

    def refresh(self):  # override
        pass

    def ask_export_csv(self, headers: Sequence[str], rows: List[Dict], title: str = "Export to CSV"):
        path = filedialog.asksaveasfilename(
            defaultextension=".csv", filetypes=[("CSV", "*.csv")], title=title, parent=self
        )
        if not path:
            return
        try:
            count = write_csv(path, headers, rows)
            messagebox.showinfo("Export", f"Exported {count} rows to\n{path}")
        except OSError as e:
            logger.error(f"Error exporting to {path}: {e}")
            messagebox.showerror("Error", f"Failed to export: {str(e)}")
