"""
Settings window for reminder configuration.
Lets users toggle notifications and change the reminder check interval.
"""

import os
from tkinter import messagebox

import customtkinter as ctk
from dotenv import find_dotenv, get_key, set_key
from loguru import logger

from ..core.config import get_settings
from ..database.crm_store import CRMStore
from ..tasks import ReminderSystem


class SettingsWindow(ctk.CTkToplevel):
    """A Toplevel window for configuring application settings."""

    def __init__(self, master, store: CRMStore, reminder_system: ReminderSystem, **kwargs):
        super().__init__(master, **kwargs)
        self.store = store
        self.reminder_system = reminder_system

        self.title("Settings - Reminders")
        self.geometry("520x320")
        self.transient(self.master)
        self.grab_set()

        self.setup_ui()
        self.load_settings()

    def setup_ui(self):
        form = ctk.CTkFrame(self)
        form.pack(fill="both", expand=True, padx=20, pady=20)
        form.grid_columnconfigure(1, weight=1)

        ctk.CTkLabel(
            form, text="Reminder Settings", font=ctk.CTkFont(size=18, weight="bold")
        ).grid(row=0, column=0, columnspan=2, pady=(10, 20))

        self.notifications_var = ctk.BooleanVar()
        ctk.CTkCheckBox(
            form, text="Show task reminders and overdue alerts", variable=self.notifications_var
        ).grid(row=1, column=0, columnspan=2, sticky="w", padx=15, pady=5)

        ctk.CTkLabel(form, text="Check every (seconds):").grid(row=2, column=0, sticky="w", padx=15, pady=5)
        self.interval_entry = ctk.CTkEntry(form, width=100)
        self.interval_entry.grid(row=2, column=1, sticky="w", pady=5)

        ctk.CTkLabel(
            form,
            text="Changes apply immediately and are saved to .env.",
            font=ctk.CTkFont(size=11, slant="italic"),
            text_color="gray"
        ).grid(row=3, column=0, columnspan=2, pady=(20, 10))

        buttons = ctk.CTkFrame(form, fg_color="transparent")
        buttons.grid(row=4, column=0, columnspan=2, pady=10)
        ctk.CTkButton(buttons, text="Save and Close", command=self.save_and_close).pack(side="left", padx=10)
        ctk.CTkButton(buttons, text="Cancel", command=self.destroy, fg_color="gray").pack(side="left", padx=10)

    @staticmethod
    def env_path() -> str:
        return find_dotenv(usecwd=True) or os.path.join(os.getcwd(), ".env")

    def load_settings(self):
        """Populate the form from the live store setting and the .env file."""
        self.notifications_var.set(bool(self.store.get_setting("notifications_enabled", True)))

        env_path = find_dotenv(usecwd=True)
        interval = get_key(env_path, "REMINDER_CHECK_INTERVAL") if env_path else None
        self.interval_entry.insert(0, interval or str(self.reminder_system.check_interval))

    def save_settings(self) -> bool:
        """Apply the settings and persist them to the .env file."""
        interval_text = self.interval_entry.get().strip()
        if not interval_text.isdigit() or int(interval_text) <= 0:
            messagebox.showwarning(
                "Invalid Interval",
                "The check interval must be a positive whole number of seconds.",
                parent=self
            )
            return False

        enabled = self.notifications_var.get()
        interval = int(interval_text)

        self.store.update_setting("notifications_enabled", enabled)
        self.reminder_system.set_check_interval(interval)
        settings = get_settings()
        settings.notifications_enabled = enabled
        settings.reminder_check_interval = interval

        env_path = self.env_path()
        try:
            if not os.path.exists(env_path):
                open(env_path, 'a').close()
            set_key(env_path, "NOTIFICATIONS_ENABLED", str(enabled).lower())
            set_key(env_path, "REMINDER_CHECK_INTERVAL", str(interval))
        except OSError as e:
            logger.error(f"Failed to save settings to {env_path}: {e}")
            messagebox.showerror("Error Saving", f"Failed to save settings to .env file:\n{e}", parent=self)
            return False

        logger.info(f"Settings saved: notifications_enabled={enabled}, reminder_check_interval={interval}")
        return True

    def save_and_close(self):
        """Save settings and then close the window."""
        if self.save_settings():
            self.destroy()
