"""
Main GUI application for the Customer Relations Manager using CustomTkinter.
Hosts the customer, communication, task and reporting tabs and shows task reminders.
"""

from tkinter import messagebox

import customtkinter as ctk
from loguru import logger

from ..core.branding import APP_TITLE, TAB_NAMES
from ..core.config import get_settings
from ..database.crm_store import get_crm_store
from ..database.sample_data import load_sample_data
from ..tasks import ReminderSystem, TaskManager, TaskNotification
from .communication_panel import CommunicationPanel
from .customer_panel import CustomerPanel
from .reporting_panel import ReportingPanel
from .settings_window import SettingsWindow
from .task_panel import TaskPanel


class CRMApp:
    """Main application window for the Customer Relations Manager."""

    def __init__(self):
        """Wire the store, reminder poller and task manager, then build the window."""
        self.settings = get_settings()
        self.setup_logging()

        self.store = get_crm_store()
        self.reminder_system = ReminderSystem(self.store, self.settings.reminder_check_interval)
        self.task_manager = TaskManager(self.store, self.reminder_system)

        if self.settings.load_sample_data and not self.store.get_all_customers():
            load_sample_data(self.store)

        self.setup_gui()

        # Reminders are raised on the timer thread and shown on the Tk thread
        self.reminder_system.set_notification_handler(
            lambda notification: self.root.after(0, lambda: self.show_notification(notification))
        )
        self.reminder_system.start()

    def setup_logging(self):
        """Add the rotating file sink next to loguru's stderr sink."""
        logger.add(
            self.settings.log_file,
            level=self.settings.log_level,
            rotation="10 MB",
            retention="30 days",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"
        )
        logger.info(f"{APP_TITLE} {self.settings.app_version} | Starting...")

    def setup_gui(self):
        ctk.set_appearance_mode(self.settings.theme)
        ctk.set_default_color_theme(self.settings.color_theme)

        self.root = ctk.CTk()
        self.root.title(APP_TITLE)
        self.root.geometry(f"{self.settings.window_width}x{self.settings.window_height}")
        self.root.minsize(900, 600)
        self.root.protocol("WM_DELETE_WINDOW", self.on_closing)

        container = ctk.CTkFrame(self.root)
        container.pack(fill="both", expand=True, padx=10, pady=10)

        self.build_title_bar(container)
        self.build_tabs(container)

        self.status_label = ctk.CTkLabel(container, text="Ready.", anchor="w", font=ctk.CTkFont(size=11))
        self.status_label.pack(fill="x", padx=20, pady=(0, 8))

    def build_title_bar(self, container):
        bar = ctk.CTkFrame(container, fg_color="transparent")
        bar.pack(fill="x", padx=10, pady=(10, 0))

        ctk.CTkLabel(bar, text=APP_TITLE, font=ctk.CTkFont(size=22, weight="bold")).pack(side="left", padx=10)

        for text, command in (("Settings", self.open_settings),
                              ("Check Reminders", self.check_reminders_now)):
            ctk.CTkButton(bar, text=text, command=command, width=120).pack(side="right", padx=5)

    def build_tabs(self, container):
        """One tab per panel; each panel refreshes itself from store events."""
        self.tabview = ctk.CTkTabview(container)
        self.tabview.pack(fill="both", expand=True, padx=10, pady=5)

        panels = (
            ("customers", CustomerPanel, self.store),
            ("communications", CommunicationPanel, self.store),
            ("tasks", TaskPanel, self.task_manager),
            ("reporting", ReportingPanel, self.store),
        )
        self.panels = {}
        for key, panel_class, source in panels:
            panel = panel_class(self.tabview.add(TAB_NAMES[key]), source, fg_color="transparent")
            panel.pack(fill="both", expand=True)
            self.panels[key] = panel

    def show_notification(self, notification: TaskNotification):
        """Show a reminder or overdue alert to the user."""
        self.update_status(f"{notification.title}: {notification.task.description}")
        if notification.is_overdue:
            messagebox.showwarning(notification.title, notification.message, parent=self.root)
        else:
            messagebox.showinfo(notification.title, notification.message, parent=self.root)

    def check_reminders_now(self):
        fired = self.reminder_system.check_pending_tasks()
        if not fired:
            self.update_status("No new reminders.")

    def open_settings(self):
        window = getattr(self, 'settings_window', None)
        if window is not None and window.winfo_exists():
            window.focus()
            return
        self.settings_window = SettingsWindow(self.root, self.store, self.reminder_system)

    def update_status(self, message: str):
        self.status_label.configure(text=message)
        logger.info(f"Status: {message}")

    def on_closing(self):
        logger.info(f"{APP_TITLE} closing")
        self.reminder_system.stop()
        self.root.destroy()

    def run(self):
        self.root.mainloop()


def main():
    CRMApp().run()


if __name__ == "__main__":
    main()
