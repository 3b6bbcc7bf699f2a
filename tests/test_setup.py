# tests/test_setup.py

import importlib

import pytest


@pytest.mark.parametrize("module", [
    "crm.core.config",
    "crm.database",
    "crm.tasks",
    "crm.services.forms",
    "crm.services.filters",
    "crm.services.reporting",
    "crm.services.export",
])
def test_core_modules_import(module) -> None:
    assert importlib.import_module(module)


@pytest.mark.parametrize("module", [
    "crm.gui.main_app",
    "crm.gui.customer_panel",
    "crm.gui.communication_panel",
    "crm.gui.task_panel",
    "crm.gui.reporting_panel",
    "crm.gui.reminder_dialog",
    "crm.gui.settings_window",
])
def test_gui_modules_import(module) -> None:
    pytest.importorskip("tkinter")
    pytest.importorskip("customtkinter")
    assert importlib.import_module(module)


def test_main_check_requirements() -> None:
    pytest.importorskip("customtkinter")
    import main

    assert main.check_requirements() is True
