#!/usr/bin/env python3
"""
Customer Relations Manager launcher.

Checks that the runtime libraries are installed, prepares the data directory
and opens the desktop window. Optional settings (log level, reminder interval,
sample data) are read from a .env file in the working directory.

Usage:
    python main.py
"""

import importlib.util
import sys
from pathlib import Path

from loguru import logger

# import name -> distribution name
REQUIRED_LIBRARIES = {
    "customtkinter": "customtkinter",
    "loguru": "loguru",
    "pydantic": "pydantic",
    "pydantic_settings": "pydantic-settings",
    "dotenv": "python-dotenv",
}


def check_requirements() -> bool:
    """Report any required library that cannot be imported."""
    missing = [dist for module, dist in REQUIRED_LIBRARIES.items()
               if importlib.util.find_spec(module) is None]
    if missing:
        print(f"Missing libraries: {', '.join(missing)}")
        print("Install the project with: pip install -e .")
        return False
    return True


def prepare_data_dir(path: str = "data") -> Path:
    data_dir = Path(path)
    data_dir.mkdir(exist_ok=True)
    if not Path(".env").exists():
        print("No .env file found; running with default settings.")
    return data_dir


def main():
    print("Customer Relations Manager")
    print("-" * 40)

    if not check_requirements():
        sys.exit(1)
    prepare_data_dir()

    from crm.gui.main_app import main as run_app

    try:
        run_app()
    except KeyboardInterrupt:
        print("\nInterrupted.")
    except Exception as e:
        logger.exception(f"Application error: {e}")
        print(f"Error: {e} (see data/crm.log)")
        sys.exit(1)


if __name__ == "__main__":
    main()
