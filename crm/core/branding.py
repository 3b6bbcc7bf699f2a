"""
Branding and application identity constants for the Customer Relations Manager.
"""

# Application Identity
APP_TITLE = "Customer Relations Manager"

# Colors
WARNING_COLOR = "#DC3545"  # Red

PRIORITY_COLORS = {
    "LOW": "green",
    "MEDIUM": "orange",
    "HIGH": "red"
}

ESCALATION_COLORS = {
    "low": "green",
    "medium": "orange",
    "high": "red",
    "critical": "dark red"
}

# Tab Names
TAB_NAMES = {
    "customers": "Customer Management",
    "communications": "Communication Tracking",
    "tasks": "Task Management",
    "reporting": "Reporting"
}

# Domain vocabulary shown in dropdowns
COMMUNICATION_TYPES = ["phone", "email", "meeting"]
ALL_TYPES = "All Types"
ALL_ROLES = "All Roles"
ALL_CUSTOMERS = "All Customers"
REPORT_PERIODS = ["Daily", "Weekly", "Monthly"]
